"""
AI Insights API Endpoint

Returns a schema-valid insights payload for every AI outcome; only a missing
AI configuration is reported as an error (503).
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from bizmanage.config import get_settings
from bizmanage.database.repository import Storage
from bizmanage.insights.client import CompletionClient
from bizmanage.insights.schemas import InsightRequest, InsightsResponse
from bizmanage.insights.service import InsightService
from bizmanage.serving.api.dependencies import get_insight_client, get_storage

router = APIRouter()


@router.post("", response_model=InsightsResponse, response_model_exclude_none=True)
async def generate_insights(
    body: InsightRequest,
    storage: Storage = Depends(get_storage),
    client: CompletionClient = Depends(get_insight_client),
) -> Dict[str, Any]:
    """Generate insights and recommendations for one business domain."""
    service = InsightService(storage, client, get_settings().inventory)
    return await service.generate(body.data_type, body.timespan)
