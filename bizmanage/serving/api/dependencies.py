"""
Shared FastAPI dependencies.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from bizmanage.config import get_settings
from bizmanage.database.connection import get_db_dependency
from bizmanage.database.repository import Storage
from bizmanage.insights.client import AnthropicInsightClient, CompletionClient


async def get_storage(db: AsyncSession = Depends(get_db_dependency)) -> Storage:
    return Storage(db)


async def get_current_user_id(x_user_id: Optional[int] = Header(default=None)) -> Optional[int]:
    """Acting user for activity logs, from the optional `X-User-ID` header."""
    return x_user_id


@lru_cache()
def _insight_client() -> AnthropicInsightClient:
    return AnthropicInsightClient(get_settings().ai)


def get_insight_client() -> CompletionClient:
    """
    Process-wide AI client.

    Raises:
        AIConfigurationError: If no API key is configured
    """
    return _insight_client()
