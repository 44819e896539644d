"""
Insight Response Schema

Shape the AI completion must conform to, and the body returned by
`POST /api/insights`. Field names on the wire are camelCase.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

InsightDataType = Literal["sales", "inventory", "customers", "overall"]
Timespan = Literal["day", "week", "month", "quarter", "year"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InsightMetric(CamelModel):
    name: str
    value: Union[str, float, int]
    change: Optional[Union[str, float, int]] = None
    trend: Optional[Literal["up", "down", "stable"]] = None


class BusinessInsight(CamelModel):
    title: str
    description: str
    type: Literal["positive", "negative", "neutral", "opportunity"]
    metrics: Optional[List[InsightMetric]] = None
    tags: Optional[List[str]] = None


class BusinessRecommendation(CamelModel):
    title: str
    description: str
    priority: Literal["low", "medium", "high"]
    potential_impact: str
    implementation: str
    tags: Optional[List[str]] = None


class InsightsResponse(CamelModel):
    """Insights payload, whether generated or the fallback"""
    insights: List[BusinessInsight]
    recommendations: List[BusinessRecommendation]
    summary: str
    analysis_date: str


class InsightRequest(CamelModel):
    """Body of `POST /api/insights`"""
    data_type: InsightDataType
    timespan: Timespan
    custom_filters: Optional[Dict[str, Any]] = Field(default=None)
