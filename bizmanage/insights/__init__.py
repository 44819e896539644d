"""
AI business insights: metrics aggregation, prompt building, AI client,
response parsing and the service that ties them together.
"""

from bizmanage.insights.client import AIResult, AnthropicInsightClient, CompletionClient
from bizmanage.insights.parser import fallback_insights, parse_insights
from bizmanage.insights.service import InsightService

__all__ = [
    "AIResult",
    "AnthropicInsightClient",
    "CompletionClient",
    "InsightService",
    "fallback_insights",
    "parse_insights",
]
