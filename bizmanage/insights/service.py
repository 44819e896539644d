"""
Insight Service

Orchestrates one insight request: snapshot the store, aggregate, build the
prompt, call the AI client and parse its answer. Store errors propagate to
the caller; AI and parse failures are logged and replaced by the fallback
payload.
"""

from typing import Any, Dict, Optional

import structlog

from bizmanage.config.settings import InventorySettings
from bizmanage.database.repository import Storage
from bizmanage.insights.client import AI_TRANSPORT_ERROR, CompletionClient
from bizmanage.insights.metrics import (
    order_window,
    summarize_customers,
    summarize_inventory,
    summarize_overall,
    summarize_sales,
)
from bizmanage.insights.parser import InsightParseError, fallback_insights, parse_insights
from bizmanage.insights.prompts import build_insight_prompt

logger = structlog.get_logger(__name__)


class InsightService:
    """
    Generates AI business insights for one data domain at a time.

    Example:
        service = InsightService(Storage(db), client)
        payload = await service.generate("sales", "month")
    """

    def __init__(
        self,
        storage: Storage,
        client: CompletionClient,
        inventory_settings: Optional[InventorySettings] = None,
    ):
        self.storage = storage
        self.client = client
        self.low_stock_threshold = (inventory_settings or InventorySettings()).insights_low_stock_threshold

    async def collect_metrics(self, data_type: str, timespan: str) -> Any:
        """
        Fetch the snapshot for `data_type` and aggregate it.

        Raises:
            ValueError: For an unknown data type
        """
        if data_type == "sales":
            orders = await self.storage.list_recent_orders(order_window(timespan))
            items = await self.storage.list_order_items_for_orders([order.id for order in orders])
            products = await self.storage.list_products()
            return summarize_sales(orders, items, products)

        if data_type == "inventory":
            products = await self.storage.list_products()
            low_stock_rows = await self.storage.list_low_stock_items(self.low_stock_threshold)
            branches = await self.storage.list_branches()
            return summarize_inventory(products, low_stock_rows, branches, self.low_stock_threshold)

        if data_type == "customers":
            customers = await self.storage.list_customers()
            orders = await self.storage.list_recent_orders(order_window(timespan))
            return summarize_customers(customers, orders)

        if data_type == "overall":
            return summarize_overall(
                orders=await self.storage.list_recent_orders(order_window(timespan)),
                customers=await self.storage.list_customers(),
                products=await self.storage.list_products(),
                low_stock_items=await self.storage.list_low_stock_items(self.low_stock_threshold),
                suppliers=await self.storage.list_suppliers(),
                branches=await self.storage.list_branches(),
            )

        raise ValueError(f"Unknown insight data type: {data_type!r}")

    async def generate(self, data_type: str, timespan: str) -> Dict[str, Any]:
        """
        Produce an insights payload for `data_type` over `timespan`.

        Always returns a schema-valid object unless the store itself fails.
        """
        log = logger.bind(data_type=data_type, timespan=timespan)
        metrics = await self.collect_metrics(data_type, timespan)
        prompt = build_insight_prompt(data_type, metrics, timespan)

        try:
            result = await self.client.complete(prompt.system, prompt.user)
        except Exception:
            log.exception("AI client raised", code=AI_TRANSPORT_ERROR)
            return fallback_insights()

        if not result.ok:
            log.warning("AI completion failed", code=result.code, reason=result.reason)
            return fallback_insights()

        try:
            payload = parse_insights(result.text)
        except InsightParseError as e:
            log.warning("AI response rejected", code=e.code, reason=e.message, details=e.details)
            return fallback_insights()

        log.info(
            "Insights generated",
            insights=len(payload.get("insights", [])),
            recommendations=len(payload.get("recommendations", [])),
        )
        return payload
