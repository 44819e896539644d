"""
Insight Request Builder

Renders aggregated metrics into the system instruction and user prompt sent
to the completion API. Pure string templating; no I/O.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from bizmanage.insights.metrics import (
    CustomerMetrics,
    InventoryMetrics,
    OverallMetrics,
    SalesMetrics,
    metrics_to_dict,
)

RESPONSE_SCHEMA = """{
  "insights": [
    {
      "title": "string",
      "description": "string",
      "type": "positive|negative|neutral|opportunity",
      "metrics": [
        {
          "name": "string",
          "value": "string or number",
          "change": "string or number (optional)",
          "trend": "up|down|stable (optional)"
        }
      ],
      "tags": ["tag1", "tag2"]
    }
  ],
  "recommendations": [
    {
      "title": "string",
      "description": "string",
      "priority": "low|medium|high",
      "potentialImpact": "string",
      "implementation": "string",
      "tags": ["tag1", "tag2"]
    }
  ],
  "summary": "string",
  "analysisDate": "ISO string of current date"
}"""

SYSTEM_PROMPTS: Dict[str, str] = {
    "sales": "You are a business analytics AI specializing in sales data analysis.",
    "inventory": "You are a business analytics AI specializing in inventory management analysis.",
    "customers": "You are a business analytics AI specializing in customer relationship management.",
    "overall": (
        "You are a business analytics AI specializing in holistic business analysis "
        "across multiple departments."
    ),
}

SYSTEM_SUFFIX = (
    " You provide clear, actionable insights and recommendations based on business data."
    " Always format your response as valid JSON exactly matching the specified structure."
)

# (subject of the analysis, extra ask appended to the insight request, health summary topic)
DOMAIN_WORDING: Dict[str, Tuple[str, str, str]] = {
    "sales": ("business sales data", "", "overall business health"),
    "inventory": ("business inventory data", "", "overall inventory health"),
    "customers": (
        "business customer data",
        "for improving customer relationships and engagement",
        "overall customer health",
    ),
    "overall": (
        "overall business data",
        "that take a holistic view of the business operations",
        "overall business health",
    ),
}


@dataclass(frozen=True)
class InsightPrompt:
    system: str
    user: str


def money(value: float) -> str:
    return f"${value:.2f}"


def percent(value: float) -> str:
    return f"{value:.2f}%"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _camel_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(key): _camel_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_camel_keys(item) for item in value]
    return value


def metrics_payload(data_type: str, metrics: Any, timespan: str) -> Dict[str, Any]:
    """
    The data summary stated in the prompt, keyed the way it is rendered.

    Money values are pre-formatted strings ("$0.00"); ranked lists keep their
    raw numbers.
    """
    if isinstance(metrics, SalesMetrics):
        return {
            "timespan": timespan,
            "totalOrders": metrics.total_orders,
            "totalRevenue": money(metrics.total_revenue),
            "averageOrderValue": money(metrics.average_order_value),
            "topSellingProducts": _camel_keys(metrics_to_dict(metrics)["top_selling_products"]),
            "customerRetentionRate": percent(metrics.customer_retention_rate),
        }
    if isinstance(metrics, InventoryMetrics):
        return {
            "timespan": timespan,
            "totalProducts": metrics.total_products,
            "lowStockItems": metrics.low_stock_items,
            "stockOutRisk": _camel_keys(metrics_to_dict(metrics)["stock_out_risk"]),
        }
    if isinstance(metrics, CustomerMetrics):
        return {
            "timespan": timespan,
            "totalCustomers": metrics.total_customers,
            "activeCustomers": metrics.active_customers,
            "customerEngagementRate": percent(metrics.engagement_rate),
            "averageCustomerSpend": money(metrics.average_customer_spend),
            "topCustomers": _camel_keys(metrics_to_dict(metrics)["top_customers"]),
        }
    if isinstance(metrics, OverallMetrics):
        return {
            "timespan": timespan,
            "totalOrders": metrics.total_orders,
            "totalRevenue": money(metrics.total_revenue),
            "averageOrderValue": money(metrics.average_order_value),
            "totalCustomers": metrics.total_customers,
            "totalProducts": metrics.total_products,
            "lowStockItems": metrics.low_stock_items,
            "totalSuppliers": metrics.total_suppliers,
            "totalBranches": metrics.total_branches,
        }
    raise ValueError(f"Unsupported metrics for {data_type!r}: {type(metrics).__name__}")


LABELS: Dict[str, str] = {
    "timespan": "Timespan",
    "totalOrders": "Total Orders",
    "totalRevenue": "Total Revenue",
    "averageOrderValue": "Average Order Value",
    "topSellingProducts": "Top Selling Products",
    "customerRetentionRate": "Customer Retention Rate",
    "totalProducts": "Total Products",
    "lowStockItems": "Low Stock Items",
    "stockOutRisk": "Stock Out Risk Items",
    "totalCustomers": "Total Customers",
    "activeCustomers": "Active Customers",
    "customerEngagementRate": "Customer Engagement Rate",
    "averageCustomerSpend": "Average Customer Spend",
    "topCustomers": "Top Customers",
    "totalSuppliers": "Total Suppliers",
    "totalBranches": "Total Branches",
}


def _summary_lines(payload: Dict[str, Any]) -> List[str]:
    lines = []
    for key, value in payload.items():
        rendered = json.dumps(value) if isinstance(value, (list, dict)) else value
        lines.append(f"- {LABELS.get(key, key)}: {rendered}")
    return lines


def build_insight_prompt(data_type: str, metrics: Any, timespan: str) -> InsightPrompt:
    """
    Render the system instruction and user prompt for one insight domain.

    Raises:
        ValueError: For an unknown data type or mismatched metrics object
    """
    if data_type not in SYSTEM_PROMPTS:
        raise ValueError(f"Unknown insight data type: {data_type!r}")

    subject, focus, health_topic = DOMAIN_WORDING[data_type]
    payload = metrics_payload(data_type, metrics, timespan)
    ask = "Based on this data, please identify 3-5 key business insights and 2-3 actionable recommendations"
    if focus:
        ask = f"{ask}\n{focus}"

    sections = [
        f"I need you to analyze {subject} and provide insights and recommendations.",
        "Data Summary:\n" + "\n".join(_summary_lines(payload)),
        f"{ask}.",
        "For each insight, include:\n"
        "- A brief title\n"
        "- A detailed description with supporting data\n"
        "- The type (positive, negative, neutral, or opportunity)\n"
        "- Any key metrics or data points",
        "For each recommendation, include:\n"
        "- A brief title\n"
        "- A detailed description\n"
        "- Priority level (low, medium, or high)\n"
        "- Potential business impact\n"
        "- Implementation guidance",
        f"Also provide a brief summary of the {health_topic}.",
        "Format your response as a JSON object with the following structure:\n" + RESPONSE_SCHEMA,
    ]

    return InsightPrompt(
        system=SYSTEM_PROMPTS[data_type] + SYSTEM_SUFFIX,
        user="\n\n".join(sections),
    )
