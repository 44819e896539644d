"""
AI Response Parser

Locates the JSON object in a free-text completion and checks it against the
insights schema. Anything that cannot be parsed becomes an
`InsightParseError`; callers substitute `fallback_insights()`.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from bizmanage.exceptions import BizManageError
from bizmanage.insights.schemas import InsightsResponse

AI_FORMAT_ERROR = "AI_FORMAT_ERROR"
AI_SCHEMA_ERROR = "AI_SCHEMA_ERROR"

FALLBACK_TITLE = "Error Generating Insights"
FALLBACK_DESCRIPTION = "There was an error processing your data. Please try again later."
FALLBACK_SUMMARY = "Unable to analyze data at this time."

_FENCED_JSON = re.compile(r"```(?:json)?[ \t]*\r?\n?(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)


class InsightParseError(BizManageError):
    """The completion did not contain a schema-conforming insights object."""

    default_message = "Could not parse insights from AI response"


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision, e.g. 2025-01-01T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _first_braced_span(text: str) -> Optional[str]:
    """
    First balanced `{...}` span, ignoring braces inside JSON strings.

    Returns None when no opening brace exists or it is never closed.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def extract_json(text: str) -> Optional[str]:
    """
    Find the JSON object text inside an AI completion.

    A fenced code block is preferred; otherwise the first balanced brace span.
    """
    if not text:
        return None
    match = _FENCED_JSON.search(text)
    if match:
        return match.group(1)
    return _first_braced_span(text)


def parse_insights(text: str) -> Dict[str, Any]:
    """
    Decode and validate the insights object in `text`.

    Returns the decoded object unchanged once it validates.

    Raises:
        InsightParseError: code AI_FORMAT_ERROR when no valid JSON object is
            found, AI_SCHEMA_ERROR when it does not match the schema
    """
    raw = extract_json(text)
    if raw is None:
        raise InsightParseError("No JSON object found in AI response", code=AI_FORMAT_ERROR)

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InsightParseError(
            "Malformed JSON in AI response",
            code=AI_FORMAT_ERROR,
            details={"error": str(e)},
        ) from e

    if not isinstance(payload, dict):
        raise InsightParseError("AI response JSON is not an object", code=AI_SCHEMA_ERROR)

    try:
        InsightsResponse.model_validate(payload)
    except ValidationError as e:
        raise InsightParseError(
            "AI response does not match the insights schema",
            code=AI_SCHEMA_ERROR,
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e

    return payload


def fallback_insights() -> Dict[str, Any]:
    """The fixed payload returned whenever insight generation fails."""
    return {
        "insights": [
            {
                "title": FALLBACK_TITLE,
                "description": FALLBACK_DESCRIPTION,
                "type": "neutral",
            }
        ],
        "recommendations": [],
        "summary": FALLBACK_SUMMARY,
        "analysisDate": utc_timestamp(),
    }
