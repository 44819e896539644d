"""
External AI Client

Sends one system instruction and one user prompt to a hosted LLM and returns
the text of the completion. Failures come back as `AIResult.failure(...)`
values rather than exceptions so the insight service can fall back cleanly.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import anthropic
import structlog

from bizmanage.config.settings import AISettings
from bizmanage.exceptions import AIConfigurationError

logger = structlog.get_logger(__name__)

AI_TRANSPORT_ERROR = "AI_TRANSPORT_ERROR"
AI_EMPTY_RESPONSE = "AI_EMPTY_RESPONSE"


@dataclass(frozen=True)
class AIResult:
    """Outcome of a completion call: the text, or a failure code and reason."""
    ok: bool
    text: str = ""
    code: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "AIResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, code: str, reason: str) -> "AIResult":
        return cls(ok=False, code=code, reason=reason)


class CompletionClient(Protocol):
    """Anything that can turn a (system, prompt) pair into completion text."""

    async def complete(self, system: str, prompt: str) -> AIResult:
        ...


class AnthropicInsightClient:
    """
    Completion client backed by the Anthropic Messages API.

    Args:
        settings: AI section of the application settings

    Raises:
        AIConfigurationError: If no API key is configured
    """

    def __init__(self, settings: AISettings):
        if not settings.is_configured:
            raise AIConfigurationError(
                "ANTHROPIC_API_KEY is not set",
                code="AI_NOT_CONFIGURED",
            )
        self.settings = settings
        self._client = anthropic.AsyncAnthropic(
            api_key=settings.api_key.get_secret_value(),
            timeout=settings.timeout_seconds,
            max_retries=settings.max_retries,
        )
        logger.info("AI client initialized", model=settings.model)

    async def complete(self, system: str, prompt: str) -> AIResult:
        try:
            message = await self._client.messages.create(
                model=self.settings.model,
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.warning(
                "AI request failed",
                code=AI_TRANSPORT_ERROR,
                error=str(e),
                error_type=type(e).__name__,
            )
            return AIResult.failure(AI_TRANSPORT_ERROR, str(e))

        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            return AIResult.failure(AI_EMPTY_RESPONSE, "Completion contained no text")

        logger.debug(
            "AI completion received",
            model=self.settings.model,
            stop_reason=message.stop_reason,
            chars=len(text),
        )
        return AIResult.success(text)
