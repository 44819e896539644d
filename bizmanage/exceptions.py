"""
Exception hierarchy for BizManage Pro.

Route handlers map these onto HTTP responses in `bizmanage.serving.api.main`.
"""

from typing import Any, Dict, Optional


class BizManageError(Exception):
    """Base exception for BizManage Pro errors."""

    default_message = "An error occurred in BizManage Pro"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.code = code
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a response body."""
        error_dict: Dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.code:
            error_dict["code"] = self.code
        if self.details:
            error_dict["details"] = self.details
        return error_dict


class NotFoundError(BizManageError):
    """Raised when a referenced entity does not exist."""

    default_message = "Entity not found"


class ConflictError(BizManageError):
    """Raised when a write would violate a uniqueness rule."""

    default_message = "Entity already exists"


class InvalidOrderStatusError(BizManageError, ValueError):
    """Raised for an order status outside pending/processing/completed/cancelled."""

    default_message = "Invalid status"


class AIConfigurationError(BizManageError):
    """Raised when the AI client cannot be constructed (e.g. missing API key)."""

    default_message = "AI insights are not configured"
