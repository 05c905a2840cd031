from __future__ import annotations

from typing import Any, Optional


class CPQError(Exception):
    """Base error for catalog, configuration and pricing failures."""

    code = "CPQ_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}


class ProductNotFoundError(CPQError):
    """Raised when a lookup must escalate a missing product id."""

    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        super().__init__(
            f"Product '{product_id}' not found",
            details={"productId": product_id},
        )
        self.product_id = product_id


class ConfigurationError(CPQError):
    """Raised when one or more configuration items fail validation.

    ``errors`` maps each failing product id to its error messages.
    """

    code = "CONFIGURATION_INVALID"

    def __init__(self, message: str, errors: dict[str, list[str]]):
        super().__init__(message, details={"errors": errors})
        self.errors = errors
