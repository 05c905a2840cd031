from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from cpq.errors import ConfigurationError, ProductNotFoundError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error payload returned for every 4xx response."""

    error: str
    details: Optional[dict[str, Any]] = None


def _respond(status: int, error: str, details: Optional[dict[str, Any]] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail_parts = []
    error_list = []
    for err in exc.errors():
        loc = " -> ".join(str(part) for part in err["loc"] if part != "body")
        msg = err["msg"]
        detail_parts.append(f"{loc}: {msg}" if loc else msg)
        error_list.append({"field": loc, "message": msg, "type": err["type"]})

    return _respond(
        400,
        f"Invalid request: {'; '.join(detail_parts)}",
        {"errors": error_list},
    )


async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    return _respond(400, exc.message, {"code": exc.code, **exc.details})


async def product_not_found_handler(
    request: Request, exc: ProductNotFoundError
) -> JSONResponse:
    logger.debug("Product lookup miss on %s: %s", request.url.path, exc.product_id)
    return _respond(404, "Product not found", exc.details)
