from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from cpq.api.errors import (
    configuration_error_handler,
    product_not_found_handler,
    validation_exception_handler,
)
from cpq.api.routes_configure import router as configure_router
from cpq.api.routes_health import router as health_router
from cpq.api.routes_products import router as products_router
from cpq.api.routes_quote import router as quote_router
from cpq.errors import ConfigurationError, ProductNotFoundError

SERVICE_NAME = "CPQ Service"
SERVICE_VERSION = "1.0.0"


def configure_logging() -> None:
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()

app = FastAPI(
    title="CPQ Service API",
    version=SERVICE_VERSION,
    description="Stateless Configure, Price, Quote service with declarative pricing rules",
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ConfigurationError, configuration_error_handler)
app.add_exception_handler(ProductNotFoundError, product_not_found_handler)
app.include_router(health_router)
app.include_router(products_router)
app.include_router(configure_router)
app.include_router(quote_router)


@app.get("/")
async def service_info() -> dict:
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "Stateless RESTful CPQ (Configure, Price, Quote) service",
        "documentation": app.docs_url,
        "health": "/api/health",
    }
