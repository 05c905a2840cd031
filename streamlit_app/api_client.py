"""Thin HTTP client for the CPQ API."""

from __future__ import annotations

import os
from typing import Any, Optional

import httpx

BASE_URL = os.environ.get("CPQ_API_URL", "http://localhost:8000")


class APIError(Exception):
    """A 4xx response from the API, carrying its ``{error, details}`` body."""

    def __init__(self, status_code: int, error: str, details: Optional[dict] = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details or {}


def _url(path: str) -> str:
    return f"{BASE_URL}{path}"


def _json(resp: httpx.Response) -> Any:
    if 400 <= resp.status_code < 500:
        body = resp.json()
        raise APIError(resp.status_code, body.get("error", resp.text), body.get("details"))
    resp.raise_for_status()
    return resp.json()


def get_health() -> dict[str, Any]:
    return _json(httpx.get(_url("/api/health"), timeout=5))


def list_products() -> list[dict[str, Any]]:
    return _json(httpx.get(_url("/api/products"), timeout=10))


def get_product(product_id: str) -> dict[str, Any]:
    return _json(httpx.get(_url(f"/api/products/{product_id}"), timeout=10))


def list_categories() -> list[str]:
    return _json(httpx.get(_url("/api/categories"), timeout=10))


def validate_configuration(product_id: str, selected_options: list[str]) -> dict[str, Any]:
    resp = httpx.post(
        _url("/api/configure/validate"),
        json={"productId": product_id, "selectedOptions": selected_options},
        timeout=10,
    )
    return _json(resp)


def generate_quote(
    configurations: list[dict[str, Any]],
    customer_tier: Optional[str] = None,
    region: Optional[str] = None,
    custom_fields: Optional[dict[str, Any]] = None,
    tax_rate: Optional[float] = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"configurations": configurations}
    if customer_tier:
        payload["customerTier"] = customer_tier
    if region:
        payload["region"] = region
    if custom_fields:
        payload["customFields"] = custom_fields
    if tax_rate is not None:
        payload["taxRate"] = tax_rate
    resp = httpx.post(_url("/api/quote"), json=payload, timeout=30)
    return _json(resp)
