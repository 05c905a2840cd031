from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cpq.rules.engine import AppliedRule


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemPricing(_CamelModel):
    product_id: str
    base_price: float
    final_price: float
    applied_rules: list[AppliedRule]


class PricingSummary(_CamelModel):
    items: list[ItemPricing]
    total_base_price: float
    total_final_price: float
    total_discount: float


class SelectedOptionDetail(_CamelModel):
    id: str
    name: str
    price: float


class LineItemDiscount(_CamelModel):
    rule_id: str
    rule_name: str
    amount: float


class QuoteLineItem(_CamelModel):
    product_id: str
    product_name: str
    quantity: int
    base_price: float  # unit base price of the product
    selected_options: list[SelectedOptionDetail]
    subtotal: float
    discounts: list[LineItemDiscount]
    total: float


class Quote(_CamelModel):
    """Assembled quote document. ``tax`` is None when no tax rate was given."""

    id: str
    created_at: str
    line_items: list[QuoteLineItem]
    subtotal: float
    total_discounts: float
    tax: Optional[float] = None
    total: float
    metadata: Optional[dict[str, Any]] = None
