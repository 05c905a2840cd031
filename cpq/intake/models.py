from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_QUANTITY = 1_000_000


class WireModel(BaseModel):
    """Accepts camelCase JSON keys as well as snake_case attribute names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConfigurationItem(WireModel):
    """One requested product configuration. Created per request, never stored."""

    product_id: str = Field(min_length=1, description="Catalog product id")
    selected_options: list[str] = Field(default_factory=list)
    quantity: int = Field(
        default=1,
        ge=1,
        le=MAX_QUANTITY,
        strict=True,
        description="Positive integer quantity",
    )
    customizations: Optional[dict[str, str]] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("product_id")
    @classmethod
    def product_id_not_blank(cls, v: str) -> str:
        if v.strip() == "":
            raise ValueError("Product ID is required")
        return v


class ValidateRequest(WireModel):
    product_id: str = Field(min_length=1)
    selected_options: list[str] = Field(default_factory=list)


class BatchValidateRequest(WireModel):
    configurations: list[ConfigurationItem] = Field(min_length=1)


class QuoteRequest(WireModel):
    """Quote generation request body."""

    configurations: list[ConfigurationItem] = Field(
        min_length=1, description="At least one configuration is required"
    )
    customer_tier: Optional[str] = None
    region: Optional[str] = None
    custom_fields: Optional[dict[str, Any]] = None
    tax_rate: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
