from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = (
    Path(__file__).resolve().parent.parent.parent / "config" / "rules.json"
)


class RuleSpec(BaseModel):
    """Identity and ordering shared by every rule descriptor."""

    id: str
    name: str
    description: str = ""
    priority: int


class VolumeTier(RuleSpec):
    """Percentage off when ``min_quantity <= quantity < max_quantity``."""

    min_quantity: int = Field(ge=1)
    max_quantity: Optional[int] = None
    percentage: float = Field(ge=0, le=100)

    @model_validator(mode="after")
    def bounds_ordered(self) -> VolumeTier:
        if self.max_quantity is not None and self.max_quantity <= self.min_quantity:
            raise ValueError("max_quantity must be greater than min_quantity")
        return self


class CustomerTierDiscount(RuleSpec):
    tier: str
    percentage: float = Field(ge=0, le=100)


class BundleDiscount(RuleSpec):
    """Percentage off every item when all prefixes occur across the request."""

    product_prefixes: list[str] = Field(min_length=2)
    percentage: float = Field(ge=0, le=100)


class OptionComp(RuleSpec):
    """Comps an option's price on the item that selects it."""

    anchor_product_id: str
    option_id: str
    min_products: int = Field(default=1, ge=1)


class RegionAdjustment(RuleSpec):
    """Multiplies the price for the listed regions. 1.0 is a baseline no-op."""

    regions: list[str] = Field(min_length=1)
    multiplier: float = Field(gt=0)


class FlatDiscount(RuleSpec):
    """Fixed amount off a product when a boolean custom field is true."""

    product_id: str
    custom_field: str
    amount: float = Field(ge=0)


def _default_volume_tiers() -> list[VolumeTier]:
    return [
        VolumeTier(
            id="volume-discount-10-percent",
            name="Volume Discount - 10%",
            description="10% discount for quantities of 5 or more",
            priority=10,
            min_quantity=5,
            max_quantity=10,
            percentage=10,
        ),
        VolumeTier(
            id="volume-discount-20-percent",
            name="Volume Discount - 20%",
            description="20% discount for quantities of 10 or more",
            priority=9,
            min_quantity=10,
            percentage=20,
        ),
    ]


def _default_customer_tiers() -> list[CustomerTierDiscount]:
    return [
        CustomerTierDiscount(
            id="enterprise-tier-discount",
            name="Enterprise Tier Discount",
            description="15% discount for enterprise customers",
            priority=5,
            tier="enterprise",
            percentage=15,
        ),
        CustomerTierDiscount(
            id="startup-tier-discount",
            name="Startup Tier Discount",
            description="25% discount for startup customers",
            priority=5,
            tier="startup",
            percentage=25,
        ),
    ]


def _default_bundles() -> list[BundleDiscount]:
    return [
        BundleDiscount(
            id="bundle-discount-compute-database",
            name="Compute + Database Bundle Discount",
            description="10% discount when purchasing cloud server with managed database",
            priority=15,
            product_prefixes=["cloud-server-", "database-"],
            percentage=10,
        )
    ]


def _default_option_comps() -> list[OptionComp]:
    return [
        OptionComp(
            id="premium-support-bundle",
            name="Premium Support Bundle",
            description="Free premium support with Cloud Server Pro and 2+ other products",
            priority=8,
            anchor_product_id="cloud-server-pro",
            option_id="support-premium",
            min_products=3,
        )
    ]


def _default_regions() -> list[RegionAdjustment]:
    return [
        RegionAdjustment(
            id="region-pricing-us-west",
            name="US West Region Standard Pricing",
            description="Standard pricing for US West region",
            priority=20,
            regions=["us-west"],
            multiplier=1.0,
        ),
        RegionAdjustment(
            id="region-pricing-eu",
            name="EU Region Premium",
            description="8% premium for EU regions due to compliance requirements",
            priority=20,
            regions=["eu-central", "eu-west"],
            multiplier=1.08,
        ),
        RegionAdjustment(
            id="region-pricing-apac",
            name="APAC Region Premium",
            description="5% premium for APAC regions",
            priority=20,
            regions=["apac-east", "apac-south"],
            multiplier=1.05,
        ),
    ]


def _default_flat_discounts() -> list[FlatDiscount]:
    return [
        FlatDiscount(
            id="professional-services-early-bird",
            name="Professional Services Early Bird",
            description="$1000 discount on professional services package",
            priority=12,
            product_id="professional-services",
            custom_field="earlyBird",
            amount=1000,
        )
    ]


class RulesConfig(BaseModel):
    """Top-level rule table loaded from rules.json."""

    volume_tiers: list[VolumeTier] = Field(default_factory=_default_volume_tiers)
    customer_tiers: list[CustomerTierDiscount] = Field(
        default_factory=_default_customer_tiers
    )
    bundles: list[BundleDiscount] = Field(default_factory=_default_bundles)
    option_comps: list[OptionComp] = Field(default_factory=_default_option_comps)
    regions: list[RegionAdjustment] = Field(default_factory=_default_regions)
    flat_discounts: list[FlatDiscount] = Field(default_factory=_default_flat_discounts)

    @model_validator(mode="after")
    def rule_ids_unique(self) -> RulesConfig:
        ids = [spec.id for spec in self.all_specs()]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate rule ids: {', '.join(duplicates)}")
        return self

    def all_specs(self) -> list[RuleSpec]:
        return [
            *self.volume_tiers,
            *self.customer_tiers,
            *self.bundles,
            *self.option_comps,
            *self.regions,
            *self.flat_discounts,
        ]


def load_rules_config(path: Optional[str | Path] = None) -> RulesConfig:
    """Load the rule table from a JSON file. Falls back to built-in defaults."""
    if path is None:
        env = os.environ.get("CPQ_RULES_PATH")
        path = Path(env) if env else DEFAULT_RULES_PATH
    else:
        path = Path(path)

    if not path.exists():
        logger.info("Rules file %s not found, using built-in rule table", path)
        return RulesConfig()

    with open(path) as f:
        raw = json.load(f)
    return RulesConfig(**raw)
