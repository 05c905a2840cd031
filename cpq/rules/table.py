"""Turns declarative rule descriptors into executable pricing rules."""

from __future__ import annotations

from cpq.rules.config import (
    BundleDiscount,
    CustomerTierDiscount,
    FlatDiscount,
    OptionComp,
    RegionAdjustment,
    RulesConfig,
    VolumeTier,
)
from cpq.rules.engine import PricingContext, PricingRule


def _keep_factor(percentage: float) -> float:
    # (100 - p) / 100 rounds to the same double as the decimal literal (0.9, 0.85, ...)
    return (100 - percentage) / 100


def volume_rule(spec: VolumeTier) -> PricingRule:
    factor = _keep_factor(spec.percentage)

    def predicate(ctx: PricingContext) -> bool:
        qty = ctx.configuration.quantity
        if qty < spec.min_quantity:
            return False
        return spec.max_quantity is None or qty < spec.max_quantity

    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="percentage",
        priority=spec.priority,
        predicate=predicate,
        transform=lambda price, _ctx: price * factor,
    )


def customer_tier_rule(spec: CustomerTierDiscount) -> PricingRule:
    factor = _keep_factor(spec.percentage)
    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="percentage",
        priority=spec.priority,
        predicate=lambda ctx: ctx.customer_tier == spec.tier,
        transform=lambda price, _ctx: price * factor,
    )


def bundle_rule(spec: BundleDiscount) -> PricingRule:
    factor = _keep_factor(spec.percentage)
    prefixes = tuple(spec.product_prefixes)

    def predicate(ctx: PricingContext) -> bool:
        return all(
            any(c.product_id.startswith(prefix) for c in ctx.all_configurations)
            for prefix in prefixes
        )

    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="bundle",
        priority=spec.priority,
        predicate=predicate,
        transform=lambda price, _ctx: price * factor,
    )


def option_comp_rule(spec: OptionComp) -> PricingRule:
    def predicate(ctx: PricingContext) -> bool:
        has_anchor = any(
            c.product_id == spec.anchor_product_id for c in ctx.all_configurations
        )
        return (
            has_anchor
            and spec.option_id in ctx.configuration.selected_options
            and len(ctx.all_configurations) >= spec.min_products
        )

    def transform(price: float, ctx: PricingContext) -> float:
        option = ctx.product.get_option(spec.option_id)
        if option is None:
            return price
        return price - option.price

    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="bundle",
        priority=spec.priority,
        predicate=predicate,
        transform=transform,
    )


def region_rule(spec: RegionAdjustment) -> PricingRule:
    regions = frozenset(spec.regions)
    multiplier = spec.multiplier
    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="percentage" if multiplier != 1.0 else "fixed",
        priority=spec.priority,
        predicate=lambda ctx: ctx.region in regions,
        transform=lambda price, _ctx: price * multiplier,
    )


def flat_discount_rule(spec: FlatDiscount) -> PricingRule:
    return PricingRule(
        id=spec.id,
        name=spec.name,
        description=spec.description,
        type="fixed",
        priority=spec.priority,
        predicate=lambda ctx: (
            ctx.product.id == spec.product_id
            and ctx.custom_fields.get(spec.custom_field) is True
        ),
        transform=lambda price, _ctx: price - spec.amount,
    )


def build_rules(config: RulesConfig) -> tuple[PricingRule, ...]:
    """Build the rule table, preserving declaration order for priority ties."""
    rules: list[PricingRule] = []
    rules.extend(volume_rule(s) for s in config.volume_tiers)
    rules.extend(customer_tier_rule(s) for s in config.customer_tiers)
    rules.extend(bundle_rule(s) for s in config.bundles)
    rules.extend(option_comp_rule(s) for s in config.option_comps)
    rules.extend(region_rule(s) for s in config.regions)
    rules.extend(flat_discount_rule(s) for s in config.flat_discounts)
    return tuple(rules)


DEFAULT_RULES: tuple[PricingRule, ...] = build_rules(RulesConfig())
