from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cpq.catalog.models import Product
from cpq.intake.models import ConfigurationItem

RULE_TYPES = ("percentage", "fixed", "tiered", "bundle")


@dataclass(frozen=True)
class PricingContext:
    """Everything a rule may inspect when pricing one configuration item."""

    product: Product
    configuration: ConfigurationItem
    all_configurations: Sequence[ConfigurationItem]
    customer_tier: Optional[str] = None
    region: Optional[str] = None
    custom_fields: Mapping[str, Any] = field(default_factory=dict)


Predicate = Callable[[PricingContext], bool]
Transform = Callable[[float, PricingContext], float]


@dataclass(frozen=True)
class PricingRule:
    """A declarative pricing rule. Lower ``priority`` values apply first."""

    id: str
    name: str
    description: str
    type: str
    priority: int
    predicate: Predicate
    transform: Transform

    def applies(self, context: PricingContext) -> bool:
        return bool(self.predicate(context))

    def apply(self, price: float, context: PricingContext) -> float:
        return self.transform(price, context)


class AppliedRule(BaseModel):
    """A rule that changed the price. Negative amounts are surcharges."""

    rule_id: str
    rule_name: str
    discount_amount: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PricingOutcome(BaseModel):
    final_price: float
    applied_rules: list[AppliedRule]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def get_applicable_rules(
    rules: Iterable[PricingRule], context: PricingContext
) -> list[PricingRule]:
    """Rules whose predicate holds, in ascending priority.

    ``sorted`` is stable, so equal priorities keep declaration order.
    """
    matching = [rule for rule in rules if rule.applies(context)]
    return sorted(matching, key=lambda r: r.priority)


def _changed(previous: float, current: float) -> bool:
    return round(previous - current, 2) != 0


def apply_rules(
    base_price: float, context: PricingContext, rules: Iterable[PricingRule]
) -> PricingOutcome:
    """Fold applicable rules over ``base_price``. Pure and deterministic."""
    current = base_price
    applied: list[AppliedRule] = []

    for rule in get_applicable_rules(rules, context):
        previous = current
        current = rule.apply(previous, context)
        if _changed(previous, current):
            applied.append(
                AppliedRule(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    discount_amount=previous - current,
                )
            )

    return PricingOutcome(final_price=max(0.0, current), applied_rules=applied)


class RuleEngine:
    """Evaluates a fixed, immutable rule table."""

    def __init__(self, rules: Iterable[PricingRule]):
        self.rules: tuple[PricingRule, ...] = tuple(rules)
        ids = [r.id for r in self.rules]
        if len(ids) != len(set(ids)):
            raise ValueError("Pricing rule ids must be unique")

    def applicable_rules(self, context: PricingContext) -> list[PricingRule]:
        return get_applicable_rules(self.rules, context)

    def apply(self, base_price: float, context: PricingContext) -> PricingOutcome:
        return apply_rules(base_price, context, self.rules)
