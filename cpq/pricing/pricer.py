from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from cpq.catalog.products import Catalog
from cpq.intake.models import ConfigurationItem
from cpq.pricing.models import ItemPricing, PricingSummary
from cpq.rules.engine import PricingContext, RuleEngine


class Pricer:
    """Prices configuration items through the rule engine."""

    def __init__(self, catalog: Catalog, engine: RuleEngine):
        self.catalog = catalog
        self.engine = engine

    def calculate_base_price(self, item: ConfigurationItem) -> float:
        """(product base + selected option prices) x quantity, before rules.

        Unknown option ids contribute nothing.
        """
        product = self.catalog.require_product(item.product_id)
        unit = product.base_price
        for option_id in item.selected_options:
            option = product.get_option(option_id)
            if option is not None:
                unit += option.price
        return unit * item.quantity

    def price_item(
        self,
        item: ConfigurationItem,
        all_items: Sequence[ConfigurationItem],
        customer_tier: Optional[str] = None,
        region: Optional[str] = None,
        custom_fields: Optional[Mapping[str, Any]] = None,
    ) -> ItemPricing:
        product = self.catalog.require_product(item.product_id)
        base_price = self.calculate_base_price(item)
        context = PricingContext(
            product=product,
            configuration=item,
            all_configurations=tuple(all_items),
            customer_tier=customer_tier,
            region=region,
            custom_fields=dict(custom_fields or {}),
        )
        outcome = self.engine.apply(base_price, context)
        return ItemPricing(
            product_id=item.product_id,
            base_price=base_price,
            final_price=outcome.final_price,
            applied_rules=outcome.applied_rules,
        )

    def price_items(
        self,
        items: Sequence[ConfigurationItem],
        customer_tier: Optional[str] = None,
        region: Optional[str] = None,
        custom_fields: Optional[Mapping[str, Any]] = None,
    ) -> PricingSummary:
        priced = [
            self.price_item(item, items, customer_tier, region, custom_fields)
            for item in items
        ]
        total_base = sum(p.base_price for p in priced)
        total_final = sum(p.final_price for p in priced)
        return PricingSummary(
            items=priced,
            total_base_price=total_base,
            total_final_price=total_final,
            total_discount=total_base - total_final,
        )
