from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from cpq.catalog.products import Catalog
from cpq.configure.validator import Validator
from cpq.errors import ConfigurationError
from cpq.intake.models import ConfigurationItem
from cpq.pricing.models import (
    ItemPricing,
    LineItemDiscount,
    Quote,
    QuoteLineItem,
    SelectedOptionDetail,
)
from cpq.pricing.pricer import Pricer

logger = logging.getLogger(__name__)


class Quoter:
    """Validates, prices and assembles quotes. All-or-nothing per request."""

    def __init__(self, catalog: Catalog, validator: Validator, pricer: Pricer):
        self.catalog = catalog
        self.validator = validator
        self.pricer = pricer

    def _line_item(self, item: ConfigurationItem, pricing: ItemPricing) -> QuoteLineItem:
        product = self.catalog.require_product(item.product_id)

        options = []
        for option_id in item.selected_options:
            option = product.get_option(option_id)
            options.append(
                SelectedOptionDetail(
                    id=option_id,
                    name=option.name if option else option_id,
                    price=option.price if option else 0,
                )
            )

        options_total = sum(o.price for o in options)
        return QuoteLineItem(
            product_id=item.product_id,
            product_name=product.name,
            quantity=item.quantity,
            base_price=product.base_price,
            selected_options=options,
            subtotal=(product.base_price + options_total) * item.quantity,
            discounts=[
                LineItemDiscount(
                    rule_id=r.rule_id,
                    rule_name=r.rule_name,
                    amount=r.discount_amount,
                )
                for r in pricing.applied_rules
            ],
            total=pricing.final_price,
        )

    @staticmethod
    def _metadata(
        customer_tier: Optional[str],
        region: Optional[str],
        tax_rate: Optional[float],
        custom_fields: Optional[dict[str, Any]],
    ) -> dict[str, Any]:
        # Context keys that were not sent are left out; custom fields echo verbatim
        context = {"customerTier": customer_tier, "region": region, "taxRate": tax_rate}
        metadata = {k: v for k, v in context.items() if v is not None}
        metadata.update(custom_fields or {})
        return metadata

    def generate_quote(
        self,
        configurations: Sequence[ConfigurationItem],
        customer_tier: Optional[str] = None,
        region: Optional[str] = None,
        custom_fields: Optional[dict[str, Any]] = None,
        tax_rate: Optional[float] = None,
    ) -> Quote:
        """Build a quote for every configuration, or raise ConfigurationError.

        Totals are rounded to cents only at the end; line items keep raw floats.
        """
        validation = self.validator.validate_many(configurations)
        if not validation.is_valid:
            summary = validation.error_summary()
            logger.warning("Quote rejected: %s", summary)
            raise ConfigurationError(
                f"Configuration validation failed: {summary}",
                errors={
                    r.product_id: r.validation.error_messages
                    for r in validation.failures()
                },
            )

        pricing = self.pricer.price_items(
            configurations, customer_tier, region, custom_fields
        )
        line_items = [
            self._line_item(item, priced)
            for item, priced in zip(configurations, pricing.items)
        ]

        pre_tax = pricing.total_final_price
        tax: Optional[float] = None
        total = pre_tax
        if tax_rate is not None:
            raw_tax = pre_tax * tax_rate
            total = pre_tax + raw_tax
            tax = round(raw_tax, 2)

        quote = Quote(
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc).isoformat(),
            line_items=line_items,
            subtotal=pricing.total_base_price,
            total_discounts=pricing.total_discount,
            tax=tax,
            total=round(total, 2),
            metadata=self._metadata(customer_tier, region, tax_rate, custom_fields),
        )
        logger.info(
            "Generated quote %s: %d line item(s), total %.2f",
            quote.id,
            len(line_items),
            quote.total,
        )
        return quote
