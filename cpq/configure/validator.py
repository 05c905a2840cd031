from __future__ import annotations

import logging
from typing import Callable, Iterable, Sequence

from cpq.catalog.models import Product
from cpq.catalog.products import Catalog
from cpq.configure.models import (
    BatchValidationResult,
    ItemValidation,
    ValidationIssue,
    ValidationResult,
)
from cpq.intake.models import ConfigurationItem

logger = logging.getLogger(__name__)

OPTIONS_FIELD = "selectedOptions"

Advisory = Callable[[Product, Sequence[str]], list[ValidationIssue]]


def _check_required(product: Product, selected: Sequence[str]) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            field=OPTIONS_FIELD,
            message=f"Required option '{option.name}' is not selected",
        )
        for option in product.options
        if option.is_required and option.id not in selected
    ]


def _check_unknown(product: Product, selected: Sequence[str]) -> list[ValidationIssue]:
    valid_ids = product.option_ids
    return [
        ValidationIssue(
            field=OPTIONS_FIELD,
            message=f"Invalid option '{option_id}' for product '{product.name}'",
        )
        for option_id in selected
        if option_id not in valid_ids
    ]


def _check_conflicts(product: Product, selected: Sequence[str]) -> list[ValidationIssue]:
    # Only the declaring option reports a conflict.
    selected_set = set(selected)
    issues = []
    for option_id in selected:
        option = product.get_option(option_id)
        if option is None:
            continue
        for conflict_id in option.conflicts:
            if conflict_id in selected_set:
                other = product.get_option(conflict_id)
                other_name = other.name if other else conflict_id
                issues.append(
                    ValidationIssue(
                        field=OPTIONS_FIELD,
                        message=(
                            f"Options '{option.name}' and '{other_name}' "
                            "cannot be selected together"
                        ),
                    )
                )
    return issues


def _check_dependencies(
    product: Product, selected: Sequence[str]
) -> list[ValidationIssue]:
    selected_set = set(selected)
    issues = []
    for option_id in selected:
        option = product.get_option(option_id)
        if option is None:
            continue
        for dep_id in option.dependencies:
            if dep_id not in selected_set:
                dep = product.get_option(dep_id)
                dep_name = dep.name if dep else dep_id
                issues.append(
                    ValidationIssue(
                        field=OPTIONS_FIELD,
                        message=f"Option '{option.name}' requires '{dep_name}' to be selected",
                    )
                )
    return issues


_ERROR_CHECKS = [
    _check_required,
    _check_unknown,
    _check_conflicts,
    _check_dependencies,
]


# ---------------------------------------------------------------------------
# Advisory warnings
# ---------------------------------------------------------------------------


def recommend_backups(product: Product, selected: Sequence[str]) -> list[ValidationIssue]:
    if product.id.startswith("cloud-server-") and "backup-daily" not in selected:
        return [
            ValidationIssue(
                field=OPTIONS_FIELD,
                message="Daily backups are recommended for production workloads",
            )
        ]
    return []


DEFAULT_ADVISORIES: tuple[Advisory, ...] = (recommend_backups,)


class Validator:
    """Checks option selections against a catalog. Stateless between calls."""

    def __init__(
        self,
        catalog: Catalog,
        advisories: Iterable[Advisory] = DEFAULT_ADVISORIES,
    ):
        self.catalog = catalog
        self.advisories = tuple(advisories)

    def validate(self, product_id: str, selected_options: Sequence[str]) -> ValidationResult:
        """Validate one selection, accumulating every applicable error.

        An unknown product short-circuits with a single ``productId`` error.
        """
        product = self.catalog.get_product(product_id)
        if product is None:
            return ValidationResult(
                is_valid=False,
                errors=[
                    ValidationIssue(
                        field="productId",
                        message=f"Product '{product_id}' not found",
                    )
                ],
            )

        errors: list[ValidationIssue] = []
        for check in _ERROR_CHECKS:
            errors.extend(check(product, selected_options))

        warnings: list[ValidationIssue] = []
        for advisory in self.advisories:
            warnings.extend(advisory(product, selected_options))

        if errors:
            logger.debug(
                "Configuration for %s rejected with %d error(s)", product_id, len(errors)
            )

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings or None,
        )

    def validate_many(self, configurations: Sequence[ConfigurationItem]) -> BatchValidationResult:
        results = [
            ItemValidation(
                product_id=item.product_id,
                validation=self.validate(item.product_id, item.selected_options),
            )
            for item in configurations
        ]
        return BatchValidationResult(
            is_valid=all(r.validation.is_valid for r in results),
            results=results,
        )
