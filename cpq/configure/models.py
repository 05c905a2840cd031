from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValidationIssue(_CamelModel):
    field: str
    message: str


class ValidationResult(_CamelModel):
    """Outcome of validating one option selection against a product.

    ``warnings`` is None rather than an empty list when nothing applies.
    """

    is_valid: bool
    errors: list[ValidationIssue]
    warnings: Optional[list[ValidationIssue]] = None

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]


class ItemValidation(_CamelModel):
    product_id: str
    validation: ValidationResult


class BatchValidationResult(_CamelModel):
    is_valid: bool
    results: list[ItemValidation]

    def failures(self) -> list[ItemValidation]:
        return [r for r in self.results if not r.validation.is_valid]

    def error_summary(self) -> str:
        """Human-readable ``productId: msg, msg; productId: msg`` summary."""
        return "; ".join(
            f"{r.product_id}: {', '.join(r.validation.error_messages)}"
            for r in self.failures()
        )
