from __future__ import annotations

from fastapi import APIRouter, Depends

from cpq.api.deps import get_validator
from cpq.api.errors import ErrorResponse
from cpq.configure.models import BatchValidationResult, ValidationResult
from cpq.configure.validator import Validator
from cpq.intake.models import BatchValidateRequest, ValidateRequest

router = APIRouter(prefix="/api/configure", tags=["configure"])


@router.post(
    "/validate",
    response_model=ValidationResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def validate_configuration(
    request: ValidateRequest, validator: Validator = Depends(get_validator)
) -> ValidationResult:
    """Validate one product configuration. An unknown product is a 200 with isValid=false."""
    return validator.validate(request.product_id, request.selected_options)


@router.post(
    "/validate-batch",
    response_model=BatchValidationResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def validate_configurations(
    request: BatchValidateRequest, validator: Validator = Depends(get_validator)
) -> BatchValidationResult:
    return validator.validate_many(request.configurations)
