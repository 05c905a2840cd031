from __future__ import annotations

from fastapi import APIRouter, Depends

from cpq.api.deps import get_quoter
from cpq.api.errors import ErrorResponse
from cpq.intake.models import QuoteRequest
from cpq.pricing.models import Quote
from cpq.pricing.quoter import Quoter

router = APIRouter(prefix="/api", tags=["quote"])


@router.post(
    "/quote",
    response_model=Quote,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def generate_quote(
    request: QuoteRequest, quoter: Quoter = Depends(get_quoter)
) -> Quote:
    """Full pipeline: validate → price every item → assemble quote."""
    return quoter.generate_quote(
        request.configurations,
        customer_tier=request.customer_tier,
        region=request.region,
        custom_fields=request.custom_fields,
        tax_rate=request.tax_rate,
    )
