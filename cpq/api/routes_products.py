from __future__ import annotations

from fastapi import APIRouter, Depends

from cpq.api.deps import get_catalog
from cpq.api.errors import ErrorResponse
from cpq.catalog.models import Product
from cpq.catalog.products import Catalog

router = APIRouter(prefix="/api", tags=["products"])


@router.get("/products", response_model=list[Product])
async def list_products(catalog: Catalog = Depends(get_catalog)) -> list[Product]:
    """Get all available products."""
    return list(catalog.products)


@router.get(
    "/products/category/{category}",
    response_model=list[Product],
)
async def products_by_category(
    category: str, catalog: Catalog = Depends(get_catalog)
) -> list[Product]:
    return catalog.get_products_by_category(category)


@router.get(
    "/products/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(product_id: str, catalog: Catalog = Depends(get_catalog)) -> Product:
    """Get a product by id. Unknown ids map to 404."""
    return catalog.require_product(product_id)


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: Catalog = Depends(get_catalog)) -> list[str]:
    return catalog.get_categories()
