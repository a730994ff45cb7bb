"""
Products Router

Catalogue reads for listing and detail views.
"""
from fastapi import APIRouter, Depends, HTTPException

from cubtton.errors import ERROR_PRODUCT_NOT_FOUND
from cubtton.logging import get_logger
from cubtton.state import AppState
from .deps import get_app_state

logger = get_logger(__name__)

router = APIRouter(tags=["products"])


@router.get("/products")
async def list_products(state: AppState = Depends(get_app_state)):
    products = await state.products.get_products()
    return [p.model_dump(mode="json") for p in products]


@router.get("/products/{product_id}")
async def get_product(product_id: str, state: AppState = Depends(get_app_state)):
    product = await state.products.get_product_by_id(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return product.model_dump(mode="json")
