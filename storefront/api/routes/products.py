from fastapi import APIRouter, Depends
from typing import List

from ...schemas.product import Product
from ...services.catalog_service import CatalogService
from ..dependencies import get_catalog_service

router = APIRouter(tags=["products"])


@router.get("/products", response_model=List[Product])
def list_products(catalog_service: CatalogService = Depends(get_catalog_service)):
    """List the catalog ordered by name"""
    return catalog_service.list_products()
