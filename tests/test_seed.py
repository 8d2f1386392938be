from sqlalchemy import func, select

from storefront.models import Product
from storefront.seed import SEED_PRODUCTS, seed_products
from storefront.services.catalog_service import CatalogService


def test_seeds_empty_catalog(db):
    inserted = seed_products(db)

    assert inserted == len(SEED_PRODUCTS)
    names = [p.name for p in CatalogService(db).list_products()]
    assert names == sorted(p["name"] for p in SEED_PRODUCTS)


def test_seed_is_skipped_when_products_exist(db, products):
    assert seed_products(db) == 0
    assert db.execute(select(func.count()).select_from(Product)).scalar_one() == 2
