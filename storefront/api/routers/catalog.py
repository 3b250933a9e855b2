# storefront/api/routers/catalog.py
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.catalog_query import CatalogQuery
from storefront.domain.schemas import CatalogItemOut, ProductDetailsOut, ProductOut, StockOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["catalog"])


@router.get("", response_model=List[CatalogItemOut])
def list_products(
    category: str | None = None,
    min_price: str | None = Query(None, alias="minPrice"),
    max_price: str | None = Query(None, alias="maxPrice"),
    sort_by: str | None = Query(None, alias="sortBy"),
    db: Session = Depends(get_db),
):
    #raw strings on purpose: malformed bounds or sort keys are ignored, not rejected
    query = CatalogQuery.build(category, min_price, max_price, sort_by)
    return CatalogService(db).list_products(query)


@router.get("/search", response_model=List[ProductOut])
def search_products(q: str | None = None, db: Session = Depends(get_db)):
    return CatalogService(db).search_products(q)


@router.get("/{product_id}", response_model=ProductDetailsOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).get_product_details(product_id)


@router.get("/{product_id}/stock", response_model=StockOut)
def get_stock(product_id: int, db: Session = Depends(get_db)):
    stock = CatalogService(db).get_stock(product_id)
    return StockOut(product_id=product_id, stock=stock)
