# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import ItemIn, CartOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).get_cart(user_id)


@router.post("/items", response_model=CartOut)
def add_item(payload: ItemIn, user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).add_or_update_item(user_id, payload.product_id, payload.quantity)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    return CartService(db).remove_item(user_id, product_id)
