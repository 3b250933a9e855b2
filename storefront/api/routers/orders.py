# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CancelOrderOut, InvoiceOut, OrderListOut, PaymentPageOut
from storefront.services.lock_service import LockService, get_lock_service
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/account/order-history", tags=["orders"])


def get_service(db: Session, lock_service: LockService) -> OrderService:
    return OrderService(db, lock_service)


@router.get("", response_model=OrderListOut)
def list_orders(
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    orders = get_service(db, lock_service).list_user_orders(user_id)
    return OrderListOut(orders=orders)


@router.get("/cancel/{order_id}", response_model=CancelOrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return get_service(db, lock_service).cancel_order(order_id, user_id)


@router.get("/{order_id}", response_model=PaymentPageOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    """Order detail together with the wallet balance shown on the payment page."""
    return get_service(db, lock_service).get_order_for_payment(order_id, user_id)


@router.get("/{order_id}/invoice", response_model=InvoiceOut)
def get_invoice(
    order_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return InvoiceOut(**get_service(db, lock_service).get_invoice(order_id, user_id))
