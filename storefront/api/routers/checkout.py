# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    AddressCheckoutIn,
    ApplyCouponIn,
    ConfirmPaymentIn,
    CouponResultOut,
    GatewayOrderIn,
    GatewayOrderOut,
    OrderEnvelope,
    PlaceOrderOut,
    ShippingDetailsIn,
    WalletPaymentIn,
)
from storefront.services.address_service import AddressService
from storefront.services.coupon_service import CouponService
from storefront.services.lock_service import LockService, get_lock_service
from storefront.services.order_service import OrderService
from storefront.services.payment_gateway import PaymentGatewayClient, get_gateway_client
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("/apply-coupons", response_model=CouponResultOut)
def apply_coupon(payload: ApplyCouponIn, user_id: int = Query(...), db: Session = Depends(get_db)):
    return CouponService(db).apply_coupon(user_id, payload.cart_id, payload.coupon_code)


@router.get("/remove-coupon/{cart_id}", response_model=CouponResultOut)
def remove_coupon(cart_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    return CouponService(db).remove_coupon(user_id, cart_id)


@router.post("/place-order", response_model=PlaceOrderOut, status_code=201)
def place_order(
    payload: ShippingDetailsIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    order_id = OrderService(db, lock_service).place_order(user_id, payload.model_dump())
    return PlaceOrderOut(message="Order placed successfully", order_id=order_id)


@router.post("/place-order/address", response_model=PlaceOrderOut, status_code=201)
def place_order_to_address(
    payload: AddressCheckoutIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    shipping = AddressService(db).shipping_details(payload.address_id, user_id, payload.mobile)
    order_id = OrderService(db, lock_service).place_order(user_id, shipping)
    return PlaceOrderOut(message="Order placed successfully", order_id=order_id)


@router.post("", response_model=OrderEnvelope)
def confirm_payment(
    payload: ConfirmPaymentIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_gateway_client),
):
    order = PaymentService(db, gateway).confirm_payment(payload.order_id, payload.payment_method, user_id)
    return OrderEnvelope(message="Order confirmed successfully", order=order)


@router.post("/wallet", response_model=OrderEnvelope)
def pay_with_wallet(
    payload: WalletPaymentIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_gateway_client),
):
    order = PaymentService(db, gateway).process_wallet_payment(user_id, payload.order_id)
    return OrderEnvelope(message="Payment successful using wallet", order=order)


@router.post("/gateway/{order_id}", response_model=GatewayOrderOut)
def create_gateway_order(
    order_id: int,
    payload: GatewayOrderIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_gateway_client),
):
    result = PaymentService(db, gateway).create_gateway_order(order_id, payload.model_dump(), user_id)
    return GatewayOrderOut(message="Gateway order created", **result)
