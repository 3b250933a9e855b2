# storefront/api/routers/admin.py
from dataclasses import asdict
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.enums import ReportPeriod
from storefront.domain.schemas import (
    BestSellersOut,
    CancelOrderOut,
    CategoryCreate,
    CategoryOut,
    CouponCreate,
    CouponEnvelope,
    CouponOut,
    CouponUpdate,
    Envelope,
    OfferCreate,
    OfferOut,
    OrderEnvelope,
    OrderListOut,
    OrderStatusUpdate,
    ProductCreate,
    ProductOut,
    SalesReportOut,
    UserRead,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.coupon_service import CouponService
from storefront.services.lock_service import LockService, get_lock_service
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------- catalog ----------

@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return CatalogService(db).create_category(payload)


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return CatalogService(db).create_product(payload)


@router.get("/offers", response_model=List[OfferOut])
def list_offers(db: Session = Depends(get_db)):
    return CatalogService(db).list_offers()


@router.post("/offers", response_model=OfferOut, status_code=201)
def create_offer(payload: OfferCreate, db: Session = Depends(get_db)):
    return CatalogService(db).create_offer(payload)


@router.patch("/offers/{offer_id}/toggle", response_model=OfferOut)
def toggle_offer(offer_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).toggle_offer(offer_id)


# ---------- coupons ----------

@router.get("/coupons", response_model=List[CouponOut])
def list_coupons(db: Session = Depends(get_db)):
    return CouponService(db).list_coupons()


@router.post("/coupons", response_model=CouponEnvelope, status_code=201)
def create_coupon(payload: CouponCreate, db: Session = Depends(get_db)):
    coupon = CouponService(db).create_coupon(payload)
    return CouponEnvelope(message="Coupon created successfully", coupon=coupon)


@router.get("/coupons/{coupon_id}", response_model=CouponOut)
def get_coupon(coupon_id: int, db: Session = Depends(get_db)):
    return CouponService(db).get_coupon(coupon_id)


@router.put("/coupons/{coupon_id}", response_model=CouponEnvelope)
def update_coupon(coupon_id: int, payload: CouponUpdate, db: Session = Depends(get_db)):
    coupon = CouponService(db).update_coupon(coupon_id, payload)
    return CouponEnvelope(message="Coupon updated successfully", coupon=coupon)


@router.delete("/coupons/{coupon_id}", response_model=Envelope)
def delete_coupon(coupon_id: int, db: Session = Depends(get_db)):
    CouponService(db).delete_coupon(coupon_id)
    return Envelope(message="Coupon deleted successfully")


@router.patch("/coupons/{coupon_id}/toggle", response_model=CouponEnvelope)
def toggle_coupon(coupon_id: int, db: Session = Depends(get_db)):
    coupon = CouponService(db).toggle_coupon(coupon_id)
    state = "activated" if coupon.is_active else "deactivated"
    return CouponEnvelope(message=f"Coupon {state} successfully", coupon=coupon)


# ---------- orders ----------

@router.get("/orders", response_model=OrderListOut)
def list_orders(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return OrderListOut(orders=OrderService(db, lock_service).list_orders())


@router.patch("/orders/{order_id}/status", response_model=OrderEnvelope)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    order = OrderService(db, lock_service).update_order_status(order_id, payload.status.value)
    return OrderEnvelope(message=f"Order status updated to {order.status}", order=order)


@router.post("/orders/{order_id}/approve-cancellation", response_model=CancelOrderOut)
def approve_cancellation(
    order_id: int,
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    return OrderService(db, lock_service).approve_cancellation(order_id)


# ---------- users ----------

@router.get("/users", response_model=List[UserRead])
def list_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.patch("/users/{user_id}/toggle", response_model=UserRead)
def toggle_user_status(user_id: int, db: Session = Depends(get_db)):
    return UserService(db).toggle_user_status(user_id)


# ---------- reports ----------

@router.get("/reports/sales", response_model=SalesReportOut)
def sales_report(
    period: ReportPeriod = Query(ReportPeriod.DAILY, alias="filter"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
):
    report = OrderService(db, lock_service).sales_report(period, start_date, end_date)
    return SalesReportOut(
        period=report.period.value,
        start=report.start,
        end=report.end,
        days=[asdict(day) for day in report.days],
        summary=asdict(report.summary),
    )


@router.get("/reports/best-sellers", response_model=BestSellersOut)
def best_sellers(db: Session = Depends(get_db)):
    return BestSellersOut(**CatalogService(db).best_sellers())
