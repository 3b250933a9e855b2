# storefront/services/coupon_service.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.schemas import CouponCreate, CouponUpdate
from storefront.errors import (
    CartNotFoundError,
    ConcurrencyConflictError,
    CouponAlreadyAppliedError,
    CouponCodeExistsError,
    CouponExpiredError,
    CouponNotFoundError,
    CouponNotYetValidError,
    CouponUsageExhaustedError,
    InvalidCouponError,
    MinCartValueNotMetError,
    NoCouponAppliedError,
    UnauthorizedError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.services import pricing
from storefront.utils.money import to_money, utcnow, as_utc
from storefront.utils.settings import CLAMP_FIXED_COUPON_DISCOUNT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CouponService:
    """
    Coupon engine. Per cart: NoCoupon -> CouponApplied -> NoCoupon.
    At most one coupon per cart; the discount is computed against cart.total.
    """

    def __init__(self, db: Session, clamp_fixed: bool = CLAMP_FIXED_COUPON_DISCOUNT):
        self.repo = CouponRepo(db)
        self.carts = CartRepo(db)
        self.clamp_fixed = clamp_fixed

    def validate_coupon(self, code: str, now: datetime | None = None) -> CouponModel:
        coupon = self.repo.get_by_code(code)
        if not coupon or not coupon.is_active:
            raise InvalidCouponError(code)

        now = now or utcnow()
        if now < as_utc(coupon.valid_from):
            raise CouponNotYetValidError(code, coupon.valid_from)
        if now > as_utc(coupon.valid_until):
            raise CouponExpiredError(code, coupon.valid_until)

        if coupon.usage_limit is not None and coupon.times_used >= coupon.usage_limit:
            raise CouponUsageExhaustedError(code)

        return coupon

    def _get_owned_cart(self, user_id: int, cart_id: int):
        cart = self.carts.get_cart(cart_id)
        if not cart:
            raise CartNotFoundError(cart_id)
        if cart.user_id != user_id:
            raise UnauthorizedError("Cart belongs to another user")
        return cart

    def apply_coupon(self, user_id: int, cart_id: int, code: str, now: datetime | None = None) -> Dict[str, Any]:
        cart = self._get_owned_cart(user_id, cart_id)

        if cart.applied_coupon:
            logger.warning(f"Cart {cart_id} already carries coupon {cart.applied_coupon}")
            raise CouponAlreadyAppliedError(cart.applied_coupon)

        coupon = self.validate_coupon(code, now)

        cart_total = to_money(cart.total)
        if cart_total < to_money(coupon.min_cart_value):
            raise MinCartValueNotMetError(code, to_money(coupon.min_cart_value))

        discount = pricing.coupon_discount(coupon, cart_total, clamp_fixed=self.clamp_fixed)

        #version + "no coupon yet" in one conditional update
        rowcount = self.carts.update_cart_version(cart.id, cart.version, require_no_coupon=True)
        if rowcount == 0:
            self.carts.rollback()
            raise ConcurrencyConflictError("Cart was modified by another request, please retry")

        try:
            cart.applied_coupon = coupon.code
            cart.discount_applied = discount
            cart.calculate_totals()
            self.carts.commit()
        except Exception:
            self.carts.rollback()
            raise

        logger.info(f"Coupon {coupon.code} applied to cart {cart_id}, discount {discount}")
        return {
            "message": f"Coupon {coupon.code} applied successfully",
            "discount": discount,
            "final_total": to_money(cart.final_total),
            "applied_coupon": cart.applied_coupon,
        }

    def remove_coupon(self, user_id: int, cart_id: int) -> Dict[str, Any]:
        cart = self._get_owned_cart(user_id, cart_id)

        if not cart.applied_coupon:
            raise NoCouponAppliedError()

        removed = cart.applied_coupon
        rowcount = self.carts.update_cart_version(cart.id, cart.version)
        if rowcount == 0:
            self.carts.rollback()
            raise ConcurrencyConflictError("Cart was modified by another request, please retry")

        try:
            cart.applied_coupon = None
            cart.discount_applied = Decimal("0.00")
            cart.calculate_totals()
            self.carts.commit()
        except Exception:
            self.carts.rollback()
            raise

        logger.info(f"Coupon {removed} removed from cart {cart_id}")
        return {
            "message": "Coupon removed successfully",
            "discount": Decimal("0.00"),
            "final_total": to_money(cart.final_total),
            "applied_coupon": None,
        }

    # ---------- admin ----------

    def list_coupons(self) -> list[CouponModel]:
        return self.repo.list_coupons()

    def get_coupon(self, coupon_id: int) -> CouponModel:
        coupon = self.repo.get_coupon(coupon_id)
        if not coupon:
            raise CouponNotFoundError(coupon_id)
        return coupon

    def create_coupon(self, payload: CouponCreate) -> CouponModel:
        if self.repo.get_by_code(payload.code):
            raise CouponCodeExistsError(payload.code)

        coupon = CouponModel(
            code=payload.code,
            discount_type=payload.discount_type.value,
            discount_value=payload.discount_value,
            max_discount_value=payload.max_discount_value,
            min_cart_value=payload.min_cart_value,
            valid_from=payload.valid_from,
            valid_until=payload.valid_until,
            usage_limit=payload.usage_limit,
            times_used=0,
            is_active=payload.is_active,
        )
        created = self.repo.create_coupon(coupon)
        logger.info(f"Coupon {created.code} created (id {created.id})")
        return created

    def update_coupon(self, coupon_id: int, payload: CouponUpdate) -> CouponModel:
        coupon = self.get_coupon(coupon_id)
        changes = payload.model_dump(exclude_unset=True)

        new_code = changes.get("code")
        if new_code and new_code != coupon.code:
            other = self.repo.get_by_code(new_code)
            if other and other.id != coupon.id:
                raise CouponCodeExistsError(new_code)

        for field, value in changes.items():
            #only the cap and the usage limit may be cleared
            if value is None and field not in ("max_discount_value", "usage_limit"):
                continue
            if field == "discount_type":
                value = value.value
            setattr(coupon, field, value)

        updated = self.repo.save(coupon)
        logger.info(f"Coupon {updated.id} updated: {sorted(changes)}")
        return updated

    def delete_coupon(self, coupon_id: int) -> None:
        coupon = self.get_coupon(coupon_id)
        self.repo.delete_coupon(coupon)
        logger.info(f"Coupon {coupon_id} deleted")

    def toggle_coupon(self, coupon_id: int) -> CouponModel:
        coupon = self.get_coupon(coupon_id)
        coupon.is_active = not coupon.is_active
        updated = self.repo.save(coupon)
        logger.info(f"Coupon {updated.code} is_active={updated.is_active}")
        return updated
