"""Tests for coupon administration."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.domain.schemas import CouponCreate, CouponUpdate
from storefront.errors import CouponCodeExistsError, CouponNotFoundError
from storefront.services.coupon_service import CouponService

NOW = datetime.now(timezone.utc)


def new_coupon(code="WELCOME", **kw):
    data = {
        "code": code,
        "discount_type": "percentage",
        "discount_value": Decimal("15"),
        "valid_from": NOW - timedelta(days=1),
        "valid_until": NOW + timedelta(days=30),
    }
    data.update(kw)
    return CouponCreate(**data)


class TestCouponAdmin:
    def test_create(self, db):
        coupon = CouponService(db).create_coupon(new_coupon(usage_limit=100))
        assert coupon.id is not None
        assert coupon.times_used == 0
        assert coupon.usage_limit == 100
        assert coupon.discount_type == "percentage"

    def test_duplicate_code(self, db, factory):
        factory.coupon(code="WELCOME")
        with pytest.raises(CouponCodeExistsError):
            CouponService(db).create_coupon(new_coupon())

    def test_window_validated(self):
        with pytest.raises(ValidationError):
            new_coupon(valid_until=NOW - timedelta(days=2))

    def test_list(self, db, factory):
        factory.coupon(code="A")
        factory.coupon(code="B")
        assert [c.code for c in CouponService(db).list_coupons()] == ["A", "B"]

    def test_partial_update(self, db, factory):
        coupon = factory.coupon(code="A", discount_value="10", max_discount_value="50")

        updated = CouponService(db).update_coupon(coupon.id, CouponUpdate(discount_value=Decimal("12")))

        assert updated.discount_value == Decimal("12.00")
        assert updated.max_discount_value == Decimal("50.00")
        assert updated.code == "A"

    def test_update_clears_cap(self, db, factory):
        coupon = factory.coupon(code="A", max_discount_value="50")
        updated = CouponService(db).update_coupon(coupon.id, CouponUpdate(max_discount_value=None))
        assert updated.max_discount_value is None

    def test_rename_to_taken_code(self, db, factory):
        factory.coupon(code="A")
        b = factory.coupon(code="B")
        with pytest.raises(CouponCodeExistsError):
            CouponService(db).update_coupon(b.id, CouponUpdate(code="A"))

    def test_toggle(self, db, factory):
        coupon = factory.coupon(code="A")
        svc = CouponService(db)
        assert svc.toggle_coupon(coupon.id).is_active is False
        assert svc.toggle_coupon(coupon.id).is_active is True

    def test_delete(self, db, factory):
        coupon = factory.coupon(code="A")
        svc = CouponService(db)
        svc.delete_coupon(coupon.id)
        with pytest.raises(CouponNotFoundError):
            svc.get_coupon(coupon.id)
