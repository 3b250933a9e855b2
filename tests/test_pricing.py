"""Tests for the pricing rules shared by offers and coupons."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

from storefront.services import pricing

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_offer(discount_type="percentage", value="10", cap=None, status="active", days=1):
    return SimpleNamespace(
        discount_type=discount_type,
        discount_value=Decimal(value),
        max_discount_value=Decimal(cap) if cap else None,
        valid_from=NOW - timedelta(days=days),
        valid_until=NOW + timedelta(days=days),
        status=status,
        is_active=status == "active",
    )


class TestDiscountAmount:
    def test_percentage(self):
        assert pricing.discount_amount("percentage", "10", "250") == Decimal("25.00")

    def test_percentage_capped(self):
        assert pricing.discount_amount("percentage", "20", "1000", "100") == Decimal("100.00")

    def test_percentage_below_cap(self):
        assert pricing.discount_amount("percentage", "5", "1000", "100") == Decimal("50.00")

    def test_fixed_ignores_base(self):
        assert pricing.discount_amount("fixed", "150", "80") == Decimal("150.00")

    def test_rounds_half_up(self):
        assert pricing.discount_amount("percentage", "12.5", "0.99") == Decimal("0.12")


class TestBestOffer:
    def test_larger_discount_wins(self):
        product_offer = make_offer(value="10")
        category_offer = make_offer(value="15")
        assert pricing.best_offer(Decimal("100"), product_offer, category_offer, NOW) is category_offer

    def test_tie_goes_to_product_offer(self):
        product_offer = make_offer(value="10")
        category_offer = make_offer(discount_type="fixed", value="10")
        assert pricing.best_offer(Decimal("100"), product_offer, category_offer, NOW) is product_offer

    def test_inactive_offer_ignored(self):
        product_offer = make_offer(value="50", status="expired")
        category_offer = make_offer(value="5")
        assert pricing.best_offer(Decimal("100"), product_offer, category_offer, NOW) is category_offer

    def test_offer_outside_window_ignored(self):
        offer = make_offer(value="50")
        later = NOW + timedelta(days=3)
        assert pricing.best_offer(Decimal("100"), offer, None, later) is None

    def test_no_offers(self):
        assert pricing.best_offer(Decimal("100"), None, None, NOW) is None


class TestDiscountedPrice:
    def test_without_offer_is_base_price(self):
        assert pricing.discounted_price("99.9", None, None, NOW) == Decimal("99.90")

    def test_percentage_offer(self):
        assert pricing.discounted_price("200", make_offer(value="25"), None, NOW) == Decimal("150.00")

    def test_never_below_zero(self):
        offer = make_offer(discount_type="fixed", value="150")
        assert pricing.discounted_price("100", offer, None, NOW) == Decimal("0.00")


class TestCouponDiscount:
    def test_percentage_against_total(self):
        coupon = make_offer(value="20", cap="100")
        assert pricing.coupon_discount(coupon, Decimal("1000")) == Decimal("100.00")

    def test_fixed_not_clamped_by_default(self):
        coupon = make_offer(discount_type="fixed", value="150")
        assert pricing.coupon_discount(coupon, Decimal("80")) == Decimal("150.00")

    def test_fixed_clamped_when_enabled(self):
        coupon = make_offer(discount_type="fixed", value="150")
        assert pricing.coupon_discount(coupon, Decimal("80"), clamp_fixed=True) == Decimal("80.00")
