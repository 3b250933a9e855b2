# storefront/services/pricing.py
"""
Pricing engine: pure functions, no session, no I/O.

Offers and coupons share the same discount rules:
- percentage: price * value / 100, capped by max_discount_value when set
- fixed: flat value
"""
from datetime import datetime
from decimal import Decimal

from storefront.domain.enums import DiscountType
from storefront.utils.money import ZERO, to_money, utcnow, as_utc


def discount_amount(discount_type, discount_value, base, max_discount_value=None) -> Decimal:
    base = to_money(base)
    value = to_money(discount_value)

    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        discount = to_money(base * value / Decimal(100))
        if max_discount_value and discount > to_money(max_discount_value):
            discount = to_money(max_discount_value)
        return discount

    return value


def is_within_window(valid_from: datetime, valid_until: datetime, now: datetime | None = None) -> bool:
    now = now or utcnow()
    return as_utc(valid_from) <= now <= as_utc(valid_until)


def is_offer_eligible(offer, now: datetime | None = None) -> bool:
    if offer is None or not offer.is_active:
        return False
    return is_within_window(offer.valid_from, offer.valid_until, now)


def offer_discount(base_price, offer) -> Decimal:
    #never discount below zero
    discount = discount_amount(
        offer.discount_type,
        offer.discount_value,
        base_price,
        offer.max_discount_value,
    )
    return min(discount, to_money(base_price))


def best_offer(base_price, product_offer=None, category_offer=None, now: datetime | None = None):
    """
    Pick the eligible offer with the larger absolute discount.
    Ties go to the product offer (more specific). Returns None when nothing applies.
    """
    candidates = [o for o in (product_offer, category_offer) if is_offer_eligible(o, now)]
    if not candidates:
        return None

    #max() keeps the first of equal elements, product offer is first
    return max(candidates, key=lambda o: offer_discount(base_price, o))


def discounted_price(base_price, product_offer=None, category_offer=None, now: datetime | None = None) -> Decimal:
    base_price = to_money(base_price)
    offer = best_offer(base_price, product_offer, category_offer, now)
    if offer is None:
        return base_price
    return max(to_money(base_price - offer_discount(base_price, offer)), ZERO)


def coupon_discount(coupon, cart_total, clamp_fixed: bool = False) -> Decimal:
    """
    Discount of a coupon against the cart total (never against final_total,
    so discounts do not compound). Fixed discounts are not limited by the
    total unless clamp_fixed is set.
    """
    discount = discount_amount(
        coupon.discount_type,
        coupon.discount_value,
        cart_total,
        coupon.max_discount_value,
    )
    if clamp_fixed:
        discount = min(discount, max(to_money(cart_total), ZERO))
    return discount
