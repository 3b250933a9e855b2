# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import List, Any
from decimal import Decimal
from datetime import datetime

from storefront.domain.enums import DiscountType, OfferKind, OrderStatus


class Envelope(BaseModel):
    """Common {success, message} part of every JSON response body."""

    success: bool = True
    message: str = ""


# ---------- users & wallet ----------

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str | None = Field(None, max_length=255)


class UserRead(BaseModel):
    id: int
    name: str
    email: str | None = None
    status: str
    wallet_balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class WalletTransactionOut(BaseModel):
    transaction_type: str
    amount: Decimal
    description: str
    order_id: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WalletOut(BaseModel):
    user_id: int
    wallet_balance: Decimal
    transactions: List[WalletTransactionOut]


class SignupStartIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)


class SignupStartOut(Envelope):
    token: str
    expires_at: datetime


class SignupVerifyIn(BaseModel):
    token: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1, max_length=12)


class AddressIn(BaseModel):
    custom_name: str | None = Field(None, max_length=100)
    address_type: str = Field("Home", min_length=1, max_length=20)
    location: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = Field("India", min_length=1)
    landmark: str | None = None
    zip: str = Field(..., min_length=3, max_length=12)
    is_default: bool = False


class AddressOut(BaseModel):
    id: int
    user_id: int
    custom_name: str | None = None
    address_type: str
    location: str
    city: str
    state: str
    country: str
    landmark: str | None = None
    zip: str
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


# ---------- catalog ----------

class CatalogItemOut(BaseModel):
    product_id: int
    name: str
    category: str
    price: Decimal
    discounted_price: Decimal
    stock: int
    is_out_of_stock: bool
    popularity: int
    average_rating: float
    featured: bool

    model_config = ConfigDict(from_attributes=True)


class ProductDetailsOut(BaseModel):
    product: CatalogItemOut
    related_products: List[CatalogItemOut]

    model_config = ConfigDict(from_attributes=True)


class StockOut(BaseModel):
    product_id: int
    stock: int


# ---------- cart ----------

class ItemIn(BaseModel):
    """Add or update a cart line. Quantity replaces the current one."""

    product_id: int = Field(..., gt=0)
    quantity: int


class CartItemOut(BaseModel):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartItemOut]
    shipping_charge: Decimal
    total: Decimal
    applied_coupon: str | None = None
    discount_applied: Decimal
    final_total: Decimal
    version: int


# ---------- checkout ----------

class ApplyCouponIn(BaseModel):
    coupon_code: str = Field(..., alias="couponCode", min_length=1)
    cart_id: int = Field(..., alias="cartId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class CouponResultOut(Envelope):
    discount: Decimal = Decimal("0.00")
    final_total: Decimal
    applied_coupon: str | None = None


class ShippingDetailsIn(BaseModel):
    name: str = Field(..., min_length=1)
    mobile: str = Field(..., min_length=5, max_length=20)
    alternate_mobile: str | None = None
    location: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    landmark: str | None = None
    zip: str = Field(..., min_length=3, max_length=12)


class AddressCheckoutIn(BaseModel):
    """Place an order shipping to a saved address."""

    address_id: int = Field(..., alias="addressId", gt=0)
    mobile: str = Field(..., min_length=5, max_length=20)

    model_config = ConfigDict(populate_by_name=True)


class PlaceOrderOut(Envelope):
    order_id: int


class ConfirmPaymentIn(BaseModel):
    order_id: int = Field(..., alias="orderId", gt=0)
    payment_method: str = Field(..., alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


class WalletPaymentIn(BaseModel):
    order_id: int = Field(..., alias="orderId", gt=0)

    model_config = ConfigDict(populate_by_name=True)


class GatewayOrderIn(BaseModel):
    """Options forwarded to the payment gateway; amount in the smallest currency unit."""

    amount: int = Field(..., gt=0)
    currency: str = "INR"
    receipt: str | None = None
    notes: dict[str, str] = Field(default_factory=dict)


# ---------- orders ----------

class OrderItemOut(BaseModel):
    product_id: int
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    name: str
    mobile: str
    alternate_mobile: str | None = None
    location: str
    city: str
    state: str
    landmark: str | None = None
    zip: str
    items: List[OrderItemOut]
    shipping_charge: Decimal
    total_amount: Decimal
    discount_applied: Decimal
    final_total: Decimal
    applied_coupon: str | None = None
    payment_method: str | None = None
    status: str
    is_cancelled: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderEnvelope(Envelope):
    order: OrderOut


class OrderListOut(Envelope):
    orders: List[OrderOut]


class PaymentPageOut(Envelope):
    order: OrderOut
    wallet_balance: Decimal


class GatewayOrderOut(Envelope):
    gateway_order: dict[str, Any]
    order: OrderOut


class CancelOrderOut(Envelope):
    refunded: bool
    refund_amount: Decimal | None = None


class InvoiceLineOut(BaseModel):
    product_id: int
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class InvoiceOut(Envelope):
    order_id: int
    order_date: datetime
    status: str
    payment_method: str | None = None
    name: str
    mobile: str
    alternate_mobile: str | None = None
    address: str
    items: List[InvoiceLineOut]
    shipping_charge: Decimal
    total_amount: Decimal
    discount_applied: Decimal
    final_total: Decimal


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


# ---------- admin: catalog ----------

class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class CategoryOut(BaseModel):
    id: int
    name: str
    is_active: bool
    offer_id: int | None = None

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    category_id: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    featured: bool = False


class ProductOut(BaseModel):
    id: int
    name: str
    category_id: int
    price: Decimal
    stock: int
    is_out_of_stock: bool
    is_active: bool
    offer_id: int | None = None
    popularity: int

    model_config = ConfigDict(from_attributes=True)


class OfferCreate(BaseModel):
    kind: OfferKind
    product_id: int | None = None
    category_id: int | None = None
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0)
    max_discount_value: Decimal | None = Field(None, gt=0)
    referral_bonus: Decimal | None = None
    valid_from: datetime
    valid_until: datetime

    @model_validator(mode="after")
    def _check_target(self):
        if self.kind == OfferKind.PRODUCT and not self.product_id:
            raise ValueError("product_id is required for a product offer")
        if self.kind == OfferKind.CATEGORY and not self.category_id:
            raise ValueError("category_id is required for a category offer")
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class OfferOut(BaseModel):
    id: int
    kind: str
    product_id: int | None = None
    category_id: int | None = None
    discount_type: str
    discount_value: Decimal
    max_discount_value: Decimal | None = None
    valid_from: datetime
    valid_until: datetime
    status: str

    model_config = ConfigDict(from_attributes=True)


# ---------- admin: coupons ----------

class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0)
    max_discount_value: Decimal | None = Field(None, gt=0)
    min_cart_value: Decimal = Field(Decimal("0"), ge=0)
    valid_from: datetime
    valid_until: datetime
    usage_limit: int | None = Field(None, gt=0)
    is_active: bool = True

    @model_validator(mode="after")
    def _check_window(self):
        if self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class CouponUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    code: str | None = Field(None, min_length=1, max_length=64)
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = Field(None, gt=0)
    max_discount_value: Decimal | None = Field(None, gt=0)
    min_cart_value: Decimal | None = Field(None, ge=0)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    usage_limit: int | None = Field(None, gt=0)
    is_active: bool | None = None


class CouponOut(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: Decimal
    max_discount_value: Decimal | None = None
    min_cart_value: Decimal
    valid_from: datetime
    valid_until: datetime
    usage_limit: int | None = None
    times_used: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CouponEnvelope(Envelope):
    coupon: CouponOut


# ---------- admin: users & reports ----------

class DailySalesOut(BaseModel):
    date: str
    total_sales_revenue: Decimal
    discount_applied: Decimal
    net_sales: Decimal
    number_of_orders: int
    total_items_sold: int

    model_config = ConfigDict(from_attributes=True)


class SalesSummaryOut(BaseModel):
    total_sales_count: int
    overall_order_amount: Decimal
    overall_discount: Decimal
    overall_net_sales: Decimal

    model_config = ConfigDict(from_attributes=True)


class SalesReportOut(Envelope):
    period: str
    start: datetime
    end: datetime
    days: List[DailySalesOut]
    summary: SalesSummaryOut


class TopProductOut(BaseModel):
    id: int
    name: str
    popularity: int

    model_config = ConfigDict(from_attributes=True)


class TopCategoryOut(BaseModel):
    id: int
    name: str
    popularity: int


class BestSellersOut(Envelope):
    top_products: List[TopProductOut]
    top_categories: List[TopCategoryOut]
