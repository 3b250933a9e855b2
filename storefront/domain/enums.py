# storefront/domain/enums.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMethod(str, Enum):
    COD = "COD"
    RAZORPAY = "Razorpay"
    WALLET = "Wallet"


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class OfferKind(str, Enum):
    PRODUCT = "product"
    CATEGORY = "category"
    REFERRAL = "referral"


class OfferStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class TransactionType(str, Enum):
    CREDIT = "Credit"
    DEBIT = "Debit"


class UserStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ReportPeriod(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
    CUSTOM = "Custom Date Range"
