"""Exceptions raised by the storefront services.

Every error carries the HTTP status the API layer answers with; the
families mirror how a caller should react (fix the input, pick another
payment method, retry later, ...).
"""


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    status_code = 500


# --- not found ---


class NotFoundError(StorefrontError):
    status_code = 404

    entity = "Resource"

    def __init__(self, entity_id=None, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} not found")


class ProductNotFoundError(NotFoundError):
    entity = "Product"


class CategoryNotFoundError(NotFoundError):
    entity = "Category"


class OfferNotFoundError(NotFoundError):
    entity = "Offer"


class CartNotFoundError(NotFoundError):
    entity = "Cart"


class OrderNotFoundError(NotFoundError):
    entity = "Order"


class CouponNotFoundError(NotFoundError):
    entity = "Coupon"


class UserNotFoundError(NotFoundError):
    entity = "User"


class AddressNotFoundError(NotFoundError):
    entity = "Address"


# --- duplicates ---


class AlreadyExistsError(StorefrontError):
    status_code = 400


class CouponAlreadyAppliedError(AlreadyExistsError):
    def __init__(self, code: str | None = None):
        self.code = code
        super().__init__("A coupon has already been applied to this cart")


class CouponCodeExistsError(AlreadyExistsError):
    def __init__(self, code: str):
        self.code = code
        super().__init__("A coupon with this code already exists")


class CategoryExistsError(AlreadyExistsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Category already exists")


class ProductExistsError(AlreadyExistsError):
    def __init__(self, name: str):
        self.name = name
        super().__init__("Product with this name already exists")


class EmailInUseError(AlreadyExistsError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("Email is already in use")


# --- invalid input ---


class InvalidInputError(StorefrontError):
    status_code = 400


class InvalidQuantityError(InvalidInputError):
    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__("Quantity must be at least 1")


class InvalidPaymentMethodError(InvalidInputError):
    def __init__(self, method):
        self.method = method
        super().__init__(f"Unsupported payment method: {method}")


class InvalidOrderStatusError(InvalidInputError):
    def __init__(self, status):
        self.status = status
        super().__init__(f"Unknown order status: {status}")


class MissingFieldError(InvalidInputError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class InvalidSignupError(InvalidInputError):
    pass


class InvalidReportRangeError(InvalidInputError):
    pass


# --- business rules ---


class BusinessRuleViolation(StorefrontError):
    status_code = 400


class InvalidCouponError(BusinessRuleViolation):
    def __init__(self, code: str):
        self.code = code
        super().__init__("Invalid or inactive coupon code")


class CouponNotYetValidError(BusinessRuleViolation):
    def __init__(self, code: str, valid_from):
        self.code = code
        self.valid_from = valid_from
        super().__init__(f"Coupon {code} is not valid yet. Valid from {valid_from:%Y-%m-%d}")


class CouponExpiredError(BusinessRuleViolation):
    def __init__(self, code: str, valid_until):
        self.code = code
        self.valid_until = valid_until
        super().__init__(f"Coupon {code} expired on {valid_until:%Y-%m-%d}")


class CouponUsageExhaustedError(BusinessRuleViolation):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon {code} has reached its usage limit")


class MinCartValueNotMetError(BusinessRuleViolation):
    def __init__(self, code: str, min_cart_value):
        self.code = code
        self.min_cart_value = min_cart_value
        super().__init__(f"Coupon {code} requires a cart total of at least {min_cart_value}")


class NoCouponAppliedError(BusinessRuleViolation):
    def __init__(self):
        super().__init__("No coupon applied to this cart")


class CartEmptyError(BusinessRuleViolation):
    def __init__(self):
        super().__init__("Cannot place order with empty cart")


class OutOfStockError(BusinessRuleViolation):
    def __init__(self, product_id, available: int):
        self.product_id = product_id
        self.available = available
        super().__init__(f"Only {available} item(s) left in stock")


class CODLimitExceededError(BusinessRuleViolation):
    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"Cash on Delivery is not available for orders above {limit}")


class InsufficientBalanceError(BusinessRuleViolation):
    def __init__(self, required, available):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient wallet balance. Required: {required}, Available: {available}"
        )


class OrderNotPayableError(BusinessRuleViolation):
    def __init__(self, order_id, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(f"Order {order_id} is not awaiting payment (status: {status})")


class AlreadyCancelledError(BusinessRuleViolation):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__("Order is already cancelled")


class CannotCancelError(BusinessRuleViolation):
    def __init__(self, order_id, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__("Order cannot be cancelled at this stage. Please contact support.")


class NoCancellationRequestError(BusinessRuleViolation):
    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} has no pending cancellation request")


# --- ownership ---


class UnauthorizedError(StorefrontError):
    status_code = 403

    def __init__(self, message: str = "Unauthorized access"):
        super().__init__(message)


class UserBlockedError(UnauthorizedError):
    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__("User account is blocked")


# --- concurrency ---


class ConcurrencyConflictError(StorefrontError):
    """Raised when an optimistic version check or a lock is lost to another request."""

    status_code = 409


# --- external collaborators ---


class ExternalDependencyError(StorefrontError):
    status_code = 502


class GatewayError(ExternalDependencyError):
    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)
