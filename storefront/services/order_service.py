# storefront/services/order_service.py
import uuid
from datetime import date
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.enums import OrderStatus, ReportPeriod, UserStatus
from storefront.domain.reporting import DailySales, SalesReport, report_window
from storefront.errors import (
    AlreadyCancelledError,
    CannotCancelError,
    CartEmptyError,
    CartNotFoundError,
    ConcurrencyConflictError,
    InvalidOrderStatusError,
    MissingFieldError,
    NoCancellationRequestError,
    OrderNotFoundError,
    ProductNotFoundError,
    UnauthorizedError,
    UserBlockedError,
    UserNotFoundError,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.coupon_repo import CouponRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.wallet_service import WalletService
from storefront.utils.money import ZERO, as_utc, to_money, utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SHIPPING_FIELDS = (
    "name",
    "mobile",
    "alternate_mobile",
    "location",
    "city",
    "state",
    "landmark",
    "zip",
)

REQUIRED_SHIPPING_FIELDS = ("name", "mobile", "location", "city", "state", "zip")

#status -> cancellation behaviour
CANCEL_REQUEST_STATUSES = (OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value)
REFUNDABLE_STATUSES = (OrderStatus.PENDING.value, OrderStatus.PROCESSED.value)


class OrderService:
    """
    Order domain: finalization of a cart into an order, the read side,
    and the cancellation / refund rules.
    """

    def __init__(
        self,
        db: Session,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.coupons = CouponRepo(db)
        self.users = UserRepo(db)
        self.wallet = WalletService(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # ---------- placement ----------

    def place_order(self, user_id: int, shipping_details: Dict[str, Any]) -> int:
        """
        Use case: turn the user's cart into an order.

        One transaction: order row, one order item per cart line, stock
        decrement per product, coupon usage, cart delete. Any failure rolls
        everything back. A Redis lock per user rejects a parallel checkout.
        """
        for field in REQUIRED_SHIPPING_FIELDS:
            if not str(shipping_details.get(field) or "").strip():
                raise MissingFieldError(field)

        user = self.users.get_user(user_id)
        if user and user.status == UserStatus.INACTIVE.value:
            raise UserBlockedError(user_id)

        owner = uuid.uuid4().hex
        if not self.lock_service.acquire_checkout_lock(user_id, owner):
            logger.warning(f"Checkout already in progress for user {user_id}")
            raise ConcurrencyConflictError("Checkout already in progress for this user")

        try:
            order_id = self._place_order(user_id, shipping_details)
        finally:
            self.lock_service.release_checkout_lock(user_id, owner)

        logger.info(f"Order {order_id} placed by user {user_id}")
        self.notification_service.send_order_notification(user_id, order_id, "placed")
        return order_id

    def _place_order(self, user_id: int, shipping_details: Dict[str, Any]) -> int:
        cart = self.carts.get_cart_by_user(user_id)
        if not cart:
            raise CartNotFoundError(user_id)
        if not cart.items:
            raise CartEmptyError()

        try:
            order = OrderModel(
                user_id=user_id,
                **{f: shipping_details.get(f) for f in SHIPPING_FIELDS},
                shipping_charge=to_money(cart.shipping_charge),
                total_amount=to_money(cart.total),
                discount_applied=to_money(cart.discount_applied),
                final_total=to_money(cart.final_total),
                applied_coupon=cart.applied_coupon or None,
                payment_method=None,
                status=OrderStatus.PENDING.value,
                is_cancelled=False,
            )
            self.repo.add_order(order)

            for line in cart.items:
                self.repo.add_order_item(
                    order,
                    OrderItemModel(product_id=line.product_id, quantity=line.quantity),
                )
                if self.products.decrement_stock(line.product_id, line.quantity) == 0:
                    raise ProductNotFoundError(line.product_id)

            if cart.applied_coupon:
                self.coupons.increment_usage(cart.applied_coupon)

            #single-use cart; the next add-to-cart creates a fresh one
            self.carts.delete_cart(cart)

            order_id = order.id
            self.repo.commit()
        except Exception as e:
            logger.error(f"Order placement for user {user_id} rolled back: {e}")
            self.repo.rollback()
            raise

        return order_id

    # ---------- queries ----------

    def get_order(self, order_id: int, user_id: int | None = None) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        if user_id is not None and order.user_id != user_id:
            raise UnauthorizedError("Order belongs to another user")

        return order

    def list_user_orders(self, user_id: int) -> list[OrderModel]:
        return self.repo.list_user_orders(user_id)

    def get_order_for_payment(self, order_id: int, user_id: int) -> Dict[str, Any]:
        order = self.get_order(order_id, user_id)
        user = self.users.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        return {"order": order, "wallet_balance": to_money(user.wallet_balance)}

    def get_invoice(self, order_id: int, user_id: int) -> Dict[str, Any]:
        """
        Invoice view of an order: the totals and shipping snapshot plus one
        line per item with the product name and its current unit price.
        """
        order = self.get_order(order_id, user_id)

        lines = []
        for item, product in self.repo.list_invoice_lines(order.id):
            unit_price = to_money(product.price)
            lines.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "line_total": to_money(unit_price * item.quantity),
                }
            )

        address = f"{order.location}, {order.city}, {order.state} - {order.zip}"
        return {
            "order_id": order.id,
            "order_date": order.created_at,
            "status": order.status,
            "payment_method": order.payment_method,
            "name": order.name,
            "mobile": order.mobile,
            "alternate_mobile": order.alternate_mobile,
            "address": address,
            "items": lines,
            "shipping_charge": to_money(order.shipping_charge),
            "total_amount": to_money(order.total_amount),
            "discount_applied": to_money(order.discount_applied),
            "final_total": to_money(order.final_total),
        }

    # ---------- cancellation ----------

    def _refund(self, order: OrderModel) -> Decimal:
        #an order whose final total went to or below zero has nothing to refund
        amount = max(to_money(order.final_total), ZERO)
        if amount > ZERO:
            self.wallet.credit(
                order.user_id,
                amount,
                f"Refund for cancelled order #{order.id}",
                order_id=order.id,
            )
        return amount

    def cancel_order(self, order_id: int, user_id: int) -> Dict[str, Any]:
        """
        Shipped/Delivered -> cancellation request (is_cancelled), status kept.
        Pending/Processed -> status Cancelled, final_total credited to the wallet.
        Cancelled -> AlreadyCancelled; anything else -> CannotCancel.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)

        if order.user_id != user_id:
            raise UnauthorizedError("Unauthorized to cancel this order")

        status = order.status

        if status in CANCEL_REQUEST_STATUSES:
            self._transition(order, status, {"is_cancelled": True})
            self.repo.commit()
            logger.info(f"Cancellation requested for order {order_id} ({status})")
            return {
                "message": "Cancellation request submitted for shipped/delivered order",
                "refunded": False,
                "refund_amount": None,
            }

        if status in REFUNDABLE_STATUSES:
            amount = self._cancel_and_refund(order)

            logger.info(f"Order {order_id} cancelled, {amount} refunded to wallet of user {user_id}")
            self.notification_service.send_order_notification(user_id, order_id, "cancelled")
            return {
                "message": "Order cancelled successfully and refund processed to wallet",
                "refunded": True,
                "refund_amount": amount,
            }

        if status == OrderStatus.CANCELLED.value:
            raise AlreadyCancelledError(order_id)

        raise CannotCancelError(order_id, status)

    def _cancel_and_refund(self, order: OrderModel) -> Decimal:
        """Status Cancelled and the wallet credit commit together, or not at all."""
        try:
            self._transition(order, order.status, {"status": OrderStatus.CANCELLED.value})
            amount = self._refund(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        return amount

    def _transition(self, order: OrderModel, expected_status: str, new_data: Dict[str, Any]):
        if self.repo.update_order_status(order.id, expected_status, new_data) == 0:
            self.repo.rollback()
            raise ConcurrencyConflictError(
                f"Order {order.id} changed while it was being updated, please retry"
            )

    # ---------- admin ----------

    def list_orders(self) -> list[OrderModel]:
        return self.repo.list_orders()

    def update_order_status(self, order_id: int, status: str) -> OrderModel:
        try:
            new_status = OrderStatus(status).value
        except ValueError:
            raise InvalidOrderStatusError(status)

        order = self.get_order(order_id)
        #Cancelled is terminal: the refund has already been paid out
        if order.status == OrderStatus.CANCELLED.value:
            raise AlreadyCancelledError(order_id)

        if new_status == OrderStatus.CANCELLED.value:
            amount = self._cancel_and_refund(order)
            logger.info(f"Order {order_id} cancelled by admin, {amount} refunded")
            self.notification_service.send_order_notification(order.user_id, order_id, "cancelled")
            return self.repo.refresh(order)

        self._transition(order, order.status, {"status": new_status})
        self.repo.commit()

        logger.info(f"Order {order_id} status -> {new_status}")
        return self.repo.refresh(order)

    def approve_cancellation(self, order_id: int) -> Dict[str, Any]:
        """
        Resolve a post-shipment cancellation request: the order becomes
        Cancelled and final_total goes back to the wallet.
        """
        order = self.get_order(order_id)
        if not order.is_cancelled or order.status not in CANCEL_REQUEST_STATUSES:
            raise NoCancellationRequestError(order_id)

        amount = self._cancel_and_refund(order)

        logger.info(f"Cancellation of order {order_id} approved, {amount} refunded")
        self.notification_service.send_order_notification(order.user_id, order_id, "cancelled")
        return {
            "message": "Cancellation approved and refund processed to wallet",
            "refunded": True,
            "refund_amount": amount,
        }

    # ---------- reporting ----------

    def sales_report(
        self,
        period: ReportPeriod,
        start_date: date | None = None,
        end_date: date | None = None,
        today: date | None = None,
    ) -> SalesReport:
        """Per-day sales inside the period; cancelled orders and open cancellation requests are left out."""
        start, end = report_window(period, today or utcnow().date(), start_date, end_date)
        report = SalesReport(period=period, start=start, end=end)

        days: Dict[str, DailySales] = {}
        for order in self.repo.list_sales_between(start, end):
            key = as_utc(order.created_at).date().isoformat()
            day = days.setdefault(key, DailySales(date=key))

            day.total_sales_revenue += to_money(order.total_amount)
            day.discount_applied += to_money(order.discount_applied)
            day.net_sales += to_money(order.final_total)
            day.number_of_orders += 1
            day.total_items_sold += sum(item.quantity for item in order.items)

        report.days = [days[key] for key in sorted(days)]

        summary = report.summary
        for day in report.days:
            summary.total_sales_count += day.number_of_orders
            summary.overall_order_amount += day.total_sales_revenue
            summary.overall_discount += day.discount_applied
            summary.overall_net_sales += day.net_sales

        logger.info(f"Sales report {period.value}: {summary.total_sales_count} orders from {start:%Y-%m-%d}")
        return report
