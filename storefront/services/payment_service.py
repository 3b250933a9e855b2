# storefront/services/payment_service.py
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.enums import OrderStatus, PaymentMethod
from storefront.errors import (
    CODLimitExceededError,
    ConcurrencyConflictError,
    InsufficientBalanceError,
    InvalidPaymentMethodError,
    OrderNotFoundError,
    OrderNotPayableError,
    UnauthorizedError,
    UserNotFoundError,
)
from storefront.repos.order_repo import OrderRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.services.wallet_service import WalletService
from storefront.utils.money import ZERO, to_money
from storefront.utils.settings import COD_LIMIT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Payment engine: COD / gateway confirmation, wallet payment, gateway order creation.
    A successful payment moves the order Pending -> Processed.
    """

    def __init__(
        self,
        db: Session,
        gateway_client: PaymentGatewayClient | None = None,
        cod_limit: Decimal = COD_LIMIT,
    ):
        self.repo = OrderRepo(db)
        self.users = UserRepo(db)
        self.wallet = WalletService(db)
        self.gateway_client = gateway_client or PaymentGatewayClient()
        self.cod_limit = to_money(cod_limit)

    def validate_cod_eligibility(self, amount) -> bool:
        #reject outright, never cap
        if to_money(amount) > self.cod_limit:
            logger.warning(f"COD rejected: {amount} above limit {self.cod_limit}")
            raise CODLimitExceededError(self.cod_limit)
        return True

    def _get_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    @staticmethod
    def _ensure_payable(order: OrderModel):
        if order.status != OrderStatus.PENDING.value:
            raise OrderNotPayableError(order.id, order.status)

    def _mark_processed(self, order: OrderModel, method: PaymentMethod):
        rowcount = self.repo.update_order_status(
            order.id,
            OrderStatus.PENDING.value,
            {"payment_method": method.value, "status": OrderStatus.PROCESSED.value},
        )
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflictError(f"Order {order.id} was already paid or changed")

    def confirm_payment(self, order_id: int, payment_method: str, user_id: int | None = None) -> OrderModel:
        order = self._get_order(order_id)

        if user_id is not None and order.user_id != user_id:
            raise UnauthorizedError("Order belongs to another user")

        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise InvalidPaymentMethodError(payment_method)

        #wallet payments go through process_wallet_payment (debit + ledger)
        if method == PaymentMethod.WALLET:
            raise InvalidPaymentMethodError(payment_method)

        self._ensure_payable(order)

        if method == PaymentMethod.COD:
            self.validate_cod_eligibility(order.final_total)

        self._mark_processed(order, method)
        self.repo.commit()

        logger.info(f"Order {order_id} confirmed with {method.value}")
        return self.repo.refresh(order)

    def process_wallet_payment(self, user_id: int, order_id: int) -> OrderModel:
        """
        Wallet debit, ledger row and order status change commit together;
        the debit is conditional on the balance so a parallel spend cannot
        push the wallet below zero.
        """
        user = self.users.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        order = self._get_order(order_id)

        if order.user_id != user_id:
            raise UnauthorizedError("Order belongs to another user")

        self._ensure_payable(order)

        amount = max(to_money(order.final_total), ZERO)
        balance = to_money(user.wallet_balance)
        if balance < amount:
            logger.warning(f"Wallet payment for order {order_id}: balance {balance} < {amount}")
            raise InsufficientBalanceError(amount, balance)

        try:
            #a zero total leaves the wallet and the ledger untouched, like a zero refund
            if amount > ZERO:
                self.wallet.debit(
                    user_id,
                    amount,
                    f"Payment for Order ID: {order_id}",
                    order_id=order_id,
                )
            self._mark_processed(order, PaymentMethod.WALLET)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Order {order_id} paid from wallet of user {user_id}: {amount}")
        return self.repo.refresh(order)

    def create_gateway_order(
        self, order_id: int, options: Dict[str, Any], user_id: int | None = None
    ) -> Dict[str, Any]:
        order = self._get_order(order_id)

        if user_id is not None and order.user_id != user_id:
            raise UnauthorizedError("Order belongs to another user")

        self._ensure_payable(order)

        #GatewayError propagates, nothing is swallowed here
        gateway_order = self.gateway_client.create_order(options)

        logger.info(f"Gateway order {gateway_order.get('id')} created for order {order_id}")
        return {"gateway_order": gateway_order, "order": order}
