# storefront/services/wallet_service.py
from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.wallet_transaction import WalletTransactionModel
from storefront.domain.enums import TransactionType
from storefront.errors import UserNotFoundError, InsufficientBalanceError
from storefront.repos.user_repo import UserRepo
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class WalletService:
    """
    Wallet balance + append-only ledger.
    credit/debit never commit: the caller owns the transaction, so the
    balance change, the ledger row and the order update land together.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def credit(self, user_id: int, amount, description: str, order_id: int | None = None) -> Decimal:
        amount = to_money(amount)
        if self.repo.credit_wallet(user_id, amount) == 0:
            raise UserNotFoundError(user_id)

        self.repo.add_transaction(
            WalletTransactionModel(
                user_id=user_id,
                order_id=order_id,
                transaction_type=TransactionType.CREDIT.value,
                amount=amount,
                description=description,
            )
        )
        logger.info(f"Wallet credit {amount} for user {user_id} (order {order_id})")
        return amount

    def debit(self, user_id: int, amount, description: str, order_id: int | None = None) -> Decimal:
        amount = to_money(amount)
        if self.repo.debit_wallet(user_id, amount) == 0:
            user = self.repo.get_user(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            self.repo.refresh(user)
            raise InsufficientBalanceError(amount, to_money(user.wallet_balance))

        self.repo.add_transaction(
            WalletTransactionModel(
                user_id=user_id,
                order_id=order_id,
                transaction_type=TransactionType.DEBIT.value,
                amount=amount,
                description=description,
            )
        )
        logger.info(f"Wallet debit {amount} for user {user_id} (order {order_id})")
        return amount

    #query
    def get_wallet(self, user_id: int) -> Dict[str, Any]:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        return {
            "user_id": user.id,
            "wallet_balance": to_money(user.wallet_balance),
            "transactions": self.repo.list_transactions(user_id),
        }
