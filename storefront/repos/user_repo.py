from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.data.models.wallet_transaction import WalletTransactionModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_user_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(UserModel.email == email)
        ).scalar_one_or_none()

    def list_users(self) -> list[UserModel]:
        return list(
            self.db.execute(select(UserModel).order_by(UserModel.id)).scalars().all()
        )

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def debit_wallet(self, user_id: int, amount) -> int:
        """Conditional debit; 0 rows when the balance does not cover the amount."""
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.wallet_balance >= amount)
            .values(wallet_balance=UserModel.wallet_balance - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def credit_wallet(self, user_id: int, amount) -> int:
        result = self.db.execute(
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(wallet_balance=UserModel.wallet_balance + amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def add_transaction(self, tx: WalletTransactionModel) -> WalletTransactionModel:
        self.db.add(tx)
        return tx

    def list_transactions(self, user_id: int) -> list[WalletTransactionModel]:
        return list(
            self.db.execute(
                select(WalletTransactionModel)
                .where(WalletTransactionModel.user_id == user_id)
                .order_by(WalletTransactionModel.created_at.desc(), WalletTransactionModel.id.desc())
            ).scalars().all()
        )

    def refresh(self, user: UserModel) -> UserModel:
        self.db.refresh(user)
        return user

    def commit(self):
        self.db.commit()
