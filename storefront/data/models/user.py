from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)
    status = Column(String, nullable=False, default="Active")  # Active, Inactive

    #cached projection of the wallet ledger
    wallet_balance = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    wallet_transactions = relationship(
        "WalletTransactionModel",
        back_populates="user",
        order_by="WalletTransactionModel.id",
    )
    addresses = relationship(
        "AddressModel",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="AddressModel.id",
    )
