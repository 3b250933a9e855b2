#storefront/data/models/cart.py
from decimal import Decimal
from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base
from storefront.utils.money import to_money


class CartModel(Base):
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True)
    #at most one cart per user
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    shipping_charge = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    applied_coupon = Column(String, nullable=True)
    discount_applied = Column(Numeric(10, 2), nullable=False, default=0)
    final_total = Column(Numeric(10, 2), nullable=False, default=0)

    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.id",
    )

    def calculate_totals(self) -> Decimal:
        """
        The only writer of total / final_total.
        total = sum(subtotal) + shipping, final_total = total - discount.
        """
        subtotal = sum((to_money(i.subtotal) for i in self.items), Decimal("0.00"))
        self.total = to_money(subtotal + to_money(self.shipping_charge))
        self.final_total = to_money(self.total - to_money(self.discount_applied))
        return self.final_total
