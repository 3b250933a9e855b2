from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    #shipping snapshot
    name = Column(String, nullable=False)
    mobile = Column(String, nullable=False)
    alternate_mobile = Column(String, nullable=True)
    location = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    landmark = Column(String, nullable=True)
    zip = Column(String, nullable=False)

    #totals snapshot copied from the cart
    shipping_charge = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    discount_applied = Column(Numeric(10, 2), nullable=False, default=0)
    final_total = Column(Numeric(10, 2), nullable=False)
    applied_coupon = Column(String, nullable=True)

    payment_method = Column(String, nullable=True)  # COD, Razorpay, Wallet
    status = Column(String, nullable=False, default="Pending")  # Pending, Processed, Shipped, Delivered, Cancelled
    is_cancelled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
