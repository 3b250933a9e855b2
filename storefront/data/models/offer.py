from sqlalchemy import Column, Integer, ForeignKey, String, Numeric, DateTime

from storefront.data.database import Base


class OfferModel(Base):
    __tablename__ = "offers"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)  # product, category, referral
    product_id = Column(Integer, ForeignKey("products.id", use_alter=True, name="fk_offers_product_id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", use_alter=True, name="fk_offers_category_id"), nullable=True)

    discount_type = Column(String, nullable=False)  # percentage, fixed
    discount_value = Column(Numeric(10, 2), nullable=False)
    max_discount_value = Column(Numeric(10, 2), nullable=True)
    referral_bonus = Column(Numeric(10, 2), nullable=True)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)
    status = Column(String, nullable=False, default="active")  # active, expired

    @property
    def is_active(self) -> bool:
        return self.status == "active"
