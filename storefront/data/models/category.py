from sqlalchemy import Column, Integer, ForeignKey, String, Boolean
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    offer_id = Column(Integer, ForeignKey("offers.id", use_alter=True, name="fk_categories_offer_id"), nullable=True)

    offer = relationship("OfferModel", foreign_keys=[offer_id])
    products = relationship("ProductModel", back_populates="category")
