from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Boolean, Numeric, DateTime, Float
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    is_out_of_stock = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    offer_id = Column(Integer, ForeignKey("offers.id", use_alter=True, name="fk_products_offer_id"), nullable=True)

    #sort keys of the catalog listing
    popularity = Column(Integer, nullable=False, default=0)
    average_rating = Column(Float, nullable=False, default=0.0)
    featured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    category = relationship("CategoryModel", back_populates="products")
    offer = relationship("OfferModel", foreign_keys=[offer_id])
