# storefront/services/catalog_service.py
from datetime import datetime
from typing import Dict, Any
from sqlalchemy.orm import Session

from storefront.data.models.category import CategoryModel
from storefront.data.models.offer import OfferModel
from storefront.data.models.product import ProductModel
from storefront.domain.catalog_query import CatalogQuery, CatalogItem, ProductDetails
from storefront.domain.enums import OfferKind, OfferStatus
from storefront.domain.schemas import CategoryCreate, ProductCreate, OfferCreate
from storefront.errors import (
    CategoryExistsError,
    CategoryNotFoundError,
    OfferNotFoundError,
    ProductExistsError,
    ProductNotFoundError,
)
from storefront.repos.offer_repo import OfferRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services import pricing
from storefront.utils.money import to_money
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def to_catalog_item(row: tuple, now: datetime | None = None) -> CatalogItem:
    product, category, product_offer, category_offer = row
    return CatalogItem(
        product_id=product.id,
        name=product.name,
        category=category.name,
        price=to_money(product.price),
        discounted_price=pricing.discounted_price(product.price, product_offer, category_offer, now),
        stock=product.stock,
        is_out_of_stock=product.is_out_of_stock,
        popularity=product.popularity,
        average_rating=product.average_rating,
        featured=product.featured,
        created_at=product.created_at,
        product_offer_id=product_offer.id if product_offer else None,
        category_offer_id=category_offer.id if category_offer else None,
    )


class CatalogService:
    """Read side of the catalog plus category / product / offer administration."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.offers = OfferRepo(db)

    #query
    def list_products(self, query: CatalogQuery, now: datetime | None = None) -> list[CatalogItem]:
        rows = self.repo.list_catalog(query)
        return [to_catalog_item(row, now) for row in rows]

    def get_product_details(self, product_id: int, now: datetime | None = None) -> ProductDetails:
        row = self.repo.get_catalog_row(product_id)
        if not row:
            raise ProductNotFoundError(product_id)

        product = row[0]
        related = self.repo.list_related_rows(product.category_id, product.id)
        return ProductDetails(
            product=to_catalog_item(row, now),
            related_products=[to_catalog_item(r, now) for r in related],
        )

    def get_stock(self, product_id: int) -> int:
        product = self.repo.get_product(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return product.stock

    def search_products(self, prefix: str | None) -> list[ProductModel]:
        return self.repo.search_by_prefix((prefix or "").strip())

    def best_sellers(self, product_limit: int = 10, category_limit: int = 3) -> Dict[str, Any]:
        """Most popular active products and the categories with the highest summed popularity."""
        return {
            "top_products": self.repo.top_products(product_limit),
            "top_categories": [
                {"id": category.id, "name": category.name, "popularity": int(popularity)}
                for category, popularity in self.repo.top_categories(category_limit)
            ],
        }

    #commands
    def create_category(self, payload: CategoryCreate) -> CategoryModel:
        name = payload.name.strip()
        if self.repo.get_category_by_name(name):
            raise CategoryExistsError(name)

        category = self.repo.create_category(CategoryModel(name=name, is_active=payload.is_active))
        logger.info(f"Category {category.id} '{name}' created")
        return category

    def create_product(self, payload: ProductCreate) -> ProductModel:
        name = payload.name.strip()
        if self.repo.get_product_by_name(name):
            raise ProductExistsError(name)
        if not self.repo.get_category(payload.category_id):
            raise CategoryNotFoundError(payload.category_id)

        product = self.repo.create_product(
            ProductModel(
                name=name,
                category_id=payload.category_id,
                price=to_money(payload.price),
                stock=payload.stock,
                is_out_of_stock=payload.stock <= 0,
                is_active=payload.is_active,
                featured=payload.featured,
                popularity=0,
            )
        )
        logger.info(f"Product {product.id} '{name}' created")
        return product

    def list_offers(self) -> list[OfferModel]:
        return self.offers.list_offers()

    def create_offer(self, payload: OfferCreate) -> OfferModel:
        """
        Create an offer and attach it to its target. Attaching replaces the
        previous offer of that product / category (one offer per target).
        """
        target = None
        if payload.kind == OfferKind.PRODUCT:
            target = self.repo.get_product(payload.product_id)
            if not target:
                raise ProductNotFoundError(payload.product_id)
        elif payload.kind == OfferKind.CATEGORY:
            target = self.repo.get_category(payload.category_id)
            if not target:
                raise CategoryNotFoundError(payload.category_id)

        try:
            offer = self.offers.add_offer(
                OfferModel(
                    kind=payload.kind.value,
                    product_id=payload.product_id if payload.kind == OfferKind.PRODUCT else None,
                    category_id=payload.category_id if payload.kind == OfferKind.CATEGORY else None,
                    discount_type=payload.discount_type.value,
                    discount_value=payload.discount_value,
                    max_discount_value=payload.max_discount_value,
                    referral_bonus=payload.referral_bonus if payload.kind == OfferKind.REFERRAL else None,
                    valid_from=payload.valid_from,
                    valid_until=payload.valid_until,
                    status=OfferStatus.ACTIVE.value,
                )
            )
            if target is not None:
                target.offer_id = offer.id
            self.offers.commit()
        except Exception:
            self.offers.rollback()
            raise

        logger.info(f"Offer {offer.id} ({offer.kind}) created")
        return offer

    def toggle_offer(self, offer_id: int) -> OfferModel:
        offer = self.offers.get_offer(offer_id)
        if not offer:
            raise OfferNotFoundError(offer_id)

        offer.status = (
            OfferStatus.EXPIRED.value if offer.status == OfferStatus.ACTIVE.value else OfferStatus.ACTIVE.value
        )
        self.offers.commit()
        logger.info(f"Offer {offer_id} status -> {offer.status}")
        return offer
