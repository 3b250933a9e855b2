# storefront/domain/catalog_query.py
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from datetime import datetime
from enum import Enum


class SortKey(str, Enum):
    POPULARITY = "popularity"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING = "rating"
    FEATURED = "featured"
    NEW = "new"
    A_Z = "a-z"
    Z_A = "z-a"

    @classmethod
    def parse(cls, value: str | None) -> "SortKey | None":
        #unknown sort keys mean "no sorting", same as an empty one
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


def _parse_bound(value) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        bound = Decimal(str(value))
    except InvalidOperation:
        return None
    return bound if bound.is_finite() else None


@dataclass(frozen=True)
class CatalogQuery:
    """Filter + sort for the catalog listing; replaces the ad-hoc aggregation pipeline."""

    category: str | None = None
    min_price: Decimal = Decimal("0")
    max_price: Decimal | None = None
    sort_by: SortKey | None = None

    @classmethod
    def build(cls, category=None, min_price=None, max_price=None, sort_by=None) -> "CatalogQuery":
        """Lenient constructor for raw query-string values: garbage bounds fall back to 0 / unbounded."""
        return cls(
            category=category or None,
            min_price=_parse_bound(min_price) or Decimal("0"),
            max_price=_parse_bound(max_price),
            sort_by=sort_by if isinstance(sort_by, SortKey) else SortKey.parse(sort_by),
        )


@dataclass(frozen=True)
class CatalogItem:
    product_id: int
    name: str
    category: str
    price: Decimal
    discounted_price: Decimal
    stock: int
    is_out_of_stock: bool
    popularity: int
    average_rating: float
    featured: bool
    created_at: datetime | None = None
    product_offer_id: int | None = None
    category_offer_id: int | None = None


@dataclass(frozen=True)
class ProductDetails:
    product: CatalogItem
    related_products: list[CatalogItem] = field(default_factory=list)
