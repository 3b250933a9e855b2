# storefront/repos/product_repo.py

from sqlalchemy import select, update, case, func
from sqlalchemy.orm import Session, aliased

from storefront.data.models.category import CategoryModel
from storefront.data.models.offer import OfferModel
from storefront.data.models.product import ProductModel
from storefront.domain.catalog_query import CatalogQuery, SortKey

ProductOffer = aliased(OfferModel, name="product_offer")
CategoryOffer = aliased(OfferModel, name="category_offer")

_SORT_COLUMNS = {
    SortKey.POPULARITY: ProductModel.popularity.desc(),
    SortKey.PRICE_ASC: ProductModel.price.asc(),
    SortKey.PRICE_DESC: ProductModel.price.desc(),
    SortKey.RATING: ProductModel.average_rating.desc(),
    SortKey.FEATURED: ProductModel.featured.desc(),
    SortKey.NEW: ProductModel.created_at.desc(),
    SortKey.A_Z: ProductModel.name.asc(),
    SortKey.Z_A: ProductModel.name.desc(),
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # products

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_by_name(self, name: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.name == name)
        ).scalar_one_or_none()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Single-statement stock decrement: floors at zero, bumps popularity,
        flags out-of-stock. Every SET expression sees the pre-update row.
        """
        remaining = ProductModel.stock - quantity
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(
                stock=case((remaining < 0, 0), else_=remaining),
                popularity=ProductModel.popularity + 1,
                is_out_of_stock=case((remaining <= 0, True), else_=False),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def search_by_prefix(self, prefix: str) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.name)
        if prefix:
            stmt = stmt.where(func.lower(ProductModel.name).startswith(prefix.lower(), autoescape=True))
        return list(self.db.execute(stmt).scalars().all())

    def top_products(self, limit: int) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.is_active.is_(True))
                .order_by(ProductModel.popularity.desc(), ProductModel.id)
                .limit(limit)
            ).scalars().all()
        )

    # categories

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_category_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        ).scalar_one_or_none()

    def top_categories(self, limit: int) -> list[tuple]:
        """(category, summed product popularity); categories without products count 0."""
        popularity = func.coalesce(func.sum(ProductModel.popularity), 0).label("popularity")
        rows = self.db.execute(
            select(CategoryModel, popularity)
            .outerjoin(ProductModel, ProductModel.category_id == CategoryModel.id)
            .group_by(CategoryModel.id)
            .order_by(popularity.desc(), CategoryModel.id)
            .limit(limit)
        ).all()
        return [tuple(row) for row in rows]

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    # catalog rows: (product, category, product_offer | None, category_offer | None)

    def _catalog_select(self):
        return (
            select(ProductModel, CategoryModel, ProductOffer, CategoryOffer)
            .join(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .outerjoin(ProductOffer, ProductModel.offer_id == ProductOffer.id)
            .outerjoin(CategoryOffer, CategoryModel.offer_id == CategoryOffer.id)
        )

    def list_catalog(self, query: CatalogQuery) -> list[tuple]:
        stmt = self._catalog_select().where(
            CategoryModel.is_active.is_(True),
            ProductModel.is_active.is_(True),
            ProductModel.price >= query.min_price,
        )
        if query.max_price is not None:
            stmt = stmt.where(ProductModel.price <= query.max_price)
        if query.category:
            stmt = stmt.where(CategoryModel.name == query.category)

        if query.sort_by is not None:
            stmt = stmt.order_by(_SORT_COLUMNS[query.sort_by], ProductModel.id)
        else:
            stmt = stmt.order_by(ProductModel.id)

        return [tuple(row) for row in self.db.execute(stmt).all()]

    def get_catalog_row(self, product_id: int) -> tuple | None:
        row = self.db.execute(
            self._catalog_select().where(ProductModel.id == product_id)
        ).first()
        return tuple(row) if row else None

    def list_related_rows(self, category_id: int, exclude_product_id: int) -> list[tuple]:
        stmt = (
            self._catalog_select()
            .where(
                ProductModel.category_id == category_id,
                ProductModel.id != exclude_product_id,
            )
            .order_by(ProductModel.id)
        )
        return [tuple(row) for row in self.db.execute(stmt).all()]

    def commit(self):
        self.db.commit()
