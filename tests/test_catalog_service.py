"""Tests for the catalog listing, product details and admin catalog commands."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from storefront.domain.catalog_query import CatalogQuery, SortKey
from storefront.domain.schemas import CategoryCreate, OfferCreate, ProductCreate
from storefront.errors import (
    CategoryExistsError,
    CategoryNotFoundError,
    OfferNotFoundError,
    ProductExistsError,
    ProductNotFoundError,
)
from storefront.services.catalog_service import CatalogService


@pytest.fixture
def catalog(factory):
    phones = factory.category(name="Phones")
    laptops = factory.category(name="Laptops")
    hidden = factory.category(name="Hidden", is_active=False)
    products = {
        "pixel": factory.product(phones, name="Pixel", price="500", popularity=9, average_rating=4.5),
        "iphone": factory.product(phones, name="iPhone", price="900", popularity=3, featured=True),
        "thinkpad": factory.product(laptops, name="ThinkPad", price="1200", popularity=5, average_rating=4.9),
        "ghost": factory.product(hidden, name="Ghost", price="10"),
    }
    return phones, laptops, products


class TestCatalogQuery:
    def test_build_ignores_garbage(self):
        query = CatalogQuery.build(category="", min_price="abc", max_price="nan", sort_by="sideways")
        assert query == CatalogQuery()

    def test_build_parses_values(self):
        query = CatalogQuery.build("Phones", "10", "99.5", "price-desc")
        assert query.category == "Phones"
        assert query.min_price == Decimal("10")
        assert query.max_price == Decimal("99.5")
        assert query.sort_by is SortKey.PRICE_DESC


class TestListProducts:
    def test_hides_inactive_categories(self, db, catalog):
        names = [i.name for i in CatalogService(db).list_products(CatalogQuery())]
        assert "Ghost" not in names
        assert len(names) == 3

    def test_filter_by_category(self, db, catalog):
        items = CatalogService(db).list_products(CatalogQuery.build(category="Phones"))
        assert {i.name for i in items} == {"Pixel", "iPhone"}

    def test_price_range(self, db, catalog):
        items = CatalogService(db).list_products(CatalogQuery.build(min_price="600", max_price="1000"))
        assert [i.name for i in items] == ["iPhone"]

    @pytest.mark.parametrize(
        "sort_by, expected",
        [
            ("price-asc", ["Pixel", "iPhone", "ThinkPad"]),
            ("price-desc", ["ThinkPad", "iPhone", "Pixel"]),
            ("popularity", ["Pixel", "ThinkPad", "iPhone"]),
            ("rating", ["ThinkPad", "Pixel", "iPhone"]),
        ],
    )
    def test_sorting(self, db, catalog, sort_by, expected):
        items = CatalogService(db).list_products(CatalogQuery.build(sort_by=sort_by))
        assert [i.name for i in items] == expected

    def test_featured_first(self, db, catalog):
        items = CatalogService(db).list_products(CatalogQuery.build(sort_by="featured"))
        assert items[0].name == "iPhone"

    def test_discounted_price_from_category_offer(self, db, factory, catalog):
        phones, _, _ = catalog
        offer = factory.offer(phones, discount_value="10")

        items = CatalogService(db).list_products(CatalogQuery.build(category="Phones", sort_by="price-asc"))

        assert items[0].price == Decimal("500.00")
        assert items[0].discounted_price == Decimal("450.00")
        assert items[0].category_offer_id == offer.id

    def test_best_offer_wins(self, db, factory, catalog):
        phones, _, products = catalog
        factory.offer(phones, discount_value="10")
        factory.offer(products["pixel"], discount_type="fixed", discount_value="100")

        details = CatalogService(db).get_product_details(products["pixel"].id)
        assert details.product.discounted_price == Decimal("400.00")


class TestProductDetails:
    def test_related_products(self, db, catalog):
        _, _, products = catalog
        details = CatalogService(db).get_product_details(products["pixel"].id)

        assert details.product.name == "Pixel"
        assert [p.name for p in details.related_products] == ["iPhone"]

    def test_unknown_product(self, db, catalog):
        with pytest.raises(ProductNotFoundError):
            CatalogService(db).get_product_details(999)

    def test_stock(self, db, catalog):
        _, _, products = catalog
        assert CatalogService(db).get_stock(products["pixel"].id) == 10

    def test_search_by_prefix(self, db, catalog):
        assert [p.name for p in CatalogService(db).search_products("I")] == ["iPhone"]
        assert [p.name for p in CatalogService(db).search_products("thi")] == ["ThinkPad"]

    def test_search_treats_wildcards_literally(self, db, catalog):
        assert CatalogService(db).search_products("%") == []


class TestCatalogAdmin:
    def test_create_category(self, db):
        category = CatalogService(db).create_category(CategoryCreate(name=" Audio "))
        assert category.name == "Audio"
        assert category.is_active is True

    def test_duplicate_category(self, db, factory):
        factory.category(name="Audio")
        with pytest.raises(CategoryExistsError):
            CatalogService(db).create_category(CategoryCreate(name="Audio"))

    def test_create_product(self, db, factory):
        audio = factory.category(name="Audio")
        product = CatalogService(db).create_product(
            ProductCreate(name="Buds", category_id=audio.id, price=Decimal("49.99"), stock=0)
        )
        assert product.price == Decimal("49.99")
        assert product.is_out_of_stock is True

    def test_product_needs_category(self, db):
        with pytest.raises(CategoryNotFoundError):
            CatalogService(db).create_product(ProductCreate(name="Buds", category_id=42, price=Decimal("1")))

    def test_duplicate_product(self, db, factory):
        audio = factory.category(name="Audio")
        factory.product(audio, name="Buds")
        with pytest.raises(ProductExistsError):
            CatalogService(db).create_product(ProductCreate(name="Buds", category_id=audio.id, price=Decimal("1")))

    def test_create_offer_attaches_to_product(self, db, catalog):
        _, _, products = catalog
        now = datetime.now(timezone.utc)
        offer = CatalogService(db).create_offer(
            OfferCreate(
                kind="product",
                product_id=products["iphone"].id,
                discount_type="percentage",
                discount_value=Decimal("50"),
                max_discount_value=Decimal("100"),
                valid_from=now - timedelta(hours=1),
                valid_until=now + timedelta(days=7),
            )
        )

        db.refresh(products["iphone"])
        assert products["iphone"].offer_id == offer.id
        details = CatalogService(db).get_product_details(products["iphone"].id)
        assert details.product.discounted_price == Decimal("800.00")

    def test_offer_for_missing_category(self, db):
        now = datetime.now(timezone.utc)
        with pytest.raises(CategoryNotFoundError):
            CatalogService(db).create_offer(
                OfferCreate(
                    kind="category",
                    category_id=99,
                    discount_type="fixed",
                    discount_value=Decimal("5"),
                    valid_from=now,
                    valid_until=now + timedelta(days=1),
                )
            )

    def test_toggle_offer(self, db, factory, catalog):
        phones, _, _ = catalog
        offer = factory.offer(phones)
        svc = CatalogService(db)

        assert svc.toggle_offer(offer.id).status == "expired"
        assert svc.toggle_offer(offer.id).status == "active"

    def test_toggled_off_offer_not_applied(self, db, factory, catalog):
        phones, _, products = catalog
        offer = factory.offer(phones, discount_value="10")
        CatalogService(db).toggle_offer(offer.id)

        details = CatalogService(db).get_product_details(products["pixel"].id)
        assert details.product.discounted_price == Decimal("500.00")

    def test_toggle_unknown_offer(self, db):
        with pytest.raises(OfferNotFoundError):
            CatalogService(db).toggle_offer(5)
