"""Tests for the admin sales report and best sellers."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from storefront.domain.enums import ReportPeriod
from storefront.domain.reporting import report_window
from storefront.errors import InvalidReportRangeError
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService


def at(day, hour=10):
    return datetime(2026, 3, day, hour, tzinfo=timezone.utc)


class TestReportWindow:
    @pytest.mark.parametrize(
        "period, start, end",
        [
            (ReportPeriod.DAILY, date(2026, 3, 11), date(2026, 3, 12)),
            (ReportPeriod.WEEKLY, date(2026, 3, 9), date(2026, 3, 16)),
            (ReportPeriod.MONTHLY, date(2026, 3, 1), date(2026, 4, 1)),
            (ReportPeriod.YEARLY, date(2026, 1, 1), date(2027, 1, 1)),
        ],
    )
    def test_calendar_periods(self, period, start, end):
        first, last = report_window(period, date(2026, 3, 11))
        assert first == datetime(start.year, start.month, start.day, tzinfo=timezone.utc)
        assert last == datetime(end.year, end.month, end.day, tzinfo=timezone.utc)

    def test_december_rolls_into_next_year(self):
        _, last = report_window(ReportPeriod.MONTHLY, date(2026, 12, 31))
        assert last == datetime(2027, 1, 1, tzinfo=timezone.utc)

    def test_custom_range_is_inclusive(self):
        first, last = report_window(ReportPeriod.CUSTOM, date(2026, 3, 11), date(2026, 3, 1), date(2026, 3, 5))
        assert first == datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert last == datetime(2026, 3, 6, tzinfo=timezone.utc)

    def test_custom_range_needs_both_dates(self):
        with pytest.raises(InvalidReportRangeError):
            report_window(ReportPeriod.CUSTOM, date(2026, 3, 11), date(2026, 3, 1))

    def test_custom_range_reversed(self):
        with pytest.raises(InvalidReportRangeError):
            report_window(ReportPeriod.CUSTOM, date(2026, 3, 11), date(2026, 3, 5), date(2026, 3, 1))


class TestSalesReport:
    @pytest.fixture
    def sales(self, factory):
        user = factory.user()
        pixel = factory.product(factory.category(), name="Pixel")

        first = factory.order(user, final_total="90", total_amount="100", discount_applied="10", created_at=at(2))
        factory.order_item(first, pixel, quantity=3)
        second = factory.order(user, final_total="50", total_amount="50", created_at=at(2, 18))
        factory.order_item(second, pixel, quantity=1)
        third = factory.order(user, final_total="200", total_amount="200", status="Processed", created_at=at(4))
        factory.order_item(third, pixel, quantity=2)

        #not sales
        factory.order(user, final_total="70", status="Cancelled", created_at=at(2))
        factory.order(user, final_total="80", status="Shipped", is_cancelled=True, created_at=at(3))
        factory.order(user, final_total="999", created_at=datetime(2026, 4, 1, tzinfo=timezone.utc))
        return user

    def test_groups_by_day(self, db, lock_service, sales):
        report = OrderService(db, lock_service).sales_report(
            ReportPeriod.CUSTOM, date(2026, 3, 1), date(2026, 3, 31)
        )

        assert [d.date for d in report.days] == ["2026-03-02", "2026-03-04"]
        march_2 = report.days[0]
        assert march_2.number_of_orders == 2
        assert march_2.total_sales_revenue == Decimal("150.00")
        assert march_2.discount_applied == Decimal("10.00")
        assert march_2.net_sales == Decimal("140.00")
        assert march_2.total_items_sold == 4

    def test_summary(self, db, lock_service, sales):
        report = OrderService(db, lock_service).sales_report(
            ReportPeriod.MONTHLY, today=date(2026, 3, 20)
        )

        assert report.summary.total_sales_count == 3
        assert report.summary.overall_order_amount == Decimal("350.00")
        assert report.summary.overall_discount == Decimal("10.00")
        assert report.summary.overall_net_sales == Decimal("340.00")

    def test_daily_window(self, db, lock_service, sales):
        report = OrderService(db, lock_service).sales_report(ReportPeriod.DAILY, today=date(2026, 3, 4))
        assert report.summary.total_sales_count == 1
        assert report.days[0].net_sales == Decimal("200.00")

    def test_empty_period(self, db, lock_service, sales):
        report = OrderService(db, lock_service).sales_report(ReportPeriod.YEARLY, today=date(2025, 6, 1))
        assert report.days == []
        assert report.summary.total_sales_count == 0
        assert report.summary.overall_order_amount == Decimal("0.00")


class TestBestSellers:
    def test_top_products_and_categories(self, db, factory):
        phones = factory.category(name="Phones")
        audio = factory.category(name="Audio")
        factory.category(name="Empty")
        factory.product(phones, name="Pixel", popularity=5)
        factory.product(phones, name="Galaxy", popularity=4)
        factory.product(audio, name="Buds", popularity=7)
        factory.product(audio, name="Hidden", popularity=50, is_active=False)

        result = CatalogService(db).best_sellers(product_limit=2, category_limit=3)

        assert [p.name for p in result["top_products"]] == ["Buds", "Pixel"]
        assert [(c["name"], c["popularity"]) for c in result["top_categories"]] == [
            ("Audio", 57),
            ("Phones", 9),
            ("Empty", 0),
        ]
