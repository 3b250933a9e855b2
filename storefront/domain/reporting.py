# storefront/domain/reporting.py
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

from storefront.domain.enums import ReportPeriod
from storefront.errors import InvalidReportRangeError


def _start_of(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def report_window(
    period: ReportPeriod,
    today: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[datetime, datetime]:
    """
    Half-open UTC window [start, end) for a sales report.

    Calendar periods contain `today`: the day, the ISO week (Monday first),
    the month or the year. A custom range covers start_date through end_date
    inclusive.
    """
    if period == ReportPeriod.DAILY:
        first, last = today, today
    elif period == ReportPeriod.WEEKLY:
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    elif period == ReportPeriod.MONTHLY:
        first = today.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        last = next_month - timedelta(days=1)
    elif period == ReportPeriod.YEARLY:
        first, last = date(today.year, 1, 1), date(today.year, 12, 31)
    else:
        if start_date is None or end_date is None:
            raise InvalidReportRangeError("startDate and endDate are required for a custom range")
        if start_date > end_date:
            raise InvalidReportRangeError("startDate must not be after endDate")
        first, last = start_date, end_date

    return _start_of(first), _start_of(last + timedelta(days=1))


@dataclass
class DailySales:
    date: str
    total_sales_revenue: Decimal = Decimal("0.00")
    discount_applied: Decimal = Decimal("0.00")
    net_sales: Decimal = Decimal("0.00")
    number_of_orders: int = 0
    total_items_sold: int = 0


@dataclass
class SalesSummary:
    total_sales_count: int = 0
    overall_order_amount: Decimal = Decimal("0.00")
    overall_discount: Decimal = Decimal("0.00")
    overall_net_sales: Decimal = Decimal("0.00")


@dataclass
class SalesReport:
    period: ReportPeriod
    start: datetime
    end: datetime
    days: list[DailySales] = field(default_factory=list)
    summary: SalesSummary = field(default_factory=SalesSummary)
