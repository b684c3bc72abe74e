"""Dashboard figures computed from the record store."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from estate_ledger.models import (
    DashboardPeriod,
    PropertyStatus,
    RentalPaymentStatus,
    Transaction,
    TransactionCategory,
    parse_enum,
)
from estate_ledger.store.base import Collection, RecordStore

logger = logging.getLogger(__name__)

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

ZERO = Decimal("0")


@dataclass
class MonthlyTotals:
    """Revenue and expenses of one calendar month."""

    key: str  # YYYY-MM
    month: str  # Jan..Dec
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO


@dataclass
class FinancialSummary:
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO
    revenue_change: int = 0  # Percent against the previous period
    expense_change: int = 0

    @property
    def net_income(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass
class PropertyStats:
    total: int = 0
    available: int = 0
    rented: int = 0
    sold: int = 0
    under_maintenance: int = 0


@dataclass
class RentalStats:
    total: int = 0
    paid: int = 0
    overdue: int = 0
    unpaid: int = 0
    partially_paid: int = 0


@dataclass
class DashboardReport:
    """Everything the dashboard shows for one period."""

    period: DashboardPeriod
    financial: FinancialSummary
    chart_data: list[MonthlyTotals] = field(default_factory=list)
    properties: PropertyStats = field(default_factory=PropertyStats)
    rentals: RentalStats = field(default_factory=RentalStats)

    def to_dict(self) -> dict[str, Any]:
        """Wire form, with amounts as strings."""
        return {
            "financial": {
                "revenue": str(self.financial.revenue),
                "expenses": str(self.financial.expenses),
                "net_income": str(self.financial.net_income),
                "revenue_change": self.financial.revenue_change,
                "expense_change": self.financial.expense_change,
            },
            "chart_data": [
                {"month": m.month, "key": m.key, "revenue": str(m.revenue), "expenses": str(m.expenses)}
                for m in self.chart_data
            ],
            "properties": {
                "total": self.properties.total,
                "available": self.properties.available,
                "rented": self.properties.rented,
                "sold": self.properties.sold,
                "under_maintenance": self.properties.under_maintenance,
            },
            "rentals": {
                "total": self.rentals.total,
                "paid": self.rentals.paid,
                "overdue": self.rentals.overdue,
                "unpaid": self.rentals.unpaid,
                "partially_paid": self.rentals.partially_paid,
            },
            "period": self.period.value,
        }


def period_start(period: DashboardPeriod, now: datetime) -> datetime | None:
    """Start of ``period`` containing ``now``; ``None`` for all time.

    Weeks start on Sunday at midnight.
    """
    midnight = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    if period == DashboardPeriod.THIS_WEEK:
        days_since_sunday = (now.weekday() + 1) % 7
        return midnight - timedelta(days=days_since_sunday)
    if period == DashboardPeriod.THIS_MONTH:
        return midnight.replace(day=1)
    if period == DashboardPeriod.THIS_YEAR:
        return midnight.replace(month=1, day=1)
    return None


def previous_range(start: datetime, now: datetime) -> tuple[datetime, datetime]:
    """Comparison range: as many whole days as ``[start, now]`` spans, ending at ``start``.

    The day count is rounded up, so a period that has run for 14.5 days
    is compared against the 15 days before it.
    """
    period_days = math.ceil((now - start) / timedelta(days=1))
    return start - timedelta(days=period_days), start


def percent_change(current: Decimal, previous: Decimal) -> int:
    """Whole-percent change from ``previous``; 0 when there is no baseline."""
    if previous <= 0:
        return 0
    change = (current - previous) / previous * 100
    return int(change.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _at_midnight(day: date, like: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=like.tzinfo)


def sum_by_category(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return ``(revenue, expenses)`` of ``transactions``."""
    revenue = expenses = ZERO
    for t in transactions:
        if t.category == TransactionCategory.INCOME:
            revenue += t.amount
        elif t.category == TransactionCategory.EXPENSE:
            expenses += t.amount
    return revenue, expenses


def monthly_totals(transactions: Iterable[Transaction]) -> list[MonthlyTotals]:
    """Bucket ``transactions`` by calendar month, oldest month first."""
    buckets: dict[str, MonthlyTotals] = {}
    for t in transactions:
        key = f"{t.date.year}-{t.date.month:02d}"
        bucket = buckets.setdefault(key, MonthlyTotals(key=key, month=MONTH_NAMES[t.date.month - 1]))
        if t.category == TransactionCategory.INCOME:
            bucket.revenue += t.amount
        elif t.category == TransactionCategory.EXPENSE:
            bucket.expenses += t.amount
    return [buckets[key] for key in sorted(buckets)]


def compute_dashboard(
    store: RecordStore,
    period: DashboardPeriod | str = DashboardPeriod.ALL,
    now: datetime | None = None,
) -> DashboardReport:
    """Compute dashboard figures for ``period``.

    Parameters
    ----------
    store : RecordStore
        Store to read; nothing is written.
    period : DashboardPeriod | str
        Reporting window ending at ``now``.
    now : datetime | None
        Reference instant (defaults to the current time).

    Returns
    -------
    DashboardReport
        Totals and chart data over transactions dated within the period,
        change percentages against the preceding period of equal length,
        and property/rental counts over all records.
    """
    period = parse_enum(DashboardPeriod, period or DashboardPeriod.ALL, "period")
    now = now or datetime.now()
    start = period_start(period, now)
    transactions = store.read_all(Collection.TRANSACTIONS)

    if start is None:
        current = transactions
    else:
        current = [t for t in transactions if start <= _at_midnight(t.date, now) <= now]

    revenue, expenses = sum_by_category(current)
    summary = FinancialSummary(revenue=revenue, expenses=expenses)

    if start is not None:
        prev_start, prev_end = previous_range(start, now)
        previous = [t for t in transactions if prev_start <= _at_midnight(t.date, now) < prev_end]
        prev_revenue, prev_expenses = sum_by_category(previous)
        summary.revenue_change = percent_change(revenue, prev_revenue)
        summary.expense_change = percent_change(expenses, prev_expenses)

    report = DashboardReport(
        period=period,
        financial=summary,
        chart_data=monthly_totals(current),
        properties=property_stats(store),
        rentals=rental_stats(store),
    )
    logger.debug(
        "Dashboard %s: %d transactions, revenue %s, expenses %s",
        period.value,
        len(current),
        revenue,
        expenses,
    )
    return report


def property_stats(store: RecordStore) -> PropertyStats:
    properties = store.read_all(Collection.PROPERTIES)
    count = Counter(p.status for p in properties)
    return PropertyStats(
        total=len(properties),
        available=count[PropertyStatus.AVAILABLE],
        rented=count[PropertyStatus.RENTED],
        sold=count[PropertyStatus.SOLD],
        under_maintenance=count[PropertyStatus.UNDER_MAINTENANCE],
    )


def rental_stats(store: RecordStore) -> RentalStats:
    rentals = store.read_all(Collection.RENTALS)
    count = Counter(r.payment_status for r in rentals)
    return RentalStats(
        total=len(rentals),
        paid=count[RentalPaymentStatus.PAID],
        overdue=count[RentalPaymentStatus.OVERDUE],
        unpaid=count[RentalPaymentStatus.UNPAID],
        partially_paid=count[RentalPaymentStatus.PARTIALLY_PAID],
    )
