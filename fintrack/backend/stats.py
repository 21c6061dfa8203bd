# fintrack/backend/stats.py
"""
Statistics over a user's transactions.

``summarize`` is the aggregation itself and works on any iterable of
``Transaction`` objects:

1. totals and counts per transaction type (income / expense)
2. balance = income - expense
3. totals and counts per (category, type) pair, sorted by total descending

Sums are kept in whole cents, so every figure in the output agrees with the
others to the cent: balance is exactly income minus expense, and the
category totals add up to income plus expense.

The sort is stable, so pairs with equal totals keep the order in which they
were first seen. ``user_stats`` feeds it rows in ascending id order, which
makes ties resolve by insertion order.
"""
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .db import query_db
from .models import TRANSACTION_TYPES, Transaction


def to_cents(amount: float) -> int:
    return int(round(amount * 100))


def from_cents(cents: int) -> float:
    return cents / 100


def month_bounds(year: int, month: int) -> Tuple[str, str]:
    """Return ISO bounds [first day of month, first day of next month)."""
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start.isoformat(timespec="seconds"), end.isoformat(timespec="seconds")


class CategoryStat:
    def __init__(self, category: str, type: str):
        self.category = category
        self.type = type
        self.cents = 0
        self.count = 0

    @property
    def total(self) -> float:
        return from_cents(self.cents)

    def add(self, amount: float):
        self.cents += to_cents(amount)
        self.count += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "type": self.type,
            "total": self.total,
            "count": self.count,
        }


class StatsSnapshot:
    def __init__(self, cents: Dict[str, int], counts: Dict[str, int], category_stats: List[CategoryStat]):
        self.cents = cents
        self.counts = counts
        self.category_stats = category_stats

    @property
    def income(self) -> float:
        return from_cents(self.cents.get("income", 0))

    @property
    def expense(self) -> float:
        return from_cents(self.cents.get("expense", 0))

    @property
    def balance(self) -> float:
        return from_cents(self.cents.get("income", 0) - self.cents.get("expense", 0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "income": self.income,
            "expense": self.expense,
            "balance": self.balance,
            "categoryStats": [c.to_dict() for c in self.category_stats],
            "counts": {t: self.counts.get(t, 0) for t in TRANSACTION_TYPES},
        }


def summarize(transactions: Iterable[Transaction]) -> StatsSnapshot:
    cents = {t: 0 for t in TRANSACTION_TYPES}
    counts = {t: 0 for t in TRANSACTION_TYPES}
    by_category: "OrderedDict[Tuple[str, str], CategoryStat]" = OrderedDict()

    for tx in transactions:
        cents[tx.type] = cents.get(tx.type, 0) + to_cents(tx.amount)
        counts[tx.type] = counts.get(tx.type, 0) + 1

        key = (tx.category, tx.type)
        if key not in by_category:
            by_category[key] = CategoryStat(tx.category, tx.type)
        by_category[key].add(tx.amount)

    category_stats = sorted(by_category.values(), key=lambda c: c.cents, reverse=True)
    return StatsSnapshot(cents, counts, category_stats)


def monthly_summary(transactions: Iterable[Transaction]) -> List[Dict[str, Any]]:
    """Income, expense and net per calendar month, newest month first."""
    months: Dict[str, Dict[str, int]] = {}
    for tx in transactions:
        month = str(tx.date)[:7]
        bucket = months.setdefault(month, {"income": 0, "expense": 0})
        if tx.type in bucket:
            bucket[tx.type] += to_cents(tx.amount)

    results = []
    for month in sorted(months, reverse=True):
        income, expense = months[month]["income"], months[month]["expense"]
        results.append({
            "month": month,
            "income": from_cents(income),
            "expense": from_cents(expense),
            "net": from_cents(income - expense),
        })
    return results


def load_user_transactions(conn, user_id, month: Optional[int] = None, year: Optional[int] = None) -> List[Transaction]:
    """All of a user's transactions in insertion order, optionally for one month."""
    sql = "SELECT * FROM transactions WHERE user_id=?"
    args: List[Any] = [user_id]
    if month is not None and year is not None:
        start, end = month_bounds(year, month)
        sql += " AND date >= ? AND date < ?"
        args += [start, end]
    sql += " ORDER BY id"
    return [Transaction.from_row(r) for r in query_db(conn, sql, args)]


def user_stats(conn, user_id, month: Optional[int] = None, year: Optional[int] = None) -> StatsSnapshot:
    return summarize(load_user_transactions(conn, user_id, month, year))
