from datetime import date
from decimal import Decimal
from functools import reduce
from typing import Dict, Iterable, List, Tuple

from tracker import config
from tracker.domain import (
    CategoryTotal,
    ExpenseCategory,
    MonthlyBucket,
    Snapshot,
    Transaction,
    TransactionType,
)
from tracker.filters import by_month, by_type, iter_transactions
from tracker.formatting import format_month_label

ZERO = Decimal("0")


def _sum(trans: Iterable[Transaction]) -> Decimal:
    return reduce(lambda acc, t: acc + t.amount, trans, ZERO)


def total_income(trans: Iterable[Transaction]) -> Decimal:
    return _sum(iter_transactions(trans, by_type(TransactionType.INCOME)))


def total_expenses(trans: Iterable[Transaction]) -> Decimal:
    return _sum(iter_transactions(trans, by_type(TransactionType.EXPENSE)))


def balance(trans: Tuple[Transaction, ...]) -> Decimal:
    return total_income(trans) - total_expenses(trans)


def balance_percentage(trans: Tuple[Transaction, ...]) -> Decimal:
    """Balance as a percentage of income.

    With no income the denominator is 1, so the result is the raw balance
    times 100 and only informational.
    """
    income = total_income(trans)
    denominator = income if income != 0 else Decimal("1")
    return balance(trans) / denominator * 100


def expenses_by_category(trans: Iterable[Transaction]) -> List[CategoryTotal]:
    """Per-category expense sums in vocabulary order, zero sums omitted."""
    totals: Dict[str, Decimal] = {c.value: ZERO for c in ExpenseCategory}
    for t in iter_transactions(trans, by_type(TransactionType.EXPENSE)):
        if t.category in totals:
            totals[t.category] += t.amount
    return [
        CategoryTotal(category=name, amount=amount)
        for name, amount in totals.items()
        if amount != 0
    ]


def trailing_months(today: date, count: int = config.TREND_MONTHS) -> List[Tuple[int, int]]:
    """``count`` consecutive (year, month) pairs ending at today's month, oldest first."""
    index = today.year * 12 + (today.month - 1)
    months = []
    for i in range(count):
        year, month0 = divmod(index - i, 12)
        months.append((year, month0 + 1))
    months.reverse()
    return months


def monthly_trend(
    trans: Tuple[Transaction, ...],
    today: date,
    months: int = config.TREND_MONTHS,
) -> List[MonthlyBucket]:
    buckets = []
    for year, month in trailing_months(today, months):
        in_month = tuple(iter_transactions(trans, by_month(year, month)))
        income = total_income(in_month)
        expenses = total_expenses(in_month)
        buckets.append(MonthlyBucket(
            month_key=f"{year:04d}-{month:02d}",
            label=format_month_label(month),
            income=income,
            expenses=expenses,
            balance=income - expenses,
        ))
    return buckets


def recent_transactions(
    trans: Tuple[Transaction, ...], limit: int = config.RECENT_LIMIT
) -> Tuple[Transaction, ...]:
    # the log is kept newest first
    return trans[: max(0, limit)]


def transaction_counts(snapshot: Snapshot) -> Dict[str, int]:
    trans = snapshot.transactions
    return {
        "transactions": len(trans),
        "income": sum(1 for _ in iter_transactions(trans, by_type(TransactionType.INCOME))),
        "expense": sum(1 for _ in iter_transactions(trans, by_type(TransactionType.EXPENSE))),
        "goals": len(snapshot.goals),
    }
