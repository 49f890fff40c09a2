from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from tracker.domain import Transaction, TransactionType

Predicate = Callable[[Transaction], bool]


def iter_transactions(trans: Iterable[Transaction], pred: Predicate) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def by_type(ttype: TransactionType) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type is ttype

    return _filter


def by_category(category: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_month(year: int, month: int) -> Predicate:
    # bucket membership is year+month equality, never a date-range check
    def _filter(t: Transaction) -> bool:
        return t.date.year == year and t.date.month == month

    return _filter


def by_date_range(start: Optional[date], end: Optional[date]) -> Predicate:
    def _filter(t: Transaction) -> bool:
        if start is not None and t.date < start:
            return False
        if end is not None and t.date > end:
            return False
        return True

    return _filter


def matches_text(query: str) -> Predicate:
    needle = query.strip().casefold()

    def _filter(t: Transaction) -> bool:
        if not needle:
            return True
        return needle in t.description.casefold() or needle in t.category.casefold()

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def search_transactions(
    trans: Iterable[Transaction],
    query: str = "",
    ttype: Optional[TransactionType] = None,
    category: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> tuple:
    """Filter the log for the transaction list's search box and filter menu.

    Keeps the input order (newest first for the tracker's log).
    """
    preds = [matches_text(query), by_date_range(start, end)]
    if ttype is not None:
        preds.append(by_type(TransactionType(ttype)))
    if category:
        preds.append(by_category(category))
    return tuple(iter_transactions(trans, all_of(*preds)))
