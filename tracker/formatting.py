"""Formatting utilities for currency, percentages and dates.

Everything here works on date-only values, so a date on the 1st of a month
is never shifted into the previous month by a timezone conversion.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from tracker import config
from tracker.domain import Transaction, TransactionType
from tracker.functional import parse_date

Number = Union[Decimal, int, float]

MONTH_ABBREVIATIONS = (
    "jan.", "fev.", "mar.", "abr.", "mai.", "jun.",
    "jul.", "ago.", "set.", "out.", "nov.", "dez.",
)

TYPE_LABELS = {
    TransactionType.INCOME: "Receita",
    TransactionType.EXPENSE: "Despesa",
}

MISSING_DATE = "-"

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class CurrencyFormat:
    symbol: str = config.CURRENCY_SYMBOL
    thousands_sep: str = config.THOUSANDS_SEPARATOR
    decimal_sep: str = config.DECIMAL_SEPARATOR
    spacing: str = " "


DEFAULT_CURRENCY = CurrencyFormat()


def _to_decimal(amount: Optional[Number]) -> Decimal:
    if amount is None:
        return Decimal("0")
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def _localize(text: str, fmt: CurrencyFormat) -> str:
    # text uses "," for groups and "." for decimals
    return text.translate(str.maketrans({",": fmt.thousands_sep, ".": fmt.decimal_sep}))


def format_currency(amount: Optional[Number], fmt: CurrencyFormat = DEFAULT_CURRENCY) -> str:
    """Format a monetary amount with two decimals and the currency symbol.

    Args:
        amount: The amount to format. ``None`` renders as zero.
        fmt: Symbol and separators to use.

    Returns:
        Formatted string, e.g. ``"R$ 1.234,56"`` or ``"-R$ 500,00"``.

    Example:
        >>> format_currency(0)
        'R$ 0,00'
    """
    value = _to_decimal(amount).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    body = _localize(f"{abs(value):,.2f}", fmt)
    return f"{sign}{fmt.symbol}{fmt.spacing}{body}"


def format_signed_amount(t: Transaction, fmt: CurrencyFormat = DEFAULT_CURRENCY) -> str:
    prefix = "+" if t.type is TransactionType.INCOME else "-"
    return f"{prefix}{format_currency(t.amount, fmt)}"


def format_percentage(
    value: Number,
    digits: int = 1,
    signed: bool = False,
    fmt: CurrencyFormat = DEFAULT_CURRENCY,
) -> str:
    """Format a percentage value (already scaled by 100), e.g. ``"50,0%"``."""
    quantum = Decimal(1).scaleb(-digits)
    q = _to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    text = f"{q:.{digits}f}".replace(".", fmt.decimal_sep)
    if signed and q >= 0:
        text = "+" + text
    return f"{text}%"


def format_date(value: Union[date, str, None]) -> str:
    """Render a date as ``dd/mm/yyyy``; missing or unparseable dates render as ``-``."""
    return (
        parse_date(value)
        .map(lambda d: f"{d.day:02d}/{d.month:02d}/{d.year:04d}")
        .get_or_else(MISSING_DATE)
    )


def format_month_label(month: int) -> str:
    return MONTH_ABBREVIATIONS[month - 1]


def mask_amount(text: str, visible: bool = True) -> str:
    return text if visible else config.HIDDEN_AMOUNT


def transaction_title(t: Transaction) -> str:
    return t.description or t.category


def type_label(ttype: TransactionType) -> str:
    return TYPE_LABELS[TransactionType(ttype)]
