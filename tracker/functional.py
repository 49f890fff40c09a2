from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Generic, Iterable, Optional, TypeVar

from tracker.domain import (
    Goal,
    GoalCategory,
    GoalForm,
    Transaction,
    TransactionForm,
    TransactionType,
    categories_for,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

CENT = Decimal("0.01")
# integer digits + 2 decimals stay within the 15 significant digits a JSON
# number (double) holds exactly
MAX_INTEGER_DIGITS = 13


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def is_left(self) -> bool:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def parse_amount(value) -> Maybe[Decimal]:
    """Read a user-typed or persisted number as a finite Decimal.

    Accepts the pt-BR decimal comma ("12,50") as well as "12.50".
    """
    if value is None or isinstance(value, bool):
        return Nothing()
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return Nothing()
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            number = Decimal(text)
        except InvalidOperation:
            return Nothing()
    if not number.is_finite():
        return Nothing()
    return Some(number)


def parse_date(value) -> Maybe[date]:
    if isinstance(value, datetime):
        return Some(value.date())
    if isinstance(value, date):
        return Some(value)
    if not value:
        return Nothing()
    try:
        return Some(date.fromisoformat(str(value).strip()))
    except ValueError:
        return Nothing()


def check_money(value: Decimal, field: str = "amount") -> Either[dict, Decimal]:
    """Money has at most MAX_INTEGER_DIGITS integer digits and whole cents."""
    if value.adjusted() >= MAX_INTEGER_DIGITS:
        return Left({
            "error": "amount_too_large",
            "message": f"{field.capitalize()} must have at most {MAX_INTEGER_DIGITS} integer digits",
            field: value,
        })
    if value != value.quantize(CENT):
        return Left({
            "error": "too_many_decimals",
            "message": f"{field.capitalize()} must have at most 2 decimal places",
            field: value,
        })
    return Right(value)


def read_money(raw, field: str = "amount") -> Either[dict, Decimal]:
    parsed = parse_amount(raw)
    if parsed.is_none():
        return Left({
            "error": f"invalid_{field}",
            "message": f"{field.capitalize()} is missing or not a number",
            field: raw,
        })
    return check_money(parsed.get_or_else(None), field)


def safe_goal(goals: Iterable[Goal], goal_id: str) -> Maybe[Goal]:
    for goal in goals:
        if goal.id == goal_id:
            return Some(goal)
    return Nothing()


# Validation steps. Each factory returns a function taking the fields
# collected so far and returning Either[error, fields + one more field].

def with_type(raw):
    def _step(fields: dict) -> Either[dict, dict]:
        try:
            ttype = TransactionType(raw)
        except ValueError:
            return Left({
                "error": "invalid_type",
                "message": f"Unknown transaction type {raw!r}",
                "type": raw,
            })
        return Right({**fields, "type": ttype})

    return _step


def with_amount(raw, key: str = "amount"):
    def _step(fields: dict) -> Either[dict, dict]:
        money = read_money(raw, "amount")
        if money.is_left():
            return money
        value = money.get_or_else(None)
        if value < 0:
            return Left({
                "error": "negative_amount",
                "message": "Amount cannot be negative; use the transaction type for direction",
                "amount": raw,
            })
        return Right({**fields, key: value})

    return _step


def with_category(raw):
    def _step(fields: dict) -> Either[dict, dict]:
        category = (raw or "").strip()
        if not category:
            return Left({
                "error": "missing_category",
                "message": "Category is required",
            })
        ttype = fields["type"]
        if category not in categories_for(ttype):
            return Left({
                "error": "category_type_mismatch",
                "message": f"Category {category} is not a valid {ttype.value} category",
                "category": category,
                "type": ttype.value,
            })
        return Right({**fields, "category": category})

    return _step


def with_date(raw, key: str, default: Optional[date]):
    # empty input takes the default, anything else must be a full ISO date
    def _step(fields: dict) -> Either[dict, dict]:
        if raw in (None, ""):
            return Right({**fields, key: default})
        parsed = parse_date(raw)
        if parsed.is_none():
            return Left({
                "error": f"invalid_{key}",
                "message": f"{key.capitalize()} {raw!r} is not a valid YYYY-MM-DD date",
                key: raw,
            })
        return Right({**fields, key: parsed.get_or_else(default)})

    return _step


def with_name(raw):
    def _step(fields: dict) -> Either[dict, dict]:
        name = (raw or "").strip()
        if not name:
            return Left({
                "error": "missing_name",
                "message": "Goal name is required",
            })
        return Right({**fields, "name": name})

    return _step


def with_target(raw):
    def _step(fields: dict) -> Either[dict, dict]:
        money = read_money(raw, "target")
        if money.is_left():
            return money
        value = money.get_or_else(None)
        if value <= 0:
            return Left({
                "error": "non_positive_target",
                "message": "Target must be greater than zero",
                "target": raw,
            })
        return Right({**fields, "target": value})

    return _step


def with_goal_category(raw):
    def _step(fields: dict) -> Either[dict, dict]:
        text = (raw or "").strip()
        try:
            category = GoalCategory(text) if text else GoalCategory.OTHER
        except ValueError:
            return Left({
                "error": "category_not_found",
                "message": f"Goal category {text} does not exist",
                "category": text,
            })
        return Right({**fields, "category": category})

    return _step


def validate_transaction_form(
    form: TransactionForm,
    tx_id: str,
    today: date,
) -> Either[dict, Transaction]:
    start = {"id": tx_id, "description": (form.description or "").strip()}
    return (
        Right(start)
        .bind(with_type(form.type))
        .bind(with_amount(form.amount))
        .bind(with_category(form.category))
        .bind(with_date(form.date, "date", today))
        .map(lambda fields: Transaction(**fields))
    )


def validate_goal_form(form: GoalForm, goal_id: str) -> Either[dict, Goal]:
    start = {"id": goal_id, "current": Decimal("0")}
    return (
        Right(start)
        .bind(with_name(form.name))
        .bind(with_target(form.target))
        .bind(with_goal_category(form.category))
        .bind(with_date(form.deadline, "deadline", None))
        .map(lambda fields: Goal(**fields))
    )


def validate_goal_progress(goal: Goal, current) -> Either[dict, Goal]:
    return (
        Right({})
        .bind(with_amount(current, key="current"))
        .map(lambda fields: replace(goal, current=fields["current"]))
    )
