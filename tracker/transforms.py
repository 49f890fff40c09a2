import json
from decimal import Decimal
from typing import Any, Dict, List, Tuple, Union

from tracker.domain import Goal, GoalCategory, Transaction, TransactionType, categories_for
from tracker.functional import Either, Left, Right, parse_date, read_money


def _number(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def transaction_to_record(t: Transaction) -> Dict[str, Any]:
    return {
        "id": t.id,
        "type": t.type.value,
        "amount": _number(t.amount),
        "category": t.category,
        "description": t.description,
        "date": t.date.isoformat(),
    }


def goal_to_record(g: Goal) -> Dict[str, Any]:
    return {
        "id": g.id,
        "name": g.name,
        "target": _number(g.target),
        "current": _number(g.current),
        "category": g.category.value,
        "deadline": g.deadline.isoformat() if g.deadline else "",
    }


def _text(value, field: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string, got {type(value).__name__}")
    return value


def _money(raw, field: str) -> Decimal:
    money = read_money(raw, field)
    if money.is_left():
        raise ValueError(money.get_error()["message"])
    return money.get_or_else(None)


def transaction_from_record(record: Dict[str, Any]) -> Transaction:
    """Build a Transaction from its wire shape.

    Raises ValueError/KeyError/TypeError when the record does not have the
    expected shape.
    """
    ttype = TransactionType(record["type"])
    amount = _money(record["amount"], "amount")
    if amount < 0:
        raise ValueError(f"invalid amount {record['amount']!r}")
    category = _text(record["category"], "category")
    if category not in categories_for(ttype):
        raise ValueError(f"category {category!r} is not a {ttype.value} category")
    tx_date = parse_date(record["date"]).get_or_else(None)
    if tx_date is None:
        raise ValueError(f"invalid date {record['date']!r}")
    return Transaction(
        id=_text(record["id"], "id"),
        type=ttype,
        amount=amount,
        category=category,
        date=tx_date,
        description=_text(record.get("description") or "", "description"),
    )


def goal_from_record(record: Dict[str, Any]) -> Goal:
    target = _money(record["target"], "target")
    if target <= 0:
        raise ValueError(f"invalid target {record['target']!r}")
    current = _money(record.get("current", 0), "current")
    if current < 0:
        raise ValueError(f"invalid current {record.get('current')!r}")
    deadline = None
    if record.get("deadline"):
        deadline = parse_date(record["deadline"]).get_or_else(None)
        if deadline is None:
            raise ValueError(f"invalid deadline {record['deadline']!r}")
    return Goal(
        id=_text(record["id"], "id"),
        name=_text(record["name"], "name"),
        target=target,
        category=GoalCategory(_text(record.get("category") or GoalCategory.OTHER.value, "category")),
        current=current,
        deadline=deadline,
    )


def dump_transactions(trans: Tuple[Transaction, ...]) -> str:
    return json.dumps([transaction_to_record(t) for t in trans], ensure_ascii=False)


def dump_goals(goals: Tuple[Goal, ...]) -> str:
    return json.dumps([goal_to_record(g) for g in goals], ensure_ascii=False)


def _parse_collection(text: str, build, kind: str) -> Either[dict, tuple]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return Left({
            "error": "malformed_json",
            "message": f"Stored {kind} are not valid JSON: {e}",
        })
    if not isinstance(data, list):
        return Left({
            "error": "malformed_collection",
            "message": f"Stored {kind} must be a JSON array, got {type(data).__name__}",
        })
    items: List = []
    seen = set()
    for index, record in enumerate(data):
        try:
            item = build(record)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            return Left({
                "error": "malformed_record",
                "message": f"Stored {kind} record #{index} is invalid: {e}",
                "index": index,
            })
        if item.id in seen:
            return Left({
                "error": "duplicate_id",
                "message": f"Stored {kind} contain duplicate id {item.id}",
                "index": index,
            })
        seen.add(item.id)
        items.append(item)
    return Right(tuple(items))


def parse_transactions(text: str) -> Either[dict, Tuple[Transaction, ...]]:
    return _parse_collection(text, transaction_from_record, "transactions")


def parse_goals(text: str) -> Either[dict, Tuple[Goal, ...]]:
    return _parse_collection(text, goal_from_record, "goals")


def prepend_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    # newest first
    return (t,) + trans


def append_goal(goals: Tuple[Goal, ...], g: Goal) -> Tuple[Goal, ...]:
    return goals + (g,)


def replace_goal(goals: Tuple[Goal, ...], updated: Goal) -> Tuple[Goal, ...]:
    return tuple(updated if g.id == updated.id else g for g in goals)

