import json
from datetime import date
from decimal import Decimal

from tracker.domain import Goal, GoalCategory, Transaction, TransactionType
from tracker.transforms import (
    append_goal,
    dump_goals,
    dump_transactions,
    parse_goals,
    parse_transactions,
    prepend_transaction,
    replace_goal,
    transaction_to_record,
)


def make_tx(id, ttype, amount, category, d, description=""):
    return Transaction(
        id=id,
        type=ttype,
        amount=Decimal(amount),
        category=category,
        date=date.fromisoformat(d),
        description=description,
    )


def make_goal(id, target, current="0", deadline=None, category=GoalCategory.TRAVEL):
    return Goal(
        id=id,
        name=f"Goal {id}",
        target=Decimal(target),
        category=category,
        current=Decimal(current),
        deadline=deadline,
    )


def sample_transactions():
    return (
        make_tx("t3", TransactionType.EXPENSE, "200", "Transporte", "2024-02-01"),
        make_tx("t2", TransactionType.EXPENSE, "300.50", "Alimentação", "2024-01-20", "Mercado"),
        make_tx("t1", TransactionType.INCOME, "1000", "Salário", "2024-01-15"),
    )


def test_prepend_transaction_puts_newest_first():
    t1 = make_tx("t1", TransactionType.INCOME, "100", "Salário", "2024-01-01")
    t2 = make_tx("t2", TransactionType.EXPENSE, "50", "Alimentação", "2024-01-02")

    transactions = (t1,)
    new_transactions = prepend_transaction(transactions, t2)

    assert [t.id for t in new_transactions] == ["t2", "t1"]
    assert transactions == (t1,)


def test_append_goal_keeps_creation_order():
    g1 = make_goal("g1", "1000")
    g2 = make_goal("g2", "500")

    goals = append_goal(append_goal((), g1), g2)

    assert [g.id for g in goals] == ["g1", "g2"]


def test_replace_goal_keeps_position():
    g1, g2, g3 = make_goal("g1", "100"), make_goal("g2", "200"), make_goal("g3", "300")
    updated = make_goal("g2", "200", current="50")

    goals = replace_goal((g1, g2, g3), updated)

    assert [g.id for g in goals] == ["g1", "g2", "g3"]
    assert goals[1].current == Decimal("50")
    assert goals[0] is g1


def test_transaction_record_wire_shape():
    record = transaction_to_record(sample_transactions()[1])
    assert record == {
        "id": "t2",
        "type": "expense",
        "amount": 300.5,
        "category": "Alimentação",
        "description": "Mercado",
        "date": "2024-01-20",
    }


def test_transactions_round_trip_preserves_order_and_empty_description():
    trans = sample_transactions()
    parsed = parse_transactions(dump_transactions(trans))

    assert parsed.is_right()
    assert parsed.get_or_else(None) == trans
    assert parsed.get_or_else(None)[0].description == ""


def test_goals_round_trip_with_and_without_deadline():
    goals = (
        make_goal("g1", "1000", current="250.75", deadline=date(2025, 12, 31)),
        make_goal("g2", "500", category=GoalCategory.OTHER),
    )
    text = dump_goals(goals)
    assert json.loads(text)[1]["deadline"] == ""

    parsed = parse_goals(text)
    assert parsed.is_right()
    assert parsed.get_or_else(None) == goals


def test_parse_transactions_accepts_empty_list():
    assert parse_transactions("[]").get_or_else(None) == ()


def test_parse_transactions_rejects_invalid_json():
    result = parse_transactions("{not json")
    assert result.is_left()
    assert result.get_error()["error"] == "malformed_json"


def test_parse_transactions_rejects_non_list():
    result = parse_transactions('{"id": "t1"}')
    assert result.is_left()
    assert result.get_error()["error"] == "malformed_collection"


def test_parse_transactions_rejects_bad_record():
    text = json.dumps([
        {"id": "t1", "type": "income", "amount": 10, "category": "Salário", "description": "", "date": "2024-01-01"},
        {"id": "t2", "type": "expense", "amount": -5, "category": "Alimentação", "description": "", "date": "2024-01-01"},
    ])
    result = parse_transactions(text)
    assert result.is_left()
    error = result.get_error()
    assert error["error"] == "malformed_record"
    assert error["index"] == 1


def test_parse_transactions_rejects_category_of_other_type():
    text = json.dumps([
        {"id": "t1", "type": "expense", "amount": 10, "category": "Salário", "description": "", "date": "2024-01-01"},
    ])
    assert parse_transactions(text).is_left()


def test_parse_transactions_rejects_duplicate_ids():
    record = {"id": "t1", "type": "income", "amount": 10, "category": "Salário", "description": "", "date": "2024-01-01"}
    result = parse_transactions(json.dumps([record, record]))
    assert result.is_left()
    assert result.get_error()["error"] == "duplicate_id"


def test_parse_goals_rejects_zero_target():
    text = json.dumps([
        {"id": "g1", "name": "Trip", "target": 0, "current": 0, "category": "viagem", "deadline": ""},
    ])
    assert parse_goals(text).is_left()


def tx_record(**overrides):
    record = {"id": "t1", "type": "expense", "amount": 10, "category": "Compras", "description": "", "date": "2024-01-01"}
    record.update(overrides)
    return record


def goal_record(**overrides):
    record = {"id": "g1", "name": "Trip", "target": 100, "current": 0, "category": "viagem", "deadline": ""}
    record.update(overrides)
    return record


def test_parse_transactions_rejects_non_string_fields():
    for field, value in (("description", 7), ("id", 1), ("category", ["Compras"])):
        result = parse_transactions(json.dumps([tx_record(**{field: value})]))
        assert result.is_left(), field
        assert result.get_error()["error"] == "malformed_record"


def test_parse_transactions_allows_missing_description():
    record = tx_record()
    del record["description"]
    assert parse_transactions(json.dumps([record])).get_or_else(None)[0].description == ""


def test_parse_goals_rejects_non_string_fields():
    for field, value in (("name", 5), ("id", 2), ("category", 3)):
        result = parse_goals(json.dumps([goal_record(**{field: value})]))
        assert result.is_left(), field
        assert result.get_error()["error"] == "malformed_record"


def test_parse_rejects_money_outside_wire_range():
    assert parse_transactions(json.dumps([tx_record(amount=1e30)])).is_left()
    assert parse_transactions(json.dumps([tx_record(amount=10.005)])).is_left()
    assert parse_goals(json.dumps([goal_record(target=1e30)])).is_left()
    assert parse_goals(json.dumps([goal_record(current=1e16)])).is_left()


def test_parse_transactions_rejects_date_with_trailing_text():
    result = parse_transactions(json.dumps([tx_record(date="2024-01-15garbage")]))
    assert result.get_error()["error"] == "malformed_record"


def test_largest_amounts_round_trip_exactly():
    trans = (
        make_tx("t1", TransactionType.INCOME, "9999999999999.99", "Salário", "2024-01-15"),
        make_tx("t2", TransactionType.EXPENSE, "1234567890123.45", "Compras", "2024-01-16"),
        make_tx("t3", TransactionType.EXPENSE, "0.01", "Compras", "2024-01-17"),
    )
    parsed = parse_transactions(dump_transactions(trans)).get_or_else(None)
    assert parsed == trans
    assert [t.amount for t in parsed] == [Decimal("9999999999999.99"), Decimal("1234567890123.45"), Decimal("0.01")]
