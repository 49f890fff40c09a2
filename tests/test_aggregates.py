from datetime import date
from decimal import Decimal

from tracker.aggregates import (
    balance,
    balance_percentage,
    expenses_by_category,
    monthly_trend,
    recent_transactions,
    total_expenses,
    total_income,
    trailing_months,
    transaction_counts,
)
from tracker.domain import (
    CategoryTotal,
    Goal,
    GoalCategory,
    Snapshot,
    Transaction,
    TransactionType,
)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE


def make_tx(id, ttype, amount, category, d):
    return Transaction(id, ttype, Decimal(amount), category, date.fromisoformat(d))


def scenario():
    # newest first, as the tracker keeps them
    return (
        make_tx("t3", EXPENSE, "200", "Transporte", "2024-02-01"),
        make_tx("t2", EXPENSE, "300", "Alimentação", "2024-01-20"),
        make_tx("t1", INCOME, "1000", "Salário", "2024-01-15"),
    )


def test_scenario_totals():
    trans = scenario()
    assert total_income(trans) == Decimal("1000")
    assert total_expenses(trans) == Decimal("500")
    assert balance(trans) == Decimal("500")


def test_scenario_category_breakdown():
    assert expenses_by_category(scenario()) == [
        CategoryTotal("Alimentação", Decimal("300")),
        CategoryTotal("Transporte", Decimal("200")),
    ]


def test_scenario_monthly_buckets():
    trend = monthly_trend(scenario(), date(2024, 2, 15))
    by_key = {b.month_key: b for b in trend}

    jan = by_key["2024-01"]
    assert (jan.income, jan.expenses, jan.balance) == (Decimal("1000"), Decimal("300"), Decimal("700"))
    feb = by_key["2024-02"]
    assert (feb.income, feb.expenses, feb.balance) == (Decimal("0"), Decimal("200"), Decimal("-200"))


def test_totals_on_empty_log():
    assert total_income(()) == 0
    assert total_expenses(()) == 0
    assert balance(()) == 0
    assert expenses_by_category(()) == []


def test_balance_identity_has_no_rounding_drift():
    trans = (
        make_tx("a", INCOME, "0.10", "Freelance", "2024-01-01"),
        make_tx("b", INCOME, "0.20", "Freelance", "2024-01-02"),
        make_tx("c", EXPENSE, "0.30", "Compras", "2024-01-03"),
    )
    assert total_income(trans) - total_expenses(trans) == balance(trans)
    assert balance(trans) == Decimal("0")


def test_breakdown_sums_to_total_expenses_and_has_no_zero_entries():
    trans = scenario() + (
        make_tx("t4", EXPENSE, "0", "Saúde", "2024-01-01"),
        make_tx("t5", EXPENSE, "45.55", "Outros", "2024-01-01"),
        make_tx("t6", INCOME, "99", "Outros", "2024-01-01"),
    )
    breakdown = expenses_by_category(trans)

    assert sum(c.amount for c in breakdown) == total_expenses(trans)
    assert all(c.amount != 0 for c in breakdown)
    assert "Saúde" not in [c.category for c in breakdown]
    assert breakdown[-1] == CategoryTotal("Outros", Decimal("45.55"))


def test_trailing_months_crosses_year_boundary():
    assert trailing_months(date(2024, 2, 29)) == [
        (2023, 9), (2023, 10), (2023, 11), (2023, 12), (2024, 1), (2024, 2),
    ]


def test_trailing_months_end_of_month_has_no_overflow():
    months = trailing_months(date(2024, 3, 31))
    assert months == [(2023, 10), (2023, 11), (2023, 12), (2024, 1), (2024, 2), (2024, 3)]


def test_monthly_trend_always_six_buckets_even_without_transactions():
    trend = monthly_trend((), date(2025, 1, 10))

    assert len(trend) == 6
    assert [b.month_key for b in trend] == [
        "2024-08", "2024-09", "2024-10", "2024-11", "2024-12", "2025-01",
    ]
    assert [b.label for b in trend] == ["ago.", "set.", "out.", "nov.", "dez.", "jan."]
    assert all(b.income == b.expenses == b.balance == 0 for b in trend)


def test_monthly_trend_keeps_same_month_of_previous_year_apart():
    trans = (
        make_tx("a", INCOME, "100", "Salário", "2024-01-05"),
        make_tx("b", INCOME, "999", "Salário", "2023-01-05"),
    )
    trend = monthly_trend(trans, date(2024, 1, 31))
    assert trend[-1].income == Decimal("100")
    assert sum(b.income for b in trend) == Decimal("100")


def test_balance_percentage():
    assert balance_percentage(scenario()) == Decimal("50")


def test_balance_percentage_without_income_uses_unit_denominator():
    trans = (make_tx("a", EXPENSE, "25", "Compras", "2024-01-01"),)
    assert balance_percentage(trans) == Decimal("-2500")
    assert balance_percentage(()) == 0


def test_recent_transactions_takes_newest_first():
    trans = scenario()
    assert [t.id for t in recent_transactions(trans, 2)] == ["t3", "t2"]
    assert recent_transactions(trans, 10) == trans
    assert recent_transactions(trans, 0) == ()


def test_transaction_counts():
    snapshot = Snapshot(
        transactions=scenario(),
        goals=(Goal("g1", "Trip", Decimal("100"), GoalCategory.TRAVEL),),
    )
    assert transaction_counts(snapshot) == {
        "transactions": 3,
        "income": 1,
        "expense": 2,
        "goals": 1,
    }


def test_trend_window_is_fixed_at_six_months(monkeypatch):
    import importlib

    from tracker import config

    monkeypatch.setenv("FINTRACK_TREND_MONTHS", "12")
    try:
        assert importlib.reload(config).TREND_MONTHS == 6
    finally:
        monkeypatch.delenv("FINTRACK_TREND_MONTHS")
        importlib.reload(config)
    assert len(monthly_trend(scenario(), date(2024, 2, 15))) == 6
