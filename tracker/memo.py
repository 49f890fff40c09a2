from datetime import date
from functools import lru_cache

from tracker import aggregates
from tracker.domain import DashboardSummary, Snapshot
from tracker.goals import goals_progress


@lru_cache(maxsize=32)
def dashboard_summary(snapshot: Snapshot, today: date) -> DashboardSummary:
    """Everything the dashboard renders, cached per (snapshot, day).

    Snapshots are immutable, so a new mutation always produces a new key.
    """
    trans = snapshot.transactions
    return DashboardSummary(
        total_income=aggregates.total_income(trans),
        total_expenses=aggregates.total_expenses(trans),
        balance=aggregates.balance(trans),
        balance_pct=aggregates.balance_percentage(trans),
        by_category=tuple(aggregates.expenses_by_category(trans)),
        monthly=tuple(aggregates.monthly_trend(trans, today)),
        goals=tuple(goals_progress(snapshot.goals, today)),
        recent=aggregates.recent_transactions(trans),
        counts=tuple(aggregates.transaction_counts(snapshot).items()),
    )
