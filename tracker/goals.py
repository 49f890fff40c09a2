from datetime import date
from typing import Iterable, List

from tracker.domain import Goal, GoalProgress


def goal_progress(goal: Goal, today: date) -> GoalProgress:
    """Derive progress, remaining amount and days to deadline for one goal.

    ``target`` is positive for every goal that got past validation or
    parsing, so the ratio needs no zero guard. ``days_remaining`` is None
    when the goal has no deadline; 0 means due today, negative is overdue.
    """
    progress_pct = goal.current / goal.target * 100
    days_remaining = (goal.deadline - today).days if goal.deadline is not None else None
    return GoalProgress(
        goal_id=goal.id,
        progress_pct=progress_pct,
        is_completed=progress_pct >= 100,
        remaining=goal.target - goal.current,
        days_remaining=days_remaining,
        is_overdue=days_remaining is not None and days_remaining < 0,
    )


def goals_progress(goals: Iterable[Goal], today: date) -> List[GoalProgress]:
    return [goal_progress(g, today) for g in goals]
