import logging
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, List, Optional
from uuid import uuid4

from tracker import config
from tracker.domain import DashboardSummary, GoalForm, Snapshot, TransactionForm
from tracker.events import (
    GOAL_ADDED,
    GOAL_UPDATED,
    TRANSACTION_ADDED,
    EventBus,
    register_persistence_handlers,
)
from tracker.functional import (
    safe_goal,
    validate_goal_form,
    validate_goal_progress,
    validate_transaction_form,
)
from tracker.memo import dashboard_summary
from tracker.storage import RecordStore, StoreError
from tracker.transforms import (
    append_goal,
    parse_goals,
    parse_transactions,
    prepend_transaction,
    replace_goal,
)

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    applied: bool
    item: Any = None
    errors: List[dict] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _new_id() -> str:
    return uuid4().hex


class FinanceTracker:
    """Facade holding the current snapshot and the two input forms.

    Reads go through pure functions over ``snapshot``. Mutations validate,
    swap in a new snapshot and publish an event; the persistence handlers
    subscribed on ``bus`` write the full collection to the store.

    store: RecordStore the collections are loaded from and saved to
    clock: callable returning today's date (local calendar)
    id_factory: callable returning a new unique id
    """

    def __init__(
        self,
        store: RecordStore,
        bus: Optional[EventBus] = None,
        clock: Callable[[], date] = date.today,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self.bus = bus if bus is not None else EventBus()
        register_persistence_handlers(self.bus, store)
        self.snapshot = Snapshot()
        self.transaction_form = self._blank_transaction_form()
        self.goal_form = GoalForm()
        self._lock = threading.Lock()

    def _blank_transaction_form(self) -> TransactionForm:
        return TransactionForm(date=self.clock())

    def _load_collection(self, key: str, parse, kind: str, warnings: List[str]) -> tuple:
        try:
            text = self.store.load(key)
        except StoreError as e:
            logger.warning("Ignoring stored %s: %s", kind, e)
            warnings.append(f"unreadable:{key}")
            return ()
        if text is None:
            return ()
        parsed = parse(text)
        if parsed.is_left():
            error = parsed.get_error()
            logger.warning("Ignoring stored %s: %s", kind, error["message"])
            warnings.append(f"{error['error']}:{key}")
        return parsed.get_or_else(())

    def load(self) -> List[str]:
        """Replace the snapshot with the store contents.

        A missing key is an empty collection. A malformed or unreadable
        collection is dropped to empty on its own; the other one still
        loads. Returns the warnings for the dropped collections.
        """
        warnings: List[str] = []
        transactions = self._load_collection(
            config.TRANSACTIONS_KEY, parse_transactions, "transactions", warnings)
        goals = self._load_collection(config.GOALS_KEY, parse_goals, "goals", warnings)

        with self._lock:
            self.snapshot = Snapshot(transactions=transactions, goals=goals)
        return warnings

    def _publish(self, name: str, payload: dict) -> List[str]:
        results = self.bus.publish(name, payload)
        return [r["warning"] for r in results if isinstance(r, dict) and "warning" in r]

    def add_transaction(self, form: Optional[TransactionForm] = None) -> MutationResult:
        form = form if form is not None else self.transaction_form
        with self._lock:
            validated = validate_transaction_form(form, self.id_factory(), self.clock())
            if validated.is_left():
                return MutationResult(applied=False, errors=[validated.get_error()])

            tx = validated.get_or_else(None)
            transactions = prepend_transaction(self.snapshot.transactions, tx)
            self.snapshot = Snapshot(transactions=transactions, goals=self.snapshot.goals)
            self.transaction_form = self._blank_transaction_form()
            warnings = self._publish(TRANSACTION_ADDED, {"transaction": tx, "transactions": transactions})

        logger.info("Added %s transaction %s", tx.type.value, tx.id)
        return MutationResult(applied=True, item=tx, warnings=warnings)

    def add_goal(self, form: Optional[GoalForm] = None) -> MutationResult:
        form = form if form is not None else self.goal_form
        with self._lock:
            validated = validate_goal_form(form, self.id_factory())
            if validated.is_left():
                return MutationResult(applied=False, errors=[validated.get_error()])

            goal = validated.get_or_else(None)
            goals = append_goal(self.snapshot.goals, goal)
            self.snapshot = Snapshot(transactions=self.snapshot.transactions, goals=goals)
            self.goal_form = GoalForm()
            warnings = self._publish(GOAL_ADDED, {"goal": goal, "goals": goals})

        logger.info("Added goal %s", goal.id)
        return MutationResult(applied=True, item=goal, warnings=warnings)

    def update_goal_progress(self, goal_id: str, current) -> MutationResult:
        """Set a goal's saved amount; the goal keeps its position."""
        with self._lock:
            found = safe_goal(self.snapshot.goals, goal_id)
            if found.is_none():
                return MutationResult(applied=False, errors=[{
                    "error": "goal_not_found",
                    "message": f"Goal with ID {goal_id} does not exist",
                    "goal_id": goal_id,
                }])

            validated = validate_goal_progress(found.get_or_else(None), current)
            if validated.is_left():
                return MutationResult(applied=False, errors=[validated.get_error()])

            goal = validated.get_or_else(None)
            goals = replace_goal(self.snapshot.goals, goal)
            self.snapshot = Snapshot(transactions=self.snapshot.transactions, goals=goals)
            warnings = self._publish(GOAL_UPDATED, {"goal": goal, "goals": goals})

        return MutationResult(applied=True, item=goal, warnings=warnings)

    def summary(self, today: Optional[date] = None) -> DashboardSummary:
        return dashboard_summary(self.snapshot, today or self.clock())
