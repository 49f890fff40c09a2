import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

from tracker import config
from tracker.storage import RecordStore
from tracker.transforms import dump_goals, dump_transactions

__all__ = [
    'TRANSACTION_ADDED', 'GOAL_ADDED', 'GOAL_UPDATED',
    'Event', 'EventBus', 'register_persistence_handlers',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        for handler in self._subscribers[name]:
            result = handler(event, payload)
            results.append(result)
        return results


TRANSACTION_ADDED = "TRANSACTION_ADDED"
GOAL_ADDED = "GOAL_ADDED"
GOAL_UPDATED = "GOAL_UPDATED"


def _save(store: RecordStore, key: str, text: str) -> dict:
    try:
        ok = store.save(key, text)
    except OSError as e:
        logger.warning("Saving %s failed: %s", key, e)
        ok = False
    if not ok:
        return {"warning": f"persist_failed:{key}", "key": key, "persisted": False}
    return {"key": key, "persisted": True}


def persist_transactions_handler(store: RecordStore) -> Handler:
    def _handler(event: Event, payload: dict) -> dict:
        return _save(store, config.TRANSACTIONS_KEY, dump_transactions(payload["transactions"]))

    return _handler


def persist_goals_handler(store: RecordStore) -> Handler:
    def _handler(event: Event, payload: dict) -> dict:
        return _save(store, config.GOALS_KEY, dump_goals(payload["goals"]))

    return _handler


def register_persistence_handlers(bus: EventBus, store: RecordStore) -> None:
    """Write the full updated collection after every mutation."""
    bus.subscribe(TRANSACTION_ADDED, persist_transactions_handler(store))
    goals_handler = persist_goals_handler(store)
    bus.subscribe(GOAL_ADDED, goals_handler)
    bus.subscribe(GOAL_UPDATED, goals_handler)
