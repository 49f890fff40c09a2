"""Key-value record stores holding the serialized collections.

A store only moves text: ``load`` returns the JSON text saved under a key
(``None`` when nothing was saved yet) and ``save`` reports success as a bool.
A key whose saved text cannot be read raises ``StoreError`` from ``load``, so
it is never mistaken for a missing key and overwritten. Parsing the text into
domain objects is done by ``tracker.transforms``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from tracker import config

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StoreError(Exception):
    pass


class RecordStore(ABC):

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def save(self, key: str, text: str) -> bool:
        pass


class MemoryStore(RecordStore):
    """In-process store, used for tests and embedding."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def save(self, key: str, text: str) -> bool:
        self.data[key] = text
        return True


class JsonFileStore(RecordStore):
    """One ``<key>.json`` file per key under a data directory."""

    def __init__(self, directory: Path | str | None = None):
        self.directory = Path(directory) if directory is not None else config.DATA_DIR

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StoreError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[str]:
        target = self.path_for(key)
        if not target.exists():
            return None
        try:
            with target.open('r', encoding='utf-8') as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as e:
            backup = target.with_suffix(target.suffix + ".unreadable")
            try:
                target.replace(backup)
            except OSError as move_error:
                logger.warning("Could not move %s aside: %s", target, move_error)
            else:
                logger.warning("Moved unreadable %s to %s", target, backup)
            raise StoreError(f"Could not read {target}: {e}") from e

    def save(self, key: str, text: str) -> bool:
        target = self.path_for(key)
        tmp = target.with_suffix(target.suffix + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open('w', encoding='utf-8') as handle:
                handle.write(text)
            tmp.replace(target)
        except OSError as e:
            logger.warning("Could not write %s: %s", target, e)
            return False
        return True
