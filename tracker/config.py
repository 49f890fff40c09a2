"""Configuration for the finance tracker.

Paths, store keys and display defaults live here. Paths and display
settings can be overridden through environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory for the JSON file store
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data"))

# Record store keys
TRANSACTIONS_KEY = "financial-transactions"
GOALS_KEY = "financial-goals"

# Dashboard defaults
TREND_MONTHS = 6
RECENT_LIMIT = int(os.getenv("FINTRACK_RECENT_LIMIT", "5"))

# Currency display (pt-BR, Brazilian real)
CURRENCY_SYMBOL = os.getenv("FINTRACK_CURRENCY_SYMBOL", "R$")
THOUSANDS_SEPARATOR = os.getenv("FINTRACK_THOUSANDS_SEPARATOR", ".")
DECIMAL_SEPARATOR = os.getenv("FINTRACK_DECIMAL_SEPARATOR", ",")
HIDDEN_AMOUNT = "••••••"


def ensure_data_directories() -> None:
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
