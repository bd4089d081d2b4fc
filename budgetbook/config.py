"""Configuration management for the budget book.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

# Base project root - assumes this file is in budgetbook/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGETBOOK_DATA_DIR", _PROJECT_ROOT / "data"))

# Persisted state blob
STATE_PATH = Path(
    os.getenv("BUDGETBOOK_STATE_PATH", DATA_DIR / "budgetbook_state.json")
).resolve()

# Packaged seed definition
SEED_CONFIG_PATH = Path(__file__).parent / "seed.json"

LOG_LEVEL = os.getenv("BUDGETBOOK_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

DEFAULT_CYCLE_START_DAY = 1
DEFAULT_ITEM_NAME = "New item"


def ensure_data_directories(state_path: Optional[Path] = None) -> Path:
    """Create the directory holding the state file if it doesn't exist.

    Args:
        state_path: State file location. Defaults to STATE_PATH.

    Returns:
        The directory that now exists
    """
    directory = Path(state_path or STATE_PATH).parent
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def load_seed_config() -> Dict[str, Any]:
    """Load the seed definition used when no state has been saved yet.

    Returns:
        Dictionary with ``cycle_start_day``, a ``categories`` list of
        ``{"top_category", "name", "plan_amount"}`` entries and a
        ``sample_transactions`` list of ``{"day", "item_name", "amount"}`` entries

    Raises:
        FileNotFoundError: If the seed file is missing from the package
        json.JSONDecodeError: If the seed file is invalid JSON
    """
    with open(SEED_CONFIG_PATH, 'r', encoding='utf-8') as f:
        return json.load(f)


class BudgetBookJsonFormatter(jsonlogger.JsonFormatter):
    """JSON log lines with timestamp and level fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.utcnow().isoformat()
        log_record["level"] = record.levelname


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send JSON log records to stderr unless the root logger is already set up."""
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(level.upper())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(BudgetBookJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)
