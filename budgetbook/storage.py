"""Persistence of the budget book state blob.

The whole state is read and written as one JSON document.  A missing file
yields the default seed; anything else that goes wrong surfaces as
``StorageError``.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Optional

from . import config
from .errors import StorageError
from .models import AppState, BudgetItem, Settings, TopCategory, new_id
from .periods import month_key_for_date

logger = logging.getLogger(__name__)


def default_state(today: Optional[date] = None) -> AppState:
    """Build the state used when nothing has been saved yet.

    The seed month is the budget month containing ``today`` and holds the
    sample Spending categories from ``seed.json``.
    """
    seed = config.load_seed_config()
    start_day = int(seed.get('cycle_start_day', config.DEFAULT_CYCLE_START_DAY))
    month_key = month_key_for_date(today or date.today(), start_day)
    items = [
        BudgetItem(
            id=new_id(),
            top_category=TopCategory(entry.get('top_category', TopCategory.SPENDING.value)),
            name=entry['name'],
            plan_amount=int(entry.get('plan_amount', 0)),
        )
        for entry in seed.get('categories', [])
    ]
    return AppState(
        budgets={month_key: items},
        transactions=[],
        settings=Settings(cycle_start_day=start_day),
    )


class JsonStateStorage:
    """Handles loading and saving the state blob as a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        """Initialize state storage.

        Args:
            path: Optional custom location of the state file.
                  Defaults to STATE_PATH from config.
        """
        self.path = Path(path) if path is not None else config.STATE_PATH

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> AppState:
        """Load the last saved state, or the default seed if none exists.

        Raises:
            StorageError: If the file cannot be read or does not hold a valid state
        """
        if not self.path.exists():
            logger.debug("No state at %s, using default seed", self.path)
            return default_state()
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
            state = AppState.from_dict(data)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Could not read state from %s: %s", self.path, e)
            raise StorageError(f"Failed to load state from {self.path}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed state in %s: %s", self.path, e)
            raise StorageError(f"Malformed state in {self.path}: {e}") from e
        logger.debug(
            "Loaded state from %s (%d months, %d transactions)",
            self.path, len(state.budgets), len(state.transactions),
        )
        return state

    def save(self, state: AppState) -> None:
        """Persist the full state atomically.

        The blob is written to a sibling temporary file first and then moved
        over the target, so readers never see a half-written file.

        Raises:
            StorageError: If the file cannot be written
        """
        payload = state.to_dict()
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            config.ensure_data_directories(self.path)
            with tmp_path.open('w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            logger.error("Could not save state to %s: %s", self.path, e)
            raise StorageError(f"Failed to save state to {self.path}: {e}") from e
        logger.debug("Saved state to %s", self.path)

    def reset(self) -> None:
        """Delete the stored state so the next load returns the default seed.

        Raises:
            StorageError: If the file exists but cannot be deleted
        """
        if not self.path.exists():
            return
        try:
            self.path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete state file {self.path}: {e}") from e
        logger.info("Cleared stored state at %s", self.path)
