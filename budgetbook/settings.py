"""Cycle start day setting."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from .errors import ValidationError
from .models import AppState, Settings
from .periods import Period, month_key_for_date, resolve_period
from .state import StateHandle

logger = logging.getLogger(__name__)


class SettingsController:
    """Reads and changes the process-wide settings.

    A new start day applies to every period resolved after the change.
    Periods that were already resolved are plain values and stay as they
    were; no history of earlier start days is kept.
    """

    def __init__(self, handle: StateHandle):
        self.handle = handle

    @property
    def settings(self) -> Settings:
        return self.handle.state.settings

    @property
    def cycle_start_day(self) -> int:
        return self.settings.cycle_start_day

    def set_cycle_start_day(self, day: int) -> None:
        """Store a new cycle start day.

        Raises:
            ValidationError: If ``day`` is not an integer within 1-31
            StorageError: If the setting cannot be saved
        """
        if isinstance(day, bool) or not isinstance(day, int):
            raise ValidationError(f"Start day must be a whole number, got {day!r}")
        if not 1 <= day <= 31:
            raise ValidationError(f"Start day must be within 1-31, got {day}")
        previous = self.cycle_start_day

        def apply(draft: AppState) -> None:
            draft.settings.cycle_start_day = day
            draft.settings.effective_next_period_only = True

        self.handle.mutate(apply)
        logger.info("Cycle start day changed from %d to %d", previous, day)

    def resolve(self, month_key: str) -> Period:
        return resolve_period(month_key, self.cycle_start_day)

    def current_month_key(self, today: Optional[date] = None) -> str:
        """Key of the budget month that contains ``today``."""
        return month_key_for_date(today or date.today(), self.cycle_start_day)
