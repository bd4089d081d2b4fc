"""Budget book facade tying storage, state and components together."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Union

from . import config
from .aggregation import Report, build_report, daily_totals
from .categories import CategoryStore
from .ledger import TransactionLedger, validate_transaction
from .models import BudgetItem, TopCategory, Transaction
from .periods import Period, parse_month_key
from .settings import SettingsController
from .state import StateHandle
from .storage import JsonStateStorage

logger = logging.getLogger(__name__)


class BudgetBook:
    """Loads the state once on start-up and saves it on every change."""

    def __init__(self, storage: Optional[JsonStateStorage] = None):
        self.storage = storage or JsonStateStorage()
        self.handle = StateHandle.open(self.storage)
        self.settings = SettingsController(self.handle)
        self.categories = CategoryStore(self.handle)
        self.ledger = TransactionLedger(self.handle)

    @classmethod
    def at(cls, path: Union[str, Path]) -> 'BudgetBook':
        return cls(JsonStateStorage(Path(path)))

    def current_month_key(self, today: Optional[date] = None) -> str:
        return self.settings.current_month_key(today)

    def period(self, month_key: str) -> Period:
        return self.settings.resolve(month_key)

    def items(self, month_key: str) -> List[BudgetItem]:
        """Budget items of the month, seeding it from an earlier month if empty."""
        self.categories.ensure_propagated(month_key)
        return self.categories.get_items(month_key)

    def report(self, month_key: str) -> Report:
        self.categories.ensure_propagated(month_key)
        return build_report(month_key, self.settings.settings, self.categories, self.ledger)

    def add_sample_transactions(self, month_key: str) -> List[Transaction]:
        """Record the example Spending transactions from ``seed.json`` in a month.

        Dates are the configured days of the calendar month named by ``month_key``.
        """
        year, month = parse_month_key(month_key)
        samples = config.load_seed_config().get('sample_transactions', [])
        return self.ledger.append_many([
            validate_transaction(
                date(year, month, int(entry['day'])),
                entry['item_name'],
                int(entry['amount']),
                entry.get('top_category', TopCategory.SPENDING.value),
                entry.get('memo'),
            )
            for entry in samples
        ])

    def daily_totals(self, month_key: str) -> Dict[date, int]:
        return daily_totals(month_key, self.settings.settings, self.ledger)

    def reset(self) -> None:
        """Clear the stored state and start over from the default seed."""
        self.storage.reset()
        self.handle.reload()
        logger.info("Budget book reset to default seed")
