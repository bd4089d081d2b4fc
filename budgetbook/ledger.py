"""Transaction ledger: append, remove and filtered views.

Transactions are stored most-recent-first and never edited after they are
appended.  Which budget month a transaction belongs to is computed from its
date, not stored.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable, Iterator, List, Optional, Union

import pandas as pd

from .errors import ValidationError
from .models import AppState, TopCategory, Transaction, new_id
from .periods import Period
from .state import StateHandle

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ['id', 'date', 'top_category', 'item_name', 'amount', 'memo']


def parse_date(value: Union[str, date]) -> date:
    """Accept a ``date`` or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"Not a valid calendar date: {value!r}") from e


def validate_transaction(
    day: Union[str, date],
    item_name: str,
    amount: int,
    top_category: Union[str, TopCategory] = TopCategory.SPENDING,
    memo: Optional[str] = None,
) -> Transaction:
    """Check user input and build a transaction with a placeholder id.

    Raises:
        ValidationError: If the amount is not a positive whole number, the date
            does not parse, the item name is empty or the category is unknown
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError(f"Amount must be a whole number, got {amount!r}")
    if amount <= 0:
        raise ValidationError(f"Amount must be positive, got {amount}")
    if not item_name or not str(item_name).strip():
        raise ValidationError("Item name cannot be empty")
    try:
        category = TopCategory(top_category)
    except ValueError as e:
        raise ValidationError(f"Unknown top category: {top_category!r}") from e
    return Transaction(
        id='',
        date=parse_date(day),
        top_category=category,
        item_name=str(item_name).strip(),
        amount=amount,
        memo=(memo or '').strip(),
    )


class TransactionLedger:
    """All recorded transactions, independent of budget months."""

    def __init__(self, handle: StateHandle):
        self.handle = handle

    def __len__(self) -> int:
        return len(self.handle.state.transactions)

    def append(self, transaction: Transaction) -> Transaction:
        """Validate and record a transaction under a fresh id.

        Whatever id the given transaction carries is replaced.

        Returns:
            The stored transaction

        Raises:
            ValidationError: If the transaction breaks a ledger rule
            StorageError: If the ledger cannot be saved
        """
        checked = validate_transaction(
            transaction.date,
            transaction.item_name,
            transaction.amount,
            transaction.top_category,
            transaction.memo,
        )
        stored = replace(checked, id=new_id())

        def apply(draft: AppState) -> None:
            draft.transactions.insert(0, stored)

        self.handle.mutate(apply)
        logger.info(
            "Appended transaction %s: %s %s on %s",
            stored.id, stored.item_name, stored.amount, stored.date.isoformat(),
        )
        return stored

    def append_many(self, transactions: List[Transaction]) -> List[Transaction]:
        """Validate and record several transactions in one save.

        Either every transaction is stored, in the given order ahead of the
        existing ones, or none is.

        Raises:
            ValidationError: If any transaction breaks a ledger rule
            StorageError: If the ledger cannot be saved
        """
        stored = [
            replace(
                validate_transaction(tx.date, tx.item_name, tx.amount, tx.top_category, tx.memo),
                id=new_id(),
            )
            for tx in transactions
        ]

        def apply(draft: AppState) -> None:
            draft.transactions[:0] = stored

        self.handle.mutate(apply)
        logger.info("Appended %d transactions", len(stored))
        return stored

    def record(
        self,
        day: Union[str, date],
        item_name: str,
        amount: int,
        top_category: Union[str, TopCategory] = TopCategory.SPENDING,
        memo: Optional[str] = None,
    ) -> Transaction:
        """Validate raw input and append it."""
        return self.append(validate_transaction(day, item_name, amount, top_category, memo))

    def remove(self, transaction_id: str) -> bool:
        """Delete a transaction by id. Unknown ids are ignored.

        Returns:
            True if a transaction was removed
        """
        if not any(tx.id == transaction_id for tx in self.handle.state.transactions):
            return False

        def apply(draft: AppState) -> None:
            draft.transactions = [tx for tx in draft.transactions if tx.id != transaction_id]

        self.handle.mutate(apply)
        logger.info("Removed transaction %s", transaction_id)
        return True

    def query(self, predicate: Optional[Callable[[Transaction], bool]] = None) -> Iterator[Transaction]:
        """Lazily yield transactions, most recent first, matching ``predicate``."""
        for tx in list(self.handle.state.transactions):
            if predicate is None or predicate(tx):
                yield tx

    def in_period(self, period: Period, top_category: Optional[TopCategory] = TopCategory.SPENDING) -> List[Transaction]:
        """Transactions dated inside ``period``, by default Spending only."""
        return list(self.query(
            lambda tx: tx.date in period
            and (top_category is None or tx.top_category == top_category)
        ))

    def filter_view(
        self,
        period: Period,
        item_name: Optional[str] = None,
        on_date: Optional[Union[str, date]] = None,
    ) -> List[Transaction]:
        """Spending transactions of a period narrowed by date, then by item."""
        view = self.in_period(period)
        if on_date is not None:
            day = parse_date(on_date)
            view = [tx for tx in view if tx.date == day]
        if item_name:
            view = [tx for tx in view if tx.item_name == item_name]
        return view

    def item_options(self, period: Period) -> List[str]:
        """Sorted distinct item names among the period's Spending transactions."""
        return sorted({tx.item_name for tx in self.in_period(period)})

    def to_frame(self, transactions: Optional[List[Transaction]] = None) -> pd.DataFrame:
        """Tabulate transactions (all of them by default) for grouping."""
        rows = transactions if transactions is not None else list(self.query())
        return pd.DataFrame(
            [
                {
                    'id': tx.id,
                    'date': tx.date,
                    'top_category': tx.top_category.value,
                    'item_name': tx.item_name,
                    'amount': tx.amount,
                    'memo': tx.memo,
                }
                for tx in rows
            ],
            columns=FRAME_COLUMNS,
        )
