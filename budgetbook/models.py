"""Core records of the budget book and their JSON-ready conversion.

The persisted blob is a plain dictionary; everything here converts between
that dictionary and the dataclasses the rest of the package works with.
Decoding errors (missing keys, bad values) propagate as ``KeyError`` /
``ValueError`` / ``TypeError`` and are wrapped by the storage layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

STATE_VERSION = 1


class TopCategory(str, Enum):
    SPENDING = 'Spending'
    SAVINGS = 'Savings'
    OTHER = 'Other'


def new_id() -> str:
    return uuid4().hex


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class BudgetItem:
    """A planned amount for one named category inside one budget month.

    ``name`` is what transactions are matched against; there is no foreign
    key, so renaming an item leaves older transactions unmatched.
    """

    id: str
    top_category: TopCategory
    name: str
    plan_amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'top_category': self.top_category.value,
            'name': self.name,
            'plan_amount': self.plan_amount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BudgetItem':
        return cls(
            id=str(data['id']),
            top_category=TopCategory(data['top_category']),
            name=str(data['name']),
            plan_amount=int(data['plan_amount']),
        )


@dataclass(frozen=True)
class Transaction:
    """A dated expense record. Never edited after it enters the ledger."""

    id: str
    date: date
    top_category: TopCategory
    item_name: str
    amount: int
    memo: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'top_category': self.top_category.value,
            'item_name': self.item_name,
            'amount': self.amount,
            'memo': self.memo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        return cls(
            id=str(data['id']),
            date=date.fromisoformat(data['date']),
            top_category=TopCategory(data['top_category']),
            item_name=str(data['item_name']),
            amount=int(data['amount']),
            memo=str(data.get('memo') or ''),
        )


@dataclass
class Settings:
    cycle_start_day: int = 1
    # Start day changes only affect periods resolved after the change.
    effective_next_period_only: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cycle_start_day': self.cycle_start_day,
            'effective_next_period_only': self.effective_next_period_only,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Settings':
        data = data or {}
        return cls(cycle_start_day=int(data.get('cycle_start_day', 1)))


@dataclass
class AppState:
    """The whole persisted state: budget items per month, ledger, settings."""

    budgets: Dict[str, List[BudgetItem]] = field(default_factory=dict)
    transactions: List[Transaction] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': STATE_VERSION,
            'budgets': {
                key: [item.to_dict() for item in items]
                for key, items in self.budgets.items()
            },
            'transactions': [tx.to_dict() for tx in self.transactions],
            'settings': self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppState':
        if not isinstance(data, dict):
            raise TypeError(f"state must be a mapping, got {type(data).__name__}")
        budgets = data.get('budgets') or {}
        return cls(
            budgets={
                str(key): [BudgetItem.from_dict(item) for item in items]
                for key, items in budgets.items()
            },
            transactions=[Transaction.from_dict(tx) for tx in data.get('transactions') or []],
            settings=Settings.from_dict(data.get('settings')),
        )
