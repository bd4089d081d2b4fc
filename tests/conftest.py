from __future__ import annotations

from datetime import date

import pytest

from budgetbook.book import BudgetBook
from budgetbook.models import AppState, BudgetItem, Settings, TopCategory, Transaction
from budgetbook.storage import JsonStateStorage


def spending(item_id: str, name: str, plan: int) -> BudgetItem:
    return BudgetItem(id=item_id, top_category=TopCategory.SPENDING, name=name, plan_amount=plan)


def expense(tx_id: str, day: str, name: str, amount: int, top=TopCategory.SPENDING) -> Transaction:
    return Transaction(
        id=tx_id,
        date=date.fromisoformat(day),
        top_category=top,
        item_name=name,
        amount=amount,
    )


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / 'state.json'


@pytest.fixture
def make_book(state_path):
    """Open a book on a state file pre-filled with ``state``."""

    def _make(state: AppState = None) -> BudgetBook:
        storage = JsonStateStorage(state_path)
        storage.save(state if state is not None else AppState(settings=Settings()))
        return BudgetBook(storage)

    return _make


@pytest.fixture
def march_state() -> AppState:
    return AppState(
        budgets={
            '2025-03': [
                spending('food', '식비', 300000),
                spending('living', '생활비', 300000),
                spending('bills', '공과금', 100000),
            ],
        },
        transactions=[
            expense('t1', '2025-03-02', '식비', 3300),
            expense('t2', '2025-03-10', '생활비', 39000),
            expense('t3', '2025-03-31', '공과금', 23100),
        ],
        settings=Settings(cycle_start_day=1),
    )
