from __future__ import annotations

import json
from datetime import date

import pytest

from budgetbook import config
from budgetbook.book import BudgetBook
from budgetbook.errors import StorageError
from budgetbook.models import TopCategory
from budgetbook.periods import month_key_for_date
from budgetbook.storage import JsonStateStorage, default_state


def test_missing_file_yields_default_seed(state_path):
    state = JsonStateStorage(state_path).load()
    key = month_key_for_date(date.today(), 1)

    assert list(state.budgets) == [key]
    assert [(i.top_category, i.name, i.plan_amount) for i in state.budgets[key]] == [
        (TopCategory.SPENDING, '식비', 300000),
        (TopCategory.SPENDING, '생활비', 300000),
        (TopCategory.SPENDING, '공과금', 100000),
    ]
    assert state.transactions == []
    assert state.settings.cycle_start_day == 1
    assert not state_path.exists()


def test_default_state_month_uses_given_day():
    assert list(default_state(date(2025, 7, 9)).budgets) == ['2025-07']


def test_round_trip(make_book, march_state, state_path):
    make_book(march_state)
    assert JsonStateStorage(state_path).load() == march_state


def test_saved_file_is_readable_json(make_book, march_state, state_path):
    make_book(march_state)
    data = json.loads(state_path.read_text(encoding='utf-8'))
    assert data['version'] == 1
    assert data['transactions'][0]['date'] == '2025-03-02'
    assert data['budgets']['2025-03'][0]['top_category'] == 'Spending'


@pytest.mark.parametrize('content', ['{not json', '[]', '{"budgets": {"2025-03": [{"id": "a"}]}}'])
def test_unreadable_state_raises_storage_error(state_path, content):
    state_path.write_text(content, encoding='utf-8')
    with pytest.raises(StorageError):
        JsonStateStorage(state_path).load()


def test_failed_save_leaves_memory_unchanged(make_book, march_state, state_path, monkeypatch):
    book = make_book(march_state)

    def broken_replace(src, dst):
        raise OSError('disk full')

    monkeypatch.setattr('budgetbook.storage.os.replace', broken_replace)

    with pytest.raises(StorageError):
        book.ledger.record('2025-03-05', '식비', 100)
    with pytest.raises(StorageError):
        book.settings.set_cycle_start_day(20)
    with pytest.raises(StorageError):
        book.categories.delete_item('2025-03', 'food')

    assert len(book.ledger) == 3
    assert book.settings.cycle_start_day == 1
    assert len(book.categories.get_items('2025-03')) == 3
    assert list(state_path.parent.glob('*.tmp')) == []


def test_reset_restores_seed(make_book, march_state, state_path):
    book = make_book(march_state)
    book.reset()

    assert len(book.ledger) == 0
    key = book.current_month_key()
    items = book.categories.get_items(key)
    assert [i.name for i in items] == ['식비', '생활비', '공과금']
    # the fresh seed is written back so its ids stay valid
    assert JsonStateStorage(state_path).load().budgets[key] == items


def test_default_path_comes_from_config(monkeypatch, tmp_path):
    target = tmp_path / 'elsewhere.json'
    monkeypatch.setattr(config, 'STATE_PATH', target)
    book = BudgetBook()
    assert book.storage.path == target


def test_opening_without_state_saves_seed_once(state_path):
    first = BudgetBook.at(state_path)
    assert state_path.exists()
    key = first.current_month_key()
    seeded_ids = [i.id for i in first.categories.get_items(key)]

    second = BudgetBook.at(state_path)
    assert [i.id for i in second.categories.get_items(key)] == seeded_ids


def test_save_creates_missing_directories(tmp_path, march_state):
    target = tmp_path / 'nested' / 'dir' / 'state.json'
    JsonStateStorage(target).save(march_state)
    assert JsonStateStorage(target).load() == march_state


def test_ensure_data_directories_uses_state_parent(tmp_path):
    directory = config.ensure_data_directories(tmp_path / 'a' / 'state.json')
    assert directory == tmp_path / 'a'
    assert directory.is_dir()
