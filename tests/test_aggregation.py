from __future__ import annotations

from datetime import date

import pytest

from budgetbook.aggregation import REPORT_COLUMNS, build_report, execution_rate
from budgetbook.models import AppState, BudgetItem, Settings, TopCategory

from conftest import expense, spending


def test_march_report_rates_and_totals(make_book, march_state):
    book = make_book(march_state)
    report = book.report('2025-03')

    assert [(row.name, row.actual, row.rate) for row in report.rows] == [
        ('식비', 3300, 1),
        ('생활비', 39000, 13),
        ('공과금', 23100, 23),
    ]
    assert report.total_plan == 700000
    assert report.total_actual == 65400
    assert report.remaining == 634600


def test_overspent_item_is_clamped_but_summed_in_full(make_book):
    book = make_book(AppState(
        budgets={'2025-03': [spending('a', '식비', 1000)]},
        transactions=[expense('t1', '2025-03-04', '식비', 5000)],
    ))
    report = book.report('2025-03')
    row = report.rows[0]

    assert row.rate == 100
    assert row.over_budget is True
    assert row.remaining == 0
    assert report.total_actual == 5000
    assert report.remaining == 0


def test_zero_plan_gives_zero_rate(make_book):
    book = make_book(AppState(
        budgets={'2025-03': [spending('a', '식비', 0)]},
        transactions=[expense('t1', '2025-03-04', '식비', 500)],
    ))
    row = book.report('2025-03').rows[0]
    assert row.rate == 0
    assert row.over_budget is True


@pytest.mark.parametrize(
    'actual, plan, expected',
    [(333, 1000, 33), (5, 1000, 1), (4, 1000, 0), (995, 1000, 100), (1, 3, 33), (2, 3, 67), (0, 10, 0)],
)
def test_execution_rate_rounds_half_up(actual, plan, expected):
    assert execution_rate(actual, plan) == expected


def test_savings_and_other_never_count(make_book):
    book = make_book(AppState(
        budgets={'2025-03': [
            spending('a', '식비', 1000),
            BudgetItem(id='s', top_category=TopCategory.SAVINGS, name='식비', plan_amount=9999),
            BudgetItem(id='o', top_category=TopCategory.OTHER, name='기타', plan_amount=50),
        ]},
        transactions=[
            expense('t1', '2025-03-04', '식비', 100),
            expense('t2', '2025-03-04', '식비', 700, top=TopCategory.SAVINGS),
            expense('t3', '2025-03-05', '기타', 20, top=TopCategory.OTHER),
        ],
    ))
    report = book.report('2025-03')

    assert [row.item_id for row in report.rows] == ['a']
    assert report.actual_by_item == {'식비': 100}
    assert report.total_plan == 1000
    assert report.total_actual == 100


def test_only_transactions_inside_period_count(make_book):
    book = make_book(AppState(
        budgets={'2025-03': [spending('a', '식비', 1000)]},
        transactions=[
            expense('t1', '2025-03-24', '식비', 1),
            expense('t2', '2025-03-25', '식비', 10),
            expense('t3', '2025-04-24', '식비', 100),
            expense('t4', '2025-04-25', '식비', 1000),
        ],
        settings=Settings(cycle_start_day=25),
    ))
    assert book.report('2025-03').rows[0].actual == 110


def test_unmatched_transactions_are_left_out_of_rows(make_book):
    book = make_book(AppState(
        budgets={'2025-03': [spending('a', '식비', 1000)]},
        transactions=[expense('t1', '2025-03-04', '택시', 800)],
    ))
    report = book.report('2025-03')
    assert report.rows[0].actual == 0
    assert report.actual_by_item == {'택시': 800}
    assert report.total_actual == 0


def test_report_is_repeatable(make_book, march_state):
    book = make_book(march_state)
    first = book.report('2025-03')
    second = build_report('2025-03', book.settings.settings, book.categories, book.ledger)
    assert first == second


def test_report_propagates_new_month(make_book, march_state):
    book = make_book(march_state)
    report = book.report('2025-04')
    assert [row.name for row in report.rows] == ['식비', '생활비', '공과금']
    assert report.total_actual == 0
    assert report.period.start == date(2025, 4, 1)


def test_report_frame(make_book, march_state):
    frame = make_book(march_state).report('2025-03').to_frame()
    assert list(frame.columns) == REPORT_COLUMNS
    assert frame['Actual'].sum() == 65400
    assert frame.loc[frame['Item'] == '공과금', 'Rate'].item() == 23


def test_daily_totals_cover_whole_period(make_book, march_state):
    march_state.transactions.append(expense('t4', '2025-03-02', '식비', 700))
    march_state.transactions.append(expense('t5', '2025-03-02', '적금', 9000, top=TopCategory.SAVINGS))
    totals = make_book(march_state).daily_totals('2025-03')

    assert len(totals) == 31
    assert totals[date(2025, 3, 2)] == 4000
    assert totals[date(2025, 3, 31)] == 23100
    assert totals[date(2025, 3, 15)] == 0


def test_sample_transactions_fill_the_march_report(make_book, march_state):
    march_state.transactions.clear()
    book = make_book(march_state)

    added = book.add_sample_transactions('2025-03')
    report = book.report('2025-03')

    assert [tx.date for tx in added] == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 4)]
    assert [row.rate for row in report.rows] == [1, 13, 23]
    assert report.total_actual == 65400
