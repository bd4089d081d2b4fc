"""Monthly spending report: actuals, execution rates and totals.

Only Spending transactions and Spending budget items take part.  A
transaction counts toward an item when its ``item_name`` equals the item's
name; transactions naming no current item are simply left out of the rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List

import pandas as pd

from .categories import CategoryStore
from .ledger import TransactionLedger
from .models import Settings, TopCategory
from .periods import Period, resolve_period

REPORT_COLUMNS = ['Item', 'Plan', 'Actual', 'Remaining', 'Rate', 'Over Budget']


@dataclass(frozen=True)
class ReportRow:
    item_id: str
    name: str
    plan: int
    actual: int
    rate: int
    over_budget: bool

    @property
    def remaining(self) -> int:
        return max(self.plan - self.actual, 0)


@dataclass(frozen=True)
class Report:
    month_key: str
    period: Period
    rows: List[ReportRow]
    actual_by_item: Dict[str, int] = field(default_factory=dict)

    @property
    def total_plan(self) -> int:
        return sum(row.plan for row in self.rows)

    @property
    def total_actual(self) -> int:
        return sum(row.actual for row in self.rows)

    @property
    def remaining(self) -> int:
        # Overspend shows up in the rows' flags, never as a negative balance.
        return max(self.total_plan - self.total_actual, 0)

    def to_frame(self) -> pd.DataFrame:
        """Report rows as a DataFrame with the columns in REPORT_COLUMNS."""
        return pd.DataFrame(
            [
                {
                    'Item': row.name,
                    'Plan': row.plan,
                    'Actual': row.actual,
                    'Remaining': row.remaining,
                    'Rate': row.rate,
                    'Over Budget': row.over_budget,
                }
                for row in self.rows
            ],
            columns=REPORT_COLUMNS,
        )


def execution_rate(actual: int, plan: int) -> int:
    """Integer percent of ``plan`` used by ``actual``, clamped to 0-100.

    Rounds half up (333/1000 -> 33, 5/1000 -> 1).  A zero plan yields 0.
    """
    if plan <= 0:
        return 0
    rate = (200 * actual + plan) // (2 * plan)
    return max(0, min(100, rate))


def spending_by_item(transactions: pd.DataFrame) -> Dict[str, int]:
    """Sum Spending amounts per item name."""
    spending = transactions[transactions['top_category'] == TopCategory.SPENDING.value]
    if spending.empty:
        return {}
    grouped = spending.groupby('item_name')['amount'].sum()
    return {str(name): int(total) for name, total in grouped.items()}


def build_report(
    month_key: str,
    settings: Settings,
    categories: CategoryStore,
    ledger: TransactionLedger,
) -> Report:
    """Build the spending report of one budget month.

    The month's items are read as they are; call
    ``categories.ensure_propagated(month_key)`` first to seed a new month.

    Args:
        month_key: ``YYYY-MM`` key of the budget month
        settings: Settings supplying the cycle start day
        categories: Store holding the month's budget items
        ledger: Ledger holding all transactions

    Returns:
        Report with one row per Spending item, in insertion order

    Example:
        >>> report = build_report('2025-03', settings, categories, ledger)
        >>> report.total_plan, report.total_actual, report.remaining
        (700000, 65400, 634600)
    """
    period = resolve_period(month_key, settings.cycle_start_day)
    in_period = ledger.query(lambda tx: tx.date in period)
    actual_by_item = spending_by_item(ledger.to_frame(list(in_period)))

    rows: List[ReportRow] = []
    for item in categories.get_items(month_key, TopCategory.SPENDING):
        actual = actual_by_item.get(item.name, 0)
        rows.append(ReportRow(
            item_id=item.id,
            name=item.name,
            plan=item.plan_amount,
            actual=actual,
            rate=execution_rate(actual, item.plan_amount),
            over_budget=actual > item.plan_amount,
        ))
    return Report(month_key=month_key, period=period, rows=rows, actual_by_item=actual_by_item)


def daily_totals(month_key: str, settings: Settings, ledger: TransactionLedger) -> Dict[date, int]:
    """Spending per calendar day across the whole period, zero-filled."""
    period = resolve_period(month_key, settings.cycle_start_day)
    frame = ledger.to_frame(ledger.in_period(period))
    by_date = frame.groupby('date')['amount'].sum() if not frame.empty else pd.Series(dtype=int)
    return {day: int(by_date.get(day, 0)) for day in period.dates()}
