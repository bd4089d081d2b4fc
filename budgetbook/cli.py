#!/usr/bin/env python3
"""Command line front end for the budget book."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from . import config
from .book import BudgetBook
from .errors import InvalidArgument, StorageError, ValidationError
from .models import TopCategory
from .storage import JsonStateStorage


CATEGORY_CHOICES = [c.value for c in TopCategory]


def _month(book: BudgetBook, args: argparse.Namespace) -> str:
    return args.month or book.current_month_key()


def cmd_report(book: BudgetBook, args: argparse.Namespace) -> int:
    month_key = _month(book, args)
    report = book.report(month_key)
    print(f"Budget month {month_key}: {report.period.start} to {report.period.end}")
    if not report.rows:
        print("No Spending items. Add one with `budgetbook plan`.")
    else:
        print(report.to_frame().to_string(index=False))
    print(f"\nPlanned:   {report.total_plan:,}")
    print(f"Spent:     {report.total_actual:,}")
    print(f"Remaining: {report.remaining:,}")
    return 0


def cmd_add(book: BudgetBook, args: argparse.Namespace) -> int:
    tx = book.ledger.record(args.date, args.item, args.amount, args.category, args.memo)
    print(f"Added {tx.id}: {tx.date} {tx.item_name} {tx.amount:,}")
    return 0


def cmd_remove(book: BudgetBook, args: argparse.Namespace) -> int:
    if book.ledger.remove(args.id):
        print(f"Removed {args.id}")
    else:
        print(f"No transaction {args.id}")
    return 0


def cmd_list(book: BudgetBook, args: argparse.Namespace) -> int:
    period = book.period(_month(book, args))
    view = book.ledger.filter_view(period, item_name=args.item, on_date=args.date)
    if not view:
        print("No transactions.")
        return 0
    frame = book.ledger.to_frame(view)
    print(frame[['id', 'date', 'item_name', 'amount', 'memo']].to_string(index=False))
    return 0


def cmd_days(book: BudgetBook, args: argparse.Namespace) -> int:
    for day, total in book.daily_totals(_month(book, args)).items():
        print(f"{day.isoformat()}  {total:>12,}")
    return 0


def cmd_items(book: BudgetBook, args: argparse.Namespace) -> int:
    items = book.items(_month(book, args))
    if not items:
        print("No budget items.")
    for item in items:
        print(f"{item.id}  {item.top_category.value:<8}  {item.name}  {item.plan_amount:,}")
    return 0


def cmd_plan(book: BudgetBook, args: argparse.Namespace) -> int:
    item = book.categories.upsert_item(
        _month(book, args),
        args.id,
        name=args.name,
        plan_amount=args.amount,
        top_category=args.category,
    )
    print(f"Saved {item.id}: {item.top_category.value} {item.name} {item.plan_amount:,}")
    return 0


def cmd_unplan(book: BudgetBook, args: argparse.Namespace) -> int:
    if book.categories.delete_item(_month(book, args), args.id):
        print(f"Deleted {args.id}")
    else:
        print(f"No budget item {args.id}")
    return 0


def cmd_start_day(book: BudgetBook, args: argparse.Namespace) -> int:
    if args.day is not None:
        book.settings.set_cycle_start_day(args.day)
    print(f"Cycle start day: {book.settings.cycle_start_day}")
    return 0


def cmd_sample(book: BudgetBook, args: argparse.Namespace) -> int:
    month_key = _month(book, args)
    added = book.add_sample_transactions(month_key)
    print(f"Added {len(added)} sample transactions to {month_key}")
    return 0


def cmd_reset(book: BudgetBook, args: argparse.Namespace) -> int:
    book.reset()
    print("State cleared.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='budgetbook', description='Monthly budget ledger.')
    parser.add_argument('--state', type=Path, default=config.STATE_PATH, help='Path of the state file')
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help='Logging level')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('report', help='Execution rates for a budget month')
    p.add_argument('--month', help='Budget month as YYYY-MM (default: current)')
    p.set_defaults(func=cmd_report)

    p = sub.add_parser('add', help='Record an expense')
    p.add_argument('date', help='Date as YYYY-MM-DD')
    p.add_argument('item', help='Budget item name')
    p.add_argument('amount', type=int, help='Positive whole amount')
    p.add_argument('--category', default=TopCategory.SPENDING.value, choices=CATEGORY_CHOICES)
    p.add_argument('--memo', default='')
    p.set_defaults(func=cmd_add)

    p = sub.add_parser('remove', help='Delete a transaction')
    p.add_argument('id')
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser('list', help='Spending transactions of a budget month')
    p.add_argument('--month')
    p.add_argument('--item', help='Only this item name')
    p.add_argument('--date', help='Only this date (YYYY-MM-DD)')
    p.set_defaults(func=cmd_list)

    p = sub.add_parser('days', help='Spending per day of a budget month')
    p.add_argument('--month')
    p.set_defaults(func=cmd_days)

    p = sub.add_parser('items', help='Budget items of a month')
    p.add_argument('--month')
    p.set_defaults(func=cmd_items)

    p = sub.add_parser('plan', help='Add or update a budget item')
    p.add_argument('--month')
    p.add_argument('--id', help='Existing item id to update')
    p.add_argument('--name')
    p.add_argument('--amount', type=int)
    p.add_argument('--category', choices=CATEGORY_CHOICES)
    p.set_defaults(func=cmd_plan)

    p = sub.add_parser('unplan', help='Delete a budget item')
    p.add_argument('id')
    p.add_argument('--month')
    p.set_defaults(func=cmd_unplan)

    p = sub.add_parser('start-day', help='Show or change the cycle start day')
    p.add_argument('day', nargs='?', type=int)
    p.set_defaults(func=cmd_start_day)

    p = sub.add_parser('sample', help='Add example transactions to a budget month')
    p.add_argument('--month')
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser('reset', help='Clear all stored data')
    p.set_defaults(func=cmd_reset)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging(args.log_level)
    try:
        book = BudgetBook(JsonStateStorage(args.state))
        return args.func(book, args)
    except (ValidationError, InvalidArgument) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except StorageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    raise SystemExit(main())
