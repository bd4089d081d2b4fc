"""Budget items per month and their forward propagation.

Reading is split in two steps: ``ensure_propagated`` may seed an empty month
from the nearest earlier month that has items (and persists that once), while
``get_items`` only reads.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from . import config
from .errors import ValidationError
from .models import AppState, BudgetItem, TopCategory, new_id
from .periods import parse_month_key
from .state import StateHandle

logger = logging.getLogger(__name__)


def _check_plan_amount(plan_amount: int) -> int:
    if isinstance(plan_amount, bool) or not isinstance(plan_amount, int):
        raise ValidationError(f"Plan amount must be a whole number, got {plan_amount!r}")
    if plan_amount < 0:
        raise ValidationError(f"Plan amount cannot be negative, got {plan_amount}")
    return plan_amount


def _check_top_category(top_category) -> TopCategory:
    try:
        return TopCategory(top_category)
    except ValueError as e:
        raise ValidationError(f"Unknown top category: {top_category!r}") from e


def previous_month_with_items(state: AppState, month_key: str) -> Optional[str]:
    """Return the greatest month key before ``month_key`` that has items.

    ``YYYY-MM`` keys sort the same as the months they name, so plain string
    comparison is enough.
    """
    earlier = [key for key, items in state.budgets.items() if key < month_key and items]
    return max(earlier) if earlier else None


class CategoryStore:
    """Budget items keyed by budget month."""

    def __init__(self, handle: StateHandle):
        self.handle = handle

    def ensure_propagated(self, month_key: str) -> bool:
        """Seed an empty month with copies of the nearest earlier month's items.

        Copies carry the same top category, name and plan amount but new ids;
        leftover balances are never carried over.  Runs at most once per
        month: after the first copy the month is no longer empty.

        Args:
            month_key: ``YYYY-MM`` key of the month about to be read

        Returns:
            True if items were copied and persisted, False if nothing changed

        Raises:
            InvalidArgument: If ``month_key`` is malformed
            StorageError: If the copied items cannot be saved
        """
        parse_month_key(month_key)
        state = self.handle.state
        if state.budgets.get(month_key):
            return False
        source_key = previous_month_with_items(state, month_key)
        if source_key is None:
            return False

        def copy_forward(draft: AppState) -> int:
            copied = [
                BudgetItem(
                    id=new_id(),
                    top_category=item.top_category,
                    name=item.name,
                    plan_amount=item.plan_amount,
                )
                for item in draft.budgets[source_key]
            ]
            draft.budgets[month_key] = copied
            return len(copied)

        count = self.handle.mutate(copy_forward)
        logger.debug("Propagated %d budget items from %s to %s", count, source_key, month_key)
        return True

    def get_items(self, month_key: str, top_category: Optional[TopCategory] = None) -> List[BudgetItem]:
        """Return the month's items in insertion order, without side effects.

        Args:
            month_key: ``YYYY-MM`` key of the month
            top_category: Optional filter, e.g. ``TopCategory.SPENDING``

        Returns:
            A new list; empty if the month has no items
        """
        parse_month_key(month_key)
        items = self.handle.state.budgets.get(month_key, [])
        if top_category is not None:
            return [item for item in items if item.top_category == top_category]
        return list(items)

    def upsert_item(
        self,
        month_key: str,
        item_id: Optional[str] = None,
        *,
        name: Optional[str] = None,
        plan_amount: Optional[int] = None,
        top_category: Optional[TopCategory] = None,
    ) -> BudgetItem:
        """Update an existing item in place or append a new one.

        An ``item_id`` matching an item of the month updates only the fields
        given.  Otherwise a new item with a fresh id is appended, defaulting to
        the Spending category, the placeholder name and a zero plan.

        Raises:
            ValidationError: If the plan amount is negative or not a whole
                number, the top category is unknown or an
                existing item would be renamed to a blank name
            StorageError: If the change cannot be saved
        """
        parse_month_key(month_key)
        if plan_amount is not None:
            _check_plan_amount(plan_amount)
        if top_category is not None:
            top_category = _check_top_category(top_category)
        if name is not None:
            name = name.strip()
        self.ensure_propagated(month_key)
        updating = item_id is not None and any(
            item.id == item_id for item in self.handle.state.budgets.get(month_key, [])
        )
        if updating and name == '':
            raise ValidationError("Item name cannot be empty")

        def apply(draft: AppState) -> BudgetItem:
            items = draft.budgets.setdefault(month_key, [])
            for item in items:
                if item_id is not None and item.id == item_id:
                    if name is not None:
                        item.name = name
                    if plan_amount is not None:
                        item.plan_amount = plan_amount
                    if top_category is not None:
                        item.top_category = top_category
                    return item
            item = BudgetItem(
                id=new_id(),
                top_category=top_category or TopCategory.SPENDING,
                name=name or config.DEFAULT_ITEM_NAME,
                plan_amount=plan_amount or 0,
            )
            items.append(item)
            return item

        item = self.handle.mutate(apply)
        logger.info("Saved budget item %s (%s) for %s", item.id, item.name, month_key)
        return item

    def delete_item(self, month_key: str, item_id: str) -> bool:
        """Remove an item from the month. Unknown ids are ignored.

        Returns:
            True if an item was removed
        """
        parse_month_key(month_key)
        items = self.handle.state.budgets.get(month_key, [])
        if not any(item.id == item_id for item in items):
            return False

        def apply(draft: AppState) -> None:
            draft.budgets[month_key] = [
                item for item in draft.budgets[month_key] if item.id != item_id
            ]

        self.handle.mutate(apply)
        logger.info("Deleted budget item %s from %s", item_id, month_key)
        return True
