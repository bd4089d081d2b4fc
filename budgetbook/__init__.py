"""Top-level package for the budget book.

A personal monthly budgeting ledger.  The primary modules are:

* ``periods`` – resolves budget months into date ranges
* ``categories`` – budget items per month and their forward propagation
* ``ledger`` – the transaction ledger
* ``aggregation`` – execution rates and totals for a month
* ``book`` – the ``BudgetBook`` facade that loads and saves the state

To use the command line front end run:

```bash
budgetbook report --month 2025-03
```
"""

from .book import BudgetBook  # noqa: F401  # re-exported for convenience
from .errors import BudgetBookError, InvalidArgument, StorageError, ValidationError  # noqa: F401
from .models import BudgetItem, Settings, TopCategory, Transaction  # noqa: F401
from .periods import Period, month_key_for_date, resolve_period  # noqa: F401

__all__ = [
    'BudgetBook',
    'BudgetBookError',
    'InvalidArgument',
    'StorageError',
    'ValidationError',
    'BudgetItem',
    'Settings',
    'TopCategory',
    'Transaction',
    'Period',
    'month_key_for_date',
    'resolve_period',
]
