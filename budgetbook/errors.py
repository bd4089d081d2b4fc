"""Budget book exceptions"""


class BudgetBookError(Exception):
    """Base exception for the budget book"""

    pass


class InvalidArgument(BudgetBookError, ValueError):
    """Malformed month key or cycle start day passed by calling code"""

    pass


class ValidationError(BudgetBookError, ValueError):
    """User-entered transaction, budget item or setting breaks a domain rule"""

    pass


class StorageError(BudgetBookError, OSError):
    """State blob could not be loaded or saved"""

    pass
