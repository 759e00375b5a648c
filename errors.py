"""
Error kinds raised by the expense store and the analytics aggregator.

The HTTP layer maps them to status codes: ValidationError -> 400,
NotFound -> 404, StorageError -> 500.
"""
from typing import List, Optional


class ExpenseError(Exception):
    """Base class for every error the core surfaces."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ExpenseError):
    def __init__(self, fields: List[str], message: Optional[str] = None):
        self.fields = list(fields)
        super().__init__(message or f"Invalid value for: {', '.join(self.fields)}")


class NotFound(ExpenseError):
    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__("Expense not found")


class StorageError(ExpenseError):
    pass
