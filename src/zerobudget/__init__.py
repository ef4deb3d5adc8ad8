"""zerobudget - Zero-based envelope budgeting with monthly carry-forward."""

from zerobudget.ledger import Ledger
from zerobudget.models import (
    Account,
    Category,
    CategoryGroup,
    CategoryMonthBudget,
    CategoryType,
    MonthlyBudget,
    Transaction,
    TransactionType,
)
from zerobudget.money import Money

__version__ = "0.1.0"
__all__ = [
    "Account",
    "Category",
    "CategoryGroup",
    "CategoryMonthBudget",
    "CategoryType",
    "Ledger",
    "Money",
    "MonthlyBudget",
    "Transaction",
    "TransactionType",
]
