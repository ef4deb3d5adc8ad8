"""Transaction list filtering."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from zerobudget.dates import is_in_month
from zerobudget.models import Transaction, TransactionType


class TypeFilter(str, Enum):
    ALL = "All"
    INCOME = "Income"
    EXPENSE = "Expense"


class DateRange(str, Enum):
    ALL_TIME = "All Time"
    THIS_MONTH = "This Month"
    LAST_30_DAYS = "Last 30 Days"
    LAST_90_DAYS = "Last 90 Days"
    CUSTOM = "Custom Range"


@dataclass
class TransactionFilter:
    """Active filter selections for a transaction list.

    ``None`` for account or category means "all".
    """

    type_filter: TypeFilter = TypeFilter.ALL
    account_id: str | None = None
    category_id: str | None = None
    uncategorized_only: bool = False
    date_range: DateRange = DateRange.ALL_TIME
    custom_start: date | None = None
    custom_end: date | None = None

    @property
    def has_active_filters(self) -> bool:
        return (
            self.type_filter != TypeFilter.ALL
            or self.account_id is not None
            or self.category_id is not None
            or self.uncategorized_only
            or self.date_range != DateRange.ALL_TIME
        )

    def reset(self) -> None:
        self.type_filter = TypeFilter.ALL
        self.account_id = None
        self.category_id = None
        self.uncategorized_only = False
        self.date_range = DateRange.ALL_TIME
        self.custom_start = None
        self.custom_end = None

    def describe(self) -> str:
        """Short human-readable summary such as "Expense • Last 30 Days"."""
        parts: list[str] = []
        if self.type_filter != TypeFilter.ALL:
            parts.append(self.type_filter.value)
        if self.account_id is not None:
            parts.append("[Account]")
        if self.category_id is not None:
            parts.append("[Category]")
        if self.uncategorized_only:
            parts.append("Uncategorized")
        if self.date_range != DateRange.ALL_TIME:
            parts.append(self.date_range.value)
        return " • ".join(parts)

    def matches(self, transaction: Transaction, today: date | None = None) -> bool:
        if self.type_filter == TypeFilter.INCOME and transaction.type != TransactionType.INCOME:
            return False
        if self.type_filter == TypeFilter.EXPENSE and transaction.type != TransactionType.EXPENSE:
            return False
        if self.account_id is not None and transaction.account_id != self.account_id:
            return False
        if self.uncategorized_only:
            # Uncategorized income is normal, only expenses need a category
            if not (transaction.is_expense and transaction.category_id is None):
                return False
        elif self.category_id is not None and transaction.category_id != self.category_id:
            return False
        return self._in_date_range(transaction.date.date(), today or date.today())

    def apply(
        self, transactions: Iterable[Transaction], today: date | None = None
    ) -> list[Transaction]:
        return [t for t in transactions if self.matches(t, today)]

    def _in_date_range(self, day: date, today: date) -> bool:
        if self.date_range == DateRange.ALL_TIME:
            return True
        if self.date_range == DateRange.THIS_MONTH:
            return is_in_month(day, today)
        if self.date_range == DateRange.LAST_30_DAYS:
            return today - timedelta(days=30) <= day <= today
        if self.date_range == DateRange.LAST_90_DAYS:
            return today - timedelta(days=90) <= day <= today
        # Custom range, either bound may be open
        if self.custom_start is not None and day < self.custom_start:
            return False
        return not (self.custom_end is not None and day > self.custom_end)
