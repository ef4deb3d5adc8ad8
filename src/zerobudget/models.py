"""Data models for accounts, categories, budgets and transactions."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from zerobudget.dates import clamp_day, end_of_month, is_in_month, start_of_month
from zerobudget.errors import InvalidAmount
from zerobudget.money import Money
from zerobudget.utils.parsing import clean_description


def new_id() -> str:
    return str(uuid.uuid4())


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CategoryType(str, Enum):
    FIXED = "Fixed"
    VARIABLE = "Variable"
    QUARTERLY = "Quarterly"
    INCOME = "Income"


class CategorySort(str, Enum):
    """How categories are ordered within a group."""

    MANUAL = "manual"
    NAME = "name"
    DUE_DATE = "due_date"


@dataclass
class Account:
    """Real-world money that exists today (checking, savings, cash, credit card).

    ``current_balance`` starts equal to ``starting_balance`` and is only
    changed by posting or removing transactions. It may be negative.
    """

    name: str
    starting_balance: Money = field(default_factory=Money.zero)
    current_balance: Money | None = None
    account_type: str | None = None  # Checking, Savings, Cash, Credit Card
    notes: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        if self.current_balance is None:
            self.current_balance = self.starting_balance

    @property
    def balance(self) -> Money:
        if self.current_balance is None:
            return self.starting_balance
        return self.current_balance


@dataclass
class CategoryGroup:
    """Display container for categories, e.g. "Fixed Expenses"."""

    name: str
    sort_order: int = 0
    color_hex: str | None = None
    category_sort: CategorySort = CategorySort.MANUAL
    id: str = field(default_factory=new_id)


@dataclass
class Category:
    """A named budget envelope."""

    name: str
    category_type: CategoryType = CategoryType.VARIABLE
    due_day_of_month: int | None = None
    is_last_day_of_month: bool = False
    group_id: str | None = None
    sort_order: int = 0
    color_hex: str | None = None
    # Pre-monthly-budget amount; read only through rollover.resolve_month_budget
    budgeted_amount: Money = field(default_factory=Money.zero)
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_income(self) -> bool:
        return self.category_type == CategoryType.INCOME

    def effective_due_date(self, today: date | None = None) -> date | None:
        """Resolve the due date within the month containing today.

        The last-day flag wins over an explicit day. An explicit day past the
        end of the month clamps to the month's last day.
        """
        if today is None:
            today = date.today()

        if self.is_last_day_of_month:
            return end_of_month(today)

        if self.due_day_of_month is not None:
            return clamp_day(today.year, today.month, self.due_day_of_month)

        return None


@dataclass
class CategoryMonthBudget:
    """Budget entry for one category in one month.

    ``budgeted_amount`` is what the user assigned this month only.
    ``available_from_previous`` is the carry-forward computed when the entry
    was first materialized; it is not recomputed afterwards.
    """

    category_id: str
    month: date
    budgeted_amount: Money = field(default_factory=Money.zero)
    available_from_previous: Money = field(default_factory=Money.zero)

    def __post_init__(self) -> None:
        self.month = start_of_month(self.month)

    @property
    def key(self) -> tuple[str, date]:
        return (self.category_id, self.month)

    @property
    def allocated(self) -> Money:
        """Budgeted this month plus carried forward."""
        return self.budgeted_amount + self.available_from_previous

    def total_available(self, actual_spent: Money) -> Money:
        """Available after this month's spending. May be negative."""
        return self.budgeted_amount + self.available_from_previous - actual_spent

    def ending_available(self, actual_spent: Money) -> Money:
        """What the next month's carry-forward is computed from, before clamping."""
        return self.total_available(actual_spent)

    def is_for_month(self, value: date | datetime) -> bool:
        return is_in_month(value, self.month)

    def is_before_month(self, value: date | datetime) -> bool:
        return self.month < start_of_month(value)

    def is_after_month(self, value: date | datetime) -> bool:
        return self.month > start_of_month(value)


@dataclass(frozen=True)
class Transaction:
    """A posted income or expense.

    ``amount`` is never negative; direction comes from ``type``.
    """

    date: datetime
    amount: Money
    type: TransactionType
    description: str = ""
    category_id: str | None = None
    account_id: str | None = None
    notes: str | None = None
    receipt: bytes | None = field(default=None, compare=False, repr=False)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        """Normalize and validate transaction data."""
        if not isinstance(self.date, datetime):
            object.__setattr__(self, "date", datetime.combine(self.date, time()))
        if not isinstance(self.amount, Money):
            object.__setattr__(self, "amount", Money(self.amount))
        if not isinstance(self.type, TransactionType):
            object.__setattr__(self, "type", TransactionType(self.type))
        if self.amount.is_negative:
            raise InvalidAmount(f"Transaction amount must not be negative: {self.amount}")
        object.__setattr__(self, "description", clean_description(self.description))

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def signed_amount(self) -> Money:
        """Positive for income, negative for expenses."""
        return self.amount if self.is_income else -self.amount

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV output."""
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "amount": str(self.amount),
            "type": self.type.value,
            "category_id": self.category_id or "",
            "account_id": self.account_id or "",
            "notes": self.notes or "",
        }


@dataclass
class MonthlyBudget:
    """Money on hand at the start of a month. Informational only."""

    month: date
    starting_balance: Money = field(default_factory=Money.zero)
    notes: str | None = None

    def __post_init__(self) -> None:
        self.month = start_of_month(self.month)
