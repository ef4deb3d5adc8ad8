"""Monthly carry-forward engine.

Each (category, month) pair has at most one :class:`CategoryMonthBudget`.
Entries are materialized lazily by :func:`get_or_create_month_budget`:

- ``budgeted_amount`` always starts at zero for a new month.
- ``available_from_previous`` is the previous month's
  ``budgeted + available_from_previous - actual_spent``, clamped at zero,
  and is only computed for the current month or later.
- Once created, an entry is returned unchanged. Editing transactions of
  an earlier month does not update entries already materialized after it.

Nothing in this module mutates its inputs. New entries are returned to the
caller, who decides whether to store them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from zerobudget.dates import is_in_month, iter_months, previous_month, start_of_month
from zerobudget.models import Category, CategoryMonthBudget, Transaction
from zerobudget.money import Money, clamp_non_negative, sum_money

logger = logging.getLogger(__name__)


# Transaction filtering

def transactions_in_month(
    month: date | datetime, transactions: Iterable[Transaction]
) -> list[Transaction]:
    """Transactions dated from the first to the last day of month, inclusive."""
    return [t for t in transactions if is_in_month(t.date, month)]


def transactions_for_category(
    category: Category,
    month: date | datetime,
    transactions: Iterable[Transaction],
) -> list[Transaction]:
    return [
        t for t in transactions_in_month(month, transactions)
        if t.category_id == category.id
    ]


# Spending aggregation

def actual_spending(
    category: Category,
    month: date | datetime,
    transactions: Iterable[Transaction],
) -> Money:
    """Sum of expense transactions for category in month. Income is ignored."""
    return sum_money(
        t.amount for t in transactions_for_category(category, month, transactions)
        if t.is_expense
    )


def spending_by_category(
    month: date | datetime, transactions: Iterable[Transaction]
) -> dict[str, Money]:
    """Expense totals for month keyed by category id, skipping uncategorized."""
    totals: dict[str, Money] = {}
    for t in transactions_in_month(month, transactions):
        if t.is_expense and t.category_id is not None:
            totals[t.category_id] = totals.get(t.category_id, Money.zero()) + t.amount
    return totals


def total_income(month: date | datetime, transactions: Iterable[Transaction]) -> Money:
    return sum_money(t.amount for t in transactions_in_month(month, transactions) if t.is_income)


def total_expenses(month: date | datetime, transactions: Iterable[Transaction]) -> Money:
    return sum_money(t.amount for t in transactions_in_month(month, transactions) if t.is_expense)


# Month budget lookup

def find_month_budget(
    category: Category,
    month: date | datetime,
    entries: Iterable[CategoryMonthBudget],
) -> CategoryMonthBudget | None:
    normalized = start_of_month(month)
    for entry in entries:
        if entry.category_id == category.id and entry.month == normalized:
            return entry
    return None


def resolve_month_budget(
    category: Category,
    month: date | datetime,
    entries: Iterable[CategoryMonthBudget],
) -> CategoryMonthBudget:
    """Return the stored entry for (category, month) or a legacy default.

    Categories created before monthly budgets existed only carry a single
    ``budgeted_amount``. When no entry is stored, that amount stands in as
    the month's budget with nothing carried forward. The returned default is
    not stored anywhere.
    """
    entry = find_month_budget(category, month, entries)
    if entry is not None:
        return entry
    return CategoryMonthBudget(
        category_id=category.id,
        month=start_of_month(month),
        budgeted_amount=category.budgeted_amount,
    )


def available_from_previous_month(
    category: Category,
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
    today: date | None = None,
) -> Money:
    """Carry-forward into month from the month before it.

    Zero for months before the current month.
    """
    normalized = start_of_month(month)
    current = start_of_month(today or date.today())
    if normalized < current:
        return Money.zero()

    prev = previous_month(normalized)
    prev_entry = resolve_month_budget(category, prev, entries)
    prev_spent = actual_spending(category, prev, transactions)
    return clamp_non_negative(prev_entry.ending_available(prev_spent))


def get_or_create_month_budget(
    category: Category,
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
    today: date | None = None,
) -> tuple[CategoryMonthBudget, bool]:
    """Return the entry for (category, month), creating it if needed.

    Args:
        category: Category to budget
        month: Any date in the target month
        transactions: All transactions
        entries: All stored category month budgets
        today: Reference date for "current month" (defaults to today)

    Returns:
        (entry, created). A created entry is not added to ``entries``.
    """
    existing = find_month_budget(category, month, entries)
    if existing is not None:
        return existing, False

    normalized = start_of_month(month)
    carried = available_from_previous_month(category, normalized, transactions, entries, today)
    entry = CategoryMonthBudget(
        category_id=category.id,
        month=normalized,
        budgeted_amount=Money.zero(),
        available_from_previous=carried,
    )
    logger.debug(
        "Materialized %s for %s with %s carried forward",
        category.name, normalized.strftime("%Y-%m"), carried,
    )
    return entry, True


def materialize_month(
    categories: Iterable[Category],
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
    today: date | None = None,
) -> list[CategoryMonthBudget]:
    """Create missing entries for every non-income category in month.

    Returns only the newly created entries.
    """
    created: list[CategoryMonthBudget] = []
    for category in categories:
        if category.is_income:
            continue
        entry, was_created = get_or_create_month_budget(
            category, month, transactions, entries, today
        )
        if was_created:
            created.append(entry)
    return created


def materialize_range(
    category: Category,
    start: date | datetime,
    end: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
    today: date | None = None,
) -> list[CategoryMonthBudget]:
    """Materialize category month by month from start to end, oldest first.

    Each month sees the entries created for the months before it, so
    carry-forward chains across the whole range. Returns the new entries.
    """
    known = list(entries)
    created: list[CategoryMonthBudget] = []
    for month in iter_months(start, end):
        entry, was_created = get_or_create_month_budget(
            category, month, transactions, known, today
        )
        if was_created:
            known.append(entry)
            created.append(entry)
    return created


def migrate_category(
    category: Category,
    month: date | datetime,
    entries: Iterable[CategoryMonthBudget],
) -> tuple[CategoryMonthBudget, bool]:
    """Move a category's legacy budgeted amount into a month entry.

    The legacy field is left in place so the migration can be rolled back.
    """
    existing = find_month_budget(category, month, entries)
    if existing is not None:
        return existing, False
    entry = CategoryMonthBudget(
        category_id=category.id,
        month=start_of_month(month),
        budgeted_amount=category.budgeted_amount,
    )
    return entry, True


def total_available(entry: CategoryMonthBudget, actual_spent_this_month: Money) -> Money:
    """budgeted + carried forward - spent. Negative when overspent."""
    return entry.total_available(actual_spent_this_month)


def category_available(
    category: Category,
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
) -> Money:
    """Available balance for category in month using the resolved entry."""
    entry = resolve_month_budget(category, month, entries)
    return entry.total_available(actual_spending(category, month, transactions))
