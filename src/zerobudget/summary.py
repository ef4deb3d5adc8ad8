"""Aggregations over accounts, transactions and category month budgets."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from zerobudget.dates import start_of_month
from zerobudget.models import (
    Account,
    Category,
    CategoryGroup,
    CategoryMonthBudget,
    CategorySort,
    CategoryType,
    Transaction,
)
from zerobudget.money import Money, percentage_of, sum_money
from zerobudget.rollover import (
    actual_spending,
    resolve_month_budget,
    spending_by_category,
    total_expenses,
    total_income,
)


@dataclass(frozen=True)
class CategoryComparison:
    """Budgeted versus actual spending for one category in one month."""

    category_id: str
    category_name: str
    budgeted: Money
    actual: Money

    @property
    def difference(self) -> Money:
        """Positive when under budget."""
        return self.budgeted - self.actual

    @property
    def percentage_used(self) -> float:
        return percentage_of(self.actual, self.budgeted)

    @property
    def percentage_remaining(self) -> float:
        return 1.0 - self.percentage_used

    @property
    def is_over_budget(self) -> bool:
        return self.actual > self.budgeted


@dataclass(frozen=True)
class GroupSummary:
    group_id: str | None
    name: str
    budgeted: Money
    actual: Money
    comparisons: tuple[CategoryComparison, ...]

    @property
    def difference(self) -> Money:
        return self.budgeted - self.actual


@dataclass(frozen=True)
class MonthSummary:
    month: date
    income: Money
    expenses: Money

    @property
    def net(self) -> Money:
        return self.income - self.expenses


def ready_to_assign(
    accounts: Iterable[Account],
    transactions: Sequence[Transaction],
    entries: Iterable[CategoryMonthBudget],
    month: date | datetime,
    categories: Iterable[Category] | None = None,
) -> Money:
    """Money on hand that is not yet committed to a category.

    On hand is the sum of live account balances. Committed is, for each
    entry of ``month``, what is still available in it (budgeted plus
    carried forward minus spent this month), plus, for every entry after
    ``month``, its budgeted amount less what was spent in its own month.
    Later entries' carry-forward comes out of this month's money, so it is
    not counted twice. Earlier entries are already reflected in balances
    and in this month's carry-forward.

    Posting income raises the result by the income amount. Posting an
    expense to a budgeted category in ``month`` or later lowers both a
    balance and that category's commitment, so the result does not change.

    Args:
        accounts: All accounts
        transactions: All transactions
        entries: Stored category month budgets
        month: Month being budgeted
        categories: When given, entries for unknown or income categories
            are ignored
    """
    normalized = start_of_month(month)
    on_hand = sum_money(a.balance for a in accounts)

    allowed: set[str] | None = None
    if categories is not None:
        allowed = {c.id for c in categories if not c.is_income}

    spent_by_month: dict[date, dict[str, Money]] = {}

    def spent(entry: CategoryMonthBudget) -> Money:
        if entry.month not in spent_by_month:
            spent_by_month[entry.month] = spending_by_category(entry.month, transactions)
        return spent_by_month[entry.month].get(entry.category_id, Money.zero())

    committed = Money.zero()
    for entry in entries:
        if allowed is not None and entry.category_id not in allowed:
            continue
        if entry.month == normalized:
            committed += entry.total_available(spent(entry))
        elif entry.month > normalized:
            committed += entry.budgeted_amount - spent(entry)

    return on_hand - committed


def compare_category(
    category: Category,
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
) -> CategoryComparison:
    return CategoryComparison(
        category_id=category.id,
        category_name=category.name,
        budgeted=resolve_month_budget(category, month, entries).budgeted_amount,
        actual=actual_spending(category, month, transactions),
    )


def category_comparisons(
    categories: Iterable[Category],
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
) -> list[CategoryComparison]:
    """One comparison per category, in the order the categories are given."""
    return [compare_category(c, month, transactions, entries) for c in categories]


def comparisons_by_type(
    categories: Iterable[Category],
    category_type: CategoryType,
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
) -> list[CategoryComparison]:
    matching = [c for c in categories if c.category_type == category_type]
    return category_comparisons(matching, month, transactions, entries)


def total_budgeted(
    category_type: CategoryType,
    categories: Iterable[Category],
    month: date | datetime,
    entries: Sequence[CategoryMonthBudget],
) -> Money:
    return sum_money(
        resolve_month_budget(c, month, entries).budgeted_amount
        for c in categories
        if c.category_type == category_type
    )


def total_actual(
    category_type: CategoryType,
    categories: Iterable[Category],
    month: date | datetime,
    transactions: Sequence[Transaction],
) -> Money:
    return sum_money(
        actual_spending(c, month, transactions)
        for c in categories
        if c.category_type == category_type
    )


def sort_categories(
    categories: Iterable[Category],
    option: CategorySort = CategorySort.MANUAL,
    today: date | None = None,
) -> list[Category]:
    """Order categories within a group.

    Manual order falls back to creation time. Categories without a due date
    sort last when ordering by due date.
    """
    if option == CategorySort.NAME:
        return sorted(categories, key=lambda c: (c.name.casefold(), c.name))
    if option == CategorySort.DUE_DATE:
        def due_key(c: Category) -> tuple[bool, date, str]:
            due = c.effective_due_date(today)
            return (due is None, due or date.max, c.name.casefold())

        return sorted(categories, key=due_key)
    return sorted(categories, key=lambda c: (c.sort_order, c.created_at))


def group_summaries(
    groups: Iterable[CategoryGroup],
    categories: Sequence[Category],
    month: date | datetime,
    transactions: Sequence[Transaction],
    entries: Sequence[CategoryMonthBudget],
    include_income: bool = False,
    today: date | None = None,
) -> list[GroupSummary]:
    """Totals per group ordered by group sort order.

    Categories whose group is missing are collected in a trailing
    "Ungrouped" summary.
    """
    visible = [c for c in categories if include_income or not c.is_income]
    summaries: list[GroupSummary] = []
    seen: set[str] = set()

    def build(group_id: str | None, name: str, members: list[Category]) -> GroupSummary:
        comparisons = tuple(category_comparisons(members, month, transactions, entries))
        return GroupSummary(
            group_id=group_id,
            name=name,
            budgeted=sum_money(c.budgeted for c in comparisons),
            actual=sum_money(c.actual for c in comparisons),
            comparisons=comparisons,
        )

    for group in sorted(groups, key=lambda g: (g.sort_order, g.name)):
        seen.add(group.id)
        members = sort_categories(
            [c for c in visible if c.group_id == group.id], group.category_sort, today
        )
        summaries.append(build(group.id, group.name, members))

    ungrouped = [c for c in visible if c.group_id not in seen]
    if ungrouped:
        summaries.append(build(None, "Ungrouped", sort_categories(ungrouped, today=today)))

    return summaries


def running_balance(transactions: Iterable[Transaction]) -> list[tuple[Transaction, Money]]:
    """Cumulative income minus expenses, oldest first.

    Ties on date are broken by transaction id, so any ordering of the same
    transactions gives the same result.
    """
    balance = Money.zero()
    result: list[tuple[Transaction, Money]] = []
    for t in sorted(transactions, key=lambda t: (t.date, t.id)):
        balance += t.signed_amount
        result.append((t, balance))
    return result


def month_summary(month: date | datetime, transactions: Sequence[Transaction]) -> MonthSummary:
    return MonthSummary(
        month=start_of_month(month),
        income=total_income(month, transactions),
        expenses=total_expenses(month, transactions),
    )


def unknown_category_references(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> list[Transaction]:
    """Transactions whose category id matches none of categories.

    Aggregations silently skip these; callers that need strict validation
    can check them here.
    """
    known = {c.id for c in categories}
    return [t for t in transactions if t.category_id is not None and t.category_id not in known]
