"""In-memory ledger that applies lifecycle rules around the calculation core."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime

from zerobudget import rollover, summary
from zerobudget.dates import start_of_month
from zerobudget.errors import (
    AccountNotFound,
    CategoryNotFound,
    DuplicateCategory,
    DuplicateGroup,
    InvalidAmount,
    TransactionNotFound,
)
from zerobudget.models import (
    Account,
    Category,
    CategoryGroup,
    CategoryMonthBudget,
    CategoryType,
    MonthlyBudget,
    Transaction,
)
from zerobudget.money import Money
from zerobudget.validation import validate_amount, validate_category_name, validate_description

logger = logging.getLogger(__name__)

# Created in this order, with sort orders 1 to 3, when a ledger has no groups
DEFAULT_GROUPS = (
    ("Fixed Expenses", CategoryType.FIXED),
    ("Variable Expenses", CategoryType.VARIABLE),
    ("Quarterly Expenses", CategoryType.QUARTERLY),
)


class Ledger:
    """
    Holds a user's accounts, categories, transactions and month budgets.

    The ledger is the single writer for its collections. Calculations are
    delegated to :mod:`zerobudget.rollover` and :mod:`zerobudget.summary`;
    the ledger only stores what they return.

    Usage:
        ledger = Ledger()
        checking = ledger.add_account(Account("Checking", Money("1000")))
        rent = ledger.add_category(Category("Rent", CategoryType.FIXED))
        ledger.assign(rent, date(2024, 7, 1), Money("800"))
        ledger.post_transaction(Transaction(...))
        ledger.ready_to_assign(date(2024, 7, 1))
    """

    def __init__(self, today: date | None = None) -> None:
        """
        Initialize an empty ledger.

        Args:
            today: Fixed reference date for "current month" (defaults to the
                real date on every call)
        """
        self._today = today
        self.accounts: list[Account] = []
        self.groups: list[CategoryGroup] = []
        self.categories: list[Category] = []
        self.transactions: list[Transaction] = []
        self.month_budgets: list[CategoryMonthBudget] = []
        self.monthly_budgets: list[MonthlyBudget] = []

    @property
    def today(self) -> date:
        return self._today or date.today()

    # Lookups

    def get_account(self, account_id: str) -> Account:
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise AccountNotFound(account_id)

    def get_category(self, category_id: str) -> Category:
        for category in self.categories:
            if category.id == category_id:
                return category
        raise CategoryNotFound(category_id)

    def find_category(self, name: str) -> Category | None:
        name = name.strip()
        return next((c for c in self.categories if c.name == name), None)

    def find_account(self, name: str) -> Account | None:
        name = name.strip()
        return next((a for a in self.accounts if a.name == name), None)

    def get_transaction(self, transaction_id: str) -> Transaction:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        raise TransactionNotFound(transaction_id)

    # Accounts

    def add_account(self, account: Account) -> Account:
        self.accounts.append(account)
        logger.info("Added account %s with balance %s", account.name, account.balance)
        return account

    def delete_account(self, account_id: str) -> Account:
        """Delete an account, keeping its transactions without an account."""
        account = self.get_account(account_id)
        self.accounts.remove(account)
        self.transactions = [
            replace(t, account_id=None) if t.account_id == account_id else t
            for t in self.transactions
        ]
        logger.info("Deleted account %s", account.name)
        return account

    # Categories

    def find_group(self, name: str) -> CategoryGroup | None:
        name = name.strip()
        return next((g for g in self.groups if g.name == name), None)

    def add_group(self, group: CategoryGroup) -> CategoryGroup:
        """
        Add a category group.

        Raises:
            DuplicateGroup: If another group has the same name
        """
        group.name = group.name.strip()
        if self.find_group(group.name) is not None:
            raise DuplicateGroup(group.name)
        self.groups.append(group)
        return group

    def ensure_default_groups(self) -> list[CategoryGroup]:
        """Create the default expense groups for a ledger that has none.

        Categories without a group are placed by type. Income categories
        stay ungrouped. Nothing happens when any group already exists.

        Returns:
            The groups created, empty if the ledger already had groups
        """
        if self.groups:
            return []

        by_type: dict[CategoryType, CategoryGroup] = {}
        for sort_order, (name, category_type) in enumerate(DEFAULT_GROUPS, start=1):
            by_type[category_type] = self.add_group(CategoryGroup(name, sort_order=sort_order))

        for category in self.categories:
            if category.group_id is not None or category.is_income:
                continue
            group = by_type.get(category.category_type, by_type[CategoryType.VARIABLE])
            category.group_id = group.id

        logger.info("Created %d default category groups", len(by_type))
        return list(by_type.values())

    def add_category(self, category: Category) -> Category:
        """
        Add a category after validating its name.

        Raises:
            InvalidCategoryName: If the name is empty or too long
            DuplicateCategory: If another category has the same name
        """
        category.name = validate_category_name(category.name)
        if self.find_category(category.name) is not None:
            raise DuplicateCategory(category.name)
        self.categories.append(category)
        logger.info("Added %s category %s", category.category_type.value, category.name)
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        category = self.get_category(category_id)
        name = validate_category_name(name)
        other = self.find_category(name)
        if other is not None and other.id != category_id:
            raise DuplicateCategory(name)
        category.name = name
        return category

    def delete_category(self, category_id: str) -> Category:
        """Delete a category and its transactions.

        Each deleted transaction's effect on its account is reverted. Month
        budget history is kept but no longer counted.
        """
        category = self.get_category(category_id)
        for transaction in [t for t in self.transactions if t.category_id == category_id]:
            self.remove_transaction(transaction.id)
        self.categories.remove(category)
        logger.info("Deleted category %s", category.name)
        return category

    # Transactions

    def post_transaction(self, transaction: Transaction) -> Transaction:
        """
        Record a transaction and apply it to its account balance.

        Raises:
            InvalidAmount: If the amount is zero or above the maximum
            InvalidDescription: If the description is empty or too long
            AccountNotFound: If the account id is unknown
            CategoryNotFound: If the category id is unknown
        """
        validate_amount(transaction.amount)
        validate_description(transaction.description)
        account = self.get_account(transaction.account_id) if transaction.account_id else None
        if transaction.category_id is not None:
            self.get_category(transaction.category_id)

        self.transactions.append(transaction)
        if account is not None:
            account.current_balance = account.balance + transaction.signed_amount
        logger.debug("Posted %s %s on %s", transaction.type.value, transaction.amount,
                     transaction.date.date())
        return transaction

    def remove_transaction(self, transaction_id: str) -> Transaction:
        transaction = self.get_transaction(transaction_id)
        self.transactions.remove(transaction)
        if transaction.account_id is not None:
            account = next((a for a in self.accounts if a.id == transaction.account_id), None)
            if account is not None:
                account.current_balance = account.balance - transaction.signed_amount
        return transaction

    # Month budgets

    def month_budget(self, category: Category, month: date | datetime) -> CategoryMonthBudget:
        """Get or create and store the entry for (category, month)."""
        entry, created = rollover.get_or_create_month_budget(
            category, month, self.transactions, self.month_budgets, self.today
        )
        if created:
            self.month_budgets.append(entry)
        return entry

    def materialize_month(self, month: date | datetime) -> list[CategoryMonthBudget]:
        created = rollover.materialize_month(
            self.categories, month, self.transactions, self.month_budgets, self.today
        )
        self.month_budgets.extend(created)
        if created:
            logger.info("Materialized %d categories for %s", len(created),
                        start_of_month(month).strftime("%Y-%m"))
        return created

    def migrate_legacy_budgets(self, month: date | datetime) -> list[CategoryMonthBudget]:
        """Copy legacy per-category amounts into entries for month."""
        created: list[CategoryMonthBudget] = []
        for category in self.categories:
            entry, was_created = rollover.migrate_category(category, month, self.month_budgets)
            if was_created:
                self.month_budgets.append(entry)
                created.append(entry)
        return created

    def assign(
        self, category: Category, month: date | datetime, amount: Money
    ) -> CategoryMonthBudget:
        """Set the amount budgeted to category for month.

        Raises:
            InvalidAmount: If amount is negative
        """
        if amount.is_negative:
            raise InvalidAmount("Budgeted amount cannot be negative")
        entry = self.month_budget(category, month)
        entry.budgeted_amount = amount
        return entry

    def move_money(
        self, source: Category, target: Category, month: date | datetime, amount: Money
    ) -> None:
        """Move budgeted money between two categories in the same month."""
        validate_amount(amount)
        source_entry = self.month_budget(source, month)
        if amount > source_entry.budgeted_amount:
            raise InvalidAmount(f"{source.name} only has {source_entry.budgeted_amount} budgeted")
        target_entry = self.month_budget(target, month)
        source_entry.budgeted_amount = source_entry.budgeted_amount - amount
        target_entry.budgeted_amount = target_entry.budgeted_amount + amount

    def monthly_budget(self, month: date | datetime) -> MonthlyBudget:
        normalized = start_of_month(month)
        for budget in self.monthly_budgets:
            if budget.month == normalized:
                return budget
        budget = MonthlyBudget(month=normalized)
        self.monthly_budgets.append(budget)
        return budget

    # Summaries

    def ready_to_assign(self, month: date | datetime) -> Money:
        return summary.ready_to_assign(
            self.accounts, self.transactions, self.month_budgets, month, self.categories
        )

    def category_available(self, category: Category, month: date | datetime) -> Money:
        return rollover.category_available(category, month, self.transactions, self.month_budgets)

    def comparisons(self, month: date | datetime) -> list[summary.CategoryComparison]:
        expense_categories = [c for c in self.categories if not c.is_income]
        return summary.category_comparisons(
            expense_categories, month, self.transactions, self.month_budgets
        )

    def group_summaries(self, month: date | datetime) -> list[summary.GroupSummary]:
        return summary.group_summaries(
            self.groups, self.categories, month, self.transactions, self.month_budgets,
            today=self.today,
        )

    def running_balance(self) -> list[tuple[Transaction, Money]]:
        return summary.running_balance(self.transactions)

    def verify_account_balances(self) -> list[Account]:
        """Return accounts whose balance disagrees with their transactions."""
        mismatched: list[Account] = []
        for account in self.accounts:
            expected = account.starting_balance
            for t in self.transactions:
                if t.account_id == account.id:
                    expected = expected + t.signed_amount
            if expected != account.balance:
                logger.warning("Account %s balance %s, expected %s",
                               account.name, account.balance, expected)
                mismatched.append(account)
        return mismatched
