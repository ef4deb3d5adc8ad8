"""Pytest configuration and fixtures."""

import pytest
from factories import TODAY

from zerobudget.ledger import Ledger
from zerobudget.models import Account, Category, CategoryType
from zerobudget.money import Money


@pytest.fixture
def ledger() -> Ledger:
    """Return an empty ledger pinned to TODAY."""
    return Ledger(today=TODAY)


@pytest.fixture
def checking(ledger: Ledger) -> Account:
    """Return a checking account with 1000 in it."""
    return ledger.add_account(Account("Checking", Money("1000"), account_type="Checking"))


@pytest.fixture
def rent(ledger: Ledger) -> Category:
    return ledger.add_category(Category("Rent", CategoryType.FIXED, due_day_of_month=1))


@pytest.fixture
def groceries(ledger: Ledger) -> Category:
    return ledger.add_category(Category("Groceries", CategoryType.VARIABLE))


@pytest.fixture
def salary(ledger: Ledger) -> Category:
    return ledger.add_category(Category("Salary", CategoryType.INCOME))
