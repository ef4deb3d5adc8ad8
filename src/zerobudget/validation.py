"""Validation of user-entered names, descriptions and amounts."""

from decimal import Decimal

from zerobudget.errors import InvalidAmount, InvalidCategoryName, InvalidDescription
from zerobudget.money import Money

MAX_CATEGORY_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 200
MAX_AMOUNT = Money(Decimal(1_000_000_000))


def is_valid_name(name: str) -> bool:
    return bool(name.strip())


def category_name_error(name: str) -> str | None:
    """Return a user-facing message if name is not a valid category name."""
    trimmed = name.strip()
    if not trimmed:
        return "Category name cannot be empty"
    if len(trimmed) > MAX_CATEGORY_NAME_LENGTH:
        return f"Category name must be {MAX_CATEGORY_NAME_LENGTH} characters or less"
    return None


def description_error(description: str) -> str | None:
    trimmed = description.strip()
    if not trimmed:
        return "Description cannot be empty"
    if len(trimmed) > MAX_DESCRIPTION_LENGTH:
        return f"Description must be {MAX_DESCRIPTION_LENGTH} characters or less"
    return None


def amount_error(amount: Money) -> str | None:
    if amount.amount <= 0:
        return "Amount must be greater than zero"
    if amount > MAX_AMOUNT:
        return "Amount exceeds maximum allowed value"
    return None


def is_reasonable_amount(amount: Money) -> bool:
    """Zero up to one billion inclusive."""
    return Money.zero() <= amount <= MAX_AMOUNT


def validate_category_name(name: str) -> str:
    """Return the trimmed name.

    Raises:
        InvalidCategoryName: If the name is empty or too long
    """
    if error := category_name_error(name):
        raise InvalidCategoryName(error)
    return name.strip()


def validate_description(description: str) -> str:
    if error := description_error(description):
        raise InvalidDescription(error)
    return description.strip()


def validate_amount(amount: Money) -> Money:
    if error := amount_error(amount):
        raise InvalidAmount(error)
    return amount
