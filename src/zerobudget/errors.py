"""Exception types raised by zerobudget."""


class BudgetError(Exception):
    """Base class for all budget errors."""

    recovery_suggestion: str = "Please check your input and try again"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidAmountFormat(BudgetError, ValueError):
    """A monetary string could not be parsed."""

    recovery_suggestion = "Please enter a number such as 1234.56"

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid amount: {text!r}")
        self.text = text


class InvalidAmount(BudgetError, ValueError):
    """A monetary value is outside the accepted range."""

    recovery_suggestion = "Please enter a positive amount"


class InvalidCategoryName(BudgetError, ValueError):
    recovery_suggestion = "Please enter a valid category name (1-50 characters)"


class InvalidDescription(BudgetError, ValueError):
    recovery_suggestion = "Please enter a valid description (1-200 characters)"


class DuplicateCategory(BudgetError):
    """A category with the same name already exists."""

    recovery_suggestion = "Please choose a different name for this category"

    def __init__(self, name: str) -> None:
        super().__init__(f"A category named '{name}' already exists")
        self.name = name


class DuplicateGroup(BudgetError):
    """A category group with the same name already exists."""

    recovery_suggestion = "Please choose a different name for this group"

    def __init__(self, name: str) -> None:
        super().__init__(f"A group named '{name}' already exists")
        self.name = name


class CategoryNotFound(BudgetError, KeyError):
    recovery_suggestion = "Please try refreshing the view"

    def __init__(self, category_id: str) -> None:
        super().__init__(f"Category not found: {category_id}")
        self.category_id = category_id

    def __str__(self) -> str:
        return self.message


class AccountNotFound(BudgetError, KeyError):
    recovery_suggestion = "Please try refreshing the view"

    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id

    def __str__(self) -> str:
        return self.message


class TransactionNotFound(BudgetError, KeyError):
    recovery_suggestion = "Please try refreshing the view"

    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id

    def __str__(self) -> str:
        return self.message


class SnapshotError(BudgetError):
    """A ledger snapshot file is malformed."""

    recovery_suggestion = "Please check that the file is a zerobudget export"
