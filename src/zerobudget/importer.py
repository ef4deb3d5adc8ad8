"""Reader for transaction files in the zerobudget column layout.

Expected header (case-insensitive, order free)::

    Date,Description,Amount,Type,Category,Account,Notes

Only Date and Amount are required. Without a Type column, a negative amount
is an expense and a positive one is income. CSV and legacy Excel (.xls)
files are both accepted.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path

from zerobudget.errors import BudgetError
from zerobudget.ledger import Ledger
from zerobudget.models import Transaction, TransactionType
from zerobudget.money import Money
from zerobudget.utils import clean_description, parse_date, read_file

logger = logging.getLogger(__name__)

COLUMNS = ["date", "description", "amount", "type", "category", "account", "notes"]
REQUIRED_COLUMNS = {"date", "amount"}


@dataclass
class ImportResult:
    """Outcome of reading one file."""

    transactions: list[Transaction] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)  # (line number, message)
    unknown_categories: set[str] = field(default_factory=set)
    unknown_accounts: set[str] = field(default_factory=set)


class TransactionImporter:
    """
    Turn transaction file rows into :class:`Transaction` objects.

    Category and account columns hold names, resolved against the ledger.
    Unknown names leave the reference empty and are reported.

    Usage:
        importer = TransactionImporter(ledger)
        result = importer.import_file(Path("july.csv"), post=True)
    """

    def __init__(self, ledger: Ledger, decimal_separator: str = ".") -> None:
        self.ledger = ledger
        self.decimal_separator = decimal_separator

    def parse(self, content: str) -> ImportResult:
        """Parse file content without touching the ledger."""
        result = ImportResult()
        reader = csv.DictReader(StringIO(content))
        if reader.fieldnames is None:
            result.errors.append((1, "File is empty"))
            return result

        headers = {name.strip().lower(): name for name in reader.fieldnames if name}
        missing = REQUIRED_COLUMNS - headers.keys()
        if missing:
            result.errors.append((1, f"Missing columns: {', '.join(sorted(missing))}"))
            return result

        for line_number, row in enumerate(reader, start=2):
            values = {
                key: (row.get(headers[key]) or "").strip() if key in headers else ""
                for key in COLUMNS
            }
            if not any(values.values()):
                continue
            try:
                result.transactions.append(self._parse_row(values, result))
            except BudgetError as e:
                logger.warning("Skipping line %d: %s", line_number, e)
                result.errors.append((line_number, str(e)))

        return result

    def _parse_row(self, values: dict[str, str], result: ImportResult) -> Transaction:
        when = parse_date(values["date"])
        if when is None:
            raise BudgetError(f"Invalid date: {values['date']!r}")

        amount = Money.parse(values["amount"], decimal_separator=self.decimal_separator)

        type_text = values["type"].lower()
        if type_text:
            try:
                tx_type = TransactionType(type_text)
            except ValueError as e:
                raise BudgetError(f"Invalid type: {values['type']!r}") from e
        else:
            tx_type = TransactionType.EXPENSE if amount.is_negative else TransactionType.INCOME

        category_id = None
        if values["category"]:
            category = self.ledger.find_category(values["category"])
            if category is None:
                result.unknown_categories.add(values["category"])
            else:
                category_id = category.id

        account_id = None
        if values["account"]:
            account = self.ledger.find_account(values["account"])
            if account is None:
                result.unknown_accounts.add(values["account"])
            else:
                account_id = account.id

        return Transaction(
            date=when,
            amount=abs(amount),
            type=tx_type,
            description=clean_description(values["description"]) or "(No description)",
            category_id=category_id,
            account_id=account_id,
            notes=values["notes"] or None,
        )

    def import_file(self, filepath: Path, post: bool = False) -> ImportResult:
        """
        Read a CSV or XLS file.

        Args:
            filepath: Path to the file
            post: Also post each parsed transaction to the ledger

        Returns:
            ImportResult; with post=True, rows the ledger rejects move from
            ``transactions`` to ``errors``
        """
        try:
            content = read_file(filepath)
        except ValueError as e:
            return ImportResult(errors=[(0, str(e))])

        result = self.parse(content)
        if post:
            posted: list[Transaction] = []
            for tx in result.transactions:
                try:
                    posted.append(self.ledger.post_transaction(tx))
                except BudgetError as e:
                    result.errors.append((0, f"{tx.description}: {e}"))
            result.transactions = posted
            logger.info("Posted %d transactions from %s", len(posted), filepath.name)
        return result
