"""JSON snapshot export/import and CSV category export."""

from __future__ import annotations

import base64
import binascii
import csv
import io
import json
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from zerobudget.errors import SnapshotError
from zerobudget.ledger import Ledger
from zerobudget.models import (
    Account,
    Category,
    CategoryGroup,
    CategoryMonthBudget,
    CategorySort,
    CategoryType,
    MonthlyBudget,
    Transaction,
    TransactionType,
)
from zerobudget.money import Money

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _money(value: Any) -> Money:
    try:
        return Money(Decimal(str(value)))
    except (InvalidOperation, ValueError) as e:
        raise SnapshotError(f"Invalid amount in snapshot: {value!r}") from e


def _datetime(value: Any) -> datetime:
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise SnapshotError(f"Invalid timestamp in snapshot: {value!r}") from e


def _date(value: Any) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise SnapshotError(f"Invalid date in snapshot: {value!r}") from e


def dump_ledger(ledger: Ledger, exported_at: datetime | None = None) -> dict[str, Any]:
    """Convert a ledger to a JSON-compatible dictionary.

    Amounts are written as strings so no precision is lost.
    """
    return {
        "version": SNAPSHOT_VERSION,
        "exported_at": (exported_at or datetime.now()).isoformat(),
        "accounts": [
            {
                "id": a.id,
                "name": a.name,
                "starting_balance": str(a.starting_balance),
                "current_balance": str(a.balance),
                "account_type": a.account_type,
                "notes": a.notes,
                "created_at": a.created_at.isoformat(),
            }
            for a in ledger.accounts
        ],
        "groups": [
            {
                "id": g.id,
                "name": g.name,
                "sort_order": g.sort_order,
                "color_hex": g.color_hex,
                "category_sort": g.category_sort.value,
            }
            for g in ledger.groups
        ],
        "categories": [
            {
                "id": c.id,
                "name": c.name,
                "category_type": c.category_type.value,
                "due_day_of_month": c.due_day_of_month,
                "is_last_day_of_month": c.is_last_day_of_month,
                "group_id": c.group_id,
                "sort_order": c.sort_order,
                "color_hex": c.color_hex,
                "budgeted_amount": str(c.budgeted_amount),
                "created_at": c.created_at.isoformat(),
            }
            for c in ledger.categories
        ],
        "transactions": [
            {
                "id": t.id,
                "date": t.date.isoformat(),
                "amount": str(t.amount),
                "type": t.type.value,
                "description": t.description,
                "category_id": t.category_id,
                "account_id": t.account_id,
                "notes": t.notes,
                "receipt": base64.b64encode(t.receipt).decode("ascii") if t.receipt else None,
            }
            for t in ledger.transactions
        ],
        "category_month_budgets": [
            {
                "category_id": e.category_id,
                "month": e.month.isoformat(),
                "budgeted_amount": str(e.budgeted_amount),
                "available_from_previous": str(e.available_from_previous),
            }
            for e in ledger.month_budgets
        ],
        "monthly_budgets": [
            {
                "month": m.month.isoformat(),
                "starting_balance": str(m.starting_balance),
                "notes": m.notes,
            }
            for m in ledger.monthly_budgets
        ],
    }


def load_ledger(data: dict[str, Any], today: date | None = None) -> Ledger:
    """Rebuild a ledger from :func:`dump_ledger` output.

    Stored balances and carry-forward values are restored as-is, not
    recomputed.

    Raises:
        SnapshotError: If the data is not a valid snapshot
    """
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    version = data.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version!r}")

    ledger = Ledger(today=today)
    try:
        for a in data.get("accounts", []):
            ledger.accounts.append(
                Account(
                    id=a["id"],
                    name=a["name"],
                    starting_balance=_money(a["starting_balance"]),
                    current_balance=_money(a.get("current_balance", a["starting_balance"])),
                    account_type=a.get("account_type"),
                    notes=a.get("notes"),
                    created_at=_datetime(a["created_at"]),
                )
            )
        for g in data.get("groups", []):
            ledger.groups.append(
                CategoryGroup(
                    id=g["id"],
                    name=g["name"],
                    sort_order=int(g.get("sort_order", 0)),
                    color_hex=g.get("color_hex"),
                    category_sort=CategorySort(g.get("category_sort", "manual")),
                )
            )
        for c in data.get("categories", []):
            ledger.categories.append(
                Category(
                    id=c["id"],
                    name=c["name"],
                    category_type=CategoryType(c["category_type"]),
                    due_day_of_month=c.get("due_day_of_month"),
                    is_last_day_of_month=bool(c.get("is_last_day_of_month", False)),
                    group_id=c.get("group_id"),
                    sort_order=int(c.get("sort_order", 0)),
                    color_hex=c.get("color_hex"),
                    budgeted_amount=_money(c.get("budgeted_amount", "0")),
                    created_at=_datetime(c["created_at"]),
                )
            )
        for t in data.get("transactions", []):
            receipt = t.get("receipt")
            ledger.transactions.append(
                Transaction(
                    id=t["id"],
                    date=_datetime(t["date"]),
                    amount=_money(t["amount"]),
                    type=TransactionType(t["type"]),
                    description=t.get("description", ""),
                    category_id=t.get("category_id"),
                    account_id=t.get("account_id"),
                    notes=t.get("notes"),
                    receipt=base64.b64decode(receipt, validate=True) if receipt else None,
                )
            )
        for e in data.get("category_month_budgets", []):
            ledger.month_budgets.append(
                CategoryMonthBudget(
                    category_id=e["category_id"],
                    month=_date(e["month"]),
                    budgeted_amount=_money(e["budgeted_amount"]),
                    available_from_previous=_money(e["available_from_previous"]),
                )
            )
        for m in data.get("monthly_budgets", []):
            ledger.monthly_budgets.append(
                MonthlyBudget(
                    month=_date(m["month"]),
                    starting_balance=_money(m["starting_balance"]),
                    notes=m.get("notes"),
                )
            )
    except KeyError as e:
        raise SnapshotError(f"Snapshot record is missing field {e}") from e
    except (TypeError, ValueError, binascii.Error) as e:
        raise SnapshotError(f"Invalid snapshot record: {e}") from e

    logger.debug(
        "Loaded ledger with %d accounts, %d categories, %d transactions",
        len(ledger.accounts), len(ledger.categories), len(ledger.transactions),
    )
    return ledger


def export_json(ledger: Ledger, path: Path) -> Path:
    """Write a full ledger snapshot to path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dump_ledger(ledger), f, indent=2, sort_keys=True)
        f.write("\n")
    return path


def import_json(path: Path, today: date | None = None) -> Ledger:
    """Read a ledger snapshot written by :func:`export_json`.

    Raises:
        SnapshotError: If the file is not valid JSON or not a snapshot
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    return load_ledger(data, today=today)


def export_categories_csv(categories: list[Category]) -> str:
    """Render categories as CSV with the legacy budgeted amount."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Category", "Type", "Amount", "DueDayOfMonth", "LastDayOfMonth"])
    for c in categories:
        writer.writerow([
            c.name,
            c.category_type.value,
            str(c.budgeted_amount.quantized()),
            "" if c.due_day_of_month is None else str(c.due_day_of_month),
            "true" if c.is_last_day_of_month else "false",
        ])
    return buffer.getvalue()
