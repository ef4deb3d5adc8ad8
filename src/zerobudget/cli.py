#!/usr/bin/env python3
"""Command-line interface for zerobudget."""

import argparse
import json
import logging
import os
import sys
from datetime import date
from pathlib import Path
from typing import Any

from zerobudget.config import (
    config_exists,
    create_default_config,
    get_currency_code,
    get_date_format,
    get_ledger_path,
    get_number_format,
    load_config,
    save_json_config,
)
from zerobudget.dates import parse_month, start_of_month
from zerobudget.errors import BudgetError
from zerobudget.formatting import (
    decimal_separator,
    format_currency,
    format_date,
    format_month,
    format_percentage,
)
from zerobudget.importer import TransactionImporter
from zerobudget.ledger import Ledger
from zerobudget.money import Money
from zerobudget.storage import export_categories_csv, export_json, import_json
from zerobudget.summary import month_summary

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else os.getenv("ZEROBUDGET_LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Zero-based envelope budgeting from a ledger snapshot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  zerobudget ledger.json
  zerobudget ledger.json --month 2024-07 --compare
  zerobudget ledger.json --materialize --month 2024-08
  zerobudget ledger.json --import july.csv statement.xls
  zerobudget ledger.json --running-balance
  zerobudget --init-config
        """,
    )

    parser.add_argument(
        "ledger",
        nargs="?",
        type=Path,
        help="Ledger snapshot JSON (default: from config)",
    )
    parser.add_argument(
        "--month",
        help="Month to report as YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Show the month summary (default unless --running-balance)",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Show budgeted versus actual per category",
    )
    parser.add_argument(
        "--running-balance",
        action="store_true",
        help="List transactions with their running balance",
    )
    parser.add_argument(
        "--materialize",
        action="store_true",
        help="Create missing month budgets for every category and save",
    )
    parser.add_argument(
        "--import",
        dest="import_files",
        nargs="+",
        type=Path,
        metavar="FILE",
        help="Import and post transactions from CSV/XLS files, then save",
    )
    parser.add_argument(
        "--export-categories",
        type=Path,
        metavar="CSV",
        help="Write categories to a CSV file",
    )
    parser.add_argument(
        "--currency",
        help="Currency code for display (or configure in config file)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration",
    )
    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Write a default config file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.init_config:
        if config_exists() and not args.config:
            print("A config file already exists.", file=sys.stderr)
            return 1
        path = save_json_config(create_default_config(), args.config)
        print(f"Wrote default config to {path}")
        return 0

    config: dict[str, Any] | None = load_config(args.config)

    if args.show_config:
        if config:
            print(json.dumps(config, indent=2))
        else:
            print("No configuration found.")
            print("Run 'zerobudget --init-config' to create one.")
        return 0

    try:
        month = parse_month(args.month) if args.month else start_of_month(date.today())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ledger_path = get_ledger_path(config, args.ledger)
    if not ledger_path.exists():
        print(f"Error: ledger not found: {ledger_path}", file=sys.stderr)
        return 1

    currency = get_currency_code(config, args.currency)
    number_format = get_number_format(config)
    date_format = get_date_format(config)

    try:
        ledger = import_json(ledger_path)
        changed = False

        if args.import_files:
            importer = TransactionImporter(ledger, decimal_separator(number_format))
            for path in args.import_files:
                result = importer.import_file(path, post=True)
                print(f"{path.name}: imported {len(result.transactions)} transactions",
                      file=sys.stderr)
                for line, error in result.errors:
                    where = f"line {line}" if line else "row"
                    print(f"  Warning: {where}: {error}", file=sys.stderr)
                for name in sorted(result.unknown_categories):
                    print(f"  Unknown category: {name}", file=sys.stderr)
                for name in sorted(result.unknown_accounts):
                    print(f"  Unknown account: {name}", file=sys.stderr)
                changed = changed or bool(result.transactions)

        if args.materialize:
            created = ledger.materialize_month(month)
            print(f"Created {len(created)} month budgets for {format_month(month)}",
                  file=sys.stderr)
            changed = changed or bool(created)

        if changed:
            export_json(ledger, ledger_path)
            logger.info("Saved ledger to %s", ledger_path)

        if args.export_categories:
            args.export_categories.write_text(
                export_categories_csv(ledger.categories), encoding="utf-8"
            )
            print(f"Wrote {len(ledger.categories)} categories to {args.export_categories}",
                  file=sys.stderr)

    except (BudgetError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.running_balance:
        print_running_balance(ledger, currency, number_format, date_format)
        if not (args.summary or args.compare):
            return 0
        print()

    print_summary(ledger, month, currency, number_format)
    if args.compare:
        print()
        print_comparisons(ledger, month, currency, number_format)
    return 0


def print_summary(ledger: Ledger, month: date, currency: str, number_format: str) -> None:
    """Print Ready to Assign and the month's cash flow."""
    def money(value: Money) -> str:
        return format_currency(value, currency, number_format)

    totals = month_summary(month, ledger.transactions)
    print(format_month(month))
    print(f"  Ready to Assign: {money(ledger.ready_to_assign(month)):>14}")
    print(f"  Income:          {money(totals.income):>14}")
    print(f"  Expenses:        {money(totals.expenses):>14}")
    print(f"  Net:             {money(totals.net):>14}")
    print()
    print("Accounts:")
    for account in ledger.accounts:
        print(f"  {account.name:<30} {money(account.balance):>14}")


def print_comparisons(ledger: Ledger, month: date, currency: str, number_format: str) -> None:
    """Print budgeted, spent and available per category, grouped."""

    def money(value: Money) -> str:
        return format_currency(value, currency, number_format)

    print(f"{'Category':<30} {'Budgeted':>12} {'Spent':>12} {'Available':>12} {'Used':>7}")
    for group in ledger.group_summaries(month):
        print(group.name)
        for comparison in group.comparisons:
            category = ledger.get_category(comparison.category_id)
            available = ledger.category_available(category, month)
            flag = " !" if comparison.is_over_budget else ""
            print(
                f"  {comparison.category_name:<28} {money(comparison.budgeted):>12} "
                f"{money(comparison.actual):>12} {money(available):>12} "
                f"{format_percentage(comparison.percentage_used):>7}{flag}"
            )


def print_running_balance(
    ledger: Ledger, currency: str, number_format: str, date_format: str
) -> None:
    for transaction, balance in ledger.running_balance():
        print(
            f"{format_date(transaction.date, date_format)}  "
            f"{format_currency(transaction.signed_amount, currency, number_format):>14}  "
            f"{transaction.description[:40]:<40}  "
            f"{format_currency(balance, currency, number_format):>14}"
        )


if __name__ == "__main__":
    sys.exit(main())
