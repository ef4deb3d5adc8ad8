"""Utility functions for zerobudget."""

from zerobudget.utils.parsing import (
    clean_description,
    parse_amount,
    parse_date,
    read_file,
    to_date,
)

__all__ = ["parse_date", "parse_amount", "clean_description", "read_file", "to_date"]
