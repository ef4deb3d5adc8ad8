"""Parsing utilities for amounts, dates and transaction files."""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

# Currency code before or after the number, e.g. "USD 12.00" or "12.00 USD"
_CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}\s+|\s+[A-Z]{3}$")
# Currency symbols and whitespace stripped before parsing
_CURRENCY_RE = re.compile(r"[$€£¥₹]|\s")


def parse_date(date_str: str) -> datetime | None:
    """
    Parse various date formats to a datetime.

    Supported formats:
    - YYYY-MM-DD (2024-07-15)
    - YYYY-MM-DDTHH:MM:SS (2024-07-15T09:30:00)
    - YYYY-MM-DD HH:MM:SS (2024-07-15 09:30:00)
    - MM/DD/YYYY (07/15/2024)
    - DD MMM YYYY (15 Jul 2024)

    Args:
        date_str: Date string to parse

    Returns:
        datetime if successful, None otherwise
    """
    date_str = date_str.strip().strip('"').strip()

    if not date_str:
        return None

    formats = [
        "%Y-%m-%d",  # 2024-07-15
        "%Y-%m-%dT%H:%M:%S",  # 2024-07-15T09:30:00
        "%Y-%m-%d %H:%M:%S",  # 2024-07-15 09:30:00
        "%m/%d/%Y",  # 07/15/2024
        "%d %b %Y",  # 15 Jul 2024
        "%d %B %Y",  # 15 July 2024
    ]

    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt)
        except ValueError:
            continue

    # Offsets and fractional seconds from JSON exports
    try:
        return datetime.fromisoformat(date_str)
    except ValueError:
        return None


def parse_amount(amount_str: str, decimal_separator: str = ".") -> Decimal | None:
    """
    Parse amount string to Decimal.

    Handles:
    - Currency symbols and codes ($, €, USD, etc.)
    - Thousands separators
    - Negative values (both -123 and (123))
    - Quoted values

    Args:
        amount_str: Amount string to parse
        decimal_separator: "." (1,234.56) or "," (1.234,56 and 1 234,56)

    Returns:
        Decimal if successful, None otherwise
    """
    if not amount_str or not amount_str.strip():
        return None

    # Remove quotes and whitespace
    amount_str = amount_str.strip().strip('"').strip()

    if not amount_str:
        return None

    # Check for parentheses (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = _CURRENCY_CODE_RE.sub("", amount_str)
    amount_str = _CURRENCY_RE.sub("", amount_str)

    if decimal_separator == ",":
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    if amount_str.startswith("-"):
        if is_negative:
            return None
        is_negative = True
        amount_str = amount_str[1:]

    # Decimal() also accepts "NaN", "Infinity" and exponents
    if not re.fullmatch(r"\d+(\.\d*)?|\.\d+", amount_str):
        return None

    try:
        value = Decimal(amount_str)
        return -value if is_negative else value
    except InvalidOperation:
        return None


def clean_description(desc: str) -> str:
    """Collapse whitespace and newlines in a transaction description."""
    return " ".join(desc.split())


def read_file(filepath: Path) -> str:
    """
    Read file content, handling both text and Excel files.

    Args:
        filepath: Path to the file

    Returns:
        File content as string (Excel files converted to CSV format)

    Raises:
        ValueError: If file cannot be read
    """
    # Check if it's an Excel file by magic bytes
    is_xls = False
    try:
        with open(filepath, "rb") as f:
            magic = f.read(8)
            # OLE2 magic bytes (used by .xls)
            if magic[:4] == b"\xd0\xcf\x11\xe0":
                is_xls = True
    except OSError as e:
        raise ValueError(f"File not found: {filepath}") from e

    if filepath.suffix.lower() == ".xls":
        is_xls = True

    if is_xls:
        return _read_excel(filepath)
    return _read_text(filepath)


def _read_text(filepath: Path) -> str:
    """Read text file with encoding detection."""
    encodings = ["utf-8-sig", "utf-8", "latin-1", "cp1252"]

    for encoding in encodings:
        try:
            with open(filepath, encoding=encoding) as f:
                return f.read()
        except UnicodeDecodeError:
            continue

    raise ValueError(f"Could not decode file {filepath} with any known encoding")


def _read_excel(filepath: Path) -> str:
    """Read the first sheet of an Excel file and convert it to a CSV string."""
    import xlrd  # type: ignore[import-untyped]

    try:
        wb = xlrd.open_workbook(str(filepath))
        sheet = wb.sheet_by_index(0)

        lines = []
        for row in range(sheet.nrows):
            row_data = []
            for col in range(sheet.ncols):
                cell = sheet.cell(row, col)
                if cell.ctype == xlrd.XL_CELL_DATE:
                    dt = xlrd.xldate_as_datetime(cell.value, wb.datemode)
                    row_data.append(dt.strftime("%Y-%m-%d %H:%M:%S"))
                elif cell.ctype == xlrd.XL_CELL_NUMBER:
                    # Cells hold floats; repr keeps the shortest exact digits
                    value = repr(cell.value)
                    row_data.append(value[:-2] if value.endswith(".0") else value)
                else:
                    value = str(cell.value)
                    if "," in value or '"' in value or "\n" in value:
                        value = '"' + value.replace('"', '""') + '"'
                    row_data.append(value)
            lines.append(",".join(row_data))

        return "\n".join(lines)

    except xlrd.XLRDError as e:
        raise ValueError(f"Could not read Excel file {filepath}: {e}") from e


def to_date(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value
