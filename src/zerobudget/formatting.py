"""Display formatting for money, percentages and dates.

Currency code, number format and date format are always passed in;
nothing here reads settings.
"""

from datetime import date

from zerobudget.money import Money

# number format -> (decimal separator, grouping separator)
NUMBER_FORMATS: dict[str, tuple[str, str]] = {
    "1,234.56": (".", ","),
    "1.234,56": (",", "."),
    "1 234,56": (",", " "),
}
DEFAULT_NUMBER_FORMAT = "1,234.56"

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "SGD": "S$",
}


def decimal_separator(number_format: str) -> str:
    return NUMBER_FORMATS.get(number_format, NUMBER_FORMATS[DEFAULT_NUMBER_FORMAT])[0]


def grouping_separator(number_format: str) -> str:
    return NUMBER_FORMATS.get(number_format, NUMBER_FORMATS[DEFAULT_NUMBER_FORMAT])[1]


def currency_symbol(currency_code: str) -> str:
    """Symbol for a currency code, or the code itself when unknown."""
    return CURRENCY_SYMBOLS.get(currency_code.upper(), currency_code.upper())


def format_number(amount: Money, number_format: str = DEFAULT_NUMBER_FORMAT) -> str:
    """Format to two decimal places with grouping, e.g. "1,234.56"."""
    value = amount.quantized()
    whole, _, cents = f"{abs(value):.2f}".partition(".")
    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)
    text = grouping_separator(number_format).join(groups) + decimal_separator(number_format) + cents
    return f"-{text}" if value < 0 else text


def format_currency(
    amount: Money,
    currency_code: str = "USD",
    number_format: str = DEFAULT_NUMBER_FORMAT,
) -> str:
    """Format amount with its currency symbol, e.g. "-$1,234.56"."""
    number = format_number(abs(amount), number_format)
    sign = "-" if amount.quantized() < 0 else ""
    return f"{sign}{currency_symbol(currency_code)}{number}"


def format_percentage(ratio: float) -> str:
    """Format a ratio such as 0.5 as "50.0%"."""
    return f"{ratio * 100:.1f}%"


def format_month(month: date) -> str:
    """Format as "July 2024"."""
    return month.strftime("%B %Y")


# date format setting -> strftime pattern
DATE_FORMATS: dict[str, str] = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
}
FALLBACK_DATE_FORMAT = "MM/DD/YYYY"


def format_date(value: date, date_format: str = FALLBACK_DATE_FORMAT) -> str:
    """Format a transaction date, e.g. "07/15/2024". Unknown formats use MM/DD/YYYY."""
    return value.strftime(DATE_FORMATS.get(date_format, DATE_FORMATS[FALLBACK_DATE_FORMAT]))
