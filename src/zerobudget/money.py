"""Exact decimal money arithmetic.

All monetary values in zerobudget are :class:`Money`, a thin immutable
wrapper around :class:`decimal.Decimal`. Binary floats are rejected at
construction so that ``Money("0.10") + Money("0.20") == Money("0.30")``
holds exactly. Nothing is rounded until :meth:`Money.quantized` is called
for display.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction

from zerobudget.errors import InvalidAmountFormat
from zerobudget.utils.parsing import parse_amount

_CENT = Decimal("0.01")


@dataclass(frozen=True, order=True)
class Money:
    """An exact monetary amount in the user's currency."""

    amount: Decimal

    def __init__(self, amount: Money | Decimal | int | str = 0) -> None:
        if isinstance(amount, Money):
            value = amount.amount
        elif isinstance(amount, bool):
            raise TypeError("Money cannot be built from a bool")
        elif isinstance(amount, Decimal):
            if not amount.is_finite():
                raise InvalidAmountFormat(str(amount))
            value = amount
        elif isinstance(amount, int):
            value = Decimal(amount)
        elif isinstance(amount, str):
            parsed = parse_amount(amount)
            if parsed is None:
                raise InvalidAmountFormat(amount)
            value = parsed
        else:
            raise TypeError(
                f"Money requires Decimal, int or str, not {type(amount).__name__}"
            )
        object.__setattr__(self, "amount", value)

    @classmethod
    def parse(cls, text: str, decimal_separator: str = ".") -> Money:
        """Parse a user or file supplied amount string.

        Raises:
            InvalidAmountFormat: If the text is not a number
        """
        parsed = parse_amount(text, decimal_separator=decimal_separator)
        if parsed is None:
            raise InvalidAmountFormat(text)
        return cls(parsed)

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal(0))

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def quantized(self) -> Decimal:
        """Round half-up to cents. Only for display."""
        return self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)

    def __add__(self, other: object) -> Money:
        if isinstance(other, Money):
            return Money(self.amount + other.amount)
        return NotImplemented

    def __radd__(self, other: object) -> Money:
        # sum() starts from int 0
        if isinstance(other, int) and not isinstance(other, bool) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other: object) -> Money:
        if isinstance(other, Money):
            return Money(self.amount - other.amount)
        return NotImplemented

    def __mul__(self, factor: object) -> Money:
        if isinstance(factor, bool):
            return NotImplemented
        if isinstance(factor, (int, Decimal)):
            return Money(self.amount * factor)
        if isinstance(factor, Fraction):
            return Money(self.amount * factor.numerator / factor.denominator)
        return NotImplemented

    __rmul__ = __mul__

    def __neg__(self) -> Money:
        return Money(-self.amount)

    def __abs__(self) -> Money:
        return Money(abs(self.amount))

    def __bool__(self) -> bool:
        return self.amount != 0

    def __str__(self) -> str:
        return str(self.amount)

    def __repr__(self) -> str:
        return f"Money('{self.amount}')"


def add(a: Money, b: Money) -> Money:
    return a + b


def subtract(a: Money, b: Money) -> Money:
    return a - b


def clamp_non_negative(value: Money) -> Money:
    """Return value if it is zero or positive, else zero."""
    if value.is_negative:
        return Money.zero()
    return value


def percentage_of(actual: Money, budgeted: Money) -> float:
    """Return actual / budgeted as a ratio for display.

    Returns 0.0 when nothing (or a negative amount) was budgeted.
    """
    if budgeted.amount <= 0:
        return 0.0
    return float(actual.amount / budgeted.amount)


def sum_money(values: Iterable[Money]) -> Money:
    """Sum Money values, returning zero for an empty iterable."""
    total = Money.zero()
    for value in values:
        total = total + value
    return total
