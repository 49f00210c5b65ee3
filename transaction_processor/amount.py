"""
Fixed-Point Amount Module

Non-negative monetary values with exactly four fractional digits. Values are
stored as an integer count of ten-thousandths so arithmetic is exact and has no
overflow ceiling. NEVER uses float for monetary values.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Optional
import re

from .exceptions import AmountFormatError

# Number of implied decimal places
SCALE = 4
UNITS_PER_WHOLE = 10 ** SCALE

_AMOUNT_CHARS = re.compile(r'^[0-9.]*$')

# Digits converted per step; stays under the interpreter's int/str conversion limit
_CHUNK_DIGITS = 1000
_CHUNK = 10 ** _CHUNK_DIGITS


def _digits_to_int(digits: str) -> int:
    """Convert an ASCII digit string of any length to an int"""
    value = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start:start + _CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


def _int_to_digits(value: int) -> str:
    """Render a non-negative int of any size as decimal digits"""
    chunks = []
    while value >= _CHUNK:
        value, chunk = divmod(value, _CHUNK)
        chunks.append(f"{chunk:0{_CHUNK_DIGITS}d}")
    chunks.append(str(value))
    return ''.join(reversed(chunks))


@dataclass(frozen=True, order=True)
class Amount:
    """
    Immutable fixed-point amount.

    `units` is the number of ten-thousandths, so Amount(10000) is 1.0000.
    Subtraction returns None instead of going negative.
    """
    units: int = 0

    def __post_init__(self):
        if isinstance(self.units, bool) or not isinstance(self.units, int):
            raise ValueError(f"Amount units must be an int, got {type(self.units).__name__}")
        if self.units < 0:
            raise ValueError("Amount cannot be negative")

    @classmethod
    def zero(cls) -> 'Amount':
        return cls(0)

    @classmethod
    def parse(cls, value: str) -> 'Amount':
        """
        Parse a decimal string such as "1", "1.", "1.5" or " 2.12345 ".

        Surrounding whitespace is ignored. Fractional digits beyond the fourth
        are truncated, not rounded.

        Args:
            value: Textual amount

        Returns:
            Parsed Amount

        Raises:
            AmountFormatError: If the string is not a non-negative decimal
        """
        if not isinstance(value, str):
            raise AmountFormatError(repr(value), "amount must be a string")

        text = value.strip()
        if not _AMOUNT_CHARS.match(text):
            raise AmountFormatError(value)

        integral_part, point, fractional_part = text.partition('.')
        if not integral_part:
            raise AmountFormatError(value, "missing integral part")
        if point and '.' in fractional_part:
            raise AmountFormatError(value, "multiple decimal points")

        # Truncate to SCALE digits, then pad on the right
        fractional_part = fractional_part[:SCALE].ljust(SCALE, '0')

        return cls(_digits_to_int(integral_part) * UNITS_PER_WHOLE + int(fractional_part))

    from_string = parse

    def __add__(self, other: 'Amount') -> 'Amount':
        if not isinstance(other, Amount):
            return NotImplemented
        return Amount(self.units + other.units)

    def checked_sub(self, other: 'Amount') -> Optional['Amount']:
        """Subtract other, or return None if the result would be negative"""
        if other.units > self.units:
            return None
        return Amount(self.units - other.units)

    def __sub__(self, other: 'Amount') -> Optional['Amount']:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.checked_sub(other)

    def is_zero(self) -> bool:
        """Check if amount is exactly zero"""
        return self.units == 0

    def to_decimal(self) -> Decimal:
        """Exact Decimal view with four decimal places"""
        return Decimal(self.units).scaleb(-SCALE)

    def to_string(self) -> str:
        """Canonical rendering, always four fractional digits"""
        integral, fractional = divmod(self.units, UNITS_PER_WHOLE)
        return f"{_int_to_digits(integral)}.{fractional:0{SCALE}d}"

    def __str__(self) -> str:
        return self.to_string()
