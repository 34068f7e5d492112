"""
Shared Value Objects used across multiple domains.

Value Objects are immutable objects that describe characteristics of a thing.
Two value objects are equal if all their properties are equal.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Tuple


TWO_PLACES = Decimal('0.01')


# =============================================================================
# ENUMERATIONS
# =============================================================================

class WIRStatus(str, Enum):
    """Lifecycle status of a Work Inspection Request."""

    SUBMITTED = "submitted"
    COMPLETED = "completed"


class WIRResult(str, Enum):
    """Inspection outcome, only meaningful once the WIR is completed."""

    APPROVED = "A"
    CONDITIONAL = "B"
    REJECTED = "C"

    @property
    def is_payable(self) -> bool:
        """Approved and conditionally approved WIRs carry an amount."""
        return self in (WIRResult.APPROVED, WIRResult.CONDITIONAL)


# =============================================================================
# VALUE OBJECTS
# =============================================================================

@dataclass(frozen=True)
class Money:
    """
    Value object representing monetary amount.
    Immutable and includes currency.
    """

    amount: Decimal
    currency: str = "SAR"

    def __post_init__(self):
        if len(self.currency) != 3:
            raise ValueError("Currency must be a 3-letter code")

    @property
    def display(self) -> str:
        """Amount rounded to 2 decimals with thousands separators."""
        return f"{self.amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP):,}"

    def __str__(self) -> str:
        return f"{self.display} {self.currency}"


@dataclass(frozen=True)
class Percentage:
    """
    Value object for a percentage stored as a fraction (0.20 == 20%).
    """

    fraction: Decimal

    def __post_init__(self):
        if self.fraction < 0 or self.fraction > 1:
            raise ValueError("Percentage must be a fraction between 0 and 1")

    @classmethod
    def from_input(cls, raw) -> Percentage:
        """Accept either a fraction (0.2) or a whole percentage (20)."""
        value = Decimal(str(raw))
        if value > 1:
            value = value / Decimal('100')
        return cls(value)

    @property
    def percent(self) -> Decimal:
        return self.fraction * Decimal('100')

    def __str__(self) -> str:
        text = format(self.percent.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), 'f')
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
        return f"{text}%"


@dataclass(frozen=True)
class BOQCode:
    """
    Value object representing a BOQ item code.
    Follows the dotted hierarchical convention.

    Example: 1.2.3.4.5
    """

    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("BOQ code cannot be empty")
        if len(self.value) > 100:
            raise ValueError("BOQ code too long")

    @property
    def parent_code(self) -> Optional[BOQCode]:
        """Get parent code (one level up in hierarchy)."""
        parts = self.value.rsplit('.', 1)
        if len(parts) > 1 and parts[0]:
            return BOQCode(parts[0])
        return None

    @property
    def level(self) -> int:
        """Hierarchy level, equal to the number of '.' separators."""
        return self.value.count('.')

    @property
    def sort_key(self) -> Tuple:
        """Natural ordering key so that 1.10 sorts after 1.9."""
        key = []
        for part in self.value.split('.'):
            if part.isdigit():
                key.append((0, int(part), ''))
            else:
                key.append((1, 0, part))
        return tuple(key)

    def __str__(self) -> str:
        return self.value
