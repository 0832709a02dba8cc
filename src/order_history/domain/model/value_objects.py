"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They are produced upstream by the checkout workflow; only structural
well-formedness is checked here, never business rules such as whether a
total is correct.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from order_history.domain.exceptions import ValidationError

NANOS_PER_UNIT = 1_000_000_000
UNITS_MIN = -(2**63)
UNITS_MAX = 2**63 - 1
_CENT = Decimal("0.01")
_NANO = Decimal("0.000000001")


@dataclass(frozen=True)
class Money:
    """Monetary amount as whole units plus nanos (10^-9 of a unit).

    ``units=19, nanos=990_000_000`` is 19.99. When both parts are non-zero
    they must carry the same sign.
    """

    units: int = 0
    nanos: int = 0
    currency_code: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.units, int) or not isinstance(self.nanos, int):
            raise ValidationError("Money units and nanos must be integers")
        if not UNITS_MIN <= self.units <= UNITS_MAX:
            raise ValidationError(f"Money units out of range: {self.units}")
        if abs(self.nanos) >= NANOS_PER_UNIT:
            raise ValidationError(
                f"Money nanos must be within ±{NANOS_PER_UNIT - 1}, got {self.nanos}"
            )
        if (self.units > 0 and self.nanos < 0) or (self.units < 0 and self.nanos > 0):
            raise ValidationError("Money units and nanos must have the same sign")

    # --- Conversion -----------------------------------------------------------

    def to_decimal(self) -> Decimal:
        return Decimal(self.units) + Decimal(self.nanos) / NANOS_PER_UNIT

    def to_decimal_string(self) -> str:
        """Canonical two-decimal text, e.g. ``"19.99"``."""
        return str(self.to_decimal().quantize(_CENT, rounding=ROUND_HALF_EVEN))

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.to_decimal_string()} {self.currency_code}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal, currency_code: str = "USD") -> Money:
        """Build Money from decimal text such as ``"19.99"``."""
        try:
            value = Decimal(str(amount)).quantize(_NANO, rounding=ROUND_HALF_EVEN)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")

        units = int(value)  # truncates toward zero, keeping signs aligned
        nanos = int((value - units) * NANOS_PER_UNIT)
        return Money(units=units, nanos=nanos, currency_code=currency_code)


@dataclass(frozen=True)
class Address:
    """Structured shipping address."""

    street_address: str
    city: str
    state: str
    country: str
    zip_code: str
