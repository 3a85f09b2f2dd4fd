"""Scaled fixed-point decimal arithmetic.

All monetary values in the client are held as an arbitrary-precision integer
plus a decimal scale, mirroring the integer amounts stored by the on-chain
router. Arithmetic never goes through floats:

- Addition, subtraction and ordering require equal scales.
- Multiplication adds scales; callers rescale back to a canonical scale.
- Rescaling down and division truncate toward zero.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from pydantic_core import core_schema

from barista_dlp.core.exceptions import DivisionByZero, ScaleMismatch


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division truncating toward zero (Python's // floors)."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


@dataclass(frozen=True)
class FixedPointDecimal:
    """An exact decimal amount: ``value * 10 ** -scale``.

    Attributes:
        value: Unscaled signed integer
        scale: Number of decimal places (non-negative)
    """
    value: int
    scale: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"value must be an int, got {type(self.value).__name__}")
        if isinstance(self.scale, bool) or not isinstance(self.scale, int):
            raise TypeError(f"scale must be an int, got {type(self.scale).__name__}")
        if self.scale < 0:
            raise ValueError(f"scale must be non-negative, got {self.scale}")

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls, scale: int) -> "FixedPointDecimal":
        return cls(0, scale)

    @classmethod
    def from_units(cls, units: int, scale: int) -> "FixedPointDecimal":
        """Whole units at the given scale, e.g. ``from_units(10, 9)`` is 10 tokens."""
        return cls(units * 10 ** scale, scale)

    @classmethod
    def from_decimal(cls, amount: Decimal, scale: int) -> "FixedPointDecimal":
        """Convert a Decimal, truncating digits beyond ``scale`` toward zero."""
        sign, digits, exponent = Decimal(amount).as_tuple()
        if not isinstance(exponent, int):
            raise ValueError(f"Cannot convert non-finite decimal {amount}")
        unscaled = int("".join(str(d) for d in digits) or "0")
        shift = exponent + scale
        if shift >= 0:
            unscaled *= 10 ** shift
        else:
            unscaled //= 10 ** -shift
        return cls(-unscaled if sign else unscaled, scale)

    # -------------------------------------------------------------------------
    # Scale handling
    # -------------------------------------------------------------------------

    def rescale(self, scale: int) -> "FixedPointDecimal":
        """Move to another scale; exact when growing, truncating when shrinking."""
        if scale < 0:
            raise ValueError(f"scale must be non-negative, got {scale}")
        if scale == self.scale:
            return self
        if scale > self.scale:
            return FixedPointDecimal(self.value * 10 ** (scale - self.scale), scale)
        return FixedPointDecimal(_trunc_div(self.value, 10 ** (self.scale - scale)), scale)

    def _require_same_scale(self, other: "FixedPointDecimal", operation: str) -> None:
        if self.scale != other.scale:
            raise ScaleMismatch(self.scale, other.scale, operation)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: "FixedPointDecimal") -> "FixedPointDecimal":
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "add")
        return FixedPointDecimal(self.value + other.value, self.scale)

    def __sub__(self, other: "FixedPointDecimal") -> "FixedPointDecimal":
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "subtract")
        return FixedPointDecimal(self.value - other.value, self.scale)

    def __mul__(self, other: Union["FixedPointDecimal", int]) -> "FixedPointDecimal":
        if isinstance(other, FixedPointDecimal):
            return FixedPointDecimal(self.value * other.value, self.scale + other.scale)
        if isinstance(other, int) and not isinstance(other, bool):
            return FixedPointDecimal(self.value * other, self.scale)
        return NotImplemented

    def __rmul__(self, other: int) -> "FixedPointDecimal":
        if isinstance(other, int) and not isinstance(other, bool):
            return FixedPointDecimal(self.value * other, self.scale)
        return NotImplemented

    def __neg__(self) -> "FixedPointDecimal":
        return FixedPointDecimal(-self.value, self.scale)

    def __abs__(self) -> "FixedPointDecimal":
        return FixedPointDecimal(abs(self.value), self.scale)

    def divide(
        self, divisor: Union["FixedPointDecimal", int], scale: int
    ) -> "FixedPointDecimal":
        """Divide and land on ``scale``, truncating toward zero.

        Args:
            divisor: Another fixed-point value or a plain integer
            scale: Scale of the result

        Raises:
            DivisionByZero: If the divisor is zero
        """
        if scale < 0:
            raise ValueError(f"scale must be non-negative, got {scale}")
        if isinstance(divisor, FixedPointDecimal):
            divisor_value, divisor_scale = divisor.value, divisor.scale
        else:
            divisor_value, divisor_scale = int(divisor), 0
        if divisor_value == 0:
            raise DivisionByZero(f"Cannot divide {self} by zero")

        # result = (v1 / 10^s1) / (v2 / 10^s2) * 10^scale
        exponent = scale + divisor_scale - self.scale
        numerator = self.value
        denominator = divisor_value
        if exponent >= 0:
            numerator *= 10 ** exponent
        else:
            denominator *= 10 ** -exponent
        return FixedPointDecimal(_trunc_div(numerator, denominator), scale)

    def percent(self, pct: int) -> "FixedPointDecimal":
        """``pct`` percent of this amount at the same scale, truncated toward zero."""
        return FixedPointDecimal(_trunc_div(self.value * pct, 100), self.scale)

    # -------------------------------------------------------------------------
    # Comparison and sign
    # -------------------------------------------------------------------------

    def __lt__(self, other: "FixedPointDecimal") -> bool:
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "compare")
        return self.value < other.value

    def __le__(self, other: "FixedPointDecimal") -> bool:
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "compare")
        return self.value <= other.value

    def __gt__(self, other: "FixedPointDecimal") -> bool:
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "compare")
        return self.value > other.value

    def __ge__(self, other: "FixedPointDecimal") -> bool:
        if not isinstance(other, FixedPointDecimal):
            return NotImplemented
        self._require_same_scale(other, "compare")
        return self.value >= other.value

    def is_zero(self) -> bool:
        return self.value == 0

    def is_negative(self) -> bool:
        return self.value < 0

    def is_positive(self) -> bool:
        return self.value > 0

    def sign(self) -> int:
        return (self.value > 0) - (self.value < 0)

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        """Exact Decimal equivalent, for display and structured logs."""
        return Decimal(self.value).scaleb(-self.scale)

    def __str__(self) -> str:
        from barista_dlp.core.codec import format_amount

        return format_amount(self)

    # -------------------------------------------------------------------------
    # Pydantic integration
    # -------------------------------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> "FixedPointDecimal":
        if isinstance(value, FixedPointDecimal):
            return value
        if isinstance(value, str):
            from barista_dlp.core.codec import parse_amount

            fraction = value.partition(".")[2]
            return parse_amount(value, len(fraction))
        raise ValueError(
            f"Expected FixedPointDecimal or decimal string, got {type(value).__name__}"
        )
