"""
Fraction -- Exact rational share value object and arithmetic.

Responsibility:
    Provides the only numeric type used for estate shares. Every share,
    donation portion and display value flows through this module, so the
    "portions must sum to exactly 1/1" checks downstream are exact
    integer comparisons, never float approximations.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every engine. No outward dependencies.

Invariants enforced:
    - Parts are Python ``int`` (arbitrary precision); ``bool`` and ``float``
      are rejected at construction.
    - Denominator is never zero. A zero-denominator fraction cannot be
      constructed, so no arithmetic can silently turn it into a zero share.
    - ``simplify`` produces the canonical form: positive denominator, sign
      carried by the numerator, zero as 0/1.

Failure modes:
    - InvalidFractionError on non-integer parts or a zero denominator.
    - DivisionByZeroError when ``divide_by_int`` receives 0.

Usage:
    from succession_kernel.domain.fraction import Fraction, ONE, divide_by_int

    third = divide_by_int(ONE, 3)
    assert third + third + third == ONE
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from functools import reduce

from succession_kernel.exceptions import DivisionByZeroError, InvalidFractionError


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class Fraction:
    """
    Rational number as an integer numerator/denominator pair.

    Contract:
        Holds the parts exactly as given. Raw values such as 2/4 or 1/-2
        are legal until simplified; arithmetic always returns simplified
        results.

    Guarantees:
        - Immutable and hashable (frozen dataclass with slots)
        - Both parts are ints and the denominator is non-zero
        - Dataclass equality is structural: 1/2 != 3/6. Use ``compare``
          or ``equals`` for value equality.
        - ``<``, ``<=``, ``>`` and ``>=`` compare by value.

    Non-goals:
        - Does NOT parse "n/d" strings (config loader responsibility)
        - Does NOT convert to or from float
    """

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        if not _is_int(self.numerator) or not _is_int(self.denominator):
            raise InvalidFractionError(
                self.numerator, self.denominator, "parts must be integers"
            )
        if self.denominator == 0:
            raise InvalidFractionError(
                self.numerator, self.denominator, "denominator is zero"
            )

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_positive(self) -> bool:
        return (self.numerator > 0) == (self.denominator > 0) and self.numerator != 0

    def simplify(self) -> Fraction:
        return simplify(self)

    def equals(self, other: Fraction) -> bool:
        """Value equality, ignoring representation (1/2 equals 3/6)."""
        return compare(self, other) == 0

    def __add__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return add(self, other)

    def __sub__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return subtract(self, other)

    def __mul__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return multiply(self, other)

    # Ordering is by value; == stays structural.
    def __lt__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        return compare(self, other) >= 0

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


ZERO = Fraction(0, 1)
HALF = Fraction(1, 2)
ONE = Fraction(1, 1)


def simplify(fraction: Fraction) -> Fraction:
    """
    Reduce a fraction to canonical form.

    Postconditions:
        - Denominator is positive; the sign lives on the numerator.
        - Zero is returned as 0/1.
        - simplify(simplify(f)) == simplify(f).
    """
    if fraction.numerator == 0:
        return ZERO
    divisor = math.gcd(fraction.numerator, fraction.denominator)
    sign = -1 if fraction.denominator < 0 else 1
    return Fraction(
        sign * fraction.numerator // divisor,
        abs(fraction.denominator) // divisor,
    )


def add(a: Fraction, b: Fraction) -> Fraction:
    """Add over the LCM of both denominators, then simplify."""
    common = math.lcm(a.denominator, b.denominator)
    return simplify(
        Fraction(
            a.numerator * (common // a.denominator)
            + b.numerator * (common // b.denominator),
            common,
        )
    )


def subtract(a: Fraction, b: Fraction) -> Fraction:
    """Subtract ``b`` from ``a`` over the LCM of both denominators."""
    common = math.lcm(a.denominator, b.denominator)
    return simplify(
        Fraction(
            a.numerator * (common // a.denominator)
            - b.numerator * (common // b.denominator),
            common,
        )
    )


def multiply(a: Fraction, b: Fraction) -> Fraction:
    return simplify(
        Fraction(a.numerator * b.numerator, a.denominator * b.denominator)
    )


def divide_by_int(fraction: Fraction, divisor: int) -> Fraction:
    """
    Divide a fraction by a non-zero integer.

    Raises:
        DivisionByZeroError: if ``divisor`` is zero or not an int.
    """
    if not _is_int(divisor) or divisor == 0:
        raise DivisionByZeroError(fraction.numerator, fraction.denominator, divisor)
    return simplify(Fraction(fraction.numerator, fraction.denominator * divisor))


def compare(a: Fraction, b: Fraction) -> int:
    """Return 1 if a > b, -1 if a < b, 0 if equal in value."""
    left = simplify(a)
    right = simplify(b)
    lhs = left.numerator * right.denominator
    rhs = right.numerator * left.denominator
    return (lhs > rhs) - (lhs < rhs)


def lcm_of(values: Iterable[int]) -> int:
    """
    LCM of the positive integers in ``values``.

    Non-positive or non-integer entries are ignored; an empty (or
    all-ignored) input yields 1, the identity.
    """
    positives = [v for v in values if _is_int(v) and v > 0]
    return reduce(math.lcm, positives, 1)


def sum_fractions(fractions: Iterable[Fraction]) -> Fraction:
    return reduce(add, fractions, ZERO)
