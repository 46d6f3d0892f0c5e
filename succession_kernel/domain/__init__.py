"""Pure domain value objects for succession calculations."""

from succession_kernel.domain.donation import (
    DonationRule,
    RedistributionWarning,
    WarningType,
)
from succession_kernel.domain.fraction import (
    HALF,
    ONE,
    ZERO,
    Fraction,
    add,
    compare,
    divide_by_int,
    lcm_of,
    multiply,
    simplify,
    subtract,
    sum_fractions,
)
from succession_kernel.domain.heirs import Heir, HeirForest, Relationship
from succession_kernel.domain.values import Currency, Money

__all__ = [
    "Currency",
    "DonationRule",
    "Fraction",
    "HALF",
    "Heir",
    "HeirForest",
    "Money",
    "ONE",
    "RedistributionWarning",
    "Relationship",
    "WarningType",
    "ZERO",
    "add",
    "compare",
    "divide_by_int",
    "lcm_of",
    "multiply",
    "simplify",
    "subtract",
    "sum_fractions",
]
