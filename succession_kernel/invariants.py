"""
Kernel Invariants Contract.

These invariants are structural law for every calculation. No setting or
case file may switch them off.

This module exists solely to declare them explicitly. Enforcement is
distributed across the Fraction value object, HeirForest, and the
statutory, redistribution and normalisation engines.
"""

from enum import Enum, unique


@unique
class SuccessionInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel and engines."""

    EXACT_ARITHMETIC = "exact_arithmetic"
    """Shares are integer rationals, never floats. Enforced by Fraction
    construction, which rejects non-integer parts."""

    CANONICAL_FRACTION = "canonical_fraction"
    """A simplified fraction has a positive denominator and zero is 0/1.
    Enforced by simplify()."""

    ORDER_PRECEDENCE = "order_precedence"
    """The first statutory order with an eligible beneficiary takes the
    whole remaining estate. Enforced by StatutoryDistributionEngine."""

    ESTATE_CONSERVATION = "estate_conservation"
    """Assigned shares plus the unassigned remainder sum to exactly 1/1.
    Enforced by StatutoryDistributionEngine before returning."""

    WHOLE_SHARE_DONATION = "whole_share_donation"
    """A donor's transfers apply only if their portions sum to exactly
    1/1. Enforced by RedistributionEngine."""

    COMMON_DENOMINATOR = "common_denominator"
    """Display shares all carry one denominator equal to the LCM of the
    simplified denominators. Enforced by normalize()."""


# All invariants as a frozenset for programmatic checks.
ALL_SUCCESSION_INVARIANTS: frozenset[SuccessionInvariant] = frozenset(
    SuccessionInvariant
)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "succession_engines",
    "succession_services",
    "succession_config",
)

# Engines stay pure: no upward imports and no config access.
FORBIDDEN_ENGINE_IMPORTS: tuple[str, ...] = (
    "succession_services",
    "succession_config",
)
