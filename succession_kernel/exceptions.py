"""
Typed Exception Hierarchy for the Succession Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

An estate split that is silently wrong is worse than one that refuses to
run. Every failure the core can detect is raised as a TYPED exception
with a machine-readable CODE and the structured data that caused it, so
the presentation layer can catch by type instead of parsing messages.

Example - WRONG way to handle errors:
    try:
        shares = compute_initial_shares(forest)
    except Exception as e:
        if "denominator" in str(e):  # FRAGILE - message might change
            ...

Example - RIGHT way (what this module enables):
    try:
        shares = compute_initial_shares(forest)
    except AmbiguousRelationshipError as e:
        show_error(f"Only {e.limit} heir(s) may be entered as {e.relationship}")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from SuccessionKernelError:

    SuccessionKernelError (base)
    |
    +-- FractionError
    |   +-- InvalidFractionError
    |       +-- DivisionByZeroError
    |
    +-- HeirError
    |   +-- InvalidHeirError
    |   +-- DuplicateHeirError
    |   +-- HeirNotFoundError
    |   +-- AmbiguousRelationshipError
    |
    +-- RedistributionError
    |   +-- InvalidDonationRuleError
    |   |   +-- SelfDonationError
    |   +-- UnknownHeirReferenceError
    |
    +-- ApportionmentError
    |   +-- NegativeAmountError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Fraction        | INVALID_FRACTION            | Zero denominator / non-integer parts
                | DIVISION_BY_ZERO            | divide_by_int with a zero divisor
----------------|-----------------------------|-----------------------------------------
Heir            | INVALID_HEIR                | Dead heir accepting, misplaced flags
                | DUPLICATE_HEIR              | Same id entered twice in a forest
                | HEIR_NOT_FOUND              | Structural op on an unknown id
                | AMBIGUOUS_RELATIONSHIP      | Two spouses, three parents, ...
----------------|-----------------------------|-----------------------------------------
Redistribution  | INVALID_DONATION_RULE       | Portion outside [0, 1]
                | SELF_DONATION               | donor_id == recipient_id
                | UNKNOWN_HEIR_REFERENCE      | Rule names an id not in the forest
----------------|-----------------------------|-----------------------------------------
Apportionment   | NEGATIVE_AMOUNT             | Fee total below zero
----------------|-----------------------------|-----------------------------------------
Config          | CONFIGURATION_ERROR         | Malformed settings or case file

A donor whose rules do not add up to exactly 1/1 is NOT an exception:
the redistribution engine reports it as a RedistributionWarning and
carries on with that donor's rules ignored.
"""


class SuccessionKernelError(Exception):
    """
    Base exception for all succession kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SUCCESSION_KERNEL_ERROR"


# Fraction-related exceptions


class FractionError(SuccessionKernelError):
    """Base exception for rational arithmetic errors."""

    code: str = "FRACTION_ERROR"


class InvalidFractionError(FractionError):
    """
    A fraction cannot take part in arithmetic.

    Indicates an internal invariant violation; the core never substitutes
    a zero share for a malformed value.
    """

    code: str = "INVALID_FRACTION"

    def __init__(self, numerator: object, denominator: object, reason: str):
        self.numerator = numerator
        self.denominator = denominator
        self.reason = reason
        super().__init__(
            f"Invalid fraction {numerator!r}/{denominator!r}: {reason}"
        )


class DivisionByZeroError(InvalidFractionError):
    """A fraction was divided by an integer zero."""

    code: str = "DIVISION_BY_ZERO"

    def __init__(self, numerator: int, denominator: int, divisor: object):
        self.divisor = divisor
        super().__init__(numerator, denominator, f"cannot divide by {divisor!r}")


# Heir-related exceptions


class HeirError(SuccessionKernelError):
    """Base exception for heir and heir-forest errors."""

    code: str = "HEIR_ERROR"


class InvalidHeirError(HeirError):
    """Heir attributes contradict each other."""

    code: str = "INVALID_HEIR"

    def __init__(self, heir_id: str, reason: str):
        self.heir_id = heir_id
        self.reason = reason
        super().__init__(f"Invalid heir {heir_id!r}: {reason}")


class DuplicateHeirError(HeirError):
    """Heir id already present in the forest."""

    code: str = "DUPLICATE_HEIR"

    def __init__(self, heir_id: str):
        self.heir_id = heir_id
        super().__init__(f"Heir already exists: {heir_id}")


class HeirNotFoundError(HeirError):
    """Heir id not present in the forest."""

    code: str = "HEIR_NOT_FOUND"

    def __init__(self, heir_id: str):
        self.heir_id = heir_id
        super().__init__(f"Heir not found: {heir_id}")


class AmbiguousRelationshipError(HeirError):
    """More top-level heirs hold a relationship than the law has slots for."""

    code: str = "AMBIGUOUS_RELATIONSHIP"

    def __init__(self, relationship: str, count: int, limit: int):
        self.relationship = relationship
        self.count = count
        self.limit = limit
        super().__init__(
            f"{count} heirs entered as {relationship}, at most {limit} allowed"
        )


# Redistribution-related exceptions


class RedistributionError(SuccessionKernelError):
    """Base exception for share transfer errors."""

    code: str = "REDISTRIBUTION_ERROR"


class InvalidDonationRuleError(RedistributionError):
    """Donation rule is structurally invalid."""

    code: str = "INVALID_DONATION_RULE"

    def __init__(self, rule_id: str, reason: str):
        self.rule_id = rule_id
        self.reason = reason
        super().__init__(f"Invalid donation rule {rule_id!r}: {reason}")


class SelfDonationError(InvalidDonationRuleError):
    """Donor and recipient are the same heir."""

    code: str = "SELF_DONATION"

    def __init__(self, rule_id: str, heir_id: str):
        self.heir_id = heir_id
        super().__init__(rule_id, f"heir {heir_id!r} cannot donate to themselves")


class UnknownHeirReferenceError(RedistributionError):
    """Donation rule references an heir that is not part of the calculation."""

    code: str = "UNKNOWN_HEIR_REFERENCE"

    def __init__(self, rule_id: str, heir_id: str, role: str):
        self.rule_id = rule_id
        self.heir_id = heir_id
        self.role = role
        super().__init__(
            f"Donation rule {rule_id!r} references unknown {role} {heir_id!r}"
        )


# Apportionment-related exceptions


class ApportionmentError(SuccessionKernelError):
    """Base exception for fee apportionment errors."""

    code: str = "APPORTIONMENT_ERROR"


class NegativeAmountError(ApportionmentError):
    """Amount to apportion is negative."""

    code: str = "NEGATIVE_AMOUNT"

    def __init__(self, amount: str):
        self.amount = amount
        super().__init__(f"Amount to apportion cannot be negative: {amount}")


# Configuration exceptions


class ConfigurationError(SuccessionKernelError):
    """Settings or case file content is malformed."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Configuration error in {source}: {reason}")
