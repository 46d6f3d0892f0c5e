"""
Donation -- Share transfer rules and redistribution warnings.

Responsibility:
    Value objects for the contractual reassignment of a computed share
    from one heir (donor) to another (recipient), and the non-fatal
    warning emitted when a donor's rules cannot be applied.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Consumed by succession_engines.redistribution.

Invariants enforced:
    - donor_id != recipient_id (SelfDonationError).
    - 0 <= portion_of_share <= 1 (InvalidDonationRuleError).
    - portion_of_share is always relative to the donor's OWN initial
      statutory share, never to the whole estate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from succession_kernel.domain.fraction import ONE, ZERO, Fraction, compare
from succession_kernel.exceptions import InvalidDonationRuleError, SelfDonationError


@dataclass(frozen=True, slots=True)
class DonationRule:
    """
    Transfer of part of a donor's initial share to a recipient.

    Contract:
        The recipient receives ``donor_initial_share * portion_of_share``
        in absolute estate terms, on top of whatever else they hold.
    Guarantees:
        - Portion lies in [0, 1]; donor and recipient differ.
    Non-goals:
        - Does NOT check that a donor's rules sum to 1/1; a single rule
          cannot know about its siblings. The engine does that.
    """

    rule_id: str
    donor_id: str
    recipient_id: str
    portion_of_share: Fraction

    def __post_init__(self) -> None:
        if self.donor_id == self.recipient_id:
            raise SelfDonationError(self.rule_id, self.donor_id)
        if not isinstance(self.portion_of_share, Fraction):
            raise InvalidDonationRuleError(
                self.rule_id,
                f"portion must be a Fraction, got {type(self.portion_of_share).__name__}",
            )
        if compare(self.portion_of_share, ZERO) < 0 or compare(self.portion_of_share, ONE) > 0:
            raise InvalidDonationRuleError(
                self.rule_id,
                f"portion {self.portion_of_share} is outside 0..1",
            )


class WarningType(str, Enum):
    """Kinds of non-fatal redistribution outcomes."""

    DONOR_INCOMPLETE_ALLOCATION = "donor_incomplete_allocation"


@dataclass(frozen=True, slots=True)
class RedistributionWarning:
    """A donor whose rules were not applied, and why."""

    type: WarningType
    donor_id: str
    donor_name: str
    allocated: Fraction
    message: str
