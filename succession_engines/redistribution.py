"""
Module: succession_engines.redistribution
Responsibility:
    Apply contractual share transfers between heirs on top of the initial
    statutory shares, rejecting any donor whose transfers do not hand over
    exactly their whole share.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import succession_kernel.

Invariants enforced:
    - Whole-share donation: a donor's portions must sum to exactly 1/1 or
      none of that donor's rules apply (no partial application).
    - Portions are relative to the donor's INITIAL statutory share; the
      absolute amount moved is ``initial_share * portion``.
    - The output covers exactly the heir ids of the initial shares, and
      the total of all shares is unchanged.
    - Application is order independent: valid donors are emptied once,
      then every transfer is added to its recipient, so a donor who also
      receives from someone else keeps what they receive.

Failure modes:
    - UnknownHeirReferenceError when a rule names an id that has no
      initial share (so is not part of this calculation).
    - Donor over/under-allocation is NOT an exception: it yields a
      RedistributionWarning and the donor keeps their initial share.

Usage:
    from succession_engines.redistribution import apply_redistributions

    final_shares, warnings = apply_redistributions(initial, rules, forest)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from succession_engines.tracer import traced_engine
from succession_kernel.domain.donation import (
    DonationRule,
    RedistributionWarning,
    WarningType,
)
from succession_kernel.domain.fraction import (
    ONE,
    ZERO,
    Fraction,
    add,
    compare,
    multiply,
    simplify,
    subtract,
    sum_fractions,
)
from succession_kernel.domain.heirs import Heir, HeirForest
from succession_kernel.exceptions import UnknownHeirReferenceError
from succession_kernel.logging_config import get_logger

logger = get_logger("engines.redistribution")


@dataclass(frozen=True)
class RedistributionResult:
    """
    Final shares after donations.

    Guarantees:
        - ``final_shares`` has the same keys as the initial shares.
        - One warning per invalid donor, in order of first appearance.
    """

    final_shares: dict[str, Fraction]
    warnings: tuple[RedistributionWarning, ...]
    applied_donor_ids: tuple[str, ...]

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class DonorAllocation:
    """How much of a donor's share their current rules hand over."""

    donor_id: str
    initial_share: Fraction
    allocated: Fraction
    remaining: Fraction

    @property
    def is_fully_allocated(self) -> bool:
        return compare(self.allocated, ONE) == 0

    @property
    def is_over_allocated(self) -> bool:
        return compare(self.allocated, ONE) > 0


class RedistributionEngine:
    """
    Validate and apply donation rules.

    Contract:
        Pure function of (initial shares, rules, forest). Never mutates
        its inputs.
    Non-goals:
        - Does NOT decide whether a donor is allowed to donate (form layer
          restricts donors to ``eligible_donors``); zero-share donors are
          simply ignored.
    """

    @traced_engine("redistribution", "1.0", fingerprint_fields=("initial_shares", "rules"))
    def apply(
        self,
        initial_shares: Mapping[str, Fraction],
        rules: Sequence[DonationRule],
        heirs: HeirForest | Iterable[Heir] = (),
    ) -> RedistributionResult:
        """
        Apply ``rules`` to ``initial_shares``.

        Args:
            initial_shares: Heir id -> initial statutory share.
            rules: Donation rules, in entry order.
            heirs: Forest used for donor names in warnings.

        Returns:
            RedistributionResult with final shares and warnings.
        """
        forest = HeirForest.of(heirs)
        self._validate_references(initial_shares, rules)

        logger.info("redistribution_started", extra={
            "rule_count": len(rules),
            "heir_count": len(initial_shares),
        })

        # Group portions per donor, in order of first appearance.
        totals: dict[str, Fraction] = {}
        for rule in rules:
            donor_share = initial_shares.get(rule.donor_id, ZERO)
            if not donor_share.is_positive:
                logger.debug("redistribution_rule_skipped_zero_share", extra={
                    "rule_id": rule.rule_id,
                    "donor_id": rule.donor_id,
                })
                continue
            totals[rule.donor_id] = add(totals.get(rule.donor_id, ZERO), rule.portion_of_share)

        valid_donors: list[str] = []
        warnings: list[RedistributionWarning] = []
        for donor_id, allocated in totals.items():
            allocated = simplify(allocated)
            if compare(allocated, ONE) == 0:
                valid_donors.append(donor_id)
                continue
            donor_name = _donor_name(forest, donor_id)
            warnings.append(
                RedistributionWarning(
                    type=WarningType.DONOR_INCOMPLETE_ALLOCATION,
                    donor_id=donor_id,
                    donor_name=donor_name,
                    allocated=allocated,
                    message=(
                        f"{donor_name} did not reassign exactly 100% of their share "
                        f"(allocated: {allocated}). Their donations will not be applied."
                    ),
                )
            )
            logger.warning("redistribution_donor_incomplete", extra={
                "donor_id": donor_id,
                "allocated": str(allocated),
            })

        final: dict[str, Fraction] = dict(initial_shares)
        for donor_id in valid_donors:
            final[donor_id] = ZERO

        valid = set(valid_donors)
        for rule in rules:
            if rule.donor_id not in valid:
                continue
            transfer = multiply(initial_shares[rule.donor_id], rule.portion_of_share)
            final[rule.recipient_id] = add(final[rule.recipient_id], transfer)

        final = {hid: simplify(share) for hid, share in final.items()}

        # INVARIANT: transfers move shares, they never create or destroy them
        before = sum_fractions(initial_shares.values())
        after = sum_fractions(final.values())
        assert compare(before, after) == 0, (
            f"Redistribution conservation violated: {before} != {after}"
        )

        logger.info("redistribution_completed", extra={
            "applied_donors": len(valid_donors),
            "invalid_donors": len(warnings),
        })

        return RedistributionResult(
            final_shares=final,
            warnings=tuple(warnings),
            applied_donor_ids=tuple(valid_donors),
        )

    @staticmethod
    def _validate_references(
        initial_shares: Mapping[str, Fraction],
        rules: Sequence[DonationRule],
    ) -> None:
        for rule in rules:
            for role, heir_id in (("donor", rule.donor_id), ("recipient", rule.recipient_id)):
                if heir_id not in initial_shares:
                    raise UnknownHeirReferenceError(rule.rule_id, heir_id, role)


def _donor_name(forest: HeirForest, donor_id: str) -> str:
    if donor_id in forest:
        return forest.get(donor_id).name
    return f"Donor ID: {donor_id}"


def apply_redistributions(
    initial_shares: Mapping[str, Fraction],
    rules: Sequence[DonationRule],
    heirs: HeirForest | Iterable[Heir] = (),
) -> tuple[dict[str, Fraction], list[RedistributionWarning]]:
    """Convenience wrapper returning ``(final_shares, warnings)``."""
    result = RedistributionEngine().apply(initial_shares, rules, heirs)
    return result.final_shares, list(result.warnings)


def donor_allocation(
    donor_id: str,
    rules: Iterable[DonationRule],
    initial_shares: Mapping[str, Fraction],
) -> DonorAllocation:
    """
    Summarise a donor's rules so far.

    ``remaining`` is the largest portion a new rule may still take without
    exceeding 1/1 (never negative).
    """
    allocated = sum_fractions(r.portion_of_share for r in rules if r.donor_id == donor_id)
    remaining = subtract(ONE, allocated)
    if compare(remaining, ZERO) < 0:
        remaining = ZERO
    return DonorAllocation(
        donor_id=donor_id,
        initial_share=simplify(initial_shares.get(donor_id, ZERO)),
        allocated=allocated,
        remaining=remaining,
    )


def eligible_donors(
    heirs: HeirForest | Iterable[Heir],
    initial_shares: Mapping[str, Fraction],
) -> list[Heir]:
    """Living, accepting heirs holding a positive initial share, pre-order."""
    forest = HeirForest.of(heirs)
    return [
        heir for heir in forest.flatten()
        if heir.is_active and initial_shares.get(heir.heir_id, ZERO).is_positive
    ]


def prune_rules_for_heir(
    rules: Iterable[DonationRule],
    heir_ids: str | Iterable[str],
) -> list[DonationRule]:
    """Drop rules naming any of ``heir_ids`` as donor or recipient."""
    removed = {heir_ids} if isinstance(heir_ids, str) else set(heir_ids)
    return [
        rule for rule in rules
        if rule.donor_id not in removed and rule.recipient_id not in removed
    ]
