"""
Module: succession_engines.statutory
Responsibility:
    Compute each heir's initial fractional share of the estate under the
    statutory orders of succession, including the spouse's separate half
    and the right of representation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import succession_kernel.

Invariants enforced:
    - Order precedence: the first order with an eligible beneficiary takes
      the whole remaining estate; later orders are never evaluated.
    - Estate conservation: assigned shares + unassigned remainder == 1/1.
    - Only lines that end in at least one eligible recipient are counted
      when splitting, so no share is divided towards an empty line.
    - Every heir id in the forest appears in the result (0/1 if unreached).

Failure modes:
    - AmbiguousRelationshipError when the forest has more top-level heirs
      in a slot than the law provides (two spouses, three parents, ...).

Algorithm:
    1. A living, accepting spouse requesting the separate half takes 1/2
       and is settled; the other half continues below without them.
    2. Order I: children lines (+ the participating spouse as one more
       beneficiary) split the remainder equally.
    3. Order II: parents. With a participating spouse the spouse takes
       half and the parent lines split the other half; with no eligible
       parent line the spouse takes everything that remains.
    4. Order III: grandparents, split by side (paternal / maternal), then
       by slot within a side.
    5. Order IV: great-grandparents, split by side, then by pair within a
       side, then by slot within a pair.
    A deceased line holder passes their part to their eligible descendants
    in equal parts per generation, cascading through deceased descendants
    who themselves have issue.

Usage:
    from succession_engines.statutory import compute_initial_shares

    shares = compute_initial_shares(forest)
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from succession_engines.tracer import traced_engine
from succession_kernel.domain.fraction import (
    HALF,
    ONE,
    ZERO,
    Fraction,
    add,
    compare,
    divide_by_int,
    multiply,
    subtract,
    sum_fractions,
)
from succession_kernel.domain.heirs import Heir, HeirForest, Relationship
from succession_kernel.logging_config import get_logger

logger = get_logger("engines.statutory")

R = Relationship

# A "line group" is either a single slot (an Heir or None when nobody was
# entered for it) or a tuple of sub-groups that split their share equally.
LineGroup = Union[Heir, None, tuple["LineGroup", ...]]

GRANDPARENT_SIDES: tuple[tuple[Relationship, Relationship], ...] = (
    (R.PATERNAL_GRANDFATHER, R.PATERNAL_GRANDMOTHER),
    (R.MATERNAL_GRANDFATHER, R.MATERNAL_GRANDMOTHER),
)

GREAT_GRANDPARENT_SIDES: tuple[tuple[tuple[Relationship, Relationship], ...], ...] = (
    ((R.PGF_F, R.PGF_M), (R.PGM_F, R.PGM_M)),
    ((R.MGF_F, R.MGF_M), (R.MGM_F, R.MGM_M)),
)


class SuccessionOrder(str, Enum):
    """Which step of the algorithm consumed the estate."""

    NONE = "none"  # Nobody eligible; estate unassigned
    SEPARATE_HALF_ONLY = "separate_half_only"  # Only the spouse's half assigned
    FIRST = "first"  # Descendants (+ spouse)
    SECOND = "second"  # Parents (+ spouse)
    THIRD = "third"  # Grandparents
    FOURTH = "fourth"  # Great-grandparents
    SPOUSE_ONLY = "spouse_only"  # Spouse takes the remainder, no ascendant line


@dataclass(frozen=True)
class DistributionResult:
    """
    Outcome of a statutory distribution.

    Contract:
        Frozen dataclass; ``shares`` is a fresh dict built for this call.
    Guarantees:
        - ``total_assigned + unassigned == 1/1``.
        - Every value in ``shares`` is simplified.
    Non-goals:
        - Does NOT model who takes the unassigned remainder (the state).
    """

    shares: dict[str, Fraction]
    winning_order: SuccessionOrder
    separate_half_granted: bool
    unassigned: Fraction

    @property
    def total_assigned(self) -> Fraction:
        return sum_fractions(self.shares.values())

    @property
    def beneficiary_ids(self) -> tuple[str, ...]:
        return tuple(hid for hid, share in self.shares.items() if share.is_positive)


class _Distribution:
    """Mutable working state for a single distribution run."""

    def __init__(self, forest: HeirForest) -> None:
        self.forest = forest
        self.shares: dict[str, Fraction] = {hid: ZERO for hid in forest.ids()}
        self._has_issue = self._compute_issue()

    def _compute_issue(self) -> dict[str, bool]:
        # Reversed pre-order visits every subtree before its root.
        issue: dict[str, bool] = {}
        for heir in reversed(self.forest.flatten()):
            if heir.is_alive:
                issue[heir.heir_id] = False
                continue
            issue[heir.heir_id] = any(
                child.is_active or issue[child.heir_id]
                for child in self.forest.children(heir.heir_id)
            )
        return issue

    def has_issue(self, heir: Heir | None) -> bool:
        """A deceased heir with an eligible descendant somewhere down the line."""
        return heir is not None and self._has_issue[heir.heir_id]

    def can_inherit(self, heir: Heir | None) -> bool:
        return heir is not None and (heir.is_active or self.has_issue(heir))

    def credit(self, heir: Heir, amount: Fraction) -> None:
        self.shares[heir.heir_id] = add(self.shares[heir.heir_id], amount)

    def settle_line(self, heir: Heir, amount: Fraction) -> None:
        """Give ``amount`` to an eligible line: the heir, or their issue."""
        if heir.is_active:
            self.credit(heir, amount)
        elif self.has_issue(heir):
            self.represent(heir, amount)

    def represent(self, deceased: Heir, amount: Fraction) -> None:
        """Pass a deceased heir's part down, equal split per generation."""
        stack: list[tuple[str, Fraction]] = [(deceased.heir_id, amount)]
        while stack:
            heir_id, share = stack.pop()
            children = self.forest.children(heir_id)
            active = [c for c in children if c.is_active]
            with_issue = [c for c in children if not c.is_alive and self.has_issue(c)]
            lines = len(active) + len(with_issue)
            if lines == 0:
                continue
            part = divide_by_int(share, lines)
            for child in active:
                self.credit(child, part)
            stack.extend((child.heir_id, part) for child in reversed(with_issue))

    def group_eligible(self, group: LineGroup) -> bool:
        if isinstance(group, tuple):
            return any(self.group_eligible(g) for g in group)
        return self.can_inherit(group)

    def settle_group(self, group: LineGroup, amount: Fraction) -> None:
        """Split ``amount`` equally among the eligible members of ``group``."""
        if not isinstance(group, tuple):
            self.settle_line(group, amount)
            return
        eligible = [g for g in group if self.group_eligible(g)]
        if not eligible:
            return
        part = divide_by_int(amount, len(eligible))
        for member in eligible:
            self.settle_group(member, part)


class StatutoryDistributionEngine:
    """
    Compute initial statutory shares.

    Contract:
        Pure function of the forest snapshot. No I/O, no mutation of the
        forest. Identical forests always produce identical results.
    Guarantees:
        - Exact rational arithmetic throughout.
        - Estate conservation is asserted before returning.
    Non-goals:
        - Forced-heir minimums, disqualification and renunciation chains.
        - Does NOT apply donation rules (see succession_engines.redistribution).
    """

    @traced_engine("statutory", "1.0", fingerprint_fields=("heirs",))
    def distribute(self, heirs: HeirForest | Iterable[Heir]) -> DistributionResult:
        """
        Distribute the whole estate over the forest.

        Args:
            heirs: HeirForest, or the nested top-level heirs.

        Returns:
            DistributionResult covering every heir id in the forest.
        """
        t0 = time.monotonic()
        forest = HeirForest.of(heirs)
        forest.validate_for_succession()

        logger.info("statutory_distribution_started", extra={
            "heir_count": len(forest),
            "top_level_count": len(forest.roots()),
        })

        run = _Distribution(forest)
        remaining = ONE
        separate_half = False

        spouse = forest.find_top_level(R.SPOUSE)
        if spouse is not None and not spouse.is_active:
            spouse = None

        if spouse is not None and spouse.request_separate_half:
            run.credit(spouse, HALF)
            remaining = subtract(remaining, HALF)
            separate_half = True
            # The separate half settles the spouse for the rest of the orders.
            spouse = None
            logger.info("spouse_separate_half_granted", extra={
                "remaining": str(remaining),
            })

        order = SuccessionOrder.NONE
        if remaining.is_positive:
            order = self._distribute_remaining(run, forest, spouse, remaining)
        if order is SuccessionOrder.NONE and separate_half:
            order = SuccessionOrder.SEPARATE_HALF_ONLY

        shares = dict(run.shares)
        total = sum_fractions(shares.values())
        unassigned = subtract(ONE, total)

        # INVARIANT: estate conservation -- nothing assigned twice
        assert compare(unassigned, ZERO) >= 0, (
            f"Estate conservation violated: assigned {total} exceeds 1/1"
        )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("statutory_distribution_completed", extra={
            "winning_order": order.value,
            "separate_half": separate_half,
            "beneficiaries": sum(1 for s in shares.values() if s.is_positive),
            "unassigned": str(unassigned),
            "duration_ms": duration_ms,
        })
        if unassigned.is_positive:
            logger.warning("estate_partially_unassigned", extra={
                "unassigned": str(unassigned),
                "winning_order": order.value,
            })

        return DistributionResult(
            shares=shares,
            winning_order=order,
            separate_half_granted=separate_half,
            unassigned=unassigned,
        )

    def _distribute_remaining(
        self,
        run: _Distribution,
        forest: HeirForest,
        spouse: Heir | None,
        remaining: Fraction,
    ) -> SuccessionOrder:
        # Order I: descendants, the spouse counting as one more line.
        child_lines = [c for c in forest.top_level(R.CHILD) if run.can_inherit(c)]
        if child_lines:
            count = len(child_lines) + (1 if spouse is not None else 0)
            part = divide_by_int(remaining, count)
            if spouse is not None:
                run.credit(spouse, part)
            for child in child_lines:
                run.settle_line(child, part)
            logger.debug("first_order_applied", extra={
                "child_lines": len(child_lines),
                "spouse": spouse is not None,
                "share_per_line": str(part),
            })
            return SuccessionOrder.FIRST

        ascendant_orders: tuple[tuple[SuccessionOrder, LineGroup], ...] = (
            (SuccessionOrder.SECOND, forest.top_level(R.PARENT)),
            (SuccessionOrder.THIRD, self._grandparent_group(forest)),
            (SuccessionOrder.FOURTH, self._great_grandparent_group(forest)),
        )
        for order, group in ascendant_orders:
            if run.group_eligible(group):
                ascendant_share = remaining
                if spouse is not None:
                    spouse_share = multiply(remaining, HALF)
                    run.credit(spouse, spouse_share)
                    ascendant_share = subtract(remaining, spouse_share)
                run.settle_group(group, ascendant_share)
                logger.debug("ascendant_order_applied", extra={
                    "order": order.value,
                    "spouse": spouse is not None,
                    "ascendant_share": str(ascendant_share),
                })
                return order
            if spouse is not None:
                # No line of this order: the spouse excludes every farther order.
                run.credit(spouse, remaining)
                logger.debug("spouse_takes_remainder", extra={
                    "after_order": order.value,
                    "remaining": str(remaining),
                })
                return SuccessionOrder.SPOUSE_ONLY

        return SuccessionOrder.NONE

    @staticmethod
    def _grandparent_group(forest: HeirForest) -> LineGroup:
        return tuple(
            tuple(forest.find_top_level(slot) for slot in side)
            for side in GRANDPARENT_SIDES
        )

    @staticmethod
    def _great_grandparent_group(forest: HeirForest) -> LineGroup:
        return tuple(
            tuple(
                tuple(forest.find_top_level(slot) for slot in pair)
                for pair in side
            )
            for side in GREAT_GRANDPARENT_SIDES
        )


def compute_initial_shares(heirs: HeirForest | Iterable[Heir]) -> dict[str, Fraction]:
    """Convenience wrapper returning only the heir id -> share map."""
    return StatutoryDistributionEngine().distribute(heirs).shares
