"""
Module: succession_engines.apportionment
Responsibility:
    Split a user-supplied total (court fee, tax) across heirs in proportion
    to their final shares, with deterministic rounding to the currency.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    A linear consumer of the share engines' output; it never influences
    the shares themselves.

Invariants enforced:
    - Intermediate amounts are exact (``total * share`` on Decimal with the
      rational share applied as numerator / denominator).
    - Rounding difference is assigned to a single designated heir (the
      last heir with a positive share, in map order) so that
      ``total_apportioned == round(total * sum(shares))``.
    - ``total_apportioned + unapportioned == total``; the unapportioned
      part is the fee on any unassigned remainder of the estate.

Failure modes:
    - NegativeAmountError when the total is negative.

Usage:
    from succession_engines.apportionment import ApportionmentEngine
    from succession_kernel.domain.values import Money

    result = ApportionmentEngine().apportion(display_shares, Money.of("300.00", "BAM"))
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from succession_engines.tracer import traced_engine
from succession_kernel.domain.fraction import Fraction, simplify, sum_fractions
from succession_kernel.domain.values import Money
from succession_kernel.exceptions import NegativeAmountError
from succession_kernel.logging_config import get_logger

logger = get_logger("engines.apportionment")


@dataclass(frozen=True)
class ApportionmentLine:
    """One heir's part of the total."""

    heir_id: str
    share: Fraction
    amount: Money


@dataclass(frozen=True)
class ApportionmentResult:
    """
    Complete apportionment.

    Guarantees:
        - ``total_apportioned + unapportioned == total``.
        - ``rounding_adjustment`` records the residual absorbed by the
          designated heir (zero when nothing needed rounding).
    """

    total: Money
    lines: tuple[ApportionmentLine, ...]
    total_apportioned: Money
    unapportioned: Money
    rounding_adjustment: Money

    def amount_for(self, heir_id: str) -> Money:
        for line in self.lines:
            if line.heir_id == heir_id:
                return line.amount
        raise KeyError(heir_id)

    def as_dict(self) -> dict[str, Money]:
        return {line.heir_id: line.amount for line in self.lines}


class ApportionmentEngine:
    """
    Proportional split of an amount by estate share.

    Contract:
        Pure; no I/O. Identical inputs always give identical pennies.
    Non-goals:
        - No tax law: rates, brackets and exemptions are out of scope.
    """

    @traced_engine("apportionment", "1.0", fingerprint_fields=("shares", "total"))
    def apportion(self, shares: Mapping[str, Fraction], total: Money) -> ApportionmentResult:
        """
        Apportion ``total`` by ``shares``.

        Args:
            shares: Heir id -> share of the whole estate (any denominators).
            total: Amount to split.

        Returns:
            ApportionmentResult with one line per heir, in map order.
        """
        if total.is_negative:
            raise NegativeAmountError(str(total.amount))

        currency = total.currency
        simplified = {hid: simplify(f) for hid, f in shares.items()}
        assigned = sum_fractions(simplified.values())

        logger.info("apportionment_started", extra={
            "total": str(total.amount),
            "currency": currency.code,
            "heir_count": len(simplified),
            "assigned_share": str(assigned),
        })

        if not assigned.is_positive or total.is_zero:
            lines = tuple(
                ApportionmentLine(heir_id=hid, share=f, amount=Money.zero(currency))
                for hid, f in simplified.items()
            )
            return ApportionmentResult(
                total=total,
                lines=lines,
                total_apportioned=Money.zero(currency),
                unapportioned=total,
                rounding_adjustment=Money.zero(currency),
            )

        rounding_heir = [hid for hid, f in simplified.items() if f.is_positive][-1]
        target_total = total.scale(assigned).round()

        lines: list[ApportionmentLine] = []
        allocated_so_far = Money.zero(currency)
        naive_total = Money.zero(currency)
        for hid, share in simplified.items():
            rounded = total.scale(share).round()
            naive_total = naive_total + rounded
            if hid == rounding_heir:
                continue
            lines.append(ApportionmentLine(heir_id=hid, share=share, amount=rounded))
            allocated_so_far = allocated_so_far + rounded

        # INVARIANT: rounding residual goes to exactly one heir
        residual_amount = target_total - allocated_so_far
        rounding_line = ApportionmentLine(
            heir_id=rounding_heir,
            share=simplified[rounding_heir],
            amount=residual_amount,
        )
        order = list(simplified)
        lines.insert(order.index(rounding_heir), rounding_line)

        total_apportioned = allocated_so_far + residual_amount
        unapportioned = total - total_apportioned
        rounding_adjustment = target_total - naive_total

        logger.info("apportionment_completed", extra={
            "total_apportioned": str(total_apportioned.amount),
            "unapportioned": str(unapportioned.amount),
            "rounding_adjustment": str(rounding_adjustment.amount),
            "rounding_heir": rounding_heir,
        })

        return ApportionmentResult(
            total=total,
            lines=tuple(lines),
            total_apportioned=total_apportioned,
            unapportioned=unapportioned,
            rounding_adjustment=rounding_adjustment,
        )


def apportion_amount(shares: Mapping[str, Fraction], total: Money) -> dict[str, Money]:
    """Convenience wrapper returning heir id -> amount."""
    return ApportionmentEngine().apportion(shares, total).as_dict()
