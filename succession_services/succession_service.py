"""
SuccessionService -- runs the full share calculation for one estate.

Composes the pure engines in pipeline order:
    StatutoryDistributionEngine -> RedistributionEngine -> normalize
    -> ApportionmentEngine (only when a fee total is given)

Architecture: succession_services -- imperative shell.
    The service owns settings, log context binding and rule pruning.
    All arithmetic stays in the engines.

Invariants enforced:
    Estate conservation and whole-share donation via the engines; the
    report's three share maps always cover the same heir ids.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from succession_config.schema import SuccessionCase, SuccessionSettings
from succession_engines.apportionment import ApportionmentEngine, ApportionmentResult
from succession_engines.normalization import normalize
from succession_engines.redistribution import RedistributionEngine, prune_rules_for_heir
from succession_engines.statutory import StatutoryDistributionEngine, SuccessionOrder
from succession_kernel.domain.donation import DonationRule, RedistributionWarning
from succession_kernel.domain.fraction import Fraction
from succession_kernel.domain.heirs import Heir, HeirForest
from succession_kernel.domain.values import Money
from succession_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.succession")


@dataclass(frozen=True)
class SuccessionReport:
    """Everything a caller needs to present one calculation."""

    initial_shares: dict[str, Fraction]
    final_shares: dict[str, Fraction]
    display_shares: dict[str, Fraction]
    warnings: tuple[RedistributionWarning, ...]
    winning_order: SuccessionOrder
    fee_apportionment: ApportionmentResult | None = None
    unassigned: Fraction | None = None

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class SuccessionService:
    """Service that calculates initial, final and display shares.

    Contract:
        - ``calculate()`` runs the pipeline on a forest (or nested heirs).
        - ``calculate_case()`` runs it on a parsed SuccessionCase.

    Non-goals:
        - Does NOT persist anything (caller decides).
        - Does NOT render output (see scripts/compute_shares.py).
    """

    def __init__(
        self,
        settings: SuccessionSettings | None = None,
        statutory: StatutoryDistributionEngine | None = None,
        redistribution: RedistributionEngine | None = None,
        apportionment: ApportionmentEngine | None = None,
    ) -> None:
        self._settings = settings or SuccessionSettings()
        self._statutory = statutory or StatutoryDistributionEngine()
        self._redistribution = redistribution or RedistributionEngine()
        self._apportionment = apportionment or ApportionmentEngine()

    @property
    def settings(self) -> SuccessionSettings:
        return self._settings

    def calculate(
        self,
        heirs: HeirForest | Iterable[Heir],
        rules: Sequence[DonationRule] = (),
        fee_total: Money | Decimal | str | None = None,
        case_id: str | None = None,
    ) -> SuccessionReport:
        """Run the full pipeline.

        Args:
            heirs: HeirForest, or the nested top-level heirs.
            rules: Donation rules in entry order.
            fee_total: Optional amount to apportion by final share. Plain
                Decimal or str amounts use the settings currency.
            case_id: Bound into the log context for the run.

        Returns:
            SuccessionReport with every stage's shares.

        Raises:
            UnknownHeirReferenceError: a rule names a missing heir while
                ``strict_rule_references`` is on.
        """
        forest = HeirForest.of(heirs)
        with LogContext.bind(case_id=case_id, calculation_id=uuid.uuid4().hex):
            logger.info("succession_calculation_started", extra={
                "heir_count": len(forest),
                "rule_count": len(rules),
                "fee_requested": fee_total is not None,
            })

            effective_rules = list(rules)
            if not self._settings.strict_rule_references:
                effective_rules = self._prune_unknown_references(forest, effective_rules)

            distribution = self._statutory.distribute(forest)
            redistribution = self._redistribution.apply(
                distribution.shares, effective_rules, forest,
            )
            display = normalize(redistribution.final_shares)

            apportionment = None
            if fee_total is not None:
                total = (
                    fee_total
                    if isinstance(fee_total, Money)
                    else Money.of(fee_total, self._settings.currency)
                )
                apportionment = self._apportionment.apportion(display, total)

            logger.info("succession_calculation_completed", extra={
                "winning_order": distribution.winning_order.value,
                "warning_count": len(redistribution.warnings),
                "unassigned": str(distribution.unassigned),
            })

        return SuccessionReport(
            initial_shares=distribution.shares,
            final_shares=redistribution.final_shares,
            display_shares=display,
            warnings=redistribution.warnings,
            winning_order=distribution.winning_order,
            fee_apportionment=apportionment,
            unassigned=distribution.unassigned,
        )

    def calculate_case(self, case: SuccessionCase) -> SuccessionReport:
        """Run the pipeline for a parsed case file."""
        return self.calculate(
            case.heirs,
            case.donation_rules,
            fee_total=case.fee_total,
            case_id=case.case_id,
        )

    @staticmethod
    def _prune_unknown_references(
        forest: HeirForest,
        rules: list[DonationRule],
    ) -> list[DonationRule]:
        known = set(forest.ids())
        unknown = {
            heir_id
            for rule in rules
            for heir_id in (rule.donor_id, rule.recipient_id)
            if heir_id not in known
        }
        if not unknown:
            return rules
        pruned = prune_rules_for_heir(rules, unknown)
        logger.warning("donation_rules_pruned", extra={
            "unknown_heir_ids": sorted(unknown),
            "removed_rules": len(rules) - len(pruned),
        })
        return pruned
