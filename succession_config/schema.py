"""
Succession configuration schema.

Defines the human-authored source artifacts: process-wide settings and a
single succession case (heirs, donation rules, optional fee). YAML files
are parsed into these types by ``succession_config.loader``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from succession_kernel.domain.donation import DonationRule
from succession_kernel.domain.heirs import Heir
from succession_kernel.domain.values import Money

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuccessionSettings:
    """Process-wide calculation settings."""

    currency: str = "BAM"  # ISO 4217, default for fee totals without a currency
    strict_rule_references: bool = True
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Case
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuccessionCase:
    """One estate to calculate."""

    case_id: str
    decedent_name: str
    heirs: tuple[Heir, ...]
    donation_rules: tuple[DonationRule, ...] = ()
    fee_total: Money | None = None
    checksum: str = field(default="", compare=False)
