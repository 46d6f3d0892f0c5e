"""
Module: succession_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines. This is the canonical import surface for the
    service layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import succession_kernel (and sibling engine modules).
    MUST NOT import succession_services or succession_config.

Invariants enforced:
    - Exact arithmetic: shares are Fractions end to end; only the fee
      apportionment touches Decimal, and only at the final rounding step.
    - Determinism: identical inputs always produce identical outputs.

Failure modes:
    - Typed SuccessionKernelError subclasses propagated from the engines.

Audit relevance:
    Every engine invocation is traced via the ``@traced_engine`` decorator
    (see ``succession_engines.tracer``), emitting SUCCESSION_ENGINE_TRACE
    log records with engine name, version, input fingerprint and duration.

Usage:
    from succession_engines.statutory import StatutoryDistributionEngine
    from succession_engines.redistribution import RedistributionEngine
    from succession_engines.normalization import normalize
    from succession_engines.apportionment import ApportionmentEngine
"""

from succession_kernel.logging_config import get_logger

logger = get_logger("engines")

from succession_engines.apportionment import (
    ApportionmentEngine,
    ApportionmentLine,
    ApportionmentResult,
    apportion_amount,
)
from succession_engines.normalization import (
    common_denominator,
    convert_to_common_denominator,
    normalize,
    sum_shares,
)
from succession_engines.redistribution import (
    DonorAllocation,
    RedistributionEngine,
    RedistributionResult,
    apply_redistributions,
    donor_allocation,
    eligible_donors,
    prune_rules_for_heir,
)
from succession_engines.statutory import (
    DistributionResult,
    StatutoryDistributionEngine,
    SuccessionOrder,
    compute_initial_shares,
)
from succession_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Statutory
    "DistributionResult",
    "StatutoryDistributionEngine",
    "SuccessionOrder",
    "compute_initial_shares",
    # Redistribution
    "DonorAllocation",
    "RedistributionEngine",
    "RedistributionResult",
    "apply_redistributions",
    "donor_allocation",
    "eligible_donors",
    "prune_rules_for_heir",
    # Normalization
    "common_denominator",
    "convert_to_common_denominator",
    "normalize",
    "sum_shares",
    # Apportionment
    "ApportionmentEngine",
    "ApportionmentLine",
    "ApportionmentResult",
    "apportion_amount",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]
