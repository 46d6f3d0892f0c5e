"""
Module: succession_engines.normalization
Responsibility:
    Re-express a shares map over one common denominator for display
    (e.g. {A: 1/2, B: 1/3} -> {A: 3/6, B: 2/6}).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Every output fraction carries the same denominator D, the LCM of the
      simplified input denominators.
    - Each output is value-equal to its input; numerators are scaled by the
      exact integer D // d, so no rounding ever occurs.
    - Zero shares become 0/D.

Failure modes:
    - None beyond those of Fraction construction.
"""

from __future__ import annotations

from collections.abc import Mapping

from succession_engines.tracer import traced_engine
from succession_kernel.domain.fraction import Fraction, lcm_of, simplify, sum_fractions
from succession_kernel.logging_config import get_logger

logger = get_logger("engines.normalization")


def common_denominator(shares: Mapping[str, Fraction]) -> int:
    """LCM of the simplified denominators (1 for an empty map)."""
    return lcm_of(simplify(f).denominator for f in shares.values())


@traced_engine("normalization", "1.0", fingerprint_fields=("shares",))
def normalize(shares: Mapping[str, Fraction]) -> dict[str, Fraction]:
    """
    Convert every share to the common denominator.

    An empty map is returned as an empty map.
    """
    if not shares:
        return {}

    simplified = {hid: simplify(f) for hid, f in shares.items()}
    denominator = lcm_of(f.denominator for f in simplified.values())

    result = {
        hid: Fraction(f.numerator * (denominator // f.denominator), denominator)
        for hid, f in simplified.items()
    }

    logger.debug("shares_normalized", extra={
        "heir_count": len(result),
        "common_denominator": denominator,
    })
    return result


convert_to_common_denominator = normalize


def sum_shares(shares: Mapping[str, Fraction]) -> Fraction:
    """Total of all shares, simplified (1/1 when the whole estate is assigned)."""
    return sum_fractions(shares.values())
