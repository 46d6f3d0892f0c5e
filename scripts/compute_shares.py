#!/usr/bin/env python3
"""
Compute inheritance shares for a YAML case file and print the share table.

Prints every heir's initial (statutory) share, final share after
donations, and the common-denominator display share. When the case has a
fee total, each heir's part of the fee is added as a last column.

Usage:
    python3 scripts/compute_shares.py tests/fixtures/sample_case.yaml
    python3 scripts/compute_shares.py case.yaml --settings settings.yaml
    python3 scripts/compute_shares.py case.yaml --fee 450.00 --log-level DEBUG
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from succession_config import load_case, load_settings  # noqa: E402
from succession_kernel.domain.heirs import HeirForest  # noqa: E402
from succession_kernel.domain.values import Money  # noqa: E402
from succession_kernel.exceptions import SuccessionKernelError  # noqa: E402
from succession_kernel.logging_config import configure_logging  # noqa: E402
from succession_services import SuccessionReport, SuccessionService  # noqa: E402


def _render(report: SuccessionReport, forest: HeirForest) -> str:
    header = ["Heir", "Relationship", "Initial", "Final", "Display"]
    if report.fee_apportionment is not None:
        header.append(f"Fee ({report.fee_apportionment.total.currency})")
    rows = [header]
    fees = report.fee_apportionment.as_dict() if report.fee_apportionment else {}
    for heir in forest.flatten():
        depth = 0
        parent = forest.parent_of(heir.heir_id)
        while parent is not None:
            depth += 1
            parent = forest.parent_of(parent.heir_id)
        name = "  " * depth + heir.name
        if not heir.is_alive:
            name += " (deceased)"
        row = [
            name,
            heir.relationship.value,
            str(report.initial_shares[heir.heir_id]),
            str(report.final_shares[heir.heir_id]),
            str(report.display_shares[heir.heir_id]),
        ]
        if report.fee_apportionment is not None:
            row.append(str(fees[heir.heir_id].amount))
        rows.append(row)

    widths = [max(len(r[i]) for r in rows) for i in range(len(header))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(r, widths)).rstrip() for r in rows]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


def main() -> int:
    parser = argparse.ArgumentParser(description="Compute inheritance shares for a case file")
    parser.add_argument("case", type=Path, help="Case YAML file")
    parser.add_argument("--settings", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--fee", default=None, help="Fee total to apportion (overrides the case)")
    parser.add_argument("--log-level", default=None, help="Override the settings log level")
    args = parser.parse_args()

    try:
        settings = load_settings(args.settings)
        level = getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO)
        configure_logging(level=level)

        case = load_case(args.case, settings)
        fee_total = case.fee_total
        if args.fee is not None:
            fee_total = Money.of(args.fee, settings.currency)

        service = SuccessionService(settings=settings)
        report = service.calculate(
            case.heirs, case.donation_rules, fee_total=fee_total, case_id=case.case_id,
        )
    except (SuccessionKernelError, FileNotFoundError, KeyError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Case {case.case_id}: estate of {case.decedent_name}")
    print(f"Winning order: {report.winning_order.value}")
    print()
    print(_render(report, HeirForest.of(case.heirs)))
    if report.unassigned is not None and report.unassigned.is_positive:
        print()
        print(f"Unassigned remainder: {report.unassigned}")
    for warning in report.warnings:
        print()
        print(f"WARNING: {warning.message}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
