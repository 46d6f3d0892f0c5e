"""
Configuration Loader (``succession_config.loader``).

Responsibility
--------------
Loads settings and case YAML files and parses them into the typed
``succession_config.schema`` dataclasses.

Architecture position
---------------------
**Config layer** -- infrastructure tooling. Consumed by the service layer
and the command line script. Depends on the kernel's domain types only.

Invariants enforced
-------------------
* Parse errors raise ``KeyError``, ``ValueError`` or ``ConfigurationError``
  with descriptive messages; no silent defaults for required fields.
* Every parsed object is a frozen dataclass or kernel value object.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  case data, so a report can be traced back to the exact input file.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Bad fraction, relationship or amount  -> ``ConfigurationError`` (or the
  kernel's own typed error when the value object rejects it).
"""

from __future__ import annotations

import hashlib
import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from succession_config.schema import SuccessionCase, SuccessionSettings
from succession_kernel.domain.currency import CurrencyRegistry
from succession_kernel.domain.donation import DonationRule
from succession_kernel.domain.fraction import Fraction
from succession_kernel.domain.heirs import Heir
from succession_kernel.domain.values import Money
from succession_kernel.exceptions import ConfigurationError
from succession_kernel.logging_config import get_logger

logger = get_logger("config.loader")

_DEFAULTS_RESOURCE = "defaults.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def parse_settings(data: dict[str, Any], source: str = "<settings>") -> SuccessionSettings:
    """Parse SuccessionSettings, validating currency and log level."""
    currency = str(data.get("currency", "BAM")).upper()
    if not CurrencyRegistry.is_valid(currency):
        raise ConfigurationError(source, f"unknown currency {currency!r}")

    log_level = str(data.get("log_level", "INFO")).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(source, f"unknown log level {log_level!r}")

    strict = data.get("strict_rule_references", True)
    if not isinstance(strict, bool):
        raise ConfigurationError(source, "strict_rule_references must be true or false")

    return SuccessionSettings(
        currency=currency,
        strict_rule_references=strict,
        log_level=log_level,
    )


def load_settings(path: Path | str | None = None) -> SuccessionSettings:
    """
    Load settings from ``path``, or the packaged defaults when None.

    Keys missing from a user file fall back to the packaged defaults.
    """
    defaults_text = resources.files("succession_config").joinpath(_DEFAULTS_RESOURCE).read_text(
        encoding="utf-8"
    )
    data: dict[str, Any] = yaml.safe_load(defaults_text) or {}
    source = _DEFAULTS_RESOURCE
    if path is not None:
        data.update(load_yaml_file(Path(path)))
        source = str(path)

    settings = parse_settings(data, source)
    logger.debug("settings_loaded", extra={
        "source": source,
        "currency": settings.currency,
        "strict_rule_references": settings.strict_rule_references,
    })
    return settings


# ---------------------------------------------------------------------------
# Case
# ---------------------------------------------------------------------------


def _parse_fraction_part(value: Any, source: str) -> int:
    """An int, or a string of digits with an optional sign; nothing inexact."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in ("+", "-") else text
        if digits.isdecimal():
            return int(text)
    raise ConfigurationError(source, f"fraction part must be an integer, got {value!r}")


def parse_fraction(value: Any, source: str = "<fraction>") -> Fraction:
    """
    Parse a fraction from ``"n/d"``, a plain int, or a mapping with
    ``numerator`` and ``denominator`` keys.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(source, f"cannot parse fraction from {value!r}")
    if isinstance(value, int):
        return Fraction(value, 1)
    if isinstance(value, dict):
        return Fraction(
            _parse_fraction_part(value["numerator"], source),
            _parse_fraction_part(value["denominator"], source),
        )
    if isinstance(value, str):
        text = value.strip()
        numerator, sep, denominator = text.partition("/")
        try:
            if not sep:
                return Fraction(int(numerator), 1)
            return Fraction(int(numerator.strip()), int(denominator.strip()))
        except ValueError as e:
            raise ConfigurationError(source, f"cannot parse fraction from {value!r}") from e
    raise ConfigurationError(source, f"cannot parse fraction from {value!r}")


def parse_heir(data: dict[str, Any]) -> Heir:
    """
    Parse an Heir, including its nested ``descendants``.

    Required keys: ``id``, ``name``, ``relationship``.
    """
    relationship = data["relationship"]
    if isinstance(relationship, str):
        relationship = relationship.strip().upper()
    is_alive = data.get("is_alive", True)
    return Heir(
        heir_id=str(data["id"]),
        name=str(data["name"]),
        relationship=relationship,
        is_alive=is_alive,
        accepts_inheritance=data.get("accepts_inheritance", is_alive),
        request_separate_half=data.get("request_separate_half", False),
        descendants=tuple(parse_heir(d) for d in data.get("descendants", ())),
    )


def parse_rule(data: dict[str, Any]) -> DonationRule:
    """Parse a DonationRule. Required keys: ``id``, ``donor``, ``recipient``, ``portion``."""
    rule_id = str(data["id"])
    return DonationRule(
        rule_id=rule_id,
        donor_id=str(data["donor"]),
        recipient_id=str(data["recipient"]),
        portion_of_share=parse_fraction(data["portion"], f"rule {rule_id}"),
    )


def parse_money(value: Any, default_currency: str, source: str = "<amount>") -> Money:
    """Parse an amount given as a string/int or a mapping with ``amount`` and ``currency``."""
    if isinstance(value, dict):
        amount, currency = value["amount"], value.get("currency", default_currency)
    else:
        amount, currency = value, default_currency
    if isinstance(amount, float):
        raise ConfigurationError(source, "amounts must be quoted strings, not floats")
    try:
        return Money.of(amount, str(currency).upper())
    except ValueError as e:
        raise ConfigurationError(source, str(e)) from e


def parse_case(
    data: dict[str, Any],
    settings: SuccessionSettings | None = None,
) -> SuccessionCase:
    """
    Parse a SuccessionCase.

    Required keys: ``case_id``, ``decedent_name``, ``heirs``.
    """
    settings = settings or SuccessionSettings()
    case_id = str(data["case_id"])
    fee_raw = data.get("fee_total")
    fee_total = (
        parse_money(fee_raw, data.get("currency", settings.currency), f"case {case_id}")
        if fee_raw is not None
        else None
    )
    return SuccessionCase(
        case_id=case_id,
        decedent_name=str(data["decedent_name"]),
        heirs=tuple(parse_heir(h) for h in data["heirs"]),
        donation_rules=tuple(parse_rule(r) for r in data.get("donation_rules", ())),
        fee_total=fee_total,
        checksum=compute_checksum(data),
    )


def load_case(
    path: Path | str,
    settings: SuccessionSettings | None = None,
) -> SuccessionCase:
    """Load and parse a case YAML file."""
    data = load_yaml_file(Path(path))
    case = parse_case(data, settings)
    logger.info("case_loaded", extra={
        "case_id": case.case_id,
        "source": str(path),
        "heir_count": len(case.heirs),
        "rule_count": len(case.donation_rules),
        "checksum": case.checksum,
    })
    return case


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
