"""
succession_config -- settings and case files.

Responsibility:
    Turns YAML documents into typed settings and cases. Settings come from
    the packaged ``defaults.yaml``, optionally overlaid by a user file.
    Cases describe one estate: heirs, donation rules and an optional fee.

Architecture position:
    Configuration -- sits above ``succession_kernel`` and below
    ``succession_services``. The kernel and the engines MUST NEVER import
    from ``succession_config``.

Failure modes:
    - ``FileNotFoundError`` / ``yaml.YAMLError`` from file loading.
    - ``KeyError`` for missing required keys.
    - ``ConfigurationError`` or a kernel value error for bad values.
"""

from __future__ import annotations

from succession_config.loader import (
    compute_checksum,
    load_case,
    load_settings,
    parse_case,
    parse_fraction,
    parse_heir,
    parse_rule,
)
from succession_config.schema import SuccessionCase, SuccessionSettings

__all__ = [
    "SuccessionCase",
    "SuccessionSettings",
    "compute_checksum",
    "load_case",
    "load_settings",
    "parse_case",
    "parse_fraction",
    "parse_heir",
    "parse_rule",
]
