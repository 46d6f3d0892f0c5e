"""
Tests for settings and case file loading.

Covers:
- Packaged defaults and user overrides
- Fraction parsing forms
- Heir / rule / case parsing
- Checksums
- Failure modes
"""

from pathlib import Path

import pytest
import yaml

from succession_config import (
    SuccessionSettings,
    compute_checksum,
    load_case,
    load_settings,
    parse_case,
    parse_fraction,
    parse_heir,
    parse_rule,
)
from succession_kernel.domain.fraction import HALF, Fraction
from succession_kernel.domain.heirs import Relationship
from succession_kernel.domain.values import Money
from succession_kernel.exceptions import (
    ConfigurationError,
    InvalidFractionError,
    InvalidHeirError,
)


def _write_yaml(tmp_path: Path, name: str, data) -> Path:
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestSettings:
    def test_packaged_defaults(self):
        assert load_settings() == SuccessionSettings(
            currency="BAM", strict_rule_references=True, log_level="INFO",
        )

    def test_user_file_overrides_defaults(self, tmp_path):
        path = _write_yaml(tmp_path, "settings.yaml", {
            "currency": "eur",
            "strict_rule_references": False,
        })
        settings = load_settings(path)
        assert settings.currency == "EUR"
        assert settings.strict_rule_references is False
        assert settings.log_level == "INFO"

    def test_unknown_currency(self, tmp_path):
        path = _write_yaml(tmp_path, "settings.yaml", {"currency": "XXX"})
        with pytest.raises(ConfigurationError, match="unknown currency"):
            load_settings(path)

    def test_unknown_log_level(self, tmp_path):
        path = _write_yaml(tmp_path, "settings.yaml", {"log_level": "LOUD"})
        with pytest.raises(ConfigurationError, match="log level"):
            load_settings(path)

    def test_non_boolean_strict_flag(self, tmp_path):
        path = _write_yaml(tmp_path, "settings.yaml", {"strict_rule_references": "yes please"})
        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "absent.yaml")

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(path)


class TestParseFraction:
    def test_string(self):
        assert parse_fraction("1/2") == HALF

    def test_string_with_spaces(self):
        assert parse_fraction(" 3 / 8 ") == Fraction(3, 8)

    def test_whole_number_string(self):
        assert parse_fraction("1") == Fraction(1, 1)

    def test_int(self):
        assert parse_fraction(1) == Fraction(1, 1)

    def test_mapping(self):
        assert parse_fraction({"numerator": 2, "denominator": 3}) == Fraction(2, 3)

    def test_fraction_passthrough(self):
        assert parse_fraction(HALF) is HALF

    def test_garbage_string(self):
        with pytest.raises(ConfigurationError, match="cannot parse"):
            parse_fraction("half")

    def test_float_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_fraction(0.5)

    def test_float_inside_mapping_rejected(self):
        with pytest.raises(ConfigurationError, match="must be an integer"):
            parse_fraction({"numerator": 0.5, "denominator": 1}, "rules[0].portion")

    def test_non_numeric_mapping_part_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_fraction({"numerator": "1", "denominator": "two"})

    def test_mapping_with_digit_strings(self):
        assert parse_fraction({"numerator": "1", "denominator": "-4"}) == Fraction(1, -4)

    def test_bool_rejected(self):
        with pytest.raises(ConfigurationError):
            parse_fraction(True)

    def test_zero_denominator(self):
        with pytest.raises(InvalidFractionError):
            parse_fraction("1/0")


class TestParseHeirAndRule:
    def test_nested_heir(self):
        heir = parse_heir({
            "id": "c1",
            "name": "Ana",
            "relationship": "child",
            "is_alive": False,
            "descendants": [{"id": "g1", "name": "Iva", "relationship": "CHILD"}],
        })
        assert heir.relationship is Relationship.CHILD
        assert heir.accepts_inheritance is False
        assert heir.descendants[0].heir_id == "g1"

    def test_heir_missing_name(self):
        with pytest.raises(KeyError):
            parse_heir({"id": "c1", "relationship": "child"})

    def test_heir_contradictory_flags(self):
        with pytest.raises(InvalidHeirError):
            parse_heir({
                "id": "c1", "name": "A", "relationship": "child",
                "is_alive": False, "accepts_inheritance": True,
            })

    def test_rule(self):
        rule = parse_rule({"id": "r1", "donor": "a", "recipient": "b", "portion": "1/4"})
        assert rule.portion_of_share == Fraction(1, 4)
        assert rule.donor_id == "a"


class TestCase:
    def test_load_sample_case(self, sample_case_path):
        case = load_case(sample_case_path)
        assert case.case_id == "CASE-2026-014"
        assert [h.heir_id for h in case.heirs] == ["spouse", "c1", "c2"]
        assert len(case.donation_rules) == 2
        assert case.fee_total == Money.of("450.00", "BAM")
        assert len(case.checksum) == 64

    def test_fee_uses_settings_currency(self):
        case = parse_case(
            {"case_id": "x", "decedent_name": "D", "heirs": [], "fee_total": "10"},
            SuccessionSettings(currency="EUR"),
        )
        assert case.fee_total == Money.of("10", "EUR")

    def test_fee_mapping_with_currency(self):
        case = parse_case({
            "case_id": "x", "decedent_name": "D", "heirs": [],
            "fee_total": {"amount": "12.50", "currency": "usd"},
        })
        assert case.fee_total == Money.of("12.50", "USD")

    def test_float_fee_rejected(self):
        with pytest.raises(ConfigurationError, match="float"):
            parse_case({"case_id": "x", "decedent_name": "D", "heirs": [], "fee_total": 1.5})

    def test_no_fee(self):
        case = parse_case({"case_id": "x", "decedent_name": "D", "heirs": []})
        assert case.fee_total is None
        assert case.donation_rules == ()

    def test_missing_heirs_key(self):
        with pytest.raises(KeyError):
            parse_case({"case_id": "x", "decedent_name": "D"})


class TestChecksum:
    def test_key_order_independent(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_content_sensitive(self):
        assert compute_checksum({"a": 1}) != compute_checksum({"a": 2})
