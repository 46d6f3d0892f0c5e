"""
Tests for Money, Currency and DonationRule value objects.
"""

from decimal import Decimal

import pytest

from succession_kernel.domain.currency import CurrencyRegistry
from succession_kernel.domain.donation import DonationRule
from succession_kernel.domain.fraction import HALF, ONE, Fraction
from succession_kernel.domain.values import Currency, Money
from succession_kernel.exceptions import (
    InvalidDonationRuleError,
    RedistributionError,
    SelfDonationError,
)


class TestCurrency:
    def test_code_is_normalized(self):
        assert Currency("bam").code == "BAM"

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError, match="ISO 4217"):
            Currency("XXX")

    def test_decimal_places(self):
        assert Currency("EUR").decimal_places == 2
        assert Currency("JPY").decimal_places == 0
        assert Currency("KWD").decimal_places == 3

    def test_registry_quantum(self):
        assert CurrencyRegistry.get_info("BAM").quantum == Decimal("0.01")
        assert "BAM" in CurrencyRegistry.codes()


class TestMoney:
    def test_of_from_string(self):
        m = Money.of("100.50", "BAM")
        assert m.amount == Decimal("100.50")
        assert m.currency == Currency("BAM")

    def test_float_rejected(self):
        with pytest.raises(ValueError, match="float"):
            Money(amount=0.1, currency=Currency("EUR"))

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError):
            Money.of("NaN", "EUR")

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            Money.of("abc", "EUR")

    def test_zero(self):
        assert Money.zero("EUR").is_zero

    def test_is_negative(self):
        assert Money.of("-1", "EUR").is_negative

    def test_round_half_up(self):
        assert Money.of("0.125", "EUR").round() == Money.of("0.13", "EUR")
        assert Money.of("2.5", "JPY").round() == Money.of("3", "JPY")

    def test_scale_is_exact_until_rounded(self):
        scaled = Money.of("100", "EUR").scale(Fraction(1, 4))
        assert scaled.amount == Decimal("25")

    def test_scale_by_third_rounds_on_request(self):
        third = Money.of("100.00", "EUR").scale(Fraction(1, 3))
        assert third.round() == Money.of("33.33", "EUR")

    def test_add_and_subtract(self):
        a = Money.of("10.00", "BAM")
        b = Money.of("2.50", "BAM")
        assert a + b == Money.of("12.50", "BAM")
        assert a - b == Money.of("7.50", "BAM")

    def test_currency_mismatch(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "BAM") + Money.of("1", "EUR")

    def test_str(self):
        assert str(Money.of("3.00", "BAM")) == "3.00 BAM"


class TestDonationRule:
    def test_valid_rule(self):
        rule = DonationRule("r1", "a", "b", HALF)
        assert rule.portion_of_share == HALF

    def test_self_donation_rejected(self):
        with pytest.raises(SelfDonationError) as exc_info:
            DonationRule("r1", "a", "a", ONE)
        assert exc_info.value.code == "SELF_DONATION"

    def test_portion_above_one_rejected(self):
        with pytest.raises(InvalidDonationRuleError, match="outside"):
            DonationRule("r1", "a", "b", Fraction(3, 2))

    def test_negative_portion_rejected(self):
        with pytest.raises(InvalidDonationRuleError):
            DonationRule("r1", "a", "b", Fraction(-1, 2))

    def test_portion_must_be_fraction(self):
        with pytest.raises(InvalidDonationRuleError, match="Fraction"):
            DonationRule("r1", "a", "b", "1/2")

    def test_rule_errors_are_redistribution_errors(self):
        with pytest.raises(RedistributionError):
            DonationRule("r1", "a", "a", HALF)
