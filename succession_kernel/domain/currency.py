"""Currency -- ISO 4217 registry and precision-derived rounding for fee amounts."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def quantum(self) -> Decimal:
        """Smallest unit, for Decimal.quantize()."""
        return Decimal(10) ** -self.decimal_places


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies fee totals may be entered in."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "BAM": CurrencyInfo("BAM", 2, "Bosnia and Herzegovina Convertible Mark"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "RSD": CurrencyInfo("RSD", 2, "Serbian Dinar"),
        "MKD": CurrencyInfo("MKD", 2, "Macedonian Denar"),
        "ALL": CurrencyInfo("ALL", 2, "Albanian Lek"),
        "HUF": CurrencyInfo("HUF", 2, "Hungarian Forint"),
        "CZK": CurrencyInfo("CZK", 2, "Czech Koruna"),
        "PLN": CurrencyInfo("PLN", 2, "Polish Zloty"),
        "RON": CurrencyInfo("RON", 2, "Romanian Leu"),
        "BGN": CurrencyInfo("BGN", 2, "Bulgarian Lev"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "SEK": CurrencyInfo("SEK", 2, "Swedish Krona"),
        "NOK": CurrencyInfo("NOK", 2, "Norwegian Krone"),
        "DKK": CurrencyInfo("DKK", 2, "Danish Krone"),
        "TRY": CurrencyInfo("TRY", 2, "Turkish Lira"),
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "ISK": CurrencyInfo("ISK", 0, "Icelandic Krona"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return code in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(code)

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        info = cls._CURRENCIES.get(code)
        if info is None:
            raise ValueError(f"Unknown currency code: {code}")
        return info.decimal_places

    @classmethod
    def codes(cls) -> frozenset[str]:
        return frozenset(cls._CURRENCIES)
