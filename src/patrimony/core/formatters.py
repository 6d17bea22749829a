"""Parsing and formatting of Brazilian-locale money strings."""

import re
from decimal import Decimal

from patrimony.core.exceptions import MalformedPriceDataError

# "R$ 43.807,00", "45.000,00", "980,5", "1200"
_PRICE_PATTERN = re.compile(
    r"^\s*(?:R\$)?\s*(?P<int>\d{1,3}(?:\.\d{3})+|\d+)(?:,(?P<dec>\d{1,2}))?\s*$"
)

_CENTS = Decimal("0.01")

FUEL_NAMES: dict[str, str] = {
    "G": "Gasolina",
    "D": "Diesel",
    "E": "Etanol",
    "F": "Flex",
}


def parse_price(text: str) -> Decimal:
    """
    Parse a locale-formatted price string into a Decimal.

    Thousands separator is "." and decimal separator is ",". A leading
    "R$" currency symbol and surrounding whitespace are accepted.
    Anything else raises MalformedPriceDataError.
    """
    if not isinstance(text, str):
        raise MalformedPriceDataError(f"Price must be a string, got {type(text).__name__}")

    match = _PRICE_PATTERN.match(text.replace("\xa0", " "))
    if not match:
        raise MalformedPriceDataError(f"Unrecognized price format: {text!r}")

    integer_part = match.group("int").replace(".", "")
    decimal_part = match.group("dec") or "0"
    return Decimal(f"{integer_part}.{decimal_part}").quantize(_CENTS)


def format_brl(value: Decimal) -> str:
    """Format a value as "R$ 45.000,00" for log and report output."""
    quantized = Decimal(value).quantize(_CENTS)
    sign = "-" if quantized < 0 else ""
    text = f"{abs(quantized):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {text}"


def fuel_display_name(fuel_code: str) -> str:
    """Map a fuel code to its display name; unknown codes display as themselves."""
    return FUEL_NAMES.get(fuel_code.upper(), fuel_code)
