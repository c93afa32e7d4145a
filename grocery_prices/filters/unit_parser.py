# grocery_prices/filters/unit_parser.py

"""Parse free-text package sizes ("150g", "10 pack") into (quantity, unit)."""

import re

from grocery_prices.errors import ConversionError
from grocery_prices.models.product import Unit

# First number followed (optionally after whitespace) by a letter run
_SIZE_RE = re.compile(
    r"(?P<quantity>\d+(?:\.\d+)?)\s*(?P<unit>[a-z]+)"
)

_EACH_WORDS: frozenset[str] = frozenset({
    "ea", "each", "pk", "pack", "bunch", "sheets", "sachets",
    "capsules", "ss", "set", "pair", "pairs", "piece", "tablets",
    "rolls",
})

_UNIT_FACTORS: dict[str, tuple[float, Unit]] = {
    # Grams
    "g": (1.0, Unit.GRAMS),
    "kg": (1000.0, Unit.GRAMS),
    "mg": (0.001, Unit.GRAMS),
    # Millilitre
    "ml": (1.0, Unit.MILLILITRE),
    "l": (1000.0, Unit.MILLILITRE),
    # Centimetre
    "cm": (1.0, Unit.CENTIMETRE),
    "m": (100.0, Unit.CENTIMETRE),
    "metre": (100.0, Unit.CENTIMETRE),
    # Each
    "dozen": (12.0, Unit.EACH),
}


def normalise_unit(token: str) -> tuple[float, Unit]:
    """Map a unit token to its (multiplicative factor, canonical unit).

    Raises:
        ConversionError: if the token is not a known unit.
    """
    if token in _UNIT_FACTORS:
        return _UNIT_FACTORS[token]
    if token in _EACH_WORDS:
        return 1.0, Unit.EACH
    raise ConversionError(f"unknown unit: {token}")


def parse_str_unit(size: str) -> tuple[float, Unit]:
    """Parse a size string into a normalised (quantity, unit) pair.

    >>> parse_str_unit("1kg")
    (1000.0, <Unit.GRAMS: 'Grams'>)

    Raises:
        ConversionError: if no number+unit pattern is present or the
            unit is unrecognised.
    """
    lowered = size.lower()
    match = _SIZE_RE.search(lowered)
    if match is None:
        raise ConversionError(f"regex didn't match for {lowered!r}")

    quantity = float(match.group("quantity"))
    factor, unit = normalise_unit(match.group("unit"))
    return quantity * factor, unit
