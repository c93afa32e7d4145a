# grocery_prices/models/category.py

"""Store-agnostic category classification codes."""

from collections.abc import Iterable

FRUIT = "00"
VEGETABLES = "01"
SALAD_AND_HERBS = "02"
NUTS_AND_DRIED_FRUIT = "03"

# Retailer subcategory descriptions -> two-digit category code.
# Keys are compared lower-cased.
CATEGORY_CODES: dict[str, str] = {
    "fruit": FRUIT,
    "fresh fruit": FRUIT,
    "vegetables": VEGETABLES,
    "fresh vegetables": VEGETABLES,
    "veg": VEGETABLES,
    "salad & herbs": SALAD_AND_HERBS,
    "salad and herbs": SALAD_AND_HERBS,
    "salads & herbs": SALAD_AND_HERBS,
    "fresh salad & herbs": SALAD_AND_HERBS,
    "nuts & dried fruit": NUTS_AND_DRIED_FRUIT,
    "nuts & dried fruits": NUTS_AND_DRIED_FRUIT,
    "nuts and dried fruit": NUTS_AND_DRIED_FRUIT,
}


def category_from_names(names: Iterable[str]) -> str | None:
    """Return the code of the first recognised name, else ``None``."""
    for name in names:
        code = CATEGORY_CODES.get(name.strip().lower())
        if code is not None:
            return code
    return None


def is_category_code(value: object) -> bool:
    """True for a two-digit numeric code such as ``"02"``."""
    return isinstance(value, str) and len(value) == 2 and value.isdigit()
