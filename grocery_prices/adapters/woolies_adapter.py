# grocery_prices/adapters/woolies_adapter.py

"""Conversion of Woolworths bundle JSON into canonical snapshots."""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from grocery_prices.adapters.base_adapter import StoreAdapter
from grocery_prices.config.settings import Settings
from grocery_prices.errors import ConversionError
from grocery_prices.filters.unit_parser import parse_str_unit
from grocery_prices.models.category import category_from_names
from grocery_prices.models.price_snapshot import PricePoint, ProductSnapshot
from grocery_prices.models.product import Price, ProductInfo, Store, Unit

logger = logging.getLogger("grocery_prices.woolies")


def _subcategory_names(raw: dict[str, Any]) -> list[str]:
    """Read the JSON-encoded subcategory list from AdditionalAttributes."""
    attributes = raw.get("AdditionalAttributes") or {}
    encoded = attributes.get("piessubcategorynamesjson")
    if not encoded:
        return []
    try:
        names = json.loads(encoded)
    except (TypeError, ValueError):
        logger.debug("Unreadable subcategory names: %r", encoded)
        return []
    if not isinstance(names, list):
        return []
    return [n for n in names if isinstance(n, str)]


@dataclass
class BundleProduct:
    """The fields of a Woolworths bundle product that conversion relies on."""

    stockcode: int
    name: str
    description: str
    price: float | None
    was_price: float
    is_in_stock: bool
    package_size: str
    cup_price: float | None
    cup_measure: str | None
    unit: str
    category_names: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> "BundleProduct":
        """Build a BundleProduct from a raw ``Products[]`` entry.

        Raises:
            ConversionError: if a required field is missing or has the
                wrong type.
        """
        try:
            price = raw.get("Price")
            cup_price = raw.get("CupPrice")
            cup_measure = raw.get("CupMeasure")
            return cls(
                stockcode=int(raw["Stockcode"]),
                name=str(raw["Name"]),
                description=str(raw.get("Description") or ""),
                price=float(price) if price is not None else None,
                was_price=float(raw.get("WasPrice") or 0.0),
                is_in_stock=bool(raw.get("IsInStock", False)),
                package_size=str(raw.get("PackageSize") or ""),
                cup_price=(
                    float(cup_price) if cup_price is not None else None
                ),
                cup_measure=(
                    str(cup_measure) if cup_measure is not None else None
                ),
                unit=str(raw.get("Unit") or ""),
                category_names=_subcategory_names(raw),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ConversionError(
                f"Invalid Woolworths product: {exc!r}"
            ) from exc

    def current_price(self) -> float:
        """Shelf price, or the last known price for out-of-stock items."""
        if self.price is not None:
            return self.price
        if not self.is_in_stock and self.was_price > 0:
            return self.was_price
        raise ConversionError(f"Missing price on {self.name}")

    def quantity_and_unit(self, price: float) -> tuple[float, Unit]:
        """Derive the pack quantity, falling back to the cup price ratio.

        Raises:
            ConversionError: when no strategy yields a plausible quantity.
        """
        if self.cup_measure == "1EA":
            return 1.0, Unit.EACH

        try:
            return parse_str_unit(self.package_size)
        except ConversionError:
            pass

        if (
            self.unit.lower() == "each"
            and self.package_size.lower() == "each"
        ):
            return 1.0, Unit.EACH

        # CupMeasure is standardised ("100G"), so quantity is a ratio
        if self.cup_measure is None:
            raise ConversionError(
                "Missing CupMeasure, ran out of options to convert"
            )
        std_quantity, unit = parse_str_unit(self.cup_measure)
        if not self.cup_price:
            raise ConversionError(
                "Missing cup price, unable to calculate quantity"
            )

        quantity = float(round(price / self.cup_price * std_quantity))
        if quantity < Settings.WOOLIES_MIN_DERIVED_QUANTITY:
            logger.warning(
                "Low quantity of %s during conversion of %s (%d)",
                quantity,
                self.name,
                self.stockcode,
            )
            raise ConversionError("Low quantity for conversion")
        return quantity, unit


class WooliesAdapter(StoreAdapter):
    """Adapter for the Woolworths browse API."""

    store = Store.WOOLIES

    def decode_category(self, page_text: str) -> tuple[list[Any], int]:
        data = json.loads(page_text)
        return list(data["Bundles"] or []), int(data["TotalRecordCount"])

    def is_filtered(self, raw: Any) -> bool:
        """Bundles without products are promotional tiles."""
        return isinstance(raw, dict) and not raw.get("Products")

    def decode_item(self, raw: Any) -> list[Any]:
        if not isinstance(raw, dict):
            raise ConversionError(
                f"Invalid bundle value {raw!r}"
            )
        products = raw.get("Products")
        if not isinstance(products, list):
            raise ConversionError("Bundle is missing its Products list")
        return [BundleProduct.from_json(p) for p in products]

    def to_snapshot(self, item: BundleProduct, day: date) -> ProductSnapshot:
        price = item.current_price()
        quantity, unit = item.quantity_and_unit(price)
        info = ProductInfo(
            id=item.stockcode,
            name=item.name,
            description=item.description,
            is_weighted=False,
            unit=unit,
            quantity=quantity,
            store=Store.WOOLIES,
            category=category_from_names(item.category_names),
        )
        return ProductSnapshot(
            info=info,
            price_point=PricePoint(day, Price.from_amount(price)),
        )
