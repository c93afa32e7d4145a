# grocery_prices/adapters/coles_adapter.py

"""Conversion of Coles ``SearchResult`` JSON into canonical snapshots."""

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from grocery_prices.adapters.base_adapter import StoreAdapter
from grocery_prices.errors import ConversionError
from grocery_prices.filters.unit_parser import parse_str_unit
from grocery_prices.models.category import category_from_names
from grocery_prices.models.price_snapshot import PricePoint, ProductSnapshot
from grocery_prices.models.product import Price, ProductInfo, Store

# Result types that carry sponsored placements when ``adId`` is set
IGNORED_RESULT_TYPES: frozenset[str] = frozenset({
    "SINGLE_TILE",
    "CONTENT_ASSOCIATION",
})


@dataclass
class SearchResult:
    """The fields of a Coles search result that conversion relies on."""

    id: int
    name: str
    brand: str
    description: str
    size: str
    price: float | None = None
    is_weighted: bool | None = None
    category_names: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @classmethod
    def from_json(cls, raw: dict[str, Any]) -> "SearchResult":
        """Build a SearchResult from a raw ``results[]`` entry.

        Raises:
            ConversionError: if a required field is missing or has the
                wrong type.
        """
        try:
            pricing = raw.get("pricing")
            price: float | None = None
            is_weighted: bool | None = None
            if isinstance(pricing, dict):
                now = pricing.get("now")
                price = float(now) if now is not None else None
                unit = pricing.get("unit") or {}
                is_weighted = unit.get("isWeighted")

            names: list[str] = []
            for heir in raw.get("onlineHeirs") or []:
                for key in ("subCategory", "category"):
                    value = heir.get(key)
                    if isinstance(value, str):
                        names.append(value)

            return cls(
                id=int(raw["id"]),
                name=str(raw["name"]),
                brand=str(raw["brand"] or ""),
                description=str(raw["description"]),
                size=str(raw["size"]),
                price=price,
                is_weighted=is_weighted,
                category_names=names,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ConversionError(
                f"Invalid Coles search result: {exc!r}"
            ) from exc


class ColesAdapter(StoreAdapter):
    """Adapter for the Coles Next.js browse API."""

    store = Store.COLES

    def decode_category(self, page_text: str) -> tuple[list[Any], int]:
        data = json.loads(page_text)
        search_results = data["pageProps"]["searchResults"]
        return list(search_results["results"]), int(
            search_results["noOfResults"]
        )

    def is_filtered(self, raw: Any) -> bool:
        """Sponsored tiles: an ignored ``_type`` with a non-null ``adId``."""
        if not isinstance(raw, dict):
            return False
        return (
            raw.get("_type") in IGNORED_RESULT_TYPES
            and raw.get("adId") is not None
        )

    def decode_item(self, raw: Any) -> list[Any]:
        if not isinstance(raw, dict):
            raise ConversionError(
                f"Invalid object type value for {raw!r}"
            )
        result_type = raw.get("_type")
        if result_type is None:
            raise ConversionError("Missing key _type")
        if not isinstance(result_type, str):
            raise ConversionError(
                f"Invalid type for _type, expected string: {result_type!r}"
            )
        return [SearchResult.from_json(raw)]

    def to_snapshot(self, item: SearchResult, day: date) -> ProductSnapshot:
        if item.price is None:
            raise ConversionError("missing field pricing")
        if not item.size:
            raise ConversionError("empty field size")

        name = f"{item.brand} {item.name}" if item.brand else item.name
        quantity, unit = parse_str_unit(item.size)
        info = ProductInfo(
            id=item.id,
            name=name,
            description=item.description,
            is_weighted=bool(item.is_weighted),
            unit=unit,
            quantity=quantity,
            store=Store.COLES,
            category=category_from_names(item.category_names),
        )
        return ProductSnapshot(
            info=info,
            price_point=PricePoint(day, Price.from_amount(item.price)),
        )
