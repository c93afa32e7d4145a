# grocery_prices/models/product.py

"""Canonical product data model shared by conversion, merge and storage."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple, cast

from grocery_prices.errors import StorageError
from grocery_prices.models.category import is_category_code

if TYPE_CHECKING:
    from grocery_prices.models.price_snapshot import PricePoint


class Store(str, Enum):
    """Retailers whose catalogues are tracked."""

    COLES = "coles"
    WOOLIES = "woolies"

    def __str__(self) -> str:
        return self.value


class Unit(str, Enum):
    """Normalised unit families; quantities never convert across them."""

    EACH = "Each"
    GRAMS = "Grams"
    MILLILITRE = "Millilitre"
    CENTIMETRE = "Centimetre"


class ProductKey(NamedTuple):
    """Identity of a product within one store's catalogue."""

    store: Store
    id: int


@dataclass(frozen=True, order=True)
class Price:
    """A monetary amount held as an integer number of cents."""

    cents: int

    @classmethod
    def from_amount(cls, amount: float) -> Price:
        """Build a price from a decimal dollar amount (e.g. ``6.7``)."""
        return cls(round(amount * 100))

    @property
    def amount(self) -> float:
        """Decimal dollar amount for serialisation."""
        return self.cents / 100

    def __str__(self) -> str:
        return f"${self.amount:.2f}"


@dataclass
class ProductInfo:
    """Descriptive metadata of the most recent observation of a product."""

    id: int
    name: str
    description: str
    is_weighted: bool
    unit: Unit
    quantity: float
    store: Store
    category: str | None = None

    @property
    def key(self) -> ProductKey:
        return ProductKey(self.store, self.id)


@dataclass
class ProductHistory:
    """The persisted record of a product: metadata plus price history.

    ``price_history`` is kept sorted newest-first with at most one point per
    date.  ``last_seen`` is the most recent capture date in which the
    product appeared, even when its price did not change.
    """

    info: ProductInfo
    price_history: list[PricePoint]
    last_seen: date | None = None

    def __post_init__(self) -> None:
        if not self.price_history:
            raise ValueError(
                f"Product {self.info.key} has an empty price history"
            )
        self.sort_price_history()
        if self.last_seen is None:
            self.last_seen = self.price_history[0].date

    @property
    def key(self) -> ProductKey:
        return self.info.key

    @property
    def store(self) -> Store:
        return self.info.store

    @property
    def current_price(self) -> PricePoint:
        """The newest price point."""
        return self.price_history[0]

    def sort_price_history(self) -> None:
        """Order price points by date, most recent first."""
        self.price_history.sort(key=lambda p: p.date, reverse=True)

    # ── Serialisation ────────────────────────────────────

    def to_dict(self) -> dict[str, object]:
        """Serialise to one canonical JSON object."""
        data: dict[str, object] = {
            "id": self.info.id,
            "name": self.info.name,
            "description": self.info.description,
            "isWeighted": self.info.is_weighted,
            "unit": self.info.unit.value,
            "quantity": self.info.quantity,
            "store": self.info.store.value,
            "priceHistory": [p.to_dict() for p in self.price_history],
        }
        if self.info.category is not None:
            data["category"] = self.info.category
        if self.last_seen is not None:
            data["lastSeen"] = self.last_seen.isoformat()
        return data

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> ProductHistory:
        """Parse one canonical JSON object.

        Raises:
            StorageError: if a required field is missing or malformed.
        """
        from grocery_prices.models.price_snapshot import PricePoint

        if not isinstance(row, dict):
            raise StorageError(
                f"Product history record must be an object, got {row!r:.80}"
            )
        try:
            category = row.get("category")
            if category is not None and not is_category_code(category):
                raise ValueError(f"invalid category code {category!r}")
            info = ProductInfo(
                id=int(str(row["id"])),
                name=str(row["name"]),
                description=str(row.get("description", "")),
                is_weighted=bool(row.get("isWeighted", False)),
                unit=Unit(str(row["unit"])),
                quantity=float(str(row["quantity"])),
                store=Store(str(row["store"])),
                category=str(category) if category is not None else None,
            )
            points = cast(list[dict[str, object]], row["priceHistory"])
            history = [PricePoint.from_dict(p) for p in points]
            last_seen_raw = row.get("lastSeen")
            last_seen = (
                date.fromisoformat(str(last_seen_raw))
                if last_seen_raw
                else None
            )
            return cls(info=info, price_history=history, last_seen=last_seen)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StorageError(
                f"Malformed product history record: {exc}"
            ) from exc
