# grocery_prices/models/price_snapshot.py

"""Single-day price observations produced by the conversion layer."""

from dataclasses import dataclass
from datetime import date

from grocery_prices.models.product import Price, ProductInfo, ProductKey


@dataclass(frozen=True)
class PricePoint:
    """A price observed on one calendar day."""

    date: date
    price: Price

    def to_dict(self) -> dict[str, object]:
        """Serialise to the canonical ``{date, price}`` JSON shape."""
        return {
            "date": self.date.isoformat(),
            "price": self.price.amount,
        }

    @classmethod
    def from_dict(cls, row: dict[str, object]) -> "PricePoint":
        """Parse a canonical ``{date, price}`` mapping.

        Raises:
            ValueError: if *row* is not a mapping or a value is malformed.
        """
        if not isinstance(row, dict):
            raise ValueError(f"price point must be an object, got {row!r:.40}")
        return cls(
            date=date.fromisoformat(str(row["date"])),
            price=Price.from_amount(float(str(row["price"]))),
        )


@dataclass
class ProductSnapshot:
    """One product as observed on one capture date."""

    info: ProductInfo
    price_point: PricePoint

    @property
    def key(self) -> ProductKey:
        return self.info.key

    @property
    def price(self) -> Price:
        return self.price_point.price

    @property
    def date(self) -> date:
        return self.price_point.date
