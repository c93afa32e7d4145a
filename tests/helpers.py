# tests/helpers.py

"""Builders for canonical model objects used across tests."""

from datetime import date

from grocery_prices.models.price_snapshot import PricePoint, ProductSnapshot
from grocery_prices.models.product import (
    Price,
    ProductHistory,
    ProductInfo,
    Store,
    Unit,
)


def make_info(
    product_id: int = 1,
    store: Store = Store.COLES,
    name: str = "Brand name Product name",
) -> ProductInfo:
    return ProductInfo(
        id=product_id,
        name=name,
        description="BRAND NAME PRODUCT NAME 150G",
        is_weighted=False,
        unit=Unit.GRAMS,
        quantity=150.0,
        store=store,
    )


def make_snapshot(
    product_id: int = 1,
    cents: int = 670,
    day: date = date(2024, 1, 2),
    store: Store = Store.COLES,
    name: str = "Brand name Product name",
) -> ProductSnapshot:
    return ProductSnapshot(
        info=make_info(product_id, store, name),
        price_point=PricePoint(day, Price(cents)),
    )


def make_history(
    product_id: int = 1,
    points: list[tuple[date, int]] | None = None,
    store: Store = Store.COLES,
) -> ProductHistory:
    points = points or [(date(2024, 1, 1), 1200)]
    return ProductHistory(
        info=make_info(product_id, store),
        price_history=[PricePoint(d, Price(c)) for d, c in points],
    )
