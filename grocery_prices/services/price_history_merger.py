# grocery_prices/services/price_history_merger.py

"""Reconcile a day's snapshots with the persisted price history."""

import logging
from collections import Counter
from dataclasses import dataclass, field

from grocery_prices.filters.deduplicator import SnapshotDeduplicator
from grocery_prices.models.price_snapshot import ProductSnapshot
from grocery_prices.models.product import (
    ProductHistory,
    ProductKey,
    Store,
)

logger = logging.getLogger("grocery_prices.merge")


def _counter() -> Counter[Store]:
    return Counter()


@dataclass
class MergeResult:
    """Merged histories plus per-store counters for the run summary."""

    products: list[ProductHistory] = field(
        default_factory=lambda: list[ProductHistory]()
    )
    new_prices: Counter[Store] = field(default_factory=_counter)
    new_products: Counter[Store] = field(default_factory=_counter)
    unchanged: Counter[Store] = field(default_factory=_counter)
    retained: Counter[Store] = field(default_factory=_counter)
    duplicates: Counter[Store] = field(default_factory=_counter)


class PriceHistoryMerger:
    """Pure merge of old histories with new snapshots.

    Histories whose product is missing from the new snapshots are
    retained unchanged; their ``last_seen`` date tells consumers when the
    product was last on sale.
    """

    @staticmethod
    def merge(
        old: list[ProductHistory],
        new: list[ProductSnapshot],
        store_filter: Store | None = None,
    ) -> MergeResult:
        """Merge *new* snapshots into *old* histories.

        Histories of stores other than *store_filter* pass through
        untouched.  Input objects are never mutated.

        Output order: pass-through histories, then one history per
        snapshot in snapshot order, then retained histories.
        """
        snapshots, duplicates = SnapshotDeduplicator.deduplicate(new)
        result = MergeResult(duplicates=duplicates)

        index: dict[ProductKey, ProductHistory] = {}
        for history in old:
            if store_filter is not None and history.store != store_filter:
                result.products.append(history)
                continue
            if history.key in index:
                logger.warning(
                    "Duplicate history for %s, keeping the first", history.key
                )
                continue
            index[history.key] = history

        for snapshot in snapshots:
            if store_filter is not None and snapshot.key.store != store_filter:
                raise ValueError(
                    f"Snapshot {snapshot.key} does not belong to "
                    f"store {store_filter}"
                )
            previous = index.pop(snapshot.key, None)
            if previous is None:
                result.new_products[snapshot.key.store] += 1
                result.products.append(
                    ProductHistory(
                        info=snapshot.info,
                        price_history=[snapshot.price_point],
                        last_seen=snapshot.date,
                    )
                )
                continue
            result.products.append(
                PriceHistoryMerger._apply(previous, snapshot, result)
            )

        for history in index.values():
            result.retained[history.store] += 1
            result.products.append(history)

        touched = (
            set(result.new_prices)
            | set(result.new_products)
            | set(result.unchanged)
        )
        for store in sorted(touched):
            logger.info(
                "Merged %s: %d new prices, %d new products, "
                "%d unchanged, %d not seen",
                store,
                result.new_prices[store],
                result.new_products[store],
                result.unchanged[store],
                result.retained[store],
            )
        return result

    @staticmethod
    def _apply(
        history: ProductHistory,
        snapshot: ProductSnapshot,
        result: MergeResult,
    ) -> ProductHistory:
        """Fold one snapshot into a copy of *history*."""
        store = snapshot.key.store
        points = list(history.price_history)
        if (
            snapshot.price != history.current_price.price
            and snapshot.price_point not in points
        ):
            # At most one point per date: a same-day reading is replaced
            points = [p for p in points if p.date != snapshot.date]
            points.insert(0, snapshot.price_point)
            result.new_prices[store] += 1
        else:
            result.unchanged[store] += 1

        last_seen = history.last_seen or snapshot.date
        return ProductHistory(
            info=snapshot.info,
            price_history=points,
            last_seen=max(last_seen, snapshot.date),
        )
