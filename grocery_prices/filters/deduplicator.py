# grocery_prices/filters/deduplicator.py

"""Collapse repeated products within one day's snapshot batch."""

import logging
from collections import Counter

from grocery_prices.models.price_snapshot import ProductSnapshot
from grocery_prices.models.product import ProductKey, Store

logger = logging.getLogger("grocery_prices.filters")


class SnapshotDeduplicator:
    """Remove snapshots that repeat a (store, id) key already seen."""

    @staticmethod
    def deduplicate(
        snapshots: list[ProductSnapshot],
    ) -> tuple[list[ProductSnapshot], Counter[Store]]:
        """Keep the first snapshot of every product key.

        Retailers list the same product under several categories, so a
        single capture routinely contains repeats.

        Returns the deduplicated list and the per-store count of dropped
        duplicates.
        """
        seen: set[ProductKey] = set()
        kept: list[ProductSnapshot] = []
        dropped: Counter[Store] = Counter()

        for snapshot in snapshots:
            if snapshot.key in seen:
                dropped[snapshot.key.store] += 1
                continue
            seen.add(snapshot.key)
            kept.append(snapshot)

        for store, count in sorted(dropped.items()):
            logger.info(
                "Deduplication removed %d duplicate products for %s",
                count,
                store,
            )

        return kept, dropped
