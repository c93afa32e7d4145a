# grocery_prices/scrapers/category_iterator.py

"""Lazy, single-pass iteration over the products of one paginated category."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

from grocery_prices.errors import CategoryFetchError

logger = logging.getLogger("grocery_prices.pagination")

# (items on the page, total record count reported by the page)
DecodedPage = tuple[list[Any], int]


@dataclass(frozen=True)
class PageState:
    """Pagination state of one category walk."""

    page: int = 1
    buffer: tuple[Any, ...] = field(default_factory=tuple)
    product_count: int = 0
    finished: bool = False


def advance(state: PageState, items: list[Any], total: int) -> PageState:
    """Fold one freshly loaded page into *state*.

    The walk finishes once the running count reaches the reported total,
    or when a page comes back empty: retailers over-report totals, and
    without the second condition the walk would request empty pages
    forever.
    """
    product_count = state.product_count + len(items)
    return replace(
        state,
        page=state.page + 1,
        buffer=state.buffer + tuple(items),
        product_count=product_count,
        finished=product_count >= total or not items,
    )


class PaginatedCategoryIterator(Iterator[Any]):
    """Yield raw product JSON values for one category, page by page.

    A page is requested only when the buffer is exhausted.  A failed
    page raises :class:`CategoryFetchError` from ``__next__``; that is
    fatal for the category and must not be mistaken for the end of it.
    """

    def __init__(
        self,
        store: str,
        category_id: str,
        fetch_page: Callable[[int], str],
        decode_page: Callable[[str], DecodedPage],
    ) -> None:
        self.store = store
        self.category_id = category_id
        self._fetch_page = fetch_page
        self._decode_page = decode_page
        self.state = PageState()

    def __iter__(self) -> "PaginatedCategoryIterator":
        return self

    def __next__(self) -> Any:
        if not self.state.buffer and not self.state.finished:
            self._load_next_page()

        if not self.state.buffer:
            raise StopIteration
        head, *rest = self.state.buffer
        self.state = replace(self.state, buffer=tuple(rest))
        return head

    def _load_next_page(self) -> None:
        page = self.state.page
        try:
            items, total = self._decode_page(self._fetch_page(page))
        except Exception as exc:
            # A failed page ends the walk; the category is incomplete
            self.state = replace(self.state, finished=True)
            raise CategoryFetchError(
                self.store, self.category_id, page
            ) from exc
        self.state = advance(self.state, items, total)
        logger.debug(
            "[%s] Loaded page %d of '%s': %d items, %d/%d total, "
            "finished=%s",
            self.store,
            page,
            self.category_id,
            len(items),
            self.state.product_count,
            total,
            self.state.finished,
        )

    def __str__(self) -> str:
        return self.category_id
