"""State Service — request/response boundary over the collection store.

Invariants:
    - Every operation runs synchronously against one store: a read never
      observes a half-applied write (single-process asyncio, no await inside)
    - get_page never fails for a page past the end: empty items, correct total
    - save_state is all-or-nothing: an invalid ordering commits nothing
      (selection, order and search term all keep their prior values)
    - Selection ids outside the base sequence are dropped before committing

Design Decisions:
    - Service holds a reference to the store, never a module-level global;
      tests build a fresh store per case
    - Single-entry filter cache keyed on (store.version, term): paging through
      a search re-uses the filtered list instead of rescanning 1M ids per page
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from app.core.collection_store import CollectionStore
from app.core.domain_types import PAGE_SIZE, ItemSequence
from app.core.query_engine import filter_items, paginate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageResult:
    items: list[int]
    total: int
    page: int
    page_size: int


@dataclass(frozen=True)
class InitialState:
    selected: list[int]
    first_page: list[int]
    last_search: str


@dataclass(frozen=True)
class SaveResult:
    selected_count: int
    sorted_count: int
    dropped_count: int


class StateService:
    """Read and write operations over a CollectionStore."""

    def __init__(self, store: CollectionStore, page_size: int = PAGE_SIZE):
        self.store = store
        self.page_size = page_size
        self._filter_cache: tuple[tuple[int, str], ItemSequence] | None = None

    # ─── Reads ───────────────────────────────────────────────────

    def get_page(self, page: int, search: str = "") -> PageResult:
        """Filter the current order by search, then slice the requested page."""
        filtered = self._filtered(search)
        items = paginate(filtered, page, self.page_size)
        return PageResult(
            items=items, total=len(filtered),
            page=page, page_size=self.page_size,
        )

    def get_all_ids(self) -> list[int]:
        return list(self.store.current_order())

    def get_selected_items(self) -> list[int]:
        return list(self.store.selection())

    def get_initial_state(self) -> InitialState:
        return InitialState(
            selected=list(self.store.selection()),
            first_page=paginate(self.store.current_order(), 1, self.page_size),
            last_search=self.store.last_search_term(),
        )

    # ─── Writes ──────────────────────────────────────────────────

    def update_order(self, moved_id: int, target_id: int) -> None:
        """Swap two ids in the current order. Raises IdNotFoundError."""
        self.store.swap(moved_id, target_id)
        logger.info(
            f"Swapped items {moved_id} and {target_id}",
            extra={"item_count": 2},
        )

    def save_state(
        self,
        selected_ids: Sequence[int],
        ordered_ids: Sequence[int],
        search_term: str,
    ) -> SaveResult:
        """Commit selection, optional order and search term as one unit.

        The ordering is validated (and committed) first, so InvalidOrderError
        propagates before the selection or search term are touched.
        """
        if ordered_ids:
            self.store.replace_order(ordered_ids)

        kept = {item_id for item_id in selected_ids if self.store.contains(item_id)}
        dropped = len(set(selected_ids)) - len(kept)
        self.store.replace_selection(kept)
        self.store.set_last_search_term(search_term)

        if dropped:
            logger.warning(
                f"Dropped {dropped} selected id(s) outside the collection",
                extra={"item_count": dropped},
            )
        logger.info(
            "State saved",
            extra={"item_count": len(kept), "search": search_term},
        )
        return SaveResult(
            selected_count=len(kept),
            sorted_count=len(ordered_ids),
            dropped_count=dropped,
        )

    def reset_state(self) -> int:
        """Reset the store. Returns the base collection size."""
        self.store.reset()
        self._filter_cache = None
        logger.info("State reset to initial")
        return len(self.store.base_sequence)

    # ─── Helpers ─────────────────────────────────────────────────

    def _filtered(self, search: str) -> ItemSequence:
        order = self.store.current_order()
        if not search:
            return order
        key = (self.store.version, search)
        if self._filter_cache is not None and self._filter_cache[0] == key:
            return self._filter_cache[1]
        filtered = filter_items(order, search)
        self._filter_cache = (key, filtered)
        return filtered
