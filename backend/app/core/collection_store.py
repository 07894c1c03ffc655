"""Collection Store — owner of the base sequence and the mutable derived view.

Invariants:
    - base_sequence is 1..n and never mutated after initialize()
    - custom order, when present, is always a permutation of base_sequence
    - Failed replace_order / swap leave every field unchanged
    - version increases on every successful mutation (readers key caches on it)

Design Decisions:
    - base_sequence is a range: O(1) membership, index and slicing for 1M ids
    - Absent custom order (None) means "use base_sequence"; swap materializes a copy
    - replace_selection stores ids verbatim; filtering unknown ids is the
      service layer's decision (see services/state_service.py)
"""

from collections.abc import Iterable, Sequence

from app.core.domain_types import ItemSequence
from app.core.errors import IdNotFoundError
from app.core.query_engine import validate_permutation


class CollectionStore:
    """Authoritative in-memory ordering/selection/search state, no IO."""

    def __init__(self, base_sequence: range):
        self._base: range = base_sequence
        self._custom_order: list[int] | None = None
        self._selection: set[int] = set()
        self._last_search_term: str = ""
        self.version: int = 0

    @classmethod
    def initialize(cls, n: int) -> "CollectionStore":
        """Create a store over ids 1..n with no custom order or selection."""
        if n < 0:
            raise ValueError("collection size must be non-negative")
        return cls(range(1, n + 1))

    # ─── Reads ───────────────────────────────────────────────────

    @property
    def base_sequence(self) -> range:
        return self._base

    @property
    def has_custom_order(self) -> bool:
        return self._custom_order is not None

    def current_order(self) -> ItemSequence:
        """Custom order if present, else the base sequence. Callers must not mutate."""
        if self._custom_order is not None:
            return self._custom_order
        return self._base

    def contains(self, item_id: int) -> bool:
        return item_id in self._base

    def selection(self) -> set[int]:
        return self._selection

    def last_search_term(self) -> str:
        return self._last_search_term

    # ─── Writes ──────────────────────────────────────────────────

    def replace_order(self, new_order: Sequence[int]) -> None:
        """Replace the custom order wholesale. Raises InvalidOrderError."""
        validate_permutation(new_order, self._base)
        self._custom_order = list(new_order)
        self._bump()

    def swap(self, id_a: int, id_b: int) -> None:
        """Exchange the positions of two ids. Raises IdNotFoundError."""
        order = self.current_order()
        pos_a = _position(order, id_a)
        pos_b = _position(order, id_b)
        missing = [
            item_id for item_id, pos in ((id_a, pos_a), (id_b, pos_b))
            if pos is None
        ]
        if missing:
            raise IdNotFoundError(missing)

        if self._custom_order is None:
            self._custom_order = list(self._base)
        order = self._custom_order
        order[pos_a], order[pos_b] = order[pos_b], order[pos_a]
        self._bump()

    def replace_selection(self, ids: Iterable[int]) -> None:
        self._selection = set(ids)
        self._bump()

    def set_last_search_term(self, term: str) -> None:
        self._last_search_term = term

    def reset(self) -> None:
        """Back to base order, empty selection, empty search term."""
        self._custom_order = None
        self._selection = set()
        self._last_search_term = ""
        self._bump()

    def _bump(self) -> None:
        self.version += 1


def _position(order: ItemSequence, item_id: int) -> int | None:
    try:
        return order.index(item_id)
    except ValueError:
        return None
