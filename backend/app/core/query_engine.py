"""Query Engine — pure filter, pagination and validation over an ordered id sequence.

Invariants:
    - Empty search term returns the input sequence itself (no copy)
    - Filter is a case-sensitive substring match on the decimal representation
    - Page slices are clamped to [0, len); a page past the end is empty, not an error
    - Same (sequence, term, page) always yields the same result

Design Decisions:
    - Plain functions over a class: no state to hold
    - Permutation check reports the first violation found (length, duplicate, unknown)
"""

from collections.abc import Sequence

from app.core.domain_types import ItemSequence
from app.core.errors import InvalidOrderError, InvalidPageError


def filter_items(sequence: ItemSequence, term: str) -> ItemSequence:
    """Keep ids whose decimal form contains term, preserving order."""
    if not term:
        return sequence
    return [item_id for item_id in sequence if term in str(item_id)]


def page_bounds(length: int, page: int, page_size: int) -> tuple[int, int]:
    """Clamped (start, stop) slice bounds for a 1-indexed page."""
    if page < 1 or page_size < 1:
        raise InvalidPageError(page, page_size)
    start = min((page - 1) * page_size, length)
    stop = min(start + page_size, length)
    return start, stop


def paginate(sequence: ItemSequence, page: int, page_size: int) -> list[int]:
    start, stop = page_bounds(len(sequence), page, page_size)
    return list(sequence[start:stop])


def validate_permutation(candidate: Sequence[int], base: ItemSequence) -> None:
    """Raise InvalidOrderError unless candidate holds every base value exactly once."""
    if len(candidate) != len(base):
        raise InvalidOrderError(
            f"expected {len(base)} ids, got {len(candidate)}",
        )
    # range membership is O(1); other sequences need a set
    base_values = base if isinstance(base, range) else frozenset(base)
    seen: set[int] = set()
    for item_id in candidate:
        if item_id in seen:
            raise InvalidOrderError(f"duplicate id {item_id}")
        if item_id not in base_values:
            raise InvalidOrderError(f"unknown id {item_id}")
        seen.add(item_id)
