"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identifiers are distinct positive integers
    - PAGE_SIZE is fixed and not client-configurable
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from collections.abc import Sequence
from enum import Enum


# ─── Identity Types ──────────────────────────────────────────────

# Read-only ordered view of ids: a range (base order) or a list (custom order)
ItemSequence = Sequence[int]


# ─── Constants ───────────────────────────────────────────────────

PAGE_SIZE = 20
DEFAULT_ITEMS_COUNT = 1_000_000


# ─── Enums ───────────────────────────────────────────────────────

class LoadState(str, Enum):
    """List controller states — LOADING gates re-entrant fetches."""
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class NotificationSeverity(str, Enum):
    """Severity of a transient client notification."""
    SUCCESS = "success"
    ERROR = "error"
