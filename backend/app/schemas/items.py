"""Item Schemas — Pydantic models for the list-state API boundary.

Invariants:
    - Wire names are camelCase (movedItemId, sortedItems, pageSize, ...)
    - Every response carries success: bool
    - Request bodies default missing lists to empty and missing searchTerm to ""

Design Decisions:
    - alias_generator=to_camel with populate_by_name: Python code uses
      snake_case, JSON uses camelCase
    - Permutation validation is NOT done here: it needs the store's base
      sequence, so it lives in the query engine
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests -----------------------------------------------------------------

class UpdateOrderRequest(CamelModel):
    """Swap two items by identity."""
    moved_item_id: int
    target_item_id: int


class SaveStateRequest(CamelModel):
    """Replace selection, optionally replace order, record search term."""
    selected_items: list[int] = Field(default_factory=list)
    sorted_items: list[int] = Field(default_factory=list)
    search_term: str = ""


# --- Responses ----------------------------------------------------------------

class PageResponse(CamelModel):
    success: bool = True
    items: list[int]
    total: int
    page: int
    page_size: int


class AllIdsResponse(CamelModel):
    success: bool = True
    ids: list[int]


class SelectedItemsResponse(CamelModel):
    success: bool = True
    selected_items: list[int]


class InitialStateResponse(CamelModel):
    """Startup snapshot — selection, first page of current order, last search."""
    success: bool = True
    selected: list[int]
    last_sorted: list[int]
    last_search: str


class UpdateOrderResponse(CamelModel):
    success: bool = True
    message: str


class SaveStateResponse(CamelModel):
    success: bool = True
    message: str
    selected_count: int
    sorted_count: int


class ResetStateResponse(CamelModel):
    success: bool = True
    message: str
    initial_items_count: int
