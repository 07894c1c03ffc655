"""Item Routes — paged query, id snapshots and state mutations over the collection.

Invariants:
    - Handlers are async and call the service without awaiting in between, so
      each request sees one consistent snapshot of the store
    - pageSize is fixed server-side; clients cannot change it
    - Domain errors propagate to the global ListStateError handler (400)

Design Decisions:
    - Thin routes: parse, delegate to StateService, shape the response model
    - Router carries no prefix; main.py mounts it under settings.api_prefix
"""

import logging

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_state_service
from app.schemas.items import (
    AllIdsResponse,
    InitialStateResponse,
    PageResponse,
    ResetStateResponse,
    SaveStateRequest,
    SaveStateResponse,
    SelectedItemsResponse,
    UpdateOrderRequest,
    UpdateOrderResponse,
)
from app.services.state_service import StateService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["items"])


@router.get("/items", response_model=PageResponse)
async def get_items(
    page: int = Query(1, ge=1),
    search: str = Query(""),
    service: StateService = Depends(get_state_service),
):
    """One page of the (optionally filtered) current order."""
    result = service.get_page(page, search)
    logger.debug(
        "Page served",
        extra={"page": page, "search": search, "item_count": len(result.items)},
    )
    return PageResponse(
        items=result.items,
        total=result.total,
        page=result.page,
        page_size=result.page_size,
    )


@router.get("/all-items-ids", response_model=AllIdsResponse)
async def get_all_item_ids(service: StateService = Depends(get_state_service)):
    """Full current order, unfiltered."""
    return AllIdsResponse(ids=service.get_all_ids())


@router.get("/selected-items", response_model=SelectedItemsResponse)
async def get_selected_items(service: StateService = Depends(get_state_service)):
    return SelectedItemsResponse(selected_items=service.get_selected_items())


@router.get("/initial-state", response_model=InitialStateResponse)
async def get_initial_state(service: StateService = Depends(get_state_service)):
    """Startup snapshot: selection, first page, last search term."""
    snapshot = service.get_initial_state()
    return InitialStateResponse(
        selected=snapshot.selected,
        last_sorted=snapshot.first_page,
        last_search=snapshot.last_search,
    )


@router.post("/update-order", response_model=UpdateOrderResponse)
async def update_order(
    body: UpdateOrderRequest,
    service: StateService = Depends(get_state_service),
):
    """Swap two items by id."""
    service.update_order(body.moved_item_id, body.target_item_id)
    return UpdateOrderResponse(message="Order updated successfully")


@router.post("/save-state", response_model=SaveStateResponse)
async def save_state(
    body: SaveStateRequest,
    service: StateService = Depends(get_state_service),
):
    """Replace selection, optionally the order, and record the search term."""
    result = service.save_state(
        body.selected_items, body.sorted_items, body.search_term,
    )
    return SaveStateResponse(
        message="State saved successfully",
        selected_count=result.selected_count,
        sorted_count=result.sorted_count,
    )


@router.post("/reset-state", response_model=ResetStateResponse)
async def reset_state(service: StateService = Depends(get_state_service)):
    count = service.reset_state()
    return ResetStateResponse(
        message="State reset to initial", initial_items_count=count,
    )
