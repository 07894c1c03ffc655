"""List Transport — httpx adapter from list-controller intents to the state API.

Invariants:
    - No retries: every failure raises TransportFailureError once
    - Network errors, timeouts, non-2xx statuses and `success: false` bodies
      all map to TransportFailureError (core/errors.py)
    - save_state and reset_state carry their own short deadlines (10 s / 5 s)
    - Responses are validated into the same Pydantic models the server emits

Design Decisions:
    - Wrapper over a caller-supplied AsyncClient: tests inject an ASGITransport
      client, production builds one from settings
    - Paths are relative (no leading slash) so they join onto base_url's /api prefix
"""

import logging
from collections.abc import Iterable, Sequence
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.config import Settings
from app.core.errors import TransportFailureError
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

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ListTransport:
    """Calls the list-state API over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        save_timeout_seconds: float = 10.0,
        reset_timeout_seconds: float = 5.0,
    ):
        self.client = client
        self.save_timeout_seconds = save_timeout_seconds
        self.reset_timeout_seconds = reset_timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListTransport":
        return cls(
            httpx.AsyncClient(base_url=settings.api_url),
            save_timeout_seconds=settings.save_timeout_seconds,
            reset_timeout_seconds=settings.reset_timeout_seconds,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── Reads ───────────────────────────────────────────────────

    async def get_page(self, page: int, search: str = "") -> PageResponse:
        return await self._request(
            "get_page", "GET", "items", PageResponse,
            params={"page": page, "search": search},
        )

    async def get_all_ids(self) -> list[int]:
        data = await self._request(
            "get_all_ids", "GET", "all-items-ids", AllIdsResponse,
        )
        return data.ids

    async def get_selected_items(self) -> list[int]:
        data = await self._request(
            "get_selected_items", "GET", "selected-items", SelectedItemsResponse,
        )
        return data.selected_items

    async def get_initial_state(self) -> InitialStateResponse:
        return await self._request(
            "get_initial_state", "GET", "initial-state", InitialStateResponse,
        )

    # ─── Writes ──────────────────────────────────────────────────

    async def update_order(self, moved_item_id: int, target_item_id: int) -> str:
        body = UpdateOrderRequest(
            moved_item_id=moved_item_id, target_item_id=target_item_id,
        )
        data = await self._request(
            "update_order", "POST", "update-order", UpdateOrderResponse,
            json=body.model_dump(by_alias=True),
        )
        return data.message

    async def save_state(
        self,
        selected_items: Iterable[int],
        sorted_items: Sequence[int],
        search_term: str,
    ) -> SaveStateResponse:
        body = SaveStateRequest(
            selected_items=list(selected_items),
            sorted_items=list(sorted_items),
            search_term=search_term,
        )
        return await self._request(
            "save_state", "POST", "save-state", SaveStateResponse,
            json=body.model_dump(by_alias=True),
            timeout=self.save_timeout_seconds,
        )

    async def reset_state(self) -> int:
        data = await self._request(
            "reset_state", "POST", "reset-state", ResetStateResponse,
            json={}, timeout=self.reset_timeout_seconds,
        )
        return data.initial_items_count

    # ─── Helpers ─────────────────────────────────────────────────

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        model: type[ResponseT],
        **kwargs,
    ) -> ResponseT:
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{operation} failed: {e!r}")
            raise TransportFailureError(
                str(e) or type(e).__name__, operation,
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            data = {}

        if response.is_error or not data.get("success", False):
            message = data.get("error") or f"HTTP {response.status_code}"
            logger.error(
                f"{operation} rejected: {message}",
                extra={"status_code": response.status_code},
            )
            raise TransportFailureError(
                message, operation, status_code=response.status_code,
            )

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TransportFailureError(
                "malformed response", operation,
                status_code=response.status_code,
            ) from e
