"""List View Controller — client-side window, selection mirror and loading state machine.

Invariants:
    - state is one of IDLE / LOADING / ERROR; only one load (initial batch,
      load-more, search, reset reload) is in flight at a time
    - window only ever grows by whole pages for the active search term;
      a failed fetch leaves it exactly as it was (append is all-or-nothing)
    - page counter increments only after a page was appended
    - Selection toggles and drag reorders are local until save()
    - No automatic retries: failures set ERROR and queue an error notification;
      the next user action may try again

Design Decisions:
    - Two-tier state: the server snapshot (all_ids) and a local working copy
      (window, selection), synchronized only on save() / reset()
    - Driven by a "visible range changed" event from whatever fixed-row-height
      list widget renders it; no widget toolkit is imported here
    - save() sends the full order: the reordered window is spliced back over
      the slots its members hold in all_ids, so the server always receives a
      permutation of the collection (or nothing, if nothing was reordered)
"""

import asyncio
import logging
from dataclasses import dataclass

from app.client.transport import ListTransport
from app.core.domain_types import LoadState, NotificationSeverity
from app.core.errors import TransportFailureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """Transient message for the UI (snackbar / toast)."""
    message: str
    severity: NotificationSeverity


class ListViewController:
    """Drives incremental loading, selection and reordering of a list view."""

    def __init__(self, transport: ListTransport):
        self.transport = transport

        # Local working copy
        self.window: list[int] = []
        self.selection: set[int] = set()

        # Last known server snapshot
        self.all_ids: list[int] = []
        self.total = 0

        self.page = 0
        self.active_search = ""
        self.search_input = ""
        self.state = LoadState.IDLE
        self.notifications: list[Notification] = []
        self._reorder_version = 0
        self._saved_reorder_version = 0

    @property
    def is_loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def has_more(self) -> bool:
        return len(self.window) < self.total

    # ─── Loading ─────────────────────────────────────────────────

    async def mount(self) -> bool:
        """Load selection, full id list and page 1 concurrently."""
        if self.is_loading:
            return False
        self.state = LoadState.LOADING
        try:
            initial, all_ids, first = await _gather_all(
                self.transport.get_initial_state(),
                self.transport.get_all_ids(),
                self.transport.get_page(1),
            )
        except TransportFailureError as e:
            self._fail("Failed to load initial state", e)
            return False

        self.selection = set(initial.selected)
        # restored for display only; page 1 above is unfiltered
        self.search_input = initial.last_search
        self.all_ids = all_ids
        self._replace_window(first.items, first.total, search="")
        self.state = LoadState.IDLE
        return True

    async def on_visible_range_changed(self, last_visible_index: int) -> bool:
        """Load the next page when the last loaded row becomes visible."""
        if self.window and last_visible_index == len(self.window) - 1:
            return await self.load_more()
        return False

    async def load_more(self) -> bool:
        """Append the next page for the active search term."""
        if self.is_loading or not self.has_more:
            return False
        self.state = LoadState.LOADING
        try:
            result = await self.transport.get_page(self.page + 1, self.active_search)
        except TransportFailureError as e:
            self._fail("Failed to load items", e)
            return False

        if result.items:
            self.window.extend(result.items)
            self.page += 1
            self.total = result.total
        else:
            # server ran out before the known total; stop asking
            self.total = len(self.window)
        self.state = LoadState.IDLE
        return bool(result.items)

    async def search(self, term: str) -> bool:
        """Discard the window and restart from page 1 of the filtered order."""
        if self.is_loading:
            return False
        self.search_input = term
        self.state = LoadState.LOADING
        try:
            result = await self.transport.get_page(1, term)
        except TransportFailureError as e:
            self._fail("Failed to load items", e)
            return False

        self._replace_window(result.items, result.total, search=term)
        self.state = LoadState.IDLE
        return True

    # ─── Local edits ─────────────────────────────────────────────

    def toggle_selection(self, item_id: int) -> bool:
        """Flip selection of item_id. Returns the new selected flag."""
        if item_id in self.selection:
            self.selection.discard(item_id)
            return False
        self.selection.add(item_id)
        return True

    def is_selected(self, item_id: int) -> bool:
        return item_id in self.selection

    def move_item(self, source_index: int, destination_index: int) -> bool:
        """Drag-and-drop reorder inside the loaded window."""
        size = len(self.window)
        if not (0 <= source_index < size and 0 <= destination_index < size):
            return False
        if source_index == destination_index:
            return False
        item_id = self.window.pop(source_index)
        self.window.insert(destination_index, item_id)
        self._reorder_version += 1
        return True

    # ─── Sync with server ────────────────────────────────────────

    async def save(self) -> bool:
        """Send selection, reordered ids and search term. Local state kept on failure."""
        if self.is_loading:
            return False
        ordered = self.ordered_ids_for_save()
        # moves made while the request is in flight stay unsaved
        sent_version = self._reorder_version
        try:
            result = await self.transport.save_state(
                self.selection, ordered, self.active_search,
            )
        except TransportFailureError as e:
            logger.warning(f"Save failed: {e.message}")
            self._notify("Failed to save state", NotificationSeverity.ERROR)
            return False

        if ordered:
            self.all_ids = ordered
            self._saved_reorder_version = max(self._saved_reorder_version, sent_version)
        logger.info(
            "State saved",
            extra={"item_count": result.selected_count},
        )
        self._notify("State saved successfully", NotificationSeverity.SUCCESS)
        return True

    async def reset(self) -> bool:
        """Reset server state, clear the selection mirror, reload the base order."""
        if self.is_loading:
            return False
        self.state = LoadState.LOADING
        try:
            await self.transport.reset_state()
        except TransportFailureError as e:
            self._fail("Failed to reset state", e)
            return False

        self.selection = set()
        self.search_input = ""
        try:
            all_ids, first = await _gather_all(
                self.transport.get_all_ids(),
                self.transport.get_page(1),
            )
        except TransportFailureError as e:
            self._fail("Failed to load items", e)
            return False

        self.all_ids = all_ids
        self._replace_window(first.items, first.total, search="")
        self.state = LoadState.IDLE
        self._notify("State reset", NotificationSeverity.SUCCESS)
        return True

    def ordered_ids_for_save(self) -> list[int]:
        """Full order with the window's local arrangement, or [] if unchanged."""
        unchanged = self._reorder_version == self._saved_reorder_version
        if unchanged or not self.all_ids:
            return []
        members = set(self.window)
        arranged = iter(self.window)
        return [
            next(arranged) if item_id in members else item_id
            for item_id in self.all_ids
        ]

    def drain_notifications(self) -> list[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    # ─── Helpers ─────────────────────────────────────────────────

    def _replace_window(self, items: list[int], total: int, search: str) -> None:
        self.window = list(items)
        self.page = 1
        self.total = total
        self.active_search = search
        self._saved_reorder_version = self._reorder_version

    def _notify(self, message: str, severity: NotificationSeverity) -> None:
        self.notifications.append(Notification(message, severity))

    def _fail(self, message: str, exc: TransportFailureError) -> None:
        logger.warning(
            f"{message}: {exc.message}",
            extra={"error_code": exc.code, "status_code": exc.status_code},
        )
        self.state = LoadState.ERROR
        self._notify(message, NotificationSeverity.ERROR)


async def _gather_all(*calls):
    """Run calls concurrently, wait for all of them, then raise the first failure."""
    results = await asyncio.gather(*calls, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results
