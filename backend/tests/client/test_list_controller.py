"""List View Controller tests — loading state machine, local edits and save/reset.

Tests cover:
    - mount() loads selection, all ids and page 1; restores last search for display
    - load_more appends whole pages, gated by LOADING and the known total
    - visible-range events only load at the last row
    - search replaces the window
    - failures → ERROR, notification, window untouched
    - toggle / move are local until save()
    - save splices the reordered window into the full order
    - a move made while a save is in flight is sent by the next save
    - reset clears the selection mirror and reloads the base order

Design Decisions:
    - Real app behind the transport (ASGITransport); failures injected by
      monkeypatching single transport methods
"""

import asyncio

import pytest

from app.client.list_controller import ListViewController
from app.core.domain_types import LoadState, NotificationSeverity
from app.core.errors import TransportFailureError
from app.schemas.items import PageResponse


@pytest.fixture
def controller(transport):
    return ListViewController(transport)


@pytest.fixture
async def mounted(controller):
    assert await controller.mount()
    return controller


def _failing(operation: str):
    async def fail(*args, **kwargs):
        raise TransportFailureError("connection refused", operation)
    return fail


# ─── mount ───────────────────────────────────────────────────────

async def test_mount_loads_first_page(controller):
    assert controller.state is LoadState.IDLE
    assert await controller.mount()
    assert controller.window == list(range(1, 21))
    assert controller.page == 1
    assert controller.total == 100
    assert controller.all_ids == list(range(1, 101))
    assert controller.state is LoadState.IDLE


async def test_mount_restores_selection_and_search_input(controller, app_service):
    app_service.save_state([2, 30], [], "7")
    await controller.mount()
    assert controller.selection == {2, 30}
    assert controller.search_input == "7"
    # last search is display-only: window is unfiltered
    assert controller.active_search == ""
    assert controller.window == list(range(1, 21))


async def test_mount_failure_sets_error(controller, monkeypatch):
    monkeypatch.setattr(controller.transport, "get_all_ids", _failing("get_all_ids"))
    assert not await controller.mount()
    assert controller.state is LoadState.ERROR
    assert controller.window == []
    notes = controller.drain_notifications()
    assert len(notes) == 1
    assert notes[0].severity is NotificationSeverity.ERROR


# ─── load_more ───────────────────────────────────────────────────

async def test_load_more_appends_next_page(mounted):
    assert await mounted.load_more()
    assert mounted.window == list(range(1, 41))
    assert mounted.page == 2


async def test_load_more_stops_at_total(mounted):
    while mounted.has_more:
        await mounted.load_more()
    assert mounted.window == list(range(1, 101))
    assert mounted.page == 5
    assert not await mounted.load_more()
    assert mounted.page == 5


async def test_load_more_gated_while_loading(mounted):
    mounted.state = LoadState.LOADING
    assert not await mounted.load_more()
    assert len(mounted.window) == 20


async def test_load_more_failure_leaves_window(mounted, monkeypatch):
    monkeypatch.setattr(mounted.transport, "get_page", _failing("get_page"))
    assert not await mounted.load_more()
    assert mounted.state is LoadState.ERROR
    assert mounted.window == list(range(1, 21))
    assert mounted.page == 1
    assert mounted.drain_notifications()[0].message == "Failed to load items"


async def test_load_more_recovers_after_error(mounted, monkeypatch):
    original = mounted.transport.get_page
    monkeypatch.setattr(mounted.transport, "get_page", _failing("get_page"))
    await mounted.load_more()
    monkeypatch.setattr(mounted.transport, "get_page", original)
    assert await mounted.load_more()
    assert mounted.state is LoadState.IDLE
    assert mounted.page == 2


async def test_empty_page_marks_end(mounted, monkeypatch):
    async def empty_page(page, search=""):
        return PageResponse(items=[], total=500, page=page, page_size=20)

    monkeypatch.setattr(mounted.transport, "get_page", empty_page)
    mounted.total = 500
    assert not await mounted.load_more()
    assert mounted.state is LoadState.IDLE
    assert mounted.page == 1
    assert mounted.total == 20
    assert not mounted.has_more


async def test_visible_range_triggers_only_at_last_row(mounted):
    assert not await mounted.on_visible_range_changed(10)
    assert len(mounted.window) == 20
    assert await mounted.on_visible_range_changed(19)
    assert len(mounted.window) == 40


# ─── search ──────────────────────────────────────────────────────

async def test_search_replaces_window(mounted):
    await mounted.load_more()
    assert await mounted.search("7")
    assert mounted.window == [7, 17, 27, 37, 47, 57, 67, 70, 71, 72,
                              73, 74, 75, 76, 77, 78, 79, 87, 97]
    assert mounted.total == 19
    assert mounted.page == 1
    assert mounted.active_search == "7"
    assert not mounted.has_more


async def test_load_more_uses_active_search(mounted):
    await mounted.search("1")
    first = list(mounted.window)
    await mounted.load_more()
    assert mounted.window[:20] == first
    assert all("1" in str(i) for i in mounted.window)


async def test_search_failure_keeps_previous_window(mounted, monkeypatch):
    monkeypatch.setattr(mounted.transport, "get_page", _failing("get_page"))
    assert not await mounted.search("5")
    assert mounted.window == list(range(1, 21))
    assert mounted.active_search == ""


# ─── local edits ─────────────────────────────────────────────────

async def test_toggle_selection_is_local(mounted, app_service):
    assert mounted.toggle_selection(3) is True
    assert mounted.is_selected(3)
    assert app_service.get_selected_items() == []
    assert mounted.toggle_selection(3) is False
    assert not mounted.is_selected(3)


async def test_move_item_reorders_window(mounted, app_service):
    assert mounted.move_item(0, 2)
    assert mounted.window[:4] == [2, 3, 1, 4]
    assert app_service.get_all_ids()[:3] == [1, 2, 3]


async def test_move_item_out_of_range_is_ignored(mounted):
    assert not mounted.move_item(0, 20)
    assert not mounted.move_item(-1, 3)
    assert not mounted.move_item(4, 4)
    assert mounted.window == list(range(1, 21))


# ─── save ────────────────────────────────────────────────────────

async def test_save_commits_selection_and_reorder(mounted, app_service):
    mounted.toggle_selection(5)
    mounted.toggle_selection(6)
    mounted.move_item(0, 2)

    assert await mounted.save()

    assert set(app_service.get_selected_items()) == {5, 6}
    server_ids = app_service.get_all_ids()
    assert server_ids[:4] == [2, 3, 1, 4]
    assert server_ids[20:] == list(range(21, 101))
    assert mounted.drain_notifications()[0].severity is NotificationSeverity.SUCCESS


async def test_save_reorder_within_search_results(mounted, app_service):
    await mounted.search("7")
    mounted.move_item(0, 1)
    assert mounted.window[:2] == [17, 7]

    assert await mounted.save()

    server_ids = app_service.get_all_ids()
    assert server_ids[6] == 17
    assert server_ids[16] == 7
    assert app_service.store.last_search_term() == "7"


async def test_save_without_reorder_keeps_server_order(mounted, app_service):
    app_service.update_order(1, 100)
    mounted.toggle_selection(2)
    assert mounted.ordered_ids_for_save() == []
    assert await mounted.save()
    assert app_service.get_all_ids()[0] == 100


async def test_save_failure_keeps_local_state(mounted, app_service, monkeypatch):
    mounted.toggle_selection(9)
    mounted.move_item(1, 0)
    monkeypatch.setattr(mounted.transport, "save_state", _failing("save_state"))

    assert not await mounted.save()

    assert mounted.selection == {9}
    assert mounted.window[:2] == [2, 1]
    assert app_service.get_selected_items() == []
    note = mounted.drain_notifications()[0]
    assert note.severity is NotificationSeverity.ERROR
    assert note.message == "Failed to save state"


async def test_reorder_during_save_is_sent_by_next_save(mounted, app_service, monkeypatch):
    send = mounted.transport.save_state
    started, release = asyncio.Event(), asyncio.Event()

    async def held_save(*args, **kwargs):
        started.set()
        await release.wait()
        return await send(*args, **kwargs)

    mounted.move_item(0, 1)
    monkeypatch.setattr(mounted.transport, "save_state", held_save)
    pending = asyncio.create_task(mounted.save())
    await started.wait()
    mounted.move_item(5, 10)
    release.set()
    assert await pending

    monkeypatch.setattr(mounted.transport, "save_state", send)
    assert mounted.ordered_ids_for_save() != []
    assert await mounted.save()

    assert app_service.get_all_ids()[:20] == mounted.window[:20]
    assert mounted.ordered_ids_for_save() == []


# ─── reset ───────────────────────────────────────────────────────

async def test_reset_clears_selection_and_reloads_base(mounted, app_service):
    mounted.toggle_selection(4)
    mounted.move_item(0, 5)
    await mounted.save()
    await mounted.search("3")

    assert await mounted.reset()

    assert mounted.selection == set()
    assert mounted.window == list(range(1, 21))
    assert mounted.active_search == ""
    assert mounted.all_ids == list(range(1, 101))
    assert app_service.get_selected_items() == []
    assert not app_service.store.has_custom_order


async def test_reset_failure_changes_nothing(mounted, monkeypatch):
    mounted.toggle_selection(4)
    monkeypatch.setattr(mounted.transport, "reset_state", _failing("reset_state"))
    assert not await mounted.reset()
    assert mounted.selection == {4}
    assert mounted.state is LoadState.ERROR


async def test_drain_notifications_empties_queue(mounted):
    await mounted.save()
    assert len(mounted.drain_notifications()) == 1
    assert mounted.drain_notifications() == []
