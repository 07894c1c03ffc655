"""Root conftest — shared fixtures: fresh store, service, app and HTTP clients per test.

Invariants:
    - Every test gets its own CollectionStore (no shared state between tests)
    - HTTP tests run in-process through httpx ASGITransport (no sockets)

Design Decisions:
    - Small collection (100 ids = 5 pages) keeps HTTP tests fast; the
      million-item scenarios run against the service directly
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Keep the module-level app in app.main cheap and quiet when imported
os.environ.setdefault("ITEMS_COUNT", "1000")
os.environ.setdefault("LOG_FORMAT", "text")

from app.client.transport import ListTransport  # noqa: E402
from app.config import Settings  # noqa: E402
from app.core.collection_store import CollectionStore  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.state_service import StateService  # noqa: E402

SMALL_COLLECTION = 100


@pytest.fixture
def store():
    return CollectionStore.initialize(SMALL_COLLECTION)


@pytest.fixture
def service(store):
    return StateService(store)


@pytest.fixture
def app():
    return create_app(
        Settings(items_count=SMALL_COLLECTION, log_format="text"),
    )


@pytest.fixture
def app_service(app) -> StateService:
    """The StateService the app's routes use, for arranging server state."""
    return app.state.state_service


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def transport(app):
    """ListTransport wired to the in-process app under /api."""
    http = AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test/api",
    )
    yield ListTransport(http)
    await http.aclose()
