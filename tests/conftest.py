"""Shared test fixtures for goatdb."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sample_types import ALL_TYPES

from goatdb import GoatDatabase, GraphViewer, StorageMode


@pytest.fixture(params=list(StorageMode), ids=lambda mode: mode.value)
def storage_mode(request: pytest.FixtureRequest) -> StorageMode:
    """Run storage-backed tests once per storage mode."""
    return request.param


@pytest.fixture
def database_url(tmp_path) -> str:
    """SQLite database file unique to the test."""
    return f"sqlite:///{tmp_path / 'goatdb.db'}"


@pytest_asyncio.fixture
async def db(database_url: str, storage_mode: StorageMode) -> AsyncIterator[GoatDatabase]:
    """Initialised database with every sample type registered."""
    database = GoatDatabase(url=database_url, types=ALL_TYPES, storage_mode=storage_mode)
    await database.initialise()
    yield database
    await database.close()


@pytest.fixture
def viewer() -> GraphViewer:
    return GraphViewer(is_logged_in=True, id="user-1")


@pytest.fixture
def other_viewer() -> GraphViewer:
    return GraphViewer(is_logged_in=True, id="user-2")
