"""
Pytest configuration and fixtures for todor tests.
"""

import pytest
import sys
from pathlib import Path

# Add packages to path for testing from a checkout
packages_dir = Path(__file__).parent.parent / "packages"
sys.path.insert(0, str(packages_dir / "todor-core"))
sys.path.insert(0, str(packages_dir / "todor-cli"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / ".todor"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
async def sqlite_db(tmp_path):
    """A connected SQLite adapter on a temporary file with the schema applied."""
    from todor.db.migrations import initialize_schema
    from todor.db.sqlite import SQLiteAdapter

    adapter = SQLiteAdapter(str(tmp_path / "todos.db"))
    await adapter.connect()
    await initialize_schema(adapter)

    yield adapter

    await adapter.close()


@pytest.fixture
def store(sqlite_db):
    from todor.services.store import TodoStore

    return TodoStore(adapter=sqlite_db)


@pytest.fixture
def todo_service(store):
    from todor.services.todos import TodoService

    return TodoService(store=store)


@pytest.fixture
def search_service(store):
    from todor.services.search import SearchService

    return SearchService(store=store)


@pytest.fixture
def sample_texts():
    """Sample todo texts for testing."""
    return [
        "buy milk",
        "call the plumber",
        "renew passport",
        "buy stamps",
        "water the plants",
    ]
