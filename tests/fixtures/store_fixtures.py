"""Document store fixtures backed by a throwaway SQLite file."""

import pytest

from database.local import init_db
from database.nosql_adapter import NoSQLAdapter


@pytest.fixture
def sqlite_path(tmp_path) -> str:
    return str(tmp_path / "test_files_manager.db")


@pytest.fixture
def store(sqlite_path) -> NoSQLAdapter:
    adapter = NoSQLAdapter(sqlite_path)
    init_db(adapter)
    yield adapter
    adapter.close()
