import pytest
from click.testing import CliRunner

from database.nosql_adapter import NoSQLAdapter
from files_manager.cli import cli
from files_manager.settings import get_settings


@pytest.fixture
def local_env(monkeypatch, tmp_path):
    db_path = str(tmp_path / "cli.db")
    monkeypatch.setenv("DEPLOYMENT_MODE", "local-dev")
    monkeypatch.setenv("SQLITE_PATH", db_path)
    monkeypatch.setenv("FOLDER_PATH", str(tmp_path / "blobs"))
    get_settings.cache_clear()
    yield db_path
    get_settings.cache_clear()


def test_show_config(local_env):
    result = CliRunner().invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "Deployment Mode: local-dev" in result.output
    assert f"sqlite {local_env}" in result.output


def test_init_db_creates_collections(local_env):
    result = CliRunner().invoke(cli, ["init-db"])

    assert result.exit_code == 0
    assert NoSQLAdapter(local_env).count_documents('users') == 0
