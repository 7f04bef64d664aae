"""
Tests for database URL resolution.
"""

import json

import pytest

from utils import app_config
from utils.constants import DEFAULT_DATABASE_URL


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp dir and clear DATABASE_URL."""
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "config.json")
    monkeypatch.setattr(app_config, "load_dotenv", lambda: False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return tmp_path / "config.json"


class TestDatabasePath:

    @pytest.mark.parametrize("url,expected", [
        ("sqlite:///bills.db", "bills.db"),
        ("sqlite:////var/lib/bills.db", "/var/lib/bills.db"),
        ("sqlite:///:memory:", ":memory:"),
        ("data/bills.db", "data/bills.db"),
        ("  sqlite:///x.db  ", "x.db"),
    ])
    def test_valid(self, url, expected):
        assert app_config.database_path_from_url(url) == expected

    @pytest.mark.parametrize("url", ["", "sqlite:///", "postgresql://localhost/bills"])
    def test_invalid(self, url):
        with pytest.raises(ValueError):
            app_config.database_path_from_url(url)


class TestResolution:

    def test_default(self, isolated_config):
        assert app_config.get_database_url() == DEFAULT_DATABASE_URL

    def test_environment_wins(self, isolated_config, monkeypatch):
        isolated_config.write_text(json.dumps({"database_url": "sqlite:///config.db"}))
        monkeypatch.setenv("DATABASE_URL", "sqlite:///env.db")
        assert app_config.get_database_url() == "sqlite:///env.db"

    def test_config_file(self, isolated_config):
        app_config.set_database_url("sqlite:///config.db")
        assert json.loads(isolated_config.read_text()) == {"database_url": "sqlite:///config.db"}
        assert app_config.get_database_url() == "sqlite:///config.db"

        app_config.set_database_url(None)
        assert app_config.get_database_url() == DEFAULT_DATABASE_URL

    def test_corrupt_config_is_ignored(self, isolated_config):
        isolated_config.write_text("{not json")
        assert app_config.load_config() == {}
