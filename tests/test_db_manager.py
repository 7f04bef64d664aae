"""
Tests for schema migrations and the settings table.
"""

import sqlite3

import pytest

from database.db_manager import MIGRATIONS, DatabaseManager


class TestMigrations:

    def test_fresh_database_reaches_latest_version(self, db):
        assert db.schema_version() == len(MIGRATIONS)

    def test_initialize_is_idempotent(self, tmp_path):
        path = str(tmp_path / "bills.db")
        first = DatabaseManager(path)
        first.initialize()
        first.close()

        again = DatabaseManager(path)
        again.initialize()
        assert again.schema_version() == len(MIGRATIONS)
        again.close()

    def test_partially_migrated_database_is_upgraded(self, tmp_path):
        path = str(tmp_path / "old.db")
        conn = sqlite3.connect(path)
        conn.executescript(MIGRATIONS[0])
        conn.execute("PRAGMA user_version = 1")
        conn.commit()
        conn.close()

        db = DatabaseManager(path)
        db.initialize()
        assert db.schema_version() == len(MIGRATIONS)
        assert db.get_setting("currency_symbol") == "$"
        db.close()

    def test_foreign_keys_are_enforced(self, db):
        with pytest.raises(sqlite3.IntegrityError):
            db.get_connection().execute(
                "INSERT INTO payments (id, bill_id, amount, due_date) VALUES ('p', 'nope', '1', '2024-01-01')"
            )

    def test_check_constraints(self, db):
        with pytest.raises(sqlite3.IntegrityError):
            db.get_connection().execute(
                "INSERT INTO bills (id, name, type, amount, due_day) VALUES ('b', 'x', 'RENT', '10', 32)"
            )


class TestSettings:

    def test_defaults_and_override(self, db):
        assert db.get_setting("currency_symbol") == "$"
        db.set_setting("currency_symbol", "COP ")
        assert db.get_setting("currency_symbol") == "COP "

    def test_missing_setting_default(self, db):
        assert db.get_setting("nope", "fallback") == "fallback"


class TestFromUrl:

    def test_sqlite_url(self, tmp_path):
        target = tmp_path / "from_url.db"
        db = DatabaseManager.from_url(f"sqlite:///{target}")
        db.initialize()
        db.close()
        assert target.exists()
