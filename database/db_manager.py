import logging
import sqlite3

from utils.app_config import database_path_from_url
from utils.constants import DB_FILE, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

# Ordered schema migrations. Index + 1 is the PRAGMA user_version the
# database reaches after the script runs; never edit a released entry.
MIGRATIONS = [
    """
    CREATE TABLE IF NOT EXISTS bills (
        id          TEXT    PRIMARY KEY,
        name        TEXT    NOT NULL,
        type        TEXT    NOT NULL CHECK(type IN
                        ('RENT','ELECTRICITY','WATER','GAS','INTERNET','PHONE','OTHER')),
        amount      TEXT    NOT NULL CHECK(CAST(amount AS REAL) > 0),
        due_day     INTEGER NOT NULL CHECK(due_day BETWEEN 1 AND 31),
        description TEXT,
        active      INTEGER NOT NULL DEFAULT 1,
        created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
        updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
    );

    CREATE TABLE IF NOT EXISTS payments (
        id          TEXT PRIMARY KEY,
        bill_id     TEXT NOT NULL REFERENCES bills(id) ON DELETE CASCADE ON UPDATE CASCADE,
        amount      TEXT NOT NULL CHECK(CAST(amount AS REAL) > 0),
        status      TEXT NOT NULL DEFAULT 'PENDING'
                        CHECK(status IN ('PENDING','PAID','OVERDUE')),
        due_date    TEXT NOT NULL,
        paid_date   TEXT,
        notes       TEXT,
        created_at  TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
    );

    CREATE INDEX IF NOT EXISTS idx_payments_bill_id  ON payments(bill_id);
    CREATE INDEX IF NOT EXISTS idx_payments_due_date ON payments(due_date);
    CREATE INDEX IF NOT EXISTS idx_payments_status   ON payments(status);
    """,
    """
    CREATE TABLE IF NOT EXISTS app_settings (
        key   TEXT PRIMARY KEY,
        value TEXT NOT NULL
    );
    """,
]


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    @classmethod
    def from_url(cls, url: str) -> "DatabaseManager":
        return cls(database_path_from_url(url))

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Apply pending migrations and seed defaults."""
        conn = self.get_connection()
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def schema_version(self) -> int:
        return self.get_connection().execute("PRAGMA user_version").fetchone()[0]

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Run every migration newer than PRAGMA user_version, in order."""
        current = conn.execute("PRAGMA user_version").fetchone()[0]
        for version, script in enumerate(MIGRATIONS, start=1):
            if version <= current:
                continue
            logger.info("Applying schema migration %d to %s", version, self.db_path)
            conn.executescript(script)
            # PRAGMA does not accept bound parameters
            conn.execute(f"PRAGMA user_version = {version:d}")
            conn.commit()

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
