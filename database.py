"""
SQLite database layer for the Chameleon Sum API.

Owns the ``sums`` table. Every operation opens its own connection and
closes it before returning; there is no pooling and no lock shared between
callers, so ``record_sum`` run concurrently may count rows inserted by
other requests.

Usage:
    # Standalone: create the schema in the configured database
    python database.py

    # Programmatic
    from database import SumStore
    store = SumStore("./servr.db")
    store.ensure_schema()
    store.record_sum(2, 3)
"""

import logging
import os
import sqlite3
from contextlib import closing, contextmanager
from typing import Iterator

from errors import StorageError
from models import SumRecord

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = "./servr.db"
DEFAULT_TIMEOUT = 30


# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sums (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    first_number  INTEGER NOT NULL,
    second_number INTEGER NOT NULL,
    total         INTEGER NOT NULL
);
"""


class SumStore:
    """SQLite store for recorded sums."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH, timeout: float = DEFAULT_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a fresh connection, translating sqlite failures into StorageError."""
        try:
            parent = os.path.dirname(self.db_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"cannot open database {self.db_path}: {e}") from e

        with closing(conn):
            conn.row_factory = sqlite3.Row
            try:
                yield conn
            except (sqlite3.Error, OverflowError) as e:
                raise StorageError(str(e)) from e

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def ensure_schema(self) -> None:
        """Create the sums table if it does not exist. Safe to call repeatedly."""
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def record_sum(self, a: int, b: int) -> int:
        """
        Persist ``(a, b, a + b)`` and return the number of rows in the table.

        The insert and the count are separate statements, not one
        transaction.
        """
        record = SumRecord.from_operands(a, b)
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO sums (first_number, second_number, total) VALUES (?, ?, ?)",
                record.as_row(),
            )
            conn.commit()
            row = conn.execute("SELECT COUNT(total) AS n FROM sums").fetchone()
        return row["n"]

    def reset_all(self) -> int:
        """Delete every recorded sum. Returns the number of rows removed."""
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM sums")
            conn.commit()
            deleted = cur.rowcount
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def count_sums(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM sums").fetchone()
        return row["n"]

    def list_sums(self) -> list[SumRecord]:
        """All recorded sums in insertion order."""
        with self._connect() as conn:
            cur = conn.execute(
                "SELECT id, first_number, second_number, total FROM sums ORDER BY id"
            )
            rows = [SumRecord(**dict(r)) for r in cur.fetchall()]
        return rows


if __name__ == "__main__":
    from api.config import settings

    store = SumStore(settings.DB_PATH, timeout=settings.DB_TIMEOUT)
    store.ensure_schema()
    print(f"Schema ready: {store.db_path} ({store.count_sums()} rows)")
