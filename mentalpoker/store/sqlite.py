"""
SQLite-backed secret store.

Features
--------
- One row per (session_id, stage): ``secrets(session_id TEXT, stage TEXT, record BLOB)``
- Records are canonical CBOR (see :mod:`mentalpoker.store.records`).
- Safe transactions via context manager: ``with store.transaction(): ...``
- Pragmas tuned for a small local file (WAL, synchronous=FULL: a lost
  blinder makes a dealt card unrecoverable, so writes are flushed).
- Stdlib ``sqlite3`` only.

Example
-------
>>> store = SQLiteSecretStore("/tmp/mentalpoker_secrets.db")
>>> store.put("0x01", "dkg", Scalar(7))
>>> store.get("0x01", "dkg")
Scalar(0x0000000000000000000000000000000000000000000000000000000000000007)
>>> store.close()
"""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from ..errors import MissingLocalSecret
from ..group import Scalar
from .records import SecretRecord

logger = logging.getLogger(__name__)

__all__ = ["SQLiteSecretStore"]


# --- Helpers -----------------------------------------------------------------

def _ensure_dir(path: str) -> None:
    d = os.path.dirname(os.path.abspath(path))
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def _apply_pragmas(conn: sqlite3.Connection) -> None:
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=FULL;")
    conn.execute("PRAGMA temp_store=MEMORY;")


def _init_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS secrets (
            session_id TEXT NOT NULL,
            stage      TEXT NOT NULL,
            record     BLOB NOT NULL,
            PRIMARY KEY (session_id, stage)
        );
        """
    )


# --- Implementation -----------------------------------------------------------

class SQLiteSecretStore:
    """
    Durable implementation of the SecretStore protocol.

    Parameters
    ----------
    path : str
        File path to the SQLite database. Directories are created if needed.
        ``":memory:"`` is accepted for throwaway stores.
    timeout_s : float
        Busy timeout handed to sqlite3.connect.
    """

    def __init__(self, path: str, *, timeout_s: float = 30.0) -> None:
        self.path = path
        if path != ":memory:":
            _ensure_dir(path)
        # isolation_level=None -> autocommit mode; we manage BEGIN/COMMIT explicitly
        self._conn = sqlite3.connect(path, isolation_level=None, timeout=timeout_s)
        _apply_pragmas(self._conn)
        _init_schema(self._conn)

    # --- Context manager support --------------------------------------------

    def __enter__(self) -> "SQLiteSecretStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- SecretStore API -----------------------------------------------------

    def put(self, session_id: str, stage: str, secret: Scalar) -> None:
        record = SecretRecord(session_id, stage, secret).to_cbor()
        with self.transaction():
            cur = self._conn.execute(
                "SELECT 1 FROM secrets WHERE session_id = ? AND stage = ?", (session_id, stage)
            )
            if cur.fetchone() is not None:
                logger.warning("replacing stored secret for session=%s stage=%s", session_id, stage)
            self._conn.execute(
                "INSERT OR REPLACE INTO secrets(session_id, stage, record) VALUES(?, ?, ?)",
                (session_id, stage, record),
            )
        logger.info("stored secret for session=%s stage=%s", session_id, stage)

    def find(self, session_id: str, stage: str) -> Optional[Scalar]:
        cur = self._conn.execute(
            "SELECT record FROM secrets WHERE session_id = ? AND stage = ?", (session_id, stage)
        )
        row = cur.fetchone()
        return SecretRecord.from_cbor(bytes(row[0])).secret if row else None

    def get(self, session_id: str, stage: str) -> Scalar:
        secret = self.find(session_id, stage)
        if secret is None:
            raise MissingLocalSecret(session_id, stage)
        return secret

    def delete(self, session_id: str, stage: str) -> None:
        self._conn.execute(
            "DELETE FROM secrets WHERE session_id = ? AND stage = ?", (session_id, stage)
        )

    # --- Transactions --------------------------------------------------------

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """
        Begin a write transaction (IMMEDIATE). Commits on success, rolls back on error.

        A single connection should be used by a single thread.
        """
        self._conn.execute("BEGIN IMMEDIATE;")
        try:
            yield
        except BaseException:
            self._conn.execute("ROLLBACK;")
            raise
        else:
            self._conn.execute("COMMIT;")

    def close(self) -> None:
        self._conn.close()
