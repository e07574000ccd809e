"""Shared SQLite handle with explicit transactions for the ledger stores."""

from __future__ import annotations

import contextlib
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from microtask_ledger_service.core.exceptions import ServiceError
from microtask_ledger_service.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    email TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    photo_url TEXT,
    role TEXT NOT NULL,
    coins INTEGER NOT NULL DEFAULT 0 CHECK (typeof(coins) = 'integer' AND coins >= 0),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS coin_transactions (
    tx_id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    type TEXT NOT NULL,
    amount INTEGER NOT NULL CHECK (amount > 0),
    balance_after INTEGER NOT NULL,
    reference TEXT NOT NULL,
    timestamp TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS tasks (
    task_id TEXT PRIMARY KEY,
    buyer_email TEXT NOT NULL,
    task_title TEXT NOT NULL,
    task_detail TEXT NOT NULL,
    submission_info TEXT NOT NULL,
    task_image_url TEXT,
    completion_date TEXT NOT NULL,
    required_workers INTEGER NOT NULL CHECK (required_workers >= 0),
    initial_workers INTEGER NOT NULL CHECK (initial_workers > 0),
    payable_amount INTEGER NOT NULL CHECK (payable_amount > 0),
    total_cost INTEGER NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    CHECK (required_workers <= initial_workers)
);

CREATE TABLE IF NOT EXISTS submissions (
    submission_id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    task_title TEXT NOT NULL,
    buyer_email TEXT NOT NULL,
    worker_email TEXT NOT NULL,
    submission_details TEXT NOT NULL,
    payable_amount INTEGER NOT NULL CHECK (payable_amount > 0),
    status TEXT NOT NULL,
    submitted_at TEXT NOT NULL,
    reviewed_at TEXT
);

CREATE TABLE IF NOT EXISTS withdrawals (
    withdrawal_id TEXT PRIMARY KEY,
    worker_email TEXT NOT NULL,
    withdrawal_coin INTEGER NOT NULL CHECK (withdrawal_coin > 0),
    payment_system TEXT NOT NULL,
    account_number TEXT NOT NULL,
    status TEXT NOT NULL,
    requested_at TEXT NOT NULL,
    approved_at TEXT
);

CREATE TABLE IF NOT EXISTS purchases (
    purchase_id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    coins INTEGER NOT NULL CHECK (coins > 0),
    amount REAL,
    transaction_id TEXT NOT NULL UNIQUE,
    paid_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_coin_transactions_email_timestamp
    ON coin_transactions(email, timestamp, tx_id);
CREATE INDEX IF NOT EXISTS ix_tasks_buyer ON tasks(buyer_email);
CREATE INDEX IF NOT EXISTS ix_submissions_task ON submissions(task_id);
CREATE INDEX IF NOT EXISTS ix_submissions_worker ON submissions(worker_email);
CREATE INDEX IF NOT EXISTS ix_submissions_buyer ON submissions(buyer_email);
CREATE INDEX IF NOT EXISTS ix_withdrawals_worker ON withdrawals(worker_email);
CREATE INDEX IF NOT EXISTS ix_purchases_email ON purchases(email);
"""


def _is_lock_contention(exc: sqlite3.OperationalError) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


def _to_service_error(exc: sqlite3.Error) -> ServiceError:
    """Map a storage failure onto the engine's error kinds."""
    if isinstance(exc, sqlite3.OperationalError) and _is_lock_contention(exc):
        return ServiceError(
            "CONFLICT",
            "Concurrent update in progress, retry the request",
            409,
            {},
        )
    return ServiceError(
        "STORAGE_UNAVAILABLE",
        "Storage is unavailable",
        503,
        {"reason": str(exc)},
    )


class Database:
    """
    Process-wide SQLite handle shared by all ledger stores.

    Each thread gets its own connection, so requests running in the
    threadpool never queue behind a Python lock; SQLite's writer slot
    (BEGIN IMMEDIATE plus busy_timeout) is the only serialization point.
    Created once at startup and closed at shutdown.
    """

    def __init__(self, db_path: str, busy_timeout_ms: int) -> None:
        self._db_path = db_path
        self._busy_timeout_ms = busy_timeout_ms
        self._local = threading.local()
        self._connections: list[sqlite3.Connection] = []
        self._registry_lock = threading.Lock()
        self._closed = False
        self._logger = get_logger(__name__)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        with self._storage_errors():
            self.connection().executescript(_SCHEMA)

    def connection(self) -> sqlite3.Connection:
        """
        Return the calling thread's connection, opening it on first use.

        Stores run their statements on this connection; inside
        ``transaction()`` they all join the open transaction.
        """
        if self._closed:
            raise ServiceError("STORAGE_UNAVAILABLE", "Database is closed", 503, {})
        conn: sqlite3.Connection | None = getattr(self._local, "connection", None)
        if conn is not None:
            return conn

        with self._registry_lock:
            if self._closed:
                raise ServiceError("STORAGE_UNAVAILABLE", "Database is closed", 503, {})
            try:
                conn = sqlite3.connect(
                    self._db_path,
                    timeout=self._busy_timeout_ms / 1000,
                    isolation_level=None,
                    check_same_thread=False,
                )
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute(f"PRAGMA busy_timeout={int(self._busy_timeout_ms)}")
            except sqlite3.Error as exc:
                raise _to_service_error(exc) from exc
            self._connections.append(conn)

        self._local.connection = conn
        return conn

    @contextmanager
    def _storage_errors(self) -> Iterator[None]:
        try:
            yield
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as exc:
            raise _to_service_error(exc) from exc

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block as one all-or-nothing write transaction.

        Commits when the block returns; rolls back on any exception and
        re-raises it. Lock contention surfaces as CONFLICT, any other
        storage failure as STORAGE_UNAVAILABLE.
        """
        conn = self.connection()
        if conn.in_transaction:
            msg = "Nested ledger transactions are not supported"
            raise RuntimeError(msg)

        with self._storage_errors():
            conn.execute("BEGIN IMMEDIATE")

        try:
            with self._storage_errors():
                yield conn
                conn.execute("COMMIT")
        except BaseException:
            with contextlib.suppress(sqlite3.Error):
                conn.execute("ROLLBACK")
            raise

    @contextmanager
    def read(self) -> Iterator[sqlite3.Connection]:
        """
        Run read-only statements against one consistent snapshot.

        A deferred transaction pins the WAL snapshot at the first SELECT,
        so multi-statement reads never mix states from concurrent writers.
        Storage errors map the same way as in ``transaction()``.
        """
        conn = self.connection()
        if conn.in_transaction:
            with self._storage_errors():
                yield conn
            return

        with self._storage_errors():
            conn.execute("BEGIN DEFERRED")

        try:
            with self._storage_errors():
                yield conn
        finally:
            with contextlib.suppress(sqlite3.Error):
                conn.execute("COMMIT")

    def close(self) -> None:
        """Close every connection opened by any thread."""
        with self._registry_lock:
            self._closed = True
            connections = list(self._connections)
            self._connections.clear()
        for conn in connections:
            with contextlib.suppress(sqlite3.Error):
                conn.close()
        self._logger.debug("Database closed", extra={"connections": len(connections)})
