"""SQLite-backed user balances and the append-only coin transaction log."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any, cast

from microtask_ledger_service.services.models import MAX_BALANCE, new_id, now_iso

if TYPE_CHECKING:
    from microtask_ledger_service.services.database import Database
    from microtask_ledger_service.services.models import TransactionType


class DuplicateUserError(Exception):
    """Raised when registering an email that already has an account."""


class BalanceLimitError(Exception):
    """Raised when a credit would push a balance past MAX_BALANCE."""


class AccountStore:
    """
    Coin account storage.

    Balance mutations run on the caller's connection and are meant to be
    called inside ``Database.transaction()`` so that the balance change
    and its transaction log entry commit together.
    """

    _USER_COLUMNS: tuple[str, ...] = ("email", "name", "photo_url", "role", "coins", "created_at")

    def __init__(self, database: Database) -> None:
        self._database = database

    def _row_to_user(self, row: sqlite3.Row) -> dict[str, Any]:
        return {column: row[column] for column in self._USER_COLUMNS}

    def insert_user(self, user: dict[str, Any]) -> None:
        """Insert a new user row."""
        values = tuple(user[column] for column in self._USER_COLUMNS)
        try:
            self._database.connection().execute(
                "INSERT INTO users (email, name, photo_url, role, coins, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                values,
            )
        except sqlite3.IntegrityError as exc:
            if "unique" in str(exc).lower():
                raise DuplicateUserError(f"User already exists: {user['email']}") from exc
            raise

    def get_user(self, email: str) -> dict[str, Any] | None:
        """Look up a user by email. Returns None if not found."""
        row = (
            self._database.connection()
            .execute(
                "SELECT email, name, photo_url, role, coins, created_at FROM users WHERE email = ?",
                (email,),
            )
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_user(row)

    def credit(
        self,
        email: str,
        amount: int,
        tx_type: TransactionType,
        reference: str,
    ) -> int | None:
        """
        Add coins to a balance and log the transaction.

        Returns:
            The new balance, or None if the user does not exist.

        Raises:
            BalanceLimitError: If the new balance would exceed MAX_BALANCE.
        """
        conn = self._database.connection()
        cursor = conn.execute(
            "UPDATE users SET coins = coins + ? WHERE email = ? AND coins <= ? - ?",
            (amount, email, MAX_BALANCE, amount),
        )
        if cursor.rowcount == 0:
            if self.get_user(email) is not None:
                raise BalanceLimitError(f"Balance limit reached for {email}")
            return None
        balance = self._read_balance(conn, email)
        self._append_transaction(conn, email, tx_type, amount, balance, reference)
        return balance

    def debit(
        self,
        email: str,
        amount: int,
        tx_type: TransactionType,
        reference: str,
    ) -> int | None:
        """
        Remove coins from a balance only if it covers the amount.

        The sufficiency check and the decrement are a single statement.

        Returns:
            The new balance, or None if the user does not exist or the
            balance is below ``amount``.
        """
        conn = self._database.connection()
        cursor = conn.execute(
            "UPDATE users SET coins = coins - ? WHERE email = ? AND coins >= ?",
            (amount, email, amount),
        )
        if cursor.rowcount == 0:
            return None
        balance = self._read_balance(conn, email)
        self._append_transaction(conn, email, tx_type, amount, balance, reference)
        return balance

    def _read_balance(self, conn: sqlite3.Connection, email: str) -> int:
        row = conn.execute("SELECT coins FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            msg = "User not found after balance update"
            raise RuntimeError(msg)
        return cast("int", row[0])

    def _append_transaction(
        self,
        conn: sqlite3.Connection,
        email: str,
        tx_type: TransactionType,
        amount: int,
        balance_after: int,
        reference: str,
    ) -> None:
        conn.execute(
            "INSERT INTO coin_transactions "
            "(tx_id, email, type, amount, balance_after, reference, timestamp) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (new_id("tx"), email, str(tx_type), amount, balance_after, reference, now_iso()),
        )

    def list_transactions(self, email: str) -> list[dict[str, Any]]:
        """Transaction history for a user, oldest first."""
        rows = (
            self._database.connection()
            .execute(
                "SELECT tx_id, type, amount, balance_after, reference, timestamp "
                "FROM coin_transactions WHERE email = ? ORDER BY timestamp, rowid",
                (email,),
            )
            .fetchall()
        )
        return [
            {
                "tx_id": row["tx_id"],
                "type": row["type"],
                "amount": row["amount"],
                "balance_after": row["balance_after"],
                "reference": row["reference"],
                "timestamp": row["timestamp"],
            }
            for row in rows
        ]

    def count_users(self) -> int:
        """Count registered users."""
        row = self._database.connection().execute("SELECT COUNT(*) FROM users").fetchone()
        return int(row[0]) if row is not None else 0

    def total_coins(self) -> int:
        """Sum of all user balances."""
        row = (
            self._database.connection()
            .execute("SELECT COALESCE(SUM(coins), 0) FROM users")
            .fetchone()
        )
        return int(row[0]) if row is not None else 0
