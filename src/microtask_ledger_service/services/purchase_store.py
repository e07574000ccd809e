"""SQLite-backed record of confirmed coin purchases."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from microtask_ledger_service.services.database import Database


class DuplicatePurchaseError(Exception):
    """Raised when a payment transaction id has already been recorded."""


class PurchaseStore:
    """Append-only purchase records keyed by the gateway's transaction id."""

    _COLUMNS: tuple[str, ...] = (
        "purchase_id",
        "email",
        "coins",
        "amount",
        "transaction_id",
        "paid_at",
    )

    def __init__(self, database: Database) -> None:
        self._database = database

    def _row_to_purchase(self, row: sqlite3.Row) -> dict[str, Any]:
        return {column: row[column] for column in self._COLUMNS}

    def insert_purchase(self, purchase: dict[str, Any]) -> None:
        """Insert a purchase record."""
        values = tuple(purchase[column] for column in self._COLUMNS)
        try:
            self._database.connection().execute(
                "INSERT INTO purchases (purchase_id, email, coins, amount, transaction_id, paid_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                values,
            )
        except sqlite3.IntegrityError as exc:
            if "unique" in str(exc).lower():
                raise DuplicatePurchaseError(
                    f"Transaction already recorded: {purchase['transaction_id']}"
                ) from exc
            raise

    def get_by_transaction_id(self, transaction_id: str) -> dict[str, Any] | None:
        """Look up a purchase by payment transaction id."""
        row = (
            self._database.connection()
            .execute(
                "SELECT purchase_id, email, coins, amount, transaction_id, paid_at "
                "FROM purchases WHERE transaction_id = ?",
                (transaction_id,),
            )
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_purchase(row)

    def list_purchases(self, email: str) -> list[dict[str, Any]]:
        """Purchase history for a user, newest first."""
        rows = (
            self._database.connection()
            .execute(
                "SELECT purchase_id, email, coins, amount, transaction_id, paid_at "
                "FROM purchases WHERE email = ? ORDER BY paid_at DESC",
                (email,),
            )
            .fetchall()
        )
        return [self._row_to_purchase(row) for row in rows]
