"""SQLite-backed withdrawal storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from microtask_ledger_service.services.models import WithdrawalStatus

if TYPE_CHECKING:
    import sqlite3

    from microtask_ledger_service.services.database import Database


class WithdrawalStore:
    """Storage for worker cash-out requests."""

    _COLUMNS: tuple[str, ...] = (
        "withdrawal_id",
        "worker_email",
        "withdrawal_coin",
        "payment_system",
        "account_number",
        "status",
        "requested_at",
        "approved_at",
    )
    _COLUMNS_SQL = (
        "withdrawal_id, worker_email, withdrawal_coin, payment_system, account_number, "
        "status, requested_at, approved_at"
    )

    def __init__(self, database: Database) -> None:
        self._database = database

    def _row_to_withdrawal(self, row: sqlite3.Row) -> dict[str, Any]:
        return {column: row[column] for column in self._COLUMNS}

    def insert_withdrawal(self, withdrawal: dict[str, Any]) -> None:
        """Insert a new withdrawal row."""
        values = tuple(withdrawal[column] for column in self._COLUMNS)
        self._database.connection().execute(
            "INSERT INTO withdrawals (" + self._COLUMNS_SQL + ") "  # nosec B608
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            values,
        )

    def get_withdrawal(self, withdrawal_id: str) -> dict[str, Any] | None:
        """Fetch a withdrawal by ID."""
        row = (
            self._database.connection()
            .execute(
                "SELECT " + self._COLUMNS_SQL + " FROM withdrawals "  # nosec B608
                "WHERE withdrawal_id = ?",
                (withdrawal_id,),
            )
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_withdrawal(row)

    def list_withdrawals(
        self,
        *,
        worker_email: str | None,
        status: WithdrawalStatus | None,
    ) -> list[dict[str, Any]]:
        """List withdrawals with optional filters, newest first."""
        query = "SELECT " + self._COLUMNS_SQL + " FROM withdrawals"  # nosec B608
        clauses: list[str] = []
        params: list[object] = []

        if worker_email is not None:
            clauses.append("worker_email = ?")
            params.append(worker_email)
        if status is not None:
            clauses.append("status = ?")
            params.append(str(status))

        if len(clauses) > 0:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY requested_at DESC"

        rows = self._database.connection().execute(query, params).fetchall()
        return [self._row_to_withdrawal(row) for row in rows]

    def mark_approved(self, withdrawal_id: str, approved_at: str) -> int:
        """Approve a withdrawal that is still pending."""
        cursor = self._database.connection().execute(
            "UPDATE withdrawals SET status = ?, approved_at = ? "
            "WHERE withdrawal_id = ? AND status = ?",
            (
                str(WithdrawalStatus.APPROVED),
                approved_at,
                withdrawal_id,
                str(WithdrawalStatus.PENDING),
            ),
        )
        return int(cursor.rowcount)

    def total_pending(self) -> int:
        """Sum of coins held by pending withdrawals."""
        row = (
            self._database.connection()
            .execute(
                "SELECT COALESCE(SUM(withdrawal_coin), 0) FROM withdrawals WHERE status = ?",
                (str(WithdrawalStatus.PENDING),),
            )
            .fetchone()
        )
        return int(row[0]) if row is not None else 0
