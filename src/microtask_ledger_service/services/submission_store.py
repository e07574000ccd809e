"""SQLite-backed submission storage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from microtask_ledger_service.services.models import SubmissionStatus

if TYPE_CHECKING:
    import sqlite3

    from microtask_ledger_service.services.database import Database


class SubmissionStore:
    """Storage for worker submissions and their review state."""

    _COLUMNS: tuple[str, ...] = (
        "submission_id",
        "task_id",
        "task_title",
        "buyer_email",
        "worker_email",
        "submission_details",
        "payable_amount",
        "status",
        "submitted_at",
        "reviewed_at",
    )
    _COLUMNS_SQL = (
        "submission_id, task_id, task_title, buyer_email, worker_email, submission_details, "
        "payable_amount, status, submitted_at, reviewed_at"
    )

    def __init__(self, database: Database) -> None:
        self._database = database

    def _row_to_submission(self, row: sqlite3.Row) -> dict[str, Any]:
        return {column: row[column] for column in self._COLUMNS}

    def insert_submission(self, submission: dict[str, Any]) -> None:
        """Insert a new submission row."""
        values = tuple(submission[column] for column in self._COLUMNS)
        self._database.connection().execute(
            "INSERT INTO submissions (" + self._COLUMNS_SQL + ") "  # nosec B608
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            values,
        )

    def get_submission(self, submission_id: str) -> dict[str, Any] | None:
        """Fetch a submission by ID."""
        row = (
            self._database.connection()
            .execute(
                "SELECT " + self._COLUMNS_SQL + " FROM submissions "  # nosec B608
                "WHERE submission_id = ?",
                (submission_id,),
            )
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_submission(row)

    def list_submissions(
        self,
        *,
        task_id: str | None,
        worker_email: str | None,
        buyer_email: str | None,
        status: SubmissionStatus | None,
    ) -> list[dict[str, Any]]:
        """List submissions with optional filters, newest first."""
        query = "SELECT " + self._COLUMNS_SQL + " FROM submissions"  # nosec B608
        clauses: list[str] = []
        params: list[object] = []

        if task_id is not None:
            clauses.append("task_id = ?")
            params.append(task_id)
        if worker_email is not None:
            clauses.append("worker_email = ?")
            params.append(worker_email)
        if buyer_email is not None:
            clauses.append("buyer_email = ?")
            params.append(buyer_email)
        if status is not None:
            clauses.append("status = ?")
            params.append(str(status))

        if len(clauses) > 0:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY submitted_at DESC"

        rows = self._database.connection().execute(query, params).fetchall()
        return [self._row_to_submission(row) for row in rows]

    def set_review_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        reviewed_at: str,
    ) -> int:
        """Move a still-pending submission to a terminal status."""
        cursor = self._database.connection().execute(
            "UPDATE submissions SET status = ?, reviewed_at = ? "
            "WHERE submission_id = ? AND status = ?",
            (str(status), reviewed_at, submission_id, str(SubmissionStatus.PENDING)),
        )
        return int(cursor.rowcount)

    def count_by_status(self) -> dict[str, int]:
        """Count submissions grouped by status."""
        rows = (
            self._database.connection()
            .execute("SELECT status, COUNT(*) FROM submissions GROUP BY status")
            .fetchall()
        )
        return {str(row[0]): int(row[1]) for row in rows}
