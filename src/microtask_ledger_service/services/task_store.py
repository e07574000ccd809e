"""SQLite-backed task storage with conditional slot updates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from microtask_ledger_service.services.models import TaskStatus

if TYPE_CHECKING:
    import sqlite3

    from microtask_ledger_service.services.database import Database


class TaskStore:
    """
    Storage for buyer-posted tasks.

    Slot changes are single conditional UPDATE statements; callers read
    the affected row count to learn whether the condition held.
    """

    _TASK_COLUMNS: tuple[str, ...] = (
        "task_id",
        "buyer_email",
        "task_title",
        "task_detail",
        "submission_info",
        "task_image_url",
        "completion_date",
        "required_workers",
        "initial_workers",
        "payable_amount",
        "total_cost",
        "status",
        "created_at",
    )
    _TASK_COLUMNS_SQL = (
        "task_id, buyer_email, task_title, task_detail, submission_info, task_image_url, "
        "completion_date, required_workers, initial_workers, payable_amount, total_cost, "
        "status, created_at"
    )
    _EDITABLE_COLUMNS: frozenset[str] = frozenset({"task_title", "task_detail", "submission_info"})

    def __init__(self, database: Database) -> None:
        self._database = database

    def _row_to_task(self, row: sqlite3.Row) -> dict[str, Any]:
        return {column: row[column] for column in self._TASK_COLUMNS}

    def insert_task(self, task_data: dict[str, Any]) -> None:
        """Insert a new task row."""
        values = tuple(task_data[column] for column in self._TASK_COLUMNS)
        self._database.connection().execute(
            "INSERT INTO tasks (" + self._TASK_COLUMNS_SQL + ") "  # nosec B608
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            values,
        )

    def get_task(self, task_id: str) -> dict[str, Any] | None:
        """Fetch a task by ID."""
        row = (
            self._database.connection()
            .execute(
                "SELECT " + self._TASK_COLUMNS_SQL + " FROM tasks WHERE task_id = ?",  # nosec B608
                (task_id,),
            )
            .fetchone()
        )
        if row is None:
            return None
        return self._row_to_task(row)

    def list_tasks_by_buyer(self, buyer_email: str) -> list[dict[str, Any]]:
        """List a buyer's tasks, latest completion date first."""
        rows = (
            self._database.connection()
            .execute(
                "SELECT " + self._TASK_COLUMNS_SQL + " FROM tasks "  # nosec B608
                "WHERE buyer_email = ? ORDER BY completion_date DESC, created_at DESC",
                (buyer_email,),
            )
            .fetchall()
        )
        return [self._row_to_task(row) for row in rows]

    def update_task_details(self, task_id: str, updates: dict[str, str]) -> int:
        """Update descriptive columns and return the number of affected rows."""
        if len(updates) == 0:
            return 0
        if any(column not in self._EDITABLE_COLUMNS for column in updates):
            msg = "Attempted to update a non-editable task column"
            raise ValueError(msg)

        set_clause = ", ".join(f"{column} = ?" for column in updates)
        params: list[object] = [*updates.values(), task_id]
        cursor = self._database.connection().execute(
            "UPDATE tasks SET " + set_clause + " WHERE task_id = ?",  # nosec B608
            params,
        )
        return int(cursor.rowcount)

    def claim_slot(self, task_id: str) -> int:
        """Take one slot if the task is active and has one left."""
        cursor = self._database.connection().execute(
            "UPDATE tasks SET required_workers = required_workers - 1 "
            "WHERE task_id = ? AND status = ? AND required_workers > 0",
            (task_id, str(TaskStatus.ACTIVE)),
        )
        return int(cursor.rowcount)

    def return_slot(self, task_id: str) -> int:
        """Give one slot back if the task still exists and is active."""
        cursor = self._database.connection().execute(
            "UPDATE tasks SET required_workers = required_workers + 1 "
            "WHERE task_id = ? AND status = ? AND required_workers < initial_workers",
            (task_id, str(TaskStatus.ACTIVE)),
        )
        return int(cursor.rowcount)

    def close_task(self, task_id: str, status: TaskStatus) -> int:
        """Move an active task to a closed status with no open slots."""
        cursor = self._database.connection().execute(
            "UPDATE tasks SET status = ?, required_workers = 0 WHERE task_id = ? AND status = ?",
            (str(status), task_id, str(TaskStatus.ACTIVE)),
        )
        return int(cursor.rowcount)

    def delete_task(self, task_id: str) -> int:
        """Delete a task row."""
        cursor = self._database.connection().execute(
            "DELETE FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        return int(cursor.rowcount)

    def count_tasks_by_status(self) -> dict[str, int]:
        """Count tasks grouped by status."""
        rows = (
            self._database.connection()
            .execute("SELECT status, COUNT(*) FROM tasks GROUP BY status")
            .fetchall()
        )
        return {str(row[0]): int(row[1]) for row in rows}
