"""API routers."""

from microtask_ledger_service.routers import (
    health,
    payments,
    submissions,
    tasks,
    users,
    withdrawals,
)

__all__ = ["health", "payments", "submissions", "tasks", "users", "withdrawals"]
