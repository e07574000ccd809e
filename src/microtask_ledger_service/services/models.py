"""Closed enumerations for entity states and shared id/timestamp helpers."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum


# Largest coin amount a single operation may move, escrow products included.
MAX_AMOUNT = 1_000_000_000

# Largest balance a user may hold; below 2**53, so balances stay exact JSON integers.
MAX_BALANCE = 1_000_000_000_000_000


class UserRole(StrEnum):
    """Marketplace role; decides the starting coin grant."""

    WORKER = "Worker"
    BUYER = "Buyer"
    ADMIN = "Admin"


class TaskStatus(StrEnum):
    """Task lifecycle. Only ACTIVE tasks accept submissions or take back slots."""

    ACTIVE = "active"
    COMPLETED = "completed"

    @property
    def is_open(self) -> bool:
        return self is TaskStatus.ACTIVE


class SubmissionStatus(StrEnum):
    """Review state. PENDING moves to APPROVED or REJECTED exactly once."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WithdrawalStatus(StrEnum):
    """Cash-out state. Coins leave the balance at request time, not at approval."""

    PENDING = "pending"
    APPROVED = "approved"


class TransactionType(StrEnum):
    """Reason recorded for every balance change in the coin transaction log."""

    INITIAL_GRANT = "initial_grant"
    PURCHASE = "purchase"
    TASK_ESCROW = "task_escrow"
    TASK_REFUND = "task_refund"
    SUBMISSION_PAYOUT = "submission_payout"
    WITHDRAWAL = "withdrawal"


def now_iso() -> str:
    """Return current UTC time as ISO 8601 string with Z suffix."""
    return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


def new_id(prefix: str) -> str:
    """Generate an opaque entity id such as ``t-<uuid4>``."""
    return f"{prefix}-{uuid.uuid4()}"
