"""Shared builders for ledger tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from microtask_ledger_service.services import (
    AccountStore,
    Database,
    LedgerEngine,
    PurchaseStore,
    SubmissionStore,
    TaskStore,
    WithdrawalStore,
)
from microtask_ledger_service.services.models import UserRole

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_GRANTS: dict[UserRole, int] = {
    UserRole.WORKER: 10,
    UserRole.BUYER: 50,
    UserRole.ADMIN: 0,
}


def make_database(tmp_path: Path) -> Database:
    """Open a fresh ledger database under tmp_path."""
    return Database(db_path=str(tmp_path / "microtask-ledger.db"), busy_timeout_ms=5000)


def make_engine(database: Database, grants: dict[UserRole, int] | None = None) -> LedgerEngine:
    """Wire every store onto one database, the same way startup does."""
    return LedgerEngine(
        database=database,
        accounts=AccountStore(database),
        tasks=TaskStore(database),
        submissions=SubmissionStore(database),
        withdrawals=WithdrawalStore(database),
        purchases=PurchaseStore(database),
        initial_grants=grants if grants is not None else dict(DEFAULT_GRANTS),
    )


def task_payload(buyer_email: str, **overrides: Any) -> dict[str, Any]:
    """Keyword arguments for LedgerEngine.post_task with sensible defaults."""
    payload: dict[str, Any] = {
        "buyer_email": buyer_email,
        "task_title": "Label 20 photos",
        "task_detail": "Tag each photo with the animals you can see",
        "submission_info": "Paste a link to the labelled spreadsheet",
        "completion_date": "2026-12-31",
        "required_workers": 2,
        "payable_amount": 5,
    }
    payload.update(overrides)
    return payload


def write_config(tmp_path: Path, *, db_path: str | None = None, max_body_size: int = 1048576) -> Path:
    """Write a complete config.yaml under tmp_path and return its path."""
    database_path = db_path if db_path is not None else str(tmp_path / "test.db")
    config_content = f"""
service:
  name: "microtask-ledger"
  version: "0.1.0"
server:
  host: "127.0.0.1"
  port: 8010
  log_level: "info"
logging:
  level: "WARNING"
  directory: "{tmp_path / "logs"}"
database:
  path: "{database_path}"
  busy_timeout_ms: 5000
request:
  max_body_size: {max_body_size}
registration:
  worker_initial_coins: 10
  buyer_initial_coins: 50
  admin_initial_coins: 0
"""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(config_content)
    return config_path
