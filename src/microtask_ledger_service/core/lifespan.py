"""Application lifecycle management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from microtask_ledger_service.config import get_settings
from microtask_ledger_service.core.state import init_app_state
from microtask_ledger_service.logging import get_logger, setup_logging
from microtask_ledger_service.services.account_store import AccountStore
from microtask_ledger_service.services.database import Database
from microtask_ledger_service.services.ledger_engine import LedgerEngine
from microtask_ledger_service.services.models import UserRole
from microtask_ledger_service.services.purchase_store import PurchaseStore
from microtask_ledger_service.services.submission_store import SubmissionStore
from microtask_ledger_service.services.task_store import TaskStore
from microtask_ledger_service.services.withdrawal_store import WithdrawalStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    # === STARTUP ===
    settings = get_settings()

    setup_logging(settings.logging.level, settings.service.name, settings.logging.directory)
    logger = get_logger(__name__)

    state = init_app_state()

    database = Database(
        db_path=settings.database.path,
        busy_timeout_ms=settings.database.busy_timeout_ms,
    )
    state.database = database

    registration = settings.registration
    state.ledger = LedgerEngine(
        database=database,
        accounts=AccountStore(database),
        tasks=TaskStore(database),
        submissions=SubmissionStore(database),
        withdrawals=WithdrawalStore(database),
        purchases=PurchaseStore(database),
        initial_grants={
            UserRole.WORKER: registration.worker_initial_coins,
            UserRole.BUYER: registration.buyer_initial_coins,
            UserRole.ADMIN: registration.admin_initial_coins,
        },
    )

    logger.info(
        "Service starting",
        extra={
            "service": settings.service.name,
            "version": settings.service.version,
            "port": settings.server.port,
            "db_path": settings.database.path,
        },
    )

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Service shutting down", extra={"uptime_seconds": state.uptime_seconds})
    database.close()
