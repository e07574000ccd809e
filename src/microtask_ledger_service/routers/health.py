"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_app_state
from microtask_ledger_service.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health and return ledger statistics."""
    state = get_app_state()
    stats: dict[str, object] = {
        "total_users": 0,
        "coins_in_circulation": 0,
        "pending_withdrawal_coins": 0,
        "tasks_by_status": {},
        "submissions_by_status": {},
    }
    if state.ledger is not None:
        stats = await run_in_threadpool(state.ledger.get_stats)
    return HealthResponse(
        status="ok",
        uptime_seconds=state.uptime_seconds,
        started_at=state.started_at,
        **stats,  # type: ignore[arg-type]
    )
