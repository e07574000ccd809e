"""Withdrawal endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_ledger
from microtask_ledger_service.routers.validation import parse_json_body, require_int, require_str

router = APIRouter()


# === POST /withdrawals: Request Cash-out ===


@router.post("/withdrawals", status_code=201)
async def request_withdrawal(request: Request) -> JSONResponse:
    """Debit the worker's coins and queue a withdrawal for approval."""
    data = parse_json_body(await request.body())
    worker_email = require_str(data, "worker_email")
    withdrawal_coin = require_int(data, "withdrawal_coin")
    payment_system = require_str(data, "payment_system")
    account_number = require_str(data, "account_number")

    ledger = get_ledger()
    result = await run_in_threadpool(
        ledger.request_withdrawal,
        worker_email,
        withdrawal_coin,
        payment_system,
        account_number,
    )
    return JSONResponse(status_code=201, content=result)


# === GET /withdrawals: List ===


@router.get("/withdrawals")
async def list_withdrawals(request: Request) -> dict[str, Any]:
    """List withdrawals filtered by worker_email and/or status."""
    params = request.query_params
    ledger = get_ledger()
    withdrawals = await run_in_threadpool(
        ledger.list_withdrawals,
        worker_email=params.get("worker_email"),
        status=params.get("status"),
    )
    return {"withdrawals": withdrawals}


# === GET /withdrawals/{withdrawal_id} ===


@router.get("/withdrawals/{withdrawal_id}")
async def get_withdrawal(withdrawal_id: str) -> dict[str, Any]:
    """Fetch a single withdrawal."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.get_withdrawal, withdrawal_id)


# === POST /withdrawals/{withdrawal_id}/approve: Admin Sign-off ===


@router.post("/withdrawals/{withdrawal_id}/approve")
async def approve_withdrawal(withdrawal_id: str) -> dict[str, Any]:
    """Mark a pending withdrawal as paid out. No balance change."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.approve_withdrawal, withdrawal_id)
