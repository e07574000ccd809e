"""Coin purchase endpoints, called once the payment gateway confirms a charge."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_ledger
from microtask_ledger_service.routers.validation import (
    optional_number,
    parse_json_body,
    require_int,
    require_str,
)

router = APIRouter()


@router.post("/payments", status_code=201)
async def record_payment(request: Request) -> JSONResponse:
    """Mint purchased coins, once per payment transaction id."""
    data = parse_json_body(await request.body())
    email = require_str(data, "email")
    coins = require_int(data, "coins")
    transaction_id = require_str(data, "transaction_id")
    amount = optional_number(data, "amount")

    ledger = get_ledger()
    result = await run_in_threadpool(ledger.mint_coins, email, coins, transaction_id, amount)
    return JSONResponse(status_code=201, content=result)


@router.get("/payments/{email}")
async def list_payments(email: str) -> dict[str, Any]:
    """Purchase history for a user, newest first."""
    ledger = get_ledger()
    purchases = await run_in_threadpool(ledger.list_purchases, email)
    return {"email": email, "payments": purchases}
