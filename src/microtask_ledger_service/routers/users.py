"""User registration and balance endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_ledger
from microtask_ledger_service.routers.validation import optional_str, parse_json_body, require_str

router = APIRouter()


# === POST /users: Register ===


@router.post("/users", status_code=201)
async def register_user(request: Request) -> JSONResponse:
    """Register a user with the role's starting coin grant."""
    data = parse_json_body(await request.body())
    email = require_str(data, "email")
    name = require_str(data, "name")
    role = require_str(data, "role")
    photo_url = optional_str(data, "photo_url")

    ledger = get_ledger()
    result = await run_in_threadpool(ledger.register_user, email, name, role, photo_url)
    return JSONResponse(status_code=201, content=result)


# === GET /users/{email}: Profile and Balance ===


@router.get("/users/{email}")
async def get_user(email: str) -> dict[str, Any]:
    """Look up a user and their coin balance."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.get_user, email)


# === GET /users/{email}/transactions: Coin History ===


@router.get("/users/{email}/transactions")
async def get_transactions(email: str) -> dict[str, Any]:
    """List every balance change for a user, oldest first."""
    ledger = get_ledger()
    transactions = await run_in_threadpool(ledger.get_transactions, email)
    return {"email": email, "transactions": transactions}
