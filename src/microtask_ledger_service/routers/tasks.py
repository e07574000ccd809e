"""Task lifecycle endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_ledger
from microtask_ledger_service.routers.validation import (
    optional_int,
    optional_str,
    parse_json_body,
    require_int,
    require_str,
)

router = APIRouter()

_EDITABLE_FIELDS = ("task_title", "task_detail", "submission_info")


# ---------------------------------------------------------------------------
# POST /tasks: post a task and escrow its cost
# ---------------------------------------------------------------------------


@router.post("/tasks", status_code=201)
async def post_task(request: Request) -> JSONResponse:
    """Post a task, debiting the buyer for every slot up front."""
    data = parse_json_body(await request.body())

    ledger = get_ledger()
    result = await run_in_threadpool(
        ledger.post_task,
        buyer_email=require_str(data, "buyer_email"),
        task_title=require_str(data, "task_title"),
        task_detail=require_str(data, "task_detail"),
        submission_info=require_str(data, "submission_info"),
        completion_date=require_str(data, "completion_date"),
        required_workers=require_int(data, "required_workers"),
        payable_amount=require_int(data, "payable_amount"),
        task_image_url=optional_str(data, "task_image_url"),
        total_cost=optional_int(data, "total_cost"),
    )
    return JSONResponse(status_code=201, content=result)


# ---------------------------------------------------------------------------
# GET /tasks/buyer/{email}: a buyer's tasks
# ---------------------------------------------------------------------------


@router.get("/tasks/buyer/{email}")
async def list_buyer_tasks(email: str) -> dict[str, Any]:
    """List a buyer's tasks, latest completion date first."""
    ledger = get_ledger()
    tasks = await run_in_threadpool(ledger.list_buyer_tasks, email)
    return {"buyer_email": email, "tasks": tasks}


# ---------------------------------------------------------------------------
# /tasks/{task_id}
# ---------------------------------------------------------------------------


@router.get("/tasks/{task_id}")
async def get_task(task_id: str) -> dict[str, Any]:
    """Fetch a single task."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.get_task, task_id)


@router.patch("/tasks/{task_id}")
async def update_task(task_id: str, request: Request) -> dict[str, Any]:
    """Edit a task's descriptive fields."""
    data = parse_json_body(await request.body())
    updates: dict[str, str] = {}
    for field_name in _EDITABLE_FIELDS:
        value = optional_str(data, field_name)
        if value is not None:
            updates[field_name] = value

    ledger = get_ledger()
    return await run_in_threadpool(ledger.update_task, task_id, updates)


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: str) -> dict[str, Any]:
    """Delete a task and refund the buyer for its open slots."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.delete_task, task_id)


@router.post("/tasks/{task_id}/complete")
async def complete_task(task_id: str) -> dict[str, Any]:
    """Close a task to new submissions and refund its open slots."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.complete_task, task_id)


# ---------------------------------------------------------------------------
# POST /tasks/{task_id}/submissions: claim a slot
# ---------------------------------------------------------------------------


@router.post("/tasks/{task_id}/submissions", status_code=201)
async def claim_slot(task_id: str, request: Request) -> JSONResponse:
    """Submit work against a task, consuming one of its slots."""
    data = parse_json_body(await request.body())
    worker_email = require_str(data, "worker_email")
    submission_details = require_str(data, "submission_details")

    ledger = get_ledger()
    result = await run_in_threadpool(ledger.claim_slot, task_id, worker_email, submission_details)
    return JSONResponse(status_code=201, content=result)
