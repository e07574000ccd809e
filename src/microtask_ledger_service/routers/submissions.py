"""Submission review endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from microtask_ledger_service.core.state import get_ledger
from microtask_ledger_service.routers.validation import parse_json_body, require_int, require_str

router = APIRouter()


@router.get("/submissions")
async def list_submissions(request: Request) -> dict[str, Any]:
    """List submissions filtered by task_id, worker_email, buyer_email, or status."""
    params = request.query_params
    ledger = get_ledger()
    submissions = await run_in_threadpool(
        ledger.list_submissions,
        task_id=params.get("task_id"),
        worker_email=params.get("worker_email"),
        buyer_email=params.get("buyer_email"),
        status=params.get("status"),
    )
    return {"submissions": submissions}


@router.get("/submissions/{submission_id}")
async def get_submission(submission_id: str) -> dict[str, Any]:
    """Fetch a single submission."""
    ledger = get_ledger()
    return await run_in_threadpool(ledger.get_submission, submission_id)


@router.post("/submissions/{submission_id}/approve")
async def approve_submission(submission_id: str, request: Request) -> dict[str, Any]:
    """Approve a pending submission and pay the worker."""
    data = parse_json_body(await request.body())
    reviewer_email = require_str(data, "reviewer_email")
    worker_email = require_str(data, "worker_email")
    payable_amount = require_int(data, "payable_amount")

    ledger = get_ledger()
    return await run_in_threadpool(
        ledger.approve_submission,
        submission_id,
        reviewer_email,
        worker_email,
        payable_amount,
    )


@router.post("/submissions/{submission_id}/reject")
async def reject_submission(submission_id: str, request: Request) -> dict[str, Any]:
    """Reject a pending submission and return its slot to the task."""
    data = parse_json_body(await request.body())
    reviewer_email = require_str(data, "reviewer_email")

    ledger = get_ledger()
    return await run_in_threadpool(ledger.reject_submission, submission_id, reviewer_email)
