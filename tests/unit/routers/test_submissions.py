"""Submission review endpoint tests."""

from __future__ import annotations

import pytest


def _approval(submission: dict, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "reviewer_email": submission["buyer_email"],
        "worker_email": submission["worker_email"],
        "payable_amount": submission["payable_amount"],
    }
    body.update(overrides)
    return body


@pytest.mark.unit
class TestApprove:
    """Tests for POST /submissions/{id}/approve."""

    async def test_approve_pays_worker(self, client, submission):
        response = await client.post(
            f"/submissions/{submission['submission_id']}/approve", json=_approval(submission)
        )
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "approved"
        assert data["worker_balance"] == 15

    async def test_second_approve_conflicts(self, client, submission):
        url = f"/submissions/{submission['submission_id']}/approve"
        assert (await client.post(url, json=_approval(submission))).status_code == 200

        response = await client.post(url, json=_approval(submission))
        assert response.status_code == 409
        assert response.json()["error"] == "ALREADY_REVIEWED"

        worker = (await client.get(f"/users/{submission['worker_email']}")).json()
        assert worker["coins"] == 15

    async def test_amount_mismatch(self, client, submission):
        response = await client.post(
            f"/submissions/{submission['submission_id']}/approve",
            json=_approval(submission, payable_amount=50),
        )
        assert response.status_code == 409
        assert response.json()["error"] == "INCONSISTENT"

    async def test_missing_submission(self, client, submission):
        response = await client.post(
            "/submissions/s-missing/approve", json=_approval(submission)
        )
        assert response.status_code == 404


@pytest.mark.unit
class TestReject:
    """Tests for POST /submissions/{id}/reject."""

    async def test_reject_returns_slot(self, client, submission, task):
        response = await client.post(
            f"/submissions/{submission['submission_id']}/reject",
            json={"reviewer_email": submission["buyer_email"]},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["slot_returned"] is True

        data = (await client.get(f"/tasks/{task['task_id']}")).json()
        assert data["required_workers"] == 2

    async def test_reject_requires_reviewer(self, client, submission):
        response = await client.post(f"/submissions/{submission['submission_id']}/reject", json={})
        assert response.status_code == 400


@pytest.mark.unit
class TestSubmissionQueries:
    """Tests for GET /submissions and GET /submissions/{id}."""

    async def test_get_submission(self, client, submission):
        response = await client.get(f"/submissions/{submission['submission_id']}")
        assert response.status_code == 200
        assert response.json() == submission

    async def test_list_by_worker_and_status(self, client, submission):
        response = await client.get(
            "/submissions",
            params={"worker_email": submission["worker_email"], "status": "pending"},
        )
        assert response.status_code == 200
        rows = response.json()["submissions"]
        assert [row["submission_id"] for row in rows] == [submission["submission_id"]]

        response = await client.get("/submissions", params={"status": "approved"})
        assert response.json()["submissions"] == []

    async def test_list_bad_status(self, client):
        response = await client.get("/submissions", params={"status": "lost"})
        assert response.status_code == 400
