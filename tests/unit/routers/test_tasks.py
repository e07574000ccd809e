"""Task endpoint tests."""

from __future__ import annotations

import pytest


def _task_body(buyer_email: str, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "buyer_email": buyer_email,
        "task_title": "Review an app",
        "task_detail": "Install it and leave an honest review",
        "submission_info": "Screenshot of the review",
        "completion_date": "2026-11-30",
        "required_workers": 3,
        "payable_amount": 5,
    }
    body.update(overrides)
    return body


@pytest.mark.unit
class TestPostTask:
    """Tests for POST /tasks."""

    async def test_post_task_escrows_cost(self, client, buyer):
        response = await client.post("/tasks", json=_task_body(buyer["email"], total_cost=15))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "active"
        assert data["total_cost"] == 15
        assert data["initial_workers"] == 3

        balance = (await client.get(f"/users/{buyer['email']}")).json()["coins"]
        assert balance == 35

    async def test_insufficient_balance(self, client, buyer):
        response = await client.post(
            "/tasks", json=_task_body(buyer["email"], required_workers=20)
        )
        assert response.status_code == 402
        body = response.json()
        assert body["error"] == "INSUFFICIENT_BALANCE"
        assert body["details"] == {"balance": 50, "required": 100}

    async def test_total_cost_mismatch(self, client, buyer):
        response = await client.post("/tasks", json=_task_body(buyer["email"], total_cost=1))
        assert response.status_code == 409
        assert response.json()["error"] == "INCONSISTENT"

    @pytest.mark.parametrize("bad", ["3", 1.5, True, 0])
    async def test_bad_slot_count(self, client, buyer, bad):
        response = await client.post(
            "/tasks", json=_task_body(buyer["email"], required_workers=bad)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_AMOUNT"

    @pytest.mark.parametrize(
        ("required_workers", "payable_amount"),
        [(2**40, 2**40), (2**70, 1), (3, 10**20)],
    )
    async def test_oversized_amounts(self, client, buyer, required_workers, payable_amount):
        response = await client.post(
            "/tasks",
            json=_task_body(
                buyer["email"],
                required_workers=required_workers,
                payable_amount=payable_amount,
            ),
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_AMOUNT"
        balance = (await client.get(f"/users/{buyer['email']}")).json()["coins"]
        assert balance == 50

    async def test_wrong_content_type(self, client):
        response = await client.post("/tasks", content=b"x", headers={"content-type": "text/plain"})
        assert response.status_code == 415


@pytest.mark.unit
class TestTaskResource:
    """Tests for /tasks/{task_id} and the buyer listing."""

    async def test_get_task(self, client, task):
        response = await client.get(f"/tasks/{task['task_id']}")
        assert response.status_code == 200
        assert response.json() == task

    async def test_get_missing_task(self, client):
        response = await client.get("/tasks/t-missing")
        assert response.status_code == 404
        assert response.json()["details"] == {"entity": "Task", "id": "t-missing"}

    async def test_list_buyer_tasks(self, client, task, buyer):
        response = await client.get(f"/tasks/buyer/{buyer['email']}")
        assert response.status_code == 200
        data = response.json()
        assert data["buyer_email"] == buyer["email"]
        assert [row["task_id"] for row in data["tasks"]] == [task["task_id"]]

    async def test_patch_task(self, client, task):
        response = await client.patch(
            f"/tasks/{task['task_id']}",
            json={"task_title": "Updated title", "required_workers": 99},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["task_title"] == "Updated title"
        assert data["required_workers"] == 2

    async def test_patch_with_nothing_editable(self, client, task):
        response = await client.patch(f"/tasks/{task['task_id']}", json={"payable_amount": 1})
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PAYLOAD"

    async def test_patch_with_empty_title(self, client, task):
        response = await client.patch(f"/tasks/{task['task_id']}", json={"task_title": ""})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "INVALID_PAYLOAD"
        assert body["details"] == {"field": "task_title"}
        assert (await client.get(f"/tasks/{task['task_id']}")).json() == task

    async def test_delete_refunds_open_slots(self, client, task, buyer):
        response = await client.delete(f"/tasks/{task['task_id']}")
        assert response.status_code == 200
        assert response.json() == {"task_id": task["task_id"], "deleted": True, "refund": 10}

        assert (await client.get(f"/users/{buyer['email']}")).json()["coins"] == 50
        assert (await client.get(f"/tasks/{task['task_id']}")).status_code == 404

    async def test_complete_then_claim(self, client, task, worker):
        response = await client.post(f"/tasks/{task['task_id']}/complete")
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["refund"] == 10

        response = await client.post(
            f"/tasks/{task['task_id']}/submissions",
            json={"worker_email": worker["email"], "submission_details": "late"},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "TASK_UNAVAILABLE"


@pytest.mark.unit
class TestClaimSlot:
    """Tests for POST /tasks/{task_id}/submissions."""

    async def test_claim_decrements_slots(self, client, submission, task):
        assert submission["status"] == "pending"
        assert submission["payable_amount"] == 5
        data = (await client.get(f"/tasks/{task['task_id']}")).json()
        assert data["required_workers"] == 1

    async def test_claim_missing_task(self, client, worker):
        response = await client.post(
            "/tasks/t-missing/submissions",
            json={"worker_email": worker["email"], "submission_details": "x"},
        )
        assert response.status_code == 404

    async def test_claim_requires_details(self, client, task, worker):
        response = await client.post(
            f"/tasks/{task['task_id']}/submissions",
            json={"worker_email": worker["email"]},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_PAYLOAD"
