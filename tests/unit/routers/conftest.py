"""Router test fixtures backed by a temporary ledger database."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from microtask_ledger_service.app import create_app
from microtask_ledger_service.core.lifespan import lifespan
from tests.helpers import write_config


@pytest.fixture
async def app(tmp_path, monkeypatch):
    """Create a test app with a temporary database."""
    config_path = write_config(tmp_path, max_body_size=4096)
    monkeypatch.setenv("CONFIG_PATH", str(config_path))

    test_app = create_app()
    async with lifespan(test_app):
        yield test_app


@pytest.fixture
async def client(app):
    """Create an async HTTP client for the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def _register(client: AsyncClient, email: str, role: str) -> dict:
    response = await client.post("/users", json={"email": email, "name": role, "role": role})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def buyer(client):
    """A registered buyer holding the 50-coin grant."""
    return await _register(client, "buyer@example.com", "Buyer")


@pytest.fixture
async def worker(client):
    """A registered worker holding the 10-coin grant."""
    return await _register(client, "worker@example.com", "Worker")


@pytest.fixture
async def task(client, buyer):
    """An active task with two 5-coin slots."""
    response = await client.post(
        "/tasks",
        json={
            "buyer_email": buyer["email"],
            "task_title": "Transcribe a receipt",
            "task_detail": "Type out every line item",
            "submission_info": "Paste the text",
            "completion_date": "2026-12-31",
            "required_workers": 2,
            "payable_amount": 5,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
async def submission(client, task, worker):
    """A pending submission from the worker against the task."""
    response = await client.post(
        f"/tasks/{task['task_id']}/submissions",
        json={"worker_email": worker["email"], "submission_details": "Milk 2.99"},
    )
    assert response.status_code == 201
    return response.json()
