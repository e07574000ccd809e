"""End-to-end coin flow through the ledger engine."""

from __future__ import annotations

import pytest

from tests.helpers import make_database, make_engine, task_payload

pytestmark = pytest.mark.unit

BUYER = "buyer@example.com"
WORKER_A = "a@example.com"
WORKER_B = "b@example.com"


@pytest.fixture
def engine(tmp_path):
    database = make_database(tmp_path)
    ledger = make_engine(database)
    yield ledger
    database.close()


def _coins(engine, email: str) -> int:
    return engine.get_user(email)["coins"]


def _escrowed(engine) -> int:
    """Coins held by open slots plus pending submissions."""
    held = sum(
        task["required_workers"] * task["payable_amount"]
        for task in engine.list_buyer_tasks(BUYER)
        if task["status"] == "active"
    )
    held += sum(sub["payable_amount"] for sub in engine.list_submissions(status="pending"))
    return held


def test_post_claim_review_delete_cycle(engine):
    """Grant, escrow, payout, rejection, and refund balance out exactly."""
    assert engine.register_user(WORKER_A, "A", "Worker", None)["coins"] == 10
    engine.register_user(WORKER_B, "B", "Worker", None)
    engine.register_user(BUYER, "Buyer", "Buyer", None)
    minted = 10 + 10 + 50

    task = engine.post_task(**task_payload(BUYER, required_workers=2, payable_amount=5))
    task_id = task["task_id"]
    assert _coins(engine, BUYER) == 40

    sub_a = engine.claim_slot(task_id, WORKER_A, "A's work")
    assert engine.get_task(task_id)["required_workers"] == 1
    sub_b = engine.claim_slot(task_id, WORKER_B, "B's work")
    assert engine.get_task(task_id)["required_workers"] == 0

    engine.approve_submission(sub_a["submission_id"], BUYER, WORKER_A, 5)
    assert _coins(engine, WORKER_A) == 15
    assert engine.get_task(task_id)["required_workers"] == 0

    engine.reject_submission(sub_b["submission_id"], BUYER)
    assert engine.get_task(task_id)["required_workers"] == 1
    assert _coins(engine, WORKER_B) == 10

    circulating = engine.get_stats()["coins_in_circulation"]
    assert circulating + _escrowed(engine) == minted

    result = engine.delete_task(task_id)
    assert result == {"task_id": task_id, "deleted": True, "refund": 5}
    assert _coins(engine, BUYER) == 45
    assert engine.get_stats()["coins_in_circulation"] == minted

    history = engine.get_transactions(BUYER)
    assert [(tx["type"], tx["amount"]) for tx in history] == [
        ("initial_grant", 50),
        ("task_escrow", 10),
        ("task_refund", 5),
    ]


def test_delete_active_task_refunds_every_open_slot(engine):
    engine.register_user(BUYER, "Buyer", "Buyer", None)
    task = engine.post_task(**task_payload(BUYER, required_workers=3, payable_amount=5))
    assert _coins(engine, BUYER) == 35

    assert engine.delete_task(task["task_id"])["refund"] == 15
    assert _coins(engine, BUYER) == 50


def test_delete_completed_task_refunds_nothing(engine):
    engine.register_user(BUYER, "Buyer", "Buyer", None)
    task = engine.post_task(**task_payload(BUYER, required_workers=3, payable_amount=5))
    engine.complete_task(task["task_id"])
    balance_after_completion = _coins(engine, BUYER)

    assert engine.delete_task(task["task_id"])["refund"] == 0
    assert _coins(engine, BUYER) == balance_after_completion


def test_withdrawal_lifecycle_conserves_coins(engine):
    engine.register_user(WORKER_A, "A", "Worker", None)
    engine.mint_coins(WORKER_A, 10, "pi_a")

    withdrawal = engine.request_withdrawal(WORKER_A, 20, "bkash", "01700000000")
    assert withdrawal["balance_after"] == 0
    assert engine.get_stats()["pending_withdrawal_coins"] == 20

    engine.approve_withdrawal(withdrawal["withdrawal_id"])
    stats = engine.get_stats()
    assert stats["pending_withdrawal_coins"] == 0
    assert stats["coins_in_circulation"] == 0


def test_reject_after_delete_conserves_coins(engine):
    """A pending submission keeps its escrow until reviewed, even once its task is gone."""
    engine.register_user(WORKER_A, "A", "Worker", None)
    engine.register_user(BUYER, "Buyer", "Buyer", None)
    minted = 10 + 50

    task = engine.post_task(**task_payload(BUYER, required_workers=2, payable_amount=5))
    submission = engine.claim_slot(task["task_id"], WORKER_A, "A's work")
    engine.delete_task(task["task_id"])
    assert engine.get_stats()["coins_in_circulation"] + _escrowed(engine) == minted

    engine.reject_submission(submission["submission_id"], BUYER)

    assert _escrowed(engine) == 0
    assert engine.get_stats()["coins_in_circulation"] == minted
    assert _coins(engine, BUYER) == 50


def test_reject_after_complete_conserves_coins(engine):
    engine.register_user(WORKER_A, "A", "Worker", None)
    engine.register_user(WORKER_B, "B", "Worker", None)
    engine.register_user(BUYER, "Buyer", "Buyer", None)
    minted = 10 + 10 + 50

    task = engine.post_task(**task_payload(BUYER, required_workers=3, payable_amount=5))
    sub_a = engine.claim_slot(task["task_id"], WORKER_A, "A's work")
    sub_b = engine.claim_slot(task["task_id"], WORKER_B, "B's work")
    assert engine.complete_task(task["task_id"])["refund"] == 5

    engine.approve_submission(sub_a["submission_id"], BUYER, WORKER_A, 5)
    engine.reject_submission(sub_b["submission_id"], BUYER)
    assert engine.get_stats()["coins_in_circulation"] + _escrowed(engine) == minted

    assert engine.delete_task(task["task_id"])["refund"] == 0
    assert engine.get_stats()["coins_in_circulation"] == minted
    assert _coins(engine, BUYER) == 45
    assert _coins(engine, WORKER_A) == 15
    assert _coins(engine, WORKER_B) == 10
