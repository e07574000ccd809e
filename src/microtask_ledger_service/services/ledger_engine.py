"""Ledger engine: every cross-entity coin, slot, and review transition."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from microtask_ledger_service.core.exceptions import ServiceError
from microtask_ledger_service.logging import get_logger
from microtask_ledger_service.services.account_store import BalanceLimitError, DuplicateUserError
from microtask_ledger_service.services.models import (
    MAX_AMOUNT,
    SubmissionStatus,
    TaskStatus,
    TransactionType,
    UserRole,
    WithdrawalStatus,
    new_id,
    now_iso,
)
from microtask_ledger_service.services.purchase_store import DuplicatePurchaseError

if TYPE_CHECKING:
    from microtask_ledger_service.services.account_store import AccountStore
    from microtask_ledger_service.services.database import Database
    from microtask_ledger_service.services.purchase_store import PurchaseStore
    from microtask_ledger_service.services.submission_store import SubmissionStore
    from microtask_ledger_service.services.task_store import TaskStore
    from microtask_ledger_service.services.withdrawal_store import WithdrawalStore


def _is_positive_int(value: object) -> bool:
    """Check if value is a positive integer (not float, not bool)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_non_empty_str(value: object) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _not_found(entity: str, key: str) -> ServiceError:
    return ServiceError("NOT_FOUND", f"{entity} not found", 404, {"entity": entity, "id": key})


def _amount_too_large(field_name: str) -> ServiceError:
    return ServiceError(
        "INVALID_AMOUNT",
        f"{field_name} must not exceed {MAX_AMOUNT}",
        400,
        {"field": field_name, "max": MAX_AMOUNT},
    )


def _require_positive(field_name: str, value: object) -> None:
    if not _is_positive_int(value):
        raise ServiceError(
            "INVALID_AMOUNT",
            f"{field_name} must be a positive integer",
            400,
            {"field": field_name},
        )
    if value > MAX_AMOUNT:  # type: ignore[operator]
        raise _amount_too_large(field_name)


def _require_text(field_name: str, value: object) -> None:
    if not _is_non_empty_str(value):
        raise ServiceError(
            "INVALID_PAYLOAD",
            f"{field_name} must be a non-empty string",
            400,
            {"field": field_name},
        )


class LedgerEngine:
    """
    Orchestrates all multi-entity mutations of the marketplace.

    Each operation validates its input, then reads, checks, and writes
    inside one ``Database.transaction()``. Racy checks (open slots,
    sufficient balance, still-pending status) are decided by conditional
    updates in the stores rather than by the preceding reads, so the
    outcome is the same under concurrent requests. An operation either
    commits all of its writes or raises and leaves storage untouched.
    """

    def __init__(
        self,
        database: Database,
        accounts: AccountStore,
        tasks: TaskStore,
        submissions: SubmissionStore,
        withdrawals: WithdrawalStore,
        purchases: PurchaseStore,
        initial_grants: dict[UserRole, int],
    ) -> None:
        self._database = database
        self._accounts = accounts
        self._tasks = tasks
        self._submissions = submissions
        self._withdrawals = withdrawals
        self._purchases = purchases
        self._initial_grants = initial_grants
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register_user(
        self,
        email: str,
        name: str,
        role: str,
        photo_url: str | None,
    ) -> dict[str, Any]:
        """
        Create a user and credit the role's starting grant.

        Raises:
            ServiceError: INVALID_PAYLOAD, USER_EXISTS.
        """
        _require_text("email", email)
        _require_text("name", name)
        try:
            user_role = UserRole(role)
        except ValueError as exc:
            raise ServiceError(
                "INVALID_PAYLOAD",
                f"role must be one of {[member.value for member in UserRole]}",
                400,
                {"field": "role"},
            ) from exc

        grant = self._initial_grants[user_role]

        with self._database.transaction():
            try:
                self._accounts.insert_user(
                    {
                        "email": email,
                        "name": name,
                        "photo_url": photo_url,
                        "role": str(user_role),
                        "coins": 0,
                        "created_at": now_iso(),
                    }
                )
            except DuplicateUserError as exc:
                raise ServiceError("USER_EXISTS", "User already exists", 409, {}) from exc
            if grant > 0:
                self._credit(email, grant, TransactionType.INITIAL_GRANT, "registration")
            user = self._accounts.get_user(email)

        if user is None:
            msg = "User not found after registration"
            raise RuntimeError(msg)
        self._logger.info(
            "User registered",
            extra={"email": email, "role": str(user_role), "initial_coins": grant},
        )
        return user

    def get_user(self, email: str) -> dict[str, Any]:
        """Look up a user. Raises NOT_FOUND."""
        with self._database.read():
            user = self._accounts.get_user(email)
        if user is None:
            raise _not_found("User", email)
        return user

    def get_transactions(self, email: str) -> list[dict[str, Any]]:
        """Coin transaction history for a user. Raises NOT_FOUND."""
        with self._database.read():
            if self._accounts.get_user(email) is None:
                raise _not_found("User", email)
            return self._accounts.list_transactions(email)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def post_task(
        self,
        buyer_email: str,
        task_title: str,
        task_detail: str,
        submission_info: str,
        completion_date: str,
        required_workers: int,
        payable_amount: int,
        task_image_url: str | None = None,
        total_cost: int | None = None,
    ) -> dict[str, Any]:
        """
        Escrow the buyer's coins and open a task.

        Raises:
            ServiceError: INVALID_PAYLOAD, INVALID_AMOUNT, INCONSISTENT,
                NOT_FOUND, INSUFFICIENT_BALANCE.
        """
        _require_text("buyer_email", buyer_email)
        _require_text("task_title", task_title)
        _require_text("task_detail", task_detail)
        _require_text("submission_info", submission_info)
        _require_text("completion_date", completion_date)
        _require_positive("required_workers", required_workers)
        _require_positive("payable_amount", payable_amount)

        escrow = required_workers * payable_amount
        if escrow > MAX_AMOUNT:
            raise _amount_too_large("total_cost")
        if total_cost is not None and total_cost != escrow:
            raise ServiceError(
                "INCONSISTENT",
                "total_cost must equal required_workers * payable_amount",
                409,
                {"total_cost": total_cost, "expected": escrow},
            )

        task_id = new_id("t")
        task = {
            "task_id": task_id,
            "buyer_email": buyer_email,
            "task_title": task_title,
            "task_detail": task_detail,
            "submission_info": submission_info,
            "task_image_url": task_image_url,
            "completion_date": completion_date,
            "required_workers": required_workers,
            "initial_workers": required_workers,
            "payable_amount": payable_amount,
            "total_cost": escrow,
            "status": str(TaskStatus.ACTIVE),
            "created_at": now_iso(),
        }

        with self._database.transaction():
            buyer = self._accounts.get_user(buyer_email)
            if buyer is None:
                raise _not_found("User", buyer_email)
            balance = self._accounts.debit(
                buyer_email, escrow, TransactionType.TASK_ESCROW, task_id
            )
            if balance is None:
                raise ServiceError(
                    "INSUFFICIENT_BALANCE",
                    "Not enough coins to fund this task",
                    402,
                    {"balance": buyer["coins"], "required": escrow},
                )
            self._tasks.insert_task(task)

        self._logger.info(
            "Task posted",
            extra={
                "task_id": task_id,
                "buyer_email": buyer_email,
                "required_workers": required_workers,
                "payable_amount": payable_amount,
                "total_cost": escrow,
            },
        )
        return task

    def get_task(self, task_id: str) -> dict[str, Any]:
        """Fetch a task. Raises NOT_FOUND."""
        with self._database.read():
            task = self._tasks.get_task(task_id)
        if task is None:
            raise _not_found("Task", task_id)
        return task

    def list_buyer_tasks(self, buyer_email: str) -> list[dict[str, Any]]:
        """A buyer's tasks, latest completion date first."""
        with self._database.read():
            return self._tasks.list_tasks_by_buyer(buyer_email)

    def update_task(self, task_id: str, updates: dict[str, str]) -> dict[str, Any]:
        """
        Edit a task's title, detail, or submission instructions.

        Coins and slots are never touched here.

        Raises:
            ServiceError: INVALID_PAYLOAD, NOT_FOUND.
        """
        if len(updates) == 0:
            raise ServiceError(
                "INVALID_PAYLOAD",
                "Provide at least one of task_title, task_detail, submission_info",
                400,
                {},
            )
        for field_name, value in updates.items():
            _require_text(field_name, value)

        with self._database.transaction():
            if self._tasks.update_task_details(task_id, updates) == 0:
                raise _not_found("Task", task_id)
            task = self._tasks.get_task(task_id)

        self._logger.info("Task updated", extra={"task_id": task_id, "fields": sorted(updates)})
        if task is None:
            raise _not_found("Task", task_id)
        return task

    def delete_task(self, task_id: str) -> dict[str, Any]:
        """
        Delete a task, refunding the unconsumed escrow if it is still active.

        The refund covers open slots only; pending and approved
        submissions keep their share. Pending submissions stay reviewable.

        Raises:
            ServiceError: NOT_FOUND.
        """
        with self._database.transaction():
            task = self._tasks.get_task(task_id)
            if task is None:
                raise _not_found("Task", task_id)

            refund = 0
            if TaskStatus(task["status"]).is_open:
                refund = task["required_workers"] * task["payable_amount"]
            if refund > 0:
                self._refund_buyer(task, refund)
            self._tasks.delete_task(task_id)

        self._logger.info(
            "Task deleted",
            extra={"task_id": task_id, "buyer_email": task["buyer_email"], "refund": refund},
        )
        return {"task_id": task_id, "deleted": True, "refund": refund}

    def complete_task(self, task_id: str) -> dict[str, Any]:
        """
        Close an active task to new submissions and refund its open slots.

        Raises:
            ServiceError: NOT_FOUND, TASK_UNAVAILABLE.
        """
        with self._database.transaction():
            task = self._tasks.get_task(task_id)
            if task is None:
                raise _not_found("Task", task_id)
            if self._tasks.close_task(task_id, TaskStatus.COMPLETED) == 0:
                raise ServiceError(
                    "TASK_UNAVAILABLE",
                    "Task is not active",
                    409,
                    {"task_id": task_id, "status": task["status"]},
                )
            refund = task["required_workers"] * task["payable_amount"]
            if refund > 0:
                self._refund_buyer(task, refund)
            closed = self._tasks.get_task(task_id)

        self._logger.info(
            "Task completed",
            extra={"task_id": task_id, "buyer_email": task["buyer_email"], "refund": refund},
        )
        if closed is None:
            raise _not_found("Task", task_id)
        return {**closed, "refund": refund}

    def _refund_buyer(self, task: dict[str, Any], refund: int) -> None:
        """Credit a task's unconsumed escrow back to its buyer. Call inside a transaction."""
        self._credit(task["buyer_email"], refund, TransactionType.TASK_REFUND, task["task_id"])

    def _credit(self, email: str, amount: int, tx_type: TransactionType, reference: str) -> int:
        """Credit a balance inside the caller's transaction, mapping store failures."""
        try:
            balance = self._accounts.credit(email, amount, tx_type, reference)
        except BalanceLimitError as exc:
            raise ServiceError(
                "INVALID_AMOUNT",
                "Credit would exceed the maximum balance",
                400,
                {"email": email, "amount": amount},
            ) from exc
        if balance is None:
            raise _not_found("User", email)
        return balance

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    def claim_slot(
        self,
        task_id: str,
        worker_email: str,
        submission_details: str,
    ) -> dict[str, Any]:
        """
        Take one open slot on a task and record a pending submission.

        Raises:
            ServiceError: INVALID_PAYLOAD, NOT_FOUND, TASK_UNAVAILABLE.
        """
        _require_text("submission_details", submission_details)

        with self._database.transaction():
            task = self._tasks.get_task(task_id)
            if task is None:
                raise _not_found("Task", task_id)
            if self._accounts.get_user(worker_email) is None:
                raise _not_found("User", worker_email)

            if self._tasks.claim_slot(task_id) == 0:
                raise ServiceError(
                    "TASK_UNAVAILABLE",
                    "Task has no open slots or is no longer active",
                    409,
                    {
                        "task_id": task_id,
                        "status": task["status"],
                        "required_workers": task["required_workers"],
                    },
                )

            submission = {
                "submission_id": new_id("s"),
                "task_id": task_id,
                "task_title": task["task_title"],
                "buyer_email": task["buyer_email"],
                "worker_email": worker_email,
                "submission_details": submission_details,
                "payable_amount": task["payable_amount"],
                "status": str(SubmissionStatus.PENDING),
                "submitted_at": now_iso(),
                "reviewed_at": None,
            }
            self._submissions.insert_submission(submission)

        self._logger.info(
            "Slot claimed",
            extra={
                "task_id": task_id,
                "submission_id": submission["submission_id"],
                "worker_email": worker_email,
            },
        )
        return submission

    def _pending_submission(self, submission_id: str, reviewer_email: str) -> dict[str, Any]:
        """Load a submission and check it can still be reviewed by this reviewer."""
        submission = self._submissions.get_submission(submission_id)
        if submission is None:
            raise _not_found("Submission", submission_id)
        if reviewer_email != submission["buyer_email"]:
            raise ServiceError(
                "INCONSISTENT",
                "Reviewer is not the buyer of this task",
                409,
                {"submission_id": submission_id},
            )
        if SubmissionStatus(submission["status"]) is not SubmissionStatus.PENDING:
            raise ServiceError(
                "ALREADY_REVIEWED",
                "Submission has already been reviewed",
                409,
                {"submission_id": submission_id, "status": submission["status"]},
            )
        return submission

    def approve_submission(
        self,
        submission_id: str,
        reviewer_email: str,
        worker_email: str,
        payable_amount: int,
    ) -> dict[str, Any]:
        """
        Approve a pending submission and pay the worker its captured amount.

        The caller restates the worker and amount it believes it is paying;
        a mismatch with the stored submission is refused.

        Raises:
            ServiceError: NOT_FOUND, INCONSISTENT, ALREADY_REVIEWED.
        """
        with self._database.transaction():
            submission = self._pending_submission(submission_id, reviewer_email)
            if (
                worker_email != submission["worker_email"]
                or payable_amount != submission["payable_amount"]
            ):
                raise ServiceError(
                    "INCONSISTENT",
                    "Worker or payable amount does not match the submission",
                    409,
                    {
                        "submission_id": submission_id,
                        "worker_email": submission["worker_email"],
                        "payable_amount": submission["payable_amount"],
                    },
                )

            reviewed_at = now_iso()
            if (
                self._submissions.set_review_status(
                    submission_id, SubmissionStatus.APPROVED, reviewed_at
                )
                == 0
            ):
                raise ServiceError(
                    "ALREADY_REVIEWED",
                    "Submission has already been reviewed",
                    409,
                    {"submission_id": submission_id},
                )

            balance = self._credit(
                submission["worker_email"],
                submission["payable_amount"],
                TransactionType.SUBMISSION_PAYOUT,
                submission_id,
            )

        self._logger.info(
            "Submission approved",
            extra={
                "submission_id": submission_id,
                "task_id": submission["task_id"],
                "worker_email": submission["worker_email"],
                "payable_amount": submission["payable_amount"],
            },
        )
        return {
            **submission,
            "status": str(SubmissionStatus.APPROVED),
            "reviewed_at": reviewed_at,
            "worker_balance": balance,
        }

    def reject_submission(self, submission_id: str, reviewer_email: str) -> dict[str, Any]:
        """
        Reject a pending submission and give its slot back to the task.

        When the task was deleted or closed in the meantime there is no slot
        to give back, so the submission's captured amount, still held in
        escrow, is refunded to the buyer instead. The skip is logged.

        Raises:
            ServiceError: NOT_FOUND, INCONSISTENT, ALREADY_REVIEWED.
        """
        with self._database.transaction():
            submission = self._pending_submission(submission_id, reviewer_email)
            reviewed_at = now_iso()
            if (
                self._submissions.set_review_status(
                    submission_id, SubmissionStatus.REJECTED, reviewed_at
                )
                == 0
            ):
                raise ServiceError(
                    "ALREADY_REVIEWED",
                    "Submission has already been reviewed",
                    409,
                    {"submission_id": submission_id},
                )
            slot_returned = self._tasks.return_slot(submission["task_id"]) == 1
            buyer_refund = 0
            if not slot_returned:
                buyer_refund = submission["payable_amount"]
                self._credit(
                    submission["buyer_email"],
                    buyer_refund,
                    TransactionType.TASK_REFUND,
                    submission_id,
                )

        if not slot_returned:
            self._logger.warning(
                "Slot return skipped, task is gone or closed; escrow refunded to buyer",
                extra={
                    "anomaly": "TASK_GONE",
                    "submission_id": submission_id,
                    "task_id": submission["task_id"],
                    "buyer_refund": buyer_refund,
                },
            )
        self._logger.info(
            "Submission rejected",
            extra={
                "submission_id": submission_id,
                "task_id": submission["task_id"],
                "worker_email": submission["worker_email"],
                "slot_returned": slot_returned,
            },
        )
        return {
            **submission,
            "status": str(SubmissionStatus.REJECTED),
            "reviewed_at": reviewed_at,
            "slot_returned": slot_returned,
            "buyer_refund": buyer_refund,
        }

    def get_submission(self, submission_id: str) -> dict[str, Any]:
        """Fetch a submission. Raises NOT_FOUND."""
        with self._database.read():
            submission = self._submissions.get_submission(submission_id)
        if submission is None:
            raise _not_found("Submission", submission_id)
        return submission

    def list_submissions(
        self,
        *,
        task_id: str | None = None,
        worker_email: str | None = None,
        buyer_email: str | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """List submissions by task, worker, buyer, and/or status."""
        status_filter = None
        if status is not None:
            try:
                status_filter = SubmissionStatus(status)
            except ValueError as exc:
                raise ServiceError(
                    "INVALID_PAYLOAD", f"Unknown submission status: {status}", 400, {}
                ) from exc
        with self._database.read():
            return self._submissions.list_submissions(
                task_id=task_id,
                worker_email=worker_email,
                buyer_email=buyer_email,
                status=status_filter,
            )

    # ------------------------------------------------------------------
    # Withdrawals
    # ------------------------------------------------------------------

    def request_withdrawal(
        self,
        worker_email: str,
        withdrawal_coin: int,
        payment_system: str,
        account_number: str,
    ) -> dict[str, Any]:
        """
        Debit the worker now and record a pending cash-out.

        Raises:
            ServiceError: INVALID_AMOUNT, INVALID_PAYLOAD, NOT_FOUND,
                INSUFFICIENT_BALANCE.
        """
        _require_positive("withdrawal_coin", withdrawal_coin)
        _require_text("payment_system", payment_system)
        _require_text("account_number", account_number)

        withdrawal_id = new_id("w")
        withdrawal = {
            "withdrawal_id": withdrawal_id,
            "worker_email": worker_email,
            "withdrawal_coin": withdrawal_coin,
            "payment_system": payment_system,
            "account_number": account_number,
            "status": str(WithdrawalStatus.PENDING),
            "requested_at": now_iso(),
            "approved_at": None,
        }

        with self._database.transaction():
            worker = self._accounts.get_user(worker_email)
            if worker is None:
                raise _not_found("User", worker_email)
            balance = self._accounts.debit(
                worker_email, withdrawal_coin, TransactionType.WITHDRAWAL, withdrawal_id
            )
            if balance is None:
                raise ServiceError(
                    "INSUFFICIENT_BALANCE",
                    "Not enough coins for this withdrawal",
                    402,
                    {"balance": worker["coins"], "requested": withdrawal_coin},
                )
            self._withdrawals.insert_withdrawal(withdrawal)

        self._logger.info(
            "Withdrawal requested",
            extra={
                "withdrawal_id": withdrawal_id,
                "worker_email": worker_email,
                "withdrawal_coin": withdrawal_coin,
            },
        )
        return {**withdrawal, "balance_after": balance}

    def approve_withdrawal(self, withdrawal_id: str) -> dict[str, Any]:
        """
        Sign off a pending withdrawal. Coins were already debited at request time.

        Raises:
            ServiceError: NOT_FOUND, ALREADY_APPROVED.
        """
        with self._database.transaction():
            withdrawal = self._withdrawals.get_withdrawal(withdrawal_id)
            if withdrawal is None:
                raise _not_found("Withdrawal", withdrawal_id)
            if self._withdrawals.mark_approved(withdrawal_id, now_iso()) == 0:
                raise ServiceError(
                    "ALREADY_APPROVED",
                    "Withdrawal has already been approved",
                    409,
                    {"withdrawal_id": withdrawal_id, "status": withdrawal["status"]},
                )
            approved = self._withdrawals.get_withdrawal(withdrawal_id)

        self._logger.info(
            "Withdrawal approved",
            extra={
                "withdrawal_id": withdrawal_id,
                "worker_email": withdrawal["worker_email"],
                "withdrawal_coin": withdrawal["withdrawal_coin"],
            },
        )
        if approved is None:
            raise _not_found("Withdrawal", withdrawal_id)
        return approved

    def get_withdrawal(self, withdrawal_id: str) -> dict[str, Any]:
        """Fetch a withdrawal. Raises NOT_FOUND."""
        with self._database.read():
            withdrawal = self._withdrawals.get_withdrawal(withdrawal_id)
        if withdrawal is None:
            raise _not_found("Withdrawal", withdrawal_id)
        return withdrawal

    def list_withdrawals(
        self,
        *,
        worker_email: str | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """List withdrawals by worker and/or status."""
        status_filter = None
        if status is not None:
            try:
                status_filter = WithdrawalStatus(status)
            except ValueError as exc:
                raise ServiceError(
                    "INVALID_PAYLOAD", f"Unknown withdrawal status: {status}", 400, {}
                ) from exc
        with self._database.read():
            return self._withdrawals.list_withdrawals(
                worker_email=worker_email,
                status=status_filter,
            )

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def mint_coins(
        self,
        email: str,
        coins: int,
        transaction_id: str,
        amount: float | None = None,
    ) -> dict[str, Any]:
        """
        Credit purchased coins once per payment transaction id.

        A repeated transaction id is refused and the original purchase is
        returned in the error details, so a retried caller can confirm the
        first delivery was applied.

        Raises:
            ServiceError: INVALID_AMOUNT, INVALID_PAYLOAD, NOT_FOUND,
                DUPLICATE_TRANSACTION.
        """
        _require_positive("coins", coins)
        _require_text("transaction_id", transaction_id)
        if amount is not None and (
            isinstance(amount, bool)
            or not isinstance(amount, (int, float))
            or not math.isfinite(amount)
            or amount < 0
            or amount > MAX_AMOUNT
        ):
            raise ServiceError(
                "INVALID_AMOUNT",
                f"amount must be a non-negative number not above {MAX_AMOUNT}",
                400,
                {"field": "amount"},
            )

        purchase = {
            "purchase_id": new_id("p"),
            "email": email,
            "coins": coins,
            "amount": amount,
            "transaction_id": transaction_id,
            "paid_at": now_iso(),
        }

        with self._database.transaction():
            existing = self._purchases.get_by_transaction_id(transaction_id)
            if existing is not None:
                raise ServiceError(
                    "DUPLICATE_TRANSACTION",
                    "Payment transaction has already been applied",
                    409,
                    {"purchase": existing},
                )
            if self._accounts.get_user(email) is None:
                raise _not_found("User", email)
            try:
                self._purchases.insert_purchase(purchase)
            except DuplicatePurchaseError as exc:
                raise ServiceError(
                    "DUPLICATE_TRANSACTION",
                    "Payment transaction has already been applied",
                    409,
                    {},
                ) from exc
            balance = self._credit(email, coins, TransactionType.PURCHASE, transaction_id)

        self._logger.info(
            "Coins minted",
            extra={"email": email, "coins": coins, "transaction_id": transaction_id},
        )
        return {**purchase, "balance_after": balance}

    def list_purchases(self, email: str) -> list[dict[str, Any]]:
        """Purchase history for a user, newest first."""
        with self._database.read():
            return self._purchases.list_purchases(email)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        """Aggregate counters for the health endpoint."""
        with self._database.read():
            return {
                "total_users": self._accounts.count_users(),
                "coins_in_circulation": self._accounts.total_coins(),
                "tasks_by_status": self._tasks.count_tasks_by_status(),
                "submissions_by_status": self._submissions.count_by_status(),
                "pending_withdrawal_coins": self._withdrawals.total_pending(),
            }
