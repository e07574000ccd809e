"""Service layer components."""

from microtask_ledger_service.services.account_store import AccountStore
from microtask_ledger_service.services.database import Database
from microtask_ledger_service.services.ledger_engine import LedgerEngine
from microtask_ledger_service.services.purchase_store import PurchaseStore
from microtask_ledger_service.services.submission_store import SubmissionStore
from microtask_ledger_service.services.task_store import TaskStore
from microtask_ledger_service.services.withdrawal_store import WithdrawalStore

__all__ = [
    "AccountStore",
    "Database",
    "LedgerEngine",
    "PurchaseStore",
    "SubmissionStore",
    "TaskStore",
    "WithdrawalStore",
]
