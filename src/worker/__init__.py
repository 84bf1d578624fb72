"""Background workers, run once per scheduler invocation"""
from .plan_expiry import PlanExpiryWorker
from .ledger_reconciler import LedgerReconcilerWorker

__all__ = ["PlanExpiryWorker", "LedgerReconcilerWorker"]
