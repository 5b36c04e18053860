"""Diff reconciliation between two revisions."""

from rsloc.diff.engine import diff_revisions
from rsloc.diff.reconciler import ReconciliationError, reconcile

__all__ = ["ReconciliationError", "diff_revisions", "reconcile"]
