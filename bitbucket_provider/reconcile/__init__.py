"""Reconciliation engine for Bitbucket repositories."""

from bitbucket_provider.reconcile.async_reconciler import AsyncRepositoryReconciler
from bitbucket_provider.reconcile.diff import (
    GroupChangePlan,
    attribute_drift,
    groups_equal,
    plan_group_changes,
)
from bitbucket_provider.reconcile.reconciler import RepositoryReconciler

__all__ = [
    "RepositoryReconciler",
    "AsyncRepositoryReconciler",
    "GroupChangePlan",
    "attribute_drift",
    "groups_equal",
    "plan_group_changes",
]
