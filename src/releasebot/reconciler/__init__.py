"""Reconcilers - label/placement sync and release board provisioning."""

from releasebot.reconciler.exceptions import ProvisioningTimeoutError, ReconcilerError
from releasebot.reconciler.models import LabelSync, PlacementOutcome, ProvisioningResult
from releasebot.reconciler.placement import PlacementReconciler
from releasebot.reconciler.provisioning import ProvisioningReconciler
from releasebot.reconciler.retry import RetryPolicy

__all__ = [
    "LabelSync",
    "PlacementOutcome",
    "PlacementReconciler",
    "ProvisioningReconciler",
    "ProvisioningResult",
    "ProvisioningTimeoutError",
    "ReconcilerError",
    "RetryPolicy",
]
