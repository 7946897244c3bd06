"""Dispatch table from event class to reconciliation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from releasebot.events.models import (
    BoardCreated,
    CardCreated,
    CardDeleted,
    CardMoved,
    Event,
    IssueOpened,
    LabelAdded,
    LabelRemoved,
)
from releasebot.reconciler import PlacementReconciler, ProvisioningReconciler
from releasebot.tracker import TrackerClient

logger = logging.getLogger("releasebot.events")


@dataclass
class Reconcilers:
    """The reconcilers one event job works with, sharing one tracker client."""

    placement: PlacementReconciler
    provisioning: ProvisioningReconciler

    @classmethod
    def for_tracker(cls, tracker: TrackerClient) -> Reconcilers:
        return cls(
            placement=PlacementReconciler(tracker),
            provisioning=ProvisioningReconciler(tracker),
        )


def _on_label_added(reconcilers: Reconcilers, event: LabelAdded) -> Any:
    return reconcilers.placement.apply_label(event.repo, event.issue, event.label)


def _on_label_removed(reconcilers: Reconcilers, event: LabelRemoved) -> Any:
    return reconcilers.placement.remove_label(event.repo, event.issue, event.label)


def _on_issue_opened(reconcilers: Reconcilers, event: IssueOpened) -> Any:
    # Labels given at creation time arrive with the issue, not as labeled events
    return [
        reconcilers.placement.apply_label(event.repo, event.issue, label)
        for label in event.issue.labels
    ]


def _on_board_created(reconcilers: Reconcilers, event: BoardCreated) -> Any:
    return reconcilers.provisioning.provision(event.repo, event.board)


def _on_card_placed(reconcilers: Reconcilers, event: CardCreated | CardMoved) -> Any:
    return reconcilers.placement.sync_labels(event.repo, event.card)


def _on_card_deleted(reconcilers: Reconcilers, event: CardDeleted) -> Any:
    return reconcilers.placement.clear_labels(event.repo, event.card)


HANDLERS: dict[type, Callable[[Reconcilers, Any], Any]] = {
    LabelAdded: _on_label_added,
    LabelRemoved: _on_label_removed,
    IssueOpened: _on_issue_opened,
    BoardCreated: _on_board_created,
    CardCreated: _on_card_placed,
    CardMoved: _on_card_placed,
    CardDeleted: _on_card_deleted,
}


def handle(reconcilers: Reconcilers, event: Event) -> Any:
    """Run the reconciliation registered for the event's class.

    Returns:
        Whatever the reconciler reports (outcome, label sync, provisioning result).
    """
    handler = HANDLERS[type(event)]
    logger.debug("Handling %s in %s", type(event).__name__, event.repo.full_name)
    return handler(reconcilers, event)
