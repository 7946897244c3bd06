"""Turns GitHub webhook deliveries into events."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from releasebot.events.exceptions import EventPayloadError
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
from releasebot.tracker import Board, Card, Issue, Repository

Payload = dict[str, Any]


def _label_added(repo: Repository, payload: Payload) -> Event:
    return LabelAdded(
        repo=repo, issue=Issue.from_api(payload["issue"]), label=payload["label"]["name"]
    )


def _label_removed(repo: Repository, payload: Payload) -> Event:
    return LabelRemoved(
        repo=repo, issue=Issue.from_api(payload["issue"]), label=payload["label"]["name"]
    )


def _issue_opened(repo: Repository, payload: Payload) -> Event:
    return IssueOpened(repo=repo, issue=Issue.from_api(payload["issue"]))


def _pr_label_added(repo: Repository, payload: Payload) -> Event:
    return LabelAdded(
        repo=repo,
        issue=Issue.from_pull_request(payload["pull_request"]),
        label=payload["label"]["name"],
    )


def _pr_label_removed(repo: Repository, payload: Payload) -> Event:
    return LabelRemoved(
        repo=repo,
        issue=Issue.from_pull_request(payload["pull_request"]),
        label=payload["label"]["name"],
    )


def _pr_opened(repo: Repository, payload: Payload) -> Event:
    return IssueOpened(repo=repo, issue=Issue.from_pull_request(payload["pull_request"]))


def _board_created(repo: Repository, payload: Payload) -> Event:
    return BoardCreated(repo=repo, board=Board.from_api(payload["project"]))


def _card_created(repo: Repository, payload: Payload) -> Event:
    return CardCreated(repo=repo, card=Card.from_api(payload["project_card"]))


def _card_moved(repo: Repository, payload: Payload) -> Event:
    return CardMoved(repo=repo, card=Card.from_api(payload["project_card"]))


def _card_deleted(repo: Repository, payload: Payload) -> Event:
    return CardDeleted(repo=repo, card=Card.from_api(payload["project_card"]))


# (X-GitHub-Event, action) -> builder
PARSERS: dict[tuple[str, str], Callable[[Repository, Payload], Event]] = {
    ("issues", "labeled"): _label_added,
    ("issues", "unlabeled"): _label_removed,
    ("issues", "opened"): _issue_opened,
    ("pull_request", "labeled"): _pr_label_added,
    ("pull_request", "unlabeled"): _pr_label_removed,
    ("pull_request", "opened"): _pr_opened,
    ("project", "created"): _board_created,
    ("project_card", "created"): _card_created,
    ("project_card", "moved"): _card_moved,
    ("project_card", "deleted"): _card_deleted,
}


def parse_event(event_name: str, payload: Payload) -> Event | None:
    """Build the event for a webhook delivery.

    Args:
        event_name: Value of the X-GitHub-Event header.
        payload: Decoded JSON body.

    Returns:
        The event, or None for deliveries release-bot does not handle.

    Raises:
        EventPayloadError: If a handled delivery lacks required fields.
    """
    action = payload.get("action", "")
    builder = PARSERS.get((event_name, action))
    if builder is None:
        return None
    try:
        repo = Repository.from_api(payload["repository"])
        return builder(repo, payload)
    except (KeyError, TypeError) as e:
        raise EventPayloadError(f"Malformed {event_name}.{action} payload: missing {e}") from e
