"""TrackerClient - GitHub REST calls for labels, issues and classic project boards."""

from __future__ import annotations

import copy
import logging
from typing import Any
from urllib.parse import quote

import httpx

from releasebot.logging import summarize_response
from releasebot.tracker.deadline import Deadline
from releasebot.tracker.exceptions import (
    TrackerError,
    TrackerNotFoundError,
    TrackerValidationError,
)
from releasebot.tracker.models import Board, Card, Column, Issue, Label, Repository

logger = logging.getLogger("releasebot.tracker")

DEFAULT_PAGE_SIZE = 100


class TrackerClient:
    """Thin wrapper over the GitHub REST API.

    Every list operation follows the ``Link: rel="next"`` header until the last
    page, so callers always see the complete collection.
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        page_size: int = DEFAULT_PAGE_SIZE,
        deadline: Deadline | None = None,
    ) -> None:
        """Initialize the tracker client.

        Args:
            token: GitHub token with repo and project scope
            base_url: GitHub API base URL (for testing/enterprise)
            page_size: Items requested per page on list endpoints
            deadline: Optional budget; calls after it expires raise
                DeadlineExceededError
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.deadline = deadline
        self._client: httpx.Client | None = None
        self._owns_client = True

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for GitHub API."""
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.Client(base_url=self.base_url, headers=headers, timeout=30.0)
        return self._client

    def close(self) -> None:
        """Close the HTTP client. Scoped copies leave the shared client open."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def scoped(self, deadline: Deadline) -> TrackerClient:
        """Return a client sharing this connection pool but bound to ``deadline``."""
        shared = self.client
        scoped = copy.copy(self)
        scoped._client = shared
        scoped._owns_client = False
        scoped.deadline = deadline
        return scoped

    # Request plumbing

    def _request(self, method: str, url: str, action: str, **kwargs: Any) -> httpx.Response:
        """Send one request and map error statuses to exceptions.

        Args:
            method: HTTP method
            url: Path relative to the API base, or an absolute API URL
            action: Human readable description used in error messages
            **kwargs: Passed through to httpx

        Raises:
            DeadlineExceededError: If the client's deadline has passed
            TrackerNotFoundError: On 404
            TrackerValidationError: On 422
            TrackerError: On any other non-2xx status or transport failure
        """
        if self.deadline is not None:
            self.deadline.check()

        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TrackerError(f"Failed to {action}: {e}") from e

        status = response.status_code
        if 200 <= status < 300:
            return response

        detail = summarize_response(response.text)
        message = f"Failed to {action}: {status} - {detail}"
        if status == 404:
            raise TrackerNotFoundError(message, status_code=status)
        if status == 422:
            raise TrackerValidationError(message, status_code=status)
        logger.debug("GitHub API error: %s", message)
        raise TrackerError(message, status_code=status)

    def _paginate(
        self, url: str, action: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Collect every item of a paginated list endpoint."""
        query: dict[str, Any] | None = {**(params or {}), "per_page": self.page_size}
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        pages = 0

        while next_url:
            response = self._request("GET", next_url, action, params=query)
            items.extend(response.json())
            pages += 1
            next_link = response.links.get("next") or {}
            next_url = next_link.get("url")
            # The next link already carries the query string
            query = None

        logger.debug("Fetched %d item(s) in %d page(s) to %s", len(items), pages, action)
        return items

    def _get_url(self, url: str, action: str) -> dict[str, Any]:
        data: dict[str, Any] = self._request("GET", url, action).json()
        return data

    # Labels

    def list_labels(self, repo: Repository) -> list[Label]:
        """List every label defined in a repository."""
        items = self._paginate(
            f"/repos/{repo.full_name}/labels", f"list labels of {repo.full_name}"
        )
        return [Label.from_api(item) for item in items]

    def create_label(self, repo: Repository, name: str, color: str) -> Label:
        """Create a repository label."""
        logger.info("Creating label %s in %s", name, repo.full_name)
        response = self._request(
            "POST",
            f"/repos/{repo.full_name}/labels",
            f"create label {name}",
            json={"name": name, "color": color},
        )
        return Label.from_api(response.json())

    def add_labels(self, repo: Repository, number: int, names: list[str]) -> list[Label]:
        """Add labels to an issue. Returns the issue's labels afterwards."""
        logger.info("Adding labels %s to %s#%d", names, repo.full_name, number)
        response = self._request(
            "POST",
            f"/repos/{repo.full_name}/issues/{number}/labels",
            f"add labels to #{number}",
            json={"labels": names},
        )
        return [Label.from_api(item) for item in response.json()]

    def remove_label(self, repo: Repository, number: int, name: str) -> None:
        """Remove one label from an issue.

        Raises:
            TrackerNotFoundError: If the label is not applied to the issue
        """
        logger.info("Removing label %s from %s#%d", name, repo.full_name, number)
        self._request(
            "DELETE",
            f"/repos/{repo.full_name}/issues/{number}/labels/{quote(name, safe='')}",
            f"remove label {name} from #{number}",
        )

    def list_issue_labels(self, repo: Repository, number: int) -> list[Label]:
        """List the labels applied to an issue."""
        items = self._paginate(
            f"/repos/{repo.full_name}/issues/{number}/labels", f"list labels of #{number}"
        )
        return [Label.from_api(item) for item in items]

    # Issues

    def list_issues(self, repo: Repository, state: str = "all") -> list[Issue]:
        """List issues and pull requests of a repository."""
        items = self._paginate(
            f"/repos/{repo.full_name}/issues",
            f"list issues of {repo.full_name}",
            params={"state": state},
        )
        return [Issue.from_api(item) for item in items]

    def get_pull_request_id(self, repo: Repository, number: int) -> int:
        """Get the pull request id (distinct from its issue id) for a number."""
        data = self._get_url(
            f"/repos/{repo.full_name}/pulls/{number}", f"get pull request #{number}"
        )
        return int(data["id"])

    # Boards

    def list_boards(self, repo: Repository, state: str = "open") -> list[Board]:
        """List project boards of a repository.

        Args:
            repo: Repository owning the boards
            state: "open", "closed" or "all"
        """
        items = self._paginate(
            f"/repos/{repo.full_name}/projects",
            f"list projects of {repo.full_name}",
            params={"state": state},
        )
        return [Board.from_api(item) for item in items]

    def create_board(self, repo: Repository, name: str, body: str = "") -> Board:
        """Create a project board in a repository."""
        logger.info("Creating project %s in %s", name, repo.full_name)
        response = self._request(
            "POST",
            f"/repos/{repo.full_name}/projects",
            f"create project {name}",
            json={"name": name, "body": body},
        )
        return Board.from_api(response.json())

    def update_board_state(self, board_id: int, state: str) -> Board:
        """Open or close a project board."""
        logger.info("Setting project %d state to %s", board_id, state)
        response = self._request(
            "PATCH", f"/projects/{board_id}", f"update project {board_id}", json={"state": state}
        )
        return Board.from_api(response.json())

    def get_board_by_url(self, url: str) -> Board:
        """Fetch a board from its API URL (a column's ``project_url``)."""
        return Board.from_api(self._get_url(url, f"get project {url}"))

    # Columns

    def list_columns(self, board_id: int) -> list[Column]:
        """List a board's columns in board order."""
        items = self._paginate(
            f"/projects/{board_id}/columns", f"list columns of project {board_id}"
        )
        return [Column.from_api(item) for item in items]

    def get_column(self, column_id: int) -> Column:
        return Column.from_api(self._get_url(f"/projects/columns/{column_id}", "get column"))

    def get_column_by_url(self, url: str) -> Column:
        """Fetch a column from its API URL (a card's ``column_url``)."""
        return Column.from_api(self._get_url(url, f"get column {url}"))

    def create_column(self, board_id: int, name: str) -> Column:
        """Append a column to a board."""
        logger.info("Creating column %s in project %d", name, board_id)
        response = self._request(
            "POST",
            f"/projects/{board_id}/columns",
            f"create column {name}",
            json={"name": name},
        )
        return Column.from_api(response.json())

    # Cards

    def list_cards(self, column_id: int) -> list[Card]:
        """List a column's cards, top first."""
        items = self._paginate(
            f"/projects/columns/{column_id}/cards", f"list cards of column {column_id}"
        )
        return [Card.from_api(item) for item in items]

    def create_card(self, column_id: int, content_id: int, content_type: str) -> Card:
        """Create a card for an issue or pull request at the top of a column.

        Args:
            column_id: Destination column
            content_id: Issue id, or pull request id for "PullRequest"
            content_type: "Issue" or "PullRequest"

        Raises:
            TrackerValidationError: If the content already has a card on the board
        """
        logger.info("Creating %s card for %d in column %d", content_type, content_id, column_id)
        response = self._request(
            "POST",
            f"/projects/columns/{column_id}/cards",
            f"create card in column {column_id}",
            json={"content_id": content_id, "content_type": content_type},
        )
        return Card.from_api(response.json())

    def create_issue_card(self, column_id: int, repo: Repository, issue: Issue) -> Card:
        """Create a card referencing ``issue``, using PR content for pull requests."""
        if issue.is_pull_request:
            content_id = self.get_pull_request_id(repo, issue.number)
            return self.create_card(column_id, content_id, "PullRequest")
        return self.create_card(column_id, issue.id, "Issue")

    def move_card(self, card_id: int, column_id: int, position: str = "top") -> None:
        """Move a card to ``position`` within ``column_id``."""
        logger.info("Moving card %d to column %d (%s)", card_id, column_id, position)
        self._request(
            "POST",
            f"/projects/columns/cards/{card_id}/moves",
            f"move card {card_id}",
            json={"position": position, "column_id": column_id},
        )

    def delete_card(self, card_id: int) -> None:
        logger.info("Deleting card %d", card_id)
        self._request("DELETE", f"/projects/columns/cards/{card_id}", f"delete card {card_id}")
