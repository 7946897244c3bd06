"""Data models for GitHub issues, labels and classic project boards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Repository:
    """A GitHub repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def parse(cls, full_name: str) -> Repository:
        """Build from "owner/name"."""
        owner, _, name = full_name.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(f"Expected 'owner/name', got {full_name!r}")
        return cls(owner=owner, name=name)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Repository:
        return cls(owner=data["owner"]["login"], name=data["name"])


@dataclass
class Label:
    """A repository label."""

    name: str
    color: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Label:
        return cls(name=data["name"], color=data.get("color") or "")


@dataclass
class Issue:
    """An issue or pull request.

    ``url`` is the API URL, which is what project cards reference as their
    content URL.
    """

    id: int
    number: int
    url: str
    labels: list[str] = field(default_factory=list)
    is_pull_request: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Issue:
        return cls(
            id=data["id"],
            number=data["number"],
            url=data["url"],
            labels=[label["name"] for label in data.get("labels") or []],
            is_pull_request="pull_request" in data,
        )

    @classmethod
    def from_pull_request(cls, data: dict[str, Any]) -> Issue:
        """Build from a pull request object; cards reference its issue URL."""
        return cls(
            id=data["id"],
            number=data["number"],
            url=data["issue_url"],
            labels=[label["name"] for label in data.get("labels") or []],
            is_pull_request=True,
        )


@dataclass
class Board:
    """A classic GitHub project board."""

    id: int
    name: str
    state: str = "open"
    url: str = ""

    @property
    def is_open(self) -> bool:
        return self.state == "open"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Board:
        return cls(
            id=data["id"],
            name=data["name"],
            state=data.get("state") or "open",
            url=data.get("url") or "",
        )


@dataclass
class Column:
    """A column on a project board."""

    id: int
    name: str
    url: str = ""
    board_url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Column:
        return cls(
            id=data["id"],
            name=data["name"],
            url=data.get("url") or "",
            board_url=data.get("project_url") or "",
        )


@dataclass
class Card:
    """A project card. Note cards have no content URL."""

    id: int
    content_url: str | None = None
    column_url: str = ""
    url: str = ""

    @property
    def issue_number(self) -> int | None:
        """Issue number parsed from the content URL (".../issues/42")."""
        if not self.content_url:
            return None
        head, _, number = self.content_url.rstrip("/").rpartition("/")
        if not head.endswith("/issues") or not number.isdigit():
            return None
        return int(number)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Card:
        return cls(
            id=data["id"],
            content_url=data.get("content_url"),
            column_url=data.get("column_url") or "",
            url=data.get("url") or "",
        )
