"""Runtime configuration for release-bot."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger("releasebot.config")

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_MAX_WORKERS = 8
DEFAULT_EVENT_TIMEOUT = 5 * 60.0  # seconds
DEFAULT_MAX_PENDING = 1000
DEFAULT_PROVISIONING_RETRIES = 3
DEFAULT_PROVISIONING_INTERVAL = 5.0  # seconds
DEFAULT_SERVER_LOG_DIR = "logs"


def _token_from_gh_cli() -> str:
    """Get GitHub token from the gh CLI, if it is installed and logged in."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return ""


@dataclass(frozen=True)
class ReleaseBotConfig:
    """Immutable settings shared by the webhook server and the batch tools.

    Attributes:
        github_token: Token used for every GitHub API call.
        webhook_secret: Shared secret for webhook HMAC signatures. Empty disables
            signature verification.
        debug: Log at DEBUG level.
        log_dir: Directory for the rotating log file; empty means the server
            uses "logs" and the batch commands log to stderr only.
        api_url: GitHub REST API base URL (for testing/enterprise).
        max_workers: Size of the worker pool that reconciles webhook events.
        event_timeout: Wall-clock budget in seconds for one event's reconciliation.
        max_pending: Queued or running events above which deliveries get a 503.
        provisioning_retries: Extra column-count checks after a board is created.
        provisioning_interval: Seconds between provisioning checks.
    """

    github_token: str = ""
    webhook_secret: str = ""
    debug: bool = False
    log_dir: str = ""
    api_url: str = DEFAULT_API_URL
    max_workers: int = DEFAULT_MAX_WORKERS
    event_timeout: float = DEFAULT_EVENT_TIMEOUT
    max_pending: int = DEFAULT_MAX_PENDING
    provisioning_retries: int = DEFAULT_PROVISIONING_RETRIES
    provisioning_interval: float = DEFAULT_PROVISIONING_INTERVAL

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.debug else "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ReleaseBotConfig:
        """Build configuration from environment variables.

        The token is read from RELEASE_BOT_GITHUB_TOKEN, then GITHUB_TOKEN, then
        the gh CLI.
        """
        env = os.environ if environ is None else environ

        token = env.get("RELEASE_BOT_GITHUB_TOKEN") or env.get("GITHUB_TOKEN") or ""
        if not token:
            token = _token_from_gh_cli()
        if not token:
            logger.warning("No GitHub token configured; API calls will be unauthenticated")

        return cls(
            github_token=token,
            webhook_secret=env.get("RELEASE_BOT_WEBHOOK_SECRET", ""),
            debug=bool(env.get("RELEASE_BOT_DEBUG", "")),
            log_dir=env.get("RELEASE_BOT_LOG_DIR", ""),
            api_url=env.get("RELEASE_BOT_API_URL", DEFAULT_API_URL),
            max_workers=int(env.get("RELEASE_BOT_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
            event_timeout=float(env.get("RELEASE_BOT_EVENT_TIMEOUT", DEFAULT_EVENT_TIMEOUT)),
            max_pending=int(env.get("RELEASE_BOT_MAX_PENDING", DEFAULT_MAX_PENDING)),
        )
