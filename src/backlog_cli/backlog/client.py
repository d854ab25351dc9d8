"""Tracker adapter used by the CLI.

Keeps Backlog calls out of CLI code: translates CLI-level identifiers (project
keys, status ids given as strings) into what the API expects, enforces the
read-only policy, and wraps remote failures with a short context prefix.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager

import requests

from backlog_cli.backlog.api import BacklogAPI, BacklogAPIError
from backlog_cli.backlog.models import Issue, IssueComment, Project
from backlog_cli.config import BacklogConfig, ConfigError, ConfigStore

logger = logging.getLogger(__name__)

# Built-in status ids shared by every Backlog project.
STATUS_CLOSED = 4

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ReadOnlyModeError(Exception):
    """Raised when a mutating call is attempted while the config is read-only."""


class BacklogClientError(Exception):
    """A remote failure, prefixed with what the client was trying to do."""


@contextmanager
def _remote_call(action: str) -> Iterator[None]:
    try:
        yield
    except (BacklogAPIError, requests.RequestException) as e:
        raise BacklogClientError(f"failed to {action}: {e}") from e


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _scan_int(value: str) -> int | None:
    """Leading integer of ``value`` (``"12abc"`` -> 12), or None when there is none."""

    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


class BacklogClient:
    """One adapter per CLI invocation."""

    def __init__(self, *, api: BacklogAPI, read_only: bool) -> None:
        self._api = api
        self._read_only = read_only

    @classmethod
    def from_config(cls, store: ConfigStore) -> BacklogClient:
        """Load the persisted config and build an authenticated client."""

        try:
            config: BacklogConfig = store.load()
        except ConfigError as e:
            raise ConfigError(f"failed to load config: {e}") from e

        api = BacklogAPI(space=config.space, api_key=config.api_key)
        logger.debug(
            "Backlog client ready",
            extra={"space": config.space, "read_only": config.read_only},
        )
        return cls(api=api, read_only=config.read_only)

    @property
    def read_only(self) -> bool:
        return self._read_only

    def _require_writable(self, action: str) -> None:
        if self._read_only:
            logger.info("Rejected mutating call in read-only mode", extra={"action": action})
            raise ReadOnlyModeError(f"cannot {action}: client is in read-only mode")

    def _lookup_project_id(self, project_key: str) -> int | None:
        """Best-effort project key -> id lookup. Returns None when the lookup fails."""

        try:
            project = self._api.get_project(project_key)
        except (BacklogAPIError, requests.RequestException, ValueError) as e:
            logger.info(
                "Project lookup failed",
                extra={"project_key": project_key, "error": str(e)},
            )
            return None
        return project.id

    def _resolve_project_id(self, project_key: str) -> int | None:
        project_id = self._lookup_project_id(project_key)
        if project_id is None:
            project_id = _scan_int(project_key)
        return project_id

    def list_issues(self, project_key: str, status_id: str, count: int) -> list[Issue]:
        project_ids: list[int] | None = None
        if project_key:
            project_id = self._resolve_project_id(project_key)
            if project_id is not None:
                project_ids = [project_id]
            else:
                logger.warning(
                    "Unknown project; listing without a project filter",
                    extra={"project_key": project_key},
                )

        status_ids: list[int] | None = None
        if status_id:
            parsed = _scan_int(status_id)
            if parsed is not None and parsed > 0:
                status_ids = [parsed]

        with _remote_call("get issues"):
            return self._api.get_issues(
                project_ids=project_ids,
                status_ids=status_ids,
                count=count,
            )

    def get_issue(self, issue_key: str) -> Issue:
        with _remote_call("get issue"):
            return self._api.get_issue(issue_key)

    def get_issue_comments(self, issue_key: str) -> list[IssueComment]:
        with _remote_call("get issue comments"):
            return self._api.get_issue_comments(issue_key)

    def create_issue(
        self,
        project_key: str,
        summary: str,
        description: str,
        issue_type_id: int,
        priority_id: int,
    ) -> Issue:
        self._require_writable("create issue")

        project_id = self._resolve_project_id(project_key)
        if project_id is None:
            # Sent as-is; the tracker rejects it and its error is reported below.
            logger.warning(
                "Unknown project; sending project id 0",
                extra={"project_key": project_key},
            )
            project_id = 0

        with _remote_call("create issue"):
            return self._api.create_issue(
                project_id=project_id,
                summary=summary,
                issue_type_id=issue_type_id,
                priority_id=priority_id,
                description=description or None,
            )

    def update_issue(
        self,
        issue_key: str,
        *,
        summary: str | None = None,
        description: str | None = None,
        status_id: str | None = None,
    ) -> Issue:
        self._require_writable("update issue")

        status: int | None = None
        if status_id:
            status = _parse_int(status_id)
            if status is None or status <= 0:
                raise ValueError(f"invalid status id: {status_id!r}")

        if summary is None and description is None and status is None:
            raise ValueError("nothing to update: provide --summary, --description or --status")

        with _remote_call("update issue"):
            return self._api.update_issue(
                issue_key,
                summary=summary,
                description=description,
                statusId=status,
            )

    def add_comment(self, issue_key: str, content: str) -> IssueComment:
        self._require_writable("add comment")

        with _remote_call("add comment"):
            return self._api.add_issue_comment(issue_key, content)

    def close_issue(self, issue_key: str) -> Issue:
        self._require_writable("close issue")

        with _remote_call("close issue"):
            return self._api.update_issue(issue_key, statusId=STATUS_CLOSED)

    def list_projects(self) -> list[Project]:
        with _remote_call("get projects"):
            return self._api.get_projects()

    def close(self) -> None:
        self._api.close()
