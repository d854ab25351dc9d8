"""Backlog REST API v2 wrapper.

One method per remote endpoint the CLI uses. JSON responses are decoded into the
record models; non-2xx responses raise :class:`BacklogAPIError`. Transport errors
from ``requests`` propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from backlog_cli.backlog.models import Issue, IssueComment, Project

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30


class BacklogAPIError(Exception):
    """Raised when the Backlog API answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"

    @classmethod
    def from_response(cls, resp: requests.Response) -> BacklogAPIError:
        """Build an error from a Backlog error body.

        Backlog reports failures as ``{"errors": [{"message": ..., "code": ...}]}``.
        Anything else falls back to the raw body or the HTTP reason.
        """

        message = ""
        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if isinstance(payload, dict):
            errors = payload.get("errors")
            if isinstance(errors, list):
                messages = [
                    str(e.get("message"))
                    for e in errors
                    if isinstance(e, dict) and e.get("message")
                ]
                message = "; ".join(messages)

        if not message:
            message = (resp.text or "").strip() or (resp.reason or "request failed")

        return cls(resp.status_code, message)


class BacklogAPI:
    """Authenticated handle to one Backlog space."""

    def __init__(
        self,
        *,
        space: str,
        api_key: str,
        session: requests.Session | None = None,
    ) -> None:
        if not space.strip():
            raise ValueError("Backlog space URL is required")
        if not api_key.strip():
            raise ValueError("Backlog API key is required")

        self._base_url = space.strip().rstrip("/") + "/api/v2"
        self._api_key = api_key
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": "backlog-cli"})

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        query: dict[str, Any] = {"apiKey": self._api_key}
        if params:
            query.update(params)

        logger.debug("Backlog request", extra={"method": method, "path": path})
        resp = self._session.request(
            method,
            self._url(path),
            params=query,
            data=data,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        if not resp.ok:
            raise BacklogAPIError.from_response(resp)
        return resp.json()

    def get_project(self, project_key: str) -> Project:
        """Fetch a project by key (or numeric id, which the API also accepts)."""

        if not project_key.strip():
            raise ValueError("project_key is required")
        return Project.model_validate(self._request("GET", f"projects/{project_key}"))

    def get_projects(self) -> list[Project]:
        data = self._request("GET", "projects")
        return [Project.model_validate(item) for item in data]

    def get_issues(
        self,
        *,
        project_ids: list[int] | None = None,
        status_ids: list[int] | None = None,
        count: int | None = None,
    ) -> list[Issue]:
        params: dict[str, Any] = {}
        if project_ids:
            params["projectId[]"] = project_ids
        if status_ids:
            params["statusId[]"] = status_ids
        if count is not None:
            params["count"] = count

        data = self._request("GET", "issues", params=params)
        return [Issue.model_validate(item) for item in data]

    def get_issue(self, issue_key: str) -> Issue:
        return Issue.model_validate(self._request("GET", f"issues/{issue_key}"))

    def create_issue(
        self,
        *,
        project_id: int,
        summary: str,
        issue_type_id: int,
        priority_id: int,
        description: str | None = None,
    ) -> Issue:
        data: dict[str, Any] = {
            "projectId": project_id,
            "summary": summary,
            "issueTypeId": issue_type_id,
            "priorityId": priority_id,
        }
        if description is not None:
            data["description"] = description

        issue = Issue.model_validate(self._request("POST", "issues", data=data))
        logger.info("Issue created", extra={"issue_key": issue.issue_key})
        return issue

    def update_issue(self, issue_key: str, **fields: Any) -> Issue:
        """PATCH an issue. ``fields`` are sent as-is using Backlog's camelCase names."""

        data = {k: v for k, v in fields.items() if v is not None}
        issue = Issue.model_validate(self._request("PATCH", f"issues/{issue_key}", data=data))
        logger.info("Issue updated", extra={"issue_key": issue_key, "fields": sorted(data)})
        return issue

    def get_issue_comments(self, issue_key: str) -> list[IssueComment]:
        data = self._request("GET", f"issues/{issue_key}/comments")
        return [IssueComment.model_validate(item) for item in data]

    def add_issue_comment(self, issue_key: str, content: str) -> IssueComment:
        comment = IssueComment.model_validate(
            self._request("POST", f"issues/{issue_key}/comments", data={"content": content})
        )
        logger.info("Comment added", extra={"issue_key": issue_key, "comment_id": comment.id})
        return comment

    def close(self) -> None:
        self._session.close()
