"""Record models mirroring the Backlog REST API v2 responses.

Only the fields the CLI reads are declared. Everything else in a payload is
ignored, and every non-identifying field is optional because the API omits or
nulls them freely (e.g. an unassigned issue has ``"assignee": null``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BacklogRecord(BaseModel):
    """Base for records decoded from camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class User(BacklogRecord):
    id: int | None = None
    user_id: str | None = None
    name: str | None = None


class Status(BacklogRecord):
    id: int | None = None
    name: str | None = None


class Priority(BacklogRecord):
    id: int | None = None
    name: str | None = None


class IssueType(BacklogRecord):
    id: int | None = None
    name: str | None = None


class Project(BacklogRecord):
    id: int | None = None
    project_key: str = ""
    name: str = ""
    archived: bool | None = None


class Issue(BacklogRecord):
    id: int | None = None
    project_id: int | None = None
    issue_key: str = ""
    summary: str = ""
    description: str | None = None
    status: Status | None = None
    assignee: User | None = None
    priority: Priority | None = None
    issue_type: IssueType | None = None
    created: str | None = None
    updated: str | None = None


class IssueComment(BacklogRecord):
    id: int | None = None
    content: str | None = None
    created_user: User | None = None
    created: str | None = None
