"""Plain-text rendering of Backlog records for stdout."""

from __future__ import annotations

from backlog_cli.backlog.models import Issue, IssueComment, Project, User


def _name(user: User | None) -> str:
    if user is None:
        return ""
    return user.name or ""


def format_issue_line(issue: Issue) -> str:
    issue_id = issue.id if issue.id is not None else ""
    return f"#{issue_id} {issue.issue_key} - {issue.summary}"


def format_issue_detail(issue: Issue) -> list[str]:
    """Labelled lines for ``issue get``. Missing optional fields render as ''."""

    status = issue.status.name if issue.status is not None else None
    return [
        f"Issue: {issue.issue_key}",
        f"Summary: {issue.summary}",
        f"Status: {status or ''}",
        f"Assignee: {_name(issue.assignee)}",
        "Description:",
        issue.description or "",
    ]


def format_comment_line(comment: IssueComment) -> str:
    content = (comment.content or "").strip()
    return f"[{comment.created or ''}] {_name(comment.created_user)}: {content}"


def format_comments(comments: list[IssueComment]) -> list[str]:
    lines = ["Comments:"]
    if not comments:
        lines.append("(none)")
    lines.extend(format_comment_line(c) for c in comments)
    return lines


def format_project_line(project: Project) -> str:
    return f"{project.project_key} - {project.name}"


def format_mode(read_only: bool) -> str:
    return "read-only" if read_only else "read-write"
