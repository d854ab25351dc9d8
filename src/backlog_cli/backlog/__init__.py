"""Backlog API access: REST wrapper, record models and the CLI-facing client."""

from backlog_cli.backlog.api import BacklogAPI, BacklogAPIError
from backlog_cli.backlog.client import BacklogClient, BacklogClientError, ReadOnlyModeError

__all__ = [
    "BacklogAPI",
    "BacklogAPIError",
    "BacklogClient",
    "BacklogClientError",
    "ReadOnlyModeError",
]
