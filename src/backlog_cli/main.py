"""CLI entrypoint for the Backlog command-line client."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from typing import NoReturn

from pydantic import ValidationError

from backlog_cli import __version__
from backlog_cli.backlog.client import BacklogClient, BacklogClientError, ReadOnlyModeError
from backlog_cli.config import ConfigError, ConfigStore
from backlog_cli.formatting import (
    format_comments,
    format_issue_detail,
    format_issue_line,
    format_mode,
    format_project_line,
)
from backlog_cli.logging import configure_logging
from backlog_cli.settings import CliSettings

logger = logging.getLogger(__name__)

DEFAULT_ISSUE_COUNT = 20
DEFAULT_PRIORITY_ID = 3  # "Normal"

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors as ``Error: ...`` with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="backlog", description="Backlog CLI tool")
    parser.add_argument("--version", action="version", version=f"backlog-cli {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level for diagnostics on stderr (default: WARNING)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # issue
    issue = commands.add_parser("issue", help="Manage Backlog issues")
    issue_commands = issue.add_subparsers(dest="subcommand", required=True)

    issue_list = issue_commands.add_parser("list", help="List issues")
    issue_list.add_argument("--project", "-p", default="", help="Project key")
    issue_list.add_argument("--status", "-s", default="", help="Status ID")
    issue_list.add_argument(
        "--count",
        "-c",
        type=int,
        default=DEFAULT_ISSUE_COUNT,
        help="Number of issues to retrieve",
    )

    issue_get = issue_commands.add_parser("get", help="Get issue details")
    issue_get.add_argument(
        "--key", "-k", required=True, help="Issue key (e.g., PROJECT-123)"
    )
    issue_get.add_argument(
        "--comments",
        action="store_true",
        help="Also print the issue's comments",
    )

    issue_create = issue_commands.add_parser("create", help="Create a new issue")
    issue_create.add_argument("--project", "-p", required=True, help="Project key")
    issue_create.add_argument("--summary", "-s", required=True, help="Issue summary")
    issue_create.add_argument("--description", "-d", default="", help="Issue description")
    issue_create.add_argument(
        "--issue-type", "-t", type=int, required=True, help="Issue type ID"
    )
    issue_create.add_argument(
        "--priority",
        "-pr",
        type=int,
        default=DEFAULT_PRIORITY_ID,
        help="Priority ID",
    )

    issue_update = issue_commands.add_parser("update", help="Update an existing issue")
    issue_update.add_argument("--key", "-k", required=True, help="Issue key")
    issue_update.add_argument("--summary", "-s", default=None, help="New summary")
    issue_update.add_argument("--description", "-d", default=None, help="New description")
    issue_update.add_argument("--status", "-st", default=None, help="New status ID")

    issue_comment = issue_commands.add_parser("comment", help="Add a comment to an issue")
    issue_comment.add_argument("--key", "-k", required=True, help="Issue key")
    issue_comment.add_argument("--content", "-c", required=True, help="Comment text")

    issue_close = issue_commands.add_parser("close", help="Close an issue")
    issue_close.add_argument("--key", "-k", required=True, help="Issue key")

    # project
    project = commands.add_parser("project", help="Manage Backlog projects")
    project_commands = project.add_subparsers(dest="subcommand", required=True)
    project_commands.add_parser("list", help="List projects")

    # config
    config = commands.add_parser("config", help="Configure Backlog CLI")
    config_commands = config.add_subparsers(dest="subcommand", required=True)

    config_init = config_commands.add_parser("init", help="Initialize configuration")
    config_init.add_argument(
        "--space",
        "-s",
        required=True,
        help="Backlog space URL (e.g., https://yourspace.backlog.com)",
    )
    config_init.add_argument("--api-key", "-k", required=True, help="API key")
    config_init.add_argument(
        "--read-only",
        "-r",
        type=_parse_bool,
        nargs="?",
        const=True,
        default=True,
        metavar="BOOL",
        help="Set to read-only mode (default: true)",
    )

    return parser


def _issue_list(client: BacklogClient, args: argparse.Namespace) -> None:
    issues = client.list_issues(args.project, args.status, args.count)
    for issue in issues:
        print(format_issue_line(issue))


def _issue_get(client: BacklogClient, args: argparse.Namespace) -> None:
    issue = client.get_issue(args.key)
    comments = client.get_issue_comments(args.key) if args.comments else None

    for line in format_issue_detail(issue):
        print(line)
    if comments is not None:
        for line in format_comments(comments):
            print(line)


def _issue_create(client: BacklogClient, args: argparse.Namespace) -> None:
    issue = client.create_issue(
        args.project,
        args.summary,
        args.description,
        args.issue_type,
        args.priority,
    )
    print(f"Created issue: {issue.issue_key}")


def _issue_update(client: BacklogClient, args: argparse.Namespace) -> None:
    issue = client.update_issue(
        args.key,
        summary=args.summary,
        description=args.description,
        status_id=args.status,
    )
    print(f"Updated issue: {issue.issue_key or args.key}")


def _issue_comment(client: BacklogClient, args: argparse.Namespace) -> None:
    client.add_comment(args.key, args.content)
    print(f"Added comment to {args.key}")


def _issue_close(client: BacklogClient, args: argparse.Namespace) -> None:
    issue = client.close_issue(args.key)
    print(f"Closed issue: {issue.issue_key or args.key}")


def _project_list(client: BacklogClient, args: argparse.Namespace) -> None:
    for project in client.list_projects():
        print(format_project_line(project))


_HANDLERS: dict[tuple[str, str], Callable[[BacklogClient, argparse.Namespace], None]] = {
    ("issue", "list"): _issue_list,
    ("issue", "get"): _issue_get,
    ("issue", "create"): _issue_create,
    ("issue", "update"): _issue_update,
    ("issue", "comment"): _issue_comment,
    ("issue", "close"): _issue_close,
    ("project", "list"): _project_list,
}


def _config_init(store: ConfigStore, args: argparse.Namespace) -> None:
    config = store.save(args.space, args.api_key, args.read_only)
    print(f"Configuration saved successfully (mode: {format_mode(config.read_only)})")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {"log_level": args.log_level} if args.log_level else {}
    try:
        settings = CliSettings(**overrides)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Error: invalid settings:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    store = ConfigStore()

    try:
        if args.command == "config":
            _config_init(store, args)
            return 0

        handler = _HANDLERS[(args.command, args.subcommand)]
        client = BacklogClient.from_config(store)
        try:
            handler(client, args)
        finally:
            client.close()
        return 0

    except (ConfigError, ReadOnlyModeError, BacklogClientError, ValueError) as e:
        logger.debug("Command failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except Exception as e:
        # Unexpected failures keep their traceback for --log-level DEBUG.
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
