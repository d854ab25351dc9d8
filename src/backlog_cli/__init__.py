"""Backlog CLI.

A small command-line client for Backlog:
- credentials persisted in ~/.backlog-cli/config.json
- read-only mode that blocks mutating commands locally
- issue and project commands proxied to the Backlog REST API v2
"""

__version__ = "0.1.0"

from backlog_cli.config import BacklogConfig, ConfigStore

__all__ = ["__version__", "BacklogConfig", "ConfigStore"]
