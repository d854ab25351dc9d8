"""Persisted credentials for the Backlog CLI.

A single JSON file under the per-user config directory holds the space URL,
the API key and the read-only flag. ``config init`` overwrites it; every other
command reads it.

The write is a plain overwrite (no temp file + rename). An interrupted write
leaves a truncated file which :meth:`ConfigStore.load` reports as a parse error.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".backlog-cli"
CONFIG_FILE_NAME = "config.json"


class ConfigError(Exception):
    """Raised when the configuration file is missing, unreadable or malformed."""


class BacklogConfig(BaseModel):
    """Credentials and policy for one Backlog space."""

    space: str = Field(description="Backlog space URL, e.g. https://example.backlog.com")
    api_key: str = Field(description="Personal API key")
    read_only: bool = Field(
        default=True,
        description="Reject create/update/comment/close before any network call",
    )


def default_config_dir() -> Path:
    """The fixed per-user config directory, ~/.backlog-cli."""

    return Path.home() / CONFIG_DIR_NAME


class ConfigStore:
    """JSON-file backed store for :class:`BacklogConfig`."""

    def __init__(self, config_dir: Path | None = None) -> None:
        self._dir = config_dir if config_dir is not None else default_config_dir()

    @property
    def path(self) -> Path:
        return self._dir / CONFIG_FILE_NAME

    def save(self, space: str, api_key: str, read_only: bool) -> BacklogConfig:
        config = BacklogConfig(space=space, api_key=api_key, read_only=read_only)

        try:
            self._dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"failed to create config directory: {e}") from e

        payload = json.dumps(config.model_dump(mode="json"), indent=2, ensure_ascii=False)
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                if os.name == "posix":
                    # The O_CREAT mode only applies to new files; an existing one keeps its own.
                    os.fchmod(f.fileno(), 0o600)
                f.write(payload + "\n")
        except OSError as e:
            raise ConfigError(f"failed to write config file: {e}") from e

        logger.info(
            "Configuration saved",
            extra={"path": str(self.path), "read_only": config.read_only},
        )
        return config

    def load(self) -> BacklogConfig:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"failed to read config file: {e}") from e

        try:
            return BacklogConfig.model_validate_json(raw)
        except ValidationError as e:
            raise ConfigError(f"failed to parse config file {self.path}: {e}") from e
