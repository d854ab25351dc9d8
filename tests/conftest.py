"""Test configuration and fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from backlog_cli.backlog.api import BacklogAPI
from backlog_cli.config import ConfigStore


def _make_response(payload: Any, status_code: int = 200, reason: str = "OK") -> Mock:
    resp = Mock(spec=requests.Response)
    resp.status_code = status_code
    resp.ok = status_code < 400
    resp.reason = reason
    resp.json.return_value = payload
    resp.text = json.dumps(payload)
    return resp


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide a not-yet-created per-user config directory."""
    return tmp_path / ".backlog-cli"


@pytest.fixture
def store(config_dir: Path) -> ConfigStore:
    return ConfigStore(config_dir)


@pytest.fixture
def session() -> Mock:
    """Provide a fake requests session; set ``session.request`` per test."""
    return Mock()


@pytest.fixture
def api(session: Mock) -> BacklogAPI:
    return BacklogAPI(
        space="https://example.backlog.com",
        api_key="secret-key",
        session=session,
    )


@pytest.fixture
def mock_api() -> Mock:
    """Provide a BacklogAPI double that records every remote call."""
    return Mock(spec=BacklogAPI)


@pytest.fixture
def make_response() -> Callable[..., Mock]:
    """Build a fake ``requests.Response`` carrying a JSON payload."""
    return _make_response
