"""Unit tests for the persisted configuration store."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from backlog_cli.config import BacklogConfig, ConfigError, ConfigStore


def test_save_then_load_roundtrips_exact_values(store: ConfigStore) -> None:
    store.save("https://example.backlog.com/", "k3y-with/odd+chars", False)

    loaded = store.load()

    assert loaded == BacklogConfig(
        space="https://example.backlog.com/",
        api_key="k3y-with/odd+chars",
        read_only=False,
    )


def test_save_creates_missing_directory(store: ConfigStore, config_dir: Path) -> None:
    assert not config_dir.exists()

    store.save("https://example.backlog.com", "key", True)

    assert config_dir.is_dir()
    assert store.path == config_dir / "config.json"


def test_saved_file_layout(store: ConfigStore) -> None:
    store.save("https://example.backlog.com", "key", True)

    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert raw == {"space": "https://example.backlog.com", "api_key": "key", "read_only": True}


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_saved_file_is_owner_only(store: ConfigStore) -> None:
    store.save("https://example.backlog.com", "key", True)

    mode = stat.S_IMODE(store.path.stat().st_mode)
    assert mode == 0o600


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_saved_file_is_created_owner_only(
    store: ConfigStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _no_chmod(self: Path, *args: object, **kwargs: object) -> None:
        raise OSError("chmod unavailable")

    modes_at_open: list[int] = []
    real_fdopen = os.fdopen

    def _recording_fdopen(fd: int, *args: object, **kwargs: object):
        modes_at_open.append(stat.S_IMODE(os.fstat(fd).st_mode))
        return real_fdopen(fd, *args, **kwargs)

    monkeypatch.setattr(Path, "chmod", _no_chmod)
    monkeypatch.setattr(os, "fdopen", _recording_fdopen)

    store.save("https://example.backlog.com", "key", True)

    assert modes_at_open == [0o600]
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


@pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
def test_save_tightens_existing_world_readable_file(
    store: ConfigStore, config_dir: Path
) -> None:
    config_dir.mkdir()
    store.path.write_text("{}", encoding="utf-8")
    os.chmod(store.path, 0o644)

    store.save("https://example.backlog.com", "key", True)

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600
    assert store.load().api_key == "key"


def test_default_store_lives_under_home(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("BACKLOG_CLI_CONFIG_DIR", str(tmp_path / "elsewhere"))

    assert ConfigStore().path == tmp_path / ".backlog-cli" / "config.json"


def test_save_overwrites_previous_config(store: ConfigStore) -> None:
    store.save("https://first.backlog.com", "first", True)
    store.save("https://second.backlog.jp", "second", False)

    loaded = store.load()
    assert loaded.space == "https://second.backlog.jp"
    assert loaded.api_key == "second"
    assert loaded.read_only is False


def test_load_missing_file_fails(store: ConfigStore) -> None:
    with pytest.raises(ConfigError, match="failed to read config file"):
        store.load()


def test_load_truncated_file_is_a_parse_error(store: ConfigStore) -> None:
    # Writes are not atomic; an interrupted save leaves a partial file behind.
    store.save("https://example.backlog.com", "key", True)
    content = store.path.read_text(encoding="utf-8")
    store.path.write_text(content[: len(content) // 2], encoding="utf-8")

    with pytest.raises(ConfigError, match="failed to parse config file"):
        store.load()


def test_load_wrong_shape_is_a_parse_error(store: ConfigStore, config_dir: Path) -> None:
    config_dir.mkdir()
    store.path.write_text(json.dumps(["not", "an", "object"]), encoding="utf-8")

    with pytest.raises(ConfigError, match="failed to parse config file"):
        store.load()


def test_read_only_defaults_to_true_when_absent(store: ConfigStore, config_dir: Path) -> None:
    config_dir.mkdir()
    store.path.write_text(
        json.dumps({"space": "https://example.backlog.com", "api_key": "key"}),
        encoding="utf-8",
    )

    assert store.load().read_only is True
