"""Tests for MetadataConfig env loading."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from tablesync.metadata.config import DEFAULT_PENDING_WARN_THRESHOLD, MetadataConfig

ENV_KEY = "TABLESYNC_PENDING_WARN_THRESHOLD"


def test_default_threshold(monkeypatch):
    monkeypatch.delenv(ENV_KEY, raising=False)

    assert MetadataConfig.from_env().pending_warn_threshold == DEFAULT_PENDING_WARN_THRESHOLD == 1000


def test_threshold_from_env(monkeypatch):
    monkeypatch.setenv(ENV_KEY, "25")

    assert MetadataConfig.from_env().pending_warn_threshold == 25


def test_constructor_ignores_env(monkeypatch):
    """Only from_env reads the environment."""
    monkeypatch.setenv(ENV_KEY, "25")

    assert MetadataConfig().pending_warn_threshold == DEFAULT_PENDING_WARN_THRESHOLD


@pytest.mark.parametrize("raw", ["many", "-1"])
def test_invalid_threshold_raises(monkeypatch, raw):
    monkeypatch.setenv(ENV_KEY, raw)

    with pytest.raises(RuntimeError):
        MetadataConfig.from_env()


@pytest.mark.parametrize("raw", ["many", "-1"])
def test_from_env_or_default_falls_back(monkeypatch, raw):
    monkeypatch.setenv(ENV_KEY, raw)

    assert MetadataConfig.from_env_or_default() == MetadataConfig()


def test_env_file_is_read_without_touching_environ(monkeypatch, tmp_path: Path):
    """A .env file supplies values but is not exported to os.environ."""
    monkeypatch.delenv(ENV_KEY, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text(f"{ENV_KEY}=7\n")

    assert MetadataConfig.from_env(env_file).pending_warn_threshold == 7
    assert ENV_KEY not in os.environ


def test_process_env_overrides_env_file(monkeypatch, tmp_path: Path):
    monkeypatch.setenv(ENV_KEY, "3")
    env_file = tmp_path / ".env"
    env_file.write_text(f"{ENV_KEY}=7\n")

    assert MetadataConfig.from_env(env_file).pending_warn_threshold == 3


def test_config_is_frozen():
    cfg = MetadataConfig(pending_warn_threshold=5)

    with pytest.raises(AttributeError):
        cfg.pending_warn_threshold = 10  # type: ignore[misc]
