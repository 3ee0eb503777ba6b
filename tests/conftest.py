"""Shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from vimpack.config import PackConfig


@pytest.fixture
def config(tmp_path: Path) -> PackConfig:
    """Configuration rooted in a temporary Vim directory."""
    return PackConfig(base_dir=tmp_path / "vim")


@pytest.fixture
def write_packfile(config: PackConfig):
    """Write raw YAML to the packfile."""

    def _write(text: str) -> Path:
        config.packfile.parent.mkdir(parents=True, exist_ok=True)
        config.packfile.write_text(text, encoding="utf-8")
        return config.packfile

    return _write
