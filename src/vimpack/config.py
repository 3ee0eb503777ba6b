"""Filesystem layout of a Vim configuration managed by vimpack."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_BASE_DIR = "VIM_CONFIG_PATH"


@dataclass(frozen=True)
class PackConfig:
    """Paths used by the registry, the loader generator and the commands.

    Built once at startup and passed down explicitly.
    """

    base_dir: Path

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PackConfig:
        """Build the configuration from ``VIM_CONFIG_PATH`` (default ``~/.vim``)."""
        env = os.environ if environ is None else environ
        raw = env.get(ENV_BASE_DIR, "")
        if raw.strip():
            return cls(base_dir=Path(raw).expanduser())
        return cls(base_dir=Path.home() / ".vim")

    @property
    def pack_dir(self) -> Path:
        """Root of the native package tree (``pack/<category>/{start,opt}``)."""
        return self.base_dir / "pack"

    @property
    def config_dir(self) -> Path:
        """Directory holding the packfile and per-plugin config files."""
        return self.base_dir / ".pack"

    @property
    def packfile(self) -> Path:
        return self.config_dir / "packfile"

    @property
    def plugin_file(self) -> Path:
        """Generated loader script sourced by Vim at startup."""
        return self.base_dir / "plugin" / "_pack.vim"
