"""Exceptions raised by vimpack."""

from __future__ import annotations

from pathlib import Path


class PackError(Exception):
    """Base class for all vimpack errors."""


class FormatError(PackError):
    """The packfile is malformed or a record is incomplete."""


class EngineStateError(PackError):
    """A task engine was used outside of its allowed state."""


class PluginNotInstalled(PackError):
    """The plugin has no install directory."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Plugin {name} is not installed")
        self.name = name


class SkipLocal(PackError):
    """The plugin is managed locally and is never touched by git."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Skip local plugin {name}")
        self.name = name


class VcsError(PackError):
    """A git clone or update failed."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"git failed for {name}: {detail}")
        self.name = name
        self.detail = detail


class PackFilesystemError(PackError):
    """Removing an installed plugin or its config file failed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to remove {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause


class PackIOError(PackError):
    """Reading or writing the packfile or the loader script failed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Cannot access {path}: {cause.strerror or cause}")
        self.path = path
        self.cause = cause
