"""Package descriptor."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from vimpack.errors import FormatError

if TYPE_CHECKING:
    from vimpack.config import PackConfig

DEFAULT_CATEGORY = "default"

# Vim user commands start with an uppercase letter.
LOAD_COMMAND_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def _is_path_segment(value: str) -> bool:
    """A single, non-special directory name."""
    return bool(value) and value not in (".", "..") and "/" not in value and "\\" not in value


def validate_name(name: str) -> None:
    """Check that ``name`` maps to its own install directory.

    Raises:
        FormatError: If the repo part is empty, ``.``/``..`` or nested.
    """
    _, sep, repo = name.partition("/")
    if not _is_path_segment(repo if sep else name):
        raise FormatError(f"Invalid package name {name!r}")


def validate_load_command(command: str) -> None:
    """Raises FormatError unless ``command`` is a valid Vim user command name."""
    if not LOAD_COMMAND_RE.match(command):
        raise FormatError(
            f"Invalid load command {command!r}: must start with an uppercase letter "
            "and contain only letters and digits"
        )


@dataclass
class Package:
    """A plugin the user wants installed."""

    name: str  # owner/repo
    category: str = DEFAULT_CATEGORY
    opt: bool = False  # installed under opt/, loaded with :packadd
    load_command: str | None = None  # command that triggers :packadd
    local: bool = False  # managed by hand, never touched by git

    def __post_init__(self) -> None:
        """Reject names and categories that would escape their directory."""
        validate_name(self.name)
        if not _is_path_segment(self.category):
            raise FormatError(f"Package {self.name}: invalid category {self.category!r}")
        if self.load_command:
            validate_load_command(self.load_command)

    def repo(self) -> tuple[str, str]:
        """Split the name into ``(owner, repo)``."""
        owner, sep, repo = self.name.partition("/")
        if not sep:
            return "", owner
        return owner, repo

    def path(self, config: PackConfig) -> Path:
        """Install directory of this package."""
        _, repo = self.repo()
        kind = "opt" if self.opt else "start"
        return config.pack_dir / self.category / kind / repo

    def config_path(self, config: PackConfig) -> Path:
        """Per-plugin config file, e.g. ``.pack/tpope-vim-fugitive.vim``."""
        fname = self.name.replace("/", "-")
        if not fname.endswith(".vim"):
            fname = f"{fname}.vim"
        return config.config_dir / fname

    def is_installed(self, config: PackConfig) -> bool:
        return self.path(config).is_dir()

    def describe(self) -> str:
        kind = "opt" if self.opt else "start"
        on = f"[Load on `{self.load_command}`]" if self.load_command else ""
        return f"{self.name} => pack/{self.category}/{kind} {on}".rstrip()

    def __str__(self) -> str:
        return self.describe()

    @classmethod
    def from_dict(cls, data: Any) -> Package:
        """Build a package from one packfile record.

        Raises:
            FormatError: If a required key is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise FormatError(f"Expected a mapping, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise FormatError(f"Record without a valid 'name': {data!r}")

        opt = data.get("opt")
        if not isinstance(opt, bool):
            raise FormatError(f"Package {name}: 'opt' must be a boolean")

        category = data.get("category")
        if not isinstance(category, str) or not category:
            raise FormatError(f"Package {name}: 'category' must be a string")

        # YAML 1.1 reads an unquoted ``on`` key as boolean true.
        on = data.get("on", data.get(True))
        if on is not None and not isinstance(on, str):
            raise FormatError(f"Package {name}: 'on' must be a string")

        local = data.get("local", False)
        if not isinstance(local, bool):
            raise FormatError(f"Package {name}: 'local' must be a boolean")

        return cls(
            name=name,
            category=category,
            opt=opt,
            load_command=on or None,
            local=local,
        )

    def to_dict(self) -> dict[str, Any]:
        """Packfile record, keys in a fixed order."""
        data: dict[str, Any] = {
            "name": self.name,
            "category": self.category,
            "opt": self.opt,
        }
        if self.load_command:
            data["on"] = self.load_command
        if self.local:
            data["local"] = True
        return data
