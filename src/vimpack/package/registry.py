"""Package registry backed by the packfile."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import yaml

from vimpack.errors import FormatError, PackIOError
from vimpack.package.model import Package

if TYPE_CHECKING:
    from vimpack.config import PackConfig

logger = logging.getLogger(__name__)

PACKFILE_HEADER = """\
# vim: ft=yaml
#
# Generated by vimpack. DO NOT EDIT!

"""


class PackageRegistry:
    """The desired set of packages.

    Loaded once per command, edited in memory and written back with
    :meth:`save` only by commands that change what the user wants installed.
    """

    def __init__(self, config: PackConfig, packages: Iterable[Package] | None = None) -> None:
        self.config = config
        self._packages: list[Package] = list(packages or [])

    @classmethod
    def load(cls, config: PackConfig) -> PackageRegistry:
        """Read the packfile.

        A missing or empty packfile gives an empty registry.

        Raises:
            FormatError: If the packfile cannot be parsed, a record is
                incomplete, or two records share a name.
        """
        path = config.packfile
        if not path.is_file():
            logger.debug(f"No packfile at {path}")
            return cls(config)

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise FormatError(f"Unexpected packfile format in {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise FormatError(f"Packfile {path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise PackIOError(path, e) from e

        if data is None:
            return cls(config)
        if not isinstance(data, list):
            raise FormatError(f"Packfile {path} must contain a list of packages")

        packages: list[Package] = []
        seen: set[str] = set()
        for record in data:
            package = Package.from_dict(record)
            if package.name in seen:
                raise FormatError(f"Package {package.name} is listed more than once")
            seen.add(package.name)
            packages.append(package)

        logger.debug(f"Loaded {len(packages)} packages from {path}")
        return cls(config, packages)

    def save(self) -> None:
        """Write the registry, sorted by name, to the packfile."""
        records = [p.to_dict() for p in self.sorted()]
        body = yaml.safe_dump(records, default_flow_style=False, sort_keys=False) if records else ""

        path = self.config.packfile
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(PACKFILE_HEADER)
                f.write(body)
        except OSError as e:
            raise PackIOError(path, e) from e
        logger.debug(f"Saved {len(records)} packages to {path}")

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._packages)

    def get(self, name: str) -> Package | None:
        return next((p for p in self._packages if p.name == name), None)

    def names(self) -> list[str]:
        return [p.name for p in self._packages]

    def add(self, package: Package) -> None:
        """Add a package, replacing any entry with the same name."""
        for i, existing in enumerate(self._packages):
            if existing.name == package.name:
                self._packages[i] = package
                return
        self._packages.append(package)

    def remove(self, names: Iterable[str]) -> list[str]:
        """Drop packages by name and return the names actually removed."""
        wanted = set(names)
        removed = [p.name for p in self._packages if p.name in wanted]
        self._packages = [p for p in self._packages if p.name not in wanted]
        return removed

    def without(self, names: Iterable[str]) -> list[Package]:
        """Packages not in ``names``, registry order kept."""
        excluded = set(names)
        return [p for p in self._packages if p.name not in excluded]

    def sorted(self) -> list[Package]:
        return sorted(self._packages, key=lambda p: p.name)
