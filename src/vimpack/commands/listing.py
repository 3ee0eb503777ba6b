"""List packages from the packfile."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vimpack.package.registry import PackageRegistry

if TYPE_CHECKING:
    from vimpack.config import PackConfig
    from vimpack.package.model import Package


def list_plugins(config: PackConfig, start_only: bool = False, opt_only: bool = False) -> list[Package]:
    """Registry packages sorted by name, optionally only start or opt ones."""
    packages = PackageRegistry.load(config).sorted()
    if start_only:
        packages = [p for p in packages if not p.opt]
    if opt_only:
        packages = [p for p in packages if p.opt]
    return packages
