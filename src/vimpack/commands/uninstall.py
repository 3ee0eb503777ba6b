"""Remove plugins."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from typing import TYPE_CHECKING

from vimpack.errors import PackFilesystemError
from vimpack.loader import write_loader_script
from vimpack.package.model import validate_name
from vimpack.package.registry import PackageRegistry

if TYPE_CHECKING:
    from vimpack.config import PackConfig
    from vimpack.package.model import Package

logger = logging.getLogger(__name__)


def uninstall_plugin(package: Package, config: PackConfig, remove_config: bool = False) -> None:
    """Delete the install directory and, optionally, the config file.

    Raises:
        PackFilesystemError: If a deletion fails.
    """
    config_file = package.config_path(config)
    if remove_config and config_file.is_file():
        try:
            config_file.unlink()
        except OSError as e:
            raise PackFilesystemError(config_file, e) from e

    path = package.path(config)
    if path.is_dir():
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise PackFilesystemError(path, e) from e

    logger.info(f"Uninstalled {package.name}")


def uninstall_plugins(
    config: PackConfig,
    plugins: Sequence[str],
    remove_config: bool = False,
) -> list[str]:
    """Uninstall ``plugins`` and drop them from the packfile.

    The first failed deletion aborts the command before anything is
    persisted, so the packfile still lists every package.

    Returns:
        Names that were found in the registry and removed
    """
    for name in plugins:
        validate_name(name)

    registry = PackageRegistry.load(config)

    for name in plugins:
        if name not in registry:
            logger.warning(f"Plugin {name} is not in the packfile")

    wanted = set(plugins)
    for package in [p for p in registry if p.name in wanted]:
        uninstall_plugin(package, config, remove_config)

    removed = registry.remove(plugins)
    write_loader_script(registry, config)
    registry.save()
    return removed
