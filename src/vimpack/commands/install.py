"""Install plugins."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vimpack import git
from vimpack.errors import PluginNotInstalled
from vimpack.loader import write_loader_script
from vimpack.package.model import DEFAULT_CATEGORY, Package
from vimpack.package.registry import PackageRegistry
from vimpack.tasks.engine import TaskEngine

if TYPE_CHECKING:
    from vimpack.config import PackConfig

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Outcome of one install run."""

    installed: list[str] = field(default_factory=list)
    failed: set[str] = field(default_factory=set)
    errors: dict[str, BaseException] = field(default_factory=dict)


def make_install_operation(config: PackConfig) -> Callable[[Package], None]:
    """Per-package install step run inside the task engine."""

    def install_plugin(package: Package) -> None:
        path = package.path(config)
        if path.is_dir():
            logger.info(f"{package.name} is already installed")
            return
        if package.local:
            # Local plugins are put in place by hand.
            raise PluginNotInstalled(package.name)
        git.clone(package.name, path)

    return install_plugin


def install_plugins(
    config: PackConfig,
    plugins: Sequence[str] = (),
    threads: int = 1,
    category: str = DEFAULT_CATEGORY,
    opt: bool = False,
    load_command: str | None = None,
    local: bool = False,
    on_failure: Callable[[str, BaseException], None] | None = None,
) -> InstallResult:
    """Install ``plugins``, or every packfile entry missing on disk.

    New packages are added to the packfile only when their install
    succeeded. The loader script never references a failed package.
    """
    registry = PackageRegistry.load(config)

    batch: list[Package] = []
    new: set[str] = set()
    if plugins:
        for name in dict.fromkeys(plugins):
            existing = registry.get(name)
            if existing is not None:
                batch.append(existing)
                continue
            batch.append(Package(
                name=name,
                category=category,
                opt=opt or load_command is not None,
                load_command=load_command,
                local=local,
            ))
            new.add(name)
    else:
        batch = [p for p in registry if not p.is_installed(config)]

    engine: TaskEngine[Package] = TaskEngine(threads, on_failure=on_failure)
    for package in batch:
        engine.add(package)
    failed = engine.run(make_install_operation(config))

    for package in batch:
        if package.name in new and package.name not in failed:
            registry.add(package)

    write_loader_script(registry.without(failed), config)
    registry.save()

    return InstallResult(
        installed=sorted(p.name for p in batch if p.name not in failed),
        failed=failed,
        errors=dict(engine.errors),
    )
