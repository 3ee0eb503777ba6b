"""Update installed plugins."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vimpack import git
from vimpack.errors import PluginNotInstalled, SkipLocal
from vimpack.loader import write_loader_script
from vimpack.package.registry import PackageRegistry
from vimpack.tasks.engine import TaskEngine

if TYPE_CHECKING:
    from vimpack.config import PackConfig
    from vimpack.package.model import Package

logger = logging.getLogger(__name__)


@dataclass
class UpdateResult:
    """Outcome of one update run."""

    updated: list[str] = field(default_factory=list)
    failed: set[str] = field(default_factory=set)
    errors: dict[str, BaseException] = field(default_factory=dict)


def parse_skip(raw: str | None) -> list[str]:
    """Split a comma separated ``--skip`` value."""
    if not raw:
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


def select_batch(
    registry: PackageRegistry,
    plugins: Sequence[str] = (),
    skip: Sequence[str] = (),
) -> list[Package]:
    """Pick the packages to update.

    Explicit names win; otherwise every package whose name contains none
    of the ``skip`` substrings.
    """
    if plugins:
        wanted = set(plugins)
        return [p for p in registry if p.name in wanted]

    batch = []
    for package in registry:
        if any(s in package.name for s in skip):
            logger.info(f"Skip {package.name}")
            continue
        batch.append(package)
    return batch


def make_update_operation(config: PackConfig) -> Callable[[Package], None]:
    """Per-package update step run inside the task engine."""

    def update_plugin(package: Package) -> None:
        path = package.path(config)
        if not path.is_dir():
            raise PluginNotInstalled(package.name)
        if package.local:
            raise SkipLocal(package.name)
        git.update(package.name, path)

    return update_plugin


def update_plugins(
    config: PackConfig,
    plugins: Sequence[str] = (),
    threads: int = 1,
    skip: Sequence[str] = (),
    on_failure: Callable[[str, BaseException], None] | None = None,
) -> UpdateResult:
    """Update plugins concurrently and regenerate the loader script.

    The packfile is never rewritten here: a failed update must not change
    what the user asked for. Failed packages are only left out of the
    loader script.
    """
    registry = PackageRegistry.load(config)
    batch = select_batch(registry, plugins, skip)

    engine: TaskEngine[Package] = TaskEngine(threads, on_failure=on_failure)
    for package in batch:
        engine.add(package)
    failed = engine.run(make_update_operation(config))

    write_loader_script(registry.without(failed), config)

    return UpdateResult(
        updated=sorted(p.name for p in batch if p.name not in failed),
        failed=failed,
        errors=dict(engine.errors),
    )


def regenerate_loader(config: PackConfig) -> int:
    """Rewrite the loader script from the whole registry, without git."""
    registry = PackageRegistry.load(config)
    write_loader_script(registry, config)
    logger.info("Updated _pack file for all plugins.")
    return len(registry)
