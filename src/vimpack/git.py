"""Thin wrapper around the ``git`` executable."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from vimpack.errors import VcsError

logger = logging.getLogger(__name__)

GITHUB_URL = "https://github.com/{name}.git"


def repo_url(name: str) -> str:
    """Remote URL for a package name; full URLs are used as-is."""
    if "://" in name or name.startswith("git@"):
        return name
    return GITHUB_URL.format(name=name)


def _git(name: str, args: list[str], cwd: Path | None = None) -> str:
    """Run git and return its stdout.

    Raises:
        VcsError: If git is missing or exits with a non-zero status.
    """
    cmd = ["git", *args]
    logger.debug(f"{name}: {' '.join(cmd)}")

    # Never block on a credential prompt inside a worker thread.
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise VcsError(name, "git executable not found") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip() or f"exit status {e.returncode}"
        raise VcsError(name, detail) from e

    return result.stdout


def clone(name: str, dest: Path) -> None:
    """Clone ``name`` into ``dest``, creating parent directories."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    _git(name, ["clone", "--depth", "1", "--recurse-submodules", repo_url(name), str(dest)])
    logger.info(f"Installed {name}")


def update(name: str, path: Path) -> None:
    """Fast-forward an existing checkout and its submodules."""
    output = _git(name, ["pull", "--ff-only"], cwd=path)
    _git(name, ["submodule", "update", "--init", "--recursive"], cwd=path)

    if "Already up to date" in output or "Already up-to-date" in output:
        logger.info(f"{name} is up to date")
    else:
        logger.info(f"Updated {name}")
