"""Generation of the loader script Vim sources at startup."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from vimpack.errors import PackIOError

if TYPE_CHECKING:
    from vimpack.config import PackConfig
    from vimpack.package.model import Package

logger = logging.getLogger(__name__)

LOADER_HEADER = '" Generated by vimpack. DO NOT EDIT!\n'

LOAD_FUNCTION = """\
function! s:pack_load(pack, config, cmd, bang, line1, line2, args) abort
  execute 'delcommand' a:cmd
  execute 'packadd' a:pack
  if !empty(a:config)
    execute 'source' fnameescape(a:config)
  endif
  let l:range = a:line1 == a:line2 ? '' : a:line1 . ',' . a:line2
  execute l:range . a:cmd . a:bang . ' ' . a:args
endfunction
"""


def _vim_string(value: str) -> str:
    """Single-quoted Vim string literal."""
    return "'" + value.replace("'", "''") + "'"


def _package_block(package: Package, config: PackConfig) -> list[str]:
    lines = [f'" {package.name}']
    config_file = package.config_path(config)
    has_config = config_file.is_file()

    if package.opt:
        if package.load_command:
            _, repo = package.repo()
            config_arg = _vim_string(str(config_file)) if has_config else "''"
            lines.append(
                f"command! -nargs=* -range -bang {package.load_command} "
                f"call s:pack_load({_vim_string(repo)}, {config_arg}, "
                f"{_vim_string(package.load_command)}, "
                f'"<bang>", <line1>, <line2>, <q-args>)'
            )
    elif has_config:
        lines.append(f"execute 'source' fnameescape({_vim_string(str(config_file))})")

    return lines


def render_loader_script(packages: Iterable[Package], config: PackConfig) -> str:
    """Render the loader script for ``packages``.

    Output only depends on the set of packages (and their config files on
    disk), never on the order they are given in.
    """
    ordered = sorted(packages, key=lambda p: p.name)

    parts = [LOADER_HEADER]
    if any(p.opt and p.load_command for p in ordered):
        parts.append(LOAD_FUNCTION)
    for package in ordered:
        parts.append("\n".join(_package_block(package, config)) + "\n")

    return "\n".join(parts)


def write_loader_script(packages: Iterable[Package], config: PackConfig) -> None:
    """Regenerate ``plugin/_pack.vim``."""
    content = render_loader_script(packages, config)

    path = config.plugin_file
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise PackIOError(path, e) from e
    logger.debug(f"Wrote loader script {path}")
