"""Command frontends: load the registry, run a batch, update outputs."""

from .install import InstallResult, install_plugins
from .listing import list_plugins
from .uninstall import uninstall_plugins
from .update import UpdateResult, regenerate_loader, update_plugins

__all__ = [
    "InstallResult",
    "UpdateResult",
    "install_plugins",
    "list_plugins",
    "regenerate_loader",
    "uninstall_plugins",
    "update_plugins",
]
