"""vimpack - Vim 8 native package manager with concurrent updates."""

__version__ = "0.1.0"

# Core components - lazy imports to keep CLI startup light
def __getattr__(name: str):
    """Lazy import of the public API."""
    if name == "PackConfig":
        from vimpack.config import PackConfig
        return PackConfig
    elif name == "Package":
        from vimpack.package.model import Package
        return Package
    elif name == "PackageRegistry":
        from vimpack.package.registry import PackageRegistry
        return PackageRegistry
    elif name == "TaskEngine":
        from vimpack.tasks.engine import TaskEngine
        return TaskEngine
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = [
    "PackConfig",
    "Package",
    "PackageRegistry",
    "TaskEngine",
]
