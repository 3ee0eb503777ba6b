"""Package descriptors and the packfile registry."""

from .model import Package
from .registry import PackageRegistry

__all__ = ["Package", "PackageRegistry"]
