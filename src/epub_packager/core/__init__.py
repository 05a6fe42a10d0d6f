"""Packaging engine."""

from epub_packager.core.packager import Packager, PackagerState
from epub_packager.core.tools import PackagingError, ToolNotFoundError

__all__ = [
    "Packager",
    "PackagerState",
    "PackagingError",
    "ToolNotFoundError",
]
