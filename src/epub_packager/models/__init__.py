"""Data models."""

from epub_packager.models.document import (
    Document,
    Image,
    SpineItem,
    TargetFormat,
)
from epub_packager.models.package import (
    CoverImage,
    ManifestEntry,
    PackageResult,
)

__all__ = [
    # Document models
    "Document",
    "SpineItem",
    "Image",
    "TargetFormat",
    # Package models
    "ManifestEntry",
    "CoverImage",
    "PackageResult",
]
