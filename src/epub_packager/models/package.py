"""Data models describing the produced package."""

from pathlib import Path

from pydantic import BaseModel, Field


class ManifestEntry(BaseModel):
    """A resource registered with the container builder."""

    id: str
    href: str
    media_type: str
    properties: list[str] = Field(default_factory=list)
    linear: bool = True
    in_spine: bool = False


class CoverImage(BaseModel):
    """Registered cover artwork and the view box used to frame it."""

    href: str
    width: int = 1050
    height: int = 1600


class PackageResult(BaseModel):
    """Artifacts written by one packaging run."""

    epub_path: Path
    extract_dir: Path | None = None
    mobi_path: Path | None = None
    tool_exit_code: int | None = None
    warnings: list[str] = Field(default_factory=list)
