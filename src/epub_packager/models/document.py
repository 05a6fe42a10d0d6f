"""Data models for the document handed to the packager."""

import uuid
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class TargetFormat(str, Enum):
    """Package flavor to produce."""

    EPUB3 = "epub3"
    KF8 = "kf8"  # Kindle; converted with kindlegen after packaging


class Image(BaseModel):
    """Image referenced from a spine item."""

    model_config = ConfigDict(frozen=True)

    target: str  # Relative to the owning item's images directory


class SpineItem(BaseModel):
    """One converted chapter of the publication."""

    model_config = ConfigDict(frozen=True)

    docname: str
    title: str = ""
    content: str = ""
    imagesdir: str | None = None
    username: str | None = None
    author: str | None = None
    properties: list[str] = Field(default_factory=list)
    images: list[Image] = Field(default_factory=list)
    # Fragment file the JSON loader reads content from
    source: str | None = None


class Document(BaseModel):
    """Publication-level attributes plus the ordered spine."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    lang: str | None = None
    authors: list[str] = Field(default_factory=list)
    creator: str | None = None
    producer: str | None = None
    revdate: str | None = None
    description: str | None = None
    keywords: str | None = None
    source: str | None = None
    copyright: str | None = None
    imagesdir: str = "."
    docdir: Path = Field(default_factory=Path.cwd)
    docname: str = "book"
    front_cover_image: str | None = None
    scripts: str = "latin"
    spine: list[SpineItem] = Field(default_factory=list)

    @property
    def author(self) -> str | None:
        """Primary author."""
        return self.authors[0] if self.authors else None
