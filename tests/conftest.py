"""Shared fixtures for packaging tests."""

import io
import stat
import zipfile
from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from rich.console import Console

from epub_packager.config import PackagerConfig
from epub_packager.models.document import Document, SpineItem


@pytest.fixture
def config() -> PackagerConfig:
    return PackagerConfig()


@pytest.fixture
def console() -> Console:
    """Console writing to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def make_document(tmp_path):
    """Build a Document rooted in tmp_path."""

    def _make(**kwargs) -> Document:
        kwargs.setdefault("title", "My Book")
        kwargs.setdefault("docdir", tmp_path)
        kwargs.setdefault(
            "spine", [SpineItem(docname="intro", title="Intro", content="<p>Hi</p>")]
        )
        return Document(**kwargs)

    return _make


@pytest.fixture
def make_tool(tmp_path):
    """Write an executable shell script standing in for an external tool."""

    def _make(name: str, body: str, directory: Path | None = None) -> Path:
        directory = directory or tmp_path / "bin"
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


def read_opf(epub_path: Path) -> BeautifulSoup:
    with zipfile.ZipFile(epub_path) as archive:
        return BeautifulSoup(archive.read("EPUB/content.opf"), "xml")


def read_entry(epub_path: Path, name: str) -> str:
    with zipfile.ZipFile(epub_path) as archive:
        return archive.read(name).decode("utf-8")


def archive_names(epub_path: Path) -> list[str]:
    with zipfile.ZipFile(epub_path) as archive:
        return archive.namelist()
