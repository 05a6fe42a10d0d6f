"""Drive a packaging run from document to archive and optional post-steps."""

import re
import shutil
import zipfile
from enum import Enum
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from epub_packager.config import PackagerConfig
from epub_packager.core.assets import AssetResolver
from epub_packager.core.container import ContainerBuilder
from epub_packager.core.content import ContentAssembler, NavGenerator
from epub_packager.core.metadata import MetadataBuilder
from epub_packager.core.postprocess import ContentPostprocessor
from epub_packager.core.tools import resolve_tool, run_tool
from epub_packager.models.document import Document, TargetFormat
from epub_packager.models.package import PackageResult

LEGACY_SUFFIX = "-legacy"
LEGACY_EXTENSION_RE = re.compile(rf"{LEGACY_SUFFIX}\.epub$")


class PackagerState(str, Enum):
    """Stages of a packaging run, in order."""

    INIT = "init"
    METADATA = "metadata"
    ASSETS = "assets"
    CONTENT = "content"
    CONTAINER_WRITTEN = "container_written"
    EXTRACTED = "extracted"
    CONVERTED = "converted"
    VALIDATED = "validated"
    DONE = "done"


class Packager:
    """Package a document into an EPUB3 (or Kindle-ready) archive."""

    def __init__(
        self,
        document: Document,
        dest_dir: Path,
        target_format: TargetFormat = TargetFormat.EPUB3,
        config: PackagerConfig | None = None,
        console: Console | None = None,
        nav_generator: NavGenerator | None = None,
    ):
        self.document = document
        self.dest_dir = Path(dest_dir)
        self.target_format = TargetFormat(target_format)
        self.config = config or PackagerConfig.from_env()
        self.console = console
        self.nav_generator = nav_generator
        self.state = PackagerState.INIT
        self.builder: ContainerBuilder | None = None
        self.warnings: list[str] = []

    @property
    def epub_path(self) -> Path:
        suffix = LEGACY_SUFFIX if self.target_format == TargetFormat.KF8 else ""
        return (self.dest_dir / f"{self.document.docname}{suffix}.epub").resolve()

    @property
    def format_label(self) -> str:
        return self.target_format.value.upper()

    def _say(self, message: str) -> None:
        if self.console:
            self.console.print(message)

    def build(self) -> ContainerBuilder:
        """Populate a fresh container builder without writing it."""
        doc = self.document
        builder = ContainerBuilder()
        postprocessor = ContentPostprocessor(self.target_format)

        self.state = PackagerState.METADATA
        MetadataBuilder(builder, doc).build()

        self.state = PackagerState.ASSETS
        resolver = AssetResolver(builder, doc, self.config, postprocessor, self.console)
        resolver.add_theme_assets()
        cover = resolver.add_cover_image()
        usernames = list(dict.fromkeys(item.username for item in doc.spine if item.username))
        resolver.add_avatar_images(usernames)
        resolver.add_content_images(doc.spine)
        self.warnings = resolver.warnings

        self.state = PackagerState.CONTENT
        ContentAssembler(builder, doc, postprocessor, self.nav_generator).add_content(cover)

        self.builder = builder
        return builder

    def package(self, extract: bool = False, validate: bool = False) -> PackageResult:
        """Write the archive, then extract, convert or validate as requested."""
        builder = self.build()

        self.dest_dir.mkdir(parents=True, exist_ok=True)
        epub_file = builder.generate(self.epub_path)
        self.state = PackagerState.CONTAINER_WRITTEN
        self._say(f"[green]Wrote {self.format_label} to {escape(str(epub_file))}[/]")

        result = PackageResult(epub_path=epub_file, warnings=list(self.warnings))

        if extract:
            result.extract_dir = self.extract(epub_file)
            self.state = PackagerState.EXTRACTED

        if self.target_format == TargetFormat.KF8:
            result.mobi_path, result.tool_exit_code = self.distill_epub_to_mobi(epub_file)
            self.state = PackagerState.CONVERTED
        elif validate:
            result.tool_exit_code = self.validate_epub(epub_file)
            self.state = PackagerState.VALIDATED

        self.state = PackagerState.DONE
        return result

    def extract(self, epub_file: Path) -> Path:
        """Unpack the archive into a sibling directory, replacing any old one."""
        extract_dir = epub_file.with_suffix("")
        if extract_dir.is_dir():
            shutil.rmtree(extract_dir)
        extract_dir.mkdir()
        with zipfile.ZipFile(epub_file) as archive:
            archive.extractall(extract_dir)
        self._say(f"[green]Extracted {self.format_label} to {escape(str(extract_dir))}[/]")
        return extract_dir

    def distill_epub_to_mobi(self, epub_file: Path) -> tuple[Path, int]:
        """Convert the archive to MOBI with kindlegen."""
        kindlegen = resolve_tool("kindlegen", self.config.kindlegen, ["kindlegen"])
        mobi_name = LEGACY_EXTENSION_RE.sub(".mobi", epub_file.name)
        returncode = run_tool([kindlegen, "-o", mobi_name, str(epub_file)], self.console)
        mobi_file = epub_file.parent / mobi_name
        self._say(f"[green]Wrote MOBI to {escape(str(mobi_file))}[/]")
        return mobi_file, returncode

    def validate_epub(self, epub_file: Path) -> int:
        """Check the archive with epubcheck."""
        epubcheck = resolve_tool("epubcheck", self.config.epubcheck, ["epubcheck"])
        return run_tool([epubcheck, str(epub_file)], self.console)
