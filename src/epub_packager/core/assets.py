"""Resolve theme, cover, avatar and content images into package resources."""

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from epub_packager.config import PackagerConfig
from epub_packager.core.container import ContainerBuilder
from epub_packager.core.postprocess import ContentPostprocessor
from epub_packager.models.document import Document, SpineItem
from epub_packager.models.package import CoverImage

FONT_MEDIA_TYPE = "application/x-font-ttf"
THEME_STYLESHEETS = ("styles/epub3.css", "styles/epub3-css3-only.css")
FONTS_STYLESHEET = "styles/epub3-fonts.css"

INLINE_IMAGE_MACRO_RE = re.compile(r"^image:(.*?)\[(.*?)\]$")
FONT_SCRIPT_RE = re.compile(r"(?<=-)latin(?=\.ttf\))")
FONT_URL_RE = re.compile(r"url\(\.\./(.+\.ttf)\);$", re.MULTILINE)


def normalize_imagesdir(imagesdir: str | None) -> str:
    """Return the images directory as a prefix: '' or 'dir/'."""
    imagesdir = (imagesdir or ".").rstrip("/")
    if imagesdir in ("", "."):
        return ""
    return f"{imagesdir}/"


def select_fonts(font_css: str, scripts: str = "latin") -> tuple[list[str], str]:
    """Swap font files for the requested script set.

    Returns the referenced font paths and the rewritten font CSS.
    """
    if scripts != "latin":
        font_css = FONT_SCRIPT_RE.sub(scripts, font_css)
    return FONT_URL_RE.findall(font_css), font_css


def parse_cover_macro(value: str, imagesdir: str) -> tuple[str, int | None, int | None]:
    """Split an ``image:path[alt,width,height]`` cover reference.

    Plain paths are returned unchanged with no size.
    """
    match = INLINE_IMAGE_MACRO_RE.match(value)
    if not match:
        return value, None, None
    attrs = [a.strip() for a in match.group(2).split(",", 2)]
    width = _to_int(attrs[1]) if len(attrs) > 1 else None
    height = _to_int(attrs[2]) if len(attrs) > 2 else None
    return f"{imagesdir}{match.group(1)}", width, height


def _to_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def _read_bytes(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError:
        return None


class AssetResolver:
    """Register images, fonts and stylesheets with the container builder.

    Missing or unreadable files never abort packaging: they fall back to a
    bundled asset or are skipped, with a warning either way.
    """

    def __init__(
        self,
        builder: ContainerBuilder,
        document: Document,
        config: PackagerConfig,
        postprocessor: ContentPostprocessor,
        console: Console | None = None,
    ):
        self.builder = builder
        self.document = document
        self.config = config
        self.postprocessor = postprocessor
        self.console = console
        self.warnings: list[str] = []
        self.imagesdir = normalize_imagesdir(document.imagesdir)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.console:
            self.console.print(f"[yellow]Warning: {escape(message)}[/]")

    def add_theme_assets(self) -> list[str]:
        """Register the bundled stylesheets and the fonts they reference."""
        for stylesheet in THEME_STYLESHEETS:
            css = self.config.data_path(stylesheet).read_text(encoding="utf-8")
            self.builder.add_file(stylesheet, self.postprocessor.css(css), "text/css")

        font_css = self.config.data_path(FONTS_STYLESHEET).read_text(encoding="utf-8")
        font_list, font_css = select_fonts(font_css, self.document.scripts)
        self.builder.add_file(FONTS_STYLESHEET, font_css, "text/css")

        registered = []
        for font in font_list:
            data = _read_bytes(self.config.data_path(font))
            if data is None:
                self.warn(f"Font {font} not found or not readable for scripts {self.document.scripts}.")
                continue
            self.builder.add_file(font, data, FONT_MEDIA_TYPE)
            registered.append(font)
        return registered

    def add_cover_image(self) -> CoverImage:
        """Register the front cover artwork under the reserved jacket path."""
        width = height = None
        data = None
        if self.document.front_cover_image:
            source, width, height = parse_cover_macro(
                self.document.front_cover_image, self.imagesdir
            )
            data = _read_bytes(self.document.docdir / source)
            if data is None:
                self.warn(
                    f"Cover image {source} not found or not readable. "
                    "Falling back to default cover."
                )
                width = height = None

        if data is None:
            source = self.config.default_cover_image
            data = self.config.data_path(source).read_bytes()

        href = f"{self.imagesdir}jacket/cover{Path(source).suffix}"
        self.builder.add_file(href, data, properties=["cover-image"], uid="cover-image")
        # Kindle tooling locates the cover through this hint rather than the spine
        self.builder.add_meta("cover", "cover-image")

        if width and height:
            return CoverImage(href=href, width=width, height=height)
        return CoverImage(href=href)

    def add_avatar_images(self, usernames: list[str]) -> None:
        """Register one avatar per username, falling back to the default."""
        default_avatar = self.config.data_path(self.config.default_avatar_image).read_bytes()
        self.builder.add_file(f"{self.imagesdir}avatars/default.png", default_avatar)

        for username in usernames:
            avatar = f"{self.imagesdir}avatars/{username}.png"
            data = _read_bytes(self.document.docdir / avatar)
            if data is None:
                self.warn(
                    f"Avatar {avatar} not found or not readable. "
                    f"Falling back to default avatar for {username}."
                )
                data = default_avatar
            self.builder.add_file(avatar, data)

    def add_content_images(self, spine: list[SpineItem]) -> None:
        """Register the images referenced by each spine item.

        The same image referenced twice is registered twice; inline images
        are not collected.
        """
        reserved_prefix = f"{self.imagesdir}jacket/cover."
        for item in spine:
            imagesdir = normalize_imagesdir(item.imagesdir or self.document.imagesdir)
            for image in item.images:
                image_path = f"{imagesdir}{image.target}"
                if image_path.startswith(reserved_prefix):
                    self.warn(
                        f"The image path {image_path} is reserved for the cover artwork. "
                        "Ignoring conflicting image from content."
                    )
                    continue
                data = _read_bytes(self.document.docdir / image_path)
                if data is None:
                    self.warn(f"Image not found or not readable: {image_path}")
                    continue
                self.builder.add_file(image_path, data)
