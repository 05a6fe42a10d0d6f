"""Assemble the navigation document, cover page and chapters into the spine."""

from typing import Callable

from epub_packager.core.container import ContainerBuilder
from epub_packager.core.metadata import TitleTarget, sanitize_title
from epub_packager.core.navigation import build_navigation_document
from epub_packager.core.postprocess import ContentPostprocessor
from epub_packager.models.document import Document, SpineItem, TargetFormat
from epub_packager.models.package import CoverImage

NavGenerator = Callable[[Document, list[SpineItem]], str]

NAV_PAGE = "nav.xhtml"
COVER_PAGE = "cover.xhtml"

# The SVG wrapper keeps the aspect ratio and confines the image to the view box
COVER_PAGE_TEMPLATE = """<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="en" lang="en">
<head>
<meta charset="UTF-8"/>
<title>{title}</title>
<style type="text/css">
@page {{
  margin: 0;
}}
html {{
  margin: 0 !important;
  padding: 0 !important;
}}
body {{
  margin: 0;
  padding: 0 !important;
  text-align: center;
}}
body > svg {{
  /* prevent bleed onto second page (removes descender space) */
  display: block;
}}
</style>
</head>
<body epub:type="cover"><svg version="1.1" xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"
  width="100%" height="100%" viewBox="0 0 {width} {height}" preserveAspectRatio="xMidYMid meet">
<image width="{width}" height="{height}" xlink:href="{href}"/>
</svg></body>
</html>
"""


def build_cover_page(document: Document, cover: CoverImage) -> str:
    return COVER_PAGE_TEMPLATE.format(
        title=sanitize_title(document.title, TitleTarget.ELEMENT),
        width=cover.width,
        height=cover.height,
        href=cover.href,
    )


class ContentAssembler:
    """Register the reading order: nav, cover page (EPUB3 only), chapters."""

    def __init__(
        self,
        builder: ContainerBuilder,
        document: Document,
        postprocessor: ContentPostprocessor,
        nav_generator: NavGenerator | None = None,
    ):
        self.builder = builder
        self.document = document
        self.postprocessor = postprocessor
        self.nav_generator = nav_generator or build_navigation_document

    def add_content(self, cover: CoverImage | None = None) -> None:
        doc = self.document
        nav = self.nav_generator(doc, doc.spine)
        self.builder.add_document(
            NAV_PAGE, self.postprocessor.xhtml(nav), uid="nav", properties=["nav"]
        )

        # kindlegen picks up the cover from the cover-image metadata instead
        if cover and self.postprocessor.target_format != TargetFormat.KF8:
            self.add_cover_page(cover)

        for item in doc.spine:
            properties = ["svg"] if "svg" in item.properties else []
            epub_item = self.builder.add_document(
                f"{item.docname}.xhtml",
                self.postprocessor.xhtml(item.content),
                properties=properties,
            )
            # toc.ncx headings must be plain text
            self.builder.add_heading(epub_item, sanitize_title(item.title) or item.docname)

    def add_cover_page(self, cover: CoverImage) -> None:
        """Place the generated cover page right after the navigation document."""
        self.builder.add_document(
            COVER_PAGE,
            build_cover_page(self.document, cover),
            uid="cover",
            position=self.builder.spine_ids.index("nav") + 1,
        )
