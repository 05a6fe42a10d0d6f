"""Default EPUB3 navigation document."""

from html import escape

from epub_packager.core.metadata import DEFAULT_LANGUAGE, TitleTarget, sanitize_title
from epub_packager.models.document import Document, SpineItem

NAV_TEMPLATE = """<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" xml:lang="{lang}" lang="{lang}">
<head>
<meta charset="UTF-8"/>
<title>{title}</title>
<link rel="stylesheet" href="styles/epub3.css"/>
<link rel="stylesheet" href="styles/epub3-css3-only.css"/>
</head>
<body>
<h1>{title}</h1>
<nav epub:type="toc" id="toc">
<ol>
{toc}
</ol>
</nav>
<nav epub:type="landmarks" id="landmarks" hidden="hidden">
<ol>
{landmarks}
</ol>
</nav>
</body>
</html>
"""


def build_navigation_document(document: Document, spine: list[SpineItem]) -> str:
    """Build nav.xhtml listing every spine item in reading order."""
    toc = "\n".join(
        f'<li><a href="{escape(item.docname)}.xhtml">'
        f"{escape(sanitize_title(item.title or item.docname))}</a></li>"
        for item in spine
    )
    landmarks = ""
    if spine:
        landmarks = (
            f'<li><a epub:type="bodymatter" href="{escape(spine[0].docname)}.xhtml">Start</a></li>'
        )
    return NAV_TEMPLATE.format(
        lang=document.lang or DEFAULT_LANGUAGE,
        title=sanitize_title(document.title, TitleTarget.ELEMENT),
        toc=toc,
        landmarks=landmarks,
    )
