"""Load a document from a JSON book manifest."""

import json
import warnings
from html import escape
from pathlib import Path

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from epub_packager.models.document import Document, SpineItem

# Suppress XML parsing warnings - converted fragments are XHTML
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)


def load_document(manifest_path: Path) -> Document:
    """Read a book manifest and the chapter fragments it points at.

    Relative paths (docdir, chapter sources) resolve against the manifest's
    directory. docname defaults to the manifest file name.
    """
    data = json.loads(manifest_path.read_text(encoding="utf-8"))
    base_dir = manifest_path.resolve().parent

    docdir = Path(data.get("docdir") or ".")
    data["docdir"] = docdir if docdir.is_absolute() else base_dir / docdir
    data.setdefault("docname", manifest_path.stem)

    document = Document.model_validate(data)
    spine = [_load_item(item, base_dir) for item in document.spine]
    return document.model_copy(update={"spine": spine})


def _load_item(item: SpineItem, base_dir: Path) -> SpineItem:
    content = item.content
    if item.source and not content:
        content = (base_dir / item.source).read_text(encoding="utf-8")
    title = item.title or extract_title(content) or item.docname
    return item.model_copy(update={"content": content, "title": title})


def extract_title(content: str) -> str | None:
    """Try to extract a title from XHTML content.

    The text is returned escaped, the same form converted titles take.
    """
    if not content:
        return None
    try:
        soup = BeautifulSoup(content, "lxml")
        # Try h1 first, then h2, then title tag
        for tag in ["h1", "h2", "title"]:
            element = soup.find(tag)
            if element:
                text = element.get_text(strip=True)
                if text:
                    return escape(text, quote=False)
    except Exception:
        pass
    return None
