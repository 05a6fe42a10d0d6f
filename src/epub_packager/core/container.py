"""EPUB container assembly using ebooklib."""

import re
from pathlib import Path

from ebooklib import epub

from epub_packager.models.package import ManifestEntry

XHTML_MEDIA_TYPE = "application/xhtml+xml"
MARC_RELATORS = "marc:relators"

_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class ContainerBuilder:
    """Register resources, spine entries and metadata, then write the archive.

    Identifiers are chosen when a resource is registered, so callers that need
    a well-known id (``cover``, ``nav``) pass it up front.
    """

    IDENTIFIER_ID = "pub-identifier"
    # Ids handed out explicitly; never generated from file names
    RESERVED_IDS = frozenset({"nav", "ncx", "cover", "cover-image"})

    def __init__(self):
        self.book = epub.EpubBook()
        self.book.IDENTIFIER_ID = self.IDENTIFIER_ID
        self.entries: list[ManifestEntry] = []
        self._spine: list[epub.EpubItem] = []
        self._ids: set[str] = set(self.RESERVED_IDS)
        self._heading_count = 0

    # Metadata

    def set_identifier(self, uid: str, scheme: str | None = None) -> None:
        self.book.set_identifier(uid)
        if scheme:
            self.book.add_metadata(
                None,
                "meta",
                scheme,
                {
                    "refines": f"#{self.IDENTIFIER_ID}",
                    "property": "identifier-type",
                    "scheme": "xsd:string",
                },
            )

    def set_language(self, lang: str) -> None:
        self.book.language = lang
        self.book.add_metadata("DC", "language", lang, {"id": "pub-language"})

    def set_title(self, title: str) -> None:
        self.book.title = title
        self.book.add_metadata("DC", "title", title, {"id": "pub-title"})

    def add_creator(self, name: str, role: str, uid: str = "pub-creator") -> None:
        """Add a dc:creator refined with a MARC relator role."""
        self.book.add_metadata("DC", "creator", name, {"id": uid})
        self.book.add_metadata(
            None,
            "meta",
            role,
            {"refines": f"#{uid}", "property": "role", "scheme": MARC_RELATORS},
        )

    def add_dc(self, name: str, value: str) -> None:
        """Add a plain Dublin Core element (publisher, date, subject, ...)."""
        self.book.add_metadata("DC", name, value)

    def add_meta(self, name: str, content: str) -> None:
        """Add an OPF2-style ``<meta name=... content=...>`` hint."""
        self.book.add_metadata(None, "meta", "", {"name": name, "content": content})

    def get_metadata(self, name: str) -> list[str]:
        """Return values recorded for a Dublin Core element."""
        return [value for value, _ in self.book.get_metadata("DC", name)]

    # Resources

    def make_id(self, seed: str) -> str:
        """Derive a unique, XML-safe identifier from a file name."""
        base = _INVALID_ID_CHARS.sub("_", Path(seed).stem) or "item"
        if not (base[0].isalpha() or base[0] == "_"):
            base = f"_{base}"
        uid, n = base, 1
        while uid in self._ids:
            n += 1
            uid = f"{base}-{n}"
        return uid

    def add_file(
        self,
        href: str,
        content: bytes | str,
        media_type: str | None = None,
        properties: list[str] | None = None,
        uid: str | None = None,
    ) -> epub.EpubItem:
        """Register a manifest-only resource.

        When media_type is omitted, ebooklib guesses it from the file name.
        """
        item_cls = epub.EpubImage if _is_image(href) else epub.EpubItem
        item = item_cls(
            uid=uid or self.make_id(href),
            file_name=href,
            media_type=media_type or "",
            content=content,
        )
        item.properties = list(properties or [])
        self.book.add_item(item)
        self._ids.add(item.id)
        self.entries.append(
            ManifestEntry(
                id=item.id,
                href=href,
                media_type=item.media_type,
                properties=item.properties,
            )
        )
        return item

    def add_document(
        self,
        href: str,
        content: str,
        uid: str | None = None,
        properties: list[str] | None = None,
        linear: bool = True,
        position: int | None = None,
    ) -> epub.EpubItem:
        """Register an XHTML document and place it in the spine.

        position inserts at that spine index; by default the item is appended.
        """
        item = self.add_file(href, content, XHTML_MEDIA_TYPE, properties, uid)
        item.is_linear = linear
        if position is None:
            self._spine.append(item)
        else:
            self._spine.insert(position, item)
        entry = self.entries[-1]
        entry.linear = linear
        entry.in_spine = True
        return item

    def add_heading(self, item: epub.EpubItem, title: str) -> None:
        """Attach a plain-text heading used for the NCX table of contents."""
        self._heading_count += 1
        self.book.toc.append(
            epub.Link(item.file_name, title, f"navpoint-{self._heading_count}")
        )

    @property
    def spine_ids(self) -> list[str]:
        return [item.id for item in self._spine]

    def entry(self, href: str) -> ManifestEntry | None:
        """Return the last entry registered under href."""
        for entry in reversed(self.entries):
            if entry.href == href:
                return entry
        return None

    def generate(self, path: Path) -> Path:
        """Serialize the package to path."""
        self.book.add_item(epub.EpubNcx())
        self.book.spine = list(self._spine)
        epub.write_epub(str(path), self.book, {"raise_exceptions": True})
        return path


def _is_image(href: str) -> bool:
    return Path(href).suffix.lower() in {".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"}
