"""Map document attributes to package metadata."""

import re
from datetime import datetime, timezone
from enum import Enum

from epub_packager.core.container import ContainerBuilder
from epub_packager.models.document import Document

PACKAGER_NAME = "epub-packager"
DEFAULT_LANGUAGE = "en"

WORD_JOINER = "\u2060"
FROM_HTML_SPECIAL_CHARS = {"&lt;": "<", "&gt;": ">", "&amp;": "&"}

_FROM_HTML_SPECIAL_CHARS_RE = re.compile("|".join(FROM_HTML_SPECIAL_CHARS))
_XML_TAG_RE = re.compile(r"<[^>]+>")
_CSV_DELIMITER_RE = re.compile(r"\s*,\s*")


class TitleTarget(str, Enum):
    """Context a sanitized title is embedded into."""

    ATTRIBUTE = "attribute"  # attribute value, quotes escaped
    ELEMENT = "element"  # element body, entities kept
    RAW = "raw"  # converted title untouched
    PLAIN = "plain"  # plain text, entities decoded


def sanitize_title(title: str, target: TitleTarget = TitleTarget.PLAIN) -> str:
    """Render a converted title for the given embedding context.

    The word joiner used as a line-breaking hint is removed in every mode.
    """
    if target == TitleTarget.RAW:
        result = title
    else:
        result = _strip_tags(title)
        if target == TitleTarget.ATTRIBUTE:
            result = result.replace('"', "&quot;")
        elif target == TitleTarget.PLAIN:
            result = _FROM_HTML_SPECIAL_CHARS_RE.sub(
                lambda m: FROM_HTML_SPECIAL_CHARS[m.group(0)], result
            )
    return result.replace(WORD_JOINER, "")


def _strip_tags(text: str) -> str:
    return " ".join(_XML_TAG_RE.sub("", text).split())


def split_csv(value: str) -> list[str]:
    """Split a comma-delimited attribute, dropping empty values."""
    return [v for v in _CSV_DELIMITER_RE.split(value.strip()) if v]


def collect_contributors(document: Document) -> list[str]:
    """Document authors followed by per-item authors, in encounter order."""
    names = list(document.authors) + [
        item.author for item in document.spine if item.author
    ]
    return list(dict.fromkeys(names))


class MetadataBuilder:
    """Write document metadata onto a container builder."""

    def __init__(self, builder: ContainerBuilder, document: Document):
        self.builder = builder
        self.document = document

    def build(self) -> None:
        doc = self.document
        builder = self.builder

        builder.set_language(doc.lang or DEFAULT_LANGUAGE)
        builder.set_identifier(doc.id, scheme="uuid")
        builder.set_title(sanitize_title(doc.title))

        self._add_creators()
        for name in collect_contributors(doc):
            builder.add_dc("contributor", name)

        # revdate is passed through as written, even when it is not a date
        builder.add_dc("date", doc.revdate or _utc_timestamp())

        if doc.description:
            builder.add_dc("description", doc.description)
        if doc.keywords:
            for subject in split_csv(doc.keywords):
                builder.add_dc("subject", subject)
        if doc.source:
            builder.add_dc("source", doc.source)
        if doc.copyright:
            builder.add_dc("rights", doc.copyright)

    def _add_creators(self) -> None:
        """Pick creator, role and publisher.

        MARC relator roles: cre (creator), bkp (book producer), aut (author),
        prv (provider).
        """
        doc = self.document
        if doc.producer:
            if doc.creator:
                self.builder.add_creator(doc.creator, "cre")
            else:
                self.builder.add_creator(doc.producer, "bkp")
            self.builder.add_dc("publisher", doc.producer)
        elif doc.author:
            self.builder.add_creator(doc.author, "aut")
        else:
            self.builder.add_creator(PACKAGER_NAME, "prv")


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
