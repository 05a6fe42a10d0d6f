"""Format-specific rewrites of CSS and XHTML payloads."""

import re

from epub_packager.models.document import TargetFormat

# Kindle misreads column breaks and does not honor max-width
CSS_COLUMN_BREAK_RE = re.compile(r"^[ \t]*-webkit-column-break-[^\n]*(?:\n|$)", re.MULTILINE)
CSS_MAX_WIDTH_RE = re.compile(r"^[ \t]*max-width:[^\n]*(?:\n|$)", re.MULTILINE)

META_CHARSET_RE = re.compile(r'<meta charset="([^"]+?)"\s*/?>')
META_CONTENT_TYPE = (
    r'<meta http-equiv="Content-Type" content="application/xhtml+xml; charset=\1"/>'
)
IMG_PERCENT_WIDTH_RE = re.compile(r'<img([^>]+?) style="width: (\d+(?:\.\d+)?)%;?"')
SCRIPT_RE = re.compile(r"<script\b[^>]*?(?:/>|>.*?</script>)\n?", re.DOTALL)


class ContentPostprocessor:
    """Rewrite payloads for the target format.

    Only KF8 output is touched; EPUB3 payloads pass through unchanged.
    """

    def __init__(self, target_format: TargetFormat = TargetFormat.EPUB3):
        self.target_format = target_format

    @property
    def enabled(self) -> bool:
        return self.target_format == TargetFormat.KF8

    def css(self, content: str) -> str:
        """Drop declarations the Kindle renderer mishandles."""
        if not self.enabled:
            return content
        content = CSS_COLUMN_BREAK_RE.sub("", content)
        return CSS_MAX_WIDTH_RE.sub("", content)

    def xhtml(self, content: str) -> str:
        """Rewrite the charset meta, pin image heights and remove scripts."""
        if not self.enabled:
            return content
        content = META_CHARSET_RE.sub(META_CONTENT_TYPE, content)
        # Kindle does not keep the aspect ratio of percentage-sized images
        content = IMG_PERCENT_WIDTH_RE.sub(r'<img\1 style="width: \2%; height: \2%;"', content)
        return SCRIPT_RE.sub("", content)
