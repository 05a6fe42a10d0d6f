"""Packager configuration."""

import os
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict

DATA_DIR = Path(__file__).parent / "data"


def _default_epubcheck() -> str:
    return "epubcheck.bat" if sys.platform.startswith("win") else "epubcheck.sh"


class PackagerConfig(BaseModel):
    """Immutable settings shared by every packaging component."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = DATA_DIR
    kindlegen: str = "kindlegen"
    epubcheck: str = _default_epubcheck()
    # Path of the bundled images, relative to data_dir
    default_cover_image: str = "images/default-cover.png"
    default_avatar_image: str = "images/default-avatar.png"

    @classmethod
    def from_env(cls, **overrides) -> "PackagerConfig":
        """Build config honoring the KINDLEGEN and EPUBCHECK overrides."""
        values = {}
        if os.environ.get("KINDLEGEN"):
            values["kindlegen"] = os.environ["KINDLEGEN"]
        if os.environ.get("EPUBCHECK"):
            values["epubcheck"] = os.environ["EPUBCHECK"]
        values.update(overrides)
        return cls(**values)

    def data_path(self, relative: str) -> Path:
        """Resolve a path inside the bundled data directory."""
        return self.data_dir / relative
