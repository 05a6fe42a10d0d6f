"""Tests for theme, cover, avatar and content image resolution."""

import pytest

from epub_packager.core.assets import (
    AssetResolver,
    normalize_imagesdir,
    parse_cover_macro,
    select_fonts,
)
from epub_packager.core.container import ContainerBuilder
from epub_packager.core.postprocess import ContentPostprocessor
from epub_packager.models.document import Image, SpineItem, TargetFormat

FONT_CSS = """@font-face {
  src: url(../fonts/lato-regular-latin.ttf);
}
@font-face {
  src: url(../fonts/sourcecodepro-regular-latin.ttf);
}
"""


@pytest.fixture
def make_resolver(config, console):
    def _make(document, target_format=TargetFormat.EPUB3):
        builder = ContainerBuilder()
        resolver = AssetResolver(
            builder, document, config, ContentPostprocessor(target_format), console
        )
        return builder, resolver

    return _make


def item_content(builder: ContainerBuilder, href: str):
    return builder.book.get_item_with_href(href).content


class TestHelpers:
    def test_normalize_imagesdir(self):
        assert normalize_imagesdir(None) == ""
        assert normalize_imagesdir(".") == ""
        assert normalize_imagesdir("images") == "images/"
        assert normalize_imagesdir("images/") == "images/"

    def test_select_fonts_latin(self):
        fonts, css = select_fonts(FONT_CSS)

        assert fonts == ["fonts/lato-regular-latin.ttf", "fonts/sourcecodepro-regular-latin.ttf"]
        assert css == FONT_CSS

    def test_select_fonts_other_script(self):
        fonts, css = select_fonts(FONT_CSS, "cjk")

        assert fonts == ["fonts/lato-regular-cjk.ttf", "fonts/sourcecodepro-regular-cjk.ttf"]
        assert "latin" not in css

    def test_parse_cover_macro(self):
        assert parse_cover_macro("image:front.jpg[Front,600,900]", "images/") == (
            "images/front.jpg",
            600,
            900,
        )
        assert parse_cover_macro("image:front.jpg[]", "") == ("front.jpg", None, None)
        assert parse_cover_macro("covers/front.jpg", "images/") == ("covers/front.jpg", None, None)


class TestThemeAssets:
    def test_registers_stylesheets_and_fonts(self, make_document, make_resolver):
        builder, resolver = make_resolver(make_document())

        fonts = resolver.add_theme_assets()

        assert fonts == [
            "fonts/lato-regular-latin.ttf",
            "fonts/lato-italic-latin.ttf",
            "fonts/sourcecodepro-regular-latin.ttf",
        ]
        for href in ("styles/epub3.css", "styles/epub3-css3-only.css", "styles/epub3-fonts.css"):
            assert builder.entry(href).media_type == "text/css"
        assert builder.entry("fonts/lato-regular-latin.ttf").media_type == "application/x-font-ttf"
        assert resolver.warnings == []

    def test_kf8_stylesheets_postprocessed(self, make_document, make_resolver):
        builder, resolver = make_resolver(make_document(), TargetFormat.KF8)

        resolver.add_theme_assets()

        css = item_content(builder, "styles/epub3.css")
        assert "-webkit-column-break" not in css
        assert "max-width" not in css

    def test_missing_script_fonts_warned(self, make_document, make_resolver, console):
        builder, resolver = make_resolver(make_document(scripts="cjk"))

        assert resolver.add_theme_assets() == []
        assert len(resolver.warnings) == 3
        assert "fonts/lato-regular-cjk.ttf" in resolver.warnings[0]
        assert "-cjk.ttf" in item_content(builder, "styles/epub3-fonts.css")
        assert "Warning: Font fonts/lato-regular-cjk.ttf" in console.file.getvalue()


class TestCoverImage:
    def test_default_cover(self, make_document, make_resolver, config):
        builder, resolver = make_resolver(make_document())

        cover = resolver.add_cover_image()

        assert cover.href == "jacket/cover.png"
        assert (cover.width, cover.height) == (1050, 1600)
        entry = builder.entry("jacket/cover.png")
        assert entry.id == "cover-image"
        assert entry.properties == ["cover-image"]
        assert item_content(builder, "jacket/cover.png") == config.data_path(
            config.default_cover_image
        ).read_bytes()
        assert ("", {"name": "cover", "content": "cover-image"}) in builder.book.metadata[None][
            "meta"
        ]

    def test_cover_macro(self, tmp_path, make_document, make_resolver):
        (tmp_path / "images").mkdir()
        (tmp_path / "images" / "front.jpg").write_bytes(b"jpeg")
        doc = make_document(imagesdir="images", front_cover_image="image:front.jpg[Front,600,900]")
        builder, resolver = make_resolver(doc)

        cover = resolver.add_cover_image()

        assert cover.href == "images/jacket/cover.jpg"
        assert (cover.width, cover.height) == (600, 900)
        assert item_content(builder, "images/jacket/cover.jpg") == b"jpeg"
        assert resolver.warnings == []

    def test_plain_cover_path(self, tmp_path, make_document, make_resolver):
        (tmp_path / "art.png").write_bytes(b"png")
        builder, resolver = make_resolver(make_document(front_cover_image="art.png"))

        cover = resolver.add_cover_image()

        assert cover.href == "jacket/cover.png"
        assert item_content(builder, "jacket/cover.png") == b"png"

    def test_missing_cover_falls_back_to_default(self, make_document, make_resolver, config):
        doc = make_document(front_cover_image="image:gone.jpg[Gone,10,20]")
        builder, resolver = make_resolver(doc)

        cover = resolver.add_cover_image()

        assert cover.href == "jacket/cover.png"
        assert (cover.width, cover.height) == (1050, 1600)
        assert len(resolver.warnings) == 1
        assert "gone.jpg" in resolver.warnings[0]
        assert item_content(builder, "jacket/cover.png") == config.data_path(
            config.default_cover_image
        ).read_bytes()


class TestAvatarImages:
    def test_found_and_fallback(self, tmp_path, make_document, make_resolver, config):
        (tmp_path / "avatars").mkdir()
        (tmp_path / "avatars" / "alice.png").write_bytes(b"alice")
        builder, resolver = make_resolver(make_document())

        resolver.add_avatar_images(["alice", "bob"])

        default = config.data_path(config.default_avatar_image).read_bytes()
        assert item_content(builder, "avatars/default.png") == default
        assert item_content(builder, "avatars/alice.png") == b"alice"
        assert item_content(builder, "avatars/bob.png") == default
        assert len(resolver.warnings) == 1
        assert "bob" in resolver.warnings[0]

    def test_default_registered_without_users(self, make_document, make_resolver):
        builder, resolver = make_resolver(make_document(imagesdir="images"))

        resolver.add_avatar_images([])

        assert [e.href for e in builder.entries] == ["images/avatars/default.png"]


class TestContentImages:
    def test_found_reserved_and_missing(self, tmp_path, make_document, make_resolver):
        images = tmp_path / "images"
        (images / "jacket").mkdir(parents=True)
        (images / "fig.png").write_bytes(b"fig")
        (images / "jacket" / "cover.png").write_bytes(b"not the cover")
        item = SpineItem(
            docname="ch1",
            images=[
                Image(target="fig.png"),
                Image(target="jacket/cover.png"),
                Image(target="nope.png"),
            ],
        )
        builder, resolver = make_resolver(make_document(imagesdir="images", spine=[item]))

        resolver.add_content_images([item])

        assert [e.href for e in builder.entries] == ["images/fig.png"]
        assert len(resolver.warnings) == 2
        assert "reserved for the cover artwork" in resolver.warnings[0]
        assert "images/nope.png" in resolver.warnings[1]

    def test_per_item_imagesdir(self, tmp_path, make_document, make_resolver):
        (tmp_path / "chapter1" / "img").mkdir(parents=True)
        (tmp_path / "chapter1" / "img" / "fig.png").write_bytes(b"fig")
        item = SpineItem(docname="ch1", imagesdir="chapter1/img", images=[Image(target="fig.png")])
        builder, resolver = make_resolver(make_document(imagesdir="images", spine=[item]))

        resolver.add_content_images([item])

        assert item_content(builder, "chapter1/img/fig.png") == b"fig"
        assert resolver.warnings == []

    def test_duplicates_registered_twice(self, tmp_path, make_document, make_resolver):
        (tmp_path / "fig.png").write_bytes(b"fig")
        spine = [
            SpineItem(docname="a", images=[Image(target="fig.png")]),
            SpineItem(docname="b", images=[Image(target="fig.png")]),
        ]
        builder, resolver = make_resolver(make_document(spine=spine))

        resolver.add_content_images(spine)

        assert [e.id for e in builder.entries] == ["fig", "fig-2"]
