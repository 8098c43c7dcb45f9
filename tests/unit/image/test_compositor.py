"""Tests for the QR code image compositor."""

import io

import pytest
from PIL import Image

from slidecode.exceptions import CompositionError
from slidecode.image.compositor import (
    CodeImageCompositor,
    add_shadow,
    apply_style_variant,
    create_background,
    diagonal_gradient,
    encode_matrix,
    escape_markup,
    format_caption,
    round_corners,
)
from slidecode.image.style import StyleConfig, StyleOptions, resolve_style

URL = "http://localhost:3000/preview/deck-1700000000000000000-123"


class TestEscapeMarkup:
    """Tests for escape_markup."""

    def test_all_reserved_characters(self):
        assert escape_markup("<a&b>\"'") == "&lt;a&amp;b&gt;&quot;&#39;"

    def test_plain_text_unchanged(self):
        assert escape_markup("Quarterly Review 2026") == "Quarterly Review 2026"

    def test_existing_entities_escaped_again(self):
        assert escape_markup("&amp;") == "&amp;amp;"


class TestFormatCaption:
    """Tests for format_caption."""

    def test_strips_extension(self):
        assert format_caption("Quarterly Review.pptx") == "Quarterly Review"

    def test_keeps_inner_dots(self):
        assert format_caption("v1.2 plan.pptx") == "v1.2 plan"

    def test_exactly_max_length_kept(self):
        name = "x" * 25
        assert format_caption(f"{name}.pptx") == name

    def test_long_name_truncated(self):
        caption = format_caption("ThisIsAVeryLongPresentationName2024.pptx")

        assert caption == "ThisIsAVeryLongPresentati..."
        assert len(caption) == 28


class TestEncodeMatrix:
    """Tests for encode_matrix."""

    def test_size_and_colors(self):
        style = resolve_style(StyleOptions(foreground_color="#FF0000"))

        raster = encode_matrix(URL, style)

        assert raster.size == (300, 300)
        colors = {color for _, color in raster.getcolors()}
        assert colors == {(255, 0, 0), (255, 255, 255)}

    def test_quiet_zone_is_background(self):
        raster = encode_matrix(URL, resolve_style())
        assert raster.getpixel((0, 0)) == (255, 255, 255)

    def test_empty_url(self):
        with pytest.raises(CompositionError):
            encode_matrix("", resolve_style())


class TestStyleTransforms:
    """Tests for the style variant transforms."""

    def test_rounded_corners_transparent(self):
        code = Image.new("RGB", (100, 100), (0, 0, 0))

        rounded = round_corners(code)

        assert rounded.mode == "RGBA"
        assert rounded.getpixel((0, 0))[3] == 0
        assert rounded.getpixel((50, 50))[3] == 255

    def test_default_variant_unchanged(self):
        code = Image.new("RGB", (100, 100), (0, 0, 0))

        assert apply_style_variant(code, resolve_style()) is code

    def test_rounded_differs_from_default(self):
        code = encode_matrix(URL, resolve_style())

        default = apply_style_variant(code, resolve_style())
        rounded = apply_style_variant(code, resolve_style(StyleOptions(style_variant="rounded")))

        assert default.mode == "RGB"
        assert rounded.getpixel((0, 0))[3] == 0

    def test_shadow_grows_canvas(self):
        code = Image.new("RGB", (100, 100), (255, 255, 255))

        shadowed = add_shadow(code)

        assert shadowed.size == (120, 120)
        assert shadowed.getpixel((0, 0))[3] < 5
        # Shadow peeks out right of the code
        assert shadowed.getpixel((111, 60))[3] > 0

    def test_gradient_corners(self):
        gradient = diagonal_gradient((100, 100), (255, 255, 255), (240, 240, 240))

        top_left = gradient.getpixel((0, 0))
        bottom_right = gradient.getpixel((99, 99))
        assert all(abs(c - 255) <= 2 for c in top_left)
        assert all(abs(c - 240) <= 2 for c in bottom_right)

    def test_gradient_background(self):
        style = resolve_style(StyleOptions(style_variant="gradient", background_color="#000000"))

        background = create_background(style)

        assert background.size == (400, 450)
        assert background.getpixel((0, 0))[0] < background.getpixel((399, 449))[0]


class TestCodeImageCompositor:
    """Tests for CodeImageCompositor."""

    @pytest.mark.parametrize("variant", ["default", "rounded", "shadow", "gradient"])
    def test_render_png_dimensions(self, tmp_path, variant):
        style = resolve_style(StyleOptions(style_variant=variant))

        data = CodeImageCompositor(tmp_path).render(URL, "Quarterly Review", style)

        image = Image.open(io.BytesIO(data))
        assert image.format == "PNG"
        assert image.size == (400, 450)

    def test_custom_code_size(self, tmp_path):
        style = resolve_style(StyleOptions(code_size=200))

        image = CodeImageCompositor(tmp_path).compose(URL, "deck", style)

        assert image.size == (300, 350)

    def test_code_centered_below_caption(self, tmp_path):
        image = CodeImageCompositor(tmp_path).compose(URL, "", resolve_style())

        # Canvas margin left of the code stays background
        assert image.getpixel((10, 200)) == (255, 255, 255)
        # Finder pattern of the code starts inside the quiet zone at (50, 60)
        dark = [image.getpixel((x, 100)) for x in range(50, 100)]
        assert (0, 0, 0) in dark

    def test_tightest_shadow_canvas_keeps_code_inside(self, tmp_path):
        style = StyleConfig(
            code_size=300, image_width=320, image_height=427, style_variant="shadow"
        )

        image = CodeImageCompositor(tmp_path).compose(URL, "", style)

        assert image.size == (320, 427)
        # Top-right finder pattern is fully on the canvas
        assert (0, 0, 0) in [image.getpixel((x, 100)) for x in range(230, 292)]

    def test_caption_drawn(self, tmp_path):
        with_caption = CodeImageCompositor(tmp_path).compose(URL, "Deck", resolve_style())
        without = CodeImageCompositor(tmp_path).compose(URL, "", resolve_style())

        band = (0, 20, 400, 60)
        assert with_caption.crop(band).tobytes() != without.crop(band).tobytes()

    def test_secondary_caption_drawn(self, tmp_path):
        image = CodeImageCompositor(tmp_path).compose(URL, "", resolve_style())

        band = image.crop((0, 370, 400, 420))
        assert band.getcolors(maxcolors=10000) != [(400 * 50, (255, 255, 255))]

    @pytest.mark.asyncio
    async def test_generate_writes_file(self, tmp_path):
        compositor = CodeImageCompositor(tmp_path / "qrcodes")

        path = await compositor.generate(URL, "deck.pptx", "deck-1-2", resolve_style())

        assert path == tmp_path / "qrcodes" / "deck-1-2.png"
        assert Image.open(path).size == (400, 450)

    @pytest.mark.asyncio
    async def test_generate_write_error(self, tmp_path):
        blocker = tmp_path / "qrcodes"
        blocker.write_text("not a directory")

        with pytest.raises(CompositionError):
            await CodeImageCompositor(blocker).generate(URL, "deck.pptx", "id", resolve_style())
