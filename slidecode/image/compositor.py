"""Labeled QR code image compositor.

Renders a preview URL as a QR code and composes it with a caption into a
single PNG card:

    +------------------------------+
    |        Quarterly Review      |   caption, centered at y=40
    |      +----------------+      |
    |      |                |      |   code, top at y=60
    |      |    QR  CODE    |      |
    |      |                |      |
    |      +----------------+      |
    |        scan to preview       |   secondary caption, 70% opacity
    +------------------------------+

Four style variants: default, rounded (rounded alpha corners), shadow
(soft drop shadow, canvas grown by a margin) and gradient (diagonal
background from the background color to a neutral grey).
"""

from __future__ import annotations

import io
from functools import lru_cache
from pathlib import Path

import anyio
import qrcode
from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont
from qrcode.constants import ERROR_CORRECT_M

from slidecode.config.constants import (
    CAPTION_CENTER_Y,
    CAPTION_ELLIPSIS,
    CODE_TOP,
    GRADIENT_END_COLOR,
    MAX_CAPTION_LENGTH,
    QR_BORDER_MODULES,
    ROUNDED_CORNER_RADIUS,
    SECONDARY_CAPTION_OFFSET,
    SECONDARY_CAPTION_OPACITY,
    SECONDARY_CAPTION_SIZE,
    SECONDARY_CAPTION_TEXT,
    SHADOW_BLUR,
    SHADOW_MARGIN,
    SHADOW_OFFSET,
    SHADOW_OPACITY,
    SHADOW_RADIUS,
)
from slidecode.exceptions import CompositionError
from slidecode.image.style import StyleConfig
from slidecode.utils.fs import ensure_directory
from slidecode.utils.logging import get_logger

log = get_logger(__name__)

RGB = tuple[int, int, int]

_MARKUP_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
}

# Tried after the requested font
_FALLBACK_FONTS = ("DejaVuSans-Bold.ttf", "DejaVuSans.ttf", "LiberationSans-Bold.ttf")


def escape_markup(text: str) -> str:
    """Escape the five reserved markup characters (& < > " ')."""
    return "".join(_MARKUP_ESCAPES.get(ch, ch) for ch in text)


def format_caption(file_name: str, max_length: int = MAX_CAPTION_LENGTH) -> str:
    """Display caption for a deck: base name without extension, length-capped.

    Names longer than ``max_length`` characters are cut to ``max_length``
    and get ``...`` appended.
    """
    name = Path(file_name).stem
    if len(name) > max_length:
        return name[:max_length] + CAPTION_ELLIPSIS
    return name


def to_rgb(color: str) -> RGB:
    """Parse a CSS-style color string into an RGB triple."""
    r, g, b = ImageColor.getrgb(color)[:3]
    return (r, g, b)


Font = ImageFont.ImageFont | ImageFont.FreeTypeFont


@lru_cache(maxsize=32)
def load_font(name: str, size: int, bold: bool = False) -> Font:
    """Load a TrueType font by family name, falling back to bundled fonts."""
    candidates = []
    if bold:
        candidates += [f"{name} Bold.ttf", f"{name}bd.ttf", f"{name}-Bold.ttf"]
    candidates += [f"{name}.ttf", name, *_FALLBACK_FONTS]

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    log.debug("No TrueType font found, using Pillow default", font=name)
    return ImageFont.load_default(size=size)


def encode_matrix(url: str, style: StyleConfig) -> Image.Image:
    """Encode a URL as a ``code_size`` square QR raster (error correction M)."""
    if not url:
        raise CompositionError("Cannot encode an empty URL")

    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=QR_BORDER_MODULES)
    qr.add_data(url)
    qr.make(fit=True)
    matrix = qr.get_matrix()

    dark = to_rgb(style.foreground_color)
    light = to_rgb(style.background_color)
    modules = len(matrix)

    raster = Image.new("RGB", (modules, modules), light)
    raster.putdata([dark if cell else light for row in matrix for cell in row])
    return raster.resize((style.code_size, style.code_size), Image.Resampling.NEAREST)


def round_corners(code: Image.Image, radius: int = ROUNDED_CORNER_RADIUS) -> Image.Image:
    """Mask the code with a rounded-rectangle alpha channel."""
    rounded = code.convert("RGBA")
    width, height = rounded.size

    mask = Image.new("L", rounded.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, width - 1, height - 1), radius=radius, fill=255)
    rounded.putalpha(mask)
    return rounded


def add_shadow(code: Image.Image, margin: int = SHADOW_MARGIN) -> Image.Image:
    """Grow the canvas by ``margin`` and put a soft drop shadow under the code."""
    width, height = code.size
    size = (width + 2 * margin, height + 2 * margin)

    shadow = Image.new("RGBA", size, (0, 0, 0, 0))
    left = top = margin + SHADOW_OFFSET
    ImageDraw.Draw(shadow).rounded_rectangle(
        (left, top, left + width - 1, top + height - 1),
        radius=SHADOW_RADIUS,
        fill=(0, 0, 0, round(255 * SHADOW_OPACITY)),
    )
    shadow = shadow.filter(ImageFilter.GaussianBlur(SHADOW_BLUR))

    shadow.alpha_composite(code.convert("RGBA"), dest=(margin, margin))
    return shadow


def diagonal_gradient(size: tuple[int, int], start: RGB, end: RGB) -> Image.Image:
    """Top-left ``start`` to bottom-right ``end`` linear gradient."""
    ramp = Image.linear_gradient("L")  # 256x256, black at top, white at bottom
    vertical = ramp.resize(size)
    # Counter-clockwise turn moves the black top edge to the left
    horizontal = ramp.transpose(Image.Transpose.ROTATE_90).resize(size)
    mask = Image.blend(horizontal, vertical, 0.5)

    return Image.composite(Image.new("RGB", size, end), Image.new("RGB", size, start), mask)


def apply_style_variant(code: Image.Image, style: StyleConfig) -> Image.Image:
    """Transform the raw code raster according to ``style_variant``.

    ``gradient`` only changes the card background, so the raster passes
    through unchanged like ``default``.
    """
    if style.style_variant == "rounded":
        return round_corners(code)
    if style.style_variant == "shadow":
        return add_shadow(code)
    return code


def create_background(style: StyleConfig) -> Image.Image:
    """Card background: flat fill, or the diagonal gradient variant."""
    size = (style.image_width, style.image_height)
    background = to_rgb(style.background_color)
    if style.style_variant == "gradient":
        return diagonal_gradient(size, background, to_rgb(GRADIENT_END_COLOR))
    return Image.new("RGB", size, background)


def _draw_centered(
    draw: ImageDraw.ImageDraw,
    center: tuple[float, float],
    text: str,
    font: Font,
    fill: tuple[int, ...],
) -> None:
    # textbbox works for bitmap and TrueType fonts alike, anchors do not
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center[0] - (left + right) / 2
    y = center[1] - (top + bottom) / 2
    draw.text((x, y), text, font=font, fill=fill)


class CodeImageCompositor:
    """Renders labeled QR code cards and stores them under ``output_dir``."""

    def __init__(self, output_dir: Path | str) -> None:
        """Initialize the compositor.

        Args:
            output_dir: Directory receiving ``<file_id>.png`` images
        """
        self.output_dir = Path(output_dir)

    def compose(self, url: str, caption: str, style: StyleConfig) -> Image.Image:
        """Compose the card as a Pillow image."""
        code = apply_style_variant(encode_matrix(url, style), style)
        canvas = create_background(style)

        code_x = (style.image_width - code.width) // 2
        canvas.paste(code, (code_x, CODE_TOP), code if code.mode == "RGBA" else None)

        caption_rgb = to_rgb(style.caption_color)
        center_x = style.image_width / 2

        draw = ImageDraw.Draw(canvas)
        if caption:
            font = load_font(style.caption_font, style.caption_size, bold=True)
            _draw_centered(draw, (center_x, CAPTION_CENTER_Y), caption, font, caption_rgb)

        # Secondary caption is drawn on an overlay to get partial opacity
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        hint_font = load_font(style.caption_font, SECONDARY_CAPTION_SIZE)
        _draw_centered(
            ImageDraw.Draw(overlay),
            (center_x, CODE_TOP + code.height + SECONDARY_CAPTION_OFFSET),
            SECONDARY_CAPTION_TEXT,
            hint_font,
            (*caption_rgb, round(255 * SECONDARY_CAPTION_OPACITY)),
        )
        return Image.alpha_composite(canvas.convert("RGBA"), overlay).convert("RGB")

    def render(self, url: str, caption: str, style: StyleConfig) -> bytes:
        """Render the card and encode it as PNG.

        Raises:
            CompositionError: If encoding or composition fails
        """
        try:
            image = self.compose(url, caption, style)
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
        except CompositionError:
            raise
        except Exception as e:
            raise CompositionError(f"QR code rendering failed: {e}") from e
        return buffer.getvalue()

    async def generate(
        self,
        url: str,
        file_name: str,
        file_id: str,
        style: StyleConfig,
    ) -> Path:
        """Render the card for a deck and write ``<output_dir>/<file_id>.png``.

        Args:
            url: Preview URL to encode
            file_name: Original deck file name (caption source)
            file_id: File identifier naming the output image
            style: Resolved style

        Returns:
            Path of the written image
        """
        caption = format_caption(file_name)
        data = await anyio.to_thread.run_sync(
            self.render, url, caption, style, abandon_on_cancel=True
        )

        output_path = self.output_dir / f"{file_id}.png"
        try:
            ensure_directory(self.output_dir)
            await anyio.Path(output_path).write_bytes(data)
        except OSError as e:
            raise CompositionError(f"Failed to write {output_path}: {e}") from e

        log.info(
            "QR code generated",
            file_id=file_id,
            path=str(output_path),
            style=style.style_variant,
            bytes=len(data),
        )
        return output_path
