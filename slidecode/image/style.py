"""QR code style configuration.

``StyleOptions`` is the partial override a caller passes in (every field
optional); ``resolve_style`` applies defaults and returns a complete,
validated ``StyleConfig``.
"""

from typing import Literal

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from slidecode.config.constants import (
    CODE_TOP,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_CAPTION_COLOR,
    DEFAULT_CAPTION_FONT,
    DEFAULT_CAPTION_SIZE,
    DEFAULT_CODE_SIZE,
    DEFAULT_FOREGROUND_COLOR,
    HEIGHT_PADDING,
    SECONDARY_CAPTION_OFFSET,
    SECONDARY_CAPTION_SIZE,
    SHADOW_MARGIN,
    WIDTH_PADDING,
)
from slidecode.config.settings import QRCodeConfig

StyleVariant = Literal["default", "rounded", "gradient", "shadow"]


def _check_color(value: str) -> str:
    try:
        ImageColor.getrgb(value)
    except ValueError as e:
        raise ValueError(f"Invalid color: {value!r}") from e
    return value


class StyleOptions(BaseModel):
    """Partial style override; unset fields fall back to the defaults."""

    model_config = ConfigDict(extra="forbid")

    code_size: int | None = Field(default=None, ge=21)
    image_width: int | None = Field(default=None, ge=1)
    image_height: int | None = Field(default=None, ge=1)
    foreground_color: str | None = None
    background_color: str | None = None
    caption_color: str | None = None
    caption_size: int | None = Field(default=None, ge=1)
    caption_font: str | None = None
    style_variant: StyleVariant | None = None


class StyleConfig(BaseModel):
    """Complete style for one rendered code image."""

    model_config = ConfigDict(frozen=True)

    code_size: int = Field(default=DEFAULT_CODE_SIZE, ge=21)
    image_width: int = DEFAULT_CODE_SIZE + WIDTH_PADDING
    image_height: int = DEFAULT_CODE_SIZE + HEIGHT_PADDING
    foreground_color: str = DEFAULT_FOREGROUND_COLOR
    background_color: str = DEFAULT_BACKGROUND_COLOR
    caption_color: str = DEFAULT_CAPTION_COLOR
    caption_size: int = Field(default=DEFAULT_CAPTION_SIZE, ge=1)
    caption_font: str = DEFAULT_CAPTION_FONT
    style_variant: StyleVariant = "default"

    @field_validator("foreground_color", "background_color", "caption_color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        return _check_color(value)

    @property
    def styled_code_size(self) -> int:
        """Edge length of the code after the style transform."""
        if self.style_variant == "shadow":
            return self.code_size + 2 * SHADOW_MARGIN
        return self.code_size

    @model_validator(mode="after")
    def _check_canvas(self) -> "StyleConfig":
        code = self.styled_code_size
        if self.image_width < code:
            raise ValueError(
                f"image_width ({self.image_width}) cannot hold the {self.style_variant} "
                f"code (needs at least {code})"
            )
        # Room for the code and the secondary caption below it
        needed = CODE_TOP + code + SECONDARY_CAPTION_OFFSET + SECONDARY_CAPTION_SIZE
        if self.image_height < needed:
            raise ValueError(
                f"image_height ({self.image_height}) cannot hold the {self.style_variant} "
                f"code and its captions (needs at least {needed})"
            )
        return self


def resolve_style(
    options: StyleOptions | None = None,
    defaults: QRCodeConfig | None = None,
) -> StyleConfig:
    """Apply defaults to a partial style override.

    The canvas size follows ``code_size`` (+100 wide, +150 high) unless the
    options or the defaults set it explicitly.

    Raises:
        pydantic.ValidationError: If the merged style is invalid
    """
    base = defaults or QRCodeConfig()
    given = options.model_dump(exclude_none=True) if options else {}

    merged = base.model_dump()
    merged.update(given)

    code_size = merged["code_size"]
    if merged.get("image_width") is None:
        merged["image_width"] = code_size + WIDTH_PADDING
    if merged.get("image_height") is None:
        merged["image_height"] = code_size + HEIGHT_PADDING

    return StyleConfig(**merged)
