"""Configuration settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

from slidecode.config.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BASE_URL,
    DEFAULT_CAPTION_COLOR,
    DEFAULT_CAPTION_FONT,
    DEFAULT_CAPTION_SIZE,
    DEFAULT_CLEANUP_MAX_AGE_HOURS,
    DEFAULT_CODE_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_CONFIG_FILE,
    DEFAULT_CONVERSION_TIMEOUT,
    DEFAULT_CONVERTED_DIR,
    DEFAULT_FOREGROUND_COLOR,
    DEFAULT_LOG_DIR,
    DEFAULT_QRCODES_DIR,
    DEFAULT_RENDER_DPI,
    DEFAULT_REPORTS_DIR,
    DEFAULT_TASK_TIMEOUT,
    DEFAULT_UPLOADS_DIR,
    DEFAULT_WORKSPACE_ROOT,
    PRESENTATION_EXTENSIONS,
)


class WorkspaceConfig(BaseModel):
    """On-disk layout keyed by file identifier."""

    root: str = DEFAULT_WORKSPACE_ROOT
    uploads_dir: str = DEFAULT_UPLOADS_DIR
    converted_dir: str = DEFAULT_CONVERTED_DIR
    qrcodes_dir: str = DEFAULT_QRCODES_DIR
    reports_dir: str = DEFAULT_REPORTS_DIR


class BatchConfig(BaseModel):
    """Batch scheduling configuration."""

    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)
    task_timeout: float = Field(default=DEFAULT_TASK_TIMEOUT, gt=0)
    base_url: str = DEFAULT_BASE_URL
    extensions: list[str] = Field(default_factory=lambda: list(PRESENTATION_EXTENSIONS))


class ConverterConfig(BaseModel):
    """External converter configuration (LibreOffice + PyMuPDF)."""

    soffice_path: str | None = None
    timeout: int = Field(default=DEFAULT_CONVERSION_TIMEOUT, ge=1)
    dpi: int = Field(default=DEFAULT_RENDER_DPI, ge=36, le=600)
    fallback_preview: bool = True  # Write a placeholder page when LibreOffice is unusable


class QRCodeConfig(BaseModel):
    """Default QR code style, overridable per run."""

    code_size: int = Field(default=DEFAULT_CODE_SIZE, ge=21)
    image_width: int | None = None  # None -> code_size + 100
    image_height: int | None = None  # None -> code_size + 150
    foreground_color: str = DEFAULT_FOREGROUND_COLOR
    background_color: str = DEFAULT_BACKGROUND_COLOR
    caption_color: str = DEFAULT_CAPTION_COLOR
    caption_size: int = Field(default=DEFAULT_CAPTION_SIZE, ge=1)
    caption_font: str = DEFAULT_CAPTION_FONT
    style_variant: Literal["default", "rounded", "gradient", "shadow"] = "default"


class CleanupConfig(BaseModel):
    """Staged upload cleanup configuration."""

    max_age_hours: float = Field(default=DEFAULT_CLEANUP_MAX_AGE_HOURS, gt=0)


class SlidecodeSettings(BaseSettings):
    """Main configuration class for slidecode."""

    model_config = SettingsConfigDict(
        env_prefix="SLIDECODE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        """Customize settings sources to include YAML file."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=DEFAULT_CONFIG_FILE),
            file_secret_settings,
        )

    # Sub-configurations
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)
    converter: ConverterConfig = Field(default_factory=ConverterConfig)
    qrcode: QRCodeConfig = Field(default_factory=QRCodeConfig)
    cleanup: CleanupConfig = Field(default_factory=CleanupConfig)

    # Global settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_dir: str = DEFAULT_LOG_DIR

    def get_workspace_root(self) -> Path:
        """Get the workspace root directory path."""
        return Path(self.workspace.root)

    def get_reports_dir(self) -> Path:
        """Get the report output directory path."""
        return self.get_workspace_root() / self.workspace.reports_dir


@lru_cache
def get_settings() -> SlidecodeSettings:
    """Get cached settings instance."""
    return SlidecodeSettings()


def reload_settings() -> SlidecodeSettings:
    """Force reload settings (clear cache)."""
    get_settings.cache_clear()
    return get_settings()
