"""Configuration module for slidecode."""

from slidecode.config.settings import SlidecodeSettings, get_settings, reload_settings

__all__ = ["SlidecodeSettings", "get_settings", "reload_settings"]
