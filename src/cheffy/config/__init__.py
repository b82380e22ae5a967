"""Configuration package for Cheffy."""

from cheffy.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
