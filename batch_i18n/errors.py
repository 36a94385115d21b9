# -*- coding: utf-8 -*-
"""Exception hierarchy for batch_i18n."""
from __future__ import annotations

from typing import Optional

__all__ = [
    "I18nError",
    "ConfigError",
    "PlaceholderOverflowError",
    "MappingFileError",
]


class I18nError(Exception):
    """Base exception for batch_i18n."""


class ConfigError(I18nError):
    """Raised when a configuration file is missing or invalid."""


class PlaceholderOverflowError(I18nError):
    """Raised when a template term has more interpolations than placeholder letters."""

    def __init__(self, message: str, template: str = "", count: int = 0) -> None:
        super().__init__(message)
        self.template = template
        self.count = count


class MappingFileError(I18nError):
    """Raised when a key→text mapping file cannot be read or is not a flat string object."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
