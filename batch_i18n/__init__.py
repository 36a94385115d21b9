"""Batch i18n: extract hard-coded Chinese text from Vue/TS/JS sources and rewrite it into lookup calls."""

__version__ = "0.3.0"
