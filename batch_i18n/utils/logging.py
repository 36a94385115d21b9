# FILE: batch_i18n/utils/logging.py
"""
Unified logging helpers for batch_i18n.

- One package logger ("batch_i18n") writing to stderr; modules use logging.getLogger(__name__)
  and propagate into it.
- Honors the level from the BATCH_I18N_LOG_LEVEL environment variable (e.g. "INFO", "DEBUG"),
  the "logLevel" config key and the --log-level flag, in that order of increasing precedence.
- Small helpers to compact JSON for log lines and to override the level temporarily.
"""

import json
import logging
import os
from contextlib import contextmanager
from typing import Any, Optional

ENV_LEVEL_VAR = "BATCH_I18N_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s: %(message)s"


# ---------------------------
# Level helpers
# ---------------------------

def _level_from_string(level_str: Optional[str], default: int = logging.INFO) -> int:
    """Map string level to logging constant; defaults to `default` on unknown."""
    if not level_str:
        return default
    level = getattr(logging, str(level_str).strip().upper(), None)
    return level if isinstance(level, int) else default


def _level_from_env(default: int = logging.WARNING) -> int:
    """Read desired log level from the environment (key: BATCH_I18N_LOG_LEVEL)."""
    return _level_from_string(os.environ.get(ENV_LEVEL_VAR), default=default)


# ---------------------------
# Public logger factory
# ---------------------------

def get_i18n_logger(
    name: str = "batch_i18n",
    *,
    default_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Create or return the package logger.

    A single stderr handler is attached on first use; calling again never stacks handlers.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(h)
    logger.setLevel(_level_from_env(default=default_level))
    return logger


# Singleton logger; every batch_i18n.* module logger propagates here
i18n_logger = get_i18n_logger()


def set_level(level: Optional[str]) -> int:
    """Apply a level name (config key or CLI flag) to the package logger. Returns the level used."""
    resolved = _level_from_string(level, default=i18n_logger.level or logging.WARNING)
    i18n_logger.setLevel(resolved)
    return resolved


# ---------------------------
# Format utilities
# ---------------------------

def compact_json(obj: Any, limit: int = 1200) -> str:
    """Compact JSON string for logging; truncate if too long."""
    try:
        s = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        s = str(obj)
    return s if len(s) <= limit else s[:limit] + "…(truncated)"


# ---------------------------
# Temporary level override
# ---------------------------

@contextmanager
def temporarily(level: int):
    """
    Temporarily raise/lower the package logger level.

    Example:
        with temporarily(logging.DEBUG):
            # noisy section
            ...
    """
    logger = i18n_logger
    old = logger.level
    try:
        logger.setLevel(level)
        yield logger
    finally:
        logger.setLevel(old)
