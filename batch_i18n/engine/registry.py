# -*- coding: utf-8 -*-
"""Key registry: the key -> text mapping accumulated over a run."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class KeyRegistry:
    """Insert-if-absent mapping, safe to share between worker threads.

    Registering the same pair twice is a no-op. Registering a key with a different value keeps
    the first value and records the clash in ``conflicts``; resolving it is left to the merge
    tools. Iteration follows insertion order.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        self._data: Dict[str, str] = {}
        self._conflicts: List[Tuple[str, str, str]] = []
        self._lock = threading.Lock()
        if initial:
            self.merge(initial)

    def register(self, key: str, value: str) -> bool:
        """Add ``key -> value``; return True only when the key was new."""
        with self._lock:
            current = self._data.get(key)
            if current is None:
                self._data[key] = value
                return True
            if current != value:
                self._conflicts.append((key, current, value))
                logger.debug("Key %r already registered with a different value", key)
            return False

    def merge(self, other) -> int:
        """Register every pair of ``other`` (a registry or a mapping); return the number of new keys."""
        added = 0
        for key, value in list(other.items()):
            if self.register(key, value):
                added += 1
        return added

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._data.get(key, default)

    def items(self) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._data.items())

    def to_dict(self, sort: bool = False) -> Dict[str, str]:
        with self._lock:
            if sort:
                return {k: self._data[k] for k in sorted(self._data)}
            return dict(self._data)

    @property
    def conflicts(self) -> List[Tuple[str, str, str]]:
        with self._lock:
            return list(self._conflicts)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter([k for k, _ in self.items()])

    def __repr__(self) -> str:
        return f"KeyRegistry({len(self)} keys)"
