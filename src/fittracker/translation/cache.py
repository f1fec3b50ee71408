"""Bounded in-memory cache for translated text."""

from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional


class TranslationCache:
    """LRU mapping of ``(text, target language)`` to a translation.

    Each translator owns its cache; entries beyond ``max_entries`` evict the
    least recently used translation.
    """

    def __init__(self, max_entries: int = 2048) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], str] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, text: str, target_lang: str) -> Optional[str]:
        key = (text, target_lang)
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    def put(self, text: str, target_lang: str, translation: str) -> None:
        key = (text, target_lang)
        with self._lock:
            self._entries[key] = translation
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


__all__ = ["TranslationCache"]
