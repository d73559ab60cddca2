# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cache store protocol and an in-process TTL implementation."""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any, Protocol


class CacheStore(Protocol):
    """Key/value store consumed by the cache wrapper; ``None`` from ``get`` means a miss."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any, options: Any = None) -> Any: ...


class MemoryCacheStore:
    """Dict-backed store honoring ``{"ttl": seconds}`` options on ``set``."""

    def __init__(self, default_ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    async def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, options: Mapping[str, Any] | None = None) -> None:
        ttl = (options or {}).get("ttl", self.default_ttl)
        expires_at = self._clock() + ttl if ttl is not None else None
        self._entries[key] = (value, expires_at)

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CacheStore", "MemoryCacheStore"]
