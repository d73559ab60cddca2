# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Event emitter shared through a composed callable's extension bag.

Wrappers publish EventPayload objects under fixed names; listeners are plain
synchronous callables. Emission order follows registration order.
"""

from __future__ import annotations

from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Any

EMITTER = "emitter"

REQUEST = "request"
RESPONSE = "response"
ERROR = "error"
RETRY_REQUEST = "retryRequest"
RETRY_SUCCESS = "retrySuccess"
RETRY_ERROR = "retryError"
CACHE_REQUEST = "cacheRequest"
CACHE_MISS = "cacheMiss"

Listener = Callable[["EventPayload"], Any]


@dataclass(frozen=True)
class EventPayload:
    name: str
    descriptor: Any = None
    error: BaseException | None = None
    response: Any = None
    attempt: int | None = None


class EventEmitter:
    """Minimal synchronous pub/sub hub."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[Listener, bool]]] = {}

    def on(self, name: str, listener: Listener) -> Listener:
        self._listeners.setdefault(name, []).append((listener, False))
        return listener

    def once(self, name: str, listener: Listener) -> Listener:
        self._listeners.setdefault(name, []).append((listener, True))
        return listener

    def off(self, name: str, listener: Listener) -> None:
        entries = self._listeners.get(name, [])
        # Equality, not identity: bound methods are recreated on each attribute access.
        self._listeners[name] = [entry for entry in entries if entry[0] != listener]

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, []))

    def emit(self, name: str, **data: Any) -> EventPayload:
        """Build a payload and deliver it to every listener registered for ``name``."""
        payload = EventPayload(name=name, **data)
        entries = list(self._listeners.get(name, []))
        if any(once for _, once in entries):
            self._listeners[name] = [entry for entry in entries if not entry[1]]
        for listener, _ in entries:
            listener(payload)
        return payload


def get_emitter(extensions: MutableMapping[str, Any]) -> EventEmitter | None:
    """Return the emitter attached to an extension bag, if any."""
    return extensions.get(EMITTER)


def emit(extensions: MutableMapping[str, Any], name: str, **data: Any) -> None:
    """Emit through the bag's emitter; a no-op until an event wrapper attaches one."""
    emitter = get_emitter(extensions)
    if emitter is not None:
        emitter.emit(name, **data)


__all__ = [
    "CACHE_MISS",
    "CACHE_REQUEST",
    "EMITTER",
    "ERROR",
    "EventEmitter",
    "EventPayload",
    "Listener",
    "REQUEST",
    "RESPONSE",
    "RETRY_ERROR",
    "RETRY_REQUEST",
    "RETRY_SUCCESS",
    "emit",
    "get_emitter",
]
