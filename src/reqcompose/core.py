# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Extensible callable: a request function plus a shared extension bag.

Every layer built from one ``create()`` root holds a reference to the same
``extensions`` dict, so a capability attached by any wrapper (the event
emitter, typically) is visible to all layers, inner and outer.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from .events import EventEmitter, get_emitter
from .http.client import Transport, create_default_transport
from .http.models import HttpResponse, RequestDescriptor
from .utils import maybe_await

RequestFn = Callable[..., Awaitable[HttpResponse]]


class ExtensibleCallable:
    """Async request callable decorated with a shared extension bag."""

    __slots__ = ("_fn", "_root", "extensions")

    def __init__(self, fn: RequestFn, extensions: dict[str, Any] | None = None, root: Any = None):
        if not callable(fn):
            raise TypeError(f"Expected a callable request function, got {type(fn).__name__}")
        self._fn = fn
        # Innermost transport of this lineage; the one aclose() releases.
        self._root = root if root is not None else fn
        self.extensions: dict[str, Any] = extensions if extensions is not None else {}

    async def __call__(self, descriptor: RequestDescriptor, *args: Any, **kwargs: Any) -> Any:
        return await self._fn(descriptor, *args, **kwargs)

    async def aclose(self) -> None:
        """Close the root transport when it exposes ``aclose()`` or ``close()``."""
        closer = getattr(self._root, "aclose", None) or getattr(self._root, "close", None)
        if callable(closer):
            await maybe_await(closer())

    @property
    def emitter(self) -> EventEmitter | None:
        return get_emitter(self.extensions)

    def wrap(self, wrapper: Any, config: Any = None) -> "ExtensibleCallable":
        """Return a new layer around this one; see :func:`reqcompose.registry.wrap`."""
        from .registry import wrap

        return wrap(self, wrapper, config)

    def __repr__(self) -> str:
        name = getattr(self._fn, "__qualname__", type(self._fn).__name__)
        return f"<ExtensibleCallable {name} extensions={sorted(self.extensions)}>"


def create(transport: Transport | RequestFn | None = None) -> ExtensibleCallable:
    """Wrap ``transport`` (default: httpx) in an ExtensibleCallable with a fresh bag."""
    return ExtensibleCallable(transport or create_default_transport())


__all__ = ["ExtensibleCallable", "RequestFn", "create"]
