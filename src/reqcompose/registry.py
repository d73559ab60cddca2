# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wrapper registry and composition driver."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from .core import ExtensibleCallable, RequestFn, create
from .errors import ConfigurationError, UnknownWrapperError
from .http.client import Transport
from .wrappers import cache_wrapper, event_wrapper, prom_wrapper, retry_wrapper

logger = logging.getLogger(__name__)

Builder = Callable[..., RequestFn]


class WrapperKind(str, Enum):
    """Built-in wrappers, declared outermost first as ``build_from_config`` layers them."""

    EVENT = "event"
    RETRY = "retry"
    CACHE = "cache"
    PROM = "prom"


_BUILTINS: dict[WrapperKind, Builder] = {
    WrapperKind.EVENT: event_wrapper,
    WrapperKind.RETRY: retry_wrapper,
    WrapperKind.CACHE: cache_wrapper,
    WrapperKind.PROM: prom_wrapper,
}

_registry: dict[str, Builder] = {kind.value: builder for kind, builder in _BUILTINS.items()}


def _name(name: str | WrapperKind) -> str:
    return name.value if isinstance(name, WrapperKind) else str(name)


def register(name: str | WrapperKind, builder: Builder) -> None:
    """Register ``builder`` under ``name`` for every composition in this process."""
    if not callable(builder):
        raise ConfigurationError(f"Wrapper builder for {_name(name)!r} must be callable")
    key = _name(name)
    if key in _registry and _registry[key] is not builder:
        logger.debug("Replacing wrapper builder %r", key)
    _registry[key] = builder


def unregister(name: str | WrapperKind) -> None:
    key = _name(name)
    if key not in _registry:
        raise UnknownWrapperError(key)
    del _registry[key]


def get_builder(name: str | WrapperKind) -> Builder:
    key = _name(name)
    try:
        return _registry[key]
    except KeyError:
        raise UnknownWrapperError(key) from None


def registered_wrappers() -> list[str]:
    return sorted(_registry)


def reset_registry() -> None:
    """Restore the registry to the built-in wrappers only."""
    _registry.clear()
    _registry.update({kind.value: builder for kind, builder in _BUILTINS.items()})


def wrap(
    target: ExtensibleCallable | RequestFn,
    wrapper: str | WrapperKind | Builder,
    config: Any = None,
) -> ExtensibleCallable:
    """
    Add one layer around ``target``.

    ``wrapper`` is a registered name or a builder function. Builders receive the
    current callable, plus ``config`` when one is given, and return the new
    request function. The result shares ``target``'s extension bag.
    """
    current = target if isinstance(target, ExtensibleCallable) else create(target)
    if isinstance(wrapper, (str, WrapperKind)):
        builder = get_builder(wrapper)
    elif callable(wrapper):
        builder = wrapper
    else:
        raise TypeError(f"Expected a wrapper name or builder function, got {type(wrapper).__name__}")

    fn = builder(current) if config is None else builder(current, config)
    if not callable(fn):
        raise ConfigurationError(f"Wrapper {getattr(builder, '__name__', builder)!r} did not return a callable")
    return ExtensibleCallable(fn, current.extensions, root=current._root)


def build_from_config(
    config: Mapping[str, Any],
    transport: Transport | RequestFn | ExtensibleCallable | None = None,
) -> ExtensibleCallable:
    """
    Compose the built-in wrappers named in ``config`` around ``transport``.

    Layers follow ``WrapperKind`` order from the outside in (event outermost, prom
    innermost) whatever the key order of ``config``, so the result equals
    ``create(transport).wrap("prom").wrap("cache").wrap("retry").wrap("event")``
    restricted to the keys present. ``True`` or any mapping (even ``{}``) selects the
    wrapper; ``None``, ``False`` and other falsy scalars skip it.
    """
    unknown = set(map(_name, config)) - {kind.value for kind in WrapperKind}
    if unknown:
        raise ConfigurationError(f"Unknown wrapper configuration key(s): {', '.join(sorted(unknown))}")

    values = {_name(key): value for key, value in config.items()}
    request = transport if isinstance(transport, ExtensibleCallable) else create(transport)
    # wrap() adds the new layer outside, so build from the innermost kind outwards.
    for kind in reversed(WrapperKind):
        value = values.get(kind.value)
        # Any options mapping, even an empty one, selects the wrapper.
        if value is None or value is False or (not isinstance(value, Mapping) and not value):
            continue
        request = wrap(request, kind, None if value is True else value)
    return request


__all__ = [
    "Builder",
    "WrapperKind",
    "build_from_config",
    "get_builder",
    "register",
    "registered_wrappers",
    "reset_registry",
    "unregister",
    "wrap",
]
