# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cache wrapper: serves stored responses and stores successful delegate results.

Keys default to the URL string itself, or to a CRC-32 of a deterministic JSON
serialization for structured requests. CRC-32 is a fast, non-cryptographic,
collision-tolerant choice; resolving collisions is left to the cache store.
"""

from __future__ import annotations

import json
import logging
import zlib
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, is_dataclass
from typing import Any

from ..core import ExtensibleCallable, RequestFn
from ..errors import ConfigurationError
from ..events import CACHE_MISS, CACHE_REQUEST, emit
from ..http.headers import normalize_headers
from ..http.models import HttpResponse, RequestDescriptor
from ..utils import maybe_await
from .options import coerce_options

logger = logging.getLogger(__name__)


def crc32_hex(data: str) -> str:
    """Default key hash: CRC-32 of the UTF-8 text as eight hex digits."""
    return f"{zlib.crc32(data.encode('utf-8')) & 0xFFFFFFFF:08x}"


def serialize_descriptor(descriptor: Any) -> str:
    """Deterministic JSON rendering of a request descriptor."""
    if is_dataclass(descriptor) and not isinstance(descriptor, type):
        payload = asdict(descriptor)
    elif isinstance(descriptor, Mapping):
        payload = dict(descriptor)
    else:
        payload = {"url": str(descriptor)}
    if payload.get("headers"):
        payload["headers"] = normalize_headers(payload["headers"])
    body = payload.get("body")
    if isinstance(body, (bytes, bytearray)):
        payload["body"] = bytes(body).decode("utf-8", errors="backslashreplace")
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class CacheOptions:
    cache: Any = None
    cache_options: Any = None
    get_key: Callable[[Any], str] | None = None
    hash: Callable[[str], str] = crc32_hex

    def __post_init__(self) -> None:
        if self.cache is None:
            raise ConfigurationError("The cache wrapper requires a 'cache' store")
        for method in ("get", "set"):
            if not callable(getattr(self.cache, method, None)):
                raise ConfigurationError(f"Cache store {type(self.cache).__name__} has no {method}() method")
        if self.get_key is not None and not callable(self.get_key):
            raise ConfigurationError("get_key must be callable")
        if not callable(self.hash):
            raise ConfigurationError("hash must be callable")

    def key_for(self, descriptor: Any) -> str:
        if self.get_key is not None:
            return self.get_key(descriptor)
        if isinstance(descriptor, str):
            return descriptor
        return self.hash(serialize_descriptor(descriptor))


def cache_wrapper(next_fn: ExtensibleCallable, config: Any = None) -> RequestFn:
    options = coerce_options(CacheOptions, config)
    extensions = next_fn.extensions
    store = options.cache

    async def caching(descriptor: RequestDescriptor, *args: Any, **kwargs: Any) -> HttpResponse:
        emit(extensions, CACHE_REQUEST, descriptor=descriptor)
        key = options.key_for(descriptor)
        cached = await maybe_await(store.get(key))
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        logger.debug("Cache miss for %s", key)
        emit(extensions, CACHE_MISS, descriptor=descriptor)
        response = await next_fn(descriptor, *args, **kwargs)
        await maybe_await(store.set(key, response, options.cache_options))
        return response

    return caching
