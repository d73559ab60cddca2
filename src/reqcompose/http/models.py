# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models passed through the wrapper chain."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any

from ..errors import ConfigurationError

Headers = dict[str, str]


@dataclass(frozen=True)
class HttpRequest:
    """Normalized request representation consumed by transports."""

    url: str
    method: str = "GET"
    headers: Headers | None = None
    body: bytes | str | None = None
    timeout: float | None = None
    allow_redirects: bool = True
    parse_json: bool = False

    @classmethod
    def coerce(cls, descriptor: "RequestDescriptor") -> "HttpRequest":
        """Normalize a URL string, mapping or HttpRequest into an HttpRequest."""
        if isinstance(descriptor, HttpRequest):
            return descriptor
        if isinstance(descriptor, str):
            return cls(url=descriptor)
        if isinstance(descriptor, Mapping):
            known = {f.name for f in fields(cls)}
            unknown = set(descriptor) - known
            if unknown:
                raise ConfigurationError(f"Unknown request fields: {', '.join(sorted(map(str, unknown)))}")
            if not descriptor.get("url"):
                raise ConfigurationError("Request mapping requires a 'url'")
            return cls(**descriptor)
        raise TypeError(f"Unsupported request descriptor: {type(descriptor).__name__}")


@dataclass
class HttpResponse:
    """Normalized HTTP response returned by transports and cached by the cache wrapper."""

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    text: str = ""
    content: bytes = b""
    url: str | None = None
    data: Any = None
    meta: dict[str, Any] = field(default_factory=dict)


RequestDescriptor = str | HttpRequest | Mapping[str, Any]
