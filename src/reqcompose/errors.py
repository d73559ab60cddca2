# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ReqComposeError(Exception):
    """Base class for every error raised by reqcompose itself."""


class TransportError(ReqComposeError):
    """Network or HTTP-level failure reported by a transport."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        category: ErrorCategory | None = None,
        response: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.category = category or (ErrorCategory.HTTP_ERROR if status_code is not None else ErrorCategory.UNKNOWN_ERROR)
        self.response = response


class UnknownWrapperError(ReqComposeError, KeyError):
    """A wrapper name was used that is not in the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown wrapper: {self.name!r}"


class CacheStoreError(ReqComposeError):
    """Failure raised by a cache store; never converted into a cache miss."""


class ConfigurationError(ReqComposeError, ValueError):
    """Invalid or missing wrapper configuration, detected at wrap time."""


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    import asyncio
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, TransportError):
        return exc.category

    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.DecodingError):
        return ErrorCategory.PARSE_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(
        exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)
    ):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    if status_code_of(exc) is not None:
        return ErrorCategory.HTTP_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def status_code_of(exc: BaseException) -> int | None:
    """Return the HTTP status carried by an exception, if any."""
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


__all__ = [
    "CacheStoreError",
    "ConfigurationError",
    "ErrorCategory",
    "ReqComposeError",
    "TransportError",
    "UnknownWrapperError",
    "categorize_exception",
    "status_code_of",
]
