# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
reqcompose package entrypoint.

Compose optional cross-cutting behaviors (events, retries, caching, Prometheus
metrics) around an asynchronous HTTP request function. Every layer built from
one ``create()`` call shares an extension bag, so capabilities such as the
event emitter are visible to the whole chain.
"""

from .config import ComposeSettings, load_settings
from .core import ExtensibleCallable, create
from .errors import (
    CacheStoreError,
    ConfigurationError,
    ErrorCategory,
    ReqComposeError,
    TransportError,
    UnknownWrapperError,
)
from .events import EventEmitter, EventPayload
from .http import HttpRequest, HttpResponse, HttpxTransport, StubTransport, create_default_transport
from .log import setup_logging
from .registry import WrapperKind, build_from_config, register, registered_wrappers, unregister, wrap
from .stores import CacheStore, MemoryCacheStore
from .version import __version__
from .wrappers import CacheOptions, EventOptions, MetricKind, PromOptions, RetryOptions, log_events

__all__ = [
    "CacheOptions",
    "CacheStore",
    "CacheStoreError",
    "ComposeSettings",
    "ConfigurationError",
    "ErrorCategory",
    "EventEmitter",
    "EventOptions",
    "EventPayload",
    "ExtensibleCallable",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "MemoryCacheStore",
    "MetricKind",
    "PromOptions",
    "ReqComposeError",
    "RetryOptions",
    "StubTransport",
    "TransportError",
    "UnknownWrapperError",
    "WrapperKind",
    "build_from_config",
    "create",
    "create_default_transport",
    "load_settings",
    "log_events",
    "register",
    "registered_wrappers",
    "setup_logging",
    "unregister",
    "wrap",
    "__version__",
]
