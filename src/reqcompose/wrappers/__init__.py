# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Built-in wrappers."""

from .cache import CacheOptions, cache_wrapper, crc32_hex, serialize_descriptor
from .event import EventOptions, event_wrapper
from .log import log_events
from .prom import MetricKind, PromOptions, infer_metric_kind, prom_wrapper
from .retry import RETRYABLE_STATUS_CODES, RetryOptions, is_retryable_error, retry_wrapper

__all__ = [
    "CacheOptions",
    "EventOptions",
    "MetricKind",
    "PromOptions",
    "RETRYABLE_STATUS_CODES",
    "RetryOptions",
    "cache_wrapper",
    "crc32_hex",
    "event_wrapper",
    "infer_metric_kind",
    "is_retryable_error",
    "log_events",
    "prom_wrapper",
    "retry_wrapper",
    "serialize_descriptor",
]
