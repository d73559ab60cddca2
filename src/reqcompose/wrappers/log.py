# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Unregistered example wrapper that logs every event published on the shared emitter.

Pass it straight to ``wrap``::

    request = create(transport).wrap("event").wrap(log_events)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core import ExtensibleCallable, RequestFn
from ..events import (
    CACHE_MISS,
    CACHE_REQUEST,
    EMITTER,
    ERROR,
    REQUEST,
    RESPONSE,
    RETRY_ERROR,
    RETRY_REQUEST,
    RETRY_SUCCESS,
    EventEmitter,
    EventPayload,
)

logger = logging.getLogger(__name__)

LOGGED_EVENTS = (
    REQUEST,
    RESPONSE,
    ERROR,
    RETRY_REQUEST,
    RETRY_SUCCESS,
    RETRY_ERROR,
    CACHE_REQUEST,
    CACHE_MISS,
)


def _log_payload(payload: EventPayload) -> None:
    level = logging.WARNING if payload.error is not None else logging.DEBUG
    parts = [payload.name, repr(payload.descriptor)]
    if payload.attempt is not None:
        parts.append(f"attempt={payload.attempt}")
    if payload.response is not None:
        parts.append(f"status={getattr(payload.response, 'status_code', None)}")
    if payload.error is not None:
        parts.append(f"error={payload.error!r}")
    logger.log(level, " ".join(parts))


def log_events(next_fn: ExtensibleCallable, config: Iterable[str] | None = None) -> RequestFn:
    """Subscribe the logger to the shared emitter, creating one if needed."""
    extensions = next_fn.extensions
    emitter = extensions.setdefault(EMITTER, EventEmitter())
    for name in config or LOGGED_EVENTS:
        emitter.on(name, _log_payload)
    return next_fn
