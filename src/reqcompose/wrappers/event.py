# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Event wrapper: publishes request/response/error around the delegate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core import ExtensibleCallable, RequestFn
from ..errors import ConfigurationError
from ..events import EMITTER, ERROR, REQUEST, RESPONSE, EventEmitter, emit
from ..http.models import HttpResponse, RequestDescriptor
from .options import coerce_options


@dataclass(frozen=True)
class EventOptions:
    # Attached only when the bag has no emitter yet.
    emitter: EventEmitter | None = None

    def __post_init__(self) -> None:
        if self.emitter is not None and not callable(getattr(self.emitter, "emit", None)):
            raise ConfigurationError("EventOptions.emitter must provide an emit() method")


def event_wrapper(next_fn: ExtensibleCallable, config: Any = None) -> RequestFn:
    options = coerce_options(EventOptions, config)
    extensions = next_fn.extensions
    if EMITTER not in extensions:
        extensions[EMITTER] = options.emitter or EventEmitter()

    async def emitting(descriptor: RequestDescriptor, *args: Any, **kwargs: Any) -> HttpResponse:
        emit(extensions, REQUEST, descriptor=descriptor)
        try:
            response = await next_fn(descriptor, *args, **kwargs)
        except Exception as exc:
            emit(extensions, ERROR, descriptor=descriptor, error=exc)
            raise
        emit(extensions, RESPONSE, descriptor=descriptor, response=response)
        return response

    return emitting
