# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry wrapper with per-invocation attempt counting and async backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..config import load_settings
from ..core import ExtensibleCallable, RequestFn
from ..errors import ConfigurationError, ErrorCategory, categorize_exception, status_code_of
from ..events import RETRY_ERROR, RETRY_REQUEST, RETRY_SUCCESS, emit
from ..http.models import HttpResponse, RequestDescriptor
from .options import coerce_options

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({500, 502, 503, 504})

Delay = float | Callable[[int], float]


def is_retryable_error(error: BaseException) -> bool:
    """Default filter: timeouts and 500/502/503/504 responses are worth another try."""
    if categorize_exception(error) == ErrorCategory.TIMEOUT:
        return True
    return status_code_of(error) in RETRYABLE_STATUS_CODES


def _default_attempts() -> int:
    return load_settings().retry_attempts


def _default_delay() -> float:
    return load_settings().retry_delay


@dataclass(frozen=True)
class RetryOptions:
    """Retry policy; ``delay`` is in seconds, or a function of the failed attempt number."""

    attempts: int = field(default_factory=_default_attempts)
    delay: Delay = field(default_factory=_default_delay)
    filter_error: Callable[[BaseException], bool] = is_retryable_error

    def __post_init__(self) -> None:
        if isinstance(self.attempts, bool) or not isinstance(self.attempts, int):
            raise ConfigurationError(f"attempts must be an int, got {self.attempts!r}")
        # Anything below one still means "try once".
        object.__setattr__(self, "attempts", max(1, self.attempts))
        if not callable(self.delay):
            if isinstance(self.delay, bool) or not isinstance(self.delay, (int, float)):
                raise ConfigurationError(f"delay must be a number or a callable, got {self.delay!r}")
            if self.delay < 0:
                raise ConfigurationError(f"delay must be >= 0, got {self.delay!r}")
        if not callable(self.filter_error):
            raise ConfigurationError("filter_error must be callable")

    def delay_for(self, attempt: int) -> float:
        delay = self.delay(attempt) if callable(self.delay) else self.delay
        return max(0.0, float(delay))


def retry_wrapper(next_fn: ExtensibleCallable, config: Any = None) -> RequestFn:
    options = coerce_options(RetryOptions, config)
    extensions = next_fn.extensions

    async def retrying(descriptor: RequestDescriptor, *args: Any, **kwargs: Any) -> HttpResponse:
        attempt = 1
        while True:
            try:
                response = await next_fn(descriptor, *args, **kwargs)
            except Exception as exc:
                if attempt >= options.attempts or not options.filter_error(exc):
                    if attempt > 1:
                        logger.debug("Giving up on %r after %d attempt(s): %s", descriptor, attempt, exc)
                    emit(extensions, RETRY_ERROR, descriptor=descriptor, error=exc, attempt=attempt)
                    raise
                delay = options.delay_for(attempt)
                logger.debug("Attempt %d for %r failed (%s); retrying in %.2fs", attempt, descriptor, exc, delay)
                await asyncio.sleep(delay)
                attempt += 1
                emit(extensions, RETRY_REQUEST, descriptor=descriptor, attempt=attempt)
                continue
            emit(extensions, RETRY_SUCCESS, descriptor=descriptor, response=response, attempt=attempt)
            return response

    return retrying
