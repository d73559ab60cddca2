# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Prometheus wrapper: counts requests or observes their latency."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from prometheus_client import Counter, Histogram, Summary

from ..core import ExtensibleCallable, RequestFn
from ..errors import ConfigurationError
from ..http.models import HttpResponse, RequestDescriptor
from ..utils import maybe_await
from .options import coerce_options

logger = logging.getLogger(__name__)

Labels = Mapping[str, str] | Callable[[BaseException | None], Mapping[str, str]]


class MetricKind(str, Enum):
    COUNTER = "counter"
    LATENCY = "latency"


def infer_metric_kind(metric: Any) -> MetricKind:
    """Classify a metric as counting-only or latency-measuring."""
    if isinstance(metric, Counter):
        return MetricKind.COUNTER
    if isinstance(metric, (Histogram, Summary)):
        return MetricKind.LATENCY
    if callable(getattr(metric, "observe", None)):
        return MetricKind.LATENCY
    if callable(getattr(metric, "inc", None)):
        return MetricKind.COUNTER
    raise ConfigurationError(
        f"Cannot tell whether {type(metric).__name__} counts or measures latency; pass kind= explicitly"
    )


@dataclass(frozen=True)
class PromOptions:
    metric: Any = None
    labels: Labels | None = None
    kind: MetricKind | None = None

    def __post_init__(self) -> None:
        if self.metric is None:
            raise ConfigurationError("The prom wrapper requires a 'metric'")
        if self.labels is not None and not (callable(self.labels) or isinstance(self.labels, Mapping)):
            raise ConfigurationError("labels must be a mapping or a callable")
        kind = MetricKind(self.kind) if self.kind is not None else infer_metric_kind(self.metric)
        object.__setattr__(self, "kind", kind)
        method = "observe" if kind is MetricKind.LATENCY else "inc"
        if not callable(getattr(self.metric, method, None)):
            raise ConfigurationError(f"{kind.value} metric {type(self.metric).__name__} has no {method}() method")

    def labels_for(self, error: BaseException | None) -> dict[str, str]:
        if self.labels is None:
            return {}
        labels = self.labels(error) if callable(self.labels) else self.labels
        return {str(key): str(value) for key, value in labels.items()}


async def _record(options: PromOptions, error: BaseException | None, elapsed: float) -> None:
    labels = options.labels_for(error)
    target = options.metric.labels(**labels) if labels else options.metric
    if options.kind is MetricKind.LATENCY:
        await maybe_await(target.observe(elapsed))
    else:
        await maybe_await(target.inc())


def prom_wrapper(next_fn: ExtensibleCallable, config: Any = None) -> RequestFn:
    options = coerce_options(PromOptions, config)

    async def measuring(descriptor: RequestDescriptor, *args: Any, **kwargs: Any) -> HttpResponse:
        start = time.perf_counter()
        try:
            response = await next_fn(descriptor, *args, **kwargs)
        except Exception as exc:
            try:
                await _record(options, exc, time.perf_counter() - start)
            except Exception:
                logger.exception("Failed to record %s metric for failed request %r", options.kind.value, descriptor)
            raise
        await _record(options, None, time.perf_counter() - start)
        return response

    return measuring
