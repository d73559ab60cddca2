# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-memory transports for tests and offline composition."""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import TransportError
from .models import HttpRequest, HttpResponse, RequestDescriptor

Outcome = HttpResponse | BaseException


class StubTransport:
    """Deterministic, programmable transport for tests.

    Each URL maps to a single outcome or a sequence of outcomes consumed one per
    call; the last outcome of a sequence repeats. Exceptions are raised, not returned.
    """

    def __init__(self, responses: dict[str, Outcome | Iterable[Outcome]] | None = None):
        self._responses: dict[str, list[Outcome]] = {}
        self.requests: list[HttpRequest] = []
        for url, outcome in (responses or {}).items():
            self.add(url, outcome)

    def add(self, url: str, outcome: Outcome | Iterable[Outcome]) -> None:
        if isinstance(outcome, (HttpResponse, BaseException)):
            self._responses[url] = [outcome]
        else:
            self._responses[url] = list(outcome)

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def __call__(self, descriptor: RequestDescriptor) -> HttpResponse:
        request = HttpRequest.coerce(descriptor)
        self.requests.append(request)
        outcomes = self._responses.get(request.url)
        if not outcomes:
            raise TransportError(f"No stubbed response configured for {request.url}")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        return None
