# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from typing import Protocol

from ..config import ComposeSettings, load_settings
from .models import HttpResponse, RequestDescriptor


class Transport(Protocol):
    """Innermost request function: performs the actual network call or raises."""

    async def __call__(self, descriptor: RequestDescriptor) -> HttpResponse: ...


def create_default_transport(settings: ComposeSettings | None = None) -> "Transport":
    """Factory for the default httpx-backed transport."""
    from .httpx_client import HttpxTransport

    return HttpxTransport(settings or load_settings())
