# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport exports."""

from .adapters import StubTransport
from .client import Transport, create_default_transport
from .headers import normalize_headers, with_default_header
from .httpx_client import HttpxTransport
from .models import Headers, HttpRequest, HttpResponse, RequestDescriptor

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "HttpxTransport",
    "RequestDescriptor",
    "StubTransport",
    "Transport",
    "create_default_transport",
    "normalize_headers",
    "with_default_header",
]
