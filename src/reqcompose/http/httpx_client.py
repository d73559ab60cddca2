# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed transport implementation."""

from __future__ import annotations

import json

import httpx

from ..config import ComposeSettings, load_settings
from ..errors import ErrorCategory, TransportError, categorize_exception
from .headers import with_default_header
from .models import HttpRequest, HttpResponse, RequestDescriptor


class HttpxTransport:
    """Asynchronous httpx client wrapper raising TransportError on failure."""

    def __init__(self, settings: ComposeSettings | None = None, client: httpx.AsyncClient | None = None):
        self.settings = settings or load_settings()
        self._client = client or httpx.AsyncClient(
            follow_redirects=self.settings.allow_redirects,
            timeout=self.settings.timeout,
            verify=self.settings.verify_ssl,
        )

    async def __call__(self, descriptor: RequestDescriptor) -> HttpResponse:
        return await self.request(descriptor)

    async def request(self, descriptor: RequestDescriptor) -> HttpResponse:
        request = HttpRequest.coerce(descriptor)
        headers = with_default_header(request.headers, "User-Agent", self.settings.user_agent)
        max_body_bytes = self.settings.max_body_bytes
        if max_body_bytes <= 0:
            max_body_bytes = 16 * 1024 * 1024
        timeout = request.timeout if request.timeout is not None else self.settings.timeout

        try:
            async with self._client.stream(
                request.method,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
                follow_redirects=request.allow_redirects,
            ) as resp:
                content = bytearray()
                truncated = False
                async for chunk in resp.aiter_bytes():
                    if not chunk:
                        continue
                    remaining = max_body_bytes - len(content)
                    if remaining <= 0:
                        truncated = True
                        break
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

                encoding = resp.encoding or "utf-8"
                try:
                    text = bytes(content).decode(encoding, errors="replace")
                except LookupError:
                    text = bytes(content).decode("utf-8", errors="replace")
        except httpx.HTTPError as exc:
            raise TransportError(str(exc), category=categorize_exception(exc)) from exc

        response = HttpResponse(
            ok=resp.status_code < 400,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            text=text,
            content=bytes(content),
            url=str(resp.url),
            meta={
                "body_truncated": truncated,
                "body_bytes_read": len(content),
                "body_bytes_limit": max_body_bytes,
            },
        )

        if self.settings.raise_for_status and not response.ok:
            raise TransportError(
                f"HTTP {response.status_code} for {request.method} {request.url}",
                status_code=response.status_code,
                response=response,
            )

        if request.parse_json and text:
            try:
                response.data = json.loads(text)
            except ValueError as exc:
                raise TransportError(
                    f"Invalid JSON body from {request.url}: {exc}",
                    status_code=response.status_code,
                    category=ErrorCategory.PARSE_ERROR,
                    response=response,
                ) from exc

        return response

    async def aclose(self) -> None:
        await self._client.aclose()
