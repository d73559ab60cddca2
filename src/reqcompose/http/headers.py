# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). Request descriptors carry
headers as plain dicts, so cache keys and default headers work on a lowercased copy
to keep ``{"Accept": ...}`` and ``{"accept": ...}`` equivalent.
"""

from __future__ import annotations

from collections.abc import Mapping


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping, sorted by name."""
    if not headers:
        return {}
    out: dict[str, str] = {}
    for key, value in headers.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return dict(sorted(out.items()))


def with_default_header(headers: Mapping[str, str] | None, name: str, value: str) -> dict[str, str]:
    """Copy ``headers`` and add ``name`` unless it is already present in any casing."""
    merged = dict(headers or {})
    lower = name.lower()
    if not any(str(key).lower() == lower for key in merged):
        merged[name] = value
    return merged


__all__ = ["normalize_headers", "with_default_header"]
