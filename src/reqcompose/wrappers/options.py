# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Coercion of user-supplied wrapper configuration into typed options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields
from typing import Any, TypeVar

from ..errors import ConfigurationError

T = TypeVar("T")


def coerce_options(cls: type[T], config: Any) -> T:
    """Accept ``None``/``True`` (defaults), an instance of ``cls`` or a mapping of its fields."""
    if config is None or config is True:
        return cls()
    if isinstance(config, cls):
        return config
    if isinstance(config, Mapping):
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ConfigurationError(
                f"{cls.__name__} got unknown option(s): {', '.join(sorted(map(str, unknown)))}"
            )
        return cls(**config)
    raise ConfigurationError(f"{cls.__name__} expects a mapping or {cls.__name__}, got {type(config).__name__}")
