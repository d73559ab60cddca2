# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for reqcompose."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"reqcompose/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ComposeSettings:
    """Transport and wrapper defaults."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    raise_for_status: bool = True
    max_body_bytes: int = 16 * 1024 * 1024
    retry_attempts: int = 3
    retry_delay: float = 1.0

    @classmethod
    def from_env(cls) -> "ComposeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("REQCOMPOSE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        retry_delay = _float_env("REQCOMPOSE_RETRY_DELAY", cls.retry_delay)
        if retry_delay < 0:
            retry_delay = cls.retry_delay
        return cls(
            timeout=_float_env("REQCOMPOSE_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("REQCOMPOSE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("REQCOMPOSE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("REQCOMPOSE_HTTP_VERIFY_SSL", cls.verify_ssl),
            raise_for_status=_bool_env("REQCOMPOSE_HTTP_RAISE_FOR_STATUS", cls.raise_for_status),
            max_body_bytes=max_body_bytes,
            retry_attempts=_int_env("REQCOMPOSE_RETRY_ATTEMPTS", cls.retry_attempts),
            retry_delay=retry_delay,
        )


def load_settings() -> ComposeSettings:
    """Load settings from environment with sensible defaults."""
    return ComposeSettings.from_env()
