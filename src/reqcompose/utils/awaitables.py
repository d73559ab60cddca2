# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` when a collaborator returned an awaitable, else pass it through."""
    if inspect.isawaitable(value):
        return await value
    return value
