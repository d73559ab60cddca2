# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Small helpers shared by the wrappers."""

from .awaitables import maybe_await

__all__ = ["maybe_await"]
