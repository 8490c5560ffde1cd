"""Pagination helpers: limit/skip query parameters with server-side caps.

Out-of-range values are clamped rather than rejected, so a client asking for
``limit=1000`` simply receives the maximum page.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Query
from pydantic import BaseModel


class LimitSkip(BaseModel):
    limit: int
    skip: int = 0


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if not limit or limit < 1:
        return default
    return min(limit, maximum)


def limit_skip_params(default: int, maximum: int) -> Callable[..., LimitSkip]:
    """Build a dependency reading ``limit`` and ``skip`` from the query string."""

    def dependency(
        limit: int | None = Query(None, description=f"Page size (default {default}, max {maximum})"),
        skip: int | None = Query(None, description="Rows to skip"),
    ) -> LimitSkip:
        return LimitSkip(limit=clamp_limit(limit, default, maximum), skip=max(skip or 0, 0))

    return dependency
