"""Lenient models for the raw listing payloads, validated once at the boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class _Raw(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RawPost(_Raw):
    """``data`` payload of a ``t3`` child. Every field is required."""
    id: str
    title: str
    author: str
    score: int
    created_utc: float
    permalink: str
    num_comments: int


class RawComment(_Raw):
    """``data`` payload of a ``t1`` or ``more`` child.

    ``more`` stubs carry none of the comment fields, so all of them default to None.
    """
    id: str | None = None
    author: str | None = None
    score: int | None = None
    created_utc: float | None = None
    body_html: str | None = None
    all_awardings: Any = None
    # Reddit sends "" instead of a listing when there are no replies
    replies: Any = None
