"""Pydantic models for the parsed discussion tree."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Award(_Frozen):
    id: str | None = None
    name: str | None = None
    icon_url: str | None = None
    count: int | None = None


class Comment(_Frozen):
    id: str | None = None
    author: str | None = None
    score: int | None = None
    awards: tuple[Award, ...] = ()
    created: datetime | None = None
    depth: int
    content: str = ""
    replies: tuple[Comment, ...] = ()


class Post(_Frozen):
    id: str
    title: str
    author: str
    score: int
    created: datetime
    url: str
    comment_count: int
    comments: tuple[Comment, ...] = ()


class Thread(_Frozen):
    """Search result summary: a post without its comments."""
    id: str
    title: str
    author: str
    score: int
    created: datetime
    url: str
    comment_count: int
