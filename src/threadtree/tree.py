"""Iterative helpers over parsed comment forests."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from threadtree.models import Comment


def walk_comments(comments: Iterable[Comment]) -> Iterator[Comment]:
    """Yield every comment depth-first, parents before their replies, in display order."""
    stack = list(comments)
    stack.reverse()
    while stack:
        comment = stack.pop()
        yield comment
        stack.extend(reversed(comment.replies))


def count_comments(comments: Iterable[Comment]) -> int:
    return sum(1 for _ in walk_comments(comments))


def max_depth(comments: Iterable[Comment]) -> int:
    """Deepest ``depth`` in the forest, or -1 when it is empty."""
    return max((comment.depth for comment in walk_comments(comments)), default=-1)
