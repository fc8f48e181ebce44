"""Turn raw Reddit comment listings into immutable discussion trees."""

from threadtree.errors import MissingDataError, ParseError, StructuralError
from threadtree.models import Award, Comment, Post, Thread
from threadtree.parser import (
    ThreadParser,
    epoch_seconds_to_timestamp,
    parse_awards,
    parse_comments,
    parse_node,
    parse_post,
)

__all__ = [
    "Award",
    "Comment",
    "MissingDataError",
    "ParseError",
    "Post",
    "StructuralError",
    "Thread",
    "ThreadParser",
    "epoch_seconds_to_timestamp",
    "parse_awards",
    "parse_comments",
    "parse_node",
    "parse_post",
]
