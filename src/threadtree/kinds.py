"""Kind tags carried by Reddit listing children."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class NodeKind(StrEnum):
    """What a listing child is, as far as the comment tree cares."""
    COMMENT = "t1"
    MORE = "more"
    UNRECOGNIZED = "unrecognized"


def classify_node(node: Any) -> NodeKind:
    """Map a raw child to its kind. Anything without a known string tag is UNRECOGNIZED."""
    if not isinstance(node, dict):
        return NodeKind.UNRECOGNIZED
    kind = node.get("kind")
    if kind == NodeKind.COMMENT:
        return NodeKind.COMMENT
    if kind == NodeKind.MORE:
        return NodeKind.MORE
    return NodeKind.UNRECOGNIZED
