"""Reddit comment listing parser: raw JSON in, immutable Post tree out."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from pydantic import ValidationError

from threadtree.errors import MissingDataError, StructuralError
from threadtree.html import HtmlDecoder, decode_html
from threadtree.kinds import NodeKind, classify_node
from threadtree.models import Award, Comment, Post, Thread
from threadtree.schemas import RawComment, RawPost
from threadtree.settings import Settings
from threadtree.tree import count_comments

DEFAULT_BASE_URL = "https://reddit.com"
# pydantic-core refuses to serialize models nested much past 250 levels
DEFAULT_MAX_DEPTH = 200

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_POST_PATH = "listing[0].data.children[0].data"
_DONE = object()


def epoch_seconds_to_timestamp(value: float) -> datetime:
    """Convert ``created_utc`` epoch seconds to an aware UTC datetime.

    Goes through epoch milliseconds (``value * 1000``), so sub-millisecond
    precision is kept only as far as ``timedelta`` allows.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected epoch seconds, got {type(value).__name__}")
    return _EPOCH + timedelta(milliseconds=value * 1000)


def parse_awards(value: Any) -> tuple[Award, ...]:
    """Normalize ``all_awardings``.

    Anything that is not a list gives no awards. Elements are mapped 1:1 and
    not validated; missing sub-fields come through as None.
    """
    if not isinstance(value, (list, tuple)):
        return ()
    awards = []
    for raw in value:
        if not isinstance(raw, dict):
            raw = {}
        awards.append(
            Award.model_construct(
                id=raw.get("id"),
                name=raw.get("name"),
                icon_url=raw.get("icon_url"),
                count=raw.get("count"),
            )
        )
    return tuple(awards)


def _children(node: Any) -> list | None:
    """Return ``node["data"]["children"]`` when it is a list, else None."""
    if not isinstance(node, dict):
        return None
    data = node.get("data")
    if not isinstance(data, dict):
        return None
    children = data.get("children")
    return children if isinstance(children, list) else None


def _describe(exc: ValidationError, prefix: str) -> MissingDataError:
    err = exc.errors()[0]
    path = ".".join([prefix, *(str(part) for part in err["loc"])])
    detail = "missing" if err["type"] == "missing" else err["msg"]
    return MissingDataError(path, detail)


@dataclass
class _Frame:
    """A comment whose replies are still being built."""

    raw: RawComment
    depth: int
    pending: Iterator[Any]
    replies: list[Comment] = field(default_factory=list)


class ThreadParser:
    """Build Post/Comment trees from the ``[post_listing, comments_listing]`` pair.

    The HTML decoder is injected so callers choose how comment bodies become
    text. Comment nodes are walked with an explicit stack, never recursion.
    """

    def __init__(
        self,
        decode: HtmlDecoder = decode_html,
        *,
        base_url: str = DEFAULT_BASE_URL,
        max_depth: int | None = DEFAULT_MAX_DEPTH,
        keep_more_stubs: bool = True,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        if max_depth is not None and max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.decode = decode
        self.base_url = base_url
        self.max_depth = max_depth
        self.keep_more_stubs = keep_more_stubs
        self.log = log or structlog.get_logger("threadtree")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        decode: HtmlDecoder = decode_html,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> ThreadParser:
        return cls(
            decode,
            base_url=settings.base_url,
            max_depth=settings.max_depth,
            keep_more_stubs=settings.keep_more_stubs,
            log=log,
        )

    # -- post -------------------------------------------------------------

    def parse_post(self, listing: Any) -> Post:
        """Parse a comments-page response into a Post.

        Raises StructuralError when *listing* is not a list of at least two
        listings, and MissingDataError when the post payload or one of its
        fields is absent.
        """
        if not isinstance(listing, (list, tuple)) or len(listing) < 2:
            raise StructuralError()

        payload = self._post_payload(listing[0])
        try:
            raw = RawPost.model_validate(payload)
        except ValidationError as exc:
            raise _describe(exc, _POST_PATH) from exc
        try:
            created = epoch_seconds_to_timestamp(raw.created_utc)
        except (OverflowError, ValueError) as exc:
            raise MissingDataError(f"{_POST_PATH}.created_utc", "timestamp out of range") from exc

        comments = self.parse_comments(listing[1])
        post = Post(
            id=raw.id,
            title=raw.title,
            author=raw.author,
            score=raw.score,
            created=created,
            url=f"{self.base_url}{raw.permalink}",
            comment_count=raw.num_comments,
            comments=comments,
        )
        self.log.debug("parser.post_parsed", post_id=raw.id, top_level=len(comments), total=count_comments(comments))
        return post

    @staticmethod
    def _post_payload(first: Any) -> dict:
        data = first.get("data") if isinstance(first, dict) else None
        if not isinstance(data, dict):
            raise MissingDataError("listing[0].data")
        children = data.get("children")
        if not isinstance(children, list):
            raise MissingDataError("listing[0].data.children")
        if not children:
            raise MissingDataError("listing[0].data.children[0]")
        child = children[0]
        payload = child.get("data") if isinstance(child, dict) else None
        if not isinstance(payload, dict):
            raise MissingDataError(_POST_PATH)
        return payload

    # -- comments ---------------------------------------------------------

    def parse_comments(self, node: Any) -> tuple[Comment, ...]:
        """Parse the comments listing into top-level comments (depth 0).

        A listing without ``data.children`` means no comments yet.
        """
        children = _children(node)
        if children is None:
            return ()
        comments = (self._build(child, 0) for child in children)
        return tuple(comment for comment in comments if comment is not None)

    def parse_node(self, node: Any, depth: int = 0) -> Comment | None:
        """Parse one listing child and its replies.

        Returns None for rejected nodes, and for nodes placed below ``max_depth``.
        """
        if depth < 0:
            raise ValueError("depth must be >= 0")
        if self.max_depth is not None and depth > self.max_depth:
            self._reject(node, depth, "max_depth")
            return None
        return self._build(node, depth)

    def _build(self, node: Any, depth: int) -> Comment | None:
        raw = self._accept(node, depth)
        if raw is None:
            return None

        stack = [self._frame(raw, depth)]
        while True:
            frame = stack[-1]
            child = next(frame.pending, _DONE)
            if child is _DONE:
                stack.pop()
                comment = self._finish(frame)
                if not stack:
                    return comment
                stack[-1].replies.append(comment)
                continue
            raw_child = self._accept(child, frame.depth + 1)
            if raw_child is not None:
                stack.append(self._frame(raw_child, frame.depth + 1))

    def _accept(self, node: Any, depth: int) -> RawComment | None:
        """Validate a child node, or None if it does not belong in the tree."""
        match classify_node(node):
            case NodeKind.COMMENT:
                pass
            case NodeKind.MORE:
                if not self.keep_more_stubs:
                    self._reject(node, depth, "more_stub")
                    return None
            case NodeKind.UNRECOGNIZED:
                self._reject(node, depth, "unrecognized_kind")
                return None

        data = node.get("data")
        if not isinstance(data, dict):
            self._reject(node, depth, "no_payload")
            return None
        try:
            return RawComment.model_validate(data)
        except ValidationError:
            self._reject(node, depth, "invalid_payload")
            return None

    def _reject(self, node: Any, depth: int, reason: str) -> None:
        kind = node.get("kind") if isinstance(node, dict) else type(node).__name__
        self.log.debug("parser.node_rejected", reason=reason, kind=kind, depth=depth)

    def _frame(self, raw: RawComment, depth: int) -> _Frame:
        replies = _children(raw.replies) or []
        if replies and self.max_depth is not None and depth >= self.max_depth:
            self.log.warning("parser.depth_truncated", comment_id=raw.id, depth=depth, dropped=len(replies))
            replies = []
        return _Frame(raw=raw, depth=depth, pending=iter(replies))

    def _finish(self, frame: _Frame) -> Comment:
        raw = frame.raw
        return Comment(
            id=raw.id,
            author=raw.author,
            score=raw.score,
            awards=parse_awards(raw.all_awardings),
            created=self._created(raw.created_utc),
            depth=frame.depth,
            content=self.decode(raw.body_html) if raw.body_html else "",
            replies=tuple(frame.replies),
        )

    @staticmethod
    def _created(value: float | None) -> datetime | None:
        if value is None:
            return None
        try:
            return epoch_seconds_to_timestamp(value)
        except (OverflowError, ValueError):
            return None

    # -- search -----------------------------------------------------------

    def parse_search_results(self, listing: Any) -> list[Thread]:
        """Parse a search response into thread summaries, skipping unusable entries."""
        children = _children(listing)
        if children is None:
            return []

        threads = []
        for index, child in enumerate(children):
            payload = child.get("data") if isinstance(child, dict) else None
            try:
                raw = RawPost.model_validate(payload)
                created = epoch_seconds_to_timestamp(raw.created_utc)
            except (ValidationError, OverflowError, ValueError):
                self.log.warning("parser.search_result_skipped", index=index)
                continue
            threads.append(
                Thread(
                    id=raw.id,
                    title=raw.title,
                    author=raw.author,
                    score=raw.score,
                    created=created,
                    url=f"{self.base_url}{raw.permalink}",
                    comment_count=raw.num_comments,
                )
            )
        return threads


def parse_post(listing: Any, decode: HtmlDecoder = decode_html) -> Post:
    return ThreadParser(decode).parse_post(listing)


def parse_comments(node: Any, decode: HtmlDecoder = decode_html) -> tuple[Comment, ...]:
    return ThreadParser(decode).parse_comments(node)


def parse_node(node: Any, depth: int = 0, decode: HtmlDecoder = decode_html) -> Comment | None:
    return ThreadParser(decode).parse_node(node, depth)
