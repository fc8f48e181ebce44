"""Exceptions raised when a listing cannot be turned into a post."""

from __future__ import annotations


class ParseError(Exception):
    """Base class for fatal parse failures."""


class StructuralError(ParseError):
    """Top-level input is not a sequence of at least two listings."""

    def __init__(self, message: str = "invalid post structure") -> None:
        super().__init__(message)


class MissingDataError(ParseError):
    """A field required to build the post is absent or unusable."""

    def __init__(self, path: str, detail: str = "missing") -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")
