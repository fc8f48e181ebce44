"""HTML-to-text decoders for comment bodies."""

from __future__ import annotations

from typing import Protocol

from bs4 import BeautifulSoup

_BLOCK_TAGS = ["p", "div", "li", "blockquote", "pre", "h1", "h2", "h3", "h4", "h5", "h6", "tr"]


class HtmlDecoder(Protocol):
    def __call__(self, fragment: str) -> str: ...


def decode_html(fragment: str) -> str:
    """Strip markup and resolve entities in one pass, like a DOM's ``textContent``."""
    return BeautifulSoup(fragment, "html.parser").get_text()


def decode_reddit_html(fragment: str) -> str:
    """Decode Reddit's ``body_html``, which arrives entity-escaped.

    The first parse turns ``&lt;p&gt;Hi&lt;/p&gt;`` back into markup, the second
    strips it. Block elements end up on their own lines.
    """
    markup = BeautifulSoup(fragment, "html.parser").get_text()
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_after("\n")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    lines = (line.rstrip() for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line).strip()
