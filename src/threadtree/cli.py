"""Click CLI with commands: parse, search."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from threadtree.errors import MissingDataError, StructuralError
from threadtree.html import decode_html, decode_reddit_html
from threadtree.logging import setup_logging
from threadtree.models import Comment
from threadtree.parser import DEFAULT_MAX_DEPTH, ThreadParser
from threadtree.settings import Settings
from threadtree.tree import count_comments, max_depth, walk_comments

DECODERS = {
    "reddit": decode_reddit_html,
    "text": decode_html,
}

_PREVIEW_WIDTH = 80


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """threadtree: Reddit discussion tree parser."""
    ctx.ensure_object(dict)
    settings = Settings()
    ctx.obj["settings"] = settings
    ctx.obj["log"] = setup_logging(settings.log_dir or None)


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        click.echo(f"Error: {path} is not valid JSON ({exc})", err=True)
        raise SystemExit(1) from exc


def _preview(content: str) -> str:
    line = content.strip().split("\n", 1)[0]
    if len(line) > _PREVIEW_WIDTH:
        line = line[: _PREVIEW_WIDTH - 3] + "..."
    return line


def _format_comment(comment: Comment) -> str:
    indent = "  " * comment.depth
    if comment.author is None and not comment.content:
        return f"{indent}- [more replies]"
    line = f"{indent}- {comment.author} ({comment.score}): {_preview(comment.content)}"
    if comment.awards:
        names = ", ".join(f"{award.name} x{award.count}" for award in comment.awards)
        line += f" [{names}]"
    return line


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the parsed post as JSON.")
@click.option("--max-depth", "depth_limit", type=click.IntRange(min=0, max=DEFAULT_MAX_DEPTH),
              help="Drop replies nested deeper than this.")
@click.option("--drop-more-stubs", is_flag=True, help="Leave 'load more' placeholders out of the tree.")
@click.option("--decoder", type=click.Choice(list(DECODERS)), default="reddit", show_default=True,
              help="How comment bodies are turned into text.")
@click.pass_context
def parse(ctx: click.Context, path: Path, as_json: bool, depth_limit: int | None, drop_more_stubs: bool, decoder: str) -> None:
    """Parse a saved comments-page response into a discussion tree."""
    settings: Settings = ctx.obj["settings"]
    log = ctx.obj["log"]

    overrides: dict[str, Any] = {}
    if depth_limit is not None:
        overrides["max_depth"] = depth_limit
    if drop_more_stubs:
        overrides["keep_more_stubs"] = False
    parser = ThreadParser.from_settings(settings.model_copy(update=overrides), decode=DECODERS[decoder], log=log)

    data = _load_json(path)
    try:
        post = parser.parse_post(data)
    except StructuralError as exc:
        log.warning("cli.parse_failed", path=str(path), error=str(exc))
        click.echo(f"Error: {path} is not a comments-page response ({exc})", err=True)
        raise SystemExit(1) from exc
    except MissingDataError as exc:
        log.warning("cli.parse_failed", path=str(path), error=str(exc))
        click.echo(f"Error: post data is incomplete: {exc}", err=True)
        raise SystemExit(1) from exc

    log.info("cli.parsed", path=str(path), post_id=post.id, comments=count_comments(post.comments))

    if as_json:
        click.echo(post.model_dump_json(by_alias=True, indent=2))
        return

    click.echo(post.title)
    click.echo(f"  by {post.author} | score {post.score} | {post.created:%Y-%m-%d %H:%M} UTC")
    click.echo(f"  {post.url}")
    total = count_comments(post.comments)
    click.echo(f"  {post.comment_count} comments reported, {total} parsed, max depth {max_depth(post.comments)}")
    click.echo()
    for comment in walk_comments(post.comments):
        click.echo(_format_comment(comment))


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the thread summaries as JSON.")
@click.pass_context
def search(ctx: click.Context, path: Path, as_json: bool) -> None:
    """List the threads in a saved search response."""
    settings: Settings = ctx.obj["settings"]
    parser = ThreadParser.from_settings(settings, log=ctx.obj["log"])

    threads = parser.parse_search_results(_load_json(path))

    if as_json:
        click.echo(json.dumps([t.model_dump(mode="json", by_alias=True) for t in threads], indent=2))
        return

    if not threads:
        click.echo("No threads found.")
        return
    for thread in threads:
        click.echo(f"{thread.score:>6}  {thread.comment_count:>5}  {thread.title}")
        click.echo(f"{'':>14}{thread.url}")
