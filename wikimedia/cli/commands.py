# wikimedia/cli/commands.py
from __future__ import annotations

import html
import json
import logging
import re
from contextlib import contextmanager
from typing import Iterator, List

import requests
import typer
from rich import print
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from wikimedia import config
from wikimedia.client import Options, Wikimedia, new
from wikimedia.errors import ConfigurationError, DecodeError

app = typer.Typer(add_completion=False, no_args_is_help=True)

_TAG_RE = re.compile(r"<[^>]+>")


def _plain(snippet: str) -> str:
    """
    Drop the searchmatch <span> markup from a search snippet.
    """
    return html.unescape(_TAG_RE.sub("", snippet))


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """
    Map client errors to exit codes: 2 config, 3 network, 4 decode.
    """
    try:
        yield
    except ConfigurationError as exc:
        print(Panel.fit(f"[bold red]Invalid configuration:[/bold red] {escape(str(exc))}"))
        raise typer.Exit(code=2)
    except requests.RequestException as exc:
        print(Panel.fit(f"[bold red]Request failed:[/bold red] {escape(str(exc))}"))
        raise typer.Exit(code=3)
    except DecodeError as exc:
        print(Panel.fit(f"[bold red]Unexpected response:[/bold red] {escape(str(exc))}"))
        raise typer.Exit(code=4)


def _parse_params(raw: List[str]) -> dict[str, list[str]]:
    """
    Turn ["list=search", "srsearch=foo", "prop=a", "prop=b"] into a multi-value map.
    """
    params: dict[str, list[str]] = {}
    for item in raw:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--param")
        params.setdefault(key, []).append(value)
    return params


@app.callback()
def main(
    ctx: typer.Context,
    url: str = typer.Option(
        config.DEFAULT_API_URL,
        "--url",
        envvar=config.ENV_API_URL,
        help="Full api.php URL, e.g. https://da.wiktionary.org/w/api.php",
    ),
    user_agent: str = typer.Option(
        config.DEFAULT_UA,
        "--user-agent",
        envvar=config.ENV_USER_AGENT,
        help="User-Agent header (empty string to send none)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Query a MediaWiki api.php endpoint (Wikipedia, Wiktionary, ...).
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        )

    with _exit_on_error():
        ctx.obj = new(Options(url=url, user_agent=user_agent or None))


@app.command()
def query(
    ctx: typer.Context,
    param: List[str] = typer.Option(
        ..., "--param", "-p", help="Query parameter as KEY=VALUE, repeatable"
    ),
) -> None:
    """
    Send raw parameters (format=json is always added) and print the decoded response.
    """
    client: Wikimedia = ctx.obj
    params = _parse_params(param)

    with _exit_on_error():
        resp = client.query(params)

    typer.echo(json.dumps(resp.to_dict(), indent=2, ensure_ascii=False))


@app.command()
def search(
    ctx: typer.Context,
    term: str = typer.Argument(..., help="Full-text search term"),
    limit: int = typer.Option(
        config.DEFAULT_SEARCH_LIMIT, "--limit", help="Results per page (max 500)"
    ),
    offset: int = typer.Option(0, "--offset", help="Continuation offset from a previous search"),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON instead of table"),
) -> None:
    """
    Full-text search (list=search) with hit counts and continuation offset.
    """
    client: Wikimedia = ctx.obj
    params = {
        "action": "query",
        "list": "search",
        "srsearch": term,
        "srlimit": str(max(1, min(500, limit))),
        "srinfo": "totalhits",
        "srprop": "size|wordcount|timestamp|snippet",
    }
    if offset > 0:
        params["sroffset"] = str(offset)

    with _exit_on_error():
        resp = client.query(params)

    if json_out:
        typer.echo(json.dumps(resp.to_dict(), indent=2, ensure_ascii=False))
        return

    hits = resp.query.search
    if not hits:
        print(Panel.fit(f"[bold red]No results for:[/bold red] {escape(repr(term))}"))
        return

    table = Table(
        title=f"Search results for: {escape(repr(term))} ({resp.query.search_info.total_hits} total)"
    )
    table.add_column("#", justify="right", style="bold")
    table.add_column("Title")
    table.add_column("Size", justify="right")
    table.add_column("Words", justify="right")
    table.add_column("Edited")
    table.add_column("Snippet")

    for i, h in enumerate(hits, start=offset + 1):
        table.add_row(
            str(i),
            escape(h.title),
            str(h.size),
            str(h.word_count),
            h.timestamp.isoformat() if h.timestamp else "",
            escape(_plain(h.snippet)[:160]),
        )

    print(table)
    if resp.has_more:
        print(f"[dim]More results: use[/dim] [bold]--offset {resp.next_offset}[/bold]")


@app.command()
def extract(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Exact page title"),
    sentences: int = typer.Option(
        config.DEFAULT_EXTRACT_SENTENCES, "--sentences", help="Sentences of intro text"
    ),
    json_out: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """
    Plain-text intro extract and page images for one title.
    """
    client: Wikimedia = ctx.obj
    params = {
        "action": "query",
        "prop": "extracts|pageimages",
        "titles": title,
        "exsentences": str(sentences),
        "explaintext": "1",
        "piprop": "thumbnail|original",
    }
    with _exit_on_error():
        resp = client.query(params)

    page = resp.query.first_page()
    if page is None or page.page_id == 0:
        print(Panel.fit(f"[bold red]No such page:[/bold red] {escape(repr(title))}"))
        raise typer.Exit(code=1)

    if json_out:
        typer.echo(json.dumps(resp.to_dict(), indent=2, ensure_ascii=False))
        return

    body = escape(page.extract) or "[dim](no extract)[/dim]"
    if page.thumbnail.source:
        body += f"\n\n[dim]Thumbnail:[/dim] {page.thumbnail.source}"
    if page.original.source:
        body += f"\n[dim]Original:[/dim] {page.original.source}"
    print(Panel(body, title=f"[bold]{escape(page.title)}[/bold] (page id {page.page_id})"))
