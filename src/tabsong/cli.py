import json
import logging
import re
import sys
from pathlib import Path
from typing import NoReturn

import click

from .adapters.http import DEFAULT_TIMEOUT
from .exceptions import FetchError, ParseError, SearchError, UnsupportedSiteError
from .models import Song
from .parser import parse_document
from .registry import get_adapter
from .search import DEFAULT_SEARCH_URL, TabKind, TabSearchClient


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str) -> str:
    return f"{_slugify(artist)}-{_slugify(title)}.json"


def _emit(song: Song, output_path: str | None) -> None:
    payload = json.dumps(song.to_dict(), indent=2, ensure_ascii=False) + "\n"
    if output_path is None:
        click.echo(payload, nl=False)
        return
    dest = Path(output_path)
    dest.write_text(payload, encoding="utf-8")
    click.echo(f"Written to {dest}", err=True)


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Turn scraped chord sheets into structured song JSON."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--url", default=None, metavar="LOCATOR",
              help="Where the document came from; used for artist/title.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Write JSON here instead of stdout.")
def parse(source, url: str | None, output_path: str | None) -> None:
    """Parse a local chord sheet (or - for stdin)."""
    song = parse_document(source.read(), source_url=url)
    _emit(song, output_path)


@main.command()
@click.argument("url")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: stdout).")
@click.option("--save", is_flag=True, default=False,
              help="Write to <artist>-<title>.json in the current directory.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, envvar="TABSONG_TIMEOUT",
              help="HTTP timeout in seconds.")
def fetch(url: str, output_path: str | None, save: bool, timeout: float) -> None:
    """Fetch a chord sheet by URL and parse it.

    \b
    Supported sources:
      - tabs.ultimate-guitar.com
      - any URL serving a markdown chord sheet
    """
    try:
        adapter = get_adapter(url, timeout=timeout)
    except UnsupportedSiteError as exc:
        _fail(str(exc))

    try:
        song = adapter.scrape(url)
    except FetchError as exc:
        msg = f"Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        _fail(msg)
    except ParseError as exc:
        _fail(str(exc))

    if save and output_path is None:
        output_path = _default_filename(song.artist, song.title)
    _emit(song, output_path)


@main.command()
@click.argument("title")
@click.option("--artist", default="", help="Only keep results by this artist.")
@click.option("--kind", type=click.Choice(["chords", "tabs"], case_sensitive=False),
              default="chords", show_default=True)
@click.option("--best", is_flag=True, default=False, help="Print only the best locator.")
@click.option("--search-url", default=DEFAULT_SEARCH_URL, show_default=True,
              envvar="TABSONG_SEARCH_URL", help="Search page to query.")
@click.option("--timeout", default=DEFAULT_TIMEOUT, show_default=True, envvar="TABSONG_TIMEOUT",
              help="HTTP timeout in seconds.")
def search(title: str, artist: str, kind: str, best: bool, search_url: str, timeout: float) -> None:
    """Search for chord or tab pages and list them best first."""
    client = TabSearchClient(search_url=search_url, timeout=timeout)
    tab_kind = TabKind.CHORDS if kind.lower() == "chords" else TabKind.TABS
    try:
        candidates = client.search(artist, title, tab_kind)
    except (FetchError, ParseError, SearchError) as exc:
        _fail(str(exc))

    if not candidates:
        _fail(f"No {tab_kind.value.lower()} results for {title!r}")

    if best:
        click.echo(candidates[0].locator)
        return
    for c in candidates:
        click.echo(f"{c.score:7.2f}  {c.rating:.2f} ({c.vote_count} votes)  {c.artist} - {c.title}  {c.locator}")
