"""Adapter for tabs.ultimate-guitar.com chord pages.

UG returns 403 without browser-like headers.

Two page formats are supported:

Current format:
    <div class="js-store" data-content="<html-entity-encoded JSON>">
    JSON path:
        store.page.data.tab
            .song_name        → Song.title
            .artist_name      → Song.artist
            .tonality_name    → "Key:" line
        store.page.data.tab_view
            .meta.capo        → "Capo:" line
            .wiki_tab.content → raw tab text

Legacy format (Next.js, kept as fallback):
    <script id="__NEXT_DATA__" type="application/json">
    JSON path:
        props.pageProps.data.tab_view
            .song_name / .artist_name / .capo / .tonality_name
            .wiki_tab.content

The page data is rendered to the same markdown-like document a scraper
would hand over, so it goes through the regular parser::

    # The Weight Chords by The Band
    Key: A
    Capo: 2
    ```
    [Verse 1]
    A            C#m
    I pulled into Nazareth
    ```

``[ch]D[/ch]`` markup is unwrapped to the bare chord name and ``[tab]``
wrappers are dropped so chords keep their columns above the lyrics.
"""

import html as html_module
import json
import logging
import re
from dataclasses import replace

from bs4 import BeautifulSoup

from ..exceptions import ParseError
from ..models import Song
from ..parser import FENCE, parse_document
from .base import SiteAdapter
from .http import BROWSER_HEADERS, DEFAULT_TIMEOUT, get_text

logger = logging.getLogger(__name__)

_CH_TAG_RE = re.compile(r"\[ch\]([^\[]*)\[/ch\]")
_TAB_TAG_RE = re.compile(r"\[/?tab\]")


def _strip_ug_tags(text: str) -> str:
    """Strip UG-specific markup from tab content.

    - ``[ch]D[/ch]`` → ``D``
    - ``[tab]`` / ``[/tab]`` → removed
    """
    text = _CH_TAG_RE.sub(r"\1", text)
    text = _TAB_TAG_RE.sub("", text)
    return text.replace("\r\n", "\n")


def extract_store_data(soup: BeautifulSoup, url: str) -> dict:
    """Return the ``page.data`` dict from whichever JSON container is present.

    Tries the current ``js-store`` format first, then falls back to the
    legacy ``__NEXT_DATA__`` format.

    Raises :class:`~tabsong.exceptions.ParseError` if neither is found or
    can be parsed.
    """
    store_div = soup.find("div", class_="js-store")
    if store_div and store_div.get("data-content"):
        try:
            data = json.loads(html_module.unescape(store_div["data-content"]))
            return data["store"]["page"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError):
            logger.debug("js-store present but unreadable on %s", url)

    script_tag = soup.find("script", id="__NEXT_DATA__")
    if script_tag and script_tag.string:
        try:
            data = json.loads(script_tag.string)
            return data["props"]["pageProps"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError):
            logger.debug("__NEXT_DATA__ present but unreadable on %s", url)

    raise ParseError(url, "Could not find tab data (tried js-store and __NEXT_DATA__)")


def _tab_fields(page_data: dict) -> dict:
    # Metadata lives in page_data["tab"] (new) or page_data["tab_view"] (legacy).
    tab_meta = page_data.get("tab") or page_data.get("tab_view") or {}
    tab_view = page_data.get("tab_view") or {}
    view_meta = tab_view.get("meta") or {}
    wiki_tab = tab_view.get("wiki_tab") or {}
    return {
        "title": tab_meta.get("song_name") or "",
        "artist": tab_meta.get("artist_name") or "",
        "key": tab_meta.get("tonality_name") or tab_view.get("tonality_name") or "",
        "capo": tab_meta.get("capo") or tab_view.get("capo") or view_meta.get("capo") or 0,
        "content": wiki_tab.get("content") or "",
    }


def render_document(page_data: dict, url: str) -> str:
    """Render UG page data as a markdown chord sheet with one fenced block."""
    fields = _tab_fields(page_data)
    if not fields["content"]:
        raise ParseError(url, "wiki_tab.content is empty or missing")

    header = []
    if fields["title"]:
        header.append(f"# {fields['title']} Chords by {fields['artist'] or 'Unknown Artist'}")
    if fields["key"]:
        header.append(f"Key: {fields['key']}")
    if str(fields["capo"]).isdigit() and int(fields["capo"]) > 0:
        header.append(f"Capo: {int(fields['capo'])}")

    body = _strip_ug_tags(fields["content"]).rstrip("\n")
    return "\n".join([*header, FENCE, body, FENCE]) + "\n"


class UltimateGuitarAdapter(SiteAdapter):
    """Adapter for tabs.ultimate-guitar.com chord pages."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return "tabs.ultimate-guitar.com/tab/" in url

    def fetch(self, url: str) -> str:
        """GET the page with browser-like headers to avoid 403."""
        return get_text(url, headers=BROWSER_HEADERS, timeout=self.timeout)

    def to_document(self, raw: str, url: str) -> str:
        soup = BeautifulSoup(raw, "html.parser")
        return render_document(extract_store_data(soup, url), url)

    def scrape(self, url: str) -> Song:
        """Fetch + parse, then prefer the page's own artist/title over the URL slugs."""
        soup = BeautifulSoup(self.fetch(url), "html.parser")
        page_data = extract_store_data(soup, url)
        song = parse_document(render_document(page_data, url), source_url=url)

        fields = _tab_fields(page_data)
        return replace(
            song,
            artist=fields["artist"] or song.artist,
            title=fields["title"] or song.title,
        )
