"""Tab search: find and rank candidate chord/tab pages for a song.

Results are read from the search page's ``js-store`` JSON
(``store.page.data.results``) and ranked by::

    score = rating * ln(votes)   if votes > 0
    score = rating               otherwise

so a 4.8 with 900 votes beats a 5.0 with 2.  Ties go to the higher rating.
"""

import html as html_module
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum

from bs4 import BeautifulSoup

from .adapters.http import BROWSER_HEADERS, DEFAULT_TIMEOUT, get_text
from .exceptions import ParseError, SearchError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "https://www.ultimate-guitar.com/search.php"


class TabKind(Enum):
    CHORDS = "Chords"
    TABS = "Tabs"


@dataclass(frozen=True)
class TabCandidate:
    locator: str
    rating: float
    vote_count: int
    score: float
    artist: str = ""
    title: str = ""
    kind: TabKind = TabKind.CHORDS


def candidate_score(rating: float, votes: int) -> float:
    if votes > 0:
        return rating * math.log(votes)
    return rating


def rank_candidates(results: list[dict], kind: TabKind, artist: str = "") -> list[TabCandidate]:
    """Filter raw search results down to *kind* (and *artist*) and rank them.

    Args:
        results: Raw result dicts with ``type``, ``rating``, ``votes``,
                 ``tab_url``, ``artist_name`` and ``song_name`` keys.
        kind:    Which result type to keep.
        artist:  If given, keep only results by this artist (case-insensitive).

    Returns:
        Candidates ordered best first.
    """
    candidates = []
    for result in results:
        # Official / Pro / Guitar Pro results never equal a plain kind
        if result.get("type") != kind.value:
            continue
        result_artist = result.get("artist_name") or ""
        if artist and result_artist.casefold() != artist.casefold():
            continue
        locator = result.get("tab_url")
        if not locator:
            continue
        rating = float(result.get("rating") or 0)
        votes = int(result.get("votes") or 0)
        candidates.append(
            TabCandidate(
                locator=locator,
                rating=rating,
                vote_count=votes,
                score=candidate_score(rating, votes),
                artist=result_artist,
                title=result.get("song_name") or "",
                kind=kind,
            )
        )

    candidates.sort(key=lambda c: (c.score, c.rating), reverse=True)
    return candidates


def extract_results(html: str, url: str) -> list[dict]:
    """Return the raw result list from a search page.

    Raises ParseError if the page carries no readable js-store data.
    """
    soup = BeautifulSoup(html, "html.parser")
    store_div = soup.find("div", class_="js-store") or soup.find(attrs={"data-content": True})
    if not store_div or not store_div.get("data-content"):
        raise ParseError(url, "Search page has no js-store data")
    try:
        data = json.loads(html_module.unescape(store_div["data-content"]))
        results = data["store"]["page"]["data"].get("results") or []
    except (KeyError, TypeError, AttributeError, json.JSONDecodeError) as exc:
        raise ParseError(url, "Search page js-store data is malformed") from exc
    return [r for r in results if isinstance(r, dict)]


class TabSearchClient:
    """Searches the tab site and ranks what comes back."""

    def __init__(self, search_url: str = DEFAULT_SEARCH_URL, timeout: float = DEFAULT_TIMEOUT):
        self.search_url = search_url
        self.timeout = timeout

    def search(self, artist: str, title: str, kind: TabKind = TabKind.CHORDS) -> list[TabCandidate]:
        """Return ranked candidates for *title* (optionally by *artist*).

        Raises SearchError for an empty title; FetchError / ParseError from
        the request are passed on to the caller untouched.
        """
        artist = artist.strip()
        title = title.strip()
        if not title:
            raise SearchError(artist, title, "title is required for search")

        html = get_text(
            self.search_url,
            params={"search_type": "title", "value": title},
            headers=BROWSER_HEADERS,
            timeout=self.timeout,
        )
        candidates = rank_candidates(extract_results(html, self.search_url), kind, artist)
        logger.info("%d %s result(s) for %r - %r", len(candidates), kind.value, artist, title)
        return candidates

    def best_candidate(
        self, artist: str, title: str, kind: TabKind = TabKind.CHORDS
    ) -> TabCandidate | None:
        candidates = self.search(artist, title, kind)
        return candidates[0] if candidates else None
