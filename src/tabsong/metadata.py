"""Song metadata picked up from free text and from the source locator.

``Key:`` and ``Capo:`` labels can appear anywhere in a scraped document
(header block, tab body, trailing notes).  :class:`MetadataScanner` is fed
every raw line during the main parse and keeps the first value it sees for
each label.
"""

import logging
import re
from dataclasses import dataclass

from .models import DEFAULT_ARTIST, DEFAULT_TITLE

logger = logging.getLogger(__name__)

KEY_RE = re.compile(r"(?i:key):\s*([A-G][#b]?(?:m(?!aj))?)")
CAPO_RE = re.compile(r"capo:\s*(no capo|\d+)", re.IGNORECASE)

# .../tab/<artist-slug>/<title-slug>[-chords][-12345]
LOCATOR_RE = re.compile(
    r"/tab/(?P<artist>[^/?#]+)/(?P<title>[^/?#]+?)"
    r"(?:-(?:chords|tabs|tab|bass|ukulele|drums|video|official|pro|power))?"
    r"(?:-\d+)?/?(?:[?#].*)?$"
)
_SLUG_SEP_RE = re.compile(r"[-_]+")


@dataclass
class MetadataScanner:
    """First-match-wins collector for key and capo."""

    key: str | None = None
    capo: int | None = None

    def scan(self, line: str) -> None:
        if self.key is None:
            m = KEY_RE.search(line)
            if m:
                self.key = m.group(1)
                logger.debug("Key: %s", self.key)
        if self.capo is None:
            m = CAPO_RE.search(line)
            if m and m.group(1).lower() != "no capo":
                self.capo = int(m.group(1))
                logger.debug("Capo: %d", self.capo)


def _unslug(slug: str) -> str:
    words = [w for w in _SLUG_SEP_RE.split(slug) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def names_from_locator(url: str | None) -> tuple[str, str]:
    """Return ``(artist, title)`` derived from a tab page locator.

    Falls back to the unknown-artist/title placeholders when *url* is
    missing or doesn't look like ``.../tab/<artist>/<title>-...``.

    >>> names_from_locator("https://tabs.ultimate-guitar.com/tab/the-band/the-weight-chords-61592")
    ('The Band', 'The Weight')
    """
    if not url:
        return DEFAULT_ARTIST, DEFAULT_TITLE
    m = LOCATOR_RE.search(url)
    if not m:
        return DEFAULT_ARTIST, DEFAULT_TITLE
    artist = _unslug(m.group("artist")) or DEFAULT_ARTIST
    title = _unslug(m.group("title")) or DEFAULT_TITLE
    return artist, title
