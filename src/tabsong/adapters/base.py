from abc import ABC, abstractmethod

from ..models import Song
from ..parser import parse_document


class SiteAdapter(ABC):
    """Abstract base class for all site-specific adapters."""

    @classmethod
    @abstractmethod
    def can_handle(cls, url: str) -> bool:
        """Return True if this adapter can handle the given URL."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """Fetch the page at url and return the raw response body.

        Raises FetchError on HTTP-level failures.
        """

    def to_document(self, raw: str, url: str) -> str:
        """Turn the fetched body into the markdown-like chord sheet.

        The default assumes the body already is one.  Raises ParseError if
        expected content cannot be found.
        """
        return raw

    def scrape(self, url: str) -> Song:
        """Convenience method: fetch + to_document + parse."""
        raw = self.fetch(url)
        return parse_document(self.to_document(raw, url), source_url=url)
