class TabSongError(Exception):
    """Base exception for tabsong."""


class FetchError(TabSongError):
    """Raised when an HTTP request fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class ParseError(TabSongError):
    """Raised when expected content cannot be extracted from a page."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Parse error for {url}: {reason}")


class UnsupportedSiteError(TabSongError):
    """Raised when no adapter matches the given URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No adapter found for URL: {url}")


class SearchError(TabSongError):
    """Raised when a tab search cannot be performed."""

    def __init__(self, artist: str, title: str, reason: str):
        self.artist = artist
        self.title = title
        self.reason = reason
        super().__init__(f"Search for {artist!r} - {title!r} failed: {reason}")
