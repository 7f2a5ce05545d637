from .base import SiteAdapter
from .http import DEFAULT_TIMEOUT, get_text


class MarkdownAdapter(SiteAdapter):
    """Fallback adapter for locators that already serve a markdown chord sheet."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return url.startswith(("http://", "https://"))

    def fetch(self, url: str) -> str:
        return get_text(url, timeout=self.timeout)
