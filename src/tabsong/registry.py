from .adapters.base import SiteAdapter
from .adapters.http import DEFAULT_TIMEOUT
from .adapters.markdown import MarkdownAdapter
from .adapters.ultimate_guitar import UltimateGuitarAdapter
from .exceptions import UnsupportedSiteError

# Order matters: MarkdownAdapter accepts any http(s) URL.
_ADAPTERS: list[type[SiteAdapter]] = [
    UltimateGuitarAdapter,
    MarkdownAdapter,
]


def get_adapter(url: str, timeout: float = DEFAULT_TIMEOUT) -> SiteAdapter:
    """Return an instantiated adapter for the given URL.

    Raises UnsupportedSiteError if no adapter matches.
    """
    for cls in _ADAPTERS:
        if cls.can_handle(url):
            return cls(timeout=timeout)
    raise UnsupportedSiteError(url)
