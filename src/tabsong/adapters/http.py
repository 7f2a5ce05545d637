"""Thin httpx wrapper shared by the adapters and the search client."""

import logging

import httpx

from ..exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/webp,*/*;q=0.8"
    ),
    "Referer": "https://www.google.com/",
}


def get_text(
    url: str,
    *,
    params: dict | None = None,
    headers: dict | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """GET *url* and return the body text.

    Raises FetchError with status 0 on transport errors and with the HTTP
    status on any non-200 response.
    """
    logger.info("GET %s", url)
    try:
        resp = httpx.get(
            url,
            params=params,
            headers=headers,
            follow_redirects=True,
            timeout=timeout,
        )
    except httpx.RequestError as exc:
        raise FetchError(url, 0) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code)
    return resp.text
