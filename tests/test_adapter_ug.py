import html as html_module
import json
from unittest.mock import MagicMock, patch

import httpx
import pytest

from tabsong.adapters.markdown import MarkdownAdapter
from tabsong.adapters.ultimate_guitar import UltimateGuitarAdapter, render_document
from tabsong.exceptions import FetchError, ParseError, UnsupportedSiteError
from tabsong.registry import get_adapter

TEST_URL = "https://tabs.ultimate-guitar.com/tab/the-band/the-weight-chords-61592"

CONTENT = (
    "[Intro]\r\n"
    "[ch]A[/ch]  [ch]C#m[/ch]  [ch]D[/ch]\r\n"
    "\r\n"
    "[Verse 1]\r\n"
    "[tab][ch]A[/ch]" + " " * 23 + "[ch]C#m[/ch]\r\n"
    "I pulled into Nazareth, was feelin'[/tab]\r\n"
)


def _page_data(content=CONTENT, capo=2):
    return {
        "tab": {"song_name": "The Weight", "artist_name": "The Band", "tonality_name": "A"},
        "tab_view": {"meta": {"capo": capo}, "wiki_tab": {"content": content}},
    }


def _js_store_html(page_data) -> str:
    payload = json.dumps({"store": {"page": {"data": page_data}}})
    return f'<html><body><div class="js-store" data-content="{html_module.escape(payload)}"></div></body></html>'


def _next_data_html(page_data) -> str:
    payload = json.dumps({"props": {"pageProps": {"data": page_data}}})
    return f'<html><script id="__NEXT_DATA__" type="application/json">{payload}</script></html>'


def _response(status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    return resp


# ---------------------------------------------------------------------------
# can_handle / registry
# ---------------------------------------------------------------------------


def test_can_handle_ug_url():
    assert UltimateGuitarAdapter.can_handle(TEST_URL)


def test_cannot_handle_other_url():
    assert not UltimateGuitarAdapter.can_handle("https://example.com/song.md")


def test_registry_prefers_ug():
    assert isinstance(get_adapter(TEST_URL), UltimateGuitarAdapter)


def test_registry_falls_back_to_markdown():
    adapter = get_adapter("https://example.com/sheets/song.md", timeout=3)
    assert isinstance(adapter, MarkdownAdapter)
    assert adapter.timeout == 3


def test_registry_rejects_non_http():
    with pytest.raises(UnsupportedSiteError):
        get_adapter("ftp://example.com/song")


# ---------------------------------------------------------------------------
# render_document
# ---------------------------------------------------------------------------


def test_render_document_layout():
    text = render_document(_page_data(), TEST_URL)
    lines = text.splitlines()
    assert lines[0] == "# The Weight Chords by The Band"
    assert "Key: A" in lines
    assert "Capo: 2" in lines
    assert lines.count("```") == 2
    assert "[ch]" not in text
    assert "[tab]" not in text
    assert "\r" not in text


def test_render_document_keeps_chord_columns():
    text = render_document(_page_data(), TEST_URL)
    assert "A" + " " * 23 + "C#m" in text.splitlines()


def test_render_document_omits_zero_capo():
    text = render_document(_page_data(capo=0), TEST_URL)
    assert "Capo:" not in text


def test_render_document_empty_content_raises():
    with pytest.raises(ParseError):
        render_document(_page_data(content=""), TEST_URL)


# ---------------------------------------------------------------------------
# to_document / scrape
# ---------------------------------------------------------------------------


def test_to_document_js_store():
    text = UltimateGuitarAdapter().to_document(_js_store_html(_page_data()), TEST_URL)
    assert "[Verse 1]" in text


def test_to_document_legacy_next_data():
    legacy = {"tab_view": {"song_name": "The Weight", "artist_name": "The Band",
                           "capo": 2, "wiki_tab": {"content": CONTENT}}}
    text = UltimateGuitarAdapter().to_document(_next_data_html(legacy), TEST_URL)
    assert "Capo: 2" in text


def test_to_document_missing_data_raises():
    with pytest.raises(ParseError):
        UltimateGuitarAdapter().to_document("<html><body>nothing</body></html>", TEST_URL)


def test_scrape_builds_song():
    with patch("tabsong.adapters.http.httpx.get",
               return_value=_response(text=_js_store_html(_page_data()))):
        song = UltimateGuitarAdapter().scrape(TEST_URL)
    assert song.title == "The Weight"
    assert song.artist == "The Band"
    assert song.key == "A"
    assert song.capo == 2
    assert song.source_url == TEST_URL
    assert [s.name for s in song.sections] == ["Intro", "Verse 1"]
    intro, verse = song.sections
    assert [ln.chord.name for ln in intro.lines] == ["A", "C#m", "D"]
    assert verse.lines[0].chord.name == "A"
    assert verse.lines[0].lyric == "I pulled into Nazareth,"
    assert verse.lines[1].chord.name == "C#m"
    assert verse.lines[1].lyric == "was feelin'"


def test_scrape_sends_browser_headers():
    with patch("tabsong.adapters.http.httpx.get",
               return_value=_response(text=_js_store_html(_page_data()))) as mock_get:
        UltimateGuitarAdapter(timeout=5).scrape(TEST_URL)
    _, kwargs = mock_get.call_args
    assert "Mozilla" in kwargs["headers"]["User-Agent"]
    assert kwargs["timeout"] == 5


def test_fetch_non_200_raises():
    with patch("tabsong.adapters.http.httpx.get", return_value=_response(status_code=403)):
        with pytest.raises(FetchError) as exc_info:
            UltimateGuitarAdapter().fetch(TEST_URL)
    assert exc_info.value.status_code == 403


def test_fetch_transport_error_raises():
    with patch("tabsong.adapters.http.httpx.get", side_effect=httpx.ConnectError("boom")):
        with pytest.raises(FetchError) as exc_info:
            UltimateGuitarAdapter().fetch(TEST_URL)
    assert exc_info.value.status_code == 0


# ---------------------------------------------------------------------------
# MarkdownAdapter
# ---------------------------------------------------------------------------


def test_markdown_adapter_parses_body():
    body = "Key: Bm\n```\n[Verse]\nG       D\nHello   world\n```\n"
    url = "https://example.com/tab/some-artist/some-song-123"
    with patch("tabsong.adapters.http.httpx.get", return_value=_response(text=body)):
        song = MarkdownAdapter().scrape(url)
    assert song.key == "Bm"
    assert song.artist == "Some Artist"
    assert [(ln.chord.name, ln.lyric) for ln in song.sections[0].lines] == [
        ("G", "Hello"),
        ("D", "world"),
    ]
