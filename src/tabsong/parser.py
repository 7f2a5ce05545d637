"""Chord-sheet parser: markdown-like tab text → :class:`~tabsong.models.Song`.

Pipeline, driven top to bottom by :class:`DocumentScanner`:

  1. MetadataScanner.scan()  — key / capo from every raw line
  2. classify_line()         — SECTION / CHORD / LYRIC
  3. align_chord_line()      — split the lyric under a chord line at chord columns
  4. SectionAccumulator      — collect lines into ordered sections

Only the first fenced block (three backticks) holds content.  Lines before
it are metadata only, and the scan stops for good at its closing fence::

    Key: G
    Capo: 2
    ```
    [Verse]
    G       D
    Hello   world
    ```
"""

import logging
import re
from enum import Enum, auto

from .chords import ChordPosition, find_chords, strip_chords
from .metadata import MetadataScanner, names_from_locator
from .models import Chord, Line, Section, Song

logger = logging.getLogger(__name__)

FENCE = "```"

SECTION_HEADER_RE = re.compile(r"^\[(.+?)\]$")

# Leftover text tolerated on a chord line, e.g. "x2" or "| |"
MAX_CHORD_LINE_REMAINDER = 5


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


class LineType(Enum):
    SECTION = auto()  # section header: [Verse 1], [Chorus]
    CHORD = auto()  # chord symbols and whitespace only
    LYRIC = auto()  # everything else


def is_fence(line: str) -> bool:
    return line.strip().startswith(FENCE)


def section_name(line: str) -> str | None:
    """Return the name inside a ``[Name]`` header, or None for other lines."""
    m = SECTION_HEADER_RE.match(line.strip())
    return m.group(1) if m else None


def classify_line(line: str, chords: list[ChordPosition] | None = None) -> LineType:
    """Classify a non-empty line of tab text.

    A line is a chord line when it has at least one chord match and what is
    left after cutting the matches out is shorter than five characters and
    holds no comma or period.  Short words that happen to look like chords
    ("A", "Be") therefore come out as chord lines.

    Args:
        line:   A single line of raw text.
        chords: The line's :func:`~tabsong.chords.find_chords` result, if
                the caller already has it.
    """
    if section_name(line) is not None:
        return LineType.SECTION
    if chords is None:
        chords = find_chords(line)
    if not chords:
        return LineType.LYRIC
    remainder = strip_chords(line, chords).strip()
    if len(remainder) < MAX_CHORD_LINE_REMAINDER and "," not in remainder and "." not in remainder:
        return LineType.CHORD
    return LineType.LYRIC


# ---------------------------------------------------------------------------
# Chord / lyric alignment
# ---------------------------------------------------------------------------


def align_chord_line(
    chords: list[ChordPosition],
    lookahead: str | None,
    lookahead_type: LineType | None,
    line_group: int,
) -> tuple[list[Line], int]:
    """Turn a chord line (plus the line under it) into output lines.

    If *lookahead* is a lyric line, it is cut at each chord's column and
    every piece is paired with the chord above it; text left of the first
    chord becomes a chord-less line.  Otherwise the chords are emitted as
    an instrumental row with empty lyrics.

    Example::

        chords    = [G@0, D@8]
        lookahead = "Hello   world"
        result    = [Line("Hello", G), Line("world", D)], 2

    Args:
        chords:         Chord positions from the chord line.
        lookahead:      The raw line right after the chord line, or None at
                        end of input.
        lookahead_type: Classification of *lookahead*; None when it is blank
                        or a fence marker.
        line_group:     Group id shared by every line emitted here.

    Returns:
        The emitted lines and the number of source lines consumed (2 when
        the lookahead was used, else 1).
    """
    if lookahead is None or not lookahead.strip() or lookahead_type is not LineType.LYRIC:
        instrumental = [Line(lyric="", chord=Chord(c.name), line_group=line_group) for c in chords]
        return instrumental, 1

    ordered = sorted(chords, key=lambda c: c.column)
    lines: list[Line] = []

    prefix = lookahead[: ordered[0].column].strip()
    if prefix:
        lines.append(Line(lyric=prefix, line_group=line_group))

    for i, chord in enumerate(ordered):
        end = ordered[i + 1].column if i + 1 < len(ordered) else len(lookahead)
        lyric = lookahead[chord.column : end].strip()
        lines.append(Line(lyric=lyric, chord=Chord(chord.name), line_group=line_group))

    return lines, 2


# ---------------------------------------------------------------------------
# Section accumulation
# ---------------------------------------------------------------------------


class SectionAccumulator:
    """Collects lines into the open section and keeps finished sections in order."""

    def __init__(self) -> None:
        self._sections: list[Section] = []
        self._name: str | None = None
        self._lines: list[Line] = []

    @property
    def is_open(self) -> bool:
        return self._name is not None

    def open(self, name: str) -> None:
        self.close()
        self._name = name
        logger.debug("Opened section %r", name)

    def add(self, lines: list[Line]) -> None:
        if not self.is_open:
            return
        self._lines.extend(lines)

    def close(self) -> None:
        if self._name is None:
            return
        self._sections.append(Section(name=self._name, lines=tuple(self._lines)))
        self._name = None
        self._lines = []

    @property
    def sections(self) -> tuple[Section, ...]:
        return tuple(self._sections)


# ---------------------------------------------------------------------------
# Document scanner
# ---------------------------------------------------------------------------


class ScanState(Enum):
    PREAMBLE = auto()  # before the opening fence
    IN_FENCED_BLOCK = auto()
    TERMINATED = auto()  # closing fence seen, nothing more is read


class DocumentScanner:
    """Single-use scanner owning all state for one parse call."""

    def __init__(self, text: str, source_url: str | None = None):
        self.lines = text.splitlines()
        self.source_url = source_url
        self.cursor = 0
        self.state = ScanState.PREAMBLE
        self.metadata = MetadataScanner()
        self.sections = SectionAccumulator()
        self._next_group = 0

    def run(self) -> Song:
        while self.cursor < len(self.lines) and self.state is not ScanState.TERMINATED:
            self.cursor += self.step(self.lines[self.cursor])

        self.sections.close()
        artist, title = names_from_locator(self.source_url)
        return Song(
            artist=artist,
            title=title,
            key=self.metadata.key,
            capo=self.metadata.capo,
            sections=self.sections.sections,
            source_url=self.source_url,
        )

    def step(self, line: str) -> int:
        """Process the line under the cursor; return how many lines to advance."""
        self.metadata.scan(line)

        if not line.strip():
            return 1

        if is_fence(line):
            if self.state is ScanState.PREAMBLE:
                self.state = ScanState.IN_FENCED_BLOCK
            else:
                logger.debug("Closing fence at line %d, stopping", self.cursor + 1)
                self.state = ScanState.TERMINATED
            return 1

        if self.state is ScanState.PREAMBLE:
            return 1

        name = section_name(line)
        if name is not None:
            self.sections.open(name)
            return 1

        # Content before the first header is dropped
        if not self.sections.is_open:
            return 1

        chords = find_chords(line)
        if classify_line(line, chords) is LineType.CHORD:
            lookahead = self._peek()
            lines, consumed = align_chord_line(
                chords, lookahead, self._lookahead_type(lookahead), self._new_group()
            )
            if consumed == 2:
                self.metadata.scan(lookahead)
            self.sections.add(lines)
            return consumed

        self.sections.add([Line(lyric=line.strip(), line_group=self._new_group())])
        return 1

    def _peek(self) -> str | None:
        i = self.cursor + 1
        return self.lines[i] if i < len(self.lines) else None

    @staticmethod
    def _lookahead_type(lookahead: str | None) -> LineType | None:
        if lookahead is None or not lookahead.strip() or is_fence(lookahead):
            return None
        return classify_line(lookahead)

    def _new_group(self) -> int:
        group = self._next_group
        self._next_group += 1
        return group


def parse_document(text: str, source_url: str | None = None) -> Song:
    """Parse a markdown-like chord sheet into a :class:`~tabsong.models.Song`.

    Never raises for odd input: a document without a fenced block, or a block
    without section headers, gives a song with no sections.  Artist and title
    come from *source_url* when it looks like a tab page locator.

    Args:
        text:       The raw document.
        source_url: Where the document came from (optional).
    """
    return DocumentScanner(text, source_url).run()
