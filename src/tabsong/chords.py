"""Chord symbol recognition.

Finds chord names such as ``G``, ``F#m7``, ``Cmaj7``, ``Asus4``, ``Cadd9``,
``C#m7b5`` and ``D/F#`` in a line of text together with the column each one
starts at.  Matching is deliberately loose (no word boundaries): the caller
decides from what is *left over* whether a line is really a chord line.
"""

import re
from typing import NamedTuple

_CHORD_PAT = (
    r"[A-G][#b]?"  # root + accidental
    r"(?:maj|min|aug|dim|m|M|\+|°)?"  # quality
    r"\d*"  # extension: 7, 9, 11, 13
    r"(?:[#b]\d+)*"  # altered extensions: b5, #9
    r"(?:sus[24])?"
    r"(?:add\d+)?"
    r"(?:/[A-G][#b]?)?"  # slash bass
)
CHORD_RE = re.compile(_CHORD_PAT)


class ChordPosition(NamedTuple):
    name: str
    column: int  # zero-based offset within the originating line

    @property
    def end(self) -> int:
        return self.column + len(self.name)


def find_chords(line: str) -> list[ChordPosition]:
    """Return every chord symbol in *line*, ordered by appearance.

    Never raises; a line without chords yields an empty list.

    >>> find_chords("G       D/F#")
    [ChordPosition(name='G', column=0), ChordPosition(name='D/F#', column=8)]
    """
    return [ChordPosition(m.group(), m.start()) for m in CHORD_RE.finditer(line)]


def strip_chords(line: str, chords: list[ChordPosition]) -> str:
    """Return a copy of *line* with each chord's span cut out.

    Spans are removed right to left so earlier offsets stay valid.
    """
    remainder = line
    for chord in sorted(chords, key=lambda c: c.column, reverse=True):
        remainder = remainder[: chord.column] + remainder[chord.end :]
    return remainder
