from dataclasses import dataclass, field

DEFAULT_ARTIST = "Unknown Artist"
DEFAULT_TITLE = "Unknown Title"


@dataclass(frozen=True)
class Chord:
    """A chord annotation attached to a lyric fragment."""

    name: str  # e.g. "Am7", "G/B"


@dataclass(frozen=True)
class Line:
    """A lyric fragment and the chord (if any) sitting above it.

    Fragments that came from the same physical row (or chord/lyric row pair)
    share a ``line_group`` so a renderer can put them back together.
    Instrumental passages have a chord and an empty lyric.
    """

    lyric: str
    chord: Chord | None = None
    line_group: int | None = None

    def to_dict(self) -> dict:
        return {
            "chord": {"name": self.chord.name} if self.chord else None,
            "lyric": self.lyric,
            "lineGroup": self.line_group,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Line":
        chord = data.get("chord")
        return cls(
            lyric=data.get("lyric") or "",
            chord=Chord(name=chord["name"]) if chord else None,
            line_group=data.get("lineGroup"),
        )


@dataclass(frozen=True)
class Section:
    """A named section of a song (verse, chorus, bridge, etc.)."""

    name: str  # taken verbatim from the [Name] header
    lines: tuple[Line, ...] = ()

    def to_dict(self) -> dict:
        return {"name": self.name, "lines": [line.to_dict() for line in self.lines]}

    @classmethod
    def from_dict(cls, data: dict) -> "Section":
        return cls(
            name=data["name"],
            lines=tuple(Line.from_dict(line) for line in data.get("lines", [])),
        )


@dataclass(frozen=True)
class Song:
    """Canonical, immutable result of parsing one chord sheet."""

    artist: str = DEFAULT_ARTIST
    title: str = DEFAULT_TITLE
    key: str | None = None
    capo: int | None = None
    sections: tuple[Section, ...] = field(default_factory=tuple)
    source_url: str | None = None

    def to_dict(self) -> dict:
        """Return a JSON-compatible dict using the published field names."""
        return {
            "artist": self.artist,
            "title": self.title,
            "key": self.key,
            "capo": self.capo,
            "sections": [section.to_dict() for section in self.sections],
            "sourceUrl": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Song":
        return cls(
            artist=data.get("artist") or DEFAULT_ARTIST,
            title=data.get("title") or DEFAULT_TITLE,
            key=data.get("key"),
            capo=data.get("capo"),
            sections=tuple(Section.from_dict(s) for s in data.get("sections", [])),
            source_url=data.get("sourceUrl"),
        )
