from dataclasses import dataclass, field
from enum import Enum


class SectionType(str, Enum):
    """Kind of section a run of lines belongs to.

    ``NONE`` marks lines that no section directive wraps.
    """

    VERSE = "verse"
    CHORUS = "chorus"
    BRIDGE = "bridge"
    INTRO = "intro"
    OUTRO = "outro"
    TAB = "tab"
    GRID = "grid"
    NONE = "none"


@dataclass
class ChordPosition:
    """A chord anchored to a character offset in its line's plain lyrics."""

    chord: str  # e.g. "C", "Am7", "G/B"; not validated
    position: int


@dataclass
class Line:
    """A single line of lyrics with its chords held separately.

    Example: ``Line(lyrics="Hello World", chords=[ChordPosition("C", 0)])``
    Chord-only lines (instrumental passages) have blank lyrics.
    """

    lyrics: str = ""
    chords: list[ChordPosition] = field(default_factory=list)

    @property
    def is_chord_only(self) -> bool:
        return bool(self.chords) and self.lyrics.strip() == ""


@dataclass
class Section:
    """A run of lines (verse, chorus, bridge, etc.)."""

    type: SectionType = SectionType.NONE
    label: str | None = None  # e.g. "Verse 2" from {start_of_verse: Verse 2}
    lines: list[Line] = field(default_factory=list)


@dataclass
class Song:
    """A parsed ChordPro document. Section order is performance order."""

    title: str | None = None
    subtitle: str | None = None
    artist: str | None = None
    key: str | None = None
    capo: int | None = None
    tempo: int | None = None
    sections: list[Section] = field(default_factory=list)
