"""Editing model for a song.

Mirrors :class:`~chordbook.models.Song` but gives every section, line and
chord a stable id, so an editor can target a change without recomputing
positions.  Values are frozen; every mutation helper returns a new
:class:`EditableSong` and leaves its input untouched.

Ids from :func:`to_editable_song` are derived from position
(``section-0``, ``line-0-2``, ``chord-0-2-1``) and so are reproducible for the
same text, but they are not stable across a serialize/re-parse round trip.
Elements created during editing get random ids.
"""

import dataclasses
import logging
import uuid
from dataclasses import dataclass

from .chordpro import ChordProFormatter
from .exceptions import UnknownElementError
from .models import ChordPosition, Line, Section, SectionType, Song

logger = logging.getLogger(__name__)

DEFAULT_CHORD = "C"


@dataclass(frozen=True)
class EditableChord:
    id: str
    chord: str
    position: int  # character index in lyrics


@dataclass(frozen=True)
class EditableLine:
    id: str
    lyrics: str = ""
    chords: tuple[EditableChord, ...] = ()


@dataclass(frozen=True)
class EditableSection:
    id: str
    type: SectionType = SectionType.NONE
    label: str | None = None
    lines: tuple[EditableLine, ...] = ()


@dataclass(frozen=True)
class EditableSong:
    title: str | None = None
    subtitle: str | None = None
    artist: str | None = None
    key: str | None = None
    capo: int | None = None
    tempo: int | None = None
    sections: tuple[EditableSection, ...] = ()


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


def to_editable_song(song: Song) -> EditableSong:
    """Deep-copy a parsed song into the editing model."""
    return EditableSong(
        title=song.title,
        subtitle=song.subtitle,
        artist=song.artist,
        key=song.key,
        capo=song.capo,
        tempo=song.tempo,
        sections=tuple(_to_editable_section(s, i) for i, s in enumerate(song.sections)),
    )


def _to_editable_section(section: Section, s_idx: int) -> EditableSection:
    return EditableSection(
        id=f"section-{s_idx}",
        type=section.type,
        label=section.label,
        lines=tuple(_to_editable_line(line, s_idx, l_idx) for l_idx, line in enumerate(section.lines)),
    )


def _to_editable_line(line: Line, s_idx: int, l_idx: int) -> EditableLine:
    return EditableLine(
        id=f"line-{s_idx}-{l_idx}",
        lyrics=line.lyrics,
        chords=tuple(
            EditableChord(id=f"chord-{s_idx}-{l_idx}-{c_idx}", chord=c.chord, position=c.position)
            for c_idx, c in enumerate(line.chords)
        ),
    )


def to_song(song: EditableSong) -> Song:
    """Drop ids and return a plain :class:`~chordbook.models.Song`."""
    return Song(
        title=song.title,
        subtitle=song.subtitle,
        artist=song.artist,
        key=song.key,
        capo=song.capo,
        tempo=song.tempo,
        sections=[
            Section(
                type=section.type,
                label=section.label,
                lines=[
                    Line(
                        lyrics=line.lyrics,
                        chords=[ChordPosition(chord=c.chord, position=c.position) for c in line.chords],
                    )
                    for line in section.lines
                ],
            )
            for section in song.sections
        ],
    )


def from_editable_song(song: EditableSong) -> str:
    """Serialize the editing model to ChordPro text."""
    return ChordProFormatter().render(song)


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------


def _new_id(kind: str) -> str:
    return f"{kind}-{uuid.uuid4().hex}"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _find_section(song: EditableSong, section_id: str) -> EditableSection:
    for section in song.sections:
        if section.id == section_id:
            return section
    raise UnknownElementError("section", section_id)


def _find_line(section: EditableSection, line_id: str) -> EditableLine:
    for line in section.lines:
        if line.id == line_id:
            return line
    raise UnknownElementError("line", line_id)


def _find_chord(line: EditableLine, chord_id: str) -> EditableChord:
    for chord in line.chords:
        if chord.id == chord_id:
            return chord
    raise UnknownElementError("chord", chord_id)


def _replace_section(song: EditableSong, section: EditableSection) -> EditableSong:
    sections = tuple(section if s.id == section.id else s for s in song.sections)
    return dataclasses.replace(song, sections=sections)


def _replace_line(song: EditableSong, section_id: str, line: EditableLine) -> EditableSong:
    section = _find_section(song, section_id)
    _find_line(section, line.id)
    lines = tuple(line if ln.id == line.id else ln for ln in section.lines)
    return _replace_section(song, dataclasses.replace(section, lines=lines))


def _update_line(song: EditableSong, section_id: str, line_id: str, fn) -> EditableSong:
    line = _find_line(_find_section(song, section_id), line_id)
    return _replace_line(song, section_id, fn(line))


def _update_chord(song, section_id, line_id, chord_id, fn) -> EditableSong:
    def apply(line: EditableLine) -> EditableLine:
        _find_chord(line, chord_id)
        chords = tuple(fn(line, c) if c.id == chord_id else c for c in line.chords)
        return dataclasses.replace(line, chords=chords)

    return _update_line(song, section_id, line_id, apply)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def update_lyrics(song: EditableSong, section_id: str, line_id: str, text: str) -> EditableSong:
    """Replace a line's lyrics. Chord positions are left as they are."""
    return _update_line(song, section_id, line_id, lambda line: dataclasses.replace(line, lyrics=text))


def update_chord_text(
    song: EditableSong, section_id: str, line_id: str, chord_id: str, text: str
) -> EditableSong:
    return _update_chord(
        song, section_id, line_id, chord_id, lambda line, c: dataclasses.replace(c, chord=text)
    )


def set_chord_position(
    song: EditableSong, section_id: str, line_id: str, chord_id: str, position: int
) -> EditableSong:
    """Move a chord within its line, clamped to ``0..len(lyrics)``."""
    return _update_chord(
        song,
        section_id,
        line_id,
        chord_id,
        lambda line, c: dataclasses.replace(c, position=_clamp(position, 0, len(line.lyrics))),
    )


def shift_chord(
    song: EditableSong, section_id: str, line_id: str, chord_id: str, delta: int
) -> EditableSong:
    """Nudge a chord left or right by *delta* characters."""
    return _update_chord(
        song,
        section_id,
        line_id,
        chord_id,
        lambda line, c: dataclasses.replace(
            c, position=_clamp(c.position + delta, 0, len(line.lyrics))
        ),
    )


def add_chord(
    song: EditableSong, section_id: str, line_id: str, chord: str = DEFAULT_CHORD
) -> tuple[EditableSong, EditableChord]:
    """Append a new chord to a line and return ``(song, new_chord)``.

    The chord lands a few characters after the rightmost existing chord
    (at least 8, or the chord's length plus 6), capped at the end of the
    lyrics; on a line without chords it goes to position 0.
    """
    line = _find_line(_find_section(song, section_id), line_id)

    position = 0
    if line.chords:
        rightmost = max(line.chords, key=lambda c: c.position)
        gap = max(8, len(rightmost.chord) + 6)
        position = min(rightmost.position + gap, len(line.lyrics))

    new_chord = EditableChord(id=_new_id("chord"), chord=chord, position=position)
    logger.debug("Adding chord %s at %d to %s", chord, position, line_id)
    updated = _replace_line(song, section_id, dataclasses.replace(line, chords=line.chords + (new_chord,)))
    return updated, new_chord


def delete_chord(song: EditableSong, section_id: str, line_id: str, chord_id: str) -> EditableSong:
    def apply(line: EditableLine) -> EditableLine:
        _find_chord(line, chord_id)
        return dataclasses.replace(line, chords=tuple(c for c in line.chords if c.id != chord_id))

    return _update_line(song, section_id, line_id, apply)


def move_chord(
    song: EditableSong,
    from_section: str,
    from_line: str,
    chord_id: str,
    to_section: str,
    to_line: str,
    position: int,
) -> EditableSong:
    """Move a chord to another line (or another spot on the same line).

    The chord keeps its id.  Its position is clamped to the target line's
    lyrics and the target line's chords are re-sorted by position.
    """
    chord = _find_chord(_find_line(_find_section(song, from_section), from_line), chord_id)
    # Validate the target before anything changes
    _find_line(_find_section(song, to_section), to_line)

    song = delete_chord(song, from_section, from_line, chord_id)

    def apply(line: EditableLine) -> EditableLine:
        moved = dataclasses.replace(chord, position=_clamp(position, 0, len(line.lyrics)))
        chords = sorted(line.chords + (moved,), key=lambda c: c.position)
        return dataclasses.replace(line, chords=tuple(chords))

    return _update_line(song, to_section, to_line, apply)


def insert_line(
    song: EditableSong, section_id: str, after_line_id: str | None = None, lyrics: str = ""
) -> tuple[EditableSong, EditableLine]:
    """Insert a new line and return ``(song, new_line)``.

    The line goes right after *after_line_id*, or at the top of the section
    when that is ``None``.
    """
    section = _find_section(song, section_id)
    index = 0
    if after_line_id is not None:
        ids = [ln.id for ln in section.lines]
        if after_line_id not in ids:
            raise UnknownElementError("line", after_line_id)
        index = ids.index(after_line_id) + 1

    new_line = EditableLine(id=_new_id("line"), lyrics=lyrics)
    lines = section.lines[:index] + (new_line,) + section.lines[index:]
    return _replace_section(song, dataclasses.replace(section, lines=lines)), new_line


def delete_line(song: EditableSong, section_id: str, line_id: str) -> EditableSong:
    """Remove a line and its chords. An emptied section stays in place."""
    section = _find_section(song, section_id)
    _find_line(section, line_id)
    lines = tuple(ln for ln in section.lines if ln.id != line_id)
    return _replace_section(song, dataclasses.replace(section, lines=lines))
