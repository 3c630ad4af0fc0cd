"""Chord parsing and transposition.

A chord is split into ``root + quality [+ "/" + bass]``.  Only the root and
the leading note of the bass are rewritten when transposing; the quality
(``m7``, ``maj9``, ``sus4`` ...) is carried through verbatim.

Spelling follows the input note: a flat root stays flat when the target
pitch has a flat name, anything else comes out with sharps::

    transpose_chord("Am7/E", 3)  -> "Cm7/G"
    transpose_chord("Bb", 1)     -> "B"
    transpose_chord("Db", 2)     -> "Eb"
    transpose_chord("C", -1)     -> "B"
"""

import dataclasses
import re
from dataclasses import dataclass
from typing import TypeVar

from .editable import from_editable_song, to_editable_song
from .parser import parse_chordpro

NOTES_SHARP = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTES_FLAT = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

_NOTE_INDEX = {name: i for names in (NOTES_SHARP, NOTES_FLAT) for i, name in enumerate(names)}

_ROOT_RE = re.compile(r"^([A-G][#b]?)")

SongT = TypeVar("SongT")


@dataclass(frozen=True)
class ParsedChord:
    root: str
    quality: str
    bass: str | None = None


def parse_chord(chord: str) -> ParsedChord | None:
    """Split *chord* into root, quality and optional bass.

    Returns ``None`` for blank input or text that does not start with a note
    letter ``A``-``G``.
    """
    if not chord or not chord.strip():
        return None

    main, slash, bass = chord.partition("/")
    m = _ROOT_RE.match(main)
    if not m:
        return None

    root = m.group(1)
    return ParsedChord(root=root, quality=main[len(root):], bass=bass if slash else None)


def transpose_note(note: str, semitones: int) -> str:
    """Shift a single note name by *semitones*.

    Unknown note names are returned unchanged.
    """
    index = _NOTE_INDEX.get(note)
    if index is None:
        return note
    names = NOTES_FLAT if "b" in note else NOTES_SHARP
    return names[(index + semitones) % 12]


def _transpose_bass(bass: str, semitones: int) -> str:
    m = _ROOT_RE.match(bass)
    if not m:
        return bass
    note = m.group(1)
    return transpose_note(note, semitones) + bass[len(note):]


def transpose_chord(chord: str, semitones: int) -> str:
    """Return *chord* moved by *semitones*, or unchanged if it cannot be parsed."""
    if semitones == 0:
        return chord

    parsed = parse_chord(chord)
    if parsed is None:
        return chord

    result = transpose_note(parsed.root, semitones) + parsed.quality
    if parsed.bass is not None:
        result += "/" + _transpose_bass(parsed.bass, semitones)
    return result


def _remap(items, fn):
    """Apply *fn* to each item, keeping the container type (list or tuple)."""
    return type(items)(fn(item) for item in items)


def transpose_song(song: SongT, semitones: int) -> SongT:
    """Return a copy of *song* with every chord and the key transposed.

    Works on both :class:`~chordbook.models.Song` and
    :class:`~chordbook.editable.EditableSong`; the input is not modified.
    """
    if semitones == 0:
        return song

    def chord(ch):
        return dataclasses.replace(ch, chord=transpose_chord(ch.chord, semitones))

    def line(ln):
        return dataclasses.replace(ln, chords=_remap(ln.chords, chord))

    def section(sec):
        return dataclasses.replace(sec, lines=_remap(sec.lines, line))

    key = transpose_chord(song.key, semitones) if song.key else song.key
    return dataclasses.replace(song, key=key, sections=_remap(song.sections, section))


def transpose_chordpro(content: str, semitones: int) -> str:
    """Transpose ChordPro text and return the re-serialized result."""
    if semitones == 0:
        return content
    song = to_editable_song(parse_chordpro(content))
    return from_editable_song(transpose_song(song, semitones))
