"""ChordPro text → :class:`~chordbook.models.Song`.

The document parser is a single pass over physical lines with two states:
outside any section (lines collect into an implicit ``none`` section) and
inside an explicit section opened by a ``{start_of_*}`` directive.

Each line is handled in this order:

  1. ``#`` comment: dropped
  2. ``{name}`` or ``{name: value}``: metadata, section start/end, or ignored
  3. blank: an empty Line, unless nothing is open yet
  4. anything else: :func:`parse_line`

Malformed or unknown directives never raise; user-written files degrade to
"best effort" rather than failing to load.
"""

import logging
import re

from .models import ChordPosition, Line, Section, SectionType, Song

logger = logging.getLogger(__name__)

# A chord token eats one following space, unless that space leads into
# another chord token: "[C] [G]" keeps the space as lyric text.
CHORD_TOKEN_RE = re.compile(r"\[([^\]]+)\](?: (?!\[[^\]]+\]))?")

_DIRECTIVE_RE = re.compile(r"^\{([^:}]+)(?::\s*(.*))?\}\s*$")

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

_ALIASES = {
    "t": "title",
    "st": "subtitle",
    "su": "subtitle",
    "c": "comment",
    "ci": "comment_italic",
    "cb": "comment_box",
    "sov": "start_of_verse",
    "eov": "end_of_verse",
    "soc": "start_of_chorus",
    "eoc": "end_of_chorus",
    "sob": "start_of_bridge",
    "eob": "end_of_bridge",
    "sot": "start_of_tab",
    "eot": "end_of_tab",
}

_SECTION_TYPES = {t.value: t for t in SectionType if t is not SectionType.NONE}


# ---------------------------------------------------------------------------
# Single line
# ---------------------------------------------------------------------------


def parse_line(line: str) -> Line:
    """Split a raw line into plain lyrics and chord positions.

    A chord's position is the number of lyric characters emitted before it::

        "[C]Hello [G]World"  ->  lyrics "Hello World", C at 0, G at 6
        "Be-[C]-fore"        ->  lyrics "Be--fore",    C at 3
        "[C] [G] [Am]"       ->  lyrics "  ",          C at 0, G at 1, Am at 2
    """
    chords: list[ChordPosition] = []
    parts: list[str] = []
    emitted = 0
    last = 0

    for m in CHORD_TOKEN_RE.finditer(line):
        before = line[last:m.start()]
        parts.append(before)
        emitted += len(before)
        chords.append(ChordPosition(chord=m.group(1), position=emitted))
        last = m.end()

    parts.append(line[last:])
    return Line(lyrics="".join(parts), chords=chords)


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


def parse_directive(line: str) -> tuple[str, str] | None:
    """Return ``(name, value)`` for a directive line, else ``None``.

    The name is lower-cased; the value is stripped and ``""`` when absent.
    """
    m = _DIRECTIVE_RE.match(line.strip())
    if not m:
        return None
    name = m.group(1).strip().lower()
    value = (m.group(2) or "").strip()
    return name, value


def normalize_directive(name: str) -> str:
    """Expand a short directive name (``soc``, ``t`` ...) to its full form."""
    return _ALIASES.get(name, name)


def _parse_int(value: str) -> int | None:
    m = _LEADING_INT_RE.match(value)
    if not m:
        return None
    return int(m.group(1)) or None


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


def parse_chordpro(content: str) -> Song:
    """Parse a complete ChordPro document."""
    song = Song()
    current = Section()
    in_section = False

    def flush() -> None:
        if current.lines:
            song.sections.append(current)

    for raw in re.split(r"\r?\n", content):
        stripped = raw.strip()

        if stripped.startswith("#"):
            continue

        directive = parse_directive(stripped)
        if directive:
            name, value = directive
            name = normalize_directive(name)

            if name in ("title", "subtitle", "artist", "key"):
                setattr(song, name, value)
            elif name in ("capo", "tempo"):
                setattr(song, name, _parse_int(value))
            elif name.startswith("start_of_"):
                flush()
                kind = name[len("start_of_"):]
                section_type = _SECTION_TYPES.get(kind)
                if section_type is None:
                    logger.debug("Unknown section kind %r, treating it as a verse", kind)
                    section_type = SectionType.VERSE
                current = Section(type=section_type, label=value or None)
                in_section = True
            elif name.startswith("end_of_"):
                flush()
                current = Section()
                in_section = False
            else:
                logger.debug("Ignoring directive {%s}", name)
            continue

        if not stripped:
            # Blank lines before any content would only create an empty section
            if in_section or current.lines:
                current.lines.append(Line())
            continue

        current.lines.append(parse_line(raw))

    flush()
    return song
