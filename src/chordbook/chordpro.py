"""ChordPro serializer.

Renders a :class:`~chordbook.models.Song` or an
:class:`~chordbook.editable.EditableSong` back to ChordPro text.  Output
re-parses with :func:`chordbook.parser.parse_chordpro` to the same metadata,
section types, labels, line counts and per-line chord order.

Section type → directive mapping
--------------------------------

+-------------------------------+----------------------+
| Section type                  | Directive pair       |
+===============================+======================+
| ``verse``                     | ``{sov}`` / ``{eov}``|
+-------------------------------+----------------------+
| ``chorus``                    | ``{soc}`` / ``{eoc}``|
+-------------------------------+----------------------+
| ``bridge``                    | ``{sob}`` / ``{eob}``|
+-------------------------------+----------------------+
| ``tab``, ``intro``,           | ``{sot}`` / ``{eot}``|
| ``outro``, ``grid``           |                      |
+-------------------------------+----------------------+
| ``none``                      | no wrapper directive |
+-------------------------------+----------------------+

A label is carried on the start directive: ``{sov: Verse 2}``.

Usage::

    from chordbook.chordpro import ChordProFormatter
    text = ChordProFormatter().render(song)
"""

from .models import SectionType

_DIRECTIVES = {
    SectionType.VERSE: ("sov", "eov"),
    SectionType.CHORUS: ("soc", "eoc"),
    SectionType.BRIDGE: ("sob", "eob"),
    SectionType.TAB: ("sot", "eot"),
    # No dedicated pair for these; they come back as tab sections on re-parse.
    SectionType.INTRO: ("sot", "eot"),
    SectionType.OUTRO: ("sot", "eot"),
    SectionType.GRID: ("sot", "eot"),
}

_TEXT_FIELDS = ("title", "subtitle", "artist", "key")
_NUMBER_FIELDS = ("capo", "tempo")


class ChordProFormatter:
    """Render a song to ChordPro text."""

    def render(self, song) -> str:
        """Return ChordPro text for *song*.

        Lines are joined with ``\\n``; nothing follows the last section.
        """
        parts: list[str] = []

        # --- Metadata block ---
        for name in _TEXT_FIELDS:
            value = getattr(song, name)
            if value:
                parts.append(f"{{{name}: {value}}}")
        for name in _NUMBER_FIELDS:
            value = getattr(song, name)
            if value is not None:
                parts.append(f"{{{name}: {value}}}")
        if parts:
            parts.append("")

        # --- Section blocks ---
        last = len(song.sections) - 1
        for i, section in enumerate(song.sections):
            parts.extend(_render_section(section))
            # A blank line after an untyped section would re-parse as lyrics.
            if i < last and section.type != SectionType.NONE:
                parts.append("")

        return "\n".join(parts)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _render_section(section) -> list[str]:
    """Return the lines for one section (no trailing blank line)."""
    lines = [insert_chords_into_line(line.lyrics, line.chords) for line in section.lines]

    directives = _DIRECTIVES.get(SectionType(section.type))
    if directives is None:
        return lines

    start, end = directives
    start_line = f"{{{start}: {section.label}}}" if section.label else f"{{{start}}}"
    return [start_line, *lines, f"{{{end}}}"]


def insert_chords_into_line(text: str, chords) -> str:
    """Re-insert ``[chord]`` tokens into plain *text* at their positions.

    Chords go in rightmost first so earlier offsets stay valid.  A position
    past the end of the text is clamped to the end.  A single space follows the
    token when the next character is neither a space, another chord's ``[``,
    nor the end of the line, mirroring what :func:`chordbook.parser.parse_line`
    consumes.

    Example::

        insert_chords_into_line("Sing loud", [Am@0, F@5])  ->  "[Am] Sing [F] loud"
    """
    if not chords:
        return text

    result = text
    # Stacked chords at one position: the later one is inserted first.
    for chord in reversed(sorted(chords, key=lambda c: c.position)):
        pos = max(0, min(chord.position, len(text)))
        needs_space = pos < len(result) and result[pos] not in " ["
        token = f"[{chord.chord}] " if needs_space else f"[{chord.chord}]"
        result = result[:pos] + token + result[pos:]
    return result
