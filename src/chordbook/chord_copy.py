"""Copy chords from the first verse/chorus onto later ones.

Songbooks often write chords only on the first verse and the first chorus.
:func:`copy_chords_to_sections` fills in the rest: line ``i`` of every later
verse (chorus) without chords receives the chords of line ``i`` of the first
verse (chorus), at the same character positions.

Only lines inside verse and chorus blocks are rewritten.  All other text,
line endings included, comes out byte for byte as it went in.
"""

import logging

from .chordpro import insert_chords_into_line
from .models import ChordPosition
from .parser import CHORD_TOKEN_RE, normalize_directive, parse_directive, parse_line

logger = logging.getLogger(__name__)

_BLOCK_DIRECTIVES = {
    "start_of_verse": ("start", "verse"),
    "end_of_verse": ("end", "verse"),
    "start_of_chorus": ("start", "chorus"),
    "end_of_chorus": ("end", "chorus"),
}


def _block_directive(line: str) -> tuple[str, str] | None:
    """Return ``("start" | "end", "verse" | "chorus")`` for a block boundary."""
    directive = parse_directive(line)
    if directive is None:
        return None
    return _BLOCK_DIRECTIVES.get(normalize_directive(directive[0]))


def _split_eol(raw: str) -> tuple[str, str]:
    body = raw.rstrip("\r")
    return body, raw[len(body):]


def _apply_pattern(lines: list[str], pattern: list[list[ChordPosition]]) -> list[str]:
    out = []
    for i, raw in enumerate(lines):
        body, eol = _split_eol(raw)
        if not body.strip() or CHORD_TOKEN_RE.search(body) or i >= len(pattern) or not pattern[i]:
            out.append(raw)
            continue
        out.append(insert_chords_into_line(body, pattern[i]) + eol)
    return out


def copy_chords_to_sections(content: str) -> str:
    """Return *content* with first-verse/first-chorus chords repeated."""
    result: list[str] = []
    patterns: dict[str, list[list[ChordPosition]]] = {}
    current: str | None = None
    block: list[str] = []

    for raw in content.split("\n"):
        boundary = _block_directive(raw)

        if boundary is None:
            (block if current else result).append(raw)
            continue

        action, kind = boundary
        if action == "start":
            if current:
                logger.debug("Unterminated %s block, passing it through", current)
                result.extend(block)
            current, block = kind, []
            result.append(raw)
            continue

        if current is None:
            result.append(raw)
            continue

        if current not in patterns:
            patterns[current] = [parse_line(_split_eol(ln)[0]).chords for ln in block]
            result.extend(block)
        else:
            logger.debug("Copying %s chords onto %d lines", current, len(block))
            result.extend(_apply_pattern(block, patterns[current]))
        current, block = None, []
        result.append(raw)

    result.extend(block)
    return "\n".join(result)
