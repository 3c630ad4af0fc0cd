import pytest

from chordbook.models import ChordPosition, Line, SectionType
from chordbook.parser import normalize_directive, parse_chordpro, parse_directive, parse_line


def _chords(line: Line) -> list[tuple[str, int]]:
    return [(c.chord, c.position) for c in line.chords]


# ---------------------------------------------------------------------------
# parse_line
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", ["Hello World", "", "  indented", "no {chords} here"])
def test_parse_line_without_brackets_is_identity(text):
    line = parse_line(text)
    assert line.lyrics == text
    assert line.chords == []


def test_parse_line_single_chord_at_start():
    line = parse_line("[C]Hello World")
    assert line.lyrics == "Hello World"
    assert line.chords == [ChordPosition(chord="C", position=0)]


def test_parse_line_multiple_chords():
    line = parse_line("[C]Hello [G]World")
    assert line.lyrics == "Hello World"
    assert _chords(line) == [("C", 0), ("G", 6)]


def test_parse_line_complex_chord_names():
    line = parse_line("[Am7]Hello [G/B]World [Dsus4]Today")
    assert line.lyrics == "Hello World Today"
    assert _chords(line) == [("Am7", 0), ("G/B", 6), ("Dsus4", 12)]


def test_parse_line_mid_word_chord():
    line = parse_line("Be-[C]-fore")
    assert line.lyrics == "Be--fore"
    assert _chords(line) == [("C", 3)]


def test_parse_line_consumes_one_trailing_space():
    line = parse_line("[C] Hello")
    assert line.lyrics == "Hello"
    assert _chords(line) == [("C", 0)]


def test_parse_line_consumes_only_one_space():
    line = parse_line("[C]  Hello")
    assert line.lyrics == " Hello"


def test_parse_line_chords_only():
    line = parse_line("[C] [G] [Am]")
    assert line.lyrics == "  "
    assert _chords(line) == [("C", 0), ("G", 1), ("Am", 2)]
    assert line.is_chord_only


def test_parse_line_stacked_chords():
    line = parse_line("[G][C] Hello")
    assert line.lyrics == "Hello"
    assert _chords(line) == [("G", 0), ("C", 0)]


def test_parse_line_unclosed_bracket_is_lyric():
    line = parse_line("Hello [C world")
    assert line.lyrics == "Hello [C world"
    assert line.chords == []


def test_parse_line_chord_at_end():
    line = parse_line("Hello[G]")
    assert line.lyrics == "Hello"
    assert _chords(line) == [("G", 5)]


# ---------------------------------------------------------------------------
# Directives
# ---------------------------------------------------------------------------


def test_parse_directive_with_value():
    assert parse_directive("{title: Test Song}") == ("title", "Test Song")


def test_parse_directive_without_value():
    assert parse_directive("{soc}") == ("soc", "")


def test_parse_directive_case_and_whitespace():
    assert parse_directive("  {TITLE:   Spaced Title   }  ") == ("title", "Spaced Title")


def test_parse_directive_trailing_text_is_not_directive():
    assert parse_directive("{title: X} extra") is None


def test_parse_directive_plain_text():
    assert parse_directive("Hello") is None


@pytest.mark.parametrize(
    "short,full",
    [
        ("t", "title"),
        ("st", "subtitle"),
        ("su", "subtitle"),
        ("sov", "start_of_verse"),
        ("eoc", "end_of_chorus"),
        ("sob", "start_of_bridge"),
        ("eot", "end_of_tab"),
        ("artist", "artist"),
    ],
)
def test_normalize_directive(short, full):
    assert normalize_directive(short) == full


# ---------------------------------------------------------------------------
# parse_chordpro: metadata
# ---------------------------------------------------------------------------


def test_title_metadata():
    assert parse_chordpro("{title: Test Song}").title == "Test Song"


def test_multiple_metadata_fields():
    song = parse_chordpro("{title: Test Song}\n{artist: Test Artist}\n{key: Am}\n{capo: 2}\n{tempo: 96}")
    assert song.title == "Test Song"
    assert song.artist == "Test Artist"
    assert song.key == "Am"
    assert song.capo == 2
    assert song.tempo == 96
    assert song.sections == []


def test_short_metadata_forms():
    song = parse_chordpro("{t: Short Title}\n{st: Short Subtitle}")
    assert song.title == "Short Title"
    assert song.subtitle == "Short Subtitle"


def test_su_alias_for_subtitle():
    assert parse_chordpro("{su: Live}").subtitle == "Live"


def test_metadata_case_insensitive_and_trimmed():
    assert parse_chordpro("{TITLE:   Spaced Title   }").title == "Spaced Title"


def test_capo_leading_integer():
    assert parse_chordpro("{capo: 3 (optional)}").capo == 3


def test_capo_not_a_number_is_unset():
    assert parse_chordpro("{capo: none}").capo is None


def test_capo_zero_is_unset():
    assert parse_chordpro("{capo: 0}").capo is None


def test_metadata_produces_no_lines():
    song = parse_chordpro("{title: X}\n[C]Line")
    assert len(song.sections) == 1
    assert len(song.sections[0].lines) == 1


# ---------------------------------------------------------------------------
# parse_chordpro: sections
# ---------------------------------------------------------------------------


def test_simple_song_single_implicit_section():
    song = parse_chordpro("{title: Simple Song}\n\n[C]Hello [G]World")
    assert len(song.sections) == 1
    section = song.sections[0]
    assert section.type == SectionType.NONE
    assert section.label is None
    assert section.lines[0].lyrics == "Hello World"
    assert _chords(section.lines[0]) == [("C", 0), ("G", 6)]


def test_multiple_lines():
    song = parse_chordpro("[C]Line one\n[G]Line two\n[Am]Line three")
    assert [ln.lyrics for ln in song.sections[0].lines] == ["Line one", "Line two", "Line three"]


def test_verse_section():
    song = parse_chordpro("{start_of_verse}\n[C]Verse line\n{end_of_verse}")
    assert song.sections[0].type == SectionType.VERSE
    assert song.sections[0].lines[0].lyrics == "Verse line"


@pytest.mark.parametrize(
    "start,end,expected",
    [
        ("{soc}", "{eoc}", SectionType.CHORUS),
        ("{start_of_chorus}", "{end_of_chorus}", SectionType.CHORUS),
        ("{sob}", "{eob}", SectionType.BRIDGE),
        ("{sot}", "{eot}", SectionType.TAB),
        ("{start_of_intro}", "{end_of_intro}", SectionType.INTRO),
        ("{start_of_outro}", "{end_of_outro}", SectionType.OUTRO),
        ("{start_of_grid}", "{end_of_grid}", SectionType.GRID),
    ],
)
def test_section_types(start, end, expected):
    song = parse_chordpro(f"{start}\nline\n{end}")
    assert song.sections[0].type == expected


def test_section_label():
    song = parse_chordpro("{start_of_verse: Verse 1}\n[C]First verse\n{end_of_verse}")
    assert song.sections[0].label == "Verse 1"


def test_empty_label_is_absent():
    song = parse_chordpro("{sov:   }\nline\n{eov}")
    assert song.sections[0].label is None


def test_unclosed_section_emitted_at_end():
    song = parse_chordpro("{sov}\n[C]Line")
    assert len(song.sections) == 1
    assert song.sections[0].type == SectionType.VERSE
    assert len(song.sections[0].lines) == 1


def test_start_closes_previous_section():
    song = parse_chordpro("{sov}\nverse\n{soc}\nchorus\n{eoc}")
    assert [s.type for s in song.sections] == [SectionType.VERSE, SectionType.CHORUS]


def test_content_before_section_is_implicit():
    song = parse_chordpro("intro line\n{sov}\nverse\n{eov}\noutro line")
    assert [s.type for s in song.sections] == [SectionType.NONE, SectionType.VERSE, SectionType.NONE]
    assert song.sections[2].lines[0].lyrics == "outro line"


def test_back_to_back_directives_make_no_empty_section():
    song = parse_chordpro("{sov}\n{eov}\n{soc}\n{eoc}\n{sov}\nreal\n{eov}")
    assert len(song.sections) == 1
    assert song.sections[0].lines[0].lyrics == "real"


def test_unknown_section_kind_keeps_lines():
    song = parse_chordpro("{start_of_solo}\nriff\n{end_of_solo}")
    assert song.sections[0].type == SectionType.VERSE
    assert song.sections[0].lines[0].lyrics == "riff"


def test_unknown_section_kind_stays_separate():
    song = parse_chordpro("{start_of_solo: Solo}\n\n[E]riff\n{end_of_solo}\n[C]after")
    assert [(s.type, s.label, len(s.lines)) for s in song.sections] == [
        (SectionType.VERSE, "Solo", 2),
        (SectionType.NONE, None, 1),
    ]


# ---------------------------------------------------------------------------
# parse_chordpro: blank lines, comments, odd input
# ---------------------------------------------------------------------------


def test_comments_ignored():
    song = parse_chordpro("{title: Song}\n# This is a comment\n   # indented\n[C]Actual line")
    assert len(song.sections[0].lines) == 1
    assert song.sections[0].lines[0].lyrics == "Actual line"


def test_leading_blank_lines_swallowed():
    song = parse_chordpro("\n\n   \nfirst")
    assert len(song.sections) == 1
    assert song.sections[0].lines[0].lyrics == "first"


def test_blank_lines_preserved_after_content():
    song = parse_chordpro("[C]First section\n\n[G]Second section")
    lines = song.sections[0].lines
    assert [ln.lyrics for ln in lines] == ["First section", "", "Second section"]


def test_blank_line_inside_section_preserved():
    song = parse_chordpro("{sov}\n\nline\n{eov}")
    assert [ln.lyrics for ln in song.sections[0].lines] == ["", "line"]


def test_blank_only_section_is_kept_when_explicit():
    song = parse_chordpro("{sov}\n\n{eov}")
    assert len(song.sections) == 1
    assert song.sections[0].lines == [Line()]


def test_blank_line_after_end_directive_swallowed():
    song = parse_chordpro("{sov}\na\n{eov}\n\n{soc}\nb\n{eoc}")
    assert [len(s.lines) for s in song.sections] == [1, 1]


def test_unknown_directive_ignored():
    song = parse_chordpro("{comment: Slowly}\n{c: x}\n{foo}\nline")
    assert len(song.sections) == 1
    assert song.sections[0].lines[0].lyrics == "line"


def test_directive_with_trailing_text_is_lyric():
    song = parse_chordpro("{title: X} oops")
    assert song.title is None
    assert song.sections[0].lines[0].lyrics == "{title: X} oops"


def test_crlf_line_endings():
    song = parse_chordpro("{title: Win}\r\n{sov}\r\n[C]Line\r\n{eov}\r\n")
    assert song.title == "Win"
    assert song.sections[0].lines[0].lyrics == "Line"


def test_empty_document():
    song = parse_chordpro("")
    assert song.sections == []
    assert song.title is None
