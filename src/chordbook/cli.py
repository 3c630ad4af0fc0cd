import dataclasses
import json
import logging
import re
import sys
from pathlib import Path

import click

from .chord_copy import copy_chords_to_sections
from .editable import from_editable_song, to_editable_song
from .exceptions import SongFileError
from .parser import parse_chordpro
from .transpose import transpose_chordpro

SONG_SUFFIX = ".pro"


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(content: str, source: Path) -> str:
    """``<title-slug>.pro`` from the song's ``{title}``, else the input's name."""
    title = parse_chordpro(content).title
    slug = _slugify(title) if title else ""
    return f"{slug or source.stem}{SONG_SUFFIX}"


def _read_song(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SongFileError(path, str(exc)) from exc


def _emit(content: str, source: str, output_path: str | None, stdout: bool) -> None:
    if not content.endswith("\n"):
        content += "\n"
    if stdout:
        click.echo(content, nl=False)
        return

    dest = Path(output_path) if output_path else Path(source).with_name(
        _default_filename(content, Path(source))
    )
    try:
        dest.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise SongFileError(str(dest), str(exc)) from exc
    click.echo(f"Written to {dest}")


def _run(fn, path: str, output_path: str | None, stdout: bool) -> None:
    try:
        content = _read_song(path)
        _emit(fn(content), path, output_path, stdout)
    except SongFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _output_options(f):
    f = click.option("--stdout", is_flag=True, default=False,
                     help="Print to stdout instead of writing a file.")(f)
    f = click.option("-o", "--output", "output_path", default=None, metavar="PATH",
                     help=f"Output file path (default: <title>{SONG_SUFFIX} next to FILE)")(f)
    return f


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Work with ChordPro song files.

    \b
    Songs are plain-text ChordPro files (.pro):
      {title: Amazing Grace}
      {sov: Verse 1}
      A[G]mazing [C]grace
      {eov}
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("path", metavar="FILE")
def show(path: str) -> None:
    """Print the parsed song as JSON."""
    try:
        song = parse_chordpro(_read_song(path))
    except SongFileError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(json.dumps(dataclasses.asdict(song), indent=2))


@main.command("format")
@click.argument("path", metavar="FILE")
@_output_options
def format_song(path: str, output_path: str | None, stdout: bool) -> None:
    """Rewrite FILE in canonical ChordPro form."""
    _run(lambda text: from_editable_song(to_editable_song(parse_chordpro(text))), path, output_path, stdout)


@main.command(context_settings={"ignore_unknown_options": True})
@click.argument("path", metavar="FILE")
@click.argument("semitones", type=int)
@_output_options
def transpose(path: str, semitones: int, output_path: str | None, stdout: bool) -> None:
    """Transpose every chord in FILE by SEMITONES (negative to go down).

    Example: chordbook transpose song.pro -2
    """
    _run(lambda text: transpose_chordpro(text, semitones), path, output_path, stdout)


@main.command("copy-chords")
@click.argument("path", metavar="FILE")
@_output_options
def copy_chords(path: str, output_path: str | None, stdout: bool) -> None:
    """Repeat first-verse/first-chorus chords on later verses and choruses."""
    _run(copy_chords_to_sections, path, output_path, stdout)
