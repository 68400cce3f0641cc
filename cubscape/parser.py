"""Reading a scene file: its sprite declarations followed by its map."""

from __future__ import annotations

import os
from collections.abc import Sequence

from .mapgrid import parse_map
from .model import CubError, Scene, Sprite, SpriteEntry
from .textutil import has_bad_delimiter, is_blank, is_color, parse_color, split_words

_EXTENSION = ".cub"
_SPRITE_COUNT = len(Sprite)


def has_cub_extension(path: str | os.PathLike[str]) -> bool:
    """True when the last four characters of ``path`` are ``.cub``."""
    return os.fspath(path).endswith(_EXTENSION)


def check_file(path: str | os.PathLike[str]) -> str:
    """Check that ``path`` names a readable ``.cub`` file and return it as a string."""
    text = os.fspath(path)
    if not has_cub_extension(text):
        raise CubError("invalid format of file")
    if not os.access(text, os.R_OK):
        raise CubError("file is inaccessible")
    return text


def read_lines(path: str | os.PathLike[str]) -> list[str]:
    """Return the lines of the file without their line terminators.

    Any whitespace other than a plain space inside a line is rejected.
    """
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            content = handle.read()
    except OSError as exc:
        raise CubError(f"cannot read file: {exc}") from exc
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    for line in lines:
        if has_bad_delimiter(line):
            raise CubError("invalid delimiter")
    return lines


def parse_sprite_line(text: str) -> SpriteEntry:
    """Parse one declaration such as ``NO ./north.xpm`` or ``F 220,100,0``."""
    words = split_words(text, " ")
    if len(words) < 2:
        raise CubError("invalid arguments")
    name = Sprite.from_name(words[0])
    value = words[1]
    if is_color(value):
        return SpriteEntry(name=name, color=parse_color(value))
    if not os.access(value, os.R_OK):
        raise CubError("sprite path is inaccessible")
    return SpriteEntry(name=name, texture_path=value)


def fill_sprites(lines: Sequence[str]) -> tuple[list[SpriteEntry], int]:
    """Read the six sprite declarations at the top of the file.

    Returns the entries in file order and the index of the first line after
    the last declaration, where the search for the map begins.
    """
    entries: list[SpriteEntry] = []
    seen: set[Sprite] = set()
    index = 0
    while index < len(lines) and len(entries) < _SPRITE_COUNT:
        line = lines[index]
        if not is_blank(line):
            entry = parse_sprite_line(line)
            if entry.name in seen:
                raise CubError("double declaration of sprite is forbidden")
            seen.add(entry.name)
            entries.append(entry)
        index += 1
    if index >= len(lines):
        raise CubError("no map!")
    return entries, index


def file_content(lines: Sequence[str]) -> Scene:
    """Build a scene from the lines of a scene file."""
    sprites, texture_end = fill_sprites(lines)
    grid = parse_map(lines, texture_end)
    return Scene(sprites=sprites, grid=grid)


def parse(path: str | os.PathLike[str]) -> Scene:
    """Check, read and parse the scene file at ``path``."""
    checked = check_file(path)
    lines = read_lines(checked)
    if not lines:
        raise CubError("empty file")
    return file_content(lines)