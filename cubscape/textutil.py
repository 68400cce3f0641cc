"""Small text helpers used while reading scene files."""

from __future__ import annotations

from collections.abc import Iterable

from .model import CubError, SpriteEntry

_DELIMITERS = frozenset("\t\n\v\f\r ")
_BAD_DELIMITERS = frozenset("\t\n\v\f\r")
_ATOI_SPACE = frozenset(" \t\n\v\f\r")
_INT64_MAX = 2**63 - 1


def is_delimiter(c: str) -> bool:
    """True for a space or any of tab, newline, vertical tab, form feed, return."""
    return c in _DELIMITERS


def is_blank(text: str | None) -> bool:
    """True when ``text`` is missing or consists of delimiters only."""
    if text is None:
        return True
    return all(is_delimiter(c) for c in text)


def has_bad_delimiter(text: str | None) -> bool:
    """True when ``text`` is missing or holds any whitespace other than a space."""
    if text is None:
        return True
    return any(c in _BAD_DELIMITERS for c in text)


def atoi(text: str) -> int:
    """Parse a leading integer the lenient way: skip blanks, any run of signs, then digits.

    A result that overflows a 64-bit accumulator gives -1 (or 0 when negative);
    otherwise the value wraps to a signed 32-bit integer.
    """
    pos = 0
    while pos < len(text) and text[pos] in _ATOI_SPACE:
        pos += 1
    sign = 1
    while pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    result = 0
    while pos < len(text) and text[pos].isascii() and text[pos].isdigit():
        if result * 10 > _INT64_MAX:
            return -1 if sign == 1 else 0
        result = result * 10 + int(text[pos])
        pos += 1
    value = (sign * result) & 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def split_words(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep`` and drop the empty pieces."""
    return [word for word in text.split(sep) if word]


def is_color(value: str) -> bool:
    """True when ``value`` contains only ASCII digits and commas."""
    return all((c.isascii() and c.isdigit()) or c == "," for c in value)


def parse_color(value: str) -> tuple[int, int, int]:
    """Parse ``"r,g,b"`` into three components in the range 0..255."""
    parts = split_words(value, ",")
    if len(parts) != 3:
        raise CubError("invalid rgb value")
    numbers = tuple(atoi(part) for part in parts)
    if any(n < 0 or n > 255 for n in numbers):
        raise CubError("invalid rgb value")
    return numbers  # type: ignore[return-value]


def format_sprites(entries: Iterable[SpriteEntry]) -> str:
    """Render sprite entries as a human-readable report."""
    out = ["\n-----------START OF TEXTURES-----------\n"]
    for entry in entries:
        out.append("----------------------\n")
        out.append(f"name: {entry.name.label()}\n")
        path = entry.texture_path if entry.texture_path is not None else "(null)"
        out.append(f"path: {path}\n")
        if entry.color is None:
            out.append("color: NONE\n")
        else:
            out.append("color: " + "".join(f"{c}, " for c in entry.color) + "\n")
    out.append("\n-----------END OF TEXTURES-----------\n")
    return "".join(out)


def format_lines(lines: Iterable[str | None]) -> str:
    """Render the lines of a file, each quoted, between start and end markers."""
    body = "".join(f"'{line}'\n" for line in lines if line is not None)
    return (
        "\n-----------START OF FILE-----------\n"
        + body
        + "\n-----------END OF FILE-----------\n"
    )