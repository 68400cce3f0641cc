"""Locating, building and validating the map section of a scene file."""

from __future__ import annotations

from collections.abc import Sequence

from .model import CubError, MapGrid
from .textutil import is_blank

_MAP_CHARS = frozenset("10 NSEW")
_PLAYER_CHARS = frozenset("NSEW")
_NEIGHBOUR_OFFSETS = (
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)


def is_map_edge(text: str | None) -> bool:
    """True when ``text`` can be the first or last row of a map.

    Such a row starts (after any spaces) with a wall and holds only walls and spaces.
    """
    if text is None:
        return False
    body = text.lstrip(" ")
    return body.startswith("1") and all(c in "1 " for c in body)


def invalid_char(c: str) -> bool:
    """True for any character that may not appear inside a map."""
    return c not in _MAP_CHARS


def is_player(c: str) -> bool:
    """True for one of the player start markers N, S, E or W."""
    return c in _PLAYER_CHARS


def _is_last_map_row(lines: Sequence[str], index: int) -> bool:
    following = index + 1
    return following >= len(lines) or is_blank(lines[following])


def locate_map(lines: Sequence[str], texture_end: int | None) -> tuple[int, int]:
    """Return the indices of the first and last map rows.

    The search starts at ``texture_end``, the first line after the sprite
    declarations. Blank lines before the map are skipped; only blank lines
    may follow it.
    """
    if texture_end is None or texture_end < 0:
        raise CubError("invalid map!")
    index = texture_end
    while index < len(lines) and is_blank(lines[index]):
        index += 1
    if index >= len(lines) or not is_map_edge(lines[index]):
        raise CubError("invalid map!")
    start = index

    while not _is_last_map_row(lines, index):
        index += 1
    if not is_map_edge(lines[index]):
        raise CubError("invalid map!")
    end = index

    if start == end:
        raise CubError("start and end are at the same line")
    if any(not is_blank(line) for line in lines[end + 1:]):
        raise CubError("has smth after map")
    return start, end


def build_grid(lines: Sequence[str], start: int, end: int) -> MapGrid:
    """Build a rectangular grid from the rows ``start..end``, padding with spaces.

    The width is the longest line from ``start`` to the end of the file.
    """
    width = max((len(line) for line in lines[start:]), default=0)
    rows = []
    for line in lines[start:end + 1]:
        row = line[:width]
        if any(invalid_char(c) for c in row):
            raise CubError("invalid char in map")
        rows.append(row.ljust(width))
    return MapGrid(rows=rows)


def _open_neighbour(grid: MapGrid, y: int, x: int) -> tuple[int, int] | None:
    for dy, dx in _NEIGHBOUR_OFFSETS:
        ny, nx = y + dy, x + dx
        if grid.cell(ny, nx) == " ":
            return ny, nx
    return None


def check_neighbours(grid: MapGrid, y: int, x: int) -> bool:
    """True when all eight neighbours of ``(y, x)`` lie inside the grid and are not void."""
    return _open_neighbour(grid, y, x) is None


def validate_grid(grid: MapGrid) -> MapGrid:
    """Check that every open cell is enclosed and exactly one player is present.

    Records the player's position ``(y, x)`` and direction on ``grid`` and returns it.
    """
    grid.player_position = None
    grid.player_direction = None
    for y, row in enumerate(grid.rows):
        for x, cell in enumerate(row):
            if cell in "1 ":
                continue
            leak = _open_neighbour(grid, y, x)
            if leak is not None:
                raise CubError(
                    f"invalid map: open cell next to y: {leak[0]}, x: {leak[1]}"
                )
            if is_player(cell):
                if grid.player_direction is not None:
                    raise CubError("more than one player position in map")
                grid.player_direction = cell
                grid.player_position = (y, x)
    if grid.player_direction is None:
        raise CubError("player position not found in map")
    return grid


def parse_map(lines: Sequence[str], texture_end: int | None) -> MapGrid:
    """Locate, build and validate the map that follows the sprite declarations."""
    start, end = locate_map(lines, texture_end)
    return validate_grid(build_grid(lines, start, end))


def format_map(grid: MapGrid) -> str:
    """Render the grid row by row, each row ending with a newline."""
    return "".join(f"{row}\n" for row in grid.rows)