"""Core data types describing a parsed scene description."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class CubError(Exception):
    """Raised when a scene description or one of its parts is invalid."""


class Sprite(Enum):
    """Identifiers of the six texture and colour entries of a scene."""

    NO = 1
    SO = 2
    WE = 3
    EA = 4
    F = 5
    C = 6

    @classmethod
    def from_name(cls, name: "str | Sprite") -> "Sprite":
        """Return the sprite whose identifier is exactly ``name``."""
        if isinstance(name, Sprite):
            return name
        try:
            return cls[name]
        except KeyError:
            raise CubError(f"invalid texture name: {name}") from None

    def label(self) -> str:
        """Return the identifier as written in a scene file."""
        return self.name


@dataclass(frozen=True)
class SpriteEntry:
    """One texture path or one RGB colour bound to a sprite identifier."""

    name: Sprite
    texture_path: str | None = None
    color: tuple[int, int, int] | None = None

    @property
    def is_color(self) -> bool:
        return self.color is not None


@dataclass
class MapGrid:
    """A rectangular map of single-character cells."""

    rows: list[str]
    player_position: tuple[int, int] | None = None
    player_direction: str | None = None

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def cell(self, y: int, x: int) -> str:
        """Return the cell at ``(y, x)``; anything outside the grid is void (a space)."""
        if 0 <= y < len(self.rows) and 0 <= x < len(self.rows[y]):
            return self.rows[y][x]
        return " "


@dataclass
class Scene:
    """A fully parsed scene: its sprite entries and its map."""

    sprites: list[SpriteEntry] = field(default_factory=list)
    grid: MapGrid | None = None

    def sprite(self, name: "str | Sprite") -> SpriteEntry:
        """Return the entry declared for ``name``."""
        wanted = Sprite.from_name(name)
        for entry in self.sprites:
            if entry.name is wanted:
                return entry
        raise KeyError(wanted.label())