"""A textured first-person raycaster over a parsed scene."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .model import CubError, MapGrid, Scene, Sprite

SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 512
TEX_SIZE = 64
MOVE_SPEED = 0.1
ROT_SPEED = 3.0
FOV_PLANE = 0.66
MINIMAP_SCALE = 8
MINIMAP_OFFSET = 10
PLAYER_MARK = 4
DIRECTION_LINE = 5

WALL_COLOR = 0xFFFFFF
FLOOR_COLOR = 0x000000
PLAYER_COLOR = 0xFF0000

WALL_SPRITES = (Sprite.NO, Sprite.SO, Sprite.WE, Sprite.EA)
_PASSABLE = frozenset("0NSEW")
_DIRECTION_ANGLES = {"N": 90.0, "S": 270.0, "E": 0.0, "W": 180.0}
_MAX_LINE_HEIGHT = 2**40


class Key(str, Enum):
    """Keys the raycaster reacts to."""

    W = "w"
    A = "a"
    S = "s"
    D = "d"
    ESC = "escape"


def deg_to_rad(angle: float) -> float:
    """Convert degrees to radians."""
    return angle * math.pi / 180.0


def fix_angle(angle: float) -> float:
    """Bring an angle that drifted by at most one turn back into 0..359."""
    if angle > 359:
        angle -= 360
    if angle < 0:
        angle += 360
    return angle


def angle_from_direction(direction: str) -> float:
    """Viewing angle in degrees for a player marker; east for anything unknown."""
    return _DIRECTION_ANGLES.get(direction, 0.0)


def _cell_index(value: float) -> int:
    """Map a world coordinate to a cell index, truncating toward zero."""
    whole = int(value)
    quotient = abs(whole) // TEX_SIZE
    return quotient if whole >= 0 else -quotient


@dataclass(eq=False)
class Texture:
    """A wall texture as a 2-D array of 0xRRGGBB colours."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint32)
        if self.pixels.ndim != 2 or self.pixels.size == 0:
            raise CubError("texture must be a non-empty 2-D image")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"texture pixel out of range: x={x}, y={y}")
        return int(self.pixels[y, x])


@dataclass
class Player:
    """Position in world units (64 per cell), heading and camera plane."""

    x: float
    y: float
    angle: float
    dx: float = 0.0
    dy: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0

    def __post_init__(self) -> None:
        self._orient()

    def _orient(self) -> None:
        self.dx = math.cos(deg_to_rad(self.angle))
        self.dy = -math.sin(deg_to_rad(self.angle))
        self.plane_x = -self.dy * FOV_PLANE
        self.plane_y = self.dx * FOV_PLANE

    @classmethod
    def from_map(cls, grid: MapGrid) -> "Player":
        """Place the player at the centre of the single N/S/E/W cell of ``grid``."""
        found: tuple[int, int, str] | None = None
        for y, row in enumerate(grid.rows):
            for x, cell in enumerate(row):
                if cell in "NSEW":
                    if found is not None:
                        raise CubError("Multiple player positions in map")
                    found = (y, x, cell)
        if found is None:
            raise CubError("Player position not found in map")
        y, x, direction = found
        half = TEX_SIZE // 2
        return cls(
            x=float(x * TEX_SIZE + half),
            y=float(y * TEX_SIZE + half),
            angle=angle_from_direction(direction),
        )

    def rotate(self, delta: float) -> None:
        """Turn by ``delta`` degrees, counter-clockwise for positive values."""
        self.angle = fix_angle(self.angle + delta)
        self._orient()


def _texture_from_file(path: str) -> Texture:
    from PIL import Image

    try:
        with Image.open(path) as image:
            rgb = np.asarray(image.convert("RGB"), dtype=np.uint32)
    except (OSError, ValueError) as exc:
        raise CubError(f"Error loading texture {path}") from exc
    pixels = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
    return Texture(pixels)


def load_textures(scene: Scene) -> dict[Sprite, Texture]:
    """Load the wall textures named by the scene's NO, SO, WE and EA entries."""
    textures: dict[Sprite, Texture] = {}
    for entry in scene.sprites:
        if entry.name not in WALL_SPRITES:
            continue
        if entry.texture_path is None:
            raise CubError(f"Error loading texture for {entry.name.label()}")
        textures[entry.name] = _texture_from_file(entry.texture_path)
    return textures


@dataclass
class _Ray:
    distance: float
    side: int
    step_x: int
    step_y: int
    dir_x: float
    dir_y: float


class Raycaster:
    """Game state and renderer for one scene."""

    def __init__(
        self, scene: Scene, textures: Mapping[Sprite, Texture] | None = None
    ) -> None:
        if scene.grid is None:
            raise CubError("no map!")
        self.grid: MapGrid = scene.grid
        self.player = Player.from_map(self.grid)
        loaded = dict(load_textures(scene) if textures is None else textures)
        missing = [s.label() for s in WALL_SPRITES if s not in loaded]
        if missing:
            raise CubError("missing texture: " + ", ".join(missing))
        self.textures: dict[Sprite, Texture] = loaded
        self.keys: set[Key] = set()
        self.running = True
        self.frame = np.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=np.uint32)

    @staticmethod
    def _as_key(key: "Key | str") -> Key | None:
        try:
            return Key(key)
        except ValueError:
            return None

    def press(self, key: "Key | str") -> None:
        """Record a key as held; escape stops the game."""
        known = self._as_key(key)
        if known is None:
            return
        if known is Key.ESC:
            self.running = False
            return
        self.keys.add(known)

    def release(self, key: "Key | str") -> None:
        """Record a key as released."""
        known = self._as_key(key)
        if known is not None:
            self.keys.discard(known)

    def can_move(self, x: float, y: float) -> bool:
        """True when world point ``(x, y)`` lies on a walkable cell."""
        mx = _cell_index(x)
        my = _cell_index(y)
        if 0 <= mx < self.grid.width and 0 <= my < self.grid.height:
            return self.grid.cell(my, mx) in _PASSABLE
        return False

    def _step(self, sign: int) -> None:
        player = self.player
        new_x = player.x + sign * player.dx * MOVE_SPEED * TEX_SIZE
        new_y = player.y + sign * player.dy * MOVE_SPEED * TEX_SIZE
        if self.can_move(new_x, player.y):
            player.x = new_x
        if self.can_move(player.x, new_y):
            player.y = new_y

    def update(self) -> None:
        """Advance the player by one frame according to the held keys."""
        if Key.A in self.keys:
            self.player.rotate(ROT_SPEED)
        if Key.D in self.keys:
            self.player.rotate(-ROT_SPEED)
        if Key.W in self.keys:
            self._step(1)
        if Key.S in self.keys:
            self._step(-1)

    def _put_pixel(self, x: int, y: int, color: int) -> None:
        if 0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT:
            self.frame[y, x] = color

    def _fill_rect(self, x: int, y: int, width: int, height: int, color: int) -> None:
        x0, x1 = max(x, 0), min(x + width, SCREEN_WIDTH)
        y0, y1 = max(y, 0), min(y + height, SCREEN_HEIGHT)
        if x0 < x1 and y0 < y1:
            self.frame[y0:y1, x0:x1] = color

    def _draw_line(self, x0: int, y0: int, x1: int, y1: int, color: int) -> None:
        dx, dy = x1 - x0, y1 - y0
        steps = max(abs(dx), abs(dy))
        if steps == 0:
            self._put_pixel(x0, y0, color)
            return
        x_inc, y_inc = dx / steps, dy / steps
        x, y = float(x0), float(y0)
        for _ in range(steps + 1):
            self._put_pixel(int(x), int(y), color)
            x += x_inc
            y += y_inc

    def _trace(self, pos_x: float, pos_y: float, dir_x: float, dir_y: float) -> _Ray | None:
        map_x, map_y = int(pos_x), int(pos_y)
        delta_x = math.inf if dir_x == 0 else abs(1 / dir_x)
        delta_y = math.inf if dir_y == 0 else abs(1 / dir_y)
        if dir_x < 0:
            step_x, side_x = -1, (pos_x - map_x) * delta_x
        else:
            step_x, side_x = 1, (map_x + 1.0 - pos_x) * delta_x
        if dir_y < 0:
            step_y, side_y = -1, (pos_y - map_y) * delta_y
        else:
            step_y, side_y = 1, (map_y + 1.0 - pos_y) * delta_y
        width, height = self.grid.width, self.grid.height
        while True:
            if side_x < side_y:
                side_x += delta_x
                map_x += step_x
                side = 0
            else:
                side_y += delta_y
                map_y += step_y
                side = 1
            if not (0 <= map_x < width and 0 <= map_y < height):
                return None
            if self.grid.cell(map_y, map_x) == "1":
                break
        if side == 0:
            distance = (map_x - pos_x + (1 - step_x) // 2) / dir_x
        else:
            distance = (map_y - pos_y + (1 - step_y) // 2) / dir_y
        return _Ray(distance, side, step_x, step_y, dir_x, dir_y)

    def _draw_column(self, column: int, ray: _Ray, pos_x: float, pos_y: float) -> None:
        h = SCREEN_HEIGHT
        if ray.distance > 0:
            line_height = min(int(h / ray.distance), _MAX_LINE_HEIGHT)
        else:
            line_height = _MAX_LINE_HEIGHT
        if line_height <= 0:
            return
        draw_start = max(h // 2 - line_height // 2, 0)
        draw_end = min(line_height // 2 + h // 2, h - 1)
        if draw_start >= draw_end:
            return
        if ray.side == 0:
            sprite = Sprite.WE if ray.step_x > 0 else Sprite.EA
            wall_x = pos_y + ray.distance * ray.dir_y
        else:
            sprite = Sprite.NO if ray.step_y > 0 else Sprite.SO
            wall_x = pos_x + ray.distance * ray.dir_x
        wall_x -= math.floor(wall_x)
        tex_x = min(int(wall_x * TEX_SIZE), TEX_SIZE - 1)
        if (ray.side == 0 and ray.dir_x > 0) or (ray.side == 1 and ray.dir_y < 0):
            tex_x = TEX_SIZE - tex_x - 1
        ys = np.arange(draw_start, draw_end, dtype=np.int64)
        d = ys * 256 - h * 128 + line_height * 128
        tex_y = np.clip((d * TEX_SIZE) // line_height // 256, 0, TEX_SIZE - 1)
        texture = self.textures[sprite]
        rows = (tex_y * texture.height) // TEX_SIZE
        col = (tex_x * texture.width) // TEX_SIZE
        self.frame[draw_start:draw_end, column] = texture.pixels[rows, col]

    def cast_rays(self) -> list[float | None]:
        """Draw the textured walls; return each column's perpendicular wall distance."""
        player = self.player
        pos_x = player.x / TEX_SIZE
        pos_y = player.y / TEX_SIZE
        distances: list[float | None] = []
        for column in range(SCREEN_WIDTH):
            camera_x = 2 * column / SCREEN_WIDTH - 1
            dir_x = player.dx + player.plane_x * camera_x
            dir_y = player.dy + player.plane_y * camera_x
            ray = self._trace(pos_x, pos_y, dir_x, dir_y)
            if ray is None:
                distances.append(None)
                continue
            distances.append(ray.distance)
            self._draw_column(column, ray, pos_x, pos_y)
        return distances

    def draw_map(self) -> None:
        """Overlay a small top-down map with the player in the lower-left corner."""
        scale = MINIMAP_SCALE
        offset_x = MINIMAP_OFFSET
        offset_y = SCREEN_HEIGHT - self.grid.height * scale - MINIMAP_OFFSET
        for y, row in enumerate(self.grid.rows):
            for x, cell in enumerate(row):
                if cell == " ":
                    continue
                color = WALL_COLOR if cell == "1" else FLOOR_COLOR
                self._fill_rect(
                    offset_x + x * scale, offset_y + y * scale, scale - 1, scale - 1, color
                )
        player = self.player
        mark_x = offset_x + int(player.x / TEX_SIZE * scale)
        mark_y = offset_y + int(player.y / TEX_SIZE * scale)
        half = PLAYER_MARK // 2
        self._fill_rect(mark_x - half, mark_y - half, PLAYER_MARK, PLAYER_MARK, PLAYER_COLOR)
        end_x = int(mark_x + player.dx * DIRECTION_LINE)
        end_y = int(mark_y + player.dy * DIRECTION_LINE)
        self._draw_line(mark_x, mark_y, end_x, end_y, PLAYER_COLOR)

    def render(self) -> np.ndarray:
        """Clear the frame, draw walls and the map overlay, and return the frame."""
        self.frame.fill(0)
        self.cast_rays()
        self.draw_map()
        return self.frame


def run(scene: Scene) -> int:
    """Open a window and play the scene until it is closed or escape is pressed."""
    game = Raycaster(scene)

    import pygame

    key_map = {
        pygame.K_w: Key.W,
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_ESCAPE: Key.ESC,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Raycaster")
        clock = pygame.time.Clock()
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN and event.key in key_map:
                    game.press(key_map[event.key])
                elif event.type == pygame.KEYUP and event.key in key_map:
                    game.release(key_map[event.key])
            if not game.running:
                break
            game.update()
            frame = game.render()
            rgb = np.stack(
                [(frame >> 16) & 0xFF, (frame >> 8) & 0xFF, frame & 0xFF], axis=-1
            ).astype(np.uint8)
            surface = pygame.image.frombuffer(
                rgb.tobytes(), (SCREEN_WIDTH, SCREEN_HEIGHT), "RGB"
            )
            screen.blit(surface, (0, 0))
            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()
    return 0