# cubscape

A small first-person maze explorer as a Python library. It reads a `.cub`
scene file, which declares four wall textures, a floor colour, a ceiling
colour and a map enclosed by walls, checks it thoroughly, and renders the
maze from the player's point of view with a textured raycaster. A minimap is
drawn in the lower-left corner of the frame.

## Installing

```
pip install .
```

For running the test suite:

```
pip install .[test]
pytest
```

## Playing a level

The package installs no command; start a level from Python:

```python
from cubscape.parser import parse
from cubscape.raycast import run

run(parse("level.cub"))
```

`run` opens a 1024×512 pygame window titled "Raycaster" and plays until the
window is closed or Esc is pressed. Controls:

| Key   | Action            |
|-------|-------------------|
| W     | move forward      |
| S     | move backward     |
| A     | turn left         |
| D     | turn right        |
| Esc   | quit              |

Movement is blocked by walls; the player can stand only on `0` or a player
start cell.

## The scene file

A scene file must have the `.cub` extension and be readable. It starts with
six declarations, in any order and separated by any number of blank lines:

```
NO ./textures/north.png
SO ./textures/south.png
WE ./textures/west.png
EA ./textures/east.png
F 220,100,0
C 225,30,0
```

- Each declaration is an identifier followed by a value, separated by spaces.
- A value made only of digits and commas is a colour: exactly three
  comma-separated values from 0 to 255.
- Any other value is a path to an image, which must exist and be readable.
  Wall textures are loaded with Pillow, so any image format it reads works.
- Each identifier may be declared only once; an unknown identifier is an error.

After the declarations comes the map:

```
        1111111111111
        1000000000001
111111111011000001101
100000000000000000001
1111111110110000011N1
        1111111111111
```

- `1` is a wall, `0` open floor, a space is void. No other characters are allowed.
- Exactly one of `N`, `S`, `E`, `W` marks the player's start and facing.
- The first and last map lines contain only walls and spaces, and start
  (after any spaces) with a wall.
- Every open cell and the player cell must be surrounded on all eight sides by
  non-void cells inside the map, so the map is closed.
- Tab, carriage return and other control whitespace are rejected anywhere in
  the file, and nothing but blank lines may follow the map.

Every problem is reported by raising `cubscape.model.CubError` with a short
message.

## Using it as a library

```python
from cubscape.parser import parse
from cubscape.model import CubError

try:
    scene = parse("level.cub")
except CubError as err:
    print(f"Error: {err}")
else:
    print(scene.grid.width, scene.grid.height)
    print(scene.grid.player_direction, scene.grid.player_position)
    print(scene.sprite("F").color)
```

Modules:

- `cubscape.model` — `CubError`, the `Sprite` identifiers, `SpriteEntry`,
  `MapGrid` and `Scene`.
- `cubscape.textutil` — text helpers such as `is_blank`, `split_words`,
  `parse_color`, and the report formatters `format_sprites` and `format_lines`.
- `cubscape.mapgrid` — `parse_map(lines, texture_end)` locates, builds and
  validates a map given as a list of lines; `format_map` renders a grid.
- `cubscape.parser` — `parse(path)` and its steps: `check_file`,
  `read_lines`, `fill_sprites`, `file_content`.
- `cubscape.raycast` — `Raycaster`, `Player`, `Texture`, `load_textures`
  and `run`.

`Raycaster` performs movement and rendering without a window, which is handy
for tests and tooling. Textures may be passed in directly as arrays of
`0xRRGGBB` values:

```python
import numpy as np
from cubscape.model import Sprite
from cubscape.raycast import Raycaster, Texture

textures = {s: Texture(np.full((64, 64), 0x808080)) for s in
            (Sprite.NO, Sprite.SO, Sprite.WE, Sprite.EA)}
game = Raycaster(scene, textures)
game.press("w")
game.update()
frame = game.render()   # numpy array, shape (512, 1024)
```

## What it does not do

- There is no command-line launcher; levels are started from Python with
  `cubscape.raycast.run`.
- The floor (`F`) and ceiling (`C`) colours are parsed and checked but not
  drawn: the area above and below the walls stays black.