import pytest

from cubscape.model import CubError, MapGrid, Scene, Sprite, SpriteEntry


def test_from_name_round_trips_every_label():
    for sprite in Sprite:
        assert Sprite.from_name(sprite.label()) is sprite


def test_from_name_values_follow_declaration_order():
    names = ["NO", "SO", "WE", "EA", "F", "C"]
    assert [Sprite.from_name(n).value for n in names] == list(range(1, 7))


def test_from_name_accepts_sprite():
    assert Sprite.from_name(Sprite.EA) is Sprite.EA


@pytest.mark.parametrize("bad", ["XX", "N", "NOO", "no", "", " NO"])
def test_from_name_rejects_unknown(bad):
    with pytest.raises(CubError):
        Sprite.from_name(bad)


def test_label_matches_identifier():
    assert Sprite.WE.label() == "WE"
    assert Sprite.C.label() == "C"


def test_sprite_entry_is_color():
    assert SpriteEntry(Sprite.F, color=(1, 2, 3)).is_color is True
    assert SpriteEntry(Sprite.NO, texture_path="a.xpm").is_color is False


def test_map_grid_dimensions():
    grid = MapGrid(["111", "1N1", "111"])
    assert grid.height == 3
    assert grid.width == 3


def test_map_grid_cell_inside_and_outside():
    grid = MapGrid(["111", "1N1", "111"])
    assert grid.cell(1, 1) == "N"
    assert grid.cell(0, 2) == "1"
    assert grid.cell(-1, 0) == " "
    assert grid.cell(3, 0) == " "
    assert grid.cell(0, 3) == " "


def test_empty_grid_has_no_size():
    grid = MapGrid([])
    assert (grid.height, grid.width) == (0, 0)


def test_scene_sprite_lookup():
    floor = SpriteEntry(Sprite.F, color=(10, 20, 30))
    north = SpriteEntry(Sprite.NO, texture_path="north.xpm")
    scene = Scene([north, floor], MapGrid(["1"]))
    assert scene.sprite("F") is floor
    assert scene.sprite(Sprite.NO) is north


def test_scene_sprite_missing_raises_key_error():
    scene = Scene([SpriteEntry(Sprite.F, color=(0, 0, 0))])
    with pytest.raises(KeyError):
        scene.sprite("C")


def test_scene_sprite_unknown_name_raises_cub_error():
    scene = Scene()
    with pytest.raises(CubError):
        scene.sprite("ZZ")