import pytest

from cubscape.mapgrid import (
    build_grid,
    check_neighbours,
    format_map,
    invalid_char,
    is_map_edge,
    is_player,
    locate_map,
    parse_map,
    validate_grid,
)
from cubscape.model import CubError, MapGrid


@pytest.mark.parametrize(
    "text, expected",
    [
        ("111", True),
        ("  111 1", True),
        ("", False),
        ("   ", False),
        ("1011", False),
        (" 1N1", False),
        (None, False),
    ],
)
def test_is_map_edge(text, expected):
    assert is_map_edge(text) is expected


def test_invalid_char_and_is_player():
    assert all(not invalid_char(c) for c in "10 NSEW")
    assert invalid_char("X")
    assert invalid_char("2")
    assert all(is_player(c) for c in "NSEW")
    assert not is_player("0")
    assert not is_player("1")


def test_locate_map_skips_leading_blank_lines():
    lines = ["", "   ", "111", "1N1", "111", "", "  "]
    assert locate_map(lines, 0) == (2, 4)


def test_locate_map_without_texture_end():
    with pytest.raises(CubError):
        locate_map(["111", "1N1", "111"], None)


def test_locate_map_past_end_of_file():
    with pytest.raises(CubError):
        locate_map(["111"], 5)


def test_locate_map_first_row_not_edge():
    with pytest.raises(CubError):
        locate_map(["1N1", "111"], 0)


def test_locate_map_last_row_not_edge():
    with pytest.raises(CubError):
        locate_map(["111", "101"], 0)


def test_locate_map_single_row():
    with pytest.raises(CubError, match="same line"):
        locate_map(["", "111", ""], 0)


def test_locate_map_content_after_map():
    with pytest.raises(CubError, match="after map"):
        locate_map(["111", "1N1", "111", "", "111"], 0)


def test_build_grid_pads_rows_to_width():
    lines = ["1111", "1N1", "1111"]
    grid = build_grid(lines, 0, 2)
    assert grid.height == 3
    assert grid.width == 4
    assert all(len(row) == 4 for row in grid.rows)
    assert grid.rows[1] == "1N1 "


def test_build_grid_width_includes_trailing_lines():
    lines = ["111", "1N1", "111", "     "]
    grid = build_grid(lines, 0, 2)
    assert grid.width == 5
    assert grid.rows[0] == "111  "


def test_build_grid_rejects_invalid_char():
    with pytest.raises(CubError, match="invalid char"):
        build_grid(["111", "1X1", "111"], 0, 2)


def test_check_neighbours():
    grid = MapGrid(rows=["1111", "10 1", "1111"])
    assert not check_neighbours(grid, 1, 1)
    enclosed = MapGrid(rows=["111", "101", "111"])
    assert check_neighbours(enclosed, 1, 1)
    assert not check_neighbours(enclosed, 0, 0)


def test_validate_grid_records_player():
    grid = MapGrid(rows=["11111", "10001", "100W1", "11111"])
    result = validate_grid(grid)
    assert result.player_position == (2, 3)
    assert result.player_direction == "W"


def test_validate_grid_rejects_two_players():
    with pytest.raises(CubError):
        validate_grid(MapGrid(rows=["1111", "1NS1", "1111"]))


def test_validate_grid_requires_player():
    with pytest.raises(CubError):
        validate_grid(MapGrid(rows=["111", "101", "111"]))


def test_validate_grid_rejects_hole():
    with pytest.raises(CubError):
        validate_grid(MapGrid(rows=["1111", "1N 1", "1111"]))


def test_parse_map_valid():
    lines = ["", "  1111", "  10N1", "  1111", ""]
    grid = parse_map(lines, 0)
    assert grid.rows == ["  1111", "  10N1", "  1111"]
    assert grid.player_position == (1, 4)
    assert grid.player_direction == "N"


def test_parse_map_open_border():
    with pytest.raises(CubError):
        parse_map(["111", "0N1", "111"], 0)


def test_format_map_round_trip():
    grid = parse_map(["111", "1E1", "111"], 0)
    text = format_map(grid)
    assert text.endswith("\n")
    assert text.splitlines() == grid.rows
    assert text == "111\n1E1\n111\n"