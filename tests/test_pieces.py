import logging

import numpy as np
import pytest

from tetris_rl.game.grid import check_collision, create_empty_board
from tetris_rl.game.pieces import (
    COLORS,
    ROTATIONS,
    Tetromino,
    TetrominoType,
    get_shape,
    resolve_type,
    spawn,
)


def test_every_type_has_four_rotations_of_four_cells():
    assert set(ROTATIONS) == set(TetrominoType)
    for kind, shapes in ROTATIONS.items():
        assert len(shapes) == 4, kind
        for shape in shapes:
            assert int(np.count_nonzero(shape)) == 4, kind


def test_rotation_is_a_table_lookup():
    assert get_shape("T", 5) is ROTATIONS[TetrominoType.T][1]
    assert get_shape(TetrominoType.S, -1) is ROTATIONS[TetrominoType.S][3]
    np.testing.assert_array_equal(
        get_shape("J", 1), np.array([[0, 1, 1], [0, 1, 0], [0, 1, 0]])
    )


def test_o_piece_is_rotation_invariant():
    first = ROTATIONS[TetrominoType.O][0]
    for shape in ROTATIONS[TetrominoType.O]:
        np.testing.assert_array_equal(shape, first)


def test_catalog_shapes_are_read_only():
    with pytest.raises(ValueError):
        ROTATIONS[TetrominoType.L][0][0, 0] = 1


def test_unknown_type_falls_back_to_i_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="tetris_rl.game.pieces"):
        assert resolve_type("Q") is TetrominoType.I
        assert resolve_type(42) is TetrominoType.I
    assert "Unknown tetromino type" in caplog.text
    assert spawn(None).kind is TetrominoType.I


def test_resolve_type_accepts_names_and_color_ids():
    assert resolve_type("z") is TetrominoType.Z
    assert resolve_type(7) is TetrominoType.L


def test_spawn_position_and_colors():
    piece = spawn("T")
    assert (piece.x, piece.y, piece.rotation) == (4, 0, 0)
    assert piece.color == COLORS[TetrominoType.T]
    assert piece.color_id == 3


def test_spawned_i_fits_empty_board():
    piece = spawn("I")
    assert check_collision(create_empty_board(), piece.shape, piece.x, piece.y) is False


def test_moves_and_rotations_return_new_pieces():
    piece = spawn("S")
    moved = piece.moved(-1, 2)
    assert (moved.x, moved.y) == (3, 2)
    assert (piece.x, piece.y) == (4, 0)
    assert piece.rotated(-1).rotation == 3
    assert piece.rotated(5).shape is ROTATIONS[TetrominoType.S][1]


def test_cells_are_absolute_board_coordinates():
    piece = Tetromino(TetrominoType.O, 0, 2, 3)
    assert sorted(piece.cells()) == [(2, 3), (2, 4), (3, 3), (3, 4)]
