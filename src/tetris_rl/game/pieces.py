from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Tuple, Union

import numpy as np


logger = logging.getLogger(__name__)


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray

SPAWN_X = 4
SPAWN_Y = 0


def _table(*rotations: List[List[int]]) -> Tuple[Shape, ...]:
    shapes = []
    for rows in rotations:
        arr = np.array(rows, dtype=np.int8)
        arr.flags.writeable = False
        shapes.append(arr)
    return tuple(shapes)


# Rotation states are looked up, never computed. Index = rotation % 4 (clockwise).
ROTATIONS: Dict[TetrominoType, Tuple[Shape, ...]] = {
    TetrominoType.I: _table(
        [[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]],
        [[0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0], [0, 0, 1, 0]],
        [[0, 0, 0, 0], [0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0]],
        [[0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0], [0, 1, 0, 0]],
    ),
    TetrominoType.O: _table(
        [[1, 1], [1, 1]],
        [[1, 1], [1, 1]],
        [[1, 1], [1, 1]],
        [[1, 1], [1, 1]],
    ),
    TetrominoType.T: _table(
        [[0, 1, 0], [1, 1, 1], [0, 0, 0]],
        [[0, 1, 0], [0, 1, 1], [0, 1, 0]],
        [[0, 0, 0], [1, 1, 1], [0, 1, 0]],
        [[0, 1, 0], [1, 1, 0], [0, 1, 0]],
    ),
    TetrominoType.S: _table(
        [[0, 1, 1], [1, 1, 0], [0, 0, 0]],
        [[0, 1, 0], [0, 1, 1], [0, 0, 1]],
        [[0, 0, 0], [0, 1, 1], [1, 1, 0]],
        [[1, 0, 0], [1, 1, 0], [0, 1, 0]],
    ),
    TetrominoType.Z: _table(
        [[1, 1, 0], [0, 1, 1], [0, 0, 0]],
        [[0, 0, 1], [0, 1, 1], [0, 1, 0]],
        [[0, 0, 0], [1, 1, 0], [0, 1, 1]],
        [[0, 1, 0], [1, 1, 0], [1, 0, 0]],
    ),
    TetrominoType.J: _table(
        [[1, 0, 0], [1, 1, 1], [0, 0, 0]],
        [[0, 1, 1], [0, 1, 0], [0, 1, 0]],
        [[0, 0, 0], [1, 1, 1], [0, 0, 1]],
        [[0, 1, 0], [0, 1, 0], [1, 1, 0]],
    ),
    TetrominoType.L: _table(
        [[0, 0, 1], [1, 1, 1], [0, 0, 0]],
        [[0, 1, 0], [0, 1, 0], [0, 1, 1]],
        [[0, 0, 0], [1, 1, 1], [1, 0, 0]],
        [[1, 1, 0], [0, 1, 0], [0, 1, 0]],
    ),
}

COLORS: Dict[TetrominoType, Tuple[int, int, int]] = {
    TetrominoType.I: (0, 240, 240),   # cyan
    TetrominoType.O: (240, 240, 0),   # yellow
    TetrominoType.T: (160, 0, 240),   # purple
    TetrominoType.S: (0, 240, 0),     # green
    TetrominoType.Z: (240, 0, 0),     # red
    TetrominoType.J: (0, 0, 240),     # blue
    TetrominoType.L: (240, 160, 0),   # orange
}

DEFAULT_TYPE = TetrominoType.I

KindLike = Union[TetrominoType, str, int]


def resolve_type(kind: KindLike) -> TetrominoType:
    """Map a type name, color id or enum member to a `TetrominoType`.

    Unknown inputs fall back to `DEFAULT_TYPE` with a warning instead of
    raising, so a bad request still yields valid catalog geometry.
    """
    if isinstance(kind, TetrominoType):
        return kind
    if isinstance(kind, str):
        try:
            return TetrominoType[kind.strip().upper()]
        except KeyError:
            pass
    elif isinstance(kind, int) and not isinstance(kind, bool):
        try:
            return TetrominoType(kind)
        except ValueError:
            pass
    logger.warning("Unknown tetromino type %r, using %s", kind, DEFAULT_TYPE.name)
    return DEFAULT_TYPE


def get_shape(kind: KindLike, rotation: int = 0) -> Shape:
    return ROTATIONS[resolve_type(kind)][rotation % 4]


@dataclass(frozen=True)
class Tetromino:
    kind: TetrominoType
    rotation: int = 0  # 0..3
    x: int = SPAWN_X
    y: int = SPAWN_Y

    @property
    def shape(self) -> Shape:
        return ROTATIONS[self.kind][self.rotation % 4]

    @property
    def color(self) -> Tuple[int, int, int]:
        return COLORS[self.kind]

    @property
    def color_id(self) -> int:
        return int(self.kind)

    def moved(self, dx: int, dy: int) -> "Tetromino":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, delta: int) -> "Tetromino":
        return replace(self, rotation=(self.rotation + delta) % 4)

    def cells(self) -> List[Tuple[int, int]]:
        """Absolute (x, y) board coordinates of the filled cells."""
        s = self.shape
        h, w = s.shape
        cells: List[Tuple[int, int]] = []
        for dy in range(h):
            for dx in range(w):
                if s[dy, dx]:
                    cells.append((self.x + dx, self.y + dy))
        return cells


def spawn(kind: KindLike, x: int = SPAWN_X, y: int = SPAWN_Y) -> Tetromino:
    return Tetromino(kind=resolve_type(kind), rotation=0, x=x, y=y)
