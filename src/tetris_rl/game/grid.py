from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .pieces import Tetromino


Coordinate = Tuple[int, int]

BOARD_WIDTH = 10
BOARD_HEIGHT = 20


def create_empty_board(width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> np.ndarray:
    return np.zeros((int(height), int(width)), dtype=np.int8)


def check_collision(
    board: np.ndarray,
    shape: Optional[Sequence],
    x: int,
    y: int,
    offset_x: int = 0,
    offset_y: int = 0,
) -> bool:
    """Return True if `shape` anchored at (x + offset_x, y + offset_y) collides.

    Walls and the floor collide. Cells above row 0 are never tested against
    board contents, so a piece may straddle the top edge. An empty or missing
    shape never collides. Neither argument is modified.
    """
    if shape is None:
        return False
    cells = np.asarray(shape)
    if cells.size == 0:
        return False
    height, width = board.shape
    for row, col in zip(*np.nonzero(cells)):
        bx = x + int(col) + offset_x
        by = y + int(row) + offset_y
        if bx < 0 or bx >= width or by >= height:
            return True
        if by >= 0 and board[by, bx] != 0:
            return True
    return False


def check_full_lines(board: np.ndarray) -> List[int]:
    """Row indices (ascending) in which every cell is filled."""
    return [int(r) for r in np.where(np.all(board != 0, axis=1))[0]]


def _valid_rows(board: np.ndarray, rows: Iterable[int]) -> List[int]:
    height = board.shape[0]
    return sorted({int(r) for r in rows if 0 <= int(r) < height})


def clear_lines(board: np.ndarray, rows: Iterable[int]) -> None:
    """Zero every listed row in place. Other rows are not moved."""
    valid = _valid_rows(board, rows)
    if valid:
        board[valid, :] = 0


def drop_lines_down(board: np.ndarray, cleared_rows: Iterable[int]) -> None:
    """Compact the board in place after `clear_lines`.

    Rows not listed keep their relative order and settle at the bottom;
    the vacated rows at the top become empty.
    """
    cleared = set(_valid_rows(board, cleared_rows))
    if not cleared:
        return
    height = board.shape[0]
    kept = [r for r in range(height) if r not in cleared]
    compacted = np.zeros_like(board)
    if kept:
        compacted[height - len(kept):] = board[kept]
    board[:] = compacted


class GameGrid:
    """Fixed-size board owned by the game.

    The grid uses 0 for empty cells and 1..7 for locked cells; the value is
    the color id of the tetromino type that locked there.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = create_empty_board(self.width, self.height)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, piece: Tetromino, offset_x: int = 0, offset_y: int = 0) -> bool:
        return check_collision(self.grid, piece.shape, piece.x, piece.y, offset_x, offset_y)

    def lock(self, piece: Tetromino) -> List[Coordinate]:
        """Stamp the piece's color id into the grid; cells off the board are skipped."""
        stamped: List[Coordinate] = []
        for x, y in piece.cells():
            if self.is_inside(x, y):
                self.grid[y, x] = piece.color_id
                stamped.append((x, y))
        return stamped

    def full_lines(self) -> List[int]:
        return check_full_lines(self.grid)

    def clear_and_compact(self, rows: Sequence[int]) -> None:
        clear_lines(self.grid, rows)
        drop_lines_down(self.grid, rows)

    def read_only_view(self) -> np.ndarray:
        view = self.grid.view()
        view.flags.writeable = False
        return view

    def get_max_height(self) -> int:
        # y=0 is top; find first non-empty from top
        non_empty_rows = np.where(np.any(self.grid != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        top_index = int(non_empty_rows[0])
        return self.height - top_index

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            column = self.grid[:, x]
            seen_block = False
            for cell in column:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
