from __future__ import annotations

from typing import Tuple

import numpy as np
import pygame

from tetris_rl.game.pieces import COLORS, Tetromino, TetrominoType

BACKGROUND = (10, 10, 14)
EMPTY_CELL = (30, 30, 36)
UNKNOWN_CELL = (200, 200, 200)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    # Negative values mark the falling piece in observations.
    try:
        return COLORS[TetrominoType(abs(v))]
    except ValueError:
        return UNKNOWN_CELL


class PygameRenderer:
    """Draws the board and the active piece onto a pygame Surface."""

    def __init__(self, surface: pygame.Surface, cell_size: int = 30, margin: int = 20) -> None:
        self.surface = surface
        self.cell_size = cell_size
        self.margin = margin

    def cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def clear(self) -> None:
        self.surface.fill(BACKGROUND)

    def draw_board(self, board: np.ndarray) -> None:
        h, w = board.shape
        frame = pygame.Rect(self.margin, self.margin, w * self.cell_size, h * self.cell_size)
        pygame.draw.rect(self.surface, EMPTY_CELL, frame)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v:
                    pygame.draw.rect(self.surface, _color_for_value(v), self.cell_rect(x, y))

    def draw_tetromino(self, tetromino: Tetromino) -> None:
        for x, y in tetromino.cells():
            # Rows above the board are not visible.
            if y >= 0:
                pygame.draw.rect(self.surface, tetromino.color, self.cell_rect(x, y))


class ArrayRenderer:
    """Renders into an RGB numpy image, one `cell` x `cell` block per board cell."""

    def __init__(self, width: int, height: int, cell: int = 12) -> None:
        self.width = width
        self.height = height
        self.cell = cell
        self.image = np.zeros((height * cell, width * cell, 3), dtype=np.uint8)

    def _fill(self, x: int, y: int, color: Tuple[int, int, int]) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            c = self.cell
            self.image[y * c : (y + 1) * c, x * c : (x + 1) * c, :] = color

    def clear(self) -> None:
        self.image[:, :, :] = EMPTY_CELL

    def draw_board(self, board: np.ndarray) -> None:
        h, w = board.shape
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v:
                    self._fill(x, y, _color_for_value(v))

    def draw_tetromino(self, tetromino: Tetromino) -> None:
        for x, y in tetromino.cells():
            self._fill(x, y, tetromino.color)

    def snapshot(self) -> np.ndarray:
        return self.image.copy()
