from __future__ import annotations

from typing import Iterable, List, Tuple

from tetris_rl.game import GameConfig, SequencePieceSource, TetrisGame


class RecordingRenderer:
    """Renderer double that records every call it receives."""

    def __init__(self, fail: bool = False):
        self.calls: List[Tuple[str, object]] = []
        self.fail = fail

    def clear(self):
        self.calls.append(("clear", None))
        if self.fail:
            raise RuntimeError("draw target lost")

    def draw_board(self, board):
        self.calls.append(("draw_board", board))

    def draw_tetromino(self, tetromino):
        self.calls.append(("draw_tetromino", tetromino))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


def make_game(pieces: Iterable[str] = ("T",), **kwargs) -> TetrisGame:
    renderer = kwargs.pop("renderer", None) or RecordingRenderer()
    config = kwargs.pop("config", None) or GameConfig()
    return TetrisGame(renderer, config=config, piece_source=SequencePieceSource(pieces), **kwargs)
