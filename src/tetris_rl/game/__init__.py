"""Game module for Tetris RL.

Exports the core game engine and supporting classes:
- Tetromino / TetrominoType: piece catalog with table-driven rotations
- GameGrid and the board functions: collision, full lines, clearing, compaction
- ScoringRules: line-clear points, levels and the drop-interval curve
- TetrisGame: tick-driven state machine tying them together
"""

from .pieces import ROTATIONS, Tetromino, TetrominoType, get_shape, spawn
from .grid import (
    GameGrid,
    check_collision,
    check_full_lines,
    clear_lines,
    create_empty_board,
    drop_lines_down,
)
from .rules import ScoringRules, calculate_score, get_drop_interval
from .randomizer import PieceSource, RandomPieceSource, SequencePieceSource
from .events import EventBus
from .core import Action, GameConfig, GamePhase, Renderer, TetrisGame

__all__ = [
    "ROTATIONS",
    "Tetromino",
    "TetrominoType",
    "get_shape",
    "spawn",
    "GameGrid",
    "check_collision",
    "check_full_lines",
    "clear_lines",
    "create_empty_board",
    "drop_lines_down",
    "ScoringRules",
    "calculate_score",
    "get_drop_interval",
    "PieceSource",
    "RandomPieceSource",
    "SequencePieceSource",
    "EventBus",
    "Action",
    "GameConfig",
    "GamePhase",
    "Renderer",
    "TetrisGame",
]
