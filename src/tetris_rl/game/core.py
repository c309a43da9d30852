from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Protocol, Union

import numpy as np

from .events import (
    EVENT_GAME_OVER,
    EVENT_GAME_RESET,
    EVENT_LEVEL_UP,
    EVENT_LINES_CLEARED,
    EVENT_PAUSE_TOGGLED,
    EVENT_PIECE_LOCKED,
    EVENT_PIECE_SPAWNED,
    EventBus,
)
from .grid import GameGrid
from .pieces import Tetromino, spawn
from .randomizer import PieceSource, RandomPieceSource
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


class GamePhase(Enum):
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Renderer(Protocol):
    def clear(self) -> Any: ...

    def draw_board(self, board: np.ndarray) -> Any: ...

    def draw_tetromino(self, tetromino: Tetromino) -> Any: ...


RENDERER_METHODS = ("clear", "draw_board", "draw_tetromino")


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_x: int = 4
    spawn_y: int = 0


def _is_number(value: Any) -> bool:
    # numpy scalars register as numbers.Real; bools, NaN and infinities do not count.
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)


class TetrisGame:
    """Tick-driven falling-block game.

    The host loop calls `update(now_ms)` and `render()` once per frame. The
    game owns the grid and the active piece; the renderer only ever sees a
    read-only board view and the immutable active `Tetromino`.
    """

    def __init__(
        self,
        renderer: Renderer,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        piece_source: Optional[PieceSource] = None,
        events: Optional[EventBus] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        missing = [m for m in RENDERER_METHODS if not callable(getattr(renderer, m, None))]
        if renderer is None or missing:
            raise TypeError(f"Renderer instance is required (missing: {', '.join(missing)})")
        self.renderer = renderer
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.piece_source: PieceSource = piece_source or RandomPieceSource(self.config.random_seed)
        self.events = events or EventBus()
        self.log = logger or logging.getLogger(__name__)
        self.grid = GameGrid(self.config.width, self.config.height)
        self._init_state()
        self.log.debug("Game initialized (%dx%d)", self.grid.width, self.grid.height)

    def _init_state(self) -> None:
        self.grid.reset()
        self.current: Optional[Tetromino] = None
        self.score = 0
        self.level = 1
        self.lines = 0
        self.game_over = False
        self.paused = False
        self.last_drop_time = 0.0
        self.drop_interval = self.rules.drop_interval(self.level)

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------
    @property
    def board(self) -> np.ndarray:
        return self.grid.read_only_view()

    @property
    def phase(self) -> GamePhase:
        if self.game_over:
            return GamePhase.GAME_OVER
        if self.paused:
            return GamePhase.PAUSED
        return GamePhase.RUNNING

    def get_game_state(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "lines": self.lines,
            "game_over": self.game_over,
            "paused": self.paused,
            "has_current_tetromino": self.current is not None,
            "drop_interval": self.drop_interval,
            "last_drop_time": self.last_drop_time,
        }

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current is not None and not self.game_over:
            for x, y in self.current.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -self.current.color_id
        return state

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------
    def set_game_over(self, is_game_over: bool = True) -> None:
        # Only reset() leaves the game-over phase.
        if not is_game_over:
            if self.game_over:
                self.log.warning("Ignoring attempt to clear game over without reset")
            return
        if self.game_over:
            return
        self.game_over = True
        self.log.info("Game over, final score %d", self.score)
        self.events.emit(EVENT_GAME_OVER, score=self.score)

    def toggle_pause(self) -> bool:
        if self.game_over:
            return self.paused
        self.paused = not self.paused
        self.log.info("Game paused: %s", self.paused)
        self.events.emit(EVENT_PAUSE_TOGGLED, paused=self.paused)
        return self.paused

    def reset(self) -> None:
        self.log.info("Resetting game state")
        self._init_state()
        self.events.emit(EVENT_GAME_RESET)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def add_score(self, points: Union[int, float], lines_cleared: int) -> bool:
        if not _is_number(points) or points < 0:
            self.log.warning("Invalid points value: %r", points)
            return False
        if not _is_number(lines_cleared) or lines_cleared < 0:
            self.log.warning("Invalid lines cleared value: %r", lines_cleared)
            return False

        self.score += points
        self.lines += lines_cleared
        new_level = self.rules.level_for_lines(int(self.lines))
        if new_level > self.level:
            self.level = new_level
            self.drop_interval = self.rules.drop_interval(self.level)
            self.log.info("Level up: %d (drop interval %dms)", self.level, self.drop_interval)
            self.events.emit(EVENT_LEVEL_UP, level=self.level, drop_interval=self.drop_interval)
        return True

    def process_line_clearing(self) -> int:
        rows = self.grid.full_lines()
        if not rows:
            return 0
        count = len(rows)
        self.grid.clear_and_compact(rows)
        points = self.rules.score_for_lines(count, self.level)
        self.add_score(points, count)
        self.log.debug("Lines cleared: %s, points %d", rows, points)
        self.events.emit(EVENT_LINES_CLEARED, rows=rows, count=count, points=points)
        return count

    # ------------------------------------------------------------------
    # Piece lifecycle
    # ------------------------------------------------------------------
    def spawn_new_tetromino(self) -> bool:
        if self.game_over:
            return False
        piece = spawn(self.piece_source.next_piece(), self.config.spawn_x, self.config.spawn_y)
        if self.grid.collides(piece):
            self.set_game_over(True)
            return False
        self.current = piece
        self.log.debug("Spawned %s", piece.kind.name)
        self.events.emit(EVENT_PIECE_SPAWNED, kind=piece.kind)
        return True

    def should_drop_tetromino(self, current_time: float) -> bool:
        # Advances the drop clock when it fires; call once per tick.
        if self.paused or self.game_over:
            return False
        if current_time - self.last_drop_time < self.drop_interval:
            return False
        self.last_drop_time = current_time
        return True

    def drop_current_tetromino(self) -> bool:
        """Move the active piece down one row, or lock it if blocked.

        Returns True if the piece moved.
        """
        if self.current is None or self.game_over:
            return False
        if not self.grid.collides(self.current, offset_y=1):
            self.current = self.current.moved(0, 1)
            return True
        self.fix_tetromino_to_board()
        return False

    def fix_tetromino_to_board(self) -> None:
        if self.current is None:
            return
        piece = self.current
        cells = self.grid.lock(piece)
        self.log.debug("Locked %s at (%d, %d)", piece.kind.name, piece.x, piece.y)
        self.events.emit(EVENT_PIECE_LOCKED, kind=piece.kind, cells=cells)
        self.process_line_clearing()
        self.current = None
        self.spawn_new_tetromino()

    # ------------------------------------------------------------------
    # Player moves
    # ------------------------------------------------------------------
    def _can_act(self) -> bool:
        return self.current is not None and not self.paused and not self.game_over

    def move(self, dx: int) -> bool:
        if not self._can_act():
            return False
        if self.grid.collides(self.current, offset_x=dx):
            return False
        self.current = self.current.moved(dx, 0)
        return True

    def move_left(self) -> bool:
        return self.move(-1)

    def move_right(self) -> bool:
        return self.move(1)

    def rotate(self, direction: Union[str, int] = "right") -> bool:
        if not self._can_act():
            return False
        if direction in ("right", 1):
            delta = 1
        elif direction in ("left", -1):
            delta = -1
        else:
            self.log.warning("Invalid rotation direction: %r", direction)
            return False
        rotated = self.current.rotated(delta)
        if self.grid.collides(rotated):
            return False
        self.current = rotated
        return True

    def soft_drop(self) -> bool:
        if not self._can_act():
            return False
        return self.drop_current_tetromino()

    def hard_drop(self) -> int:
        if not self._can_act():
            return 0
        dropped = 0
        while not self.grid.collides(self.current, offset_y=1):
            self.current = self.current.moved(0, 1)
            dropped += 1
        self.fix_tetromino_to_board()
        return dropped

    def step(self, action: Action) -> None:
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE_CW:
            self.rotate("right")
        elif action == Action.ROTATE_CCW:
            self.rotate("left")
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

    # ------------------------------------------------------------------
    # Host loop entry points
    # ------------------------------------------------------------------
    def _fix_invalid_state(self) -> None:
        if self.level < 1:
            self.level = 1
            self.log.warning("Level corrected to minimum value: 1")
        if self.score < 0:
            self.score = 0
            self.log.warning("Score corrected to minimum value: 0")
        if self.lines < 0:
            self.lines = 0
            self.log.warning("Lines corrected to minimum value: 0")

    def update(self, current_time: float) -> None:
        try:
            self._fix_invalid_state()
            if self.paused or self.game_over:
                return
            if self.current is None:
                self.spawn_new_tetromino()
                return
            if self.should_drop_tetromino(current_time):
                self.drop_current_tetromino()
        except Exception:
            self.log.exception("Error in game update, pausing")
            self.paused = True

    def render(self) -> None:
        if self.paused:
            return
        try:
            self.renderer.clear()
            self.renderer.draw_board(self.board)
            if self.current is not None:
                self.renderer.draw_tetromino(self.current)
        except Exception:
            self.log.exception("Error in game render")
