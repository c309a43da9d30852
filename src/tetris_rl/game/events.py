from __future__ import annotations

from typing import Dict

from blinker import Signal


class EventBus:
    """Named game events backed by blinker signals."""

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn) -> None:
        sig = self._signals.setdefault(name, Signal(name))
        # Strong reference so bound methods of short-lived owners still fire.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload) -> None:
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


EVENT_PIECE_SPAWNED = "piece_spawned"    # payload: kind=TetrominoType
EVENT_PIECE_LOCKED = "piece_locked"      # payload: kind=TetrominoType, cells=[(x,y),...]
EVENT_LINES_CLEARED = "lines_cleared"    # payload: rows=[int,...], count=int, points=int
EVENT_LEVEL_UP = "level_up"              # payload: level=int, drop_interval=int
EVENT_GAME_OVER = "game_over"            # payload: score=int
EVENT_PAUSE_TOGGLED = "pause_toggled"    # payload: paused=bool
EVENT_GAME_RESET = "game_reset"          # payload: none
