"""Piece sources for spawning.

The game asks a source for the next piece type instead of calling the
`random` module directly, so tests and replays can feed a fixed sequence.
"""

from __future__ import annotations

import random
from typing import Iterable, List, Optional, Protocol

from .pieces import KindLike, TetrominoType, resolve_type


class PieceSource(Protocol):
    def next_piece(self) -> TetrominoType: ...

    def seed(self, seed: Optional[int]) -> None: ...


class RandomPieceSource:
    """Uniform choice over the seven piece types."""

    PIECES = list(TetrominoType)

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    def next_piece(self) -> TetrominoType:
        return self.rng.choice(self.PIECES)


class SequencePieceSource:
    """Cycles through a fixed sequence of piece types."""

    def __init__(self, sequence: Iterable[KindLike]) -> None:
        self.sequence: List[TetrominoType] = [resolve_type(k) for k in sequence]
        if not self.sequence:
            raise ValueError("SequencePieceSource needs at least one piece type")
        self.index = 0

    def seed(self, seed: Optional[int]) -> None:
        self.index = 0

    def next_piece(self) -> TetrominoType:
        kind = self.sequence[self.index % len(self.sequence)]
        self.index += 1
        return kind
