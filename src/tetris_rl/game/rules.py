from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        """Points for clearing `lines` rows in one lock at `level`.

        At most four rows can clear at once; anything outside 1..4, or a
        level below 1, scores nothing.
        """
        if level <= 0 or lines <= 0 or lines > len(self.line_clear_scores):
            return 0
        return self.line_clear_scores[lines - 1] * level

    def level_for_lines(self, lines: int) -> int:
        return max(0, lines) // self.lines_per_level + 1

    def drop_interval(self, level: int) -> int:
        """Milliseconds between automatic drops.

        1000 at level 1, 800 at level 2, then linear down to 500 at level 5,
        linear again down to 180 at level 9, and 100 from level 10 on.
        """
        if level <= 1:
            return 1000
        if level >= 10:
            return 100
        if level <= 5:
            return 800 - (level - 2) * 100
        return 500 - (level - 5) * 80


DEFAULT_RULES = ScoringRules()


def calculate_score(lines_cleared: int, level: int) -> int:
    return DEFAULT_RULES.score_for_lines(lines_cleared, level)


def get_drop_interval(level: int) -> int:
    return DEFAULT_RULES.drop_interval(level)


def level_for_lines(lines: int) -> int:
    return DEFAULT_RULES.level_for_lines(lines)
