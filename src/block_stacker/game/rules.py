from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    level: int = 1

    def score_for_lines(self, lines: int, level: int | None = None) -> int:
        if lines == 0:
            return 0
        if not 1 <= lines <= 4:
            raise ValueError(f"a single lock clears 0..4 lines, got {lines}")
        if level is None:
            level = self.level
        return self.line_clear_scores[lines - 1] * level


class ScoreKeeper:
    """Running score for one game."""

    def __init__(self, rules: ScoringRules | None = None) -> None:
        self.rules = rules or ScoringRules()
        self.score = 0
        self.lines_cleared_total = 0

    def reset(self) -> None:
        self.score = 0
        self.lines_cleared_total = 0

    def award(self, lines: int, level: int | None = None) -> int:
        delta = self.rules.score_for_lines(lines, level)
        self.score += delta
        self.lines_cleared_total += lines
        return delta
