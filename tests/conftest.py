from __future__ import annotations

import random
from typing import List, Optional, Tuple

import pytest

from block_stacker.game import GameListener, GameSettings, StackingGame


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class RecordingListener(GameListener):
    def __init__(self) -> None:
        self.events: List[Tuple] = []

    def on_lines_cleared(self, count, rows):
        self.events.append(("lines", count, rows))

    def on_piece_locked(self, piece):
        self.events.append(("locked", piece))

    def on_game_over(self):
        self.events.append(("game_over",))

    def on_score_changed(self, score):
        self.events.append(("score", score))

    def on_hold_changed(self, shape):
        self.events.append(("hold", shape))

    def on_preview_advanced(self, removed):
        self.events.append(("preview", removed))

    def named(self, name: str) -> List[Tuple]:
        return [e for e in self.events if e[0] == name]


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def make_game(listener):
    def factory(settings: Optional[GameSettings] = None, seed: int = 1234) -> StackingGame:
        return StackingGame(settings or GameSettings(), rng=random.Random(seed), listener=listener, now=0.0)

    return factory
