from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable, Iterable, List, Optional, Protocol

from .core import Action, GameSnapshot, StackingGame

logger = logging.getLogger(__name__)


class InputSource(Protocol):
    def poll(self) -> Iterable[Action]:
        """Return pending events without blocking."""

    def soft_drop_held(self) -> bool:
        """Level-triggered soft drop state, sampled once per iteration."""


class ScriptedInput:
    """Queue-backed input source for bots, replays and tests."""

    def __init__(self, events: Iterable[Action] = ()) -> None:
        self.events = deque(events)
        self.soft_drop = False

    def push(self, *events: Action) -> None:
        self.events.extend(events)

    def poll(self) -> List[Action]:
        pending = list(self.events)
        self.events.clear()
        return pending

    def soft_drop_held(self) -> bool:
        return self.soft_drop


class GameLoop:
    """Cooperative single-threaded driver.

    Every iteration samples the clock once, drains input without waiting and
    then services gravity and lock delay, so timers never starve on input.
    """

    def __init__(
        self,
        game: StackingGame,
        input_source: InputSource,
        clock: Callable[[], float] = time.monotonic,
        on_frame: Optional[Callable[[GameSnapshot], None]] = None,
        frame_interval: float = 0.0,
    ) -> None:
        self.game = game
        self.input_source = input_source
        self.clock = clock
        self.on_frame = on_frame
        self.frame_interval = frame_interval
        self.iterations = 0

    def start(self) -> None:
        self.game.reset(now=self.clock())
        logger.info("game loop started")

    def step(self) -> bool:
        """Run one iteration; return False once the loop should stop."""
        now = self.clock()
        for action in self.input_source.poll():
            self.game.handle(action, now)
            if not self.game.running:
                break
        if not self.game.running:
            return False
        self.game.update(now, self.input_source.soft_drop_held())
        self.iterations += 1
        if self.on_frame is not None:
            self.on_frame(self.game.snapshot())
        return True

    def run(self, max_iterations: Optional[int] = None) -> int:
        self.start()
        while max_iterations is None or self.iterations < max_iterations:
            if not self.step():
                break
            if self.frame_interval > 0:
                time.sleep(self.frame_interval)
        logger.info("game loop stopped after %d iterations, score %d", self.iterations, self.game.score)
        return self.game.score
