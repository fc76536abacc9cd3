from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

import numpy as np

from .bag import RandomizerBag
from .config import GameSettings
from .grid import ClearResult, PlayField
from .pieces import Cell, Cells, Shape, rotate as rotate_shape
from .rules import ScoreKeeper, ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    HARD_DROP = 4
    HOLD = 5
    QUIT = 6


class GamePhase(Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class ActivePiece:
    shape: Shape
    rotation: int
    col: int
    row: int
    cells: Cells

    @classmethod
    def spawned(cls, shape: Shape, col: int, row: int) -> "ActivePiece":
        return cls(shape=shape, rotation=0, col=col, row=row, cells=shape.layout(0))

    def moved(self, d_col: int, d_row: int) -> "ActivePiece":
        return replace(self, col=self.col + d_col, row=self.row + d_row)

    def absolute_cells(self) -> List[Cell]:
        return [(self.col + dx, self.row + dy) for dx, dy in self.cells]


@dataclass
class HoldSlot:
    shape: Optional[Shape] = None
    used: bool = False


class GameListener:
    """Change notifications for partial redraws. Override what you need."""

    def on_lines_cleared(self, count: int, rows: Tuple[int, ...]) -> None:
        pass

    def on_piece_locked(self, piece: ActivePiece) -> None:
        pass

    def on_game_over(self) -> None:
        pass

    def on_score_changed(self, score: int) -> None:
        pass

    def on_hold_changed(self, shape: Optional[Shape]) -> None:
        pass

    def on_preview_advanced(self, removed: Shape) -> None:
        pass


@dataclass(frozen=True)
class GameSnapshot:
    field: np.ndarray
    top_row: int
    piece: Optional[ActivePiece]
    ghost_row: Optional[int]
    held: Optional[Shape]
    hold_available: bool
    preview: Tuple[Shape, ...]
    score: int
    lines_cleared: int
    phase: GamePhase
    running: bool

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER


class StackingGame:
    """Owns one game session: field, bag, score, hold slot, live piece and timers.

    All state changes go through this object. Time is never read here; callers
    pass the current clock value into `update`, `handle` and `reset`.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        listener: Optional[GameListener] = None,
        now: float = 0.0,
    ) -> None:
        self.settings = settings or GameSettings()
        self.rng = rng or random.Random(self.settings.seed)
        self.listener = listener or GameListener()
        self.field = PlayField(
            self.settings.field_width,
            self.settings.field_height,
            self.settings.field_overflow_height,
        )
        self.bag = RandomizerBag(self.rng)
        self.scorer = ScoreKeeper(
            ScoringRules(line_clear_scores=self.settings.cleared_lines_score, level=self.settings.level)
        )
        self.hold_slot = HoldSlot()
        self.piece: Optional[ActivePiece] = None
        self.phase = GamePhase.SPAWNING
        self.running = True
        self.now = now
        self.last_update = now
        self.gravity_debt = 0.0
        self.lock_deadline: Optional[float] = None
        self.reset(now)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def reset(self, now: float = 0.0, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.field.reset()
        self.bag.reset()
        self.scorer.reset()
        self.hold_slot = HoldSlot()
        self.piece = None
        self.running = True
        self.now = now
        self.last_update = now
        self.phase = GamePhase.SPAWNING
        self.spawn_next()

    def request_quit(self) -> None:
        logger.info("quit requested")
        self.running = False

    @property
    def score(self) -> int:
        return self.scorer.score

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------
    @property
    def spawn_col(self) -> int:
        return math.ceil(self.settings.field_width / 2)

    def spawn_next(self, natural: bool = True) -> bool:
        shape = self.bag.produce()
        self.listener.on_preview_advanced(shape)
        return self.spawn(shape, natural=natural)

    def spawn(self, shape: Shape, natural: bool = True) -> bool:
        """Place `shape` at the spawn point; a blocked spawn ends the game."""
        if self.phase is GamePhase.GAME_OVER:
            return False
        self.phase = GamePhase.SPAWNING
        piece = ActivePiece.spawned(shape, self.spawn_col, 0)
        if self.field.collides(piece.cells, piece.col, piece.row):
            self.piece = None
            self.phase = GamePhase.GAME_OVER
            self.lock_deadline = None
            logger.info("spawn of %s blocked, game over with score %d", shape.name, self.score)
            self.listener.on_game_over()
            return False
        self.piece = piece
        self.phase = GamePhase.FALLING
        self.gravity_debt = 0.0
        self._restart_lock_delay()
        if natural:
            self.hold_slot.used = False
        logger.debug("spawned %s at (%d, %d)", shape.name, piece.col, piece.row)
        return True

    # ------------------------------------------------------------------
    # Piece operations
    # ------------------------------------------------------------------
    def _restart_lock_delay(self) -> None:
        self.lock_deadline = self.now + self.settings.lock_delay

    def _can_act(self) -> bool:
        return self.phase is GamePhase.FALLING and self.piece is not None

    def move(self, d_col: int, d_row: int) -> bool:
        if not self._can_act():
            return False
        candidate = self.piece.moved(d_col, d_row)
        if self.field.collides(candidate.cells, candidate.col, candidate.row):
            return False
        self.piece = candidate
        self._restart_lock_delay()
        return True

    def rotate(self, direction: int) -> bool:
        if not self._can_act():
            return False
        piece = self.piece
        rotation = rotate_shape(piece.shape, piece.rotation, direction)
        for dx, dy in rotation.kicks:
            col, row = piece.col + dx, piece.row + dy
            if not self.field.collides(rotation.cells, col, row):
                self.piece = replace(piece, rotation=rotation.state, col=col, row=row, cells=rotation.cells)
                self._restart_lock_delay()
                return True
        return False

    def is_grounded(self) -> bool:
        if self.piece is None:
            return False
        return self.field.collides(self.piece.cells, self.piece.col, self.piece.row + 1)

    def ghost_row(self) -> Optional[int]:
        if self.piece is None:
            return None
        return self.field.drop_row(self.piece.cells, self.piece.col, self.piece.row)

    def apply_gravity(self, units: int) -> int:
        """Drop the piece by whole tiles; return how many rows it actually fell."""
        if not self._can_act():
            return 0
        fallen = 0
        for _ in range(units):
            if not self.move(0, 1):
                # Resting: the deadline decides when to lock.
                if self.lock_deadline is None:
                    self._restart_lock_delay()
                break
            fallen += 1
        return fallen

    def hard_drop(self) -> int:
        if not self._can_act():
            return 0
        target = self.ghost_row()
        distance = target - self.piece.row
        self.piece = self.piece.moved(0, distance)
        self.lock()
        return distance

    def lock(self) -> ClearResult:
        """Commit the live piece to the field and spawn the next one."""
        piece = self.piece
        if piece is None:
            raise RuntimeError("no active piece to lock")
        highest, lowest = self.field.lock(piece.cells, piece.col, piece.row, int(piece.shape.kind))
        self.piece = None
        self.lock_deadline = None
        self.phase = GamePhase.SPAWNING
        result = self.field.clear_lines(highest, lowest)
        logger.debug("locked %s at (%d, %d), cleared %d", piece.shape.name, piece.col, piece.row, result.lines_cleared)
        self.listener.on_piece_locked(piece)
        if result.lines_cleared:
            self.listener.on_lines_cleared(result.lines_cleared, result.rows)
            delta = self.scorer.award(result.lines_cleared)
            if delta:
                self.listener.on_score_changed(self.score)
        self.spawn_next()
        return result

    def hold(self) -> bool:
        if not self._can_act() or self.hold_slot.used:
            return False
        previous = self.hold_slot.shape
        self.hold_slot.shape = self.piece.shape
        self.piece = None
        logger.debug("holding %s", self.hold_slot.shape.name)
        self.listener.on_hold_changed(self.hold_slot.shape)
        if previous is None:
            self.spawn_next(natural=False)
        else:
            self.spawn(previous, natural=False)
        self.hold_slot.used = True
        return True

    # ------------------------------------------------------------------
    # Loop integration
    # ------------------------------------------------------------------
    def handle(self, action: Action, now: Optional[float] = None) -> bool:
        if now is not None:
            self.now = now
        if action is Action.QUIT:
            self.request_quit()
            return True
        if action is Action.MOVE_LEFT:
            return self.move(-1, 0)
        if action is Action.MOVE_RIGHT:
            return self.move(1, 0)
        if action is Action.ROTATE_CW:
            return self.rotate(1)
        if action is Action.ROTATE_CCW:
            return self.rotate(-1)
        if action is Action.HARD_DROP:
            if not self._can_act():
                return False
            self.hard_drop()
            return True
        if action is Action.HOLD:
            return self.hold()
        raise ValueError(f"unknown action {action!r}")

    def update(self, now: float, soft_drop_held: bool = False) -> None:
        """Service gravity and lock delay for one loop iteration."""
        dt = max(0.0, now - self.last_update)
        self.last_update = now
        self.now = now
        if not self._can_act():
            return
        rate = self.settings.gravity_rate
        if soft_drop_held:
            rate *= self.settings.soft_drop_factor
        self.gravity_debt += rate * dt
        units = int(self.gravity_debt)
        if units:
            self.gravity_debt -= units
            self.apply_gravity(units)
        if self.lock_deadline is not None and now >= self.lock_deadline:
            if self.is_grounded():
                self.lock()
            else:
                self.lock_deadline = None

    def snapshot(self) -> GameSnapshot:
        preview = tuple(self.bag.upcoming(self.settings.preview_length))
        return GameSnapshot(
            field=self.field.clone_state(),
            top_row=self.field.top_row,
            piece=self.piece,
            ghost_row=self.ghost_row(),
            held=self.hold_slot.shape,
            hold_available=not self.hold_slot.used and self._can_act(),
            preview=preview,
            score=self.score,
            lines_cleared=self.scorer.lines_cleared_total,
            phase=self.phase,
            running=self.running,
        )
