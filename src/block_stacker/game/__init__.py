"""Game module for Block Stacker.

Exports the core engine and supporting classes:
- Shape / TetrominoType / rotate: immutable piece catalog with SRS kicks
- RandomizerBag: 7-bag piece sequence with lookahead
- PlayField: occupancy grid, collision and line clearing
- ScoreKeeper / ScoringRules: line-clear rewards
- StackingGame: live piece, gravity, lock delay and hold
- GameLoop: cooperative driver over a clock and an input source
"""

from .bag import RandomizerBag
from .config import GameSettings
from .core import (
    Action,
    ActivePiece,
    GameListener,
    GamePhase,
    GameSnapshot,
    HoldSlot,
    StackingGame,
)
from .grid import ClearResult, PlayField
from .loop import GameLoop, ScriptedInput
from .pieces import CATALOG, SHAPES, Rotation, Shape, TetrominoType, rotate, shape_for
from .rules import ScoreKeeper, ScoringRules

__all__ = [
    "RandomizerBag",
    "GameSettings",
    "Action",
    "ActivePiece",
    "GameListener",
    "GamePhase",
    "GameSnapshot",
    "HoldSlot",
    "StackingGame",
    "ClearResult",
    "PlayField",
    "GameLoop",
    "ScriptedInput",
    "CATALOG",
    "SHAPES",
    "Rotation",
    "Shape",
    "TetrominoType",
    "rotate",
    "shape_for",
    "ScoreKeeper",
    "ScoringRules",
]
