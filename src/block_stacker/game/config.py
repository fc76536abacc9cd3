from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


MAX_PREVIEW_LENGTH = 7


@dataclass
class GameSettings:
    """Gameplay settings.

    `gravity_rate` is in tiles per second and is multiplied by
    `soft_drop_factor` while soft drop is held. `lock_delay` is in seconds.
    Only one bag of lookahead is guaranteed, so `preview_length` is clamped
    to 7.
    """

    field_width: int = 10
    field_height: int = 20
    field_overflow_height: int = 20
    gravity_rate: float = 1.0
    lock_delay: float = 0.5
    soft_drop_factor: float = 10.0
    preview_length: int = 6
    level: int = 1
    cleared_lines_score: tuple[int, int, int, int] = (100, 300, 500, 800)
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.field_width < 4 or self.field_height < 4:
            raise ValueError("field must be at least 4x4 to fit every tetromino")
        if self.field_overflow_height < 2:
            raise ValueError("overflow buffer must hold at least 2 rows for spawning")
        if self.gravity_rate < 0 or self.soft_drop_factor <= 0:
            raise ValueError("gravity_rate must be >= 0 and soft_drop_factor > 0")
        if self.lock_delay < 0:
            raise ValueError("lock_delay must be >= 0")
        if self.level < 1:
            raise ValueError("level must be >= 1")
        if len(self.cleared_lines_score) != 4:
            raise ValueError("cleared_lines_score needs one entry per 1..4 lines")
        self.cleared_lines_score = tuple(int(v) for v in self.cleared_lines_score)
        self.preview_length = max(0, min(int(self.preview_length), MAX_PREVIEW_LENGTH))
