from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_stacker.game import Action, GameSettings, StackingGame
from block_stacker.game.pieces import COLORS, TetrominoType


class EnvAction(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE_CW = 3
    ROTATE_CCW = 4
    SOFT_DROP = 5
    HARD_DROP = 6
    HOLD = 7


_GAME_ACTIONS: Dict[EnvAction, Action] = {
    EnvAction.LEFT: Action.MOVE_LEFT,
    EnvAction.RIGHT: Action.MOVE_RIGHT,
    EnvAction.ROTATE_CW: Action.ROTATE_CW,
    EnvAction.ROTATE_CCW: Action.ROTATE_CCW,
    EnvAction.HARD_DROP: Action.HARD_DROP,
    EnvAction.HOLD: Action.HOLD,
}


class StackingEnv(gym.Env):
    """Falling-block game driven by a simulated clock.

    Every step applies at most one input event and then advances the clock by
    `frame_time` seconds, so gravity and lock delay behave exactly as they do
    under a real-time loop. SOFT_DROP holds soft drop for that frame only.
    Reward is the change in game score.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, settings: Optional[GameSettings] = None, render_mode: Optional[str] = None,
                 frame_time: float = 1.0 / 30.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = StackingGame(settings)
        self.render_mode = render_mode
        self.frame_time = float(frame_time)
        self.max_episode_steps = int(max_episode_steps)
        self.clock = 0.0
        self._steps = 0

        height = self.game.settings.field_height
        width = self.game.settings.field_width
        preview = self.game.settings.preview_length
        n_kinds = len(TetrominoType)

        # Visible rows only; the falling piece is overlaid as negative ids
        self.observation_space = spaces.Dict(
            {
                "field": spaces.Box(low=-n_kinds, high=n_kinds, shape=(height, width), dtype=np.int8),
                "preview": spaces.Box(low=0, high=n_kinds, shape=(preview,), dtype=np.int8),
                "hold": spaces.Discrete(n_kinds + 1),
            }
        )
        self.action_space = spaces.Discrete(len(EnvAction))

    def _get_obs(self) -> Dict[str, Any]:
        game = self.game
        field = game.field.visible().astype(np.int8)
        if game.piece is not None:
            value = -int(game.piece.shape.kind)
            for col, row in game.piece.absolute_cells():
                if 1 <= row <= game.field.height:
                    field[row - 1, col - 1] = value
        preview = np.array(
            [int(shape.kind) for shape in game.bag.upcoming(game.settings.preview_length)],
            dtype=np.int8,
        )
        held = game.hold_slot.shape
        return {
            "field": field,
            "preview": preview,
            "hold": int(held.kind) if held is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared_total": self.game.scorer.lines_cleared_total,
            "steps": self._steps,
            "clock": self.clock,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.clock = 0.0
        self._steps = 0
        self.game.reset(now=self.clock, seed=int(self.np_random.integers(0, 2**31 - 1)))
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = EnvAction(int(action))
        score_before = self.game.score

        game_action = _GAME_ACTIONS.get(action)
        if game_action is not None:
            self.game.handle(game_action, self.clock)
        self.clock += self.frame_time
        self.game.update(self.clock, soft_drop_held=action is EnvAction.SOFT_DROP)

        self._steps += 1
        reward = float(self.game.score - score_before)
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps and not terminated
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        field = self._get_obs()["field"]
        cell = 12
        h, w = field.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(field[y, x])
                color = COLORS[TetrominoType(abs(v))] if v else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
