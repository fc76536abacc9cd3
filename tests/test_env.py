import gymnasium as gym
import numpy as np

import block_stacker.env  # noqa: F401
from block_stacker.env.stacking_env import EnvAction, StackingEnv


def test_reset_observation_matches_space():
    env = StackingEnv()
    obs, info = env.reset(seed=0)
    assert env.observation_space.contains(obs)
    assert obs["field"].shape == (20, 10)
    assert obs["preview"].shape == (6,)
    assert obs["hold"] == 0
    assert info["score"] == 0


def test_same_seed_same_preview():
    a, b = StackingEnv(), StackingEnv()
    obs_a, _ = a.reset(seed=123)
    obs_b, _ = b.reset(seed=123)
    assert np.array_equal(obs_a["preview"], obs_b["preview"])


def test_hold_action_fills_hold_slot():
    env = StackingEnv()
    env.reset(seed=1)
    obs, reward, terminated, truncated, info = env.step(EnvAction.HOLD)
    assert obs["hold"] != 0
    assert reward == 0.0
    assert not terminated and not truncated


def test_repeated_hard_drops_end_the_episode():
    env = StackingEnv()
    env.reset(seed=2)
    terminated = False
    for _ in range(300):
        _, reward, terminated, truncated, info = env.step(EnvAction.HARD_DROP)
        assert isinstance(reward, float)
        if terminated:
            break
    assert terminated


def test_truncation_after_max_steps():
    env = StackingEnv(max_episode_steps=3)
    env.reset(seed=3)
    results = [env.step(EnvAction.NONE) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_registered_env_and_render():
    env = gym.make("BlockStacker-10x20-v0", render_mode="rgb_array")
    env.reset(seed=4)
    env.step(EnvAction.SOFT_DROP)
    frame = env.render()
    assert frame.shape == (240, 120, 3)
    env.close()
