"""Gymnasium environments for Block Stacker."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 10x20 stacking environment
register(
    id="BlockStacker-10x20-v0",
    entry_point="block_stacker.env.stacking_env:StackingEnv",
)

__all__ = ["BlockStacker-10x20-v0"]
