from __future__ import annotations

from collections import Counter

import gymnasium as gym

from tsumeball.envs.core.actions import ActionType
from tsumeball.envs.core.phases import Outcome
from tsumeball.envs.core.shooting import ShotType


class EpisodeStatsWrapper(gym.Wrapper):
    """Collect per-episode stats and expose them via info on the final step.

    Exposed keys (under ``info["episode_stats"]``):
      passes, shot_attempts, blocked_shots, made_3pt, made_layup, made_dunk,
      illegal_actions, outcome, points, steps
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        self._reset_stats()

    def _reset_stats(self):
        self._passes = 0
        self._shot_attempts = 0
        self._blocked_shots = 0
        self._made = Counter()
        self._illegal = 0
        self._points = 0.0
        self._steps = 0

    def reset(self, **kwargs):
        self._reset_stats()
        return self.env.reset(**kwargs)

    def step(self, action):  # type: ignore[override]
        turn_before = self.env.unwrapped.state.turn
        obs, reward, terminated, truncated, info = self.env.step(action)
        self._steps += 1
        self._points += float(reward)

        if info.get("last_error"):
            self._illegal += 1
        if info.get("turn", 0) > turn_before:
            self._passes += 1

        result = info.get("last_result")
        if ActionType(int(action)) == ActionType.SHOOT and not info.get("last_error"):
            self._shot_attempts += 1
            if result is not None and not result["success"]:
                self._blocked_shots += 1
        if info.get("outcome") == Outcome.SCORED.value and result is not None:
            self._made[result["type"]] += 1

        if terminated or truncated:
            info = dict(info)
            info["episode_stats"] = {
                "passes": self._passes,
                "shot_attempts": self._shot_attempts,
                "blocked_shots": self._blocked_shots,
                "made_3pt": self._made[ShotType.THREE_POINTER.value],
                "made_layup": self._made[ShotType.LAYUP.value],
                "made_dunk": self._made[ShotType.SLAM_DUNK.value],
                "illegal_actions": self._illegal,
                "outcome": info.get("outcome"),
                "points": self._points,
                "steps": self._steps,
            }
        return obs, reward, terminated, truncated, info
