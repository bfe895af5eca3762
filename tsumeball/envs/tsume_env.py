# tsume_env.py
"""
Half-court "tsume" basketball puzzle environment.

Key Features:
- Fixed 9x9 square grid, 5 offense vs 5 scripted defenders
- Phase-driven turns: support moves, ball-carrier move, shoot or pass
- Reactive defense with screens, denial and (on long streaks) rim/arc denial
- One possession per episode; score and streak carry over after a make
- Legal action masks for every phase
"""

from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tsumeball.envs.core import phases, rendering
from tsumeball.envs.core.actions import (
    MOVE_OFFSETS,
    PASS_RECEIVERS,
    ActionType,
    acting_unit,
    build_action_masks,
)
from tsumeball.envs.core.court import DEFAULT_COURT, CourtConfig
from tsumeball.envs.core.defense import screened_defender_ids
from tsumeball.envs.core.phases import GameMode, Outcome, Phase, PossessionState

# Observation planes, in order.
OBS_PLANES = ("offense", "defense", "ball", "arc", "layup", "basket", "screened")


class TsumeBasketballEnv(gym.Env):
    """Single-possession puzzle environment driven by the phase state machine."""

    metadata = {"render_modes": ["human", "rgb_array"]}

    def __init__(
        self,
        mode: str = "streak-attack",
        seed: Optional[int] = None,
        render_mode: Optional[str] = None,
        court: CourtConfig = DEFAULT_COURT,
        # Deterministic override (optional): a fixed unit layout for every reset
        initial_units=None,
        # Carry score/streak into the next episode after a make
        carry_streak: bool = True,
        # If True, raise a clear error when an illegal action is passed to step()
        raise_on_illegal_action: bool = False,
        illegal_action_penalty: float = 0.0,
    ):
        super().__init__()

        self.mode = GameMode(mode)
        self.render_mode = render_mode
        self.court = court
        self._initial_units_override = tuple(initial_units) if initial_units is not None else None
        self.carry_streak = bool(carry_streak)
        self.raise_on_illegal_action = bool(raise_on_illegal_action)
        self.illegal_action_penalty = float(illegal_action_penalty)

        n = court.grid_size
        self.action_space = spaces.Discrete(len(ActionType))
        self.observation_space = spaces.Dict(
            {
                "obs": spaces.Box(low=0.0, high=1.0, shape=(len(OBS_PLANES), n, n), dtype=np.float32),
                "action_mask": spaces.Box(low=0, high=1, shape=(len(ActionType),), dtype=np.int8),
            }
        )

        # Static zone planes never change; build them once.
        self._static_planes = np.zeros((3, n, n), dtype=np.float32)
        for x, y in court.arc_cells:
            self._static_planes[0, y, x] = 1.0
        for x, y in court.layup_set:
            self._static_planes[1, y, x] = 1.0
        bx, by = court.basket
        self._static_planes[2, by, bx] = 1.0

        self._rng = np.random.default_rng(seed)
        self.state: Optional[PossessionState] = None
        self.step_count: int = 0
        self._carry_score: int = 0
        self._carry_streak: int = 0

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        """Start a new possession."""
        if seed is not None:
            self._rng = np.random.default_rng(seed)

        opt_units = None
        opt_streak = None
        if options:
            opt_units = options.get("units")
            opt_streak = options.get("streak")

        if self.state is not None and self.carry_streak and self.state.outcome == Outcome.SCORED:
            self._carry_score = self.state.score
            self._carry_streak = self.state.streak
        else:
            self._carry_score = 0
            self._carry_streak = 0
        if opt_streak is not None:
            self._carry_streak = int(opt_streak)

        units = opt_units if opt_units is not None else self._initial_units_override
        self.state = phases.new_possession(
            self._rng,
            score=self._carry_score,
            streak=self._carry_streak,
            mode=self.mode,
            court=self.court,
            units=tuple(units) if units is not None else None,
        )
        self.step_count = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        """Apply one action for the unit (or decision) the current phase asks for."""
        if self.state is None:
            raise ValueError("Call reset() before step().")
        if self.state.is_over:
            raise ValueError("Episode has ended. Call reset() to start a new episode.")

        action = ActionType(int(action))
        mask = build_action_masks(self.state)
        illegal = mask[action.value] == 0
        if illegal and self.raise_on_illegal_action:
            raise ValueError(
                f"Illegal action {action.name} during {self.state.phase.value}"
            )

        self.step_count += 1
        score_before = self.state.score
        self.state = self._apply(action)

        reward = float(self.state.score - score_before)
        if illegal:
            reward -= self.illegal_action_penalty
        terminated = self.state.is_over
        return self._get_obs(), reward, terminated, False, self._get_info()

    def _apply(self, action: ActionType) -> PossessionState:
        state = self.state
        if action in MOVE_OFFSETS:
            unit = acting_unit(state)
            if unit is None:
                return phases.reject(state, f"{action.name} is not available during {state.phase.value}.")
            dx, dy = MOVE_OFFSETS[action]
            target = (unit.position[0] + dx, unit.position[1] + dy)
            if state.phase == Phase.OFF_BALL:
                return phases.move_off_ball(state, unit.id, target)
            return phases.move_ball_carrier(state, target)

        if action == ActionType.SHOOT:
            return phases.attempt_shot(state)

        receiver_id = PASS_RECEIVERS[action]
        passing = state if state.phase == Phase.PASSING else phases.begin_pass(state)
        if passing.last_error:
            return passing
        result = phases.pass_ball(passing, receiver_id)
        if result.last_error:
            # Denied lanes leave the possession where it was.
            return phases.reject(state, result.last_error)
        return result

    def action_masks(self) -> np.ndarray:
        return build_action_masks(self.state)

    def _get_obs(self) -> Dict[str, np.ndarray]:
        n = self.court.grid_size
        planes = np.zeros((len(OBS_PLANES), n, n), dtype=np.float32)
        screened = screened_defender_ids(self.state.units)
        for unit in self.state.units:
            x, y = unit.position
            if unit.is_offense:
                planes[0, y, x] = 1.0
                if unit.has_ball:
                    planes[2, y, x] = 1.0
            else:
                planes[1, y, x] = 1.0
                if unit.id in screened:
                    planes[6, y, x] = 1.0
        planes[3:6] = self._static_planes
        return {"obs": planes, "action_mask": build_action_masks(self.state)}

    def _get_info(self) -> Dict:
        state = self.state
        acting = acting_unit(state)
        return {
            "phase": state.phase.value,
            "outcome": state.outcome.value,
            "turn": state.turn,
            "score": state.score,
            "streak": state.streak,
            "message": state.message,
            "last_error": state.last_error,
            "acting_unit": acting.id if acting is not None else None,
            "last_result": state.last_result.to_dict() if state.last_result is not None else None,
        }

    def render(self):
        """Render the current state of the environment."""
        if self.render_mode == "human":
            return rendering.render_ascii(self)
        elif self.render_mode == "rgb_array":
            return rendering.render_visual(self)

    def board_text(self) -> str:
        return rendering.board_ascii(self.state)

