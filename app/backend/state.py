import time
from typing import Optional

import numpy as np
from fastapi import HTTPException

from app.backend.config import ServiceConfig, get_service_config
from app.backend.rankings import RankingStore
from tsumeball.envs.core import phases
from tsumeball.envs.core.phases import GameMode, PossessionState


class GameState:
    """Lightweight container for backend session state (single-user demo)."""

    def __init__(self, config: Optional[ServiceConfig] = None):
        self.config: ServiceConfig = config or get_service_config()
        self.possession: PossessionState | None = None
        self.rng = np.random.default_rng()
        self.high_score: int = 0
        # Monotonic deadline for time-attack; None in streak-attack
        self.deadline: float | None = None
        self.rankings = RankingStore(
            self.config.rankings_path,
            remote_url=self.config.rankings_url,
            timeout=self.config.http_timeout,
        )

    def start(self, mode: GameMode, seed: int | None = None) -> PossessionState:
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.possession = phases.new_possession(self.rng, mode=mode)
        if mode == GameMode.TIME_ATTACK:
            self.deadline = time.monotonic() + self.config.time_attack_seconds
        else:
            self.deadline = None
        return self.possession

    def time_left(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def commit(self, state: PossessionState) -> PossessionState:
        self.possession = state
        self.high_score = max(self.high_score, state.score)
        return state


game_state = GameState()


def require_possession() -> PossessionState:
    """Current possession with the time-attack clock applied."""
    if game_state.possession is None:
        raise HTTPException(status_code=400, detail="Game not initialized.")
    left = game_state.time_left()
    if left is not None and left <= 0 and not game_state.possession.is_over:
        game_state.commit(phases.expire_clock(game_state.possession))
    return game_state.possession


def serialize_state() -> dict:
    state = game_state.possession
    payload = state.to_dict()
    payload["available"] = phases.available_actions(state)
    payload["high_score"] = game_state.high_score
    payload["time_left"] = game_state.time_left()
    return payload
