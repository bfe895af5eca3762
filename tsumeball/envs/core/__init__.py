"""Rules engine: pure functions over immutable unit snapshots."""

from tsumeball.envs.core.court import DEFAULT_COURT, CourtConfig
from tsumeball.envs.core.defense import apply_defense_turn
from tsumeball.envs.core.geometry import path_clear
from tsumeball.envs.core.movement import is_valid_move
from tsumeball.envs.core.passing import can_pass_to_teammate
from tsumeball.envs.core.shooting import ScoreResult, can_score
from tsumeball.envs.core.state import generate_scenario

__all__ = [
    "DEFAULT_COURT",
    "CourtConfig",
    "ScoreResult",
    "apply_defense_turn",
    "can_pass_to_teammate",
    "can_score",
    "generate_scenario",
    "is_valid_move",
    "path_clear",
]
