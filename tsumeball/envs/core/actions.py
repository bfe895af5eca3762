from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np

from tsumeball.envs.core.movement import is_valid_move
from tsumeball.envs.core.passing import can_pass_to_teammate
from tsumeball.envs.core.phases import Phase, PossessionState, off_ball_pending
from tsumeball.envs.core.shooting import can_score
from tsumeball.envs.core.units import Unit, find_unit


class ActionType(Enum):
    STAY = 0
    MOVE_N = 1
    MOVE_NE = 2
    MOVE_E = 3
    MOVE_SE = 4
    MOVE_S = 5
    MOVE_SW = 6
    MOVE_W = 7
    MOVE_NW = 8
    SHOOT = 9
    PASS_O1 = 10
    PASS_O2 = 11
    PASS_O3 = 12
    PASS_O4 = 13
    PASS_O5 = 14


# (dx, dy) per movement action; north is toward the basket (row 1).
MOVE_OFFSETS = {
    ActionType.STAY: (0, 0),
    ActionType.MOVE_N: (0, -1),
    ActionType.MOVE_NE: (1, -1),
    ActionType.MOVE_E: (1, 0),
    ActionType.MOVE_SE: (1, 1),
    ActionType.MOVE_S: (0, 1),
    ActionType.MOVE_SW: (-1, 1),
    ActionType.MOVE_W: (-1, 0),
    ActionType.MOVE_NW: (-1, -1),
}

PASS_RECEIVERS = {
    ActionType.PASS_O1: "o1",
    ActionType.PASS_O2: "o2",
    ActionType.PASS_O3: "o3",
    ActionType.PASS_O4: "o4",
    ActionType.PASS_O5: "o5",
}


def acting_unit(state: PossessionState) -> Optional[Unit]:
    """The unit a movement action applies to in the current phase."""
    if state.is_over:
        return None
    if state.phase == Phase.OFF_BALL:
        pending = off_ball_pending(state)
        return pending[0] if pending else None
    if state.phase == Phase.BALL_CARRIER:
        return state.carrier
    return None


def build_action_masks(state: PossessionState) -> np.ndarray:
    """
    Legal action mask for the current phase.
    Movement slots apply to ``acting_unit``. SHOOT is only open for a shot
    that would score and PASS_* only for open lanes, so a live possession
    always has at least one legal action.
    """
    mask = np.zeros(len(ActionType), dtype=np.int8)
    if state.is_over:
        return mask

    unit = acting_unit(state)
    if unit is not None:
        x, y = unit.position
        for action, (dx, dy) in MOVE_OFFSETS.items():
            if is_valid_move(unit, (x + dx, y + dy), state.units, state.court):
                mask[action.value] = 1
        return mask

    if state.phase in (Phase.ACTION_CHOICE, Phase.PASSING):
        carrier = state.carrier
        if carrier is None:
            return mask
        if state.phase == Phase.ACTION_CHOICE and can_score(carrier, state.units, state.court).success:
            mask[ActionType.SHOOT.value] = 1
        for action, receiver_id in PASS_RECEIVERS.items():
            try:
                receiver = find_unit(state.units, receiver_id)
            except KeyError:
                continue
            if receiver.id != carrier.id and can_pass_to_teammate(carrier, receiver, state.units):
                mask[action.value] = 1
    return mask
