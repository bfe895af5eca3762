"""
Turn/phase state machine for a single possession.

Every operation takes a ``PossessionState`` and returns a new one; nothing is
mutated in place. Illegal requests come back as the same snapshot with
``message``/``last_error`` set, so callers can always commit the result.

Turn flow:
    off-ball-movement -> ball-carrier-movement -> action-choice
    action-choice -> shoot (possession ends on a make) | passing-target-selection
    passing-target-selection -> off-ball-movement (after the defense reacts)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

import numpy as np

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.defense import apply_defense_turn
from tsumeball.envs.core.geometry import is_basket
from tsumeball.envs.core.movement import is_valid_move, legal_moves
from tsumeball.envs.core.passing import can_pass_to_teammate, passable_teammates
from tsumeball.envs.core.shooting import ScoreResult, can_score
from tsumeball.envs.core.state import generate_scenario
from tsumeball.envs.core.units import (
    Unit,
    Units,
    ball_carrier,
    find_unit,
    offense_units,
    relocate,
    transfer_ball,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    OFF_BALL = "off-ball-movement"
    BALL_CARRIER = "ball-carrier-movement"
    ACTION_CHOICE = "action-choice"
    PASSING = "passing-target-selection"


class Outcome(Enum):
    IN_PROGRESS = "in-progress"
    SCORED = "scored"
    LOCKED_UP = "locked-up"
    TIME_UP = "time-up"
    CLOCK_EXPIRED = "clock-expired"

    @property
    def is_terminal(self) -> bool:
        return self != Outcome.IN_PROGRESS

    @property
    def is_failure(self) -> bool:
        return self in (Outcome.LOCKED_UP, Outcome.TIME_UP, Outcome.CLOCK_EXPIRED)


class GameMode(Enum):
    STREAK_ATTACK = "streak-attack"
    TIME_ATTACK = "time-attack"


TRANSITIONS: Dict[Phase, FrozenSet[Phase]] = {
    Phase.OFF_BALL: frozenset({Phase.BALL_CARRIER}),
    Phase.BALL_CARRIER: frozenset({Phase.ACTION_CHOICE}),
    Phase.ACTION_CHOICE: frozenset({Phase.PASSING}),
    Phase.PASSING: frozenset({Phase.ACTION_CHOICE, Phase.OFF_BALL}),
}

MSG_START = {
    GameMode.STREAK_ATTACK: "Execute precisely. One mistake ends the streak.",
    GameMode.TIME_ATTACK: "Go! Score as much as possible in 1 minute!",
}
MSG_OFF_BALL_DONE = "Off-ball set. Choose Ball-Carrier movement."
MSG_ACTION = "Action Phase: Finalize with a Shot or Pass."
MSG_PASSING = "Pick a teammate to receive the pass."
MSG_PASS_DENIED = "Pass lane denied by defense!"
MSG_LOCKED_UP = "LOCKED UP! GAME OVER"
MSG_TIME_UP = "TIME UP! GAME OVER"
MSG_CLOCK_EXPIRED = "TIME EXPIRED! GAME OVER"
MSG_POSSESSION_OVER = "Possession is over."
MSG_NO_UNDO = "Nothing to undo."
MSG_UNDO_USED = "Undo already used this turn."


@dataclass(frozen=True)
class PossessionState:
    units: Units
    phase: Phase = Phase.OFF_BALL
    moved_ids: Tuple[str, ...] = ()
    turn: int = 0
    score: int = 0
    streak: int = 0
    mode: GameMode = GameMode.STREAK_ATTACK
    outcome: Outcome = Outcome.IN_PROGRESS
    message: str = ""
    last_error: Optional[str] = None
    last_result: Optional[ScoreResult] = None
    undo_snapshot: Optional["PossessionState"] = field(default=None, repr=False)
    undo_used: bool = False
    court: CourtConfig = field(default=DEFAULT_COURT, repr=False, compare=False)

    @property
    def is_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def carrier(self) -> Optional[Unit]:
        return ball_carrier(self.units)

    @property
    def can_undo(self) -> bool:
        return not self.is_over and self.undo_snapshot is not None and not self.undo_used

    def to_dict(self) -> Dict:
        return {
            "units": [u.to_dict() for u in self.units],
            "phase": self.phase.value,
            "moved_ids": list(self.moved_ids),
            "turn": self.turn,
            "max_turns": self.court.max_turns,
            "score": self.score,
            "streak": self.streak,
            "mode": self.mode.value,
            "outcome": self.outcome.value,
            "message": self.message,
            "last_error": self.last_error,
            "last_result": self.last_result.to_dict() if self.last_result is not None else None,
            "can_undo": self.can_undo,
        }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def reject(state: PossessionState, message: str) -> PossessionState:
    return replace(state, message=message, last_error=message)


def _advance(state: PossessionState, **changes) -> PossessionState:
    new_phase = changes.get("phase", state.phase)
    if new_phase != state.phase and new_phase not in TRANSITIONS[state.phase]:
        raise ValueError(f"illegal phase transition {state.phase.value} -> {new_phase.value}")
    changes.setdefault("last_error", None)
    return replace(state, **changes)


def _snapshot(state: PossessionState) -> PossessionState:
    """Depth-1 undo copy: the previous snapshot never carries its own."""
    return replace(state, undo_snapshot=None, last_error=None)


def _finish(state: PossessionState, outcome: Outcome, message: str, **changes) -> PossessionState:
    logger.debug("Possession ended: %s (score=%d, streak=%d)", outcome.value, state.score, state.streak)
    return replace(
        state,
        outcome=outcome,
        message=message,
        last_error=None,
        undo_snapshot=None,
        **changes,
    )


def _score(state: PossessionState, result: ScoreResult, message: str, **changes) -> PossessionState:
    return _finish(
        state,
        Outcome.SCORED,
        message,
        score=state.score + result.points,
        streak=state.streak + 1,
        last_result=result,
        **changes,
    )


def _guard(state: PossessionState, phase: Phase) -> Optional[str]:
    if state.is_over:
        return MSG_POSSESSION_OVER
    if state.phase != phase:
        return f"Not allowed during {state.phase.value}."
    return None


# ---------------------------------------------------------------------------
# Lockup detection
# ---------------------------------------------------------------------------


def is_locked_up(units: Units, court: CourtConfig = DEFAULT_COURT) -> bool:
    """The carrier has neither a legal shot nor a legal pass (one-ply check)."""
    carrier = ball_carrier(units)
    if carrier is None:
        return False
    if can_score(carrier, units, court).success:
        return False
    return not passable_teammates(carrier, units)


def _check_lockup(state: PossessionState) -> PossessionState:
    if is_locked_up(state.units, state.court):
        return _finish(state, Outcome.LOCKED_UP, MSG_LOCKED_UP)
    return state


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def new_possession(
    rng: Optional[np.random.Generator] = None,
    score: int = 0,
    streak: int = 0,
    mode: GameMode = GameMode.STREAK_ATTACK,
    court: CourtConfig = DEFAULT_COURT,
    units: Optional[Units] = None,
) -> PossessionState:
    """Start a possession from a generated scenario (or a fixed layout)."""
    if units is None:
        units = generate_scenario(rng, court)
    if score == 0 and streak == 0:
        message = MSG_START[mode]
    elif mode == GameMode.TIME_ATTACK:
        message = "Bucket! Keep moving!"
    else:
        message = f"Streak: {streak}. Keep it alive!"
    return PossessionState(
        units=tuple(units),
        score=score,
        streak=streak,
        mode=mode,
        message=message,
        court=court,
    )


def next_possession(state: PossessionState, rng: Optional[np.random.Generator] = None) -> PossessionState:
    """Carry score and streak into a fresh possession after a make."""
    if state.outcome != Outcome.SCORED:
        return reject(state, "Next possession is only available after a score.")
    return new_possession(rng, score=state.score, streak=state.streak, mode=state.mode, court=state.court)


def expire_clock(state: PossessionState) -> PossessionState:
    """Time-attack countdown ran out."""
    if state.is_over:
        return state
    return _finish(state, Outcome.CLOCK_EXPIRED, MSG_CLOCK_EXPIRED)


# ---------------------------------------------------------------------------
# Phase actions
# ---------------------------------------------------------------------------


def move_off_ball(state: PossessionState, unit_id: str, target: Cell) -> PossessionState:
    """Move (or hold) one support player; the fourth move ends the phase."""
    error = _guard(state, Phase.OFF_BALL)
    if error:
        return reject(state, error)
    try:
        unit = find_unit(state.units, unit_id)
    except KeyError:
        return reject(state, f"Unknown player {unit_id}.")
    if not unit.is_offense:
        return reject(state, "Only offensive players move during support moves.")
    if unit.has_ball:
        return reject(state, "Move support players first!")
    if unit_id in state.moved_ids:
        return reject(state, f"{unit.name} already moved this turn.")
    target = (int(target[0]), int(target[1]))
    if not is_valid_move(unit, target, state.units, state.court):
        return reject(state, "Illegal move.")

    moved = state.moved_ids + (unit_id,)
    done = len(moved) >= state.court.off_ball_moves
    return _advance(
        state,
        units=relocate(state.units, unit_id, target),
        moved_ids=moved,
        phase=Phase.BALL_CARRIER if done else Phase.OFF_BALL,
        message=MSG_OFF_BALL_DONE if done else f"Support moves: {len(moved)}/{state.court.off_ball_moves}",
        undo_snapshot=_snapshot(state),
    )


def move_ball_carrier(state: PossessionState, target: Cell) -> PossessionState:
    """Move (or hold) the ball carrier. Stepping onto the basket is a dunk."""
    error = _guard(state, Phase.BALL_CARRIER)
    if error:
        return reject(state, error)
    carrier = state.carrier
    if carrier is None:
        return reject(state, "No ball carrier.")
    target = (int(target[0]), int(target[1]))
    if not is_valid_move(carrier, target, state.units, state.court):
        return reject(state, "Illegal move.")

    units = relocate(state.units, carrier.id, target)
    if is_basket(target, state.court):
        result = can_score(find_unit(units, carrier.id), units, state.court)
        if result.success:
            return _score(state, result, f"SLAM DUNK! +{result.points}. Unstoppable!", units=units)

    moved = _advance(
        state,
        units=units,
        phase=Phase.ACTION_CHOICE,
        message=MSG_ACTION,
        undo_snapshot=_snapshot(state),
    )
    return _check_lockup(moved)


def attempt_shot(state: PossessionState) -> PossessionState:
    error = _guard(state, Phase.ACTION_CHOICE)
    if error:
        return reject(state, error)
    carrier = state.carrier
    if carrier is None:
        return reject(state, "No ball carrier.")
    result = can_score(carrier, state.units, state.court)
    if result.success:
        return _score(state, result, f"BUCKET! {result.shot_type.value} +{result.points}.")
    message = f"BLOCKED! {result.reason} Find an open spot or pass!"
    return replace(state, message=message, last_error=None, last_result=result)


def begin_pass(state: PossessionState) -> PossessionState:
    error = _guard(state, Phase.ACTION_CHOICE)
    if error:
        return reject(state, error)
    return _advance(state, phase=Phase.PASSING, message=MSG_PASSING, undo_snapshot=_snapshot(state))


def cancel_pass(state: PossessionState) -> PossessionState:
    error = _guard(state, Phase.PASSING)
    if error:
        return reject(state, error)
    return _advance(state, phase=Phase.ACTION_CHOICE, message=MSG_ACTION)


def pass_ball(state: PossessionState, receiver_id: str) -> PossessionState:
    """Complete a pass, run the turn clock and let the defense react."""
    error = _guard(state, Phase.PASSING)
    if error:
        return reject(state, error)
    carrier = state.carrier
    try:
        receiver = find_unit(state.units, receiver_id)
    except KeyError:
        return reject(state, f"Unknown player {receiver_id}.")
    if carrier is None or not receiver.is_offense or receiver.id == carrier.id:
        return reject(state, "Pick a teammate to receive the pass.")
    if not can_pass_to_teammate(carrier, receiver, state.units):
        return reject(state, MSG_PASS_DENIED)

    units = transfer_ball(state.units, carrier.id, receiver.id)
    turn = state.turn + 1
    if turn >= state.court.max_turns:
        return _finish(state, Outcome.TIME_UP, MSG_TIME_UP, units=units, turn=turn)

    units = apply_defense_turn(units, state.streak, state.court)
    passed = _advance(
        state,
        units=units,
        turn=turn,
        phase=Phase.OFF_BALL,
        moved_ids=(),
        message=f"Turn {turn + 1}: Move supports.",
        last_result=None,
        undo_snapshot=None,
        undo_used=False,
    )
    return _check_lockup(passed)


def undo(state: PossessionState) -> PossessionState:
    """Rewind the last state-changing action, once per turn."""
    if state.is_over:
        return reject(state, MSG_POSSESSION_OVER)
    if state.undo_used:
        return reject(state, MSG_UNDO_USED)
    previous = state.undo_snapshot
    if previous is None:
        return reject(state, MSG_NO_UNDO)
    return replace(
        state,
        units=previous.units,
        phase=previous.phase,
        moved_ids=previous.moved_ids,
        turn=previous.turn,
        message=previous.message,
        last_error=None,
        last_result=previous.last_result,
        undo_snapshot=None,
        undo_used=True,
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def off_ball_pending(state: PossessionState) -> List[Unit]:
    """Support players that still owe a move this turn, in snapshot order."""
    return [
        u for u in offense_units(state.units)
        if not u.has_ball and u.id not in state.moved_ids
    ]


def legal_targets(state: PossessionState, unit_id: str) -> List[Cell]:
    """Cells ``unit_id`` may move to right now (empty if it cannot act)."""
    if state.is_over:
        return []
    unit = find_unit(state.units, unit_id)
    if state.phase == Phase.OFF_BALL:
        if not unit.is_offense or unit.has_ball or unit_id in state.moved_ids:
            return []
    elif state.phase == Phase.BALL_CARRIER:
        if not unit.has_ball:
            return []
    else:
        return []
    return legal_moves(unit, state.units, state.court)


def pass_targets(state: PossessionState) -> List[str]:
    carrier = state.carrier
    if carrier is None or state.is_over:
        return []
    return [u.id for u in passable_teammates(carrier, state.units)]


def available_actions(state: PossessionState) -> Dict:
    """Summary used by front ends to enable controls."""
    if state.is_over:
        return {"movable": [], "can_shoot": False, "can_pass": False, "pass_targets": [], "can_undo": False}
    if state.phase == Phase.OFF_BALL:
        movable = [u.id for u in off_ball_pending(state)]
    elif state.phase == Phase.BALL_CARRIER and state.carrier is not None:
        movable = [state.carrier.id]
    else:
        movable = []
    in_action = state.phase == Phase.ACTION_CHOICE
    targets = pass_targets(state) if state.phase in (Phase.ACTION_CHOICE, Phase.PASSING) else []
    return {
        "movable": movable,
        "can_shoot": in_action,
        "can_pass": in_action and bool(targets),
        "pass_targets": targets,
        "can_undo": state.can_undo,
    }
