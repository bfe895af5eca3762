from dataclasses import replace

import numpy as np
import pytest

from tsumeball.envs.core import phases
from tsumeball.envs.core.phases import (
    MSG_LOCKED_UP,
    MSG_NO_UNDO,
    MSG_OFF_BALL_DONE,
    MSG_PASS_DENIED,
    MSG_POSSESSION_OVER,
    MSG_TIME_UP,
    MSG_UNDO_USED,
    GameMode,
    Outcome,
    Phase,
)
from tsumeball.envs.core.shooting import REASON_TOO_FAR, ShotType
from tsumeball.envs.core.units import find_unit

OFFENSE = {"o1": (4, 7), "o2": (2, 6), "o3": (6, 6), "o4": (3, 3), "o5": (5, 3)}
DEFENSE = {"d1": (4, 5), "d2": (2, 4), "d3": (6, 4), "d4": (2, 2), "d5": (6, 2)}


@pytest.fixture
def possession(make_units):
    return phases.new_possession(units=make_units(OFFENSE, DEFENSE))


def _pos(state, uid):
    return find_unit(state.units, uid).position


def _hold_supports(state):
    for uid in ("o2", "o3", "o4", "o5"):
        state = phases.move_off_ball(state, uid, _pos(state, uid))
    return state


def _to_action_choice(state, carrier_target=(4, 6)):
    state = _hold_supports(state)
    return phases.move_ball_carrier(state, carrier_target)


def test_new_possession_messages(make_units):
    units = make_units(OFFENSE, DEFENSE)
    streak = phases.new_possession(units=units)
    assert streak.phase == Phase.OFF_BALL
    assert streak.message == phases.MSG_START[GameMode.STREAK_ATTACK]
    timed = phases.new_possession(units=units, mode=GameMode.TIME_ATTACK)
    assert timed.message == phases.MSG_START[GameMode.TIME_ATTACK]
    generated = phases.new_possession(np.random.default_rng(1))
    assert len(generated.units) == 10


def test_off_ball_move_rules(possession):
    assert phases.move_off_ball(possession, "o1", (4, 6)).last_error == "Move support players first!"
    assert phases.move_off_ball(possession, "d1", (4, 4)).last_error is not None
    assert phases.move_off_ball(possession, "x9", (4, 4)).last_error.startswith("Unknown player")

    illegal = phases.move_off_ball(possession, "o2", (2, 4))
    assert illegal.last_error == "Illegal move."
    assert illegal.units == possession.units

    moved = phases.move_off_ball(possession, "o2", (2, 5))
    assert _pos(moved, "o2") == (2, 5)
    assert moved.moved_ids == ("o2",)
    assert moved.phase == Phase.OFF_BALL
    assert moved.message == "Support moves: 1/4"
    assert moved.last_error is None

    again = phases.move_off_ball(moved, "o2", (2, 4))
    assert "already moved" in again.last_error
    assert _pos(again, "o2") == (2, 5)


def test_fourth_support_move_hands_over_to_carrier(possession):
    state = _hold_supports(possession)
    assert state.phase == Phase.BALL_CARRIER
    assert state.message == MSG_OFF_BALL_DONE
    assert phases.available_actions(state)["movable"] == ["o1"]


def test_phase_guards(possession):
    shot = phases.attempt_shot(possession)
    assert shot.last_error == "Not allowed during off-ball-movement."
    assert shot.phase == Phase.OFF_BALL
    assert phases.move_ball_carrier(possession, (4, 6)).last_error is not None
    assert phases.legal_targets(possession, "o1") == []
    assert phases.legal_targets(possession, "o2")[0] == (2, 6)


def test_blocked_shot_stays_in_action_choice(possession):
    state = _to_action_choice(possession)
    assert state.phase == Phase.ACTION_CHOICE
    assert state.outcome == Outcome.IN_PROGRESS

    blocked = phases.attempt_shot(state)
    assert blocked.phase == Phase.ACTION_CHOICE
    assert blocked.outcome == Outcome.IN_PROGRESS
    assert blocked.score == 0
    assert blocked.last_result.reason == REASON_TOO_FAR
    assert blocked.message.startswith("BLOCKED! " + REASON_TOO_FAR)

    # The blocked shot is not an undo step; undo rewinds the carrier move
    rewound = phases.undo(blocked)
    assert rewound.phase == Phase.BALL_CARRIER
    assert _pos(rewound, "o1") == (4, 7)


def test_pass_moves_defense_and_starts_next_turn(possession):
    state = phases.begin_pass(_to_action_choice(possession))
    assert state.phase == Phase.PASSING

    passed = phases.pass_ball(state, "o2")
    assert passed.turn == 1
    assert passed.phase == Phase.OFF_BALL
    assert passed.moved_ids == ()
    assert passed.carrier.id == "o2"
    assert passed.message == "Turn 2: Move supports."
    assert not passed.can_undo
    # d1 is screened by o1; d2 guards the new carrier and steps toward the rim line
    assert _pos(passed, "d1") == (4, 5)
    assert _pos(passed, "d2") == (3, 4)


def test_cancel_pass(possession):
    state = phases.begin_pass(_to_action_choice(possession))
    back = phases.cancel_pass(state)
    assert back.phase == Phase.ACTION_CHOICE
    assert back.last_error is None


def test_denied_pass_keeps_passing_phase(possession):
    state = phases.begin_pass(_to_action_choice(possession))
    # o4 at (3, 3) is neither straight nor diagonal from (4, 6)
    denied = phases.pass_ball(state, "o4")
    assert denied.message == MSG_PASS_DENIED
    assert denied.last_error == MSG_PASS_DENIED
    assert denied.phase == Phase.PASSING
    assert denied.units == state.units
    assert denied.turn == 0


def test_last_pass_runs_out_the_clock(possession):
    state = phases.begin_pass(_to_action_choice(possession))
    state = replace(state, turn=state.court.max_turns - 1)
    done = phases.pass_ball(state, "o2")
    assert done.outcome == Outcome.TIME_UP
    assert done.message == MSG_TIME_UP
    assert done.is_over
    assert done.carrier.id == "o2"
    # Defense does not react to the final pass
    for uid in DEFENSE:
        assert _pos(done, uid) == _pos(state, uid)


def test_open_three_ends_possession_and_next_carries_streak(make_units):
    units = make_units({"o1": (4, 5), "o2": (1, 6)}, {"d1": (4, 3)})
    state = replace(phases.new_possession(units=units), phase=Phase.ACTION_CHOICE)

    scored = phases.attempt_shot(state)
    assert scored.outcome == Outcome.SCORED
    assert scored.score == 3
    assert scored.streak == 1
    assert scored.last_result.shot_type == ShotType.THREE_POINTER
    assert scored.message.startswith("BUCKET!")

    following = phases.next_possession(scored, np.random.default_rng(0))
    assert following.outcome == Outcome.IN_PROGRESS
    assert following.phase == Phase.OFF_BALL
    assert following.score == 3
    assert following.streak == 1
    assert following.message == "Streak: 1. Keep it alive!"


def test_next_possession_requires_a_score(possession):
    assert phases.next_possession(possession).last_error is not None


def test_carrier_onto_basket_is_a_dunk(make_units):
    state = phases.new_possession(units=make_units({"o1": (4, 2)}, {"d1": (3, 1)}))
    state = replace(state, phase=Phase.BALL_CARRIER)
    dunk = phases.move_ball_carrier(state, (4, 1))
    assert dunk.outcome == Outcome.SCORED
    assert dunk.score == 2
    assert dunk.last_result.shot_type == ShotType.SLAM_DUNK


def test_lockup_on_entering_action_choice(make_units):
    units = make_units({"o1": (4, 7), "o2": (4, 3)}, {"d2": (4, 5)})
    assert phases.is_locked_up(units)
    state = replace(phases.new_possession(units=units), phase=Phase.BALL_CARRIER)
    locked = phases.move_ball_carrier(state, (4, 7))
    assert locked.outcome == Outcome.LOCKED_UP
    assert locked.message == MSG_LOCKED_UP
    assert phases.move_off_ball(locked, "o2", (4, 3)).last_error == MSG_POSSESSION_OVER
    assert phases.available_actions(locked)["movable"] == []


def test_lockup_after_completed_pass(make_units):
    units = make_units({"o1": (4, 7), "o2": (4, 4)}, {"d1": (5, 6)})
    state = replace(phases.new_possession(units=units), phase=Phase.PASSING)
    locked = phases.pass_ball(state, "o2")
    assert find_unit(locked.units, "o2").has_ball
    assert _pos(locked, "d1") == (4, 6)
    assert locked.outcome == Outcome.LOCKED_UP
    assert locked.message == MSG_LOCKED_UP


def test_not_locked_when_a_shot_is_open(make_units):
    units = make_units({"o1": (4, 5), "o2": (4, 8)}, {"d2": (4, 7)})
    assert not phases.is_locked_up(units)


def test_undo_once_per_turn(possession):
    assert phases.undo(possession).last_error == MSG_NO_UNDO

    moved = phases.move_off_ball(possession, "o2", (2, 5))
    assert moved.can_undo
    rewound = phases.undo(moved)
    assert _pos(rewound, "o2") == (2, 6)
    assert rewound.moved_ids == ()
    assert rewound.undo_used

    moved_again = phases.move_off_ball(rewound, "o2", (2, 5))
    assert not moved_again.can_undo
    assert phases.undo(moved_again).last_error == MSG_UNDO_USED


def test_undo_rearms_after_pass(possession):
    state = phases.undo(phases.move_off_ball(possession, "o2", (2, 6)))
    state = phases.pass_ball(phases.begin_pass(_to_action_choice(state)), "o2")
    assert not state.undo_used
    moved = phases.move_off_ball(state, "o1", (4, 6))
    assert moved.can_undo


def test_expire_clock(possession):
    expired = phases.expire_clock(possession)
    assert expired.outcome == Outcome.CLOCK_EXPIRED
    assert expired.outcome.is_failure
    assert phases.expire_clock(expired) is expired


def test_available_actions_off_ball(possession):
    actions = phases.available_actions(possession)
    assert actions["movable"] == ["o2", "o3", "o4", "o5"]
    assert not actions["can_shoot"]
    assert not actions["can_undo"]
