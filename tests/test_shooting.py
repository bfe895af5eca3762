from tsumeball.envs.core.shooting import (
    REASON_CONTESTED,
    REASON_NO_BALL,
    REASON_RIM_PROTECTED,
    REASON_TOO_FAR,
    ShotType,
    can_score,
)
from tsumeball.envs.core.units import find_unit


def _shot(units, uid="o1"):
    return can_score(find_unit(units, uid), units)


def test_open_three(make_units):
    result = _shot(make_units({"o1": (4, 5)}, {"d1": (4, 3)}))
    assert result.success
    assert result.points == 3
    assert result.shot_type == ShotType.THREE_POINTER
    assert result.to_dict() == {"success": True, "pts": 3, "type": "3-Pointer", "reason": None}


def test_contested_three(make_units):
    result = _shot(make_units({"o1": (4, 5)}, {"d1": (5, 4)}))
    assert not result.success
    assert result.reason == REASON_CONTESTED


def test_dunk_is_unconditional(make_units):
    result = _shot(make_units({"o1": (4, 1)}, {"d1": (3, 1), "d2": (5, 2)}))
    assert result.success
    assert result.points == 2
    assert result.shot_type == ShotType.SLAM_DUNK


def test_layup_open_and_protected(make_units):
    assert _shot(make_units({"o1": (3, 2)}, {"d1": (7, 7)})).shot_type == ShotType.LAYUP

    protected = _shot(make_units({"o1": (3, 2)}, {"d1": (4, 1)}))
    assert not protected.success
    assert protected.reason == REASON_RIM_PROTECTED

    # Any defender touching the basket cell protects the rim
    assert _shot(make_units({"o1": (3, 2)}, {"d1": (5, 2)})).reason == REASON_RIM_PROTECTED


def test_too_far(make_units):
    result = _shot(make_units({"o1": (4, 7)}))
    assert not result.success
    assert result.reason == REASON_TOO_FAR
    assert result.to_dict()["type"] == ""


def test_no_ball(make_units):
    units = make_units({"o1": (4, 7), "o2": (4, 5)})
    assert _shot(units, "o2").reason == REASON_NO_BALL
