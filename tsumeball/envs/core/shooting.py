from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from tsumeball.envs.core.court import DEFAULT_COURT, CourtConfig
from tsumeball.envs.core.geometry import (
    chebyshev_distance,
    is_adjacent,
    is_basket,
    is_layup_cell,
    is_on_three_point_arc,
)
from tsumeball.envs.core.units import Unit, defense_units


class ShotType(Enum):
    THREE_POINTER = "3-Pointer"
    SLAM_DUNK = "Slam Dunk"
    LAYUP = "Layup"


REASON_NO_BALL = "No ball"
REASON_CONTESTED = "Contested 3PT!"
REASON_RIM_PROTECTED = "Rim Protected!"
REASON_TOO_FAR = "Too far! Move to arc or attack the rim!"


@dataclass(frozen=True)
class ScoreResult:
    success: bool
    points: int = 0
    shot_type: Optional[ShotType] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            "success": bool(self.success),
            "pts": int(self.points),
            "type": self.shot_type.value if self.shot_type is not None else "",
            "reason": self.reason,
        }


def contesting_defenders(unit: Unit, units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT) -> list[Unit]:
    """Defenders within the contest radius of ``unit``."""
    return [
        d for d in defense_units(units)
        if chebyshev_distance(unit.position, d.position) <= court.contest_radius
    ]


def rim_is_protected(units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT) -> bool:
    """A defender stands on the basket or on one of its 8 neighbors."""
    return any(
        d.position == court.basket or is_adjacent(d.position, court.basket)
        for d in defense_units(units)
    )


def can_score(unit: Unit, units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT) -> ScoreResult:
    """Evaluate a shot by ``unit`` from its current cell.

    Scoring is only possible from three places: an open arc cell (3), the
    basket itself (2, unconditional), and a layup cell while the rim is
    unprotected (2). Every other cell is too far.
    """
    units = list(units)
    if not unit.has_ball:
        return ScoreResult(success=False, reason=REASON_NO_BALL)

    if is_on_three_point_arc(unit.position, court):
        if contesting_defenders(unit, units, court):
            return ScoreResult(success=False, reason=REASON_CONTESTED)
        return ScoreResult(success=True, points=3, shot_type=ShotType.THREE_POINTER)

    if is_basket(unit.position, court):
        return ScoreResult(success=True, points=2, shot_type=ShotType.SLAM_DUNK)

    if is_layup_cell(unit.position, court):
        if rim_is_protected(units, court):
            return ScoreResult(success=False, reason=REASON_RIM_PROTECTED)
        return ScoreResult(success=True, points=2, shot_type=ShotType.LAYUP)

    return ScoreResult(success=False, reason=REASON_TOO_FAR)
