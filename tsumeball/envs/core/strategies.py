from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.geometry import is_in_bounds
from tsumeball.envs.core.units import Unit, ball_carrier, defense_units


class Strategy(Enum):
    PICK_AND_ROLL = "pick-and-roll"
    FLOOR_SPACING = "floor-spacing"
    BACKDOOR_CUT = "backdoor-cut"


BACKDOOR_CELLS: tuple[Cell, ...] = ((3, 1), (4, 1), (5, 1), (3, 2), (4, 2), (5, 2))


def strategy_highlights(
    units: Iterable[Unit], strategy: Optional[Strategy], court: CourtConfig = DEFAULT_COURT
) -> List[Cell]:
    """Cells to highlight for a play template.

    Pick and roll marks the screening spots around the carrier's defender,
    floor spacing marks the arc, backdoor cut marks the strip under the rim.
    """
    if strategy is None:
        return []
    units = list(units)
    carrier = ball_carrier(units)
    if carrier is None:
        return []

    if strategy == Strategy.PICK_AND_ROLL:
        guard = next((d for d in defense_units(units) if d.assigned_to == carrier.id), None)
        if guard is None:
            return []
        gx, gy = guard.position
        spots = [(gx + 1, gy), (gx - 1, gy), (gx, gy + 1), (gx, gy - 1)]
        return [s for s in spots if is_in_bounds(s, court)]

    if strategy == Strategy.FLOOR_SPACING:
        return list(court.three_point_line)

    if strategy == Strategy.BACKDOOR_CUT:
        return list(BACKDOOR_CELLS)

    return []
