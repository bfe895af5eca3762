from __future__ import annotations

from typing import Iterable, List

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.geometry import chebyshev_distance, is_playable, neighbor_cells
from tsumeball.envs.core.units import Unit, unit_at


def is_valid_move(
    unit: Unit, target: Cell, units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT
) -> bool:
    """Return True if ``unit`` may step to ``target`` this phase.

    Staying on the current cell is always allowed. A one-step destination
    must be on the playable court and empty; no path check is needed.
    """
    target = (int(target[0]), int(target[1]))
    if not is_playable(target, court):
        return False
    dist = chebyshev_distance(unit.position, target)
    if dist > 1:
        return False
    if dist == 1 and unit_at(target, units) is not None:
        return False
    return True


def legal_moves(unit: Unit, units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT) -> List[Cell]:
    """Own cell first, then every legal neighbor in generation order."""
    units = list(units)
    moves: List[Cell] = [unit.position]
    for cell in neighbor_cells(unit.position):
        if is_valid_move(unit, cell, units, court):
            moves.append(cell)
    return moves
