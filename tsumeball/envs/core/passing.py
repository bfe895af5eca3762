from __future__ import annotations

from typing import Iterable, List, Tuple

from tsumeball.envs.core.court import Cell
from tsumeball.envs.core.geometry import is_adjacent, path_clear
from tsumeball.envs.core.units import Unit, defender_at, offense_units


def pass_lane_corners(passer_pos: Cell, recv_pos: Cell) -> Tuple[Cell, Cell]:
    """The two orthogonal corner cells between diagonal neighbors.

    First the cell on the passer's row under the receiver's column, then the
    cell on the passer's column at the receiver's row.
    """
    dx = recv_pos[0] - passer_pos[0]
    dy = recv_pos[1] - passer_pos[1]
    return (passer_pos[0] + dx, passer_pos[1]), (passer_pos[0], passer_pos[1] + dy)


def can_pass_to_teammate(passer: Unit, receiver: Unit, units: Iterable[Unit]) -> bool:
    """Whether the ball can travel from ``passer`` to ``receiver``.

    A defender on the receiver's cell always denies the pass. One-step
    orthogonal passes are otherwise open. One-step diagonal passes are shaded
    by a defender on either corner cell. Longer passes need a clear straight
    or diagonal lane.
    """
    units = list(units)
    if defender_at(receiver.position, units):
        return False

    if is_adjacent(passer.position, receiver.position):
        dx = receiver.position[0] - passer.position[0]
        dy = receiver.position[1] - passer.position[1]
        if dx != 0 and dy != 0:
            for corner in pass_lane_corners(passer.position, receiver.position):
                if defender_at(corner, units):
                    return False
        return True

    return path_clear(passer.position, receiver.position, units)


def passable_teammates(passer: Unit, units: Iterable[Unit]) -> List[Unit]:
    """Offensive teammates that can legally receive a pass from ``passer``."""
    units = list(units)
    return [
        mate
        for mate in offense_units(units)
        if mate.id != passer.id and can_pass_to_teammate(passer, mate, units)
    ]
