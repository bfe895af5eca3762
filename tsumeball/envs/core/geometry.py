from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.units import Unit, defender_at

# Neighbor offsets in generation order: dx outer, dy inner. The defense AI's
# tie-break depends on this order.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if not (dx == 0 and dy == 0)
)


def chebyshev_distance(a: Cell, b: Cell) -> int:
    """Grid distance where all 8 surrounding cells are one step away."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def manhattan_distance(a: Cell, b: Cell) -> int:
    """Grid distance where only the 4 edge-sharing cells are one step away."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Cell, b: Cell) -> bool:
    return chebyshev_distance(a, b) == 1


def is_orthogonal_adjacent(a: Cell, b: Cell) -> bool:
    return manhattan_distance(a, b) == 1


def is_in_bounds(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    return 0 <= pos[0] < court.grid_size and 0 <= pos[1] < court.grid_size


def is_playable(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    """In bounds and not on a reserved (decoration) row."""
    return is_in_bounds(pos, court) and pos[1] not in court.reserved_rows


def is_basket(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    return tuple(pos) == court.basket


def is_in_paint(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    x_min, x_max, y_min, y_max = court.paint_bounds
    return x_min <= pos[0] <= x_max and y_min <= pos[1] <= y_max


def is_on_three_point_arc(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    return tuple(pos) in court.arc_cells


def is_layup_cell(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    return tuple(pos) in court.layup_set


def is_three_point_area(pos: Cell, court: CourtConfig = DEFAULT_COURT) -> bool:
    """Arc cells plus the outer region beyond them."""
    if is_on_three_point_arc(pos, court):
        return True
    x, y = pos
    if y > 5:
        return True
    if 1 <= y <= 4 and (x < 1 or x > 7):
        return True
    return False


def neighbor_cells(pos: Cell) -> List[Cell]:
    """The 8 surrounding cells (unfiltered) in ``NEIGHBOR_OFFSETS`` order."""
    return [(pos[0] + dx, pos[1] + dy) for dx, dy in NEIGHBOR_OFFSETS]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def midpoint(a: Cell, b: Cell) -> Cell:
    """Integer midpoint, halves rounded toward +inf on each axis."""
    return (_round_half_up((a[0] + b[0]) / 2.0), _round_half_up((a[1] + b[1]) / 2.0))


def line_cells(start: Cell, end: Cell) -> List[Cell]:
    """Cells walked from ``start`` (exclusive) to ``end`` (inclusive).

    Only straight or perfectly diagonal lines have a walk; any other offset
    returns an empty list.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if not (dx == 0 or dy == 0 or abs(dx) == abs(dy)):
        return []
    step_x = 0 if dx == 0 else dx // abs(dx)
    step_y = 0 if dy == 0 else dy // abs(dy)
    cells: List[Cell] = []
    cur_x, cur_y = start
    while (cur_x, cur_y) != tuple(end):
        cur_x += step_x
        cur_y += step_y
        cells.append((cur_x, cur_y))
    return cells


def path_clear(start: Cell, end: Cell, units: Iterable[Unit]) -> bool:
    """True if no defender stands on the straight/diagonal line to ``end``.

    Intermediate cells and the destination are checked; ``start`` is not.
    Offsets that are neither straight nor diagonal are never clear.
    """
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    is_straight = dx == 0 or dy == 0
    is_diagonal = abs(dx) == abs(dy)
    if not is_straight and not is_diagonal:
        return False

    units = list(units)
    for cell in line_cells(start, end):
        if defender_at(cell, units):
            return False
    # start == end walks nothing; the destination still has to be free.
    return not defender_at(end, units)
