from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Tuple

Cell = Tuple[int, int]

UNITS_PER_TEAM = 5


# Ordered perimeter of the three-point line, left corner around to right corner.
THREE_POINT_LINE: Tuple[Cell, ...] = (
    (1, 1), (1, 2), (1, 3), (1, 4),
    (2, 5), (3, 5), (4, 5), (5, 5), (6, 5),
    (7, 4), (7, 3), (7, 2), (7, 1),
)

LAYUP_CELLS: Tuple[Cell, ...] = (
    (3, 1), (3, 2), (3, 3),
    (4, 2), (4, 3),
    (5, 1), (5, 2), (5, 3),
)


@dataclass(frozen=True)
class CourtConfig:
    """Static description of the half court and the rule constants.

    One instance is built at import time (``DEFAULT_COURT``) and handed to
    every rules function, so no module reads hidden globals.
    """

    grid_size: int = 9
    reserved_rows: Tuple[int, ...] = (0,)
    basket: Cell = (4, 1)
    # (x_min, x_max, y_min, y_max), inclusive
    paint_bounds: Tuple[int, int, int, int] = (3, 5, 1, 3)
    three_point_line: Tuple[Cell, ...] = THREE_POINT_LINE
    layup_cells: Tuple[Cell, ...] = LAYUP_CELLS
    # Turn flow
    max_turns: int = 4
    off_ball_moves: int = 4
    ball_handler_row: int = 7
    # Defense AI
    advanced_defense_streak: int = 5
    rim_deny_distance: int = 4
    arc_deny_distance: int = 3
    contest_radius: int = 1
    arc_cells: FrozenSet[Cell] = field(init=False, repr=False, compare=False)
    layup_set: FrozenSet[Cell] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        free = sum(
            1
            for (x, y) in self.all_cells()
            if y not in self.reserved_rows and (x, y) != self.basket
        )
        if free < 2 * UNITS_PER_TEAM:
            raise ValueError(
                f"court has {free} playable cells; {2 * UNITS_PER_TEAM} units need a cell each"
            )
        # Frozen dataclass: derived lookup sets are attached once here.
        object.__setattr__(self, "arc_cells", frozenset(self.three_point_line))
        object.__setattr__(self, "layup_set", frozenset(self.layup_cells))

    def all_cells(self):
        """Every grid cell in row-major order (row 0 first)."""
        return [(x, y) for y in range(self.grid_size) for x in range(self.grid_size)]

    def cell_index(self, cell: Cell) -> int:
        x, y = cell
        return y * self.grid_size + x


DEFAULT_COURT = CourtConfig()
