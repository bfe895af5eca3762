from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

import numpy as np

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.geometry import is_adjacent, is_on_three_point_arc, is_playable, is_three_point_area
from tsumeball.envs.core.units import Role, Team, Unit

logger = logging.getLogger(__name__)

# (id, role) per slot; the first slot carries the ball.
OFFENSE_SLOTS: Tuple[Tuple[str, Role], ...] = (
    ("o1", Role.PG),
    ("o2", Role.SG),
    ("o3", Role.SF),
    ("o4", Role.PF),
    ("o5", Role.C),
)
OUTSIDE_SLOTS = OFFENSE_SLOTS[1:3]
INSIDE_SLOTS = OFFENSE_SLOTS[3:5]


def _shuffled(cells: List[Cell], rng: np.random.Generator) -> List[Cell]:
    order = rng.permutation(len(cells))
    return [cells[int(i)] for i in order]


def generate_scenario(
    rng: Optional[np.random.Generator] = None, court: CourtConfig = DEFAULT_COURT
) -> Tuple[Unit, ...]:
    """
    Generate a fresh 5-on-5 layout for a new possession:
    - PG (with the ball) on the ball-handler row.
    - SG/SF in the three-point area ahead of the PG.
    - PF/C inside the arc ahead of the PG.
    - One defender per offensive unit, inside the arc or on it, matched by role.
    Within each group, cells next to an already placed teammate are avoided
    while a spaced option remains. When a pool runs dry placement falls back
    to any free cell. ``CourtConfig`` guarantees a cell for every unit, so
    generation always completes.
    """
    if rng is None:
        rng = np.random.default_rng()

    taken: Set[Cell] = {court.basket}
    playable = [cell for cell in court.all_cells() if is_playable(cell, court)]

    ahead = [c for c in playable if c[1] < court.ball_handler_row]
    pg_pool = _shuffled([c for c in playable if c[1] == court.ball_handler_row], rng)
    outside_pool = _shuffled([c for c in ahead if is_three_point_area(c, court)], rng)
    inside_pool = _shuffled([c for c in ahead if not is_three_point_area(c, court)], rng)
    defense_pool = _shuffled(
        [c for c in playable if not is_three_point_area(c, court) or is_on_three_point_arc(c, court)],
        rng,
    )

    units: List[Unit] = []

    def teammate_adjacent(cell: Cell, team: Team) -> bool:
        return any(u.team == team and is_adjacent(u.position, cell) for u in units)

    def pick(pool: List[Cell], team: Team) -> Cell:
        for cell in pool:
            if cell not in taken and not teammate_adjacent(cell, team):
                return cell
        for cell in pool:
            if cell not in taken:
                logger.debug("No spaced cell left for %s; using %s", team.value, cell)
                return cell
        for cell in playable:
            if cell not in taken:
                logger.debug("Pool exhausted for %s; falling back to %s", team.value, cell)
                return cell
        raise RuntimeError("court has fewer playable cells than units")

    def place(unit: Unit) -> None:
        taken.add(unit.position)
        units.append(unit)

    pg_id, pg_role = OFFENSE_SLOTS[0]
    place(Unit(pg_id, Team.OFFENSE, pg_role, pick(pg_pool, Team.OFFENSE), has_ball=True, name=pg_role.value))

    for uid, role in OUTSIDE_SLOTS:
        place(Unit(uid, Team.OFFENSE, role, pick(outside_pool, Team.OFFENSE), name=role.value))

    for uid, role in INSIDE_SLOTS:
        place(Unit(uid, Team.OFFENSE, role, pick(inside_pool, Team.OFFENSE), name=role.value))

    for idx, (off_id, role) in enumerate(OFFENSE_SLOTS, start=1):
        place(
            Unit(
                f"d{idx}",
                Team.DEFENSE,
                role,
                pick(defense_pool, Team.DEFENSE),
                assigned_to=off_id,
                name=f"D{idx}",
            )
        )

    return tuple(units)
