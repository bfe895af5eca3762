from __future__ import annotations

from typing import Iterable, List, Optional, Set

from tsumeball.envs.core.court import DEFAULT_COURT, Cell, CourtConfig
from tsumeball.envs.core.geometry import (
    chebyshev_distance,
    is_orthogonal_adjacent,
    is_playable,
    midpoint,
    neighbor_cells,
)
from tsumeball.envs.core.units import Unit, Units, ball_carrier, defense_units, offense_units


def is_screened(defender: Unit, units: Iterable[Unit]) -> bool:
    """A defender sharing an edge with any offensive unit cannot move.

    The ball carrier counts too, so a screen holds when the ball is passed
    to the screener.
    """
    return any(is_orthogonal_adjacent(o.position, defender.position) for o in offense_units(units))


def screened_defender_ids(units: Iterable[Unit]) -> Set[str]:
    units = list(units)
    return {d.id for d in defense_units(units) if is_screened(d, units)}


def candidate_moves(defender: Unit, units: Iterable[Unit], court: CourtConfig = DEFAULT_COURT) -> List[Cell]:
    """Own cell first, then free playable neighbors. The basket is allowed."""
    occupied = {u.position for u in units if u.id != defender.id}
    moves: List[Cell] = [defender.position]
    for cell in neighbor_cells(defender.position):
        if is_playable(cell, court) and cell not in occupied:
            moves.append(cell)
    return moves


def _closest_to(moves: List[Cell], target: Cell) -> Cell:
    # sorted() is stable, so the defender's own cell wins exact ties.
    return sorted(moves, key=lambda m: chebyshev_distance(m, target))[0]


def _advanced_target(
    moves: List[Cell], carrier: Unit, court: CourtConfig
) -> Optional[Cell]:
    """Rim and arc denial used once the streak is long enough."""
    if chebyshev_distance(carrier.position, court.basket) <= court.rim_deny_distance:
        if court.basket in moves:
            return court.basket

    nearby_arc = [
        arc for arc in court.three_point_line
        if chebyshev_distance(carrier.position, arc) <= court.arc_deny_distance
    ]
    for arc in nearby_arc:
        for move in moves:
            if chebyshev_distance(move, arc) <= 1 and move != arc:
                return move
    return None


def _standard_target(defender: Unit, offense: List[Unit], carrier: Unit, court: CourtConfig) -> Optional[Cell]:
    """Ball man sits between carrier and rim; everyone else denies the lane."""
    if defender.assigned_to == carrier.id:
        return midpoint(carrier.position, court.basket)
    assigned = next((o for o in offense if o.id == defender.assigned_to), None)
    if assigned is not None:
        return midpoint(carrier.position, assigned.position)
    return None


def apply_defense_turn(units: Units, streak: int = 0, court: CourtConfig = DEFAULT_COURT) -> Units:
    """Reposition every defender by one step in reaction to a completed pass.

    Defenders move in snapshot order and each one sees where the earlier
    ones ended up. Returns a new snapshot; ``units`` is left untouched.
    """
    carrier = ball_carrier(units)
    if carrier is None:
        return tuple(units)

    current = list(units)
    offense = offense_units(current)
    advanced = streak >= court.advanced_defense_streak

    for idx, unit in enumerate(current):
        if not unit.is_defense:
            continue
        if is_screened(unit, offense):
            continue

        moves = candidate_moves(unit, current, court)
        target_pos = unit.position

        chosen = _advanced_target(moves, carrier, court) if advanced else None
        if chosen is None:
            ideal = _standard_target(unit, offense, carrier, court)
            if ideal is not None:
                chosen = _closest_to(moves, ideal)
        if chosen is not None:
            target_pos = chosen

        if target_pos != unit.position:
            current[idx] = unit.moved_to(target_pos)

    return tuple(current)
