from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

from tsumeball.envs.core.court import Cell


class Team(Enum):
    OFFENSE = "offense"
    DEFENSE = "defense"


class Role(Enum):
    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"


@dataclass(frozen=True)
class Unit:
    """One player on the court. Instances are never mutated; use ``moved_to``."""

    id: str
    team: Team
    role: Role
    position: Cell
    has_ball: bool = False
    assigned_to: Optional[str] = None
    name: str = ""

    @property
    def is_offense(self) -> bool:
        return self.team == Team.OFFENSE

    @property
    def is_defense(self) -> bool:
        return self.team == Team.DEFENSE

    def moved_to(self, position: Cell) -> "Unit":
        return replace(self, position=(int(position[0]), int(position[1])))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "team": self.team.value,
            "role": self.role.value,
            "position": list(self.position),
            "has_ball": self.has_ball,
            "assigned_to": self.assigned_to,
            "name": self.name,
        }


Units = Tuple[Unit, ...]


def offense_units(units: Iterable[Unit]) -> list[Unit]:
    return [u for u in units if u.is_offense]


def defense_units(units: Iterable[Unit]) -> list[Unit]:
    return [u for u in units if u.is_defense]


def find_unit(units: Iterable[Unit], unit_id: str) -> Unit:
    for unit in units:
        if unit.id == unit_id:
            return unit
    raise KeyError(f"unknown unit id: {unit_id}")


def unit_at(position: Cell, units: Iterable[Unit]) -> Optional[Unit]:
    for unit in units:
        if unit.position == tuple(position):
            return unit
    return None


def ball_carrier(units: Iterable[Unit]) -> Optional[Unit]:
    for unit in units:
        if unit.is_offense and unit.has_ball:
            return unit
    return None


def defender_at(position: Cell, units: Iterable[Unit]) -> bool:
    """True if a defensive unit stands on ``position``."""
    pos = tuple(position)
    return any(u.is_defense and u.position == pos for u in units)


def relocate(units: Units, unit_id: str, position: Cell) -> Units:
    """Return a new snapshot with ``unit_id`` moved to ``position``."""
    find_unit(units, unit_id)
    return tuple(u.moved_to(position) if u.id == unit_id else u for u in units)


def transfer_ball(units: Units, from_id: str, to_id: str) -> Units:
    """Return a new snapshot with the ball handed from one unit to another."""
    find_unit(units, from_id)
    find_unit(units, to_id)
    out = []
    for u in units:
        if u.id == from_id:
            out.append(replace(u, has_ball=False))
        elif u.id == to_id:
            out.append(replace(u, has_ball=True))
        else:
            out.append(u)
    return tuple(out)
