import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so `import app.backend...` works in tests
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from tsumeball.envs.core.units import Role, Team, Unit  # noqa: E402

ROLES = (Role.PG, Role.SG, Role.SF, Role.PF, Role.C)


def build_units(offense, defense=None, carrier="o1"):
    """Fixed layout from ``{"o1": (x, y), ...}`` / ``{"d1": (x, y), ...}``.

    Defender ``dN`` guards ``oN``. Insertion order is snapshot order.
    """
    units = []
    for uid, pos in offense.items():
        role = ROLES[int(uid[1:]) - 1]
        units.append(Unit(uid, Team.OFFENSE, role, tuple(pos), has_ball=(uid == carrier), name=role.value))
    for uid, pos in (defense or {}).items():
        idx = int(uid[1:])
        units.append(
            Unit(uid, Team.DEFENSE, ROLES[idx - 1], tuple(pos), assigned_to=f"o{idx}", name=f"D{idx}")
        )
    return tuple(units)


@pytest.fixture
def make_units():
    return build_units
