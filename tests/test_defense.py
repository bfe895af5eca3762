from tsumeball.envs.core.defense import apply_defense_turn, is_screened, screened_defender_ids
from tsumeball.envs.core.units import find_unit


def _pos(units, uid):
    return find_unit(units, uid).position


def test_edge_contact_screens_diagonal_does_not(make_units):
    units = make_units({"o1": (4, 7), "o2": (2, 3)}, {"d1": (2, 4), "d2": (3, 2)})
    assert is_screened(find_unit(units, "d1"), units)
    assert not is_screened(find_unit(units, "d2"), units)
    assert screened_defender_ids(units) == {"d1"}


def test_screened_defender_stays_put(make_units):
    units = make_units({"o1": (4, 7), "o2": (2, 3)}, {"d2": (2, 4)})
    after = apply_defense_turn(units)
    assert _pos(after, "d2") == (2, 4)


def test_ball_carrier_screens_its_own_defender(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (4, 6)})
    assert is_screened(find_unit(units, "d1"), units)
    after = apply_defense_turn(units)
    assert _pos(after, "d1") == (4, 6)


def test_ball_defender_steps_toward_rim_line(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (6, 6)})
    after = apply_defense_turn(units)
    # Midpoint of carrier and basket is (4, 4)
    assert _pos(after, "d1") == (5, 5)
    assert _pos(units, "d1") == (6, 6)


def test_denial_tie_goes_to_first_neighbor(make_units):
    units = make_units({"o1": (4, 7), "o2": (0, 3)}, {"d2": (3, 3)})
    after = apply_defense_turn(units)
    assert _pos(after, "d2") == (2, 4)


def test_defender_already_on_target_holds(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (4, 4)})
    assert apply_defense_turn(units) == units


def test_defenders_move_in_order_and_see_earlier_moves(make_units):
    units = make_units({"o1": (4, 7), "o2": (3, 1)}, {"d1": (3, 5), "d2": (5, 5)})
    after = apply_defense_turn(units)
    assert _pos(after, "d1") == (4, 4)
    # (4, 4) is taken now, so d2 keeps its own cell on the tie
    assert _pos(after, "d2") == (5, 5)


def test_advanced_defense_takes_the_rim(make_units):
    units = make_units({"o1": (4, 5)}, {"d1": (5, 2)})
    assert _pos(apply_defense_turn(units, streak=5), "d1") == (4, 1)
    assert _pos(apply_defense_turn(units, streak=4), "d1") == (4, 3)


def test_advanced_defense_denies_arc(make_units):
    units = make_units({"o1": (4, 8)}, {"d1": (3, 7)})
    assert _pos(apply_defense_turn(units, streak=5), "d1") == (2, 6)
    assert _pos(apply_defense_turn(units, streak=0), "d1") == (3, 6)


def test_no_carrier_no_change(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (6, 6)}, carrier=None)
    assert apply_defense_turn(units) == units
