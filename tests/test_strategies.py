from tsumeball.envs.core.court import THREE_POINT_LINE
from tsumeball.envs.core.strategies import BACKDOOR_CELLS, Strategy, strategy_highlights


def test_pick_and_roll_marks_spots_around_ball_defender(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (4, 4)})
    assert strategy_highlights(units, Strategy.PICK_AND_ROLL) == [(5, 4), (3, 4), (4, 5), (4, 3)]


def test_pick_and_roll_drops_off_court_spots(make_units):
    units = make_units({"o1": (1, 7)}, {"d1": (0, 4)})
    assert strategy_highlights(units, Strategy.PICK_AND_ROLL) == [(1, 4), (0, 5), (0, 3)]


def test_static_templates(make_units):
    units = make_units({"o1": (4, 7)}, {"d1": (4, 4)})
    assert strategy_highlights(units, Strategy.FLOOR_SPACING) == list(THREE_POINT_LINE)
    assert strategy_highlights(units, Strategy.BACKDOOR_CUT) == list(BACKDOOR_CELLS)
    assert strategy_highlights(units, None) == []
