import numpy as np

from tsumeball.envs.core.actions import ActionType
from tsumeball.envs.tsume_env import TsumeBasketballEnv
from tsumeball.utils.wrappers import EpisodeStatsWrapper

OFFENSE = {"o1": (4, 5), "o2": (1, 6), "o3": (7, 6), "o4": (3, 2), "o5": (5, 2)}
DEFENSE = {"d1": (4, 3), "d2": (2, 8), "d3": (6, 8), "d4": (2, 2), "d5": (6, 2)}


def test_stats_reported_on_final_step(make_units):
    env = EpisodeStatsWrapper(TsumeBasketballEnv(initial_units=make_units(OFFENSE, DEFENSE)))
    env.reset()
    # An illegal shot during support moves is counted but does not advance play
    _, _, _, _, info = env.step(ActionType.SHOOT.value)
    assert "episode_stats" not in info
    for _ in range(5):
        env.step(ActionType.STAY.value)
    _, _, terminated, _, info = env.step(ActionType.SHOOT.value)
    assert terminated

    stats = info["episode_stats"]
    assert stats["made_3pt"] == 1
    assert stats["made_layup"] == 0
    assert stats["shot_attempts"] == 1
    assert stats["blocked_shots"] == 0
    assert stats["illegal_actions"] == 1
    assert stats["passes"] == 0
    assert stats["points"] == 3.0
    assert stats["steps"] == 7
    assert stats["outcome"] == "scored"


def test_stats_reset_between_episodes():
    env = EpisodeStatsWrapper(TsumeBasketballEnv(seed=2))
    rng = np.random.default_rng(2)
    for _ in range(3):
        env.reset()
        while True:
            action = int(rng.choice(np.flatnonzero(env.unwrapped.action_masks())))
            _, _, terminated, truncated, info = env.step(action)
            if terminated or truncated:
                break
        stats = info["episode_stats"]
        assert stats["illegal_actions"] == 0
        assert stats["steps"] >= 1
        assert stats["passes"] <= 4
