from tsumeball.envs.tsume_env import TsumeBasketballEnv

__all__ = ["TsumeBasketballEnv"]
