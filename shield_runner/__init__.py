from .config import GameConfig, ShieldHitPolicy
from .driver import GameDriver, GameState
from .session import Session

__all__ = ["GameConfig", "ShieldHitPolicy", "GameDriver", "GameState", "Session", "RunnerEnv"]


def __getattr__(name):
    # The env pulls in gymnasium and a pygame surface; only load it when asked for.
    if name == "RunnerEnv":
        from .env import RunnerEnv
        return RunnerEnv
    raise AttributeError(name)
