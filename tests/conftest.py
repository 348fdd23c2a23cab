import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from shield_runner.config import GameConfig
from shield_runner.session import Session


class StubRng:
    """Stands in for np.random.Generator with fixed draws."""

    def __init__(self, value=0.0, integer=0):
        self.value = value
        self.integer = integer
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value

    def integers(self, low, high=None):
        self.calls += 1
        return self.integer


def freeze_spawns(session):
    # Push both cadences far into the future so nothing appears on its own.
    session.spawner.last_cactus_tick = 10 ** 9
    session.spawner.last_asteroid_tick = 10 ** 9


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def session(config):
    s = Session(config, np.random.default_rng(1234))
    return s
