import copy
import heapq
import logging
from collections import namedtuple

import numpy as np

from .actor import Runner
from .collision import FATAL, CollisionResolver
from .config import GameConfig
from .effects import EffectQueue, Effects
from .obstacles import AsteroidPool, CactusPool
from .progression import Progression
from .spawner import SpawnScheduler

logger = logging.getLogger(__name__)

TickResult = namedtuple("TickResult", ["events", "level_ups", "fatal"])

Snapshot = namedtuple("Snapshot", [
    "tick", "speed", "runner", "cacti", "asteroids", "particles", "fire_particles",
    "eruption_particles", "bonus_texts", "clouds", "ground_lines", "landmarks",
    "score", "level", "era", "free_play", "level_up_timer",
])


class Session:
    """Everything mutable about one run, owned in one place.

    Subsystems get the pieces they need from here; score and level only
    change through award(), so level-up side effects are never missed.
    """

    def __init__(self, config=None, rng=None):
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.runner = Runner(self.config)
        self.cacti = CactusPool(self.config, self.rng)
        self.asteroids = AsteroidPool(self.config, self.rng)
        self.spawner = SpawnScheduler(self.config, self.rng)
        self.progression = Progression(self.config)
        self.effects = Effects(self.config, self.rng)
        self.effects_queue = EffectQueue(self.config.FPS)
        self.resolver = CollisionResolver(self.config)
        self.reset()

    def reset(self):
        self.tick_count = 0
        self.speed = self.config.BASE_SPEED
        self.scored_cacti = set()
        self._level_ups = []
        self.runner.reset()
        self.cacti.clear()
        self.asteroids.clear()
        self.spawner.reset()
        self.progression.reset()
        self.effects.reset()
        self.effects_queue.clear()

    # --- progression accessors ---

    @property
    def score(self):
        return self.progression.score

    @property
    def level(self):
        return self.progression.level

    @property
    def era(self):
        return self.progression.era

    @property
    def won(self):
        return self.progression.won

    def award(self, points):
        level_ups = self.progression.add_points(points)
        for level_up in level_ups:
            self.effects.bonus_text(self.config.SCREEN_WIDTH / 2, 80, f"LEVEL {level_up.level}")
            self.effects_queue.schedule_sound("level_up")
        self._level_ups.extend(level_ups)
        return level_ups

    def engage_free_play(self):
        self.progression.engage_free_play()

    # --- simulation ---

    def tick(self, jump_held=False, shield_held=False):
        self.tick_count += 1
        self._level_ups = []
        self.speed = min(self.config.MAX_SPEED, self.config.BASE_SPEED + self.tick_count * self.config.SPEED_INCREMENT)
        self.progression.tick()

        jump_started, shield_opened = self.runner.update(jump_held, shield_held)
        if jump_started:
            self.effects_queue.schedule_sound("jump")
        if shield_opened:
            self.effects_queue.schedule_sound("shield_open")

        culled = self.cacti.advance(self.speed)
        self.scored_cacti.difference_update(culled)
        self.asteroids.advance()
        self.effects.update(self.speed, self.era, self.asteroids, self.progression.landmarks["volcano"])

        self.spawner.tick(self.tick_count, self.score, self.level, self.speed, self.runner, self.cacti, self.asteroids)

        events = self.resolver.resolve(self)
        fatal = any(e.kind == FATAL for e in events)

        # The cadence point still lands on a fatal tick.
        if self.tick_count % self.config.SCORE_INTERVAL == 0:
            self.award(1)

        return TickResult(events, list(self._level_ups), fatal)

    # --- views and persistence of the run ---

    def snapshot(self):
        runner = self.runner
        return Snapshot(
            tick=self.tick_count,
            speed=self.speed,
            runner={
                "x": runner.x,
                "y": runner.y,
                "width": runner.width,
                "height": runner.height,
                "airborne": runner.airborne,
                "shield_active": runner.shield_active,
                "shield_locked": runner.shield_locked,
                "hitbox": runner.hitbox(),
                "shield_hitbox": runner.shield_hitbox(),
            },
            cacti=tuple(copy.deepcopy(c) for c in self.cacti),
            asteroids=tuple(copy.deepcopy(a) for a in self.asteroids),
            particles=copy.deepcopy(self.effects.particles),
            fire_particles=copy.deepcopy(self.effects.fire_particles),
            eruption_particles=copy.deepcopy(self.effects.eruption_particles),
            bonus_texts=copy.deepcopy(self.effects.bonus_texts),
            clouds=copy.deepcopy(self.effects.clouds),
            ground_lines=copy.deepcopy(self.effects.ground_lines),
            landmarks={name: (lm.spec, lm.current_height) for name, lm in self.progression.landmarks.items()},
            score=self.score,
            level=self.level,
            era=self.era,
            free_play=self.progression.free_play,
            level_up_timer=self.progression.level_up_timer,
        )

    def to_state(self):
        """Plain-data copy of the run, random generator included."""
        queue = self.effects_queue
        return copy.deepcopy({
            "tick": self.tick_count,
            "speed": self.speed,
            "scored_cacti": sorted(self.scored_cacti),
            "runner": self.runner.to_state(),
            "cacti": self.cacti.to_state(),
            "asteroids": self.asteroids.to_state(),
            "spawner": self.spawner.to_state(),
            "progression": self.progression.to_state(),
            "effects": self.effects.to_state(),
            "effects_queue": {"clock": queue.clock, "seq": queue._seq, "heap": [list(e) for e in queue._heap]},
            "rng": self.rng.bit_generator.state,
        })

    @classmethod
    def from_state(cls, state, config=None):
        state = copy.deepcopy(state)
        bit_generator = getattr(np.random, state["rng"]["bit_generator"])()
        session = cls(config, rng=np.random.Generator(bit_generator))
        session.tick_count = state["tick"]
        session.speed = state["speed"]
        session.scored_cacti = set(state["scored_cacti"])
        session.runner.load_state(state["runner"])
        session.cacti.load_state(state["cacti"])
        session.asteroids.load_state(state["asteroids"])
        session.spawner.load_state(state["spawner"])
        session.progression.load_state(state["progression"])
        session.effects.load_state(state["effects"])
        queue = session.effects_queue
        queue.clock = state["effects_queue"]["clock"]
        queue._seq = state["effects_queue"]["seq"]
        queue._heap = [tuple(e) for e in state["effects_queue"]["heap"]]
        heapq.heapify(queue._heap)
        # Restore last: construction above consumed draws for the scenery.
        session.rng.bit_generator.state = state["rng"]
        return session
