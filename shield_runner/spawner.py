import logging

logger = logging.getLogger(__name__)


class SpawnScheduler:
    """Decides when cacti and asteroids appear.

    Cacti come on a speed-dependent cadence with random jitter. Asteroids are
    probabilistic and only attempted behind a set of hard gates that keep the
    player from ever needing to jump and raise the shield at the same moment.
    """

    def __init__(self, config, rng):
        self.config = config
        self.rng = rng
        self.reset()

    def reset(self):
        self.last_cactus_tick = 0
        self.last_asteroid_tick = 0

    def difficulty(self, tick):
        return min(1.0, tick / self.config.DIFFICULTY_RAMP_TICKS)

    def cactus_interval(self, tick, speed):
        interval = max(
            self.config.CACTUS_MIN_INTERVAL,
            self.config.CACTUS_BASE_INTERVAL - speed * self.config.CACTUS_INTERVAL_PER_SPEED,
        )
        if tick < self.config.EARLY_GAME_TICKS:
            interval += self.config.EARLY_GAME_GRACE
        return interval

    def asteroid_interval(self, difficulty, level):
        interval = max(
            self.config.ASTEROID_MIN_INTERVAL,
            self.config.ASTEROID_BASE_INTERVAL - difficulty * self.config.ASTEROID_INTERVAL_RAMP,
        )
        if level < self.config.ASTEROID_LEVEL_GATE:
            interval += self.config.ASTEROID_GATED_EXTRA_INTERVAL
        return interval

    def asteroid_chance(self, difficulty, level):
        chance = self.config.ASTEROID_BASE_CHANCE + difficulty * self.config.ASTEROID_CHANCE_RAMP
        if level < self.config.ASTEROID_LEVEL_GATE:
            chance *= 0.5
        return chance

    def cactus_in_jump_zone(self, runner, cacti):
        start, end = self.config.JUMP_ZONE
        return any(runner.x + start < c.x < runner.x + end for c in cacti)

    def asteroid_threatening(self, runner, asteroids):
        left, right = self.config.THREAT_COLUMN
        return any(
            runner.x + left < a.x < runner.x + right and a.y < self.config.GROUND_Y
            for a in asteroids
        )

    def can_spawn_asteroid(self, tick, score, level, runner, cacti, asteroids):
        if score < self.config.ASTEROID_MIN_SCORE:
            return False
        if self.cactus_in_jump_zone(runner, cacti):
            return False
        if self.asteroid_threatening(runner, asteroids):
            return False
        difficulty = self.difficulty(tick)
        return tick - self.last_asteroid_tick > self.asteroid_interval(difficulty, level)

    def tick(self, tick, score, level, speed, runner, cacti, asteroids):
        """Run one scheduling pass. Returns the obstacles created this tick."""
        spawned = []

        jitter = self.rng.random() * self.config.CACTUS_JITTER
        if tick - self.last_cactus_tick > self.cactus_interval(tick, speed) + jitter:
            spawned.append(cacti.spawn())
            self.last_cactus_tick = tick

        # The probability draw only happens once every gate has passed.
        if self.can_spawn_asteroid(tick, score, level, runner, cacti, asteroids):
            difficulty = self.difficulty(tick)
            if self.rng.random() < self.asteroid_chance(difficulty, level):
                spawned.append(asteroids.spawn(runner.x, difficulty, level))
                self.last_asteroid_tick = tick

        return spawned

    def to_state(self):
        return {"last_cactus_tick": self.last_cactus_tick, "last_asteroid_tick": self.last_asteroid_tick}

    def load_state(self, state):
        self.last_cactus_tick = state["last_cactus_tick"]
        self.last_asteroid_tick = state["last_asteroid_tick"]
