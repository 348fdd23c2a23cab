import logging
from dataclasses import dataclass, asdict

from .geometry import Box

logger = logging.getLogger(__name__)

OVERHEAD = "overhead"
FLANK = "flank"
SHAPE_POINTS = 8


@dataclass
class Cactus:
    id: int
    x: float
    y: float
    width: int
    height: int

    @property
    def box(self):
        return Box(self.x, self.y, self.width, self.height)


@dataclass
class Asteroid:
    id: int
    x: float
    y: float
    size: float
    speed_x: float
    speed_y: float
    rotation: float
    rotation_speed: float
    shape: list
    approach: str = OVERHEAD

    @property
    def box(self):
        return Box(self.x, self.y, self.size, self.size)

    @property
    def center(self):
        return (self.x + self.size / 2, self.y + self.size / 2)


class CactusPool:
    """Ground obstacles. They scroll left with the world and never move vertically."""

    def __init__(self, config, rng):
        self.config = config
        self.rng = rng
        self.items = []
        self.next_id = 0

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def clear(self):
        self.items = []
        self.next_id = 0

    def spawn(self):
        presets = self.config.CACTUS_PRESETS
        width, height = presets[int(self.rng.integers(0, len(presets)))]
        cactus = Cactus(
            id=self.next_id,
            x=float(self.config.SCREEN_WIDTH + self.config.CACTUS_SPAWN_OFFSET),
            y=float(self.config.GROUND_Y - height),
            width=width,
            height=height,
        )
        self.next_id += 1
        self.items.append(cactus)
        logger.debug("Spawned cactus %d (%dx%d)", cactus.id, width, height)
        return cactus

    def advance(self, speed):
        """Scroll every cactus left. Returns the ids culled off the leading edge."""
        culled = []
        kept = []
        for cactus in self.items:
            cactus.x -= speed
            if cactus.x + cactus.width < 0:
                culled.append(cactus.id)
            else:
                kept.append(cactus)
        self.items = kept
        return culled

    def to_state(self):
        return {"items": [asdict(c) for c in self.items], "next_id": self.next_id}

    def load_state(self, state):
        self.items = [Cactus(**c) for c in state["items"]]
        self.next_id = state["next_id"]


class AsteroidPool:
    """Falling obstacles with their own velocity and spin."""

    OFFSCREEN_MARGIN = 50

    def __init__(self, config, rng):
        self.config = config
        self.rng = rng
        self.items = []
        self.next_id = 0

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def clear(self):
        self.items = []
        self.next_id = 0

    def fall_speed(self, difficulty, level):
        if level <= self.config.ASTEROID_SLOW_FALL_MAX_LEVEL:
            return 2.5 + difficulty * 1.5
        return 3.5 + difficulty * 2.5

    def spawn(self, runner_x, difficulty, level):
        size = 25 + self.rng.random() * 15
        base_fall = self.fall_speed(difficulty, level)
        y = -size - 20

        if self.rng.random() < self.config.ASTEROID_FLANK_CHANCE:
            # Comes in from the right; the runner scrolls into it as it drops.
            approach = FLANK
            x = self.config.SCREEN_WIDTH - 50 + self.rng.random() * 100
            speed_x = -(3 + self.rng.random() * 2)
            speed_y = base_fall * 0.8
        else:
            approach = OVERHEAD
            x = runner_x + (self.rng.random() - 0.5) * 60
            speed_x = (self.rng.random() - 0.5) * 0.8
            speed_y = base_fall + self.rng.random()

        # Fixed silhouette so the outline doesn't flicker between frames.
        shape = [0.7 + self.rng.random() * 0.3 for _ in range(SHAPE_POINTS)]

        asteroid = Asteroid(
            id=self.next_id,
            x=float(x),
            y=float(y),
            size=float(size),
            speed_x=float(speed_x),
            speed_y=float(speed_y),
            rotation=0.0,
            rotation_speed=float((self.rng.random() - 0.5) * 0.15),
            shape=[float(s) for s in shape],
            approach=approach,
        )
        self.next_id += 1
        self.items.append(asteroid)
        logger.debug("Spawned %s asteroid %d at x=%.1f", approach, asteroid.id, asteroid.x)
        return asteroid

    def advance(self):
        kept = []
        for asteroid in self.items:
            asteroid.x += asteroid.speed_x
            asteroid.y += asteroid.speed_y
            asteroid.rotation += asteroid.rotation_speed
            if asteroid.y > self.config.SCREEN_HEIGHT + self.OFFSCREEN_MARGIN or asteroid.x < -self.OFFSCREEN_MARGIN:
                continue
            kept.append(asteroid)
        self.items = kept

    def remove(self, asteroid):
        self.items = [a for a in self.items if a is not asteroid]

    def to_state(self):
        return {"items": [asdict(a) for a in self.items], "next_id": self.next_id}

    def load_state(self, state):
        self.items = [Asteroid(**a) for a in state["items"]]
        self.next_id = state["next_id"]
