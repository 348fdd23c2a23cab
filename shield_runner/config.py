from dataclasses import dataclass
from enum import Enum


class ShieldHitPolicy(Enum):
    """What happens when a falling obstacle reaches the body while the shield is up."""
    BREAK = "break"  # shield breaks, obstacle consumed, run continues
    FATAL = "fatal"  # body contact always ends the run


@dataclass(frozen=True)
class GameConfig:
    # --- Screen ---
    SCREEN_WIDTH: int = 800
    SCREEN_HEIGHT: int = 375
    GROUND_Y: int = 325
    FPS: int = 60

    # --- Runner physics ---
    RUNNER_X: int = 80
    RUNNER_WIDTH: int = 40
    RUNNER_HEIGHT: int = 50
    GRAVITY: float = 0.8
    JUMP_FORCE: float = -15.0
    PARACHUTE_FACTOR: float = 0.5

    # --- Scroll speed ---
    BASE_SPEED: float = 5.0
    MAX_SPEED: float = 18.0
    SPEED_INCREMENT: float = 0.002

    # --- Ground obstacles ---
    CACTUS_PRESETS: tuple = ((20, 40), (25, 50), (35, 45))
    CACTUS_SPAWN_OFFSET: int = 50
    CACTUS_MIN_INTERVAL: int = 50
    CACTUS_BASE_INTERVAL: int = 140
    CACTUS_INTERVAL_PER_SPEED: float = 6.0
    CACTUS_JITTER: int = 80
    EARLY_GAME_TICKS: int = 1200
    EARLY_GAME_GRACE: int = 40

    # --- Falling obstacles ---
    DIFFICULTY_RAMP_TICKS: int = 3000
    ASTEROID_MIN_SCORE: int = 110
    ASTEROID_FLANK_CHANCE: float = 0.1
    ASTEROID_BASE_CHANCE: float = 0.008
    ASTEROID_CHANCE_RAMP: float = 0.042
    ASTEROID_BASE_INTERVAL: int = 180
    ASTEROID_INTERVAL_RAMP: int = 120
    ASTEROID_MIN_INTERVAL: int = 60
    ASTEROID_LEVEL_GATE: int = 6
    ASTEROID_GATED_EXTRA_INTERVAL: int = 80
    ASTEROID_SLOW_FALL_MAX_LEVEL: int = 5
    JUMP_ZONE: tuple = (50, 200)       # ahead of the runner's x
    THREAT_COLUMN: tuple = (-40, 60)   # around the runner's x

    # --- Progression ---
    POINTS_PER_LEVEL: int = 250
    MAX_LEVEL: int = 10
    SCORE_INTERVAL: int = 5
    LEVEL_UP_FLOURISH: int = 120
    LANDMARK_RISE: float = 0.8
    LANDMARK_FALL: float = 1.2

    # --- Scoring ---
    NEAR_MISS_CLEARANCE: int = 25
    NEAR_MISS_BONUS: int = 25
    PERFECT_BLOCK_DISTANCE: int = 20
    PERFECT_BLOCK_BONUS: int = 50
    NICE_BLOCK_DISTANCE: int = 45
    NICE_BLOCK_BONUS: int = 25
    BLOCK_BONUS: int = 10
    FATAL_PENALTY: int = 10

    shielded_body_hit: ShieldHitPolicy = ShieldHitPolicy.BREAK

    # --- Presentation ---
    SHAKE_TICKS: int = 18
    BONUS_TEXT_LIFE: int = 60

    # --- Environment ---
    MAX_STEPS: int = 20000

    def __post_init__(self):
        if not isinstance(self.shielded_body_hit, ShieldHitPolicy):
            raise ValueError(f"shielded_body_hit must be a ShieldHitPolicy, got {self.shielded_body_hit!r}")
        if self.POINTS_PER_LEVEL <= 0 or self.MAX_LEVEL < 1:
            raise ValueError("POINTS_PER_LEVEL and MAX_LEVEL must be positive")

    @property
    def WIN_SCORE(self):
        return self.MAX_LEVEL * self.POINTS_PER_LEVEL + self.POINTS_PER_LEVEL
