import logging

from .geometry import Box

logger = logging.getLogger(__name__)


class Runner:
    """The player character. `y` is the feet line; it rests on GROUND_Y."""

    HITBOX_INSET_TOP = 10
    HITBOX_INSET_RIGHT = 5
    SHIELD_OFFSET_X = -25
    SHIELD_HEIGHT_ABOVE = 60
    SHIELD_WIDTH = 90
    SHIELD_HEIGHT = 80

    def __init__(self, config):
        self.config = config
        self.x = config.RUNNER_X
        self.width = config.RUNNER_WIDTH
        self.height = config.RUNNER_HEIGHT
        self.reset()

    def reset(self):
        self.y = self.config.GROUND_Y
        self.velocity_y = 0.0
        self.airborne = False
        self.shield_active = False
        self.shield_locked = False

    def update(self, jump_held, shield_held):
        """Integrate one tick. Returns (jump_started, shield_opened)."""
        jump_started = False
        shield_opened = False

        # Shield can go up at any time, mid-air included, unless it broke
        # and the button has not been released since.
        if shield_held:
            if not self.shield_locked:
                shield_opened = not self.shield_active
                self.shield_active = True
        else:
            self.shield_active = False
            self.shield_locked = False

        if jump_held and not self.airborne and not self.shield_active:
            self.velocity_y = self.config.JUMP_FORCE
            self.airborne = True
            jump_started = True
            # sfx: jump

        self.velocity_y += self.config.GRAVITY

        if self.shield_active and self.velocity_y > 0:
            self.y += self.velocity_y * self.config.PARACHUTE_FACTOR
        else:
            self.y += self.velocity_y

        if self.y >= self.config.GROUND_Y:
            self.y = self.config.GROUND_Y
            self.velocity_y = 0.0
            self.airborne = False

        return jump_started, shield_opened

    def break_shield(self):
        self.shield_active = False
        self.shield_locked = True
        logger.debug("Shield broke at y=%.1f", self.y)

    @property
    def top(self):
        return self.y - self.height

    def hitbox(self):
        # Inset from the sprite so edge pixels (tail, snout) don't register.
        return Box(
            self.x,
            self.top + self.HITBOX_INSET_TOP,
            self.width - self.HITBOX_INSET_RIGHT,
            self.height - self.HITBOX_INSET_TOP,
        )

    def shield_hitbox(self):
        return Box(
            self.x + self.SHIELD_OFFSET_X,
            self.top - self.SHIELD_HEIGHT_ABOVE,
            self.SHIELD_WIDTH,
            self.SHIELD_HEIGHT,
        )

    def to_state(self):
        return {
            "y": self.y,
            "velocity_y": self.velocity_y,
            "airborne": self.airborne,
            "shield_active": self.shield_active,
            "shield_locked": self.shield_locked,
        }

    def load_state(self, state):
        self.y = state["y"]
        self.velocity_y = state["velocity_y"]
        self.airborne = state["airborne"]
        self.shield_active = state["shield_active"]
        self.shield_locked = state["shield_locked"]
