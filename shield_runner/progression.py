import logging
from collections import namedtuple

logger = logging.getLogger(__name__)

NORMAL = "normal"
VOLCANO = "volcano"
ICE = "ice"
BEACH = "beach"
CIVILIZATION = "civilization"

# (first level, era), ascending. Adding an era means adding a row here and,
# if it has a landmark, a row in LANDMARKS.
ERAS = (
    (1, NORMAL),
    (2, VOLCANO),
    (4, ICE),
    (6, BEACH),
    (8, CIVILIZATION),
)

LandmarkSpec = namedtuple("LandmarkSpec", ["name", "era", "x", "width", "height"])

LANDMARKS = (
    LandmarkSpec("volcano", VOLCANO, 700, 80, 100),
    LandmarkSpec("iceberg", ICE, 700, 90, 120),
    LandmarkSpec("palm_tree", BEACH, 720, 50, 110),
    LandmarkSpec("tower", CIVILIZATION, 700, 60, 140),
)

LevelUp = namedtuple("LevelUp", ["level", "era", "era_changed"])


def era_for(level):
    era = ERAS[0][1]
    for first_level, name in ERAS:
        if level >= first_level:
            era = name
    return era


def landmark_targets(era):
    """Full height for the landmark of `era`, zero for every other one."""
    return {spec.name: (spec.height if spec.era == era else 0) for spec in LANDMARKS}


class Landmark:
    def __init__(self, spec):
        self.spec = spec
        self.current_height = 0.0
        self.target_height = 0.0

    @property
    def name(self):
        return self.spec.name

    def ease(self, rise, fall):
        if self.current_height < self.target_height:
            self.current_height = min(self.target_height, self.current_height + rise)
        elif self.current_height > self.target_height:
            self.current_height = max(self.target_height, self.current_height - fall)


class Progression:
    """Score, level and era for one run. Forward-only until reset()."""

    def __init__(self, config):
        self.config = config
        self.landmarks = {spec.name: Landmark(spec) for spec in LANDMARKS}
        self.reset()

    def reset(self):
        self.score = 0
        self.level = 1
        self.era = era_for(1)
        self.free_play = False
        self.level_up_timer = 0
        for landmark in self.landmarks.values():
            landmark.current_height = 0.0
            landmark.target_height = 0.0

    def level_for(self, score):
        return min(self.config.MAX_LEVEL, score // self.config.POINTS_PER_LEVEL + 1)

    def add_points(self, points):
        """Credit points and walk the level ladder one rung at a time."""
        if points < 0:
            raise ValueError(f"score never decreases, got {points}")
        self.score += points
        level_ups = []
        target = self.level_for(self.score)
        while self.level < target:
            level_ups.append(self._enter_level(self.level + 1))
        return level_ups

    def _enter_level(self, level):
        self.level = level
        self.level_up_timer = self.config.LEVEL_UP_FLOURISH
        era = era_for(level)
        era_changed = era != self.era
        if era_changed:
            self.era = era
            for name, height in landmark_targets(era).items():
                self.landmarks[name].target_height = height
            logger.info("Entered the %s era", era)
        logger.info("Level %d reached at score %d", level, self.score)
        # sfx: level_up
        return LevelUp(level, era, era_changed)

    def tick(self):
        if self.level_up_timer > 0:
            self.level_up_timer -= 1
        for landmark in self.landmarks.values():
            landmark.ease(self.config.LANDMARK_RISE, self.config.LANDMARK_FALL)

    @property
    def won(self):
        return not self.free_play and self.score >= self.config.WIN_SCORE

    def engage_free_play(self):
        self.free_play = True
        logger.info("Free play engaged at score %d", self.score)

    def to_state(self):
        return {
            "score": self.score,
            "level": self.level,
            "era": self.era,
            "free_play": self.free_play,
            "level_up_timer": self.level_up_timer,
            "landmarks": {
                name: [lm.current_height, lm.target_height] for name, lm in self.landmarks.items()
            },
        }

    def load_state(self, state):
        self.score = state["score"]
        self.level = state["level"]
        self.era = state["era"]
        self.free_play = state["free_play"]
        self.level_up_timer = state["level_up_timer"]
        for name, (current, target) in state["landmarks"].items():
            self.landmarks[name].current_height = current
            self.landmarks[name].target_height = target
