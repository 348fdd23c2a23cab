import heapq
import logging

logger = logging.getLogger(__name__)

SOUND = "sound"
SHAKE_ON = "shake_on"
SHAKE_OFF = "shake_off"

# name -> [(delay_ms, frequency_hz, duration_s, waveform, volume)]
SOUND_CUES = {
    "start": [(0, 440, 0.1, "square", 0.2), (80, 550, 0.1, "square", 0.2), (160, 660, 0.15, "square", 0.2)],
    "jump": [(0, 400, 0.1, "square", 0.2), (50, 600, 0.1, "square", 0.15)],
    "shield_open": [(0, 300, 0.15, "sine", 0.2), (50, 450, 0.1, "sine", 0.15)],
    "block": [(0, 800, 0.05, "square", 0.25), (30, 600, 0.1, "square", 0.2), (60, 400, 0.15, "square", 0.15)],
    "shield_break": [(0, 200, 0.1, "sawtooth", 0.3), (50, 150, 0.15, "sawtooth", 0.25), (100, 100, 0.2, "sawtooth", 0.2)],
    "bonus": [(0, 880, 0.08, "sine", 0.2), (60, 1100, 0.1, "sine", 0.15)],
    "level_up": [(i * 100, f, 0.15, "square", 0.2) for i, f in enumerate((523, 659, 784, 1047))],
    "game_over": [(i * 150, f, 0.2, "square", 0.25) for i, f in enumerate((400, 350, 300, 200))],
}


def _fanfare():
    notes = (523, 659, 784, 1047, 1047, 784, 1047)
    durations = (0.15, 0.15, 0.15, 0.3, 0.15, 0.15, 0.4)
    steps = []
    t = 0.0
    for freq, dur in zip(notes, durations):
        steps.append((int(t), freq, dur, "square", 0.25))
        t += dur * 700
    return steps


SOUND_CUES["victory"] = _fanfare()


class EffectQueue:
    """Deadline-ordered transient effects, driven by a tick clock instead of wall time.

    Whoever owns the clock decides when it advances; a paused game simply
    stops calling advance() and every pending note or shake freezes with it.
    """

    def __init__(self, fps=60):
        self.fps = fps
        self.clear()

    def clear(self):
        self.clock = 0
        self._heap = []
        self._seq = 0

    def __len__(self):
        return len(self._heap)

    def schedule(self, delay_ticks, kind, payload=None):
        heapq.heappush(self._heap, (self.clock + delay_ticks, self._seq, kind, payload))
        self._seq += 1

    def schedule_sound(self, name):
        for delay_ms, freq, duration, waveform, volume in SOUND_CUES[name]:
            delay = round(delay_ms * self.fps / 1000)
            self.schedule(delay, SOUND, {"cue": name, "freq": freq, "duration": duration,
                                         "waveform": waveform, "volume": volume})

    def advance(self):
        """Move the clock one tick and pop everything now due, in schedule order."""
        due = []
        while self._heap and self._heap[0][0] <= self.clock:
            _, _, kind, payload = heapq.heappop(self._heap)
            due.append((kind, payload))
        self.clock += 1
        return due


class Effects:
    """Cosmetic simulation state: particles, floating texts, scenery.

    None of this affects collisions, but it draws from the session's random
    source, so it is advanced inside the tick to keep replays identical.
    """

    CLOUD_COUNT = 5
    GROUND_LINE_COUNT = 20

    def __init__(self, config, rng):
        self.config = config
        self.rng = rng
        self.particles = []
        self.bonus_texts = []
        self.fire_particles = []
        self.eruption_particles = []
        self.clouds = []
        self.ground_lines = []

    def reset(self):
        self.particles = []
        self.bonus_texts = []
        self.fire_particles = []
        self.eruption_particles = []
        self.init_scenery()

    def init_scenery(self):
        width = self.config.SCREEN_WIDTH
        self.clouds = [
            {"x": self.rng.random() * width, "y": 30 + self.rng.random() * 50, "width": 40 + self.rng.random() * 30}
            for _ in range(self.CLOUD_COUNT)
        ]
        self.ground_lines = [
            {"x": self.rng.random() * width, "width": 10 + self.rng.random() * 30}
            for _ in range(self.GROUND_LINE_COUNT)
        ]

    def block_burst(self, x, y, count=8):
        for _ in range(count):
            self.particles.append({
                "pos": [x, y],
                "vel": [(self.rng.random() - 0.5) * 8, (self.rng.random() - 0.5) * 8],
                "life": 20,
                "max_life": 20,
                "size": 3 + self.rng.random() * 4,
            })

    def bonus_text(self, x, y, text):
        self.bonus_texts.append({"pos": [x, y], "text": text, "life": self.config.BONUS_TEXT_LIFE, "vy": -2.0})

    def update(self, speed, era, asteroids, volcano):
        self._update_scenery(speed)
        self._update_eruption(volcano)
        self._update_fire_trails(era, asteroids)

        for p in self.particles:
            p["pos"][0] += p["vel"][0]
            p["pos"][1] += p["vel"][1]
            p["vel"][1] += 0.3
            p["life"] -= 1
        self.particles = [p for p in self.particles if p["life"] > 0]

        for bt in self.bonus_texts:
            bt["pos"][1] += bt["vy"]
            bt["vy"] *= 0.95
            bt["life"] -= 1
        self.bonus_texts = [bt for bt in self.bonus_texts if bt["life"] > 0]

    def _update_scenery(self, speed):
        width = self.config.SCREEN_WIDTH
        for cloud in self.clouds:
            cloud["x"] -= speed * 0.2
            if cloud["x"] + cloud["width"] < 0:
                cloud["x"] = width + 50
                cloud["y"] = 30 + self.rng.random() * 50
        for line in self.ground_lines:
            line["x"] -= speed
            if line["x"] + line["width"] < 0:
                line["x"] = width + self.rng.random() * 100

    def _update_eruption(self, volcano):
        spec = volcano.spec
        if volcano.current_height > spec.height * 0.8 and self.rng.random() < 0.15:
            self.eruption_particles.append({
                "pos": [spec.x + spec.width / 2 + (self.rng.random() - 0.5) * 20,
                        self.config.GROUND_Y - volcano.current_height],
                "vel": [(self.rng.random() - 0.5) * 3, -3 - self.rng.random() * 4],
                "life": 40 + self.rng.random() * 30,
                "max_life": 70,
                "size": 4 + self.rng.random() * 6,
                "kind": "fire" if self.rng.random() < 0.7 else "rock",
            })
        for p in self.eruption_particles:
            p["pos"][0] += p["vel"][0]
            p["pos"][1] += p["vel"][1]
            p["vel"][1] += 0.15
            p["life"] -= 1
        self.eruption_particles = [
            p for p in self.eruption_particles if p["life"] > 0 and p["pos"][1] <= self.config.GROUND_Y
        ]

    def _update_fire_trails(self, era, asteroids):
        if era == "volcano":
            for asteroid in asteroids:
                if self.rng.random() < 0.4:
                    cx, _ = asteroid.center
                    self.fire_particles.append({
                        "pos": [cx + (self.rng.random() - 0.5) * 10,
                                asteroid.y - asteroid.size / 2 + (self.rng.random() - 0.5) * 10],
                        "vel": [(self.rng.random() - 0.5) * 2, -1 - self.rng.random() * 2],
                        "life": 15 + self.rng.random() * 10,
                        "max_life": 25,
                        "size": 3 + self.rng.random() * 5,
                    })
        for p in self.fire_particles:
            p["pos"][0] += p["vel"][0]
            p["pos"][1] += p["vel"][1]
            p["life"] -= 1
            p["size"] *= 0.95
        self.fire_particles = [p for p in self.fire_particles if p["life"] > 0]

    def to_state(self):
        return {
            "particles": self.particles,
            "bonus_texts": self.bonus_texts,
            "fire_particles": self.fire_particles,
            "eruption_particles": self.eruption_particles,
            "clouds": self.clouds,
            "ground_lines": self.ground_lines,
        }

    def load_state(self, state):
        for key in ("particles", "bonus_texts", "fire_particles", "eruption_particles", "clouds", "ground_lines"):
            setattr(self, key, state[key])
