import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PATH = os.path.join(os.path.expanduser("~"), ".shield_runner.json")


class HighScoreStore:
    """Best score and last-used name in a small JSON file.

    A missing, unreadable or read-only file never reaches the game: reads
    fall back to defaults and failed writes are logged and dropped.
    """

    def __init__(self, path=DEFAULT_PATH):
        self.path = path
        self.best = 0
        self.player_name = ""
        self.load()

    def load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.best = max(0, int(data.get("high_score", 0)))
            self.player_name = str(data.get("player_name", ""))[:3]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read high score from %s: %s", self.path, e)

    def save(self):
        if not self.path:
            return False
        data = {"high_score": self.best, "player_name": self.player_name}
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not write high score to %s: %s", self.path, e)
            return False
        return True

    def offer(self, score):
        """Write through when `score` beats the stored best. Returns True on a new best."""
        if score <= self.best:
            return False
        self.best = score
        self.save()
        return True

    def remember_name(self, name):
        self.player_name = name[:3]
        self.save()
