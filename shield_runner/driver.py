import logging
from enum import Enum

import numpy as np

from .config import GameConfig
from .effects import SHAKE_OFF, SHAKE_ON, SOUND
from .leaderboard import LeaderboardPanel
from .session import Session

logger = logging.getLogger(__name__)


class GameState(Enum):
    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "gameover"
    VICTORY = "victory"


class GameDriver:
    """Session state machine, called once per display refresh.

    Only PLAYING advances the simulation. The effect clock runs in every
    state except PAUSED, so a game-over shake still winds down on the
    game-over screen while a paused game freezes its pending effects.
    """

    def __init__(self, config=None, seed=None, store=None, leaderboard=None, rng=None):
        self.config = config or GameConfig()
        self.session = Session(self.config, rng if rng is not None else np.random.default_rng(seed))
        self.store = store
        self.leaderboard = leaderboard
        self.state = GameState.START
        self.run_id = 0
        self.panel = None
        self.muted = False
        self.shaking = False
        self.frames = 0
        self._cues = []
        self._best = store.best if store is not None else 0

    @property
    def high_score(self):
        return self.store.best if self.store is not None else self._best

    # --- actions; each returns False when the current state doesn't accept it ---

    def start(self):
        if self.state is not GameState.START:
            return False
        self._begin()
        return True

    def restart(self):
        if self.state not in (GameState.GAME_OVER, GameState.VICTORY):
            return False
        self._begin()
        return True

    def toggle_pause(self):
        if self.state is GameState.PLAYING:
            self.state = GameState.PAUSED
        elif self.state is GameState.PAUSED:
            self.state = GameState.PLAYING
        else:
            return False
        logger.debug("State -> %s", self.state.value)
        return True

    def resume(self):
        if self.state is not GameState.PAUSED:
            return False
        return self.toggle_pause()

    def continue_free_play(self):
        if self.state is not GameState.VICTORY:
            return False
        self.session.engage_free_play()
        self.panel = None
        self.state = GameState.PLAYING
        return True

    def toggle_mute(self):
        self.muted = not self.muted
        return True

    def press_jump(self):
        """Jump key doubles as start on the title screen and resume while paused."""
        if self.state is GameState.START:
            return self.start()
        if self.state is GameState.PAUSED:
            return self.resume()
        return False

    # --- frame loop ---

    def frame(self, jump_held=False, shield_held=False):
        if self.state is GameState.PAUSED:
            return None
        self.frames += 1

        result = None
        if self.state is GameState.PLAYING:
            result = self.session.tick(jump_held, shield_held)
            self._record_best(self.session.score)
            if result.fatal:
                self._game_over()
            elif self.session.won:
                self._victory()

        self._process_effects()
        return result

    def drain_cues(self):
        cues, self._cues = self._cues, []
        return cues

    def _process_effects(self):
        for kind, payload in self.session.effects_queue.advance():
            if kind == SOUND:
                if not self.muted:
                    self._cues.append(payload)
            elif kind == SHAKE_ON:
                self.shaking = True
            elif kind == SHAKE_OFF:
                self.shaking = False

    def _record_best(self, score):
        if self.store is not None:
            if self.store.offer(score):
                logger.debug("New high score %d", score)
        else:
            self._best = max(self._best, score)

    def _begin(self):
        self.session.reset()
        self.run_id += 1
        self.panel = None
        self.shaking = False
        self.state = GameState.PLAYING
        self.session.effects_queue.schedule_sound("start")
        logger.info("Run %d started", self.run_id)

    def _open_panel(self, won):
        if self.leaderboard is None:
            self.panel = None
            return
        self.panel = LeaderboardPanel(
            self.leaderboard, self.run_id, lambda: self.run_id, self.session.score, won=won, store=self.store,
        )
        self.panel.open()

    def _game_over(self):
        self.state = GameState.GAME_OVER
        queue = self.session.effects_queue
        queue.schedule(0, SHAKE_ON)
        queue.schedule(self.config.SHAKE_TICKS, SHAKE_OFF)
        queue.schedule_sound("game_over")
        logger.info("Game over: score %d, level %d", self.session.score, self.session.level)
        self._open_panel(won=False)

    def _victory(self):
        self.state = GameState.VICTORY
        self.session.effects_queue.schedule_sound("victory")
        logger.info("Victory at score %d", self.session.score)
        self._open_panel(won=True)
