import logging
import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np

from .config import GameConfig
from .driver import GameDriver, GameState
from .render import Renderer

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

logger = logging.getLogger(__name__)


class RunnerEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"]}

    # Must be a short, user-facing control string:
    user_guide = "Controls: Press ↑ or Space to jump over cacti. Hold Shift to raise the umbrella against falling rocks."

    # Must be a short, user-facing description of the game:
    game_description = (
        "A side-scrolling runner. Jump the ground obstacles, shield yourself from asteroids, "
        "and survive ten levels of eras to win."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = True

    def __init__(self, render_mode="rgb_array", config=None, store=None, leaderboard=None):
        super().__init__()
        self.config = config or GameConfig()
        self.render_mode = render_mode

        # EXACT spaces:
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.config.SCREEN_HEIGHT, self.config.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        self.renderer = Renderer(self.config)
        self.store = store
        self.leaderboard = leaderboard

        self.driver = None
        self.steps = 0
        self.reset()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        # Use Gymnasium's np_random for reproducibility
        self.driver = GameDriver(self.config, store=self.store, leaderboard=self.leaderboard, rng=self.np_random)
        self.driver.start()
        self.steps = 0

        return self._get_observation(), self._get_info()

    def step(self, action):
        if not self.action_space.contains(np.asarray(action, dtype=np.int64)):
            raise ValueError(f"action {action!r} is outside {self.action_space}")

        if self.driver.state in (GameState.GAME_OVER, GameState.VICTORY):
            return self._get_observation(), 0, True, False, self._get_info()

        # Unpack factorized action
        movement = action[0]  # 0-4: none/up/down/left/right
        jump_held = movement == 1 or action[1] == 1
        shield_held = action[2] == 1

        score_before = self.driver.session.score
        result = self.driver.frame(jump_held=jump_held, shield_held=shield_held)
        self.steps += 1

        reward = float(self.driver.session.score - score_before)
        if result is not None and result.fatal:
            reward -= self.config.FATAL_PENALTY

        terminated = self.driver.state in (GameState.GAME_OVER, GameState.VICTORY)
        truncated = not terminated and self.steps >= self.config.MAX_STEPS

        return (
            self._get_observation(),
            reward,
            terminated,
            truncated,
            self._get_info()
        )

    def render(self):
        return self._get_observation()

    def _get_observation(self):
        return self.renderer.render(
            self.driver.session.snapshot(),
            state=self.driver.state.value,
            high_score=self.driver.high_score,
            shaking=self.driver.shaking,
            panel=self.driver.panel,
        )

    def _get_info(self):
        session = self.driver.session
        return {
            "score": session.score,
            "steps": self.steps,
            "level": session.level,
            "era": session.era,
            "state": self.driver.state.value,
            "shield_locked": session.runner.shield_locked,
        }

    def validate_implementation(self):
        '''
        Checks the spaces and the reset/step contract. Leaves the env freshly reset.
        '''
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        obs, info = self.reset()
        assert obs.shape == (self.config.SCREEN_HEIGHT, self.config.SCREEN_WIDTH, 3)
        assert obs.dtype == np.uint8
        assert isinstance(info, dict)

        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.config.SCREEN_HEIGHT, self.config.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert isinstance(trunc, bool)
        assert isinstance(info, dict)

        self.reset()
        logger.info("Implementation validated successfully")

    def close(self):
        import pygame
        pygame.quit()
