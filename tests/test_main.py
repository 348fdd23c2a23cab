import collections

import pygame
import pytest
import requests

from shield_runner.__main__ import handle_key, held_inputs
from shield_runner.driver import GameDriver, GameState
from shield_runner.leaderboard import LeaderboardClient
from shield_runner.obstacles import Cactus

from tests.conftest import freeze_spawns


class Reply:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


@pytest.fixture
def game_over(config, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *a, **k: Reply({"scores": []}))
    monkeypatch.setattr(requests, "post", lambda *a, **k: Reply({"id": "x"}))
    driver = GameDriver(config, seed=4, leaderboard=LeaderboardClient("http://scores.test", background=False))
    driver.start()
    freeze_spawns(driver.session)
    driver.session.cacti.items = [Cactus(id=1, x=90.0, y=285.0, width=20, height=40)]
    driver.frame()
    assert driver.state is GameState.GAME_OVER
    assert driver.panel is not None
    return driver


def press(driver, name, *chars):
    for char in chars:
        name = handle_key(driver, getattr(pygame, f"K_{char.lower()}"), char, name)
    return name


def test_every_letter_goes_into_the_name(game_over):
    assert press(game_over, "", "y", "m", "j") == "YMJ"
    assert game_over.state is GameState.GAME_OVER
    assert game_over.panel is not None
    assert not game_over.muted


def test_name_is_capped_and_editable(game_over):
    name = press(game_over, "", "p", "f", "q", "z")
    assert name == "PFQ"
    name = handle_key(game_over, pygame.K_BACKSPACE, "\b", name)
    assert name == "PF"


def test_enter_submits_the_typed_name(game_over):
    name = press(game_over, "", "y", "o", "u")
    handle_key(game_over, pygame.K_RETURN, "\r", name)
    assert game_over.panel.submitted_name == "YOU"
    assert game_over.panel.button == "DONE!"


def test_escape_restarts_from_the_score_screen(game_over):
    handle_key(game_over, pygame.K_ESCAPE, "\x1b", "ABC")
    assert game_over.state is GameState.PLAYING
    assert game_over.panel is None


def test_hotkeys_without_a_panel(config):
    driver = GameDriver(config, seed=4)
    handle_key(driver, pygame.K_SPACE, " ", "")
    assert driver.state is GameState.PLAYING
    handle_key(driver, pygame.K_p, "p", "")
    assert driver.state is GameState.PAUSED
    handle_key(driver, pygame.K_m, "m", "")
    assert driver.muted


def test_start_press_is_not_a_jump():
    keys = collections.defaultdict(bool, {pygame.K_SPACE: True, pygame.K_LSHIFT: True})
    assert held_inputs(keys, just_started=True) == (False, True)
    assert held_inputs(keys) == (True, True)


def test_runner_stays_grounded_on_the_starting_frame(config):
    driver = GameDriver(config, seed=4)
    handle_key(driver, pygame.K_SPACE, " ", "")
    keys = collections.defaultdict(bool, {pygame.K_SPACE: True})
    driver.frame(*held_inputs(keys, just_started=True))
    assert not driver.session.runner.airborne
