import numpy as np
import pytest

from shield_runner.actor import Runner
from shield_runner.geometry import Box


@pytest.fixture
def runner(config):
    return Runner(config)


def test_starts_grounded(runner, config):
    assert runner.y == config.GROUND_Y
    assert runner.velocity_y == 0
    assert not runner.airborne


def test_never_sinks_below_ground_and_lands_at_rest(runner, config):
    rng = np.random.default_rng(5)
    for _ in range(2000):
        was_airborne = runner.airborne
        runner.update(bool(rng.random() < 0.1), bool(rng.random() < 0.2))
        assert runner.y <= config.GROUND_Y
        if was_airborne and not runner.airborne:
            assert runner.y == config.GROUND_Y
            assert runner.velocity_y == 0


def test_holding_jump_gives_a_single_impulse(runner, config):
    jumped, _ = runner.update(True, False)
    assert jumped
    assert runner.airborne
    assert runner.velocity_y == pytest.approx(config.JUMP_FORCE + config.GRAVITY)

    jumped, _ = runner.update(True, False)
    assert not jumped
    assert runner.velocity_y == pytest.approx(config.JUMP_FORCE + 2 * config.GRAVITY)


def test_release_and_repress_mid_air_does_nothing(runner):
    runner.update(True, False)
    runner.update(False, False)
    velocity = runner.velocity_y
    jumped, _ = runner.update(True, False)
    assert not jumped
    assert runner.velocity_y > velocity


def test_shield_blocks_jump_initiation(runner, config):
    jumped, opened = runner.update(True, True)
    assert opened
    assert not jumped
    assert runner.shield_active
    assert not runner.airborne
    assert runner.y == config.GROUND_Y


def test_shield_can_open_mid_air(runner):
    runner.update(True, False)
    _, opened = runner.update(False, True)
    assert opened
    assert runner.shield_active
    assert runner.airborne


def test_shield_halves_descent(runner, config):
    runner.y = config.GROUND_Y - 100
    runner.airborne = True
    runner.velocity_y = 2.0
    runner.update(False, True)
    assert runner.y == pytest.approx(config.GROUND_Y - 100 + 2.8 * config.PARACHUTE_FACTOR)

    runner.y = config.GROUND_Y - 100
    runner.velocity_y = 2.0
    runner.update(False, False)
    assert runner.y == pytest.approx(config.GROUND_Y - 100 + 2.8)


def test_shield_does_not_damp_ascent(runner, config):
    runner.update(True, False)
    y = runner.y
    velocity = runner.velocity_y
    runner.update(False, True)
    assert runner.y == pytest.approx(y + velocity + config.GRAVITY)


def test_broken_shield_stays_down_until_released(runner):
    runner.update(False, True)
    runner.break_shield()
    assert not runner.shield_active
    assert runner.shield_locked

    for _ in range(30):
        _, opened = runner.update(False, True)
        assert not opened
        assert not runner.shield_active

    runner.update(False, False)
    assert not runner.shield_locked
    _, opened = runner.update(False, True)
    assert opened
    assert runner.shield_active


def test_hitboxes(runner, config):
    top = config.GROUND_Y - config.RUNNER_HEIGHT
    assert runner.hitbox() == Box(config.RUNNER_X, top + 10, config.RUNNER_WIDTH - 5, config.RUNNER_HEIGHT - 10)
    assert runner.shield_hitbox() == Box(config.RUNNER_X - 25, top - 60, 90, 80)
    assert runner.hitbox().bottom == runner.y


def test_reset_restores_initial_state(runner, config):
    runner.update(True, True)
    runner.update(True, False)
    runner.shield_locked = True
    runner.reset()
    assert runner.to_state() == {
        "y": config.GROUND_Y,
        "velocity_y": 0.0,
        "airborne": False,
        "shield_active": False,
        "shield_locked": False,
    }
