import json

import numpy as np
import pytest

from shield_runner.collision import BLOCK
from shield_runner.obstacles import Asteroid, Cactus
from shield_runner.session import Session


def inputs(t):
    # A fixed, busy input script: periodic jumps and shield windows.
    return (t % 47 < 3, 200 <= t % 400 < 260)


def fingerprint(session):
    snap = session.snapshot()
    return (
        snap.tick,
        snap.speed,
        snap.runner["y"],
        snap.runner["shield_active"],
        tuple((c.id, c.x, c.y, c.width, c.height) for c in snap.cacti),
        tuple((a.id, a.x, a.y, a.rotation, tuple(a.shape)) for a in snap.asteroids),
        tuple(tuple(p["pos"]) for p in snap.particles),
        snap.score,
        snap.level,
        snap.era,
    )


def test_tick_advances_time_and_speed(session, config):
    session.tick()
    assert session.tick_count == 1
    assert session.speed == pytest.approx(config.BASE_SPEED + config.SPEED_INCREMENT)


def test_speed_is_capped(session, config):
    session.tick_count = 10 ** 6
    session.tick()
    assert session.speed == config.MAX_SPEED


def test_score_increments_every_fifth_tick(session):
    session.spawner.last_cactus_tick = 10 ** 9
    for _ in range(4):
        session.tick()
    assert session.score == 0
    session.tick()
    assert session.score == 1
    for _ in range(5):
        session.tick()
    assert session.score == 2


def test_level_up_is_reported_and_announced(session, config):
    session.spawner.last_cactus_tick = 10 ** 9
    session.award(config.POINTS_PER_LEVEL - 1)
    results = [session.tick() for _ in range(5)]
    level_ups = [lu for r in results for lu in r.level_ups]
    assert [lu.level for lu in level_ups] == [2]
    assert any(bt["text"] == "LEVEL 2" for bt in session.effects.bonus_texts)


def test_culled_cacti_leave_the_scored_set(session, config):
    session.spawner.last_cactus_tick = 10 ** 9
    c = session.cacti.spawn()
    session.scored_cacti.add(c.id)
    c.x = -c.width
    session.tick()
    assert c.id not in session.scored_cacti


def test_snapshot_is_a_copy(session):
    session.cacti.spawn()
    snap = session.snapshot()
    snap.cacti[0].x = -999
    snap.particles.append({"pos": [0, 0]})
    assert session.cacti.items[0].x != -999
    assert session.effects.particles == []


def test_reset_clears_everything(session):
    for t in range(600):
        session.tick(*inputs(t))
    session.award(300)
    session.reset()
    assert session.tick_count == 0
    assert session.score == 0 and session.level == 1
    assert len(session.cacti) == 0 and len(session.asteroids) == 0
    assert session.effects.particles == [] and session.effects.bonus_texts == []
    assert len(session.effects_queue) == 0
    assert session.scored_cacti == set()
    assert session.cacti.spawn().id == 0


def test_state_round_trip_resumes_identically(config):
    original = Session(config, np.random.default_rng(99))
    original.award(400)  # past the asteroid floor so both hazard kinds show up
    for t in range(900):
        original.tick(*inputs(t))

    state = json.loads(json.dumps(original.to_state()))
    restored = Session.from_state(state, config)
    assert fingerprint(restored) == fingerprint(original)

    for t in range(900, 1800):
        original.tick(*inputs(t))
        restored.tick(*inputs(t))
        assert fingerprint(restored) == fingerprint(original)


def test_round_trip_does_not_alias_live_state(session):
    session.cacti.spawn()
    state = session.to_state()
    state["cacti"]["items"][0]["x"] = -1
    assert session.cacti.items[0].x != -1


def test_shield_block_end_to_end(session, config):
    session.spawner.last_cactus_tick = 10 ** 9
    session.spawner.last_asteroid_tick = 10 ** 9
    rock = Asteroid(id=50, x=85.0, y=100.0, size=30.0, speed_x=0.0, speed_y=3.0,
                    rotation=0.0, rotation_speed=0.02, shape=[0.8] * 8)
    session.asteroids.items = [rock]
    shield_top = session.runner.shield_hitbox().y

    blocked = []
    for _ in range(120):
        # Raise the umbrella only once the rock is about to meet it.
        raise_now = rock.y + rock.size + rock.speed_y > shield_top
        result = session.tick(False, raise_now)
        blocked += [e for e in result.events if e.kind == BLOCK]
        assert not result.fatal
        if blocked:
            break

    assert len(blocked) == 1
    assert rock not in session.asteroids.items
    assert session.score >= config.BLOCK_BONUS
    assert session.runner.y == config.GROUND_Y
    assert not session.runner.airborne
    assert session.runner.shield_active


def test_fatal_tick_still_earns_its_cadence_point(session, config):
    session.spawner.last_cactus_tick = 10 ** 9
    for _ in range(config.SCORE_INTERVAL - 1):
        session.tick()
    session.cacti.items = [Cactus(id=7, x=90.0, y=285.0, width=20, height=40)]
    result = session.tick()
    assert result.fatal
    assert session.score == 1
