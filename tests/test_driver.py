import pytest

from shield_runner.driver import GameDriver, GameState
from shield_runner.obstacles import Cactus
from shield_runner.persistence import HighScoreStore

from tests.conftest import freeze_spawns


@pytest.fixture
def driver(config):
    return GameDriver(config, seed=7)


@pytest.fixture
def playing(driver):
    driver.start()
    freeze_spawns(driver.session)
    return driver


def crash(driver):
    """Drop a cactus onto the runner and run the frame that kills it."""
    driver.session.cacti.items = [Cactus(id=900, x=90.0, y=285.0, width=20, height=40)]
    result = driver.frame()
    assert result.fatal
    return result


def test_starts_on_title_screen(driver):
    assert driver.state is GameState.START
    assert driver.frame() is None
    assert driver.session.tick_count == 0


def test_invalid_triggers_are_ignored(driver):
    assert not driver.resume()
    assert not driver.restart()
    assert not driver.continue_free_play()
    assert not driver.toggle_pause()
    assert driver.state is GameState.START

    assert driver.start()
    assert not driver.start()
    assert not driver.restart()
    assert not driver.resume()
    assert not driver.continue_free_play()
    assert driver.state is GameState.PLAYING


def test_jump_key_starts_and_resumes(driver):
    assert driver.press_jump()
    assert driver.state is GameState.PLAYING
    assert not driver.press_jump()
    driver.toggle_pause()
    assert driver.press_jump()
    assert driver.state is GameState.PLAYING


def test_pause_freezes_simulation_and_effect_clock(playing):
    for _ in range(10):
        playing.frame()
    session = playing.session
    before = (session.tick_count, session.score, session.effects_queue.clock, session.runner.y)

    assert playing.toggle_pause()
    for _ in range(30):
        assert playing.frame(jump_held=True) is None
    assert (session.tick_count, session.score, session.effects_queue.clock, session.runner.y) == before

    assert playing.resume()
    playing.frame()
    assert session.tick_count == before[0] + 1


def test_cactus_ends_the_run(playing):
    playing.session.cacti.items = [Cactus(id=500, x=300.0, y=285.0, width=20, height=40)]
    for _ in range(30):
        playing.frame()
    assert playing.state is GameState.PLAYING
    for _ in range(10):
        playing.frame()
    assert playing.state is GameState.GAME_OVER


def test_game_over_stops_the_simulation(playing):
    crash(playing)
    tick = playing.session.tick_count
    for _ in range(5):
        assert playing.frame() is None
    assert playing.session.tick_count == tick
    assert playing.state is GameState.GAME_OVER


def test_game_over_shake_winds_down(playing, config):
    crash(playing)
    assert playing.shaking
    for _ in range(config.SHAKE_TICKS - 1):
        playing.frame()
    assert playing.shaking
    playing.frame()
    assert not playing.shaking


def test_game_over_cue_is_emitted(playing):
    playing.drain_cues()
    crash(playing)
    assert any(cue["cue"] == "game_over" for cue in playing.drain_cues())


def test_restart_resets_the_run(playing):
    for _ in range(20):
        playing.frame()
    crash(playing)
    run_id = playing.run_id
    assert playing.restart()
    assert playing.state is GameState.PLAYING
    assert playing.run_id == run_id + 1
    assert playing.session.score == 0
    assert playing.session.tick_count == 0
    assert not playing.shaking


def test_victory_and_free_play(playing, config):
    playing.session.award(config.WIN_SCORE - 1)
    for _ in range(config.SCORE_INTERVAL):
        playing.frame()
        if playing.state is GameState.VICTORY:
            break
    assert playing.state is GameState.VICTORY
    assert any(cue["cue"] == "victory" for cue in playing.drain_cues())

    assert playing.continue_free_play()
    assert playing.state is GameState.PLAYING
    freeze_spawns(playing.session)
    for _ in range(3 * config.SCORE_INTERVAL):
        playing.frame()
    assert playing.state is GameState.PLAYING
    assert playing.session.score > config.WIN_SCORE
    assert playing.session.snapshot().free_play


def test_restart_after_victory(playing, config):
    playing.session.award(config.WIN_SCORE)
    playing.frame()
    assert playing.state is GameState.VICTORY
    assert playing.restart()
    assert playing.session.score == 0
    assert playing.session.level == 1
    assert not playing.session.won


def test_start_cue_and_mute(config):
    loud = GameDriver(config, seed=1)
    loud.start()
    loud.frame()
    assert [cue["cue"] for cue in loud.drain_cues()] == ["start"]
    assert loud.drain_cues() == []

    quiet = GameDriver(config, seed=1)
    quiet.toggle_mute()
    quiet.start()
    for _ in range(30):
        quiet.frame()
    assert quiet.drain_cues() == []


def test_high_score_tracks_best_run(playing):
    playing.session.award(42)
    playing.frame()
    assert playing.high_score >= 42
    crash(playing)
    playing.restart()
    playing.frame()
    assert playing.high_score >= 42


def test_high_score_is_written_through(tmp_path, config):
    path = tmp_path / "scores.json"
    driver = GameDriver(config, seed=3, store=HighScoreStore(str(path)))
    driver.start()
    freeze_spawns(driver.session)
    driver.session.award(77)
    driver.frame()
    assert HighScoreStore(str(path)).best == driver.session.score


def test_no_panel_without_leaderboard(playing):
    crash(playing)
    assert playing.panel is None
