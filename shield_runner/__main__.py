import argparse
import logging

import numpy as np
import pygame

from .config import GameConfig, ShieldHitPolicy
from .driver import GameDriver, GameState
from .leaderboard import ALL_TIME, TODAY, LeaderboardClient
from .persistence import DEFAULT_PATH, HighScoreStore
from .render import Renderer

logger = logging.getLogger("shield_runner")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="shield_runner", description="Jump the cacti, umbrella the asteroids.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--scores", default=DEFAULT_PATH, help="high score file")
    parser.add_argument("--leaderboard-url", default=None, help="base URL of the score service")
    parser.add_argument("--tz", default=None, help="time zone for the daily board, e.g. America/Los_Angeles")
    parser.add_argument("--shield-hits", choices=[p.value for p in ShieldHitPolicy], default=ShieldHitPolicy.BREAK.value)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


JUMP_KEYS = (pygame.K_SPACE, pygame.K_j, pygame.K_UP)
SHIELD_KEYS = (pygame.K_u, pygame.K_LSHIFT, pygame.K_RSHIFT)
RESTART_KEYS = (pygame.K_ESCAPE, pygame.K_F1)
FREE_PLAY_KEYS = (pygame.K_F2,)


def handle_key(driver, key, char, name):
    """Apply one key press. Returns the (possibly edited) leaderboard name.

    While a leaderboard panel is open every letter belongs to the name, so
    restart and free play also answer to non-letter keys.
    """
    panel = driver.panel
    if panel is not None:
        if key == pygame.K_RETURN:
            panel.submit(name)
        elif key == pygame.K_TAB:
            panel.refresh(ALL_TIME if panel.scope == TODAY else TODAY)
        elif key == pygame.K_BACKSPACE:
            name = name[:-1]
        elif char.isalpha():
            if len(name) < 3:
                name = (name + char).upper()
        elif key in RESTART_KEYS:
            driver.restart()
        elif key in FREE_PLAY_KEYS:
            driver.continue_free_play()
        return name

    if key in JUMP_KEYS:
        driver.press_jump()
    elif key == pygame.K_p:
        driver.toggle_pause()
    elif key == pygame.K_m:
        driver.toggle_mute()
    elif key == pygame.K_y or key in RESTART_KEYS:
        driver.restart()
    elif key == pygame.K_f or key in FREE_PLAY_KEYS:
        driver.continue_free_play()
    return name


def held_inputs(keys, just_started=False):
    """(jump_held, shield_held) from a pressed-key table.

    The key press that leaves the title screen is not also a jump.
    """
    jump_held = not just_started and any(keys[k] for k in JUMP_KEYS)
    shield_held = any(keys[k] for k in SHIELD_KEYS)
    return jump_held, shield_held


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")

    config = GameConfig(shielded_body_hit=ShieldHitPolicy(args.shield_hits))
    store = HighScoreStore(args.scores)
    leaderboard = LeaderboardClient(args.leaderboard_url, tz=args.tz) if args.leaderboard_url else None
    driver = GameDriver(config, store=store, leaderboard=leaderboard, rng=np.random.default_rng(args.seed))
    renderer = Renderer(config)

    screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
    pygame.display.set_caption("Shield Runner")
    clock = pygame.time.Clock()
    name = store.player_name

    print("\n" + "=" * 30)
    print("Space/J/Up: jump   U/Shift: umbrella   P: pause   M: mute")
    print("Y: restart   F: free play after a win")
    print("Score screen: type 3 letters + Enter to submit, Tab switches today/all-time, Esc restarts, F2 free play")
    print("=" * 30 + "\n")

    running = True
    while running:
        on_title = driver.state is GameState.START
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                name = handle_key(driver, event.key, event.unicode, name)

        just_started = on_title and driver.state is GameState.PLAYING
        jump_held, shield_held = held_inputs(pygame.key.get_pressed(), just_started)

        driver.frame(jump_held=jump_held, shield_held=shield_held)
        # Audio playback lives outside the game; cues are only logged here.
        for cue in driver.drain_cues():
            logger.debug("cue %s %dHz", cue["cue"], cue["freq"])

        obs = renderer.render(
            driver.session.snapshot(),
            state=driver.state.value,
            high_score=driver.high_score,
            shaking=driver.shaking,
            panel=driver.panel,
        )
        surf = pygame.surfarray.make_surface(np.transpose(obs, (1, 0, 2)))
        screen.blit(surf, (0, 0))
        pygame.display.flip()
        clock.tick(config.FPS)

    store.save()
    pygame.quit()


if __name__ == "__main__":
    main()
