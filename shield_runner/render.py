import math

import numpy as np
import pygame
import pygame.gfxdraw


class Renderer:
    """Draws a Session snapshot. Reads only; never touches simulation state."""

    COLOR_BG = (247, 247, 247)
    COLOR_INK = (83, 83, 83)
    COLOR_INK_LIGHT = (136, 136, 136)
    COLOR_CLOUD = (218, 218, 218)
    COLOR_SHIELD = (83, 83, 83)
    COLOR_TEXT = (34, 34, 34)
    COLOR_OVERLAY = (255, 255, 255, 200)

    ERA_GROUND = {
        "normal": (83, 83, 83),
        "volcano": (96, 72, 64),
        "ice": (90, 106, 112),
        "beach": (150, 130, 100),
        "civilization": (74, 74, 74),
    }

    def __init__(self, config):
        self.config = config
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
        self.canvas = pygame.Surface((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
        self.font_large = pygame.font.Font(None, 48)
        self.font_main = pygame.font.Font(None, 28)
        self.font_small = pygame.font.Font(None, 20)

    def render(self, snapshot, state="playing", high_score=0, shaking=False, panel=None):
        self.canvas.fill(self.COLOR_BG)
        self._render_game(snapshot)
        self._render_ui(snapshot, high_score)
        self._render_overlay(snapshot, state, panel)

        self.screen.fill(self.COLOR_BG)
        offset = (0, 0)
        if shaking:
            offset = (4 if snapshot.tick % 2 else -4, 2 if snapshot.tick % 4 < 2 else -2)
        self.screen.blit(self.canvas, offset)

        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    # --- world ---

    def _render_game(self, snap):
        ground_y = self.config.GROUND_Y
        width = self.config.SCREEN_WIDTH

        for name, (spec, height) in snap.landmarks.items():
            if height > 0:
                self._draw_landmark(name, spec, height)
        for p in snap.eruption_particles:
            alpha = max(0, min(255, int(255 * p["life"] / p["max_life"])))
            grey = 200 if p["kind"] == "fire" else 60
            self._circle(p["pos"], p["size"] / 2, (grey, grey, grey, alpha))

        for cloud in snap.clouds:
            x, y, w = int(cloud["x"]), int(cloud["y"]), int(cloud["width"])
            pygame.draw.ellipse(self.canvas, self.COLOR_CLOUD, (x, y, w, max(8, w // 3)))

        pygame.draw.line(self.canvas, self.COLOR_INK, (0, ground_y), (width, ground_y), 2)
        for line in snap.ground_lines:
            x = int(line["x"])
            pygame.draw.line(self.canvas, self.COLOR_INK_LIGHT, (x, ground_y + 8), (x + int(line["width"]), ground_y + 8), 1)

        if snap.era == "volcano":
            for p in snap.fire_particles:
                alpha = max(0, min(255, int(255 * p["life"] / p["max_life"])))
                grey = int(150 + 100 * p["life"] / p["max_life"])
                self._circle(p["pos"], p["size"] / 2, (min(255, grey), grey // 2, 40, alpha))

        color = self.ERA_GROUND.get(snap.era, self.COLOR_INK)
        for cactus in snap.cacti:
            self._draw_ground_obstacle(cactus, snap.era, color)

        for asteroid in snap.asteroids:
            self._draw_asteroid(asteroid)

        self._draw_runner(snap.runner, snap.tick)

        for p in snap.particles:
            alpha = max(0, min(255, int(255 * p["life"] / p["max_life"])))
            self._circle(p["pos"], p["size"] / 2, (*self.COLOR_INK, alpha))

        for bt in snap.bonus_texts:
            alpha = max(0, min(255, int(255 * min(1.0, bt["life"] / 30))))
            surf = self.font_main.render(bt["text"], True, self.COLOR_TEXT)
            surf.set_alpha(alpha)
            self.canvas.blit(surf, (int(bt["pos"][0] - surf.get_width() / 2), int(bt["pos"][1])))

        if snap.level_up_timer > 0:
            alpha = math.sin(snap.level_up_timer * 0.2) * 0.3
            if alpha > 0:
                flash = pygame.Surface(self.canvas.get_size(), pygame.SRCALPHA)
                flash.fill((255, 255, 255, int(255 * alpha)))
                self.canvas.blit(flash, (0, 0))

    def _circle(self, pos, radius, color):
        radius = int(radius)
        if radius <= 0:
            return
        pygame.gfxdraw.filled_circle(self.canvas, int(pos[0]), int(pos[1]), radius, color)

    def _draw_runner(self, runner, tick):
        x = int(runner["x"])
        top = int(runner["y"] - runner["height"])
        ink = self.COLOR_INK
        pygame.draw.rect(self.canvas, ink, (x, top + 15, 30, 35))
        pygame.draw.rect(self.canvas, ink, (x + 15, top, 25, 20))
        pygame.draw.rect(self.canvas, self.COLOR_BG, (x + 32, top + 5, 5, 5))
        pygame.draw.rect(self.canvas, ink, (x - 15, top + 20, 18, 10))
        if runner["airborne"]:
            pygame.draw.rect(self.canvas, ink, (x + 5, top + 42, 8, 8))
            pygame.draw.rect(self.canvas, ink, (x + 18, top + 42, 8, 8))
        else:
            leg = int(math.sin(tick * 0.3) * 5)
            pygame.draw.rect(self.canvas, ink, (x + 5, top + 45, 8, max(1, 10 + leg)))
            pygame.draw.rect(self.canvas, ink, (x + 18, top + 45, 8, max(1, 10 - leg)))

        if runner["shield_active"]:
            canopy_x = x - 10 + 30
            canopy_y = top - 30 + 15
            pygame.draw.rect(self.canvas, ink, (x + 18, top - 5, 4, 25))
            points = [(canopy_x + math.cos(a) * 35, canopy_y - math.sin(a) * 35)
                      for a in np.linspace(0, math.pi, 16)]
            pygame.gfxdraw.filled_polygon(self.canvas, points, self.COLOR_SHIELD)
            pygame.gfxdraw.aapolygon(self.canvas, points, self.COLOR_SHIELD)
            for i in range(5):
                pygame.gfxdraw.filled_circle(self.canvas, x - 5 + i * 13, canopy_y, 3, self.COLOR_BG)

    def _draw_ground_obstacle(self, c, era, color):
        x, y, w, h = c.x, c.y, c.width, c.height
        if era == "ice":
            points = [(x, y + h), (x + w * 0.2, y + h * 0.3), (x + w * 0.4, y + h * 0.5), (x + w * 0.5, y),
                      (x + w * 0.6, y + h * 0.4), (x + w * 0.8, y + h * 0.2), (x + w, y + h)]
            pygame.gfxdraw.filled_polygon(self.canvas, points, color)
        elif era == "beach":
            r = min(w / 3, h / 3)
            for cx in (x + r, x + w / 2, x + w - r):
                self._circle((cx, y + h - r), r, color)
            self._circle((x + w / 2, y + h - r * 2.5), r * 0.9, color)
        elif era == "civilization":
            pygame.draw.rect(self.canvas, color, (int(x + w * 0.2), int(y + h * 0.3), int(w * 0.6), int(h * 0.7)))
            pygame.draw.rect(self.canvas, color, (int(x + w * 0.25), int(y), int(w * 0.5), int(h * 0.3)))
            pygame.draw.rect(self.canvas, color, (int(x), int(y + h * 0.4), int(w), int(h * 0.15)))
        else:
            pygame.draw.rect(self.canvas, color, (int(x), int(y), w, h))
            if w > 22:
                pygame.draw.rect(self.canvas, color, (int(x - 8), int(y + 10), 10, 5))
                pygame.draw.rect(self.canvas, color, (int(x - 8), int(y + 5), 5, 15))
                pygame.draw.rect(self.canvas, color, (int(x + w - 2), int(y + 15), 10, 5))
                pygame.draw.rect(self.canvas, color, (int(x + w + 3), int(y + 10), 5, 15))

    def _draw_asteroid(self, a):
        cx, cy = a.center
        n = len(a.shape)
        points = []
        for i, variance in enumerate(a.shape):
            angle = i / n * 2 * math.pi + a.rotation
            radius = a.size / 2 * variance
            points.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
        pygame.gfxdraw.filled_polygon(self.canvas, points, self.COLOR_INK)
        pygame.gfxdraw.aapolygon(self.canvas, points, self.COLOR_INK)
        cos_r, sin_r = math.cos(a.rotation), math.sin(a.rotation)
        for ox, oy, r in ((-3, -2, 4), (5, 4, 3)):
            px = cx + ox * cos_r - oy * sin_r
            py = cy + ox * sin_r + oy * cos_r
            self._circle((px, py), r, self.COLOR_INK_LIGHT)

    def _draw_landmark(self, name, spec, height):
        base = self.config.GROUND_Y
        x, w = spec.x, spec.width
        grey = (170, 170, 170)
        if name == "volcano":
            points = [(x, base), (x + w * 0.35, base - height), (x + w * 0.65, base - height), (x + w, base)]
            pygame.gfxdraw.filled_polygon(self.canvas, points, grey)
        elif name == "iceberg":
            points = [(x, base), (x + w * 0.3, base - height * 0.7), (x + w * 0.5, base - height),
                      (x + w * 0.75, base - height * 0.6), (x + w, base)]
            pygame.gfxdraw.filled_polygon(self.canvas, points, (190, 200, 205))
        elif name == "palm_tree":
            pygame.draw.rect(self.canvas, grey, (int(x + w / 2 - 4), int(base - height * 0.85), 8, int(height * 0.85)))
            leaf_y = base - height
            for dx in (-30, -15, 15, 30):
                pygame.draw.line(self.canvas, grey, (x + w / 2, leaf_y + 10), (x + w / 2 + dx, leaf_y + 20 + abs(dx) / 3), 4)
        else:
            pygame.draw.rect(self.canvas, grey, (int(x), int(base - height * 0.6), int(w), int(height * 0.6)))
            pygame.draw.rect(self.canvas, grey, (int(x + w * 0.2), int(base - height * 0.85), int(w * 0.6), int(height * 0.25)))
            pygame.draw.line(self.canvas, grey, (x + w / 2, base - height * 0.85), (x + w / 2, base - height), 3)

    # --- HUD and screens ---

    def _render_ui(self, snap, high_score):
        score_surf = self.font_main.render(f"HI {high_score:05d}  {snap.score:05d}", True, self.COLOR_TEXT)
        self.canvas.blit(score_surf, (self.config.SCREEN_WIDTH - score_surf.get_width() - 20, 10))
        label = "FREE PLAY" if snap.free_play else f"LV {snap.level}"
        level_surf = self.font_main.render(label, True, self.COLOR_TEXT)
        self.canvas.blit(level_surf, (20, 10))

    def _render_overlay(self, snap, state, panel):
        if state == "playing":
            return
        overlay = pygame.Surface(self.canvas.get_size(), pygame.SRCALPHA)
        overlay.fill(self.COLOR_OVERLAY)
        self.canvas.blit(overlay, (0, 0))

        titles = {
            "start": ("SHIELD RUNNER", "Space to start"),
            "paused": ("PAUSED", "P or Space to resume"),
            "gameover": ("GAME OVER", f"Score {snap.score}  -  Y to restart"),
            "victory": ("YOU WIN!", f"Score {snap.score}  -  F free play, Y play again"),
        }
        title, subtitle = titles.get(state, (state.upper(), ""))
        cx = self.config.SCREEN_WIDTH / 2
        title_surf = self.font_large.render(title, True, self.COLOR_TEXT)
        self.canvas.blit(title_surf, (int(cx - title_surf.get_width() / 2), 60))
        sub_surf = self.font_main.render(subtitle, True, self.COLOR_TEXT)
        self.canvas.blit(sub_surf, (int(cx - sub_surf.get_width() / 2), 105))

        if panel is None:
            return
        y = 140
        if panel.loading and not panel.entries:
            rows = ["Loading..."]
        elif not panel.entries:
            rows = ["No scores yet. Be the first!"]
        else:
            rows = [f"{i}. {e['name']:<3} {int(e['score']):05d}" for i, e in enumerate(panel.entries, 1)]
        for row in rows:
            surf = self.font_small.render(row, True, self.COLOR_TEXT)
            self.canvas.blit(surf, (int(cx - surf.get_width() / 2), y))
            y += 18
        footer = f"[{panel.button}]  {panel.rank_text}".strip()
        surf = self.font_small.render(footer, True, self.COLOR_TEXT)
        self.canvas.blit(surf, (int(cx - surf.get_width() / 2), y + 6))
