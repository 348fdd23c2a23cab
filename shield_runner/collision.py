import logging
from collections import namedtuple

from .config import ShieldHitPolicy
from .geometry import overlaps

logger = logging.getLogger(__name__)

FATAL = "fatal"
NEAR_MISS = "near_miss"
BLOCK = "block"
SHIELD_BREAK = "shield_break"

CollisionEvent = namedtuple("CollisionEvent", ["kind", "x", "y", "points", "obstacle_id", "label"])


class CollisionResolver:
    """One collision sweep per tick.

    Ground obstacles are lethal on body contact and pay a one-time bonus for
    a close clearance. Falling obstacles are absorbed by the shield; what a
    body hit does while shielded depends on `config.shielded_body_hit`.
    """

    def __init__(self, config):
        self.config = config

    def resolve(self, session):
        runner = session.runner
        body = runner.hitbox()
        shield = runner.shield_hitbox()
        events = []

        for cactus in session.cacti:
            box = cactus.box
            if overlaps(body, box):
                logger.debug("Runner hit cactus %d", cactus.id)
                events.append(CollisionEvent(FATAL, cactus.x, cactus.y, 0, cactus.id, None))
                return events

            if runner.airborne and cactus.id not in session.scored_cacti:
                horizontal = body.x < box.right and body.right > box.x
                clearance = box.y - body.bottom
                if horizontal and 0 < clearance < self.config.NEAR_MISS_CLEARANCE:
                    session.scored_cacti.add(cactus.id)
                    points = self.config.NEAR_MISS_BONUS
                    label = f"CLOSE! +{points}"
                    session.award(points)
                    session.effects.bonus_text(cactus.x + cactus.width / 2, cactus.y - 20, label)
                    session.effects_queue.schedule_sound("bonus")
                    logger.debug("Near miss over cactus %d (clearance %.1f)", cactus.id, clearance)
                    events.append(CollisionEvent(NEAR_MISS, cactus.x, cactus.y, points, cactus.id, label))

        for asteroid in list(session.asteroids):
            box = asteroid.box
            cx, cy = asteroid.center

            # Shield contact wins over body contact on the same tick.
            if runner.shield_active and overlaps(shield, box):
                session.asteroids.remove(asteroid)
                session.effects.block_burst(cx, cy)
                points, label = self.block_bonus(body.y - box.bottom)
                session.award(points)
                session.effects.bonus_text(cx, box.y - 10, label)
                session.effects_queue.schedule_sound("block")
                logger.debug("Blocked asteroid %d for %d points", asteroid.id, points)
                events.append(CollisionEvent(BLOCK, cx, cy, points, asteroid.id, label))
                continue

            if overlaps(body, box):
                if runner.shield_active and self.config.shielded_body_hit is ShieldHitPolicy.BREAK:
                    session.asteroids.remove(asteroid)
                    runner.break_shield()
                    session.effects.block_burst(cx, cy)
                    label = "UMBRELLA BREAK!"
                    session.effects.bonus_text(runner.x + 20, runner.y - 60, label)
                    session.effects_queue.schedule_sound("shield_break")
                    events.append(CollisionEvent(SHIELD_BREAK, cx, cy, 0, asteroid.id, label))
                    continue
                logger.debug("Asteroid %d struck the runner", asteroid.id)
                events.append(CollisionEvent(FATAL, cx, cy, 0, asteroid.id, None))
                return events

        return events

    def block_bonus(self, gap):
        """Points for a block, tiered by how close to the body the intercept happened."""
        if gap < self.config.PERFECT_BLOCK_DISTANCE:
            points = self.config.PERFECT_BLOCK_BONUS
            return points, f"PERFECT! +{points}"
        if gap < self.config.NICE_BLOCK_DISTANCE:
            points = self.config.NICE_BLOCK_BONUS
            return points, f"NICE! +{points}"
        points = self.config.BLOCK_BONUS
        return points, f"+{points}"
