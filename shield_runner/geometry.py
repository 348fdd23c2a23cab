from collections import namedtuple

import pygame


class Box(namedtuple("Box", ["x", "y", "width", "height"])):
    """Float rectangle. pygame.Rect truncates to ints, which shifts hitboxes of sub-pixel movers."""
    __slots__ = ()

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def center(self):
        return (self.x + self.width / 2, self.y + self.height / 2)

    def move(self, dx, dy):
        return Box(self.x + dx, self.y + dy, self.width, self.height)

    def to_pygame(self):
        return pygame.Rect(round(self.x), round(self.y), round(self.width), round(self.height))


def overlaps(a, b):
    # Exclusive on every edge: boxes that only touch do not collide.
    return a.x < b.right and a.right > b.x and a.y < b.bottom and a.bottom > b.y
