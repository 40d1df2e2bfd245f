"""Small 2D and 3D vector types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Union

Number = Union[int, float]


def strange_round(value: float, precision: float = 0.001) -> float:
    """Round half away from zero after nudging the value up by ``precision``."""
    shifted = value + precision
    return math.copysign(math.floor(abs(shifted) + 0.5), shifted)


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: Number = 0
    y: Number = 0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __mul__(self, other: Vec2 | Number) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x * other.x, self.y * other.y)
        if isinstance(other, Real):
            return Vec2(float(self.x) * other, float(self.y) * other)
        return NotImplemented

    def __truediv__(self, other: Vec2 | Number) -> Vec2:
        if isinstance(other, Vec2):
            return Vec2(self.x / other.x, self.y / other.y)
        if isinstance(other, Real):
            return Vec2(self.x / other, self.y / other)
        return NotImplemented

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def normalized(self) -> Vec2:
        """Return the unit vector pointing the same way."""
        length = math.hypot(self.x, self.y)
        return Vec2(self.x / length, self.y / length)

    def to_int(self) -> Vec2:
        """Return the vector with components rounded by :func:`strange_round`."""
        return Vec2(int(strange_round(self.x)), int(strange_round(self.y)))


@dataclass(frozen=True)
class Vec3:
    """An immutable 3D vector."""

    x: Number = 0
    y: Number = 0
    z: Number = 0

    def normalized(self) -> Vec3:
        """Return the unit vector pointing the same way."""
        length = math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)
        return Vec3(self.x / length, self.y / length, self.z / length)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by position and size."""

    pos: Vec2 = field(default_factory=Vec2)
    size: Vec2 = field(default_factory=Vec2)