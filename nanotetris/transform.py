"""3x3 affine transform matrix for 2D coordinates."""

from __future__ import annotations

import math
from collections.abc import Iterator

from nanotetris.vec import Vec2

_SIZE = 3
_IDENTITY = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


class Transform2D:
    """A row-major 3x3 matrix; the default is the identity."""

    width = _SIZE
    height = _SIZE

    def __init__(self, *args: float) -> None:
        if not args:
            args = _IDENTITY
        elif len(args) != _SIZE * _SIZE:
            raise TypeError(
                f"Transform2D takes 0 or {_SIZE * _SIZE} values, got {len(args)}"
            )
        self._m = [float(v) for v in args]

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return self._m[row * _SIZE + col]

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        self._m[row * _SIZE + col] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._m)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform2D):
            return NotImplemented
        return self._m == other._m

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Transform2D({', '.join(f'{v:g}' for v in self._m)})"

    def _copy(self) -> Transform2D:
        return Transform2D(*self._m)

    def combine(self, other: Transform2D) -> Transform2D:
        """Replace this matrix by ``other @ self`` with the last row kept as 0 0 1."""
        lhs = self._copy()
        top = [
            sum(other[i, k] * lhs[k, j] for k in range(_SIZE))
            for i in range(2)
            for j in range(_SIZE)
        ]
        self._m = top + [0.0, 0.0, 1.0]
        return self

    def apply(self, point: Vec2) -> Vec2:
        """Transform a point."""
        return Vec2(
            self[0, 0] * point.x + self[0, 1] * point.y + self[0, 2],
            self[1, 0] * point.x + self[1, 1] * point.y + self[1, 2],
        )

    def __mul__(self, other: Transform2D) -> Transform2D:
        if not isinstance(other, Transform2D):
            return NotImplemented
        return self._copy().combine(other)

    def move(self, offset: Vec2) -> Transform2D:
        """Combine with a translation by ``offset``."""
        return self.combine(Transform2D(1, 0, offset.x, 0, 1, offset.y, 0, 0, 1))

    def moved(self, offset: Vec2) -> Transform2D:
        return self._copy().move(offset)

    def scale(self, factor: Vec2) -> Transform2D:
        """Combine with a scaling by ``factor``."""
        return self.combine(Transform2D(factor.x, 0, 0, 0, factor.y, 0, 0, 0, 1))

    def scaled(self, factor: Vec2) -> Transform2D:
        return self._copy().scale(factor)

    def rotate(self, angle: float, origin: Vec2 = Vec2(0, 0)) -> Transform2D:
        """Combine with a clockwise rotation by ``angle`` radians about ``origin``."""
        cos = math.cos(angle)
        sin = math.sin(angle)
        ox, oy = origin.x, origin.y
        rotation = Transform2D(
            cos, sin, ox * (1 - cos) - oy * sin,
            -sin, cos, oy * (1 - cos) + ox * sin,
            0, 0, 1,
        )
        return self.combine(rotation)

    def rotated(self, angle: float, origin: Vec2 = Vec2(0, 0)) -> Transform2D:
        return self._copy().rotate(angle, origin)