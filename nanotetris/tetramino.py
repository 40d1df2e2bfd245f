"""Tetris pieces: four cells on the playing field that fall, shift and rotate."""

from __future__ import annotations

import enum
import logging
import os
import random
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from nanotetris.engine import Engine
from nanotetris.graphics import Sprite, Texture2D
from nanotetris.scene import DrawState, Node
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2

_log = logging.getLogger(__name__)

FIELD_WIDTH = 10
FIELD_HEIGHT = 24
FIELD_HEIGHT_VISIBLE = 20
MAX_POSITIONS = 4

_QUARTER_TURN = 3.1415 / 2


class TetraminoType(enum.IntEnum):
    I = 0  # noqa: E741
    O = 1  # noqa: E741
    T = 2
    L = 3
    J = 4
    S = 5
    Z = 6


class TetraminoState(enum.Enum):
    FALLING = "falling"
    LOCKED = "locked"


_TEXTURES = {
    TetraminoType.I: "cyan-block.png",
    TetraminoType.J: "blue-block.png",
    TetraminoType.L: "orange-block.png",
    TetraminoType.O: "yellow-block.png",
    TetraminoType.S: "green-block.png",
    TetraminoType.T: "purple-block.png",
    TetraminoType.Z: "red-block.png",
}

# Cells and rotation origin of each piece when it appears above the field.
_SPAWN: dict[TetraminoType, tuple[tuple[tuple[int, int], ...], tuple[float, float]]] = {
    TetraminoType.I: (((3, 20), (4, 20), (5, 20), (6, 20)), (4.5, 20.5)),
    TetraminoType.J: (((3, 21), (3, 20), (4, 20), (5, 20)), (4, 20)),
    TetraminoType.L: (((3, 20), (4, 20), (5, 20), (5, 21)), (4, 20)),
    TetraminoType.O: (((3, 21), (4, 21), (3, 20), (4, 20)), (3.5, 20.5)),
    TetraminoType.S: (((3, 20), (4, 20), (4, 21), (5, 21)), (4, 20)),
    TetraminoType.T: (((3, 20), (4, 20), (4, 21), (5, 20)), (4, 21)),
    TetraminoType.Z: (((3, 21), (4, 21), (4, 20), (5, 20)), (4, 20)),
}


class Tetramino(Node):
    """A piece made of up to four cells, drawn with a block texture."""

    def __init__(
        self,
        kind: TetraminoType,
        block_size: Vec2,
        assets_dir: Optional[Union[str, os.PathLike[str]]] = None,
    ) -> None:
        super().__init__()
        self.kind = TetraminoType(kind)
        self.positions: list[Vec2] = []
        self._origin = Vec2(0.0, 0.0)
        self._state: Optional[TetraminoState] = None

        directory = Path(assets_dir) if assets_dir is not None else Engine.assets_path()
        texture = Texture2D()
        try:
            texture.load_file(directory / _TEXTURES[self.kind])
        except OSError as exc:
            _log.debug("failed loading block texture: %s", exc)
        self._block = Sprite(texture)
        self._block.set_size(block_size)

    @staticmethod
    def random_type() -> TetraminoType:
        return TetraminoType(random.randrange(len(TetraminoType)))

    @property
    def origin(self) -> Vec2:
        """The point the piece rotates about."""
        return self._origin

    @property
    def state(self) -> Optional[TetraminoState]:
        return self._state

    def start(self) -> None:
        """Place the piece at its spawn cells above the visible field."""
        cells, origin = _SPAWN[self.kind]
        self.positions = [Vec2(x, y) for x, y in cells]
        self._origin = Vec2(*origin)
        self._state = TetraminoState.FALLING

    def stop(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def resume(self) -> None:
        pass

    def process(self, delta: timedelta) -> None:
        """Fall by one row unless locked."""
        if self._state is TetraminoState.LOCKED:
            return
        self.positions[:] = [Vec2(p.x, p.y - 1) for p in self.positions]
        self._origin = Vec2(self._origin.x, self._origin.y - 1)

    def lock(self) -> None:
        self._state = TetraminoState.LOCKED

    def is_locked(self) -> bool:
        return self._state is TetraminoState.LOCKED

    def is_falling(self) -> bool:
        return self._state is TetraminoState.FALLING

    def rot(self, times: int) -> None:
        """Rotate clockwise by ``times`` quarter turns (negative turns back)."""
        rotation = Transform2D().rotate(_QUARTER_TURN * times, self._origin)
        self.positions[:] = [rotation.apply(p).to_int() for p in self.positions]

    def rot90(self) -> None:
        self.rot(1)

    def rot270(self) -> None:
        self.rot(-1)

    def xshift(self, step: int) -> None:
        self.positions[:] = [Vec2(p.x + step, p.y) for p in self.positions]
        self._origin = Vec2(self._origin.x + step, self._origin.y)

    def yshift(self, step: int) -> None:
        self.positions[:] = [Vec2(p.x, p.y + step) for p in self.positions]
        self._origin = Vec2(self._origin.x, self._origin.y + step)

    def remove(self, pos: Vec2) -> None:
        """Remove the first cell at ``pos``, if there is one."""
        try:
            self.positions.remove(pos)
        except ValueError:
            pass

    def draw(self, state: DrawState) -> None:
        size = self._block.size
        for pos in self.positions:
            self._block.position = pos * size
            self._block.draw(state)

    def __repr__(self) -> str:
        cells = ", ".join(f"({p.x}, {p.y})" for p in self.positions)
        return f"Tetramino({self.kind.name}, [{cells}])"


def collides(lhs: Tetramino, rhs: Tetramino) -> bool:
    """Whether the two pieces share a cell."""
    return any(left == right for left in lhs.positions for right in rhs.positions)


def out_of_bounds(tetramino: Tetramino) -> bool:
    """Whether any cell of the piece lies outside the playing field."""
    return any(
        p.x < 0 or p.x >= FIELD_WIDTH or p.y < 0 or p.y >= FIELD_HEIGHT
        for p in tetramino.positions
    )