"""The playing field: falling piece, locked pieces, scoring and controls."""

from __future__ import annotations

import logging
import math
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Union

import pygame

from nanotetris.audio import Sound, WavError
from nanotetris.engine import Engine
from nanotetris.event import Event, EventType, KeyInfo, Keycode, Keymod
from nanotetris.postman import SubscriptionKey
from nanotetris.scene import DrawState, Node
from nanotetris.tetramino import (
    FIELD_HEIGHT,
    FIELD_HEIGHT_VISIBLE,
    FIELD_WIDTH,
    Tetramino,
    collides,
    out_of_bounds,
)
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2

_log = logging.getLogger(__name__)

_SCORE_COLOR = (200, 100, 200)
_SCORE_TOP = 100
_MIN_DELAY = timedelta(milliseconds=100)
_DELAY_STEP = timedelta(milliseconds=25)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def arithmetic_progression_sum(begin: int, end: int, step: int) -> int:
    """Sum of begin..end in integer arithmetic, halving the end sum first."""
    return _trunc_div(_trunc_div(begin + end, 2) * (end - begin + 1), step)


class GameScene(Node):
    """One game of tetris on a 10 by 24 field, of which 20 rows are visible."""

    height = FIELD_HEIGHT
    height_visible = FIELD_HEIGHT_VISIBLE
    width = FIELD_WIDTH

    def __init__(
        self,
        pixel_width: float,
        assets_dir: Optional[Union[str, os.PathLike[str]]] = None,
    ) -> None:
        super().__init__()
        self._engine = Engine.instance()
        self._assets_dir = (
            Path(assets_dir) if assets_dir is not None else Engine.assets_path()
        )

        self.blocks: list[Tetramino] = []
        self.falling: Optional[Tetramino] = None
        self.score = 0
        self.max_delay = timedelta(seconds=1)
        self.delay = timedelta(0)
        self._xoffset = 0.0
        self._yoffset = 0.0
        self._is_motion = False
        self._font: Any = None

        self.bg_beat = Sound()
        self.death = Sound()
        self.collision = Sound()
        self._load_sound(self.bg_beat, "8bit-music.wav", volume=30, loop=True)
        self._death_loaded = self._load_sound(self.death, "death.wav", volume=100)
        self._load_sound(self.collision, "tetramino-collision.wav", volume=30)

        window = self._engine.window
        self.pixels_size = Vec2(pixel_width, pixel_width * self.height / self.width)
        self.block_size = self.pixels_size / Vec2(self.width, self.height)
        self.pixels_size_visible = window.size

        self._subscribe_on_events()

    def _load_sound(
        self, sound: Sound, filename: str, volume: int, loop: bool = False
    ) -> bool:
        try:
            sound.load(self._assets_dir / filename)
        except (WavError, OSError) as exc:
            _log.debug("failed loading sound %s: %s", filename, exc)
            return False
        sound.volume = volume
        sound.loop = loop
        return True

    def _subscribe(self, event: Event, handler) -> None:
        self._engine.supplier.subscribe(SubscriptionKey(event, self.id), handler)

    def _subscribe_on_events(self) -> None:
        engine = self._engine

        def on_motion(ev: Event) -> None:
            if self._is_motion:
                self._xoffset += ev.dx * engine.window.size.x
            # only -1, 0 or 1 cells per event
            div = int(self._xoffset / self.block_size.x)
            div = int(math.fmod(div, 2))
            self.xshift_falling(div)
            self._xoffset -= div * self.block_size.x
            self._is_motion = True

        def on_pressed_motion(ev: Event) -> None:
            if ev.dy > abs(ev.dx):
                self._yoffset += engine.window.size.y * (ev.dy if ev.dy > 0 else 0)
                if self._yoffset > self.block_size.y:
                    self.shift_down()
                    self._yoffset -= self.block_size.y
                    return
            on_motion(ev)

        def on_finger_up(ev: Event) -> None:
            if not self._is_motion:
                self.rot90_falling()
            else:
                self._is_motion = False

        def stop_engine(ev: Event) -> None:
            engine.stop()

        self._subscribe(Event(type=EventType.FINGER_MOTION), on_pressed_motion)
        self._subscribe(Event(type=EventType.FINGER_UP), on_finger_up)
        self._subscribe(Event(type=EventType.QUIT), stop_engine)
        self._subscribe(Event(type=EventType.WINDOW_CLOSE_REQUEST), stop_engine)

        keys = {
            Keycode.D: lambda ev: self.xshift_falling(1),
            Keycode.A: lambda ev: self.xshift_falling(-1),
            Keycode.H: lambda ev: self.rot270_falling(),
            Keycode.L: lambda ev: self.rot90_falling(),
            Keycode.J: lambda ev: self.shift_down(),
        }
        for keycode, handler in keys.items():
            event = Event(
                type=EventType.KEY_DOWN, key=KeyInfo(keycode=keycode, mod=Keymod.NONE)
            )
            self._subscribe(event, handler)

    def _new_tetramino(self) -> Tetramino:
        return Tetramino(Tetramino.random_type(), self.block_size, self._assets_dir)

    def add(self, block: Tetramino) -> None:
        """Make ``block`` the falling piece and place it at its spawn cells."""
        self.falling = block
        block.start()

    def start(self) -> None:
        self.add(self._new_tetramino())
        self.bg_beat.play()

    def stop(self) -> None:
        self.bg_beat.stop()

    def pause(self) -> None:
        self.bg_beat.pause()

    def resume(self) -> None:
        self.bg_beat.play()

    def _falling_collides(self) -> bool:
        falling = self.falling
        if falling is None:
            return False
        return out_of_bounds(falling) or any(
            collides(falling, block) for block in self.blocks
        )

    def xshift_falling(self, step: int) -> None:
        """Shift the falling piece sideways unless that makes it collide."""
        if self.falling is None:
            return
        self.falling.xshift(step)
        if self._falling_collides():
            self.falling.xshift(-step)

    def shift_down(self) -> None:
        """Make the falling piece drop on the next processed frame."""
        if self.falling is None or self.falling.is_locked():
            return
        self.delay += self.max_delay

    def rot_falling(self, times: int) -> None:
        """Rotate the falling piece unless that makes it collide."""
        if self.falling is None:
            return
        self.falling.rot(times)
        if self._falling_collides():
            self.falling.rot(-times)

    def rot90_falling(self) -> None:
        self.rot_falling(1)

    def rot270_falling(self) -> None:
        self.rot_falling(-1)

    def is_game_over(self) -> bool:
        """Whether a locked piece sticks out above the visible field."""
        return any(
            pos.y > self.height_visible for block in self.blocks for pos in block.positions
        )

    def delete_full_rows(self) -> None:
        row = 0
        while row < self.height_visible:
            if self.is_full_row(row):
                self.delete_row(row)
            else:
                row += 1

    def delete_row(self, row: int) -> None:
        """Clear ``row``, score it, speed up and drop everything above it."""
        for block in self.blocks:
            for pos in list(block.positions):
                if pos.y == row:
                    block.remove(pos)
        self.score += arithmetic_progression_sum(1, 9, 1)
        if self.max_delay > _MIN_DELAY:
            self.max_delay -= _DELAY_STEP
        self._shift_down_all_higher(row)

    def _shift_down_all_higher(self, row: int) -> None:
        if row < 0 or row > self.height:
            return
        for block in self.blocks:
            block.positions[:] = [
                Vec2(p.x, p.y - 1) if p.y > row else p for p in block.positions
            ]

    def is_full_row(self, row: int) -> bool:
        if row < 0 or row > self.height_visible:
            return False
        max_row_sum = arithmetic_progression_sum(1, self.width - 1, 1)
        has_first_column = False
        row_sum = 0
        for block in self.blocks:
            for pos in block.positions:
                if pos.y != row:
                    continue
                if pos.x == 0:
                    has_first_column = True
                else:
                    row_sum += pos.x
        return has_first_column and row_sum == max_row_sum

    def lock_falling(self) -> None:
        if self.falling is None:
            return
        self.falling.lock()
        self.blocks.append(self.falling)

    def process(self, delta: timedelta) -> None:
        """Advance time; once a full delay has passed the falling piece drops."""
        self.delay += delta
        if self.delay < self.max_delay:
            return
        self.delay -= self.max_delay

        if self.falling is None:
            return
        self.falling.process(delta)
        self.score += 1

        if not self._falling_collides():
            return

        self.falling.yshift(1)
        self.lock_falling()
        self.collision.play()

        if self.is_game_over():
            self.bg_beat.stop()
            if self._death_loaded:
                self.death.play_sync()
            self._engine.scenarist.pop()
            return

        self.delete_full_rows()
        self.add(self._new_tetramino())

    def _draw_score(self, target: Any) -> None:
        if target is None or not pygame.font.get_init():
            return
        if self._font is None:
            self._font = pygame.font.Font(None, 64)
        text = self._font.render(str(self.score), True, _SCORE_COLOR)
        x = (self._engine.window.size.x - text.get_width()) / 2
        target.blit(text, (x, _SCORE_TOP))

    def draw(self, state: DrawState) -> None:
        window = self._engine.window
        shift = Transform2D().move(
            -self.pixels_size_visible / window.size / Vec2(1, window.ratio)
        )
        local = DrawState(
            program=state.program,
            texture=state.texture,
            transform=Transform2D(*state.transform).combine(shift),
        )
        if self.falling is not None:
            self.falling.draw(local)
        for block in self.blocks:
            block.draw(local)
        self._draw_score(state.program)