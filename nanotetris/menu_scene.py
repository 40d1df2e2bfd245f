"""The title screen: a looping demo animation behind a start button."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Union

import pygame

from nanotetris.audio import DeviceFactory, Sound, WavError
from nanotetris.engine import Engine
from nanotetris.event import (
    TOUCH_MOUSE_ID,
    ButtonState,
    Event,
    EventType,
    MouseButton,
)
from nanotetris.game_scene import GameScene
from nanotetris.postman import SubscriptionKey
from nanotetris.scene import DrawState, Node
from nanotetris.tetramino import (
    Tetramino,
    TetraminoType,
    collides,
    out_of_bounds,
)
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2

_log = logging.getLogger(__name__)

_MUSIC_FILE = "piano-moment.wav"
_BOLD_FONT_FILE = "JetBrainsMonoNerdFont-Bold.ttf"
_LIGHT_FONT_FILE = "JetBrainsMonoNerdFont-Light.ttf"
_TITLE = "TETRIS"
_START_LABEL = "Start"
_TITLE_TOP = 100
_TITLE_COLOR = (50, 0, 70)
_BUTTON_COLOR = (50, 0, 200, 50)
_BUTTON_TEXT_COLOR = (255, 255, 255)

_Step = Callable[[], None]
_Moves = Sequence[tuple[int, int]]


class MenuScene(Node):
    """Main menu; a scripted sequence of pieces plays in the background."""

    def __init__(
        self,
        pixel_width: float,
        assets_dir: Optional[Union[str, os.PathLike[str]]] = None,
        device_factory: Optional[DeviceFactory] = None,
    ) -> None:
        super().__init__()
        self._engine = Engine.instance()
        self._assets_dir = (
            Path(assets_dir) if assets_dir is not None else Engine.assets_path()
        )

        self.bg_music = Sound(device_factory)
        try:
            self.bg_music.load(self._assets_dir / _MUSIC_FILE)
        except (WavError, OSError) as exc:
            _log.debug("failed loading menu music: %s", exc)
        self.bg_music.volume = 50
        self.bg_music.loop = True

        window = self._engine.window
        self._font_size = max(1, int(window.size.x / 5))
        self._font_bold: Any = None
        self._font_light: Any = None
        self._fonts_loaded = False

        self.pixels_size = Vec2(
            pixel_width, pixel_width * GameScene.height / GameScene.width
        )
        self.block_size = self.pixels_size / Vec2(GameScene.width, GameScene.height)
        self.pixels_size_visible = window.size

        self.max_delay = timedelta(seconds=1)
        self.delay = timedelta(0)
        self.blocks: list[Tetramino] = []
        self.falling: Optional[Tetramino] = None
        self.state = 0

        self._subscribe_on_events()
        self._states = self._build_states()

    # events

    def _subscribe(self, event: Event, handler: Callable[[Event], None]) -> None:
        self._engine.supplier.subscribe(SubscriptionKey(event, self.id), handler)

    def _subscribe_on_events(self) -> None:
        engine = self._engine

        def stop_engine(ev: Event) -> None:
            engine.stop()

        def on_click(ev: Event) -> None:
            if ev.mouse_id == TOUCH_MOUSE_ID:
                return
            if self._start_button_rect().collidepoint(int(ev.x), int(ev.y)):
                self._start_game()

        def on_touch(ev: Event) -> None:
            size = engine.window.size
            point = (int(ev.x * size.x), int(ev.y * size.y))
            if self._start_button_rect().collidepoint(point):
                self._start_game()

        self._subscribe(Event(type=EventType.QUIT), stop_engine)
        self._subscribe(Event(type=EventType.WINDOW_CLOSE_REQUEST), stop_engine)
        self._subscribe(
            Event(
                type=EventType.MOUSE_BUTTON_DOWN,
                button=MouseButton.LEFT,
                state=ButtonState.PRESSED,
            ),
            on_click,
        )
        self._subscribe(Event(type=EventType.FINGER_DOWN), on_touch)

    def _start_game(self) -> None:
        game = GameScene(self.pixels_size.x, self._assets_dir)
        self._engine.scenarist.push(game)

    # life cycle

    def start(self) -> None:
        self.bg_music.play()

    def process(self, delta: timedelta) -> None:
        self._process_internal(delta)

    def resume(self) -> None:
        self.bg_music.play()

    def pause(self) -> None:
        self.reset_animation()
        self.bg_music.pause()

    def stop(self) -> None:
        self.reset_animation()
        self.bg_music.stop()

    # drawing

    def _load_fonts(self) -> None:
        if self._fonts_loaded or not pygame.font.get_init():
            return

        def load(filename: str) -> Any:
            try:
                return pygame.font.Font(os.fspath(self._assets_dir / filename), self._font_size)
            except (OSError, pygame.error) as exc:
                _log.debug("failed loading font %s: %s", filename, exc)
                return pygame.font.Font(None, self._font_size)

        self._font_bold = load(_BOLD_FONT_FILE)
        self._font_light = load(_LIGHT_FONT_FILE)
        self._fonts_loaded = True

    def _start_button_rect(self) -> pygame.Rect:
        window = self._engine.window
        self._load_fonts()
        if self._font_bold is not None:
            width, height = self._font_bold.size(_START_LABEL)
        else:
            width, height = window.size.x * 0.4, window.size.x / 5
        off = (window.size.x - width) / 2
        if off > 0:
            left, top = off, window.size.y / 2 - off / 2
        else:
            left, top = 0, 0
        return pygame.Rect(round(left), round(top), round(width), round(height))

    def _draw_ui(self, target: Any) -> None:
        if target is None or not pygame.font.get_init():
            return
        self._load_fonts()
        title = self._font_bold.render(_TITLE, True, _TITLE_COLOR)
        off = (target.get_width() - title.get_width()) / 2
        target.blit(title, (max(off, 0), _TITLE_TOP))

        rect = self._start_button_rect()
        button = pygame.Surface(rect.size, pygame.SRCALPHA)
        button.fill(_BUTTON_COLOR)
        label = self._font_bold.render(_START_LABEL, True, _BUTTON_TEXT_COLOR)
        button.blit(
            label,
            ((rect.width - label.get_width()) // 2, (rect.height - label.get_height()) // 2),
        )
        target.blit(button, rect.topleft)

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
        self._draw_ui(state.program)

    # animation

    def reset_animation(self) -> None:
        """Clear the field and start the demo from its first step."""
        self.state = 0
        self.blocks.clear()
        self.falling = None

    def _spawn(self, kind: TetraminoType) -> _Step:
        def step() -> None:
            if self.falling is None or self.falling.is_locked():
                self.add(Tetramino(kind, self.block_size, self._assets_dir))
                self.state += 1

        return step

    def _steer(self, moves: _Moves = (), rotations: _Moves = ()) -> _Step:
        """Shift and rotate the falling piece at the given step numbers."""
        i = j = k = 0

        def step() -> None:
            nonlocal i, j, k
            if j < len(moves) and i == moves[j][0]:
                self.xshift_falling(moves[j][1])
                j += 1
            if k < len(rotations) and i == rotations[k][0]:
                self.rot_falling(rotations[k][1])
                k += 1
            i += 1
            if self.falling is None or self.falling.is_locked():
                self.state += 1
                i = j = k = 0

        return step

    def _wait(self, steps: int) -> _Step:
        i = 0

        def step() -> None:
            nonlocal i
            if i > steps:
                self.state += 1
            i += 1

        return step

    def _clear_bottom(self, restart: bool) -> _Step:
        """Delete the bottom row every other step, six times over."""
        i = 0

        def step() -> None:
            nonlocal i
            if i == 12:
                if restart:
                    self.state = 0
                else:
                    self.state += 1
                return
            if i % 2 == 0:
                self.delete_row(0)
            i += 1

        return step

    def _build_states(self) -> list[_Step]:
        T = TetraminoType
        return [
            self._spawn(T.O),
            self._steer([(8, 1)]),
            self._spawn(T.J),
            self._steer([(3, 1)], [(7, 1)]),
            self._spawn(T.L),
            self._steer([], [(2, -1)]),
            self._spawn(T.L),
            self._steer([(5, -1)], [(2, -1), (8, -1)]),
            self._spawn(T.J),
            self._steer([(2, 1), (10, 1)], [(8, 1), (9, 1)]),
            self._wait(10),
            self._clear_bottom(restart=False),
            self._spawn(T.S),
            self._steer([(12, -1)], [(5, 1)]),
            self._spawn(T.Z),
            self._steer([(7, 1), (8, 1)], [(5, -1)]),
            self._spawn(T.T),
            self._steer([(7, -1), (8, -1)], [(5, 1), (6, 1)]),
            self._spawn(T.S),
            self._steer([(7, -1), (8, -1)]),
            self._spawn(T.L),
            self._steer([(3, 1), (16, -1)], [(2, -1)]),
            self._spawn(T.T),
            self._steer([(2, 1), (3, 1), (12, 1)], [(5, 1), (6, 1)]),
            self._spawn(T.J),
            self._steer([(10, 1)], [(3, 1)]),
            self._spawn(T.Z),
            self._steer([(2, 1), (3, 2), (5, 1), (12, -1)]),
            self._wait(100),
            self._clear_bottom(restart=True),
        ]

    def _process_internal(self, delta: timedelta) -> None:
        self.delay += delta
        if self.delay < self.max_delay:
            return
        self.delay -= self.max_delay

        if self._states:
            self._states[self.state]()

        if self.falling is None:
            return
        self.falling.process(delta)
        if self._falling_collides():
            self.falling.yshift(1)
            self.lock_falling()

    # field manipulation

    def _falling_collides(self) -> bool:
        falling = self.falling
        if falling is None:
            return False
        return out_of_bounds(falling) or any(
            collides(falling, block) for block in self.blocks
        )

    def add(self, block: Tetramino) -> None:
        """Make ``block`` the falling piece and place it at its spawn cells."""
        self.falling = block
        block.start()

    def xshift_falling(self, step: int) -> None:
        if self.falling is None:
            return
        self.falling.xshift(step)
        if self._falling_collides():
            self.falling.xshift(-step)

    def rot_falling(self, times: int) -> None:
        if self.falling is None:
            return
        self.falling.rot(times)
        if self._falling_collides():
            self.falling.rot(-times)

    def delete_row(self, row: int) -> None:
        """Clear ``row`` and drop everything above it by one."""
        for block in self.blocks:
            for pos in list(block.positions):
                if pos.y == row:
                    block.remove(pos)
        self._shift_down_all_higher(row)

    def _shift_down_all_higher(self, row: int) -> None:
        if row < 0 or row > GameScene.height:
            return
        for block in self.blocks:
            block.positions[:] = [
                Vec2(p.x, p.y - 1) if p.y > row else p for p in block.positions
            ]

    def lock_falling(self) -> None:
        if self.falling is None:
            return
        self.falling.lock()
        self.blocks.append(self.falling)
        self.falling = None