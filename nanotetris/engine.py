"""The engine singleton: window, scene stack and event routing."""

from __future__ import annotations

import enum
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Optional

import pygame

from nanotetris.color import Color
from nanotetris.event import Event
from nanotetris.postman import Postman
from nanotetris.scene import SceneController
from nanotetris.vec import Vec2

BACKGROUND = Color(240, 244, 215)
WINDOW_TITLE = "test"
_SCREEN_SHARE = 0.9


class EngineFlag(enum.IntFlag):
    """Subsystems to initialise; values follow the SDL init flags."""

    AUDIO = 0x00000010
    VIDEO = 0x00000020
    EVENTS = 0x00004000
    ALL = AUDIO | VIDEO | EVENTS


@dataclass
class Window:
    """Window size in pixels and the width/height ratio it was created with."""

    size: Vec2 = field(default_factory=lambda: Vec2(450, 900))
    ratio: float = field(init=False)

    def __post_init__(self) -> None:
        self.ratio = self.size.x / self.size.y


class Engine:
    """Owns the window, the scene stack and the event postman."""

    _instance: ClassVar[Optional[weakref.ReferenceType[Engine]]] = None

    def __init__(self) -> None:
        self.window = Window()
        self.scenarist = SceneController()
        self.supplier = Postman()
        self.flags = EngineFlag(0)
        self.surface: Any = None
        self.frame_count = 0
        self._running = False

    @classmethod
    def instance(cls) -> Engine:
        """Return the live engine, creating one if none is referenced."""
        current = cls._instance() if cls._instance is not None else None
        if current is not None:
            return current
        created = cls()
        cls._instance = weakref.ref(created)
        return created

    @staticmethod
    def assets_path() -> Path:
        return Path("./assets")

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def initialize(self, flags: int) -> None:
        """Start the requested subsystems; with video, open the window."""
        self.flags = EngineFlag(flags)
        try:
            if EngineFlag.AUDIO in self.flags:
                pygame.mixer.init()
            if EngineFlag.VIDEO not in self.flags:
                return
            pygame.display.init()
            sizes = pygame.display.get_desktop_sizes()
        except pygame.error as exc:
            raise RuntimeError(f"engine initialization failed: {exc}") from exc

        height = next((h for _, h in sizes if h > 0), None)
        if height is None:
            raise RuntimeError("failed to get display mode")
        self.window.size = Vec2(height / 2 * _SCREEN_SHARE, height * _SCREEN_SHARE)

        try:
            self.surface = pygame.display.set_mode(
                (int(self.window.size.x), int(self.window.size.y))
            )
        except pygame.error as exc:
            raise RuntimeError(f"failed to create window: {exc}") from exc
        pygame.display.set_caption(WINDOW_TITLE)
        self.surface.fill((BACKGROUND.r, BACKGROUND.g, BACKGROUND.b))

    def new_frame(self) -> None:
        """Begin a frame; counts frames when a window is open."""
        if EngineFlag.VIDEO not in self.flags:
            return
        self.frame_count += 1

    def render(self) -> None:
        """Show the drawn frame and clear the surface for the next one."""
        if EngineFlag.VIDEO not in self.flags or self.surface is None:
            return
        pygame.display.flip()
        self.surface.fill((BACKGROUND.r, BACKGROUND.g, BACKGROUND.b))

    def dispatch(self, event: Event) -> bool:
        """Deliver ``event`` to the handler of the active scene, if any."""
        top = self.scenarist.top()
        return self.supplier.deliver(event, top.id if top is not None else None)

    def shutdown(self) -> None:
        """Close the window and release the subsystems."""
        if EngineFlag.VIDEO in self.flags:
            pygame.display.quit()
        if EngineFlag.AUDIO in self.flags:
            pygame.mixer.quit()
        self.surface = None
        self.flags = EngineFlag(0)