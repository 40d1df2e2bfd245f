"""Scene nodes, the state passed to drawing, and the scene stack."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, ClassVar

from nanotetris.transform import Transform2D


@dataclass
class DrawState:
    """What a drawable needs: a shader program, a texture and a transform."""

    program: Any = None
    texture: Any = None
    transform: Transform2D = field(default_factory=Transform2D)


class Node(ABC):
    """A drawable object with a life cycle; each node gets a unique id."""

    _ids: ClassVar[itertools.count] = itertools.count()

    def __init__(self) -> None:
        self.id: int = next(Node._ids)

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def pause(self) -> None: ...

    @abstractmethod
    def resume(self) -> None: ...

    @abstractmethod
    def process(self, delta: timedelta) -> None:
        """Advance by ``delta`` of elapsed time."""

    @abstractmethod
    def draw(self, state: DrawState) -> None: ...


class SceneController:
    """A stack of scenes; only the top one is active."""

    def __init__(self) -> None:
        self._stack: list[Node] = []

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, scene: Node) -> None:
        """Pause the current scene and start ``scene`` on top of it."""
        if self._stack:
            self._stack[-1].pause()
        self._stack.append(scene)
        scene.start()

    def pop(self) -> Node:
        """Stop and remove the top scene, resuming the one beneath."""
        if not self._stack:
            raise IndexError("pop from an empty scene stack")
        scene = self._stack[-1]
        scene.stop()
        self._stack.pop()
        if self._stack:
            self._stack[-1].resume()
        return scene

    def top(self) -> Node | None:
        """Return the active scene, or None when the stack is empty."""
        return self._stack[-1] if self._stack else None