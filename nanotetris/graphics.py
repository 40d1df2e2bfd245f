"""Textures, vertex buffers and textured shapes drawn onto pygame surfaces."""

from __future__ import annotations

import enum
import logging
import math
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import pygame

from nanotetris.canvas import Canvas
from nanotetris.color import BLACK, Color
from nanotetris.engine import Engine
from nanotetris.scene import DrawState
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2

_log = logging.getLogger(__name__)

_to_bytes = getattr(pygame.image, "tobytes", None) or pygame.image.tostring


class Primitive(enum.IntEnum):
    """How the vertices of a buffer are assembled."""

    UNKNOWN = -1
    POINTS = 0
    LINES = 1
    LINE_LOOP = 2
    LINE_STRIP = 3
    TRIANGLES = 4
    TRIANGLE_STRIP = 5
    TRIANGLE_FAN = 6


@dataclass(frozen=True)
class Vertex:
    """A point with a colour and texture coordinates."""

    pos: Vec2 = field(default_factory=Vec2)
    rgb: Color = BLACK
    tpos: Vec2 = field(default_factory=Vec2)


class VertexBuffer:
    """An immutable sequence of vertices with the primitive they form."""

    def __init__(
        self,
        primitive: Primitive = Primitive.UNKNOWN,
        vertices: Iterable[Vertex] = (),
    ) -> None:
        self._primitive = Primitive(primitive)
        self._vertices = tuple(vertices)

    @property
    def primitive_type(self) -> Primitive:
        return self._primitive

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices)

    def __getitem__(self, index: int) -> Vertex:
        return self._vertices[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VertexBuffer):
            return NotImplemented
        return (self._primitive, self._vertices) == (other._primitive, other._vertices)

    __hash__ = None  # type: ignore[assignment]

    def transformed(self, transform: Transform2D) -> list[Vec2]:
        """Return the vertex positions mapped through ``transform``."""
        return [transform.apply(v.pos) for v in self._vertices]

    def __repr__(self) -> str:
        return f"VertexBuffer({self._primitive.name}, {len(self._vertices)} vertices)"


class Texture2D:
    """An RGB image ready to be drawn."""

    def __init__(self, canvas: Optional[Canvas] = None) -> None:
        self._surface: Any = None
        self._size = Vec2(0, 0)
        if canvas is not None:
            self.load_canvas(canvas)

    @property
    def size(self) -> Vec2:
        return self._size

    @property
    def width(self) -> int:
        return self._size.x

    @property
    def height(self) -> int:
        return self._size.y

    @property
    def surface(self) -> Any:
        """The pygame surface holding the pixels, or None when not loaded."""
        return self._surface

    @property
    def exists(self) -> bool:
        return self._surface is not None

    def load_canvas(self, canvas: Canvas) -> None:
        """Replace the texture's pixels by those of ``canvas``."""
        self.remove()
        size = (canvas.width, canvas.height)
        if canvas.width == 0 or canvas.height == 0:
            surface = pygame.Surface(size)
        else:
            surface = pygame.image.frombuffer(canvas.to_bytes(), size, "RGB").copy()
        self._surface = surface
        self._size = Vec2(canvas.width, canvas.height)

    def load_file(self, path: Union[str, os.PathLike[str]]) -> None:
        """Load an image file, converting it to RGB."""
        try:
            image = pygame.image.load(os.fspath(path))
        except (pygame.error, FileNotFoundError) as exc:
            raise OSError(f"failed loading image {os.fspath(path)}: {exc}") from exc
        width, height = image.get_size()
        data = _to_bytes(image, "RGB")
        self.load_canvas(Canvas.from_bytes(width, height, data))

    def remove(self) -> None:
        """Drop the pixels; the texture no longer exists."""
        self._surface = None
        self._size = Vec2(0, 0)


def _quad(extent: Vec2) -> VertexBuffer:
    return VertexBuffer(
        Primitive.TRIANGLE_STRIP,
        (
            Vertex(pos=Vec2(extent.x, 0), tpos=Vec2(1, 1)),
            Vertex(pos=Vec2(0, 0), tpos=Vec2(0, 1)),
            Vertex(pos=extent, tpos=Vec2(1, 0)),
            Vertex(pos=Vec2(0, extent.y), tpos=Vec2(0, 0)),
        ),
    )


class Shape:
    """A textured vertex buffer with position, rotation, origin and scale."""

    def __init__(
        self,
        vertices: Optional[VertexBuffer] = None,
        texture: Optional[Texture2D] = None,
    ) -> None:
        self._vertices = vertices if vertices is not None else VertexBuffer()
        self._texture = texture
        self._origin = Vec2(0, 0)
        self._position = Vec2(0, 0)
        self._rotation = 0.0
        self._factor = Vec2(1, 1)
        self._size = texture.size if texture is not None else Vec2(0, 0)
        self._transform = Transform2D()
        self._transform_dirty = False
        self.fill = Color(255, 255, 255)
        window = Engine.instance().window
        self.scale(Vec2(1, window.ratio))

    @staticmethod
    def screen_to_ndc(coords: Vec2) -> Vec2:
        """Convert window pixels to normalised device coordinates."""
        window = Engine.instance().window
        return Vec2(
            2 * coords.x / window.size.x,
            2 * coords.y / window.size.y / window.ratio,
        )

    @property
    def vertices(self) -> VertexBuffer:
        return self._vertices

    @property
    def primitive_type(self) -> Primitive:
        return self._vertices.primitive_type

    @property
    def points_count(self) -> int:
        return len(self._vertices)

    @property
    def origin(self) -> Vec2:
        return self._origin

    @origin.setter
    def origin(self, value: Vec2) -> None:
        self._origin = value
        self._transform_dirty = True

    @property
    def position(self) -> Vec2:
        return self._position

    @position.setter
    def position(self, value: Vec2) -> None:
        self._position = value
        self._transform_dirty = True

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = value
        self._transform_dirty = True

    @property
    def factor(self) -> Vec2:
        return self._factor

    @factor.setter
    def factor(self, value: Vec2) -> None:
        self._factor = value
        self._transform_dirty = True

    @property
    def size(self) -> Vec2:
        return self._size

    @property
    def texture(self) -> Optional[Texture2D]:
        return self._texture

    def move(self, offset: Vec2) -> None:
        self.position = self._position + offset

    def scale(self, factor: Vec2) -> None:
        self.factor = Vec2(self._factor.x * factor.x, self._factor.y * factor.y)

    def rotate(self, angle: float) -> None:
        self.rotation = self._rotation + angle

    def set_texture(self, texture: Texture2D) -> None:
        """Use ``texture`` and rebuild the quad to its size relative to the window."""
        if texture is None:
            raise ValueError("a texture is required")
        self._texture = texture
        window = Engine.instance().window
        extent = texture.size / window.size / Vec2(1, window.ratio)
        self._vertices = _quad(extent)
        self._size = texture.size

    def set_size(self, size: Vec2) -> None:
        """Rebuild the quad to cover ``size`` window pixels."""
        window = Engine.instance().window
        self._size = size
        extent = size * Vec2(2, 2) / window.size / Vec2(1, window.ratio)
        self._vertices = _quad(extent)

    def transform(self) -> Transform2D:
        """Return the model transform, recomputed after any change."""
        if self._transform_dirty:
            self._transform = (
                Transform2D()
                .rotate(self._rotation, self._origin)
                .move(self.screen_to_ndc(self._position))
                .scale(self._factor)
            )
            self._transform_dirty = False
        return self._transform

    def set_transform(self, transform: Transform2D) -> None:
        """Override the model transform until the next geometry change."""
        self._transform = transform
        self._transform_dirty = False

    def draw(self, state: DrawState) -> Optional[pygame.Rect]:
        """Draw onto ``state.program`` (a pygame surface).

        Returns the covered rectangle, or None when nothing was drawn.
        """
        target = state.program
        if target is None:
            _log.debug("a render target is needed to draw a shape")
            return None
        if self._texture is None or not self._texture.exists or not len(self._vertices):
            return None

        combined = Transform2D(*state.transform).combine(self.transform())
        width, height = target.get_size()
        points = [
            ((p.x + 1) / 2 * width, (1 - p.y) / 2 * height)
            for p in self._vertices.transformed(combined)
        ]
        left = round(min(x for x, _ in points))
        right = round(max(x for x, _ in points))
        top = round(min(y for _, y in points))
        bottom = round(max(y for _, y in points))
        rect = pygame.Rect(left, top, right - left, bottom - top)
        if rect.width <= 0 or rect.height <= 0:
            return None

        image = pygame.transform.scale(self._texture.surface, rect.size)
        angle = self._rotation
        if angle and not math.isclose(math.fmod(angle, 2 * math.pi), 0.0):
            image = pygame.transform.rotate(image, math.degrees(angle))
        target.blit(image, rect.topleft)
        return rect


class Sprite(Shape):
    """A shape showing a single texture."""

    def __init__(self, texture: Optional[Texture2D] = None) -> None:
        super().__init__()
        if texture is not None:
            self.set_texture(texture)