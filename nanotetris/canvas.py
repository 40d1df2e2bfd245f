"""A rectangular RGB pixel buffer."""

from __future__ import annotations

from nanotetris.color import BLACK, Color


class Canvas:
    """A row-major grid of colours indexed by ``canvas[row, col]``."""

    def __init__(self, width: int = 0, height: int = 0, color: Color = BLACK) -> None:
        if width < 0 or height < 0:
            raise ValueError("canvas dimensions must not be negative")
        self._width = width
        self._height = height
        self._pixels: list[Color] = [color] * (width * height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def _offset(self, index: tuple[int, int]) -> int:
        row, col = index
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(
                f"pixel ({row}, {col}) outside {self._width}x{self._height} canvas"
            )
        return row * self._width + col

    def __getitem__(self, index: tuple[int, int]) -> Color:
        return self._pixels[self._offset(index)]

    def __setitem__(self, index: tuple[int, int], value: Color) -> None:
        self._pixels[self._offset(index)] = value

    def fill(self, value: Color) -> None:
        """Set every pixel to ``value``."""
        self._pixels = [value] * len(self._pixels)

    def __eq__(self, other: object) -> bool:
        # Only the pixel sequence is compared, not the dimensions.
        if not isinstance(other, Canvas):
            return NotImplemented
        return self._pixels == other._pixels

    __hash__ = None  # type: ignore[assignment]

    def resize(self, width: int, height: int) -> None:
        """Change dimensions, keeping the linear pixel prefix and padding with black."""
        if width < 0 or height < 0:
            raise ValueError("canvas dimensions must not be negative")
        size = width * height
        kept = self._pixels[:size]
        self._pixels = kept + [BLACK] * (size - len(kept))
        self._width = width
        self._height = height

    def transpose(self) -> None:
        """Swap rows and columns in place."""
        w, h = self._width, self._height
        self._pixels = [self._pixels[j * w + i] for i in range(w) for j in range(h)]
        self._width, self._height = h, w

    def to_bytes(self) -> bytes:
        """Return the pixels as packed RGB bytes, row by row."""
        return bytes(channel for c in self._pixels for channel in (c.r, c.g, c.b))

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> Canvas:
        """Build a canvas from packed RGB bytes."""
        expected = width * height * 3
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes, got {len(data)}")
        canvas = cls(width, height)
        channels = iter(data)
        canvas._pixels = [Color(r, g, b) for r, g, b in zip(channels, channels, channels)]
        return canvas

    def __repr__(self) -> str:
        return f"Canvas(width={self._width}, height={self._height})"