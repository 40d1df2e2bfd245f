"""Reading and writing PPM images (P3 text and P6 binary)."""

from __future__ import annotations

import enum
from typing import BinaryIO

from nanotetris.canvas import Canvas

MAX_IMAGE_SIZE = 1 << 12
MIN_IMAGE_SIZE = 0
MAX_COLOR_VALUE = 255
MIN_COLOR_VALUE = 0


class PpmFormat(enum.Enum):
    P3 = "P3"
    P6 = "P6"


class PpmError(Exception):
    """Base class for PPM reading and writing errors."""

    default_message = "PPM error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class BadStreamError(PpmError):
    default_message = (
        "bad stream was provided in arguments, or fail when reading or writing"
    )


class IncorrectFormatError(PpmError):
    default_message = "incorrect format, it should be P3 or P6"


class LimitsViolationError(PpmError):
    default_message = "image width, height or max color value are out of bounds"


class IncorrectHeaderError(PpmError):
    default_message = "header formatting is incorrect"


class _Reader:
    """Byte reader with one byte of push-back, mimicking stream extraction."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending = b""

    def _read(self, size: int) -> bytes:
        try:
            data = self._stream.read(size)
        except (OSError, ValueError) as exc:
            raise BadStreamError() from exc
        if data is None:
            raise BadStreamError()
        return bytes(data)

    def get(self) -> bytes:
        if self._pending:
            byte, self._pending = self._pending, b""
            return byte
        return self._read(1)

    def unget(self, byte: bytes) -> None:
        self._pending = byte

    def read(self, size: int) -> bytes:
        head, self._pending = self._pending[:size], self._pending[size:]
        return head + self._read(size - len(head)) if size > len(head) else head

    def _skip_space(self) -> bytes:
        byte = self.get()
        while byte and byte.isspace():
            byte = self.get()
        return byte

    def word(self) -> str:
        byte = self._skip_space()
        chars = []
        while byte and not byte.isspace():
            chars.append(byte)
            byte = self.get()
        self.unget(byte)
        if not chars:
            raise BadStreamError()
        return b"".join(chars).decode("latin-1")

    def integer(self) -> int:
        byte = self._skip_space()
        sign = 1
        if byte in (b"+", b"-"):
            sign = -1 if byte == b"-" else 1
            byte = self.get()
        digits = []
        while byte and byte.isdigit():
            digits.append(byte)
            byte = self.get()
        self.unget(byte)
        if not digits:
            raise BadStreamError()
        return sign * int(b"".join(digits))


def load(stream: BinaryIO) -> Canvas:
    """Read a P3 or P6 image from a binary stream."""
    reader = _Reader(stream)
    fmt = reader.word()
    width = reader.integer()
    height = reader.integer()
    max_color = reader.integer()
    separator = reader.get()
    if not separator:
        raise BadStreamError()

    if fmt not in (PpmFormat.P3.value, PpmFormat.P6.value):
        raise IncorrectFormatError()
    if (
        not MIN_IMAGE_SIZE <= width <= MAX_IMAGE_SIZE
        or not MIN_IMAGE_SIZE <= height <= MAX_IMAGE_SIZE
        or max_color != MAX_COLOR_VALUE
    ):
        raise LimitsViolationError()
    if not separator.isspace():
        raise IncorrectHeaderError()

    size = width * height * 3
    if fmt == PpmFormat.P6.value:
        data = reader.read(size)
        if len(data) != size:
            raise BadStreamError("unexpected end of pixel data")
    else:
        data = bytes(reader.integer() & 0xFF for _ in range(size))
    return Canvas.from_bytes(width, height, data)


def dump(stream: BinaryIO, canvas: Canvas, fmt: PpmFormat = PpmFormat.P6) -> None:
    """Write ``canvas`` to a binary stream in the given format."""
    if getattr(stream, "closed", False):
        raise BadStreamError()

    header = f"{fmt.value}\n{canvas.width} {canvas.height}\n{MAX_COLOR_VALUE}\n"
    pixels = canvas.to_bytes()
    if fmt is PpmFormat.P3:
        channels = iter(pixels)
        body = "".join(
            f"{r} {g} {b}\n" for r, g, b in zip(channels, channels, channels)
        ).encode("ascii")
    else:
        body = pixels

    try:
        stream.write(header.encode("ascii") + body)
    except (OSError, ValueError) as exc:
        raise BadStreamError() from exc