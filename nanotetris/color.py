"""RGB colour with 8-bit channels and packed 32-bit conversions."""

from __future__ import annotations

from dataclasses import dataclass

CHANNEL_MIN = 0
CHANNEL_MAX = 255


def _check_channel(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"channel {name} must be an int, got {type(value).__name__}")
    if not CHANNEL_MIN <= value <= CHANNEL_MAX:
        raise ValueError(
            f"channel {name} must be in [{CHANNEL_MIN}, {CHANNEL_MAX}], got {value}"
        )


@dataclass(frozen=True)
class Color:
    """An RGB colour, one byte per channel."""

    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            _check_channel(name, getattr(self, name))

    def packed(self) -> int:
        """Pack as 0xAABBGGRR with full opacity (red in the lowest byte)."""
        return pack_rgba(self.r, self.g, self.b, CHANNEL_MAX)

    @classmethod
    def from_hex(cls, value: int) -> Color:
        """Build a colour from 0xRRGGBB (red in the third byte)."""
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


def pack_rgba(r: int, g: int, b: int, a: int) -> int:
    """Pack four channels as 0xAABBGGRR."""
    for name, value in (("r", r), ("g", g), ("b", b), ("a", a)):
        _check_channel(name, value)
    return r | (g << 8) | (b << 16) | (a << 24)


BLACK = Color(CHANNEL_MIN, CHANNEL_MIN, CHANNEL_MIN)
WHITE = Color(CHANNEL_MAX, CHANNEL_MAX, CHANNEL_MAX)
RED = Color(CHANNEL_MAX, CHANNEL_MIN, CHANNEL_MIN)
GREEN = Color(CHANNEL_MIN, CHANNEL_MAX, CHANNEL_MIN)
BLUE = Color(CHANNEL_MIN, CHANNEL_MIN, CHANNEL_MAX)