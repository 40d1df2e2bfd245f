"""Sound buffers, WAV loading and a pull-model sound player."""

from __future__ import annotations

import enum
import os
import struct
import sys
import threading
import time
from array import array
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Union

MAX_VOLUME = 128
"""Full volume; samples are scaled by ``volume / MAX_VOLUME`` when mixed."""

_INT_MAX = 2**31 - 1

_WAVE_FORMAT_PCM = 0x0001
_WAVE_FORMAT_IEEE_FLOAT = 0x0003
_WAVE_FORMAT_EXTENSIBLE = 0xFFFE

_STRUCTURE_MESSAGE = "failed while reading file wav structure"
_UNSUPPORTED_MESSAGE = "unsupported specification data (format or channels)"


class AudioFormat(enum.IntEnum):
    """Sample formats; the values follow the SDL audio format numbering."""

    UNKNOWN = 0
    S16 = 0x8010
    F32 = 0x8120


class Channels(enum.IntEnum):
    UNKNOWN = 0
    MONO = 1
    STEREO = 2


@dataclass(frozen=True)
class AudioSpec:
    """How the bytes of a sound buffer are to be interpreted."""

    frequency: int = 0
    fmt: AudioFormat = AudioFormat.UNKNOWN
    channels: Channels = Channels.UNKNOWN
    silence: int = 0


@dataclass(frozen=True)
class SoundBuffer:
    """Raw little-endian sample data together with its specification."""

    data: bytes = b""
    spec: AudioSpec = field(default_factory=AudioSpec)

    @property
    def size(self) -> int:
        """Length of the data in bytes, capped at the largest 32-bit int."""
        return min(len(self.data), _INT_MAX)


class WavError(Exception):
    """Raised when a WAV file cannot be read or is not supported."""


def _chunks(raw: bytes) -> dict[bytes, bytes]:
    found: dict[bytes, bytes] = {}
    offset = 12
    while offset + 8 <= len(raw):
        chunk_id = raw[offset : offset + 4]
        (size,) = struct.unpack_from("<I", raw, offset + 4)
        found.setdefault(chunk_id, raw[offset + 8 : offset + 8 + size])
        offset += 8 + size + (size & 1)
    return found


def _parse_wav(raw: bytes) -> SoundBuffer:
    if len(raw) < 12 or raw[:4] != b"RIFF" or raw[8:12] != b"WAVE":
        raise WavError(_STRUCTURE_MESSAGE)

    chunks = _chunks(raw)
    fmt_chunk = chunks.get(b"fmt ")
    data = chunks.get(b"data")
    if fmt_chunk is None or len(fmt_chunk) < 16 or data is None:
        raise WavError(_STRUCTURE_MESSAGE)

    tag, channels, rate, _, block_align, bits = struct.unpack_from("<HHIIHH", fmt_chunk)
    if tag == _WAVE_FORMAT_EXTENSIBLE:
        if len(fmt_chunk) < 26:
            raise WavError(_STRUCTURE_MESSAGE)
        (tag,) = struct.unpack_from("<H", fmt_chunk, 24)
    if channels == 0 or rate == 0:
        raise WavError(_STRUCTURE_MESSAGE)

    if channels > 2:
        raise WavError(_UNSUPPORTED_MESSAGE)
    if tag == _WAVE_FORMAT_PCM and bits == 16:
        sample_format = AudioFormat.S16
    elif tag == _WAVE_FORMAT_IEEE_FLOAT and bits == 32:
        sample_format = AudioFormat.F32
    else:
        raise WavError(_UNSUPPORTED_MESSAGE)

    if block_align:
        data = data[: len(data) - len(data) % block_align]
    spec = AudioSpec(
        frequency=rate,
        fmt=sample_format,
        channels=Channels(channels),
        silence=0,
    )
    return SoundBuffer(bytes(data), spec)


def load_wav(path: Union[str, os.PathLike[str]]) -> SoundBuffer:
    """Read a 16-bit integer or 32-bit float WAV file with one or two channels."""
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError as exc:
        raise WavError(f"{_STRUCTURE_MESSAGE}: {exc}") from exc
    return _parse_wav(raw)


def _mix(dst: bytearray, src: bytes, fmt: AudioFormat, volume: int) -> None:
    """Add ``src`` scaled by volume onto the start of ``dst``, clipping."""
    if fmt is AudioFormat.F32:
        code = "f"
    elif fmt is AudioFormat.S16:
        code = "h"
    else:
        return
    itemsize = array(code).itemsize
    count = len(src) // itemsize * itemsize
    if count == 0:
        return

    samples = array(code, src[:count])
    base = array(code, bytes(dst[:count]))
    if sys.byteorder == "big":
        samples.byteswap()
        base.byteswap()

    if fmt is AudioFormat.F32:
        scale = volume / MAX_VOLUME
        mixed = array(
            code, (max(-1.0, min(1.0, b + s * scale)) for b, s in zip(base, samples))
        )
    else:
        mixed = array(
            code,
            (
                max(-32768, min(32767, b + int(s * volume / MAX_VOLUME)))
                for b, s in zip(base, samples)
            ),
        )
    if sys.byteorder == "big":
        mixed.byteswap()
    dst[:count] = mixed.tobytes()


DeviceFactory = Callable[[AudioSpec, Callable[[int], bytes]], Any]


def _open_sdl_device(spec: AudioSpec, fill: Callable[[int], bytes]) -> Any:
    """Open the default output device; it starts paused and pulls from ``fill``."""
    import pygame
    from pygame._sdl2 import audio as sdl_audio

    def callback(_device: Any, stream: memoryview) -> None:
        stream[:] = fill(len(stream))

    try:
        return sdl_audio.AudioDevice(
            devicename=None,
            iscapture=False,
            frequency=spec.frequency,
            audioformat=int(spec.fmt),
            numchannels=int(spec.channels),
            chunksize=512,
            allowed_changes=0,
            callback=callback,
        )
    except pygame.error as exc:
        raise OSError(f"failed to open audio device: {exc}") from exc


class SoundStatus(enum.Enum):
    STOPPED = 0
    PAUSED = 1
    PLAYING = 2


class Sound:
    """Plays a sound buffer through an output device that pulls samples.

    The device asks for data through :meth:`fill`; when the end of the buffer
    is reached the sound either starts over (``loop``) or stops.
    """

    def __init__(self, device_factory: DeviceFactory | None = None) -> None:
        self.loop = False
        self._device_factory = device_factory or _open_sdl_device
        self._device: Any = None
        self._buffer = SoundBuffer()
        self._position = 0
        self._volume = 0
        self._status = SoundStatus.STOPPED
        self._lock = threading.RLock()

    def load(self, source: Union[SoundBuffer, str, os.PathLike[str]]) -> None:
        """Use ``source`` (a buffer or a WAV path), opening a device the first time."""
        buffer = source if isinstance(source, SoundBuffer) else load_wav(source)
        with self._lock:
            self._buffer = buffer
            if self._device is not None:
                return
        self._device = self._device_factory(buffer.spec, self.fill)

    @property
    def position(self) -> int:
        return self._position

    @position.setter
    def position(self, value: int) -> None:
        with self._lock:
            self._position = value

    @property
    def volume(self) -> int:
        return self._volume

    @volume.setter
    def volume(self, value: int) -> None:
        self._volume = max(0, min(MAX_VOLUME, value))

    @property
    def status(self) -> SoundStatus:
        return self._status

    @property
    def spec(self) -> AudioSpec:
        return self._buffer.spec

    @property
    def size(self) -> int:
        return self._buffer.size

    @property
    def data(self) -> bytes:
        return self._buffer.data

    def fill(self, length: int) -> bytes:
        """Return the next ``length`` bytes of output, advancing the position."""
        with self._lock:
            spec = self._buffer.spec
            out = bytearray([spec.silence]) * length
            pos = self._position
            left = max(self.size - pos, 0)
            if left > length:
                _mix(out, self._buffer.data[pos : pos + length], spec.fmt, self._volume)
                self._position = pos + length
            else:
                _mix(out, self._buffer.data[pos : pos + left], spec.fmt, self._volume)
                if self.loop:
                    self._position = 0
                else:
                    self.stop()
            return bytes(out)

    def play(self) -> None:
        with self._lock:
            self._status = SoundStatus.PLAYING
        if self._device is not None:
            self._device.pause(0)

    def play_sync(self) -> None:
        """Play and wait until the sound stops."""
        if self._device is None:
            raise RuntimeError("no audio device is open; load a sound first")
        self.play()
        while self._status is not SoundStatus.STOPPED:
            time.sleep(0.001)

    def pause(self) -> None:
        if self._device is not None:
            self._device.pause(1)
        with self._lock:
            self._status = SoundStatus.PAUSED

    def stop(self) -> None:
        if self._device is not None:
            self._device.pause(1)
        with self._lock:
            self._status = SoundStatus.STOPPED
            self._position = 0

    def toggle(self) -> None:
        """Pause a playing sound, otherwise play it."""
        if self._status is SoundStatus.PLAYING:
            self.pause()
        else:
            self.play()