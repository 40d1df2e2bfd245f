"""Input and window events, and conversion from pygame events."""

from __future__ import annotations

import enum
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import pygame

TOUCH_MOUSE_ID = -1
"""Mouse id reported for mouse events synthesised from touch input."""

TEXT_SIZE = 32


class EventType(enum.IntEnum):
    """Kinds of events; the values follow the SDL event numbering."""

    UNKNOWN = 0x000

    QUIT = 0x100

    KEY_DOWN = 0x300
    KEY_UP = 0x301
    TEXT_EDIT = 0x302
    TEXT_INPUT = 0x303
    KEYMAP_CHANGE = 0x304

    MOUSE_MOTION = 0x400
    MOUSE_BUTTON_DOWN = 0x401
    MOUSE_BUTTON_UP = 0x402
    MOUSE_WHEEL = 0x403

    FINGER_DOWN = 0x700
    FINGER_UP = 0x701
    FINGER_MOTION = 0x702

    WINDOW_SHOW = 0x202
    WINDOW_HIDE = 0x203
    WINDOW_EXPOSE = 0x204
    WINDOW_MOVE = 0x205
    WINDOW_RESIZE = 0x206
    WINDOW_PIXEL_SIZE_CHANGE = 0x207
    WINDOW_MINIMIZE = 0x208
    WINDOW_MAXIMIZE = 0x209
    WINDOW_RESTORE = 0x20A
    WINDOW_MOUSE_ENTER = 0x20B
    WINDOW_MOUSE_LEAVE = 0x20C
    WINDOW_FOCUS_GAIN = 0x20D
    WINDOW_FOCUS_LOST = 0x20E
    WINDOW_CLOSE_REQUEST = 0x20F


class Keycode(enum.IntEnum):
    """Key codes for printable keys and a few control keys (lower case only)."""

    UNKNOWN = 0

    RETURN = ord("\r")
    ESCAPE = 0x1B
    BACKSPACE = ord("\b")
    TAB = ord("\t")
    SPACE = ord(" ")
    EXCLAIM = ord("!")
    QUOTEDBL = ord('"')
    HASH = ord("#")
    PERCENT = ord("%")
    DOLLAR = ord("$")
    AMPERSAND = ord("&")
    QUOTE = ord("'")
    LEFTPAREN = ord("(")
    RIGHTPAREN = ord(")")
    ASTERISK = ord("*")
    PLUS = ord("+")
    COMMA = ord(",")
    MINUS = ord("-")
    PERIOD = ord(".")
    SLASH = ord("/")
    KB_0 = ord("0")
    KB_1 = ord("1")
    KB_2 = ord("2")
    KB_3 = ord("3")
    KB_4 = ord("4")
    KB_5 = ord("5")
    KB_6 = ord("6")
    KB_7 = ord("7")
    KB_8 = ord("8")
    KB_9 = ord("9")
    COLON = ord(":")
    SEMICOLON = ord(";")
    LESS = ord("<")
    EQUALS = ord("=")
    GREATER = ord(">")
    QUESTION = ord("?")
    AT = ord("@")

    LEFTBRACKET = ord("[")
    BACKSLASH = ord("\\")
    RIGHTBRACKET = ord("]")
    CARET = ord("^")
    UNDERSCORE = ord("_")
    BACKQUOTE = ord("`")
    A = ord("a")
    B = ord("b")
    C = ord("c")
    D = ord("d")
    E = ord("e")
    F = ord("f")
    G = ord("g")
    H = ord("h")
    I = ord("i")  # noqa: E741
    J = ord("j")
    K = ord("k")
    L = ord("l")
    M = ord("m")
    N = ord("n")
    O = ord("o")  # noqa: E741
    P = ord("p")
    Q = ord("q")
    R = ord("r")
    S = ord("s")
    T = ord("t")
    U = ord("u")
    V = ord("v")
    W = ord("w")
    X = ord("x")
    Y = ord("y")
    Z = ord("z")


class Keymod(enum.IntFlag):
    """Keyboard modifier bits."""

    NONE = 0x0000
    LSHIFT = 0x0001
    RSHIFT = 0x0002
    LCTRL = 0x0040
    RCTRL = 0x0080
    LALT = 0x0100
    RALT = 0x0200
    LGUI = 0x0400
    RGUI = 0x0800
    NUM = 0x1000
    CAPS = 0x2000
    MODE = 0x4000
    SCROLL = 0x8000

    CTRL = LCTRL | RCTRL
    SHIFT = LSHIFT | RSHIFT
    ALT = LALT | RALT
    GUI = LGUI | RGUI


_KEYMOD_MASK = 0xFFC3


class ButtonState(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1


class MouseButton(enum.IntEnum):
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


class WheelDirection(enum.IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3


@dataclass(frozen=True)
class KeyInfo:
    """The key part of a keyboard event."""

    keycode: Keycode = Keycode.UNKNOWN
    mod: Keymod = Keymod.NONE
    scancode: int = 0


@dataclass
class Event:
    """One input or window event; only the fields relevant to ``type`` are set."""

    type: EventType = EventType.UNKNOWN
    timestamp: int = 0  # nanoseconds

    # keyboard
    key: KeyInfo = field(default_factory=KeyInfo)
    repeat: bool = False

    # mouse, motion, wheel, finger
    window_id: int = 0
    mouse_id: int = 0
    button: MouseButton | None = None
    state: ButtonState = ButtonState.RELEASED
    clicks: int = 0
    x: float = 0.0
    y: float = 0.0
    xrel: float = 0.0
    yrel: float = 0.0
    direction: WheelDirection = WheelDirection.UP
    mouse_x: float = 0.0
    mouse_y: float = 0.0
    touch_id: int = 0
    finger_id: int = 0
    dx: float = 0.0
    dy: float = 0.0
    pressure: float = 0.0

    # text
    text: str = ""
    start: int = 0
    length: int = 0


_TYPE_MAP: dict[int, EventType] = {
    pygame.QUIT: EventType.QUIT,
    pygame.KEYDOWN: EventType.KEY_DOWN,
    pygame.KEYUP: EventType.KEY_UP,
    pygame.TEXTEDITING: EventType.TEXT_EDIT,
    pygame.TEXTINPUT: EventType.TEXT_INPUT,
    pygame.MOUSEMOTION: EventType.MOUSE_MOTION,
    pygame.MOUSEBUTTONDOWN: EventType.MOUSE_BUTTON_DOWN,
    pygame.MOUSEBUTTONUP: EventType.MOUSE_BUTTON_UP,
    pygame.MOUSEWHEEL: EventType.MOUSE_WHEEL,
    pygame.FINGERDOWN: EventType.FINGER_DOWN,
    pygame.FINGERUP: EventType.FINGER_UP,
    pygame.FINGERMOTION: EventType.FINGER_MOTION,
    pygame.WINDOWSHOWN: EventType.WINDOW_SHOW,
    pygame.WINDOWHIDDEN: EventType.WINDOW_HIDE,
    pygame.WINDOWEXPOSED: EventType.WINDOW_EXPOSE,
    pygame.WINDOWMOVED: EventType.WINDOW_MOVE,
    pygame.WINDOWRESIZED: EventType.WINDOW_RESIZE,
    pygame.WINDOWSIZECHANGED: EventType.WINDOW_PIXEL_SIZE_CHANGE,
    pygame.WINDOWMINIMIZED: EventType.WINDOW_MINIMIZE,
    pygame.WINDOWMAXIMIZED: EventType.WINDOW_MAXIMIZE,
    pygame.WINDOWRESTORED: EventType.WINDOW_RESTORE,
    pygame.WINDOWENTER: EventType.WINDOW_MOUSE_ENTER,
    pygame.WINDOWLEAVE: EventType.WINDOW_MOUSE_LEAVE,
    pygame.WINDOWFOCUSGAINED: EventType.WINDOW_FOCUS_GAIN,
    pygame.WINDOWFOCUSLOST: EventType.WINDOW_FOCUS_LOST,
    pygame.WINDOWCLOSE: EventType.WINDOW_CLOSE_REQUEST,
}

_WINDOW_TYPES = frozenset(
    t for t in EventType if t.name.startswith("WINDOW_")
)


def _keycode(value: int) -> Keycode:
    try:
        return Keycode(value)
    except ValueError:
        return Keycode.UNKNOWN


def _mouse_id(pg_event: Any) -> int:
    if getattr(pg_event, "touch", False):
        return TOUCH_MOUSE_ID
    return int(getattr(pg_event, "which", 0) or 0)


def _window_id(pg_event: Any) -> int:
    return int(getattr(pg_event, "window_id", 0) or 0)


def from_pygame_event(pg_event: Any) -> Event:
    """Convert a pygame event; unsupported kinds come back as ``UNKNOWN``."""
    ev_type = _TYPE_MAP.get(pg_event.type, EventType.UNKNOWN)
    timestamp = getattr(pg_event, "timestamp", None)
    ev = Event(
        type=ev_type,
        timestamp=int(timestamp) if timestamp is not None else time.monotonic_ns(),
    )

    if ev_type in (EventType.KEY_DOWN, EventType.KEY_UP):
        ev.key = KeyInfo(
            keycode=_keycode(int(getattr(pg_event, "key", 0))),
            mod=Keymod(int(getattr(pg_event, "mod", 0)) & _KEYMOD_MASK),
            scancode=int(getattr(pg_event, "scancode", 0)),
        )
        ev.repeat = bool(getattr(pg_event, "repeat", False))
    elif ev_type in (EventType.MOUSE_BUTTON_DOWN, EventType.MOUSE_BUTTON_UP):
        ev.mouse_id = _mouse_id(pg_event)
        button = int(getattr(pg_event, "button", 0))
        ev.button = MouseButton(button) if button in MouseButton._value2member_map_ else None
        ev.clicks = int(getattr(pg_event, "clicks", 1))
        ev.state = (
            ButtonState.PRESSED
            if ev_type is EventType.MOUSE_BUTTON_DOWN
            else ButtonState.RELEASED
        )
        ev.x, ev.y = (float(v) for v in pg_event.pos)
    elif ev_type is EventType.MOUSE_MOTION:
        buttons = getattr(pg_event, "buttons", ())
        ev.state = ButtonState.PRESSED if any(buttons) else ButtonState.RELEASED
        ev.mouse_id = _mouse_id(pg_event)
        ev.window_id = _window_id(pg_event)
        ev.x, ev.y = (float(v) for v in pg_event.pos)
        ev.xrel, ev.yrel = (float(v) for v in pg_event.rel)
    elif ev_type in (
        EventType.FINGER_DOWN,
        EventType.FINGER_UP,
        EventType.FINGER_MOTION,
    ):
        ev.finger_id = int(getattr(pg_event, "finger_id", 0))
        ev.touch_id = int(getattr(pg_event, "touch_id", 0))
        ev.window_id = _window_id(pg_event)
        ev.x = float(getattr(pg_event, "x", 0.0))
        ev.y = float(getattr(pg_event, "y", 0.0))
        ev.dx = float(getattr(pg_event, "dx", 0.0))
        ev.dy = float(getattr(pg_event, "dy", 0.0))
        ev.pressure = float(getattr(pg_event, "pressure", 0.0))
    elif ev_type is EventType.MOUSE_WHEEL:
        ev.mouse_id = _mouse_id(pg_event)
        ev.direction = (
            WheelDirection.DOWN
            if getattr(pg_event, "flipped", False)
            else WheelDirection.UP
        )
        ev.x = float(getattr(pg_event, "x", 0.0))
        ev.y = float(getattr(pg_event, "y", 0.0))
        ev.mouse_x = float(getattr(pg_event, "mouse_x", 0.0))
        ev.mouse_y = float(getattr(pg_event, "mouse_y", 0.0))
    elif ev_type is EventType.TEXT_EDIT:
        ev.text = str(getattr(pg_event, "text", ""))
        ev.length = int(getattr(pg_event, "length", 0))
        ev.start = int(getattr(pg_event, "start", 0))
        ev.window_id = _window_id(pg_event)
    elif ev_type is EventType.TEXT_INPUT:
        ev.text = str(getattr(pg_event, "text", ""))
        ev.window_id = _window_id(pg_event)
    elif ev_type in _WINDOW_TYPES:
        ev.window_id = _window_id(pg_event)

    return ev


def poll_events() -> Iterator[Event]:
    """Yield every pending event from the pygame queue, converted."""
    for pg_event in pygame.event.get():
        yield from_pygame_event(pg_event)