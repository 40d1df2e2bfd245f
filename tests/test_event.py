from unittest import mock

import pygame
import pytest

from nanotetris.event import (
    TOUCH_MOUSE_ID,
    ButtonState,
    Event,
    EventType,
    KeyInfo,
    Keycode,
    Keymod,
    MouseButton,
    WheelDirection,
    from_pygame_event,
    poll_events,
)


def test_event_type_values_follow_sdl_numbering():
    assert from_pygame_event(pygame.event.Event(pygame.QUIT)).type.value == 0x100
    key_ev = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_d, mod=0, scancode=0)
    assert from_pygame_event(key_ev).type.value == 0x300
    assert EventType(0x700) is EventType.FINGER_DOWN
    assert EventType(0x202 + 13) is EventType.WINDOW_CLOSE_REQUEST


def test_keymod_combinations():
    assert Keymod(0x0040 | 0x0080) == Keymod.CTRL
    pg_ev = pygame.event.Event(
        pygame.KEYDOWN, key=pygame.K_d, mod=pygame.KMOD_RSHIFT, scancode=0
    )
    mod = from_pygame_event(pg_ev).key.mod
    assert mod & Keymod.SHIFT
    assert not (mod & Keymod.ALT)


def test_keycode_letters_are_ascii():
    assert Keycode(ord("d")) is Keycode.D
    pg_ev = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_a, mod=0, scancode=0)
    assert from_pygame_event(pg_ev).key.keycode.value == ord("a")


def test_default_event_is_unknown():
    ev = Event()
    assert ev.type is EventType.UNKNOWN
    assert ev.key == KeyInfo()
    assert ev.state is ButtonState.RELEASED


def test_key_down_conversion():
    pg_ev = pygame.event.Event(
        pygame.KEYDOWN, key=pygame.K_d, mod=pygame.KMOD_LSHIFT, scancode=7, timestamp=5
    )
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.KEY_DOWN
    assert ev.key.keycode is Keycode.D
    assert ev.key.mod == Keymod.LSHIFT
    assert ev.key.scancode == 7
    assert ev.timestamp == 5


def test_unmapped_key_becomes_unknown():
    pg_ev = pygame.event.Event(pygame.KEYUP, key=pygame.K_F1, mod=0, scancode=0)
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.KEY_UP
    assert ev.key.keycode is Keycode.UNKNOWN


def test_mouse_button_down_conversion():
    pg_ev = pygame.event.Event(
        pygame.MOUSEBUTTONDOWN, pos=(10, 20), button=3, touch=False
    )
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.MOUSE_BUTTON_DOWN
    assert ev.button is MouseButton.RIGHT
    assert ev.state is ButtonState.PRESSED
    assert (ev.x, ev.y) == (10.0, 20.0)


def test_touch_generated_mouse_button_gets_touch_id():
    pg_ev = pygame.event.Event(pygame.MOUSEBUTTONUP, pos=(1, 2), button=1, touch=True)
    ev = from_pygame_event(pg_ev)
    assert ev.mouse_id == TOUCH_MOUSE_ID
    assert ev.state is ButtonState.RELEASED


def test_mouse_motion_conversion():
    pg_ev = pygame.event.Event(
        pygame.MOUSEMOTION, pos=(3, 4), rel=(-1, 2), buttons=(1, 0, 0), touch=False
    )
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.MOUSE_MOTION
    assert ev.state is ButtonState.PRESSED
    assert (ev.xrel, ev.yrel) == (-1.0, 2.0)


def test_finger_motion_conversion():
    pg_ev = pygame.event.Event(
        pygame.FINGERMOTION,
        touch_id=1,
        finger_id=2,
        x=0.5,
        y=0.25,
        dx=0.125,
        dy=-0.5,
        pressure=1.0,
    )
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.FINGER_MOTION
    assert (ev.touch_id, ev.finger_id) == (1, 2)
    assert (ev.x, ev.y, ev.dx, ev.dy) == (0.5, 0.25, 0.125, -0.5)
    assert ev.pressure == 1.0


def test_wheel_flipped_direction():
    pg_ev = pygame.event.Event(pygame.MOUSEWHEEL, x=1, y=-1, flipped=True, touch=False)
    ev = from_pygame_event(pg_ev)
    assert ev.type is EventType.MOUSE_WHEEL
    assert ev.direction is WheelDirection.DOWN
    assert (ev.x, ev.y) == (1.0, -1.0)


def test_text_input_conversion():
    ev = from_pygame_event(pygame.event.Event(pygame.TEXTINPUT, text="hi"))
    assert ev.type is EventType.TEXT_INPUT
    assert ev.text == "hi"


@pytest.mark.parametrize(
    ("pg_type", "expected"),
    [
        (pygame.QUIT, EventType.QUIT),
        (pygame.WINDOWCLOSE, EventType.WINDOW_CLOSE_REQUEST),
        (pygame.WINDOWFOCUSGAINED, EventType.WINDOW_FOCUS_GAIN),
        (pygame.KEYMAPCHANGED, EventType.UNKNOWN),
        (pygame.USEREVENT, EventType.UNKNOWN),
    ],
)
def test_type_mapping(pg_type, expected):
    assert from_pygame_event(pygame.event.Event(pg_type)).type is expected


def test_poll_events_converts_queue():
    queued = [
        pygame.event.Event(pygame.QUIT),
        pygame.event.Event(pygame.TEXTINPUT, text="x"),
    ]
    with mock.patch("pygame.event.get", return_value=queued):
        events = list(poll_events())
    assert [e.type for e in events] == [EventType.QUIT, EventType.TEXT_INPUT]
    assert events[1].text == "x"