"""Routing events to handlers subscribed per event kind and scene."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from nanotetris.event import Event, EventType

EventHandler = Callable[[Event], None]

_KEY_TYPES = frozenset({EventType.KEY_DOWN, EventType.KEY_UP})
_BUTTON_TYPES = frozenset({EventType.MOUSE_BUTTON_DOWN, EventType.MOUSE_BUTTON_UP})
_FINGER_TYPES = frozenset(
    {EventType.FINGER_DOWN, EventType.FINGER_UP, EventType.FINGER_MOTION}
)
_CLOSE_TYPES = frozenset({EventType.QUIT, EventType.WINDOW_CLOSE_REQUEST})


@dataclass(frozen=True, eq=False)
class SubscriptionKey:
    """An event pattern together with the id of the scene it belongs to.

    Two keys are equal only for the event kinds that can be subscribed to,
    comparing the fields that matter for that kind.
    """

    event: Event
    scene_id: int

    def _fields(self) -> tuple:
        ev = self.event
        if ev.type in _KEY_TYPES:
            return (ev.key.keycode, ev.key.mod)
        if ev.type is EventType.MOUSE_MOTION:
            return (ev.state,)
        if ev.type in _BUTTON_TYPES:
            return (ev.state, ev.button)
        return ()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubscriptionKey):
            return NotImplemented
        if self.event.type != other.event.type or self.scene_id != other.scene_id:
            return False
        ev_type = self.event.type
        if (
            ev_type in _KEY_TYPES
            or ev_type in _BUTTON_TYPES
            or ev_type is EventType.MOUSE_MOTION
        ):
            return self._fields() == other._fields()
        return ev_type in _FINGER_TYPES or ev_type in _CLOSE_TYPES

    def __hash__(self) -> int:
        return hash((int(self.event.type), self.scene_id) + self._fields())


class Postman:
    """Holds one handler per subscription key and delivers events to it."""

    def __init__(self) -> None:
        self._recipients: dict[SubscriptionKey, EventHandler] = {}

    def __len__(self) -> int:
        return len(self._recipients)

    def subscribe(self, key: SubscriptionKey, handler: EventHandler) -> None:
        """Register ``handler``; raises ValueError if the key is taken."""
        if key in self._recipients:
            raise ValueError(f"a handler is already subscribed for {key.event.type.name}")
        self._recipients[key] = handler

    def unsubscribe(self, key: SubscriptionKey) -> None:
        """Remove the handler for ``key``; raises KeyError if there is none."""
        try:
            del self._recipients[key]
        except KeyError:
            raise KeyError(f"no handler subscribed for {key.event.type.name}") from None

    def deliver(self, event: Event, scene_id: int | None) -> bool:
        """Call the handler matching ``event`` in scene ``scene_id``.

        Returns whether a handler was found; with no scene nothing is delivered.
        """
        if scene_id is None:
            return False
        handler = self._recipients.get(SubscriptionKey(event, scene_id))
        if handler is None:
            return False
        handler(event)
        return True