"""Input devices and the manager that dispatches their state changes.

Devices turn raw events (key presses, controller buttons and axes) into
:class:`InputState` changes. The :class:`InputManager` forwards every new
change to its registered :class:`InputReceiver` objects.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Iterable
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union


class ButtonState(IntEnum):
    """Possible states of a single button."""

    UNDEFINED = 0
    RELEASED = 1
    PRESSED = 2


class Direction(IntEnum):
    """Directional stick values laid out like a numeric keypad.

    7 8 9
    4 5 6
    1 2 3
    """

    UNDEFINED = 0
    SW = 1
    S = 2
    SE = 3
    W = 4
    NEUTRAL = 5
    E = 6
    NW = 7
    N = 8
    NE = 9


BUTTON_NAMES = ("a", "b", "c", "x", "y", "z", "start", "back")


@dataclass
class InputState:
    """A snapshot of every button and the stick direction."""

    a: ButtonState = ButtonState.UNDEFINED
    b: ButtonState = ButtonState.UNDEFINED
    c: ButtonState = ButtonState.UNDEFINED
    x: ButtonState = ButtonState.UNDEFINED
    y: ButtonState = ButtonState.UNDEFINED
    z: ButtonState = ButtonState.UNDEFINED
    start: ButtonState = ButtonState.UNDEFINED
    back: ButtonState = ButtonState.UNDEFINED
    d: Direction = Direction.UNDEFINED

    def is_defined(self) -> bool:
        """Return True if at least one button or the direction is defined."""
        return self.d != Direction.UNDEFINED or any(
            getattr(self, name) != ButtonState.UNDEFINED for name in BUTTON_NAMES
        )

    def _merge_from(self, other: InputState) -> None:
        for f in dataclasses.fields(self):
            value = getattr(other, f.name)
            if value != 0:
                setattr(self, f.name, value)


@dataclass(frozen=True)
class KeyEvent:
    """A keyboard key going down or up."""

    key: str
    pressed: bool


@dataclass(frozen=True)
class ControllerAxisEvent:
    """Motion on a game controller axis."""

    which: int
    axis: str
    value: int


@dataclass(frozen=True)
class ControllerButtonEvent:
    """A game controller button going down or up."""

    which: int
    button: str
    pressed: bool


@dataclass(frozen=True)
class DeviceEvent:
    """A device being added, removed or remapped."""

    kind: str
    which: int


@dataclass(frozen=True)
class JoystickEvent:
    """Raw joystick activity (axis, ball, hat or button)."""

    kind: str
    which: int
    index: int = 0
    value: int = 0


Event = Union[KeyEvent, ControllerAxisEvent, ControllerButtonEvent, DeviceEvent, JoystickEvent]

THRESHOLD = 32767 // 3

AXIS_LEFT_X = "leftx"
AXIS_LEFT_Y = "lefty"
AXIS_TRIGGER_RIGHT = "triggerright"

KEY_BINDINGS = {
    "a": "a",
    "b": "s",
    "c": "d",
    "x": "q",
    "y": "w",
    "z": "e",
    "start": "return",
    "back": "escape",
}
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"

CONTROLLER_BUTTONS = {
    "a": "a",
    "b": "b",
    "rightshoulder": "c",
    "x": "x",
    "y": "y",
    "start": "start",
    "back": "back",
}


def _compose(horizontal: int, vertical: int) -> Direction:
    return Direction(5 + horizontal + 3 * vertical)


def _components(direction: Direction) -> tuple[int, int]:
    if direction == Direction.UNDEFINED:
        return 0, 0
    value = int(direction) - 1
    return value % 3 - 1, value // 3 - 1


def direction_from_axes(hor: int, vert: int) -> Direction:
    """Map analog stick axis values to a direction (negative vert is up)."""
    if hor <= -THRESHOLD:
        horizontal = -1
    elif hor >= THRESHOLD:
        horizontal = 1
    else:
        horizontal = 0
    if vert <= -THRESHOLD:
        vertical = 1
    elif vert >= THRESHOLD:
        vertical = -1
    else:
        vertical = 0
    return _compose(horizontal, vertical)


class InputReceiver(ABC):
    """Something that wants to be told about input changes."""

    @abstractmethod
    def receive_input(self, device: InputDevice, state: InputState) -> None:
        """Handle a state change coming from ``device``."""


class InputDevice(ABC):
    """Base class for every device that produces input states."""

    def __init__(self, manager: InputManager) -> None:
        self.manager = manager
        self.player: Any = None
        self._current = InputState()
        self._previous_change = InputState()

    @property
    def state(self) -> InputState:
        """A copy of the device's current full state."""
        return dataclasses.replace(self._current)

    def receive_event(self, event: Event) -> None:
        """Process an event and forward any new state change."""
        change = self.process_event(event)
        if not change.is_defined() or change == self._previous_change:
            return
        self._previous_change = change
        self.manager.register_input(self, change)
        self._current._merge_from(change)

    @abstractmethod
    def process_event(self, event: Event) -> InputState:
        """Translate an event into a (partial) state change."""

    @abstractmethod
    def update_global_state(self) -> None:
        """Refresh the full current state from the device."""

    def initialize(self) -> None:
        """Bring the current state in line with the device."""
        self.update_global_state()

    def assign_to_player(self, player: Any) -> None:
        self.player = player

    def has_player_assigned(self) -> bool:
        return self.player is not None


class KeyboardInput(InputDevice):
    """The keyboard, with a fixed key layout.

    ``key_state`` returns the keys currently held down; when it is not given,
    the device tracks held keys itself from the events it receives.
    """

    def __init__(
        self,
        manager: InputManager,
        key_state: Callable[[], Collection[str]] | None = None,
    ) -> None:
        super().__init__(manager)
        self._held: set[str] = set()
        self._key_state = key_state if key_state is not None else (lambda: self._held)

    def process_event(self, event: Event) -> InputState:
        state = InputState()
        if not isinstance(event, KeyEvent):
            return state
        if event.pressed:
            self._held.add(event.key)
        else:
            self._held.discard(event.key)

        pressed_state = ButtonState.PRESSED if event.pressed else ButtonState.RELEASED
        for name, key in KEY_BINDINGS.items():
            if event.key == key:
                setattr(state, name, pressed_state)

        keys = self._key_state()
        horizontal, vertical = _components(self._current.d)
        if event.key in (KEY_UP, KEY_DOWN):
            up, down = KEY_UP in keys, KEY_DOWN in keys
            if up and not down:
                vertical = 1
            elif down:
                vertical = -1
            else:
                vertical = 0
            state.d = _compose(horizontal, vertical)
        if event.key in (KEY_LEFT, KEY_RIGHT):
            left, right = KEY_LEFT in keys, KEY_RIGHT in keys
            if left and not right:
                horizontal = -1
            elif right:
                horizontal = 1
            else:
                horizontal = 0
            state.d = _compose(horizontal, vertical)
        return state

    def update_global_state(self) -> None:
        keys = self._key_state()
        for name, key in KEY_BINDINGS.items():
            setattr(
                self._current,
                name,
                ButtonState.PRESSED if key in keys else ButtonState.RELEASED,
            )
        vertical = 1 if KEY_UP in keys else (-1 if KEY_DOWN in keys else 0)
        horizontal = 1 if KEY_RIGHT in keys else (-1 if KEY_LEFT in keys else 0)
        self._current.d = _compose(horizontal, vertical)


class GameController(InputDevice):
    """A game controller identified by ``jid``."""

    def __init__(self, manager: InputManager, jid: int) -> None:
        super().__init__(manager)
        self.jid = jid
        self._buttons: dict[str, bool] = {}
        self._axes: dict[str, int] = {}

    def process_event(self, event: Event) -> InputState:
        state = InputState()
        if isinstance(event, ControllerAxisEvent):
            if event.which == self.jid:
                self._axes[event.axis] = event.value
            if event.axis in (AXIS_LEFT_X, AXIS_LEFT_Y):
                state.d = self.direction()
            elif event.axis == AXIS_TRIGGER_RIGHT:
                state.z = self.button_value_for_axis(AXIS_TRIGGER_RIGHT)
        elif isinstance(event, ControllerButtonEvent) and event.which == self.jid:
            self._buttons[event.button] = event.pressed
            name = CONTROLLER_BUTTONS.get(event.button)
            if name is not None:
                setattr(
                    state,
                    name,
                    ButtonState.PRESSED if event.pressed else ButtonState.RELEASED,
                )
        return state

    def update_global_state(self) -> None:
        current = self._current
        current.a = self.button_value("a")
        current.b = self.button_value("b")
        current.c = self.button_value_for_axis(AXIS_TRIGGER_RIGHT)
        current.x = self.button_value("x")
        current.y = self.button_value("y")
        current.z = self.button_value("rightshoulder")
        current.start = self.button_value("start")
        current.back = self.button_value("back")
        current.d = self.direction()

    def button_value(self, button: str) -> ButtonState:
        return ButtonState.PRESSED if self._buttons.get(button, False) else ButtonState.RELEASED

    def button_value_for_axis(self, axis: str) -> ButtonState:
        if self._axes.get(axis, 0) >= THRESHOLD:
            return ButtonState.PRESSED
        return ButtonState.RELEASED

    def direction(self) -> Direction:
        return direction_from_axes(self._axes.get(AXIS_LEFT_X, 0), self._axes.get(AXIS_LEFT_Y, 0))


class Joystick(InputDevice):
    """A generic joystick; its events do not yet produce input."""

    def __init__(self, manager: InputManager, jid: int) -> None:
        super().__init__(manager)
        self.jid = jid

    def process_event(self, event: Event) -> InputState:
        return InputState()

    def update_global_state(self) -> None:
        pass


class InputManager:
    """Owns the input devices and notifies receivers of state changes."""

    def __init__(self) -> None:
        self._devices: list[InputDevice] = []
        self._receivers: list[InputReceiver] = []

    def initialize(self, devices: Iterable[InputDevice]) -> int:
        """Replace the device list, initialize each device, return the count."""
        self._devices = list(devices)
        for device in self._devices:
            device.initialize()
        return len(self._devices)

    def process_event(self, event: Event) -> None:
        if isinstance(event, DeviceEvent):
            return
        for device in self._devices:
            device.receive_event(event)

    def device(self, n: int) -> InputDevice:
        return self._devices[n]

    def device_count(self) -> int:
        return len(self._devices)

    def add_receiver(self, receiver: InputReceiver) -> None:
        self._receivers.append(receiver)

    def remove_receiver(self, receiver: InputReceiver) -> None:
        self._receivers = [r for r in self._receivers if r is not receiver]

    def register_input(self, device: InputDevice, state: InputState) -> None:
        for receiver in list(self._receivers):
            receiver.receive_input(device, state)

    def assign_device_to_player(self, device: InputDevice | None, player: Any) -> None:
        if device is not None:
            device.assign_to_player(player)