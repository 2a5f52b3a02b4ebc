"""The game loop, its window, and the event handler that feeds input to it."""

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .graphics import Graphics, Scene
from .input import Event, InputDevice, InputManager, KeyboardInput

FRAME_RATE = 60


@dataclass(frozen=True)
class QuitEvent:
    """The user asked to close the window."""


class Window:
    """A window with a queue of pending events."""

    def __init__(self, events: Iterable[Any] = ()) -> None:
        self.events: deque[Any] = deque(events)
        self.raised = False
        self._quit = False

    def poll_events(self) -> Iterator[Any]:
        """Yield and remove pending events until the queue is empty."""
        while self.events:
            yield self.events.popleft()

    def process_event(self, event: Any) -> None:
        """React to window events; a quit event marks the window for closing."""
        if isinstance(event, QuitEvent):
            self._quit = True

    def quit_requested(self) -> bool:
        return self._quit

    def raise_window(self) -> None:
        """Bring the window to the front."""
        self.raised = True


@dataclass
class Stage:
    """A fighting stage, known by its name."""

    name: str = ""


class EventHandler:
    """Dispatches pending window events to the input manager and the window."""

    def __init__(self, game: Game) -> None:
        self.game = game

    def handle_events(self) -> None:
        for event in self.game.window.poll_events():
            self.game.input_manager.process_event(event)
            self.game.window.process_event(event)


class _SceneLoader(Scene):
    """Shown while a scene loads; hands over to it once loading is done."""

    def __init__(self, game: Game, scene: Scene) -> None:
        self.game = game
        self.scene = scene

    def update(self) -> None:
        if self.scene.loading():
            self.game.loaded_scene(self.scene)

    def render(self, graphics: Graphics) -> bool:
        return True

    def loading(self) -> bool:
        return True


class Game:
    """Runs the main loop: events, scene update, scene rendering, pacing."""

    def __init__(
        self,
        window: Window,
        graphics: Graphics,
        input_manager: InputManager | None = None,
        devices: Callable[[InputManager], Iterable[InputDevice]] | None = None,
        initial_scene: Callable[[Game], Scene] | None = None,
        frame_rate: int = FRAME_RATE,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.window = window
        self.graphics = graphics
        self.input_manager = input_manager if input_manager is not None else InputManager()
        self._devices = devices if devices is not None else (lambda manager: [KeyboardInput(manager)])
        self._initial_scene = initial_scene
        self.tick_delay = (1000 // frame_rate) / 1000
        self._clock = clock
        self._sleep = sleep
        self.event_handler = EventHandler(self)
        self.players: list[Any] = []
        self._scene: Scene | None = None
        self._continue = True

    def run(self, max_frames: int | None = None) -> int:
        """Run the main loop until quit (or ``max_frames``); return frames run."""
        self.input_manager.initialize(self._devices(self.input_manager))
        if self._initial_scene is not None:
            self.change_scene(self._initial_scene(self))
        self.window.raise_window()
        frames = 0
        while self._continue and not self.window.quit_requested():
            if max_frames is not None and frames >= max_frames:
                break
            start = self._clock()
            self.update()
            frames += 1
            elapsed = self._clock() - start
            if elapsed < self.tick_delay:
                self._sleep(self.tick_delay - elapsed)
        return frames

    def update(self) -> None:
        """Run one frame."""
        self.event_handler.handle_events()
        self.graphics.clear()
        if self._scene is not None:
            self._scene.update()
            self._scene.render(self.graphics)
        self.graphics.display()

    def request_quit(self) -> bool:
        self._continue = False
        return True

    def current_scene(self) -> Scene:
        if self._scene is None:
            raise LookupError("no current scene")
        return self._scene

    def change_scene(self, new_scene: Scene) -> None:
        """Switch to ``new_scene`` once it has finished loading."""
        self._scene = _SceneLoader(self, new_scene)

    def loaded_scene(self, scene: Scene) -> None:
        """Make an already loaded scene current."""
        self._scene = scene