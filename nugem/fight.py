"""The fight scene."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from .character import Character, FightCharacter
from .game import Game
from .graphics import Graphics, Scene
from .input import ButtonState, InputDevice, InputReceiver, InputState


class _FightStage(Protocol):
    def initialize(self) -> None: ...

    def render_background(self, graphics: Graphics) -> None: ...


class Fight(Scene, InputReceiver):
    """A fight on a stage; the back button returns to the menu."""

    def __init__(
        self,
        game: Game,
        character: Character,
        stage: _FightStage,
        menu: Callable[[Game], Scene],
    ) -> None:
        self.game = game
        self.stage = stage
        self._menu = menu
        self.game.input_manager.add_receiver(self)
        self.characters: list[FightCharacter | None] = [
            FightCharacter(character, self.game.input_manager.device(0)),
            None,
        ]

    def update(self) -> None:
        pass

    def render(self, graphics: Graphics) -> bool:
        self.stage.render_background(graphics)
        return True

    def loading(self) -> bool:
        self.stage.initialize()
        return True

    def receive_input(self, device: InputDevice, state: InputState) -> None:
        if state.back == ButtonState.PRESSED:
            self.game.change_scene(self._menu(self.game))

    def close(self) -> None:
        """Stop receiving input."""
        self.game.input_manager.remove_receiver(self)

    def __enter__(self) -> Fight:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()