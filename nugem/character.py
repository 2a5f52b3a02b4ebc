"""Characters loaded from their definition directory, and their fight wrapper."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .input import InputDevice

Definition = Mapping[str, Mapping[str, str]]


class CharacterLoadError(RuntimeError):
    """A character could not be loaded."""

    def __init__(self, message: str = "Error loading character") -> None:
        super().__init__(message)


class CharacterError(Exception):
    """Base class for errors about a loaded character."""


class CharacterSpriteError(CharacterError):
    """A character's sprites are unusable."""


@dataclass(frozen=True)
class CharacterLoaders:
    """Readers for the files that make up a character.

    ``sprites`` receives the sprite file path and the first palette path
    (or None when the definition names no palette).
    """

    definition: Callable[[Path], Definition]
    commands: Callable[[Path], Any]
    animations: Callable[[Path], Any]
    sprites: Callable[[Path, Path | None], Any]


def _entry(definition: Definition, section: str, key: str) -> str:
    try:
        return str(definition[section][key])
    except KeyError as exc:
        raise CharacterLoadError(f"missing [{section}] {key} in character definition") from exc


class Character:
    """A character read from ``<base_dir>/<id>/<id>.def`` and the files it names."""

    def __init__(
        self,
        charid: str,
        loaders: CharacterLoaders,
        base_dir: str | Path = "chars",
    ) -> None:
        self.id = charid
        self.name = ""
        self.loaders = loaders
        self.base_dir = Path(base_dir)
        self.dir = self.base_dir / charid
        self.definition_filename = f"{charid}.def"
        self.x = 0
        self.y = 0
        self.current_palette = 0
        self.current_anim_step = 0

        self.definition = loaders.definition(self.dir / self.definition_filename)
        self.mugen_version = _entry(self.definition, "info", "mugenversion")
        self.sprite_filename = _entry(self.definition, "files", "sprite")
        files = self.definition["files"]
        palette = self.dir / files["pal1"] if "pal1" in files else None
        self.sprite_loader = loaders.sprites(self.dir / self.sprite_filename, palette)

        self.commands = loaders.commands(self.dir / _entry(self.definition, "files", "cmd"))
        self.animations = loaders.animations(self.dir / _entry(self.definition, "files", "anim"))

    def copy(self) -> Character:
        """A freshly loaded character with the same id."""
        return Character(self.id, self.loaders, self.base_dir)

    def handle_event(self, event: Any) -> bool:
        """Return whether the event was handled; characters react to no events."""
        return False

    def __repr__(self) -> str:
        return f"Character(id={self.id!r}, dir={str(self.dir)!r})"


@dataclass
class FightCharacter:
    """A character taking part in a fight, controlled by one input device."""

    character: Character
    input_device: InputDevice