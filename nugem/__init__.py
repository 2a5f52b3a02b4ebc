"""Core of a 2D fighting-game engine: input, sprite atlases, characters, scenes and the game loop."""

__version__ = "0.1.0"

__all__ = ["character", "fight", "game", "graphics", "input", "sprites"]