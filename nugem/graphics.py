"""Frame item collection, shared texture handles and the scene interface.

Drawing itself is delegated to a :class:`RenderBackend`; :class:`Graphics`
gathers the items passed during a frame and hands them to the backend in
order when the frame is displayed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

Position = tuple[int, int]
TexCoord = tuple[float, float]
Color = tuple[float, float, float, float]
Matrix = tuple[tuple[float, float, float, float], ...]

CLEAR_COLOR: Color = (0.1, 0.1, 0.1, 1.0)
VIEW_WIDTH = 1920
VIEW_HEIGHT = 1080


class TextureRegistry:
    """Reference counts for texture ids shared between :class:`Texture` handles.

    ``on_delete`` is called with a texture id once its last user releases it.
    """

    def __init__(self, on_delete: Callable[[int], None] | None = None) -> None:
        self._counts: dict[int, int] = {}
        self._on_delete = on_delete

    def acquire(self, tid: int) -> None:
        """Record one more user of ``tid``; id 0 means no texture and is ignored."""
        if tid:
            self._counts[tid] = self._counts.get(tid, 0) + 1

    def release(self, tid: int) -> None:
        """Drop one user of ``tid``, deleting the texture when none remain."""
        if not tid:
            return
        if tid not in self._counts:
            raise ValueError(f"texture {tid} is not registered")
        self._counts[tid] -= 1
        if self._counts[tid] <= 0:
            del self._counts[tid]
            if self._on_delete is not None:
                self._on_delete(tid)

    def use_count(self, tid: int) -> int:
        """Number of live handles to ``tid``."""
        return self._counts.get(tid, 0)


_default_registry = TextureRegistry()


class Texture:
    """A counted handle to a texture of a given size."""

    def __init__(
        self,
        tid: int,
        w: int,
        h: int,
        registry: TextureRegistry | None = None,
    ) -> None:
        self.tid = tid
        self.w = w
        self.h = h
        self.registry = registry if registry is not None else _default_registry
        self._released = False
        self.registry.acquire(tid)

    def copy(self) -> Texture:
        """Another handle to the same texture."""
        return Texture(self.tid, self.w, self.h, self.registry)

    def release(self) -> None:
        """Give up this handle; releasing twice has no further effect."""
        if not self._released:
            self._released = True
            self.registry.release(self.tid)

    def __enter__(self) -> Texture:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Texture(tid={self.tid}, w={self.w}, h={self.h})"


@dataclass(frozen=True)
class DisplayItem:
    """Triangles to draw with one texture: vertex positions and texture coordinates."""

    tid: int
    positions: tuple[Position, ...] = field(default_factory=tuple)
    tex_coords: tuple[TexCoord, ...] = field(default_factory=tuple)


class RenderBackend(ABC):
    """What actually puts pixels on screen."""

    @abstractmethod
    def clear(self, color: Color) -> None:
        """Fill the frame with ``color``."""

    @abstractmethod
    def draw(self, item: DisplayItem) -> None:
        """Draw the triangles of ``item``."""

    @abstractmethod
    def present(self) -> None:
        """Show the finished frame."""


def _ortho(left: float, right: float, bottom: float, top: float) -> Matrix:
    return (
        (2.0 / (right - left), 0.0, 0.0, -(right + left) / (right - left)),
        (0.0, 2.0 / (top - bottom), 0.0, -(top + bottom) / (top - bottom)),
        (0.0, 0.0, -1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


class Graphics:
    """Collects display items for a frame and renders them through a backend."""

    def __init__(
        self,
        backend: RenderBackend,
        width: int = VIEW_WIDTH,
        height: int = VIEW_HEIGHT,
    ) -> None:
        self.backend = backend
        self.width = width
        self.height = height
        self.last_tid_used = 0
        self._items: list[DisplayItem] = []

    @property
    def projection(self) -> Matrix:
        """Orthographic projection, row-major, with the origin at the top left."""
        return _ortho(0.0, float(self.width), float(self.height), 0.0)

    def clear(self) -> None:
        self.backend.clear(CLEAR_COLOR)

    def pass_item(
        self,
        tid: int,
        positions: Iterable[Position],
        tex_coords: Iterable[TexCoord],
    ) -> None:
        """Queue triangles for the current frame."""
        self._items.append(
            DisplayItem(
                tid,
                tuple(tuple(p) for p in positions),
                tuple(tuple(t) for t in tex_coords),
            )
        )

    def pending_items(self) -> tuple[DisplayItem, ...]:
        """Items queued since the last display, in order."""
        return tuple(self._items)

    def display(self) -> None:
        """Draw every queued item, empty the queue and present the frame."""
        for item in self._items:
            if item.tex_coords:
                self.last_tid_used = item.tid
            if item.positions:
                self.backend.draw(item)
        self._items.clear()
        self.backend.present()


class Scene(ABC):
    """One screen of the game: a menu, a loader, a fight."""

    @abstractmethod
    def update(self) -> None:
        """Advance the scene by one frame."""

    @abstractmethod
    def render(self, graphics: Graphics) -> bool:
        """Pass this frame's items to ``graphics``."""

    @abstractmethod
    def loading(self) -> bool:
        """Load resources; return True when done."""