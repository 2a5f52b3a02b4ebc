"""Sprite atlases: packing images side by side and emitting textured quads.

A :class:`SpriteCollectionBuilder` lays images out left to right in one RGBA
atlas. The resulting :class:`SpriteCollection` records where each sprite sits.
A :class:`SpriteDisplayer` turns sprite placements into triangles for
:class:`~nugem.graphics.Graphics`.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from PIL import Image

from .graphics import Graphics, Position, TexCoord


@dataclass(frozen=True)
class Rect:
    """A rectangle in pixels; negative values mean "not given"."""

    x: int
    y: int
    w: int
    h: int


DEFAULT_CANVAS = Rect(-1, -1, -1, -1)


@dataclass(frozen=True)
class SpriteSlot:
    """Size of a sprite and its horizontal offset in the atlas."""

    w: int
    h: int
    x: int


class SpriteCollection:
    """An uploaded atlas texture and the slots of the sprites it holds."""

    def __init__(self, tid: int, sprites: Iterable[SpriteSlot]) -> None:
        self.tid = tid
        self.sprites: tuple[SpriteSlot, ...] = tuple(sprites)
        if not self.sprites:
            raise ValueError("a sprite collection needs at least one sprite")
        last = self.sprites[-1]
        self._width = last.x + last.w
        self._height = max(slot.h for slot in self.sprites)

    def width(self) -> int:
        """Total atlas width in pixels."""
        return self._width

    def height(self) -> int:
        """Atlas height in pixels: the height of the tallest sprite."""
        return self._height

    def __len__(self) -> int:
        return len(self.sprites)


_texture_ids = itertools.count(1)


def _allocate_texture(image: Image.Image) -> int:
    return next(_texture_ids)


class SpriteCollectionBuilder:
    """Packs images into one atlas, then builds a :class:`SpriteCollection` once.

    ``upload`` receives the finished atlas image and returns its texture id.
    """

    def __init__(self, upload: Callable[[Image.Image], int] | None = None) -> None:
        self._upload = upload if upload is not None else _allocate_texture
        self._slots: list[SpriteSlot] = []
        self._max_height = 0
        self._total_width = 0
        self._atlas: Image.Image | None = None
        self._result: SpriteCollection | None = None

    def add_sprite(self, image: Image.Image) -> int:
        """Append ``image`` to the right of the atlas and return its index."""
        width, height = image.size
        self._max_height = max(self._max_height, height)
        ordinate = self._total_width
        self._total_width += width
        atlas = Image.new("RGBA", (self._total_width, self._max_height), (0, 0, 0, 0))
        if self._atlas is not None:
            atlas.paste(self._atlas, (0, 0))
        atlas.paste(image.convert("RGBA"), (ordinate, 0))
        self._atlas = atlas
        self._slots.append(SpriteSlot(width, height, ordinate))
        return len(self._slots) - 1

    def build(self) -> SpriteCollection:
        """Upload the atlas and return the collection; later calls return the same one."""
        if self._result is None:
            if self._atlas is None:
                raise ValueError("no sprites were added")
            tid = self._upload(self._atlas)
            self._result = SpriteCollection(tid, self._slots)
        return self._result

    def atlas(self) -> Image.Image | None:
        """The atlas image built so far, or None if nothing was added."""
        return self._atlas


class SpriteDisplayer:
    """Accumulates quads for sprites of one collection and passes them on."""

    def __init__(self, collection: SpriteCollection) -> None:
        self.collection = collection
        self._positions: list[Position] = []
        self._tex_coords: list[TexCoord] = []

    def add_sprite(self, sprite_number: int, dest: Rect, src: Rect = DEFAULT_CANVAS) -> None:
        """Queue sprite ``sprite_number`` drawn into ``dest``, optionally cropped by ``src``."""
        if not 0 <= sprite_number < len(self.collection.sprites):
            raise IndexError(f"sprite {sprite_number} is not on the atlas")
        if dest.w <= 0 or dest.h <= 0:
            return
        slot = self.collection.sprites[sprite_number]
        atlas_width = self.collection.width()
        atlas_height = self.collection.height()

        left = right = 0.0
        if atlas_width:
            left = slot.x / atlas_width
            right = (slot.x + slot.w) / atlas_width
            if src.x > 0 or src.w > 0:
                max_right = right
                if src.x > 0:
                    left += src.x
                if src.w > 0:
                    right = left + src.w
                left = min(left, max_right)
                right = min(right, max_right)

        top = bottom = 0.0
        if atlas_height:
            bottom = slot.h / atlas_height
            if src.y > 0 or src.h > 0:
                max_bottom = bottom
                if src.y > 0:
                    top += src.y
                if src.h > 0:
                    bottom = top + src.h
                bottom = min(bottom, max_bottom)
                top = min(top, max_bottom)

        x0, y0 = dest.x, dest.y
        x1, y1 = dest.x + dest.w, dest.y + dest.h
        self._positions.extend([(x0, y0), (x1, y0), (x0, y1), (x1, y1), (x1, y0), (x0, y1)])
        self._tex_coords.extend(
            [(left, top), (right, top), (left, bottom), (right, bottom), (right, top), (left, bottom)]
        )

    def display(self, graphics: Graphics) -> None:
        """Hand the queued quads to ``graphics`` and start over."""
        graphics.pass_item(self.collection.tid, self._positions, self._tex_coords)
        self._positions = []
        self._tex_coords = []