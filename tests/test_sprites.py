import pytest
from PIL import Image

from nugem.graphics import Graphics, RenderBackend
from nugem.sprites import (
    DEFAULT_CANVAS,
    Rect,
    SpriteCollection,
    SpriteCollectionBuilder,
    SpriteDisplayer,
    SpriteSlot,
)


class RecordingBackend(RenderBackend):
    def __init__(self):
        self.drawn = []

    def clear(self, color):
        pass

    def draw(self, item):
        self.drawn.append(item)

    def present(self):
        pass


RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def test_builder_packs_left_to_right():
    builder = SpriteCollectionBuilder(upload=lambda image: 42)
    first = builder.add_sprite(Image.new("RGBA", (3, 2), RED))
    second = builder.add_sprite(Image.new("RGBA", (4, 5), BLUE))
    assert (first, second) == (0, 1)
    atlas = builder.atlas()
    assert atlas.size == (7, 5)
    assert atlas.getpixel((0, 0)) == RED
    assert atlas.getpixel((3, 0)) == BLUE
    assert atlas.getpixel((0, 4)) == (0, 0, 0, 0)


def test_build_records_slots_and_size():
    builder = SpriteCollectionBuilder(upload=lambda image: 42)
    builder.add_sprite(Image.new("RGB", (3, 2)))
    builder.add_sprite(Image.new("RGB", (4, 5)))
    collection = builder.build()
    assert collection.tid == 42
    assert collection.sprites == (SpriteSlot(3, 2, 0), SpriteSlot(4, 5, 3))
    assert collection.width() == 7
    assert collection.height() == 5


def test_build_is_done_once():
    uploads = []
    builder = SpriteCollectionBuilder(upload=lambda image: uploads.append(image.size) or 7)
    builder.add_sprite(Image.new("RGBA", (2, 2)))
    assert builder.build() is builder.build()
    assert uploads == [(2, 2)]


def test_build_without_sprites_fails():
    with pytest.raises(ValueError):
        SpriteCollectionBuilder().build()
    assert SpriteCollectionBuilder().atlas() is None


def test_default_upload_gives_distinct_ids():
    ids = set()
    for _ in range(3):
        builder = SpriteCollectionBuilder()
        builder.add_sprite(Image.new("RGBA", (1, 1)))
        ids.add(builder.build().tid)
    assert len(ids) == 3


def test_empty_collection_rejected():
    with pytest.raises(ValueError):
        SpriteCollection(1, [])


def test_single_sprite_covers_whole_texture():
    collection = SpriteCollection(5, [SpriteSlot(10, 20, 0)])
    displayer = SpriteDisplayer(collection)
    dest = Rect(3, 4, 10, 20)
    displayer.add_sprite(0, dest)
    graphics = Graphics(RecordingBackend())
    displayer.display(graphics)
    (item,) = graphics.pending_items()
    assert item.tid == 5
    assert item.positions == (
        (dest.x, dest.y),
        (dest.x + dest.w, dest.y),
        (dest.x, dest.y + dest.h),
        (dest.x + dest.w, dest.y + dest.h),
        (dest.x + dest.w, dest.y),
        (dest.x, dest.y + dest.h),
    )
    assert item.tex_coords == ((0, 0), (1, 0), (0, 1), (1, 1), (1, 0), (0, 1))


def test_texture_coords_stay_inside_slot():
    collection = SpriteCollection(1, [SpriteSlot(10, 20, 0), SpriteSlot(30, 10, 10)])
    displayer = SpriteDisplayer(collection)
    displayer.add_sprite(1, Rect(0, 0, 30, 10))
    graphics = Graphics(RecordingBackend())
    displayer.display(graphics)
    (item,) = graphics.pending_items()
    us = {u for u, _ in item.tex_coords}
    vs = {v for _, v in item.tex_coords}
    assert max(us) == pytest.approx(1.0)
    assert min(us) > 0.0
    assert min(vs) == 0.0
    assert max(vs) < 1.0


def test_source_rect_is_clamped():
    collection = SpriteCollection(1, [SpriteSlot(10, 20, 0)])
    displayer = SpriteDisplayer(collection)
    displayer.add_sprite(0, Rect(0, 0, 10, 20), Rect(0, 0, 1000, 1000))
    graphics = Graphics(RecordingBackend())
    displayer.display(graphics)
    (item,) = graphics.pending_items()
    assert max(u for u, _ in item.tex_coords) == 1.0
    assert max(v for _, v in item.tex_coords) == 1.0


@pytest.mark.parametrize("dest", [Rect(0, 0, 0, 5), Rect(0, 0, 5, 0), Rect(1, 1, -2, 3)])
def test_empty_destination_adds_nothing(dest):
    displayer = SpriteDisplayer(SpriteCollection(1, [SpriteSlot(4, 4, 0)]))
    displayer.add_sprite(0, dest)
    graphics = Graphics(RecordingBackend())
    displayer.display(graphics)
    (item,) = graphics.pending_items()
    assert item.positions == ()
    assert item.tex_coords == ()


def test_unknown_sprite_raises():
    displayer = SpriteDisplayer(SpriteCollection(1, [SpriteSlot(4, 4, 0)]))
    with pytest.raises(IndexError):
        displayer.add_sprite(1, Rect(0, 0, 4, 4))


def test_display_empties_queue():
    displayer = SpriteDisplayer(SpriteCollection(1, [SpriteSlot(4, 4, 0)]))
    displayer.add_sprite(0, Rect(0, 0, 4, 4))
    displayer.add_sprite(0, Rect(4, 0, 4, 4), DEFAULT_CANVAS)
    graphics = Graphics(RecordingBackend())
    displayer.display(graphics)
    displayer.display(graphics)
    first, second = graphics.pending_items()
    assert len(first.positions) == 12
    assert len(first.tex_coords) == 12
    assert second.positions == ()