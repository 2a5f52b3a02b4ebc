import pytest

from nugem.graphics import (
    DisplayItem,
    Graphics,
    RenderBackend,
    Scene,
    Texture,
    TextureRegistry,
)


class RecordingBackend(RenderBackend):
    def __init__(self):
        self.calls = []

    def clear(self, color):
        self.calls.append(("clear", color))

    def draw(self, item):
        self.calls.append(("draw", item))

    def present(self):
        self.calls.append(("present",))


def apply(matrix, x, y):
    vec = (x, y, 0.0, 1.0)
    return tuple(sum(row[i] * vec[i] for i in range(4)) for row in matrix)


def test_registry_counts_and_deletes_once():
    deleted = []
    registry = TextureRegistry(on_delete=deleted.append)
    registry.acquire(5)
    registry.acquire(5)
    assert registry.use_count(5) == 2
    registry.release(5)
    assert deleted == []
    registry.release(5)
    assert deleted == [5]
    assert registry.use_count(5) == 0


def test_registry_ignores_zero_id():
    deleted = []
    registry = TextureRegistry(on_delete=deleted.append)
    registry.acquire(0)
    registry.release(0)
    assert registry.use_count(0) == 0
    assert deleted == []


def test_registry_release_unknown_raises():
    registry = TextureRegistry()
    with pytest.raises(ValueError):
        registry.release(3)


def test_texture_copy_shares_id():
    deleted = []
    registry = TextureRegistry(on_delete=deleted.append)
    tex = Texture(7, 16, 8, registry)
    other = tex.copy()
    assert (other.tid, other.w, other.h) == (7, 16, 8)
    assert registry.use_count(7) == 2
    tex.release()
    assert deleted == []
    other.release()
    assert deleted == [7]


def test_texture_release_is_idempotent():
    registry = TextureRegistry()
    tex = Texture(4, 1, 1, registry)
    keep = tex.copy()
    tex.release()
    tex.release()
    assert registry.use_count(4) == 1
    keep.release()
    assert registry.use_count(4) == 0


def test_texture_context_manager_releases():
    deleted = []
    registry = TextureRegistry(on_delete=deleted.append)
    with Texture(9, 2, 2, registry):
        assert registry.use_count(9) == 1
    assert deleted == [9]


def test_clear_uses_source_color():
    backend = RecordingBackend()
    Graphics(backend).clear()
    assert backend.calls == [("clear", (0.1, 0.1, 0.1, 1.0))]


def test_pass_item_queues_in_order():
    graphics = Graphics(RecordingBackend())
    graphics.pass_item(1, [(0, 0), (1, 0), (0, 1)], [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
    graphics.pass_item(2, [(5, 5)], [])
    items = graphics.pending_items()
    assert [item.tid for item in items] == [1, 2]
    assert items[0].positions == ((0, 0), (1, 0), (0, 1))
    assert items[1].tex_coords == ()


def test_display_draws_then_presents_and_empties_queue():
    backend = RecordingBackend()
    graphics = Graphics(backend)
    graphics.pass_item(3, [(0, 0)], [(0.5, 0.5)])
    graphics.pass_item(4, [(1, 1)], [(0.25, 0.25)])
    graphics.display()
    assert backend.calls == [
        ("draw", DisplayItem(3, ((0, 0),), ((0.5, 0.5),))),
        ("draw", DisplayItem(4, ((1, 1),), ((0.25, 0.25),))),
        ("present",),
    ]
    assert graphics.pending_items() == ()
    assert graphics.last_tid_used == 4


def test_display_skips_items_without_positions():
    backend = RecordingBackend()
    graphics = Graphics(backend)
    graphics.pass_item(6, [], [(0.0, 0.0)])
    graphics.display()
    assert backend.calls == [("present",)]
    assert graphics.last_tid_used == 6


def test_item_without_tex_coords_keeps_last_tid():
    graphics = Graphics(RecordingBackend())
    graphics.pass_item(8, [(0, 0)], [(0.0, 0.0)])
    graphics.pass_item(9, [(0, 0)], [])
    graphics.display()
    assert graphics.last_tid_used == 8


def test_projection_maps_corners_to_clip_space():
    graphics = Graphics(RecordingBackend())
    top_left = apply(graphics.projection, 0, 0)
    bottom_right = apply(graphics.projection, graphics.width, graphics.height)
    assert top_left[:2] == pytest.approx((-1.0, 1.0))
    assert bottom_right[:2] == pytest.approx((1.0, -1.0))


def test_scene_is_abstract():
    with pytest.raises(TypeError):
        Scene()


def test_concrete_scene_renders_into_graphics():
    class Dot(Scene):
        def __init__(self):
            self.frames = 0

        def update(self):
            self.frames += 1

        def render(self, graphics):
            graphics.pass_item(1, [(self.frames, 0)], [(0.0, 0.0)])
            return True

        def loading(self):
            return True

    scene = Dot()
    graphics = Graphics(RecordingBackend())
    scene.update()
    assert scene.render(graphics) is True
    assert graphics.pending_items()[0].positions == ((1, 0),)