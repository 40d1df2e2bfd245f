import math

import pygame
import pytest

from nanotetris.canvas import Canvas
from nanotetris.color import BLACK, Color
from nanotetris.engine import Engine
from nanotetris.graphics import (
    Primitive,
    Shape,
    Sprite,
    Texture2D,
    Vertex,
    VertexBuffer,
)
from nanotetris.scene import DrawState
from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2


@pytest.fixture
def engine():
    eng = Engine.instance()
    yield eng


def test_primitive_values_follow_source():
    assert VertexBuffer().primitive_type.value == -1
    buf = VertexBuffer(Primitive(5), [])
    assert buf.primitive_type is Primitive.TRIANGLE_STRIP


def test_vertex_defaults():
    v = Vertex()
    assert v.rgb == BLACK
    assert v.pos == Vec2(0, 0)


def test_vertex_buffer_sequence():
    verts = [Vertex(pos=Vec2(1, 2)), Vertex(pos=Vec2(3, 4))]
    buf = VertexBuffer(Primitive.LINES, verts)
    assert len(buf) == 2
    assert list(buf) == verts
    assert buf.primitive_type is Primitive.LINES
    assert VertexBuffer().primitive_type is Primitive.UNKNOWN
    assert len(VertexBuffer()) == 0


def test_vertex_buffer_transformed_identity():
    verts = [Vertex(pos=Vec2(1, 2)), Vertex(pos=Vec2(3, 4))]
    buf = VertexBuffer(Primitive.LINES, verts)
    assert buf.transformed(Transform2D()) == [Vec2(1, 2), Vec2(3, 4)]


def test_texture_from_canvas_round_trip():
    canvas = Canvas(3, 2, Color(10, 20, 30))
    canvas[1, 2] = Color(200, 100, 50)
    tex = Texture2D(canvas)
    assert tex.exists
    assert tex.size == Vec2(3, 2)
    assert tex.width == 3 and tex.height == 2
    assert tuple(tex.surface.get_at((0, 0)))[:3] == (10, 20, 30)
    assert tuple(tex.surface.get_at((2, 1)))[:3] == (200, 100, 50)


def test_texture_remove():
    tex = Texture2D(Canvas(2, 2))
    tex.remove()
    assert not tex.exists
    assert tex.size == Vec2(0, 0)


def test_texture_load_file(tmp_path):
    surf = pygame.Surface((3, 2))
    surf.fill((1, 2, 3))
    surf.set_at((1, 0), (90, 80, 70))
    path = tmp_path / "img.bmp"
    pygame.image.save(surf, str(path))
    tex = Texture2D()
    tex.load_file(path)
    assert tex.size == Vec2(3, 2)
    assert tuple(tex.surface.get_at((1, 0)))[:3] == (90, 80, 70)
    assert tuple(tex.surface.get_at((2, 1)))[:3] == (1, 2, 3)


def test_texture_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        Texture2D().load_file(tmp_path / "missing.png")


def test_shape_initial_factor_uses_window_ratio(engine):
    shape = Shape()
    assert shape.factor == Vec2(1, engine.window.ratio)


def test_shape_move_scale_rotate(engine):
    shape = Shape()
    start = shape.factor
    shape.move(Vec2(3, 4))
    shape.move(Vec2(1, 1))
    assert shape.position == Vec2(4, 5)
    shape.scale(Vec2(2, 3))
    assert shape.factor == Vec2(start.x * 2, start.y * 3)
    shape.rotate(0.25)
    shape.rotate(0.5)
    assert shape.rotation == pytest.approx(0.75)


def test_set_size_builds_quad(engine):
    shape = Shape()
    shape.set_size(Vec2(45, 90))
    assert shape.size == Vec2(45, 90)
    assert shape.points_count == 4
    assert shape.primitive_type is Primitive.TRIANGLE_STRIP
    v = list(shape.vertices)
    assert [p.tpos for p in v] == [Vec2(1, 1), Vec2(0, 1), Vec2(1, 0), Vec2(0, 0)]
    assert v[1].pos == Vec2(0, 0)
    assert v[2].pos == Vec2(v[0].pos.x, v[3].pos.y)
    assert v[0].pos.y == 0 and v[3].pos.x == 0


def test_set_texture_matches_half_set_size(engine):
    tex = Texture2D(Canvas(40, 60))
    sprite = Sprite(tex)
    other = Shape()
    other.set_size(Vec2(20, 30))
    assert sprite.size == tex.size
    assert sprite.texture is tex
    for a, b in zip(sprite.vertices, other.vertices):
        assert a.pos.x == pytest.approx(b.pos.x)
        assert a.pos.y == pytest.approx(b.pos.y)


def test_set_texture_none_rejected(engine):
    with pytest.raises(ValueError):
        Shape().set_texture(None)


def test_screen_to_ndc_is_linear(engine):
    a, b = Vec2(10, 20), Vec2(30, 70)
    assert Shape.screen_to_ndc(Vec2(0, 0)) == Vec2(0, 0)
    s = Shape.screen_to_ndc(a + b)
    t = Shape.screen_to_ndc(a) + Shape.screen_to_ndc(b)
    assert s.x == pytest.approx(t.x) and s.y == pytest.approx(t.y)


def test_transform_maps_position_to_ndc(engine):
    shape = Shape()
    shape.position = Vec2(engine.window.size.x / 2, engine.window.size.y / 2)
    p = shape.transform().apply(Vec2(0, 0))
    ndc = Shape.screen_to_ndc(shape.position)
    assert p.x == pytest.approx(ndc.x * shape.factor.x)
    assert p.y == pytest.approx(ndc.y * shape.factor.y)


def test_set_transform_overrides_until_change(engine):
    shape = Shape()
    custom = Transform2D().move(Vec2(5, 6))
    shape.set_transform(custom)
    assert shape.transform() == custom
    shape.position = Vec2(0, 0)
    assert shape.transform() != custom
    assert shape.transform().apply(Vec2(0, 0)) == Vec2(0, 0)


def test_draw_without_target_draws_nothing(engine):
    sprite = Sprite(Texture2D(Canvas(1, 1, Color(255, 0, 0))))
    assert sprite.draw(DrawState()) is None


def test_draw_full_window_quad(engine):
    w, h = int(engine.window.size.x), int(engine.window.size.y)
    target = pygame.Surface((w, h))
    target.fill((0, 0, 0))
    shape = Shape()
    shape.set_texture(Texture2D(Canvas(1, 1, Color(255, 0, 0))))
    shape.set_size(engine.window.size)
    ratio = engine.window.ratio
    base = Transform2D().move(Vec2(-1, -1 / ratio))
    state = DrawState(program=target, transform=base)
    rect = shape.draw(state)
    assert rect == pygame.Rect(0, 0, w, h)
    assert tuple(target.get_at((10, 10)))[:3] == (255, 0, 0)
    assert tuple(target.get_at((w - 1, h - 1)))[:3] == (255, 0, 0)
    assert state.transform == Transform2D().move(Vec2(-1, -1 / ratio))


def test_draw_without_texture_draws_nothing(engine):
    target = pygame.Surface((10, 10))
    shape = Shape()
    shape.set_size(Vec2(5, 5))
    assert shape.draw(DrawState(program=target)) is None


def test_rotation_property_marks_transform(engine):
    shape = Shape()
    shape.rotation = math.pi
    p = shape.transform().apply(Vec2(1, 0))
    assert p.x == pytest.approx(-1 * shape.factor.x)
    assert p.y == pytest.approx(0, abs=1e-9)