import math

import pytest

from nanotetris.transform import Transform2D
from nanotetris.vec import Vec2


def test_default_is_identity():
    assert list(Transform2D()) == [1, 0, 0, 0, 1, 0, 0, 0, 1]


def test_wrong_argument_count():
    with pytest.raises(TypeError):
        Transform2D(1, 2, 3)


def test_indexing_is_row_major():
    t = Transform2D(1, 2, 3, 4, 5, 6, 7, 8, 9)
    assert t[1, 2] == 6
    t[2, 0] = 42
    assert list(t)[6] == 42


def test_move_translates_origin_to_offset():
    p = Transform2D().move(Vec2(2.5, -4)).apply(Vec2(0, 0))
    assert (p.x, p.y) == (2.5, -4)


def test_moves_accumulate():
    t = Transform2D().move(Vec2(1, 2)).move(Vec2(3, 5))
    assert t.apply(Vec2(0, 0)) == Vec2(1, 2) + Vec2(3, 5)


def test_scale_maps_unit_point_to_factor():
    p = Transform2D().scale(Vec2(3, 0.5)).apply(Vec2(1, 1))
    assert (p.x, p.y) == (3, 0.5)


def test_quarter_turn_of_unit_x():
    p = Transform2D().rotate(math.pi / 2).apply(Vec2(1, 0))
    assert (p.x, p.y) == pytest.approx((0, -1))


def test_rotation_keeps_origin_fixed():
    origin = Vec2(2, 3)
    p = Transform2D().rotate(0.7, origin).apply(origin)
    assert (p.x, p.y) == pytest.approx((2, 3))


def test_rotation_preserves_distance_to_origin():
    origin = Vec2(4.5, 20.5)
    point = Vec2(3, 20)
    p = Transform2D().rotate(1.1, origin).apply(point)
    before = math.hypot(point.x - origin.x, point.y - origin.y)
    after = math.hypot(p.x - origin.x, p.y - origin.y)
    assert after == pytest.approx(before)


def test_four_quarter_turns_are_identity():
    t = Transform2D()
    for _ in range(4):
        t.rotate(math.pi / 2, Vec2(1, 1))
    assert list(t) == pytest.approx(list(Transform2D()), abs=1e-9)


def test_rotated_does_not_modify_original():
    t = Transform2D()
    r = t.rotated(0.3)
    assert t == Transform2D()
    assert r == Transform2D().rotate(0.3)


def test_moved_and_scaled_do_not_modify_original():
    t = Transform2D().move(Vec2(1, 1))
    snapshot = list(t)
    m = t.moved(Vec2(2, 2))
    s = t.scaled(Vec2(2, 2))
    assert list(t) == snapshot
    assert m == Transform2D().move(Vec2(1, 1)).move(Vec2(2, 2))
    assert s == Transform2D().move(Vec2(1, 1)).scale(Vec2(2, 2))


def test_combine_forces_last_row():
    other = Transform2D(1, 0, 0, 0, 1, 0, 5, 6, 7)
    t = Transform2D().combine(other)
    assert [t[2, 0], t[2, 1], t[2, 2]] == [0, 0, 1]


def test_combine_with_identity_is_noop():
    t = Transform2D(2, 1, 3, 4, 5, 6, 0, 0, 1)
    assert t * Transform2D() == t


def test_mul_does_not_mutate_left_operand():
    a = Transform2D().move(Vec2(1, 2))
    b = Transform2D().scale(Vec2(3, 3))
    before = list(a)
    product = a * b
    assert list(a) == before
    assert product == Transform2D().move(Vec2(1, 2)).combine(b)