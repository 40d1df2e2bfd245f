import pytest

from nanotetris.canvas import Canvas
from nanotetris.color import BLACK, Color


def test_new_canvas_filled_with_color():
    c = Canvas(3, 2, Color(1, 2, 3))
    assert (c.width, c.height) == (3, 2)
    assert all(c[r, k] == Color(1, 2, 3) for r in range(2) for k in range(3))


def test_default_canvas_is_empty():
    c = Canvas()
    assert (c.width, c.height, c.to_bytes()) == (0, 0, b"")


def test_set_and_get_pixel():
    c = Canvas(4, 3)
    c[2, 1] = Color(9, 8, 7)
    assert c[2, 1] == Color(9, 8, 7)
    assert c[1, 2] == BLACK


@pytest.mark.parametrize("index", [(3, 0), (0, 4), (-1, 0)])
def test_out_of_range_index(index):
    c = Canvas(4, 3)
    with pytest.raises(IndexError):
        c[index]
    assert c.to_bytes() == bytes(4 * 3 * 3)
    assert (c.width, c.height) == (4, 3)


def test_fill_sets_every_pixel():
    c = Canvas(2, 2)
    c.fill(Color(5, 5, 5))
    assert c == Canvas(2, 2, Color(5, 5, 5))


def test_equality_compares_pixels_only():
    assert Canvas(2, 3, Color(1, 1, 1)) == Canvas(3, 2, Color(1, 1, 1))


def test_inequality_of_different_pixels():
    assert not Canvas(2, 2, Color(1, 1, 1)) == Canvas(2, 2, Color(2, 2, 2))


def test_resize_grows_with_black():
    c = Canvas(1, 1, Color(7, 7, 7))
    c.resize(2, 2)
    assert (c.width, c.height) == (2, 2)
    assert c[0, 0] == Color(7, 7, 7)
    assert c[1, 1] == BLACK


def test_resize_shrinks_keeping_prefix():
    c = Canvas(3, 1)
    c[0, 0] = Color(1, 0, 0)
    c[0, 2] = Color(2, 0, 0)
    c.resize(1, 1)
    assert c.to_bytes() == bytes([1, 0, 0])


def test_transpose_swaps_dimensions_and_indices():
    c = Canvas(3, 2)
    c[0, 2] = Color(10, 0, 0)
    c[1, 0] = Color(20, 0, 0)
    original = Canvas.from_bytes(3, 2, c.to_bytes())
    c.transpose()
    assert (c.width, c.height) == (2, 3)
    for row in range(2):
        for col in range(3):
            assert c[col, row] == original[row, col]


def test_double_transpose_is_identity():
    data = bytes(range(18))
    c = Canvas.from_bytes(3, 2, data)
    c.transpose()
    c.transpose()
    assert (c.width, c.height, c.to_bytes()) == (3, 2, data)


def test_bytes_round_trip():
    data = bytes(range(24))
    c = Canvas.from_bytes(4, 2, data)
    assert c.to_bytes() == data
    assert c[0, 1] == Color(3, 4, 5)


def test_from_bytes_wrong_length():
    with pytest.raises(ValueError):
        Canvas.from_bytes(2, 2, b"\x00" * 11)