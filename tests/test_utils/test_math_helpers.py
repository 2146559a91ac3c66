from pathopt.utils.math_helpers import add, cross, dot, near, reflect, scale, sub, to_fixed, truncate


def test_to_fixed_rounds_half_away_from_zero():
    assert to_fixed(2.5, 0) == 3.0
    assert to_fixed(-2.5, 0) == -3.0
    assert to_fixed(1.23456, 3) == 1.235
    assert to_fixed(-1.23449, 3) == -1.234


def test_truncate():
    assert truncate(0.1**3, 3) == 0.001
    assert truncate(-1.27, 1) == -1.2
    assert truncate(1.99, 0) == 1.0


def test_vector_ops():
    assert add((1, 2), (3, 4)) == (4, 6)
    assert sub((1, 2), (3, 4)) == (-2, -2)
    assert scale((1, -2), 3) == (3, -6)
    assert reflect((1, 1), (2, 2)) == (3, 3)
    assert cross((1, 0), (0, 1)) == 1
    assert dot((1, 2), (3, 4)) == 11


def test_near_is_strict():
    assert near((0, 0), (0.0005, -0.0005), 0.001)
    assert not near((0, 0), (0.001, 0), 0.001)
    assert not near((0, 0), (0, 2), 0.001)
