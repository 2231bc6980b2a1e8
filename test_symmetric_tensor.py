# test_symmetric_tensor.py
"""
Tests for the triangular-packed symmetric tensor
"""
import numpy as np

from region_covariance.symmetric_tensor import (
    SymmetricTensor,
    convert_indices,
    order_indices,
    packed_pairs,
)


def test_order_indices():
    assert order_indices(1, 3) == (1, 3)
    assert order_indices(3, 1) == (1, 3)
    assert order_indices(2, 2) == (2, 2)


def test_packing_is_bijection():
    """Every upper-triangular pair maps to a distinct offset in 0 .. n(n+1)/2 - 1"""
    for n in range(1, 8):
        offsets = [convert_indices(n, i, j) for i in range(n) for j in range(i, n)]
        assert sorted(offsets) == list(range(n * (n + 1) // 2))


def test_packed_pairs_follow_packing_order():
    for n in range(1, 8):
        rows, cols = packed_pairs(n)
        for k, (i, j) in enumerate(zip(rows, cols)):
            assert convert_indices(n, i, j) == k


def test_storage_shape():
    t = SymmetricTensor(5, 7, 4)
    assert t.shape == (5, 7, 4, 4)
    assert t.contents.shape == (5, 7, 10)
    assert t.dtype == np.float64


def test_set_is_visible_from_both_halves():
    t = SymmetricTensor(2, 3, 4)
    t[0, 1, 3, 1] = 5.0
    assert t[0, 1, 1, 3] == 5.0
    assert t.get(0, 1, 3, 1) == t.get(0, 1, 1, 3)

    t.set(1, 2, 0, 2, -1.5)
    assert t[1, 2, 2, 0] == -1.5


def test_symmetry_everywhere():
    rng = np.random.default_rng(0)
    t = SymmetricTensor(3, 4, 5)
    t.contents[...] = rng.normal(size=t.contents.shape)

    for r in range(3):
        for c in range(4):
            for i in range(5):
                for j in range(5):
                    assert t.get(r, c, i, j) == t.get(r, c, j, i)


def test_unpack_builds_symmetric_matrix():
    t = SymmetricTensor(1, 1, 3)
    t.contents[0, 0] = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]

    full = t.unpack(t.contents[0, 0])
    expected = np.array([
        [1.0, 2.0, 3.0],
        [2.0, 4.0, 5.0],
        [3.0, 5.0, 6.0],
    ])
    np.testing.assert_array_equal(full, expected)

    out = np.zeros((3, 3))
    result = t.unpack(t.contents[0, 0], out=out)
    assert result is out
    np.testing.assert_array_equal(out, expected)


if __name__ == "__main__":
    test_order_indices()
    test_packing_is_bijection()
    test_packed_pairs_follow_packing_order()
    test_storage_shape()
    test_set_is_visible_from_both_halves()
    test_symmetry_everywhere()
    test_unpack_builds_symmetric_matrix()
    print("✓ All symmetric tensor tests passed")
