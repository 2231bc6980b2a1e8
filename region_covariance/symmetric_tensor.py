# region_covariance/symmetric_tensor.py
"""
Per-pixel symmetric matrix storage
Only the upper triangle (F*(F+1)/2 entries) is kept for every pixel
"""
import numpy as np


def order_indices(i, j):
    """Return the pair with the smaller index first"""
    return (j, i) if j < i else (i, j)


def convert_indices(n, i, j):
    """
    Packed offset of entry (i, j), i <= j, of an n x n symmetric matrix

    Row-major over the upper triangle: (0,0), (0,1), ..., (0,n-1), (1,1), ...
    Maps the n*(n+1)/2 upper-triangular pairs onto 0 .. n*(n+1)/2 - 1.
    """
    return n * i + j - i * (i + 1) // 2


def packed_pairs(n):
    """
    Index arrays (rows, cols) of the upper triangle in packed order,
    so that offset k holds the pair (rows[k], cols[k])
    """
    return np.triu_indices(n)


class SymmetricTensor:
    """
    (H, W, F, F) tensor that is symmetric in its last two axes

    Backed by a single (H, W, F*(F+1)/2) array; (i, j) and (j, i) resolve to
    the same cell, so the two halves can never diverge.
    """

    def __init__(self, nrows, ncols, nfeatures, dtype=np.float64):
        self.nrows = nrows
        self.ncols = ncols
        self.nfeatures = nfeatures

        npairs = nfeatures * (nfeatures + 1) // 2
        self.contents = np.empty((nrows, ncols, npairs), dtype=dtype)

    @property
    def shape(self):
        return (self.nrows, self.ncols, self.nfeatures, self.nfeatures)

    @property
    def dtype(self):
        return self.contents.dtype

    def offset(self, i, j):
        return convert_indices(self.nfeatures, *order_indices(i, j))

    def get(self, row, col, i, j):
        return self.contents[row, col, self.offset(i, j)]

    def set(self, row, col, i, j, value):
        self.contents[row, col, self.offset(i, j)] = value

    def __getitem__(self, key):
        row, col, i, j = key
        return self.get(row, col, i, j)

    def __setitem__(self, key, value):
        row, col, i, j = key
        self.set(row, col, i, j, value)

    def unpack(self, packed, out=None):
        """
        Expand a packed vector of length F*(F+1)/2 into a full symmetric matrix

        Args:
            packed: Values in packed order (e.g. contents[row, col])
            out: Optional (F, F) array to write into
        """
        if out is None:
            out = np.empty((self.nfeatures, self.nfeatures), dtype=np.result_type(packed))

        rows, cols = packed_pairs(self.nfeatures)
        out[rows, cols] = packed
        out[cols, rows] = packed
        return out

    def __repr__(self):
        return (f"{self.__class__.__name__}(nrows={self.nrows}, ncols={self.ncols}, "
                f"nfeatures={self.nfeatures}, dtype={self.dtype})")
