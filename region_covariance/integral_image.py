# region_covariance/integral_image.py
"""
Integral images (summed area tables) over stacked channels
and O(1) rectangle sums from them
"""
import numpy as np
from tqdm import tqdm

from .symmetric_tensor import SymmetricTensor, packed_pairs


def _accumulator_dtype(field, dtype):
    if dtype is not None:
        return np.dtype(dtype)
    if np.issubdtype(field.dtype, np.floating):
        return field.dtype
    return np.dtype(np.float64)


def integrate(field, method='recurrence', dtype=None, verbose=False):
    """
    Compute the integral image of every channel of a (H, W, K) stack

    S[r, c, k] = sum of field[0:r+1, 0:c+1, k]

    Args:
        field: (H, W, K) array
        method: 'recurrence' sweeps the image row-major with
                S[r,c] = X[r,c] + S[r-1,c] + S[r,c-1] - S[r-1,c-1]
                (terms outside the image are 0), all channels at once.
                'cumsum' takes cumulative sums along rows then columns.
        dtype: Accumulator dtype, None keeps the field's floating precision
        verbose: Show a progress bar over rows

    Returns:
        (H, W, K) array of dtype `dtype`
    """
    dtype = _accumulator_dtype(field, dtype)
    nrows, ncols = field.shape[:2]

    if method == 'cumsum':
        return np.cumsum(np.cumsum(field, axis=0, dtype=dtype), axis=1, dtype=dtype)

    if method != 'recurrence':
        raise ValueError(f"Unknown integration method: {method!r}")

    integral = np.empty(field.shape, dtype=dtype)
    for r in tqdm(range(nrows), desc="Integrating rows", disable=not verbose):
        for c in range(ncols):
            cell = field[r, c].astype(dtype)
            if r > 0:
                cell += integral[r - 1, c]
            if c > 0:
                cell += integral[r, c - 1]
            if r > 0 and c > 0:
                cell -= integral[r - 1, c - 1]
            integral[r, c] = cell

    return integral


def featurewise_integral_images(F, method='recurrence', dtype=None, verbose=False):
    """Integral image P of each feature layer of F"""
    if verbose:
        print(f"Computing featurewise integral images ({F.shape[2]} features)...")
    return integrate(F, method=method, dtype=dtype, verbose=verbose)


def feature_product_integral_images(F, method='recurrence', dtype=None, verbose=False):
    """
    Integral images Q of the pairwise feature products

    For a pixel with feature vector x, the product matrix A[i, j] = x_i * x_j
    is symmetric, so only the upper triangle is formed and integrated,
    in the packed order of SymmetricTensor.
    """
    nrows, ncols, nfeatures = F.shape
    dtype = _accumulator_dtype(F, dtype)

    rows, cols = packed_pairs(nfeatures)
    if verbose:
        print(f"Computing feature product integral images ({len(rows)} pairs)...")

    products = F[:, :, rows].astype(dtype) * F[:, :, cols].astype(dtype)

    Q = SymmetricTensor(nrows, ncols, nfeatures, dtype=dtype)
    Q.contents[...] = integrate(products, method=method, dtype=dtype, verbose=verbose)
    return Q


def rectangle_sum(integral, row0, col0, row1, col1):
    """
    Per-channel sum over the inclusive rectangle (row0, col0)-(row1, col1)

    Standard four-corner formula D - B - C + A; corners in row or
    column -1 count as 0. Coordinates are not bounds-checked.

    Returns:
        (K,) array
    """
    total = integral[row1, col1].copy()
    if row0 > 0:
        total -= integral[row0 - 1, col1]
    if col0 > 0:
        total -= integral[row1, col0 - 1]
    if row0 > 0 and col0 > 0:
        total += integral[row0 - 1, col0 - 1]
    return total
