# region_covariance/descriptor.py
"""
Region Covariance descriptor
Covariance matrix of per-pixel feature vectors over any rectangle in O(F^2)
"""
import numpy as np

from .config import load_config
from .integral_image import (
    featurewise_integral_images,
    feature_product_integral_images,
    rectangle_sum,
)


def _range_bounds(span, size):
    """First and last index of a contiguous range or slice"""
    if isinstance(span, slice):
        span = range(*span.indices(size))
    if span.step != 1:
        raise ValueError(f"Region ranges must be contiguous (step 1), got step {span.step}")
    return span[0], span[-1]


class RegionCovariance:
    """
    Region covariance descriptor of a feature image

    Builds the integral image of every feature layer (P) and of every
    pairwise feature product (Q) once; afterwards each region query is
    independent of the region size.

    Usage:
        descriptor = RegionCovariance(feature_img)
        C = descriptor.covariance_matrix(row0, col0, row1, col1)
    """

    def __init__(self, feature_image, config_path=None, **overrides):
        """
        Args:
            feature_image: (H, W, F) array, pixel (row, col) has feature vector
                           feature_image[row, col]
            config_path: Optional JSON config (see config.DEFAULT_PARAMS)
            **overrides: method, accumulator_dtype, verbose
        """
        F = np.asarray(feature_image)
        if F.ndim != 3:
            raise ValueError(f"RegionCovariance requires a 3D (H, W, F) array, got shape {F.shape}")
        if not np.issubdtype(F.dtype, np.floating):
            F = F.astype(np.float64)

        self.params = load_config(config_path, **overrides)
        self.nrows, self.ncols, self.nfeatures = F.shape

        verbose = self.params['verbose']
        options = dict(
            method=self.params['method'],
            dtype=self.params['accumulator_dtype'],
            verbose=verbose,
        )

        self.P = featurewise_integral_images(F, **options)
        self.Q = feature_product_integral_images(F, **options)

        # Descriptor is read-only once built
        self.P.flags.writeable = False
        self.Q.contents.flags.writeable = False

        if verbose:
            print(f"✓ Region covariance descriptor ready: {self.nrows}x{self.ncols}, "
                  f"{self.nfeatures} features, method={self.params['method']}, dtype={self.dtype}")

    @property
    def dtype(self):
        return self.P.dtype

    def sum_over_region_by_feature(self, row0, col0, row1, col1):
        """Sum of each feature over the region, shape (F,)"""
        return rectangle_sum(self.P, row0, col0, row1, col1)

    def sum_feature_products_over_region(self, row0, col0, row1, col1, out=None):
        """Sum of x x^T over the region, shape (F, F)"""
        packed = rectangle_sum(self.Q.contents, row0, col0, row1, col1)
        return self.Q.unpack(packed, out=out)

    def covariance_matrix(self, row0, col0, row1, col1, out=None):
        """
        Sample covariance of the feature vectors in the inclusive rectangle
        (row0, col0)-(row1, col1)

            C = (S_Q - s_P s_P^T / n) / (n - 1)

        A single-pixel region divides by zero and gives inf/NaN entries.

        Args:
            out: Optional (F, F) array to write the result into

        Returns:
            (F, F) covariance matrix (out, if given)
        """
        region_size = (row1 - row0 + 1) * (col1 - col0 + 1)

        if out is None:
            out = np.empty((self.nfeatures, self.nfeatures), dtype=self.dtype)

        p = self.sum_over_region_by_feature(row0, col0, row1, col1)
        self.sum_feature_products_over_region(row0, col0, row1, col1, out=out)

        with np.errstate(divide='ignore', invalid='ignore'):
            out -= np.outer(p, p) / region_size
            out /= region_size - 1

        return out

    def covariance_matrix_over(self, rows, cols, out=None):
        """
        Same as covariance_matrix, with the region given as ranges

        Args:
            rows: range or slice of rows, e.g. range(2, 5) or slice(2, 5)
            cols: range or slice of columns
        """
        row0, row1 = _range_bounds(rows, self.nrows)
        col0, col1 = _range_bounds(cols, self.ncols)
        return self.covariance_matrix(row0, col0, row1, col1, out=out)

    def __repr__(self):
        return (f"{self.__class__.__name__}(nrows={self.nrows}, ncols={self.ncols}, "
                f"nfeatures={self.nfeatures}, dtype={self.dtype})")


def covariance_matrix(descriptor, *region, out=None):
    """
    covariance_matrix(descriptor, row0, col0, row1, col1)
    covariance_matrix(descriptor, rows, cols)
    """
    if len(region) == 4:
        return descriptor.covariance_matrix(*region, out=out)
    if len(region) == 2:
        return descriptor.covariance_matrix_over(*region, out=out)
    raise TypeError(
        f"covariance_matrix expects (row0, col0, row1, col1) or (rows, cols), "
        f"got {len(region)} region arguments"
    )


def covariance_matrix_into(out, descriptor, *region):
    """In-place variant of covariance_matrix, writes into the (F, F) array out"""
    return covariance_matrix(descriptor, *region, out=out)
