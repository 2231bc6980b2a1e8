# region_covariance/__init__.py
from .symmetric_tensor import SymmetricTensor
from .descriptor import RegionCovariance, covariance_matrix, covariance_matrix_into

__all__ = ['SymmetricTensor', 'RegionCovariance', 'covariance_matrix', 'covariance_matrix_into']
