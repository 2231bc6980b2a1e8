# region_covariance/config.py
"""
Descriptor parameters: defaults, optional JSON config file, keyword overrides
"""
import json
import os

import numpy as np

DEFAULT_PARAMS = {
    # Integral image construction
    # 'recurrence' = row-major inclusion-exclusion sweep (reference order)
    # 'cumsum'     = cumulative sums along rows then columns (faster)
    'method': 'recurrence',

    # Accumulator precision, None keeps the precision of the feature field
    # e.g. 'float64' or 'longdouble' to widen float32 input
    'accumulator_dtype': None,

    # Console progress output
    'verbose': False,
}

METHODS = ('recurrence', 'cumsum')


def validate_params(params):
    """Raise ValueError for unknown keys or invalid values"""
    unknown = set(params) - set(DEFAULT_PARAMS)
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")

    if params['method'] not in METHODS:
        raise ValueError(f"method must be one of {METHODS}, got {params['method']!r}")

    if params['accumulator_dtype'] is not None:
        try:
            dtype = np.dtype(params['accumulator_dtype'])
        except TypeError as e:
            raise ValueError(f"Invalid accumulator_dtype {params['accumulator_dtype']!r}") from e
        if not np.issubdtype(dtype, np.floating):
            raise ValueError(f"accumulator_dtype must be a floating type, got {dtype}")

    return params


def load_config(config_path=None, **overrides):
    """
    Resolve descriptor parameters

    Args:
        config_path: Path to a JSON file with any subset of DEFAULT_PARAMS
        **overrides: Explicit values, applied last (None values are ignored)

    Returns:
        dict with every key of DEFAULT_PARAMS
    """
    config = {}
    if config_path and os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config = json.load(f)

    overrides = {k: v for k, v in overrides.items() if v is not None}

    params = {**DEFAULT_PARAMS, **config, **overrides}
    return validate_params(params)
