# test_config.py
"""
Parameter resolution: defaults, JSON file, keyword overrides
"""
import json

import pytest

from region_covariance.config import DEFAULT_PARAMS, load_config


def test_defaults():
    params = load_config()
    assert params == DEFAULT_PARAMS
    assert params is not DEFAULT_PARAMS


def test_missing_config_file_falls_back_to_defaults(tmp_path):
    assert load_config(str(tmp_path / 'missing.json')) == DEFAULT_PARAMS


def test_config_file_then_overrides(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'method': 'cumsum', 'accumulator_dtype': 'float64'}))

    params = load_config(str(config_path))
    assert params['method'] == 'cumsum'
    assert params['accumulator_dtype'] == 'float64'
    assert params['verbose'] is False

    params = load_config(str(config_path), method='recurrence', verbose=True)
    assert params['method'] == 'recurrence'
    assert params['verbose'] is True


def test_none_overrides_are_ignored(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text(json.dumps({'method': 'cumsum'}))

    assert load_config(str(config_path), method=None)['method'] == 'cumsum'


@pytest.mark.parametrize('overrides', [
    {'method': 'fft'},
    {'accumulator_dtype': 'int32'},
    {'accumulator_dtype': 'not-a-dtype'},
    {'window_size': 16},
])
def test_invalid_params_raise(overrides):
    with pytest.raises(ValueError):
        load_config(**overrides)


if __name__ == "__main__":
    test_defaults()
    print("✓ Config tests passed")
