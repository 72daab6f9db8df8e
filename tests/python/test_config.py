"""
Tests for global configuration and chunked execution.
"""

import pytest

from lina import DType, get_config, set_default_dtype, set_parallelism
from lina._config import _Config
from lina._parallel import map_slices, split_range


class TestConfig:
    """Test the configuration singleton."""

    def test_defaults(self):
        config = _Config()
        assert config.default_dtype is DType.float64
        assert config.parallel_threshold == 65536
        assert 1 <= config.max_workers <= 8

    def test_set_default_dtype(self):
        set_default_dtype('float32')
        try:
            assert get_config().default_dtype is DType.float32
        finally:
            set_default_dtype(DType.float64)

    def test_invalid_default_dtype(self):
        with pytest.raises(ValueError):
            set_default_dtype('int64')

    def test_invalid_parallelism(self):
        with pytest.raises(ValueError):
            set_parallelism(threshold=0)
        with pytest.raises(ValueError):
            set_parallelism(max_workers=0)


class TestEnvironment:
    """Test LINA_* environment overrides."""

    def test_overrides(self):
        config = _Config()
        config.load_environment({
            'LINA_DEFAULT_DTYPE': 'complex64',
            'LINA_PARALLEL_THRESHOLD': '100',
            'LINA_MAX_WORKERS': '2',
        })
        assert config.default_dtype is DType.complex64
        assert config.parallel_threshold == 100
        assert config.max_workers == 2

    def test_malformed_values_warn(self):
        config = _Config()
        with pytest.warns(UserWarning):
            config.load_environment({'LINA_PARALLEL_THRESHOLD': 'lots'})
        with pytest.warns(UserWarning):
            config.load_environment({'LINA_DEFAULT_DTYPE': 'int8'})
        assert config.parallel_threshold == 65536
        assert config.default_dtype is DType.float64


class TestSplitRange:
    """Test range splitting."""

    def test_even_split(self):
        assert split_range(10, 3) == [(0, 4), (4, 7), (7, 10)]

    def test_more_parts_than_items(self):
        assert split_range(2, 8) == [(0, 1), (1, 2)]

    def test_empty(self):
        assert split_range(0, 4) == []

    def test_covers_range(self):
        ranges = split_range(1001, 7)
        assert ranges[0][0] == 0
        assert ranges[-1][1] == 1001
        for (_, stop), (start, _) in zip(ranges, ranges[1:]):
            assert stop == start


class TestMapSlices:
    """Test chunked execution."""

    def test_inline_below_threshold(self):
        calls = []
        map_slices(10, lambda start, stop: calls.append((start, stop)))
        assert calls == [(0, 10)]

    def test_parallel_slices_are_disjoint(self, parallel_always):
        out = [0] * 1000

        def work(start, stop):
            for k in range(start, stop):
                out[k] += 1

        map_slices(1000, work)
        assert out == [1] * 1000

    def test_worker_errors_propagate(self, parallel_always):
        def work(start, stop):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            map_slices(100, work)
