"""
Tests for global configuration and error types
"""

import logging

import numpy as np
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'python'))

from sparsemm import config, errors
from sparsemm.config import _Config


class TestConfig:

    def test_defaults(self):
        c = _Config()
        c.reset()
        assert c.value_dtype is np.int64
        assert c.index_dtype is np.int64
        assert c.max_result_nnz is None
        assert c.check_inputs is True

    def test_override_restores(self):
        before = config.max_result_nnz
        with config.override(max_result_nnz=5, check_inputs=False):
            assert config.max_result_nnz == 5
            assert config.check_inputs is False
        assert config.max_result_nnz == before
        assert config.check_inputs is True

    def test_override_unknown_key(self):
        with pytest.raises(AttributeError):
            with config.override(not_a_setting=1):
                pass

    @pytest.mark.parametrize("value", [0, -4])
    def test_invalid_bound(self, value):
        c = _Config()
        with pytest.raises(ValueError):
            c.max_result_nnz = value

    def test_env(self, monkeypatch):
        monkeypatch.setenv("SPARSEMM_MAX_RESULT_NNZ", "1000")
        monkeypatch.setenv("SPARSEMM_CHECK_INPUTS", "false")
        c = _Config()
        assert c.max_result_nnz == 1000
        assert c.check_inputs is False

    def test_env_invalid_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("SPARSEMM_MAX_RESULT_NNZ", "lots")
        monkeypatch.delenv("SPARSEMM_CHECK_INPUTS", raising=False)
        with caplog.at_level(logging.WARNING, logger="sparsemm.config"):
            c = _Config()
        assert c.max_result_nnz is None
        assert "SPARSEMM_MAX_RESULT_NNZ" in caplog.text

    def test_repr(self):
        assert "check_inputs=" in repr(config)


class TestErrors:

    def test_hierarchy(self):
        assert issubclass(errors.IncompatibleDimensionsError, errors.SparseMMError)
        assert issubclass(errors.IncompatibleDimensionsError, ValueError)
        assert issubclass(errors.AllocationError, MemoryError)
        assert issubclass(errors.InvalidFormatError, ValueError)
        assert issubclass(errors.InvalidShapeError, ValueError)
        assert issubclass(errors.InvalidShapeError, errors.InvalidArgumentError)
        assert issubclass(errors.IntegerOverflowError, OverflowError)

    def test_codes_and_messages(self):
        e = errors.IncompatibleDimensionsError((2, 3), (4, 5))
        assert e.code == errors.SPARSEMM_ERROR_DIMENSION_MISMATCH
        assert "(2, 3)" in str(e) and "(4, 5)" in str(e)

        e = errors.AllocationError()
        assert e.code == errors.SPARSEMM_ERROR_OUT_OF_MEMORY
        assert e.message == "Out of memory"
