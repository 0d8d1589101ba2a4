"""
Global configuration for sparsemm.

Provides:
- Storage dtypes for values and indices
- An upper bound on the number of entries staged by the multiply engine
- Whether operands are format-checked before multiplication
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

_ENV_MAX_RESULT_NNZ = "SPARSEMM_MAX_RESULT_NNZ"
_ENV_CHECK_INPUTS = "SPARSEMM_CHECK_INPUTS"

_FALSE_STRINGS = ("0", "false", "no", "off")


def _parse_max_nnz(value) -> Optional[int]:
    if value is None:
        return None
    value = int(value)
    if value <= 0:
        raise ValueError(f"max_result_nnz must be positive or None, got {value}")
    return value


class _Config:
    """
    Global configuration singleton.

    Defaults can be changed at import time through the environment and at
    runtime through attribute assignment or override().
    """

    def __init__(self):
        self.reset()
        self._load_env()

    def reset(self) -> None:
        """Restore built-in defaults (environment is not re-read)."""
        self.value_dtype = np.int64
        self.index_dtype = np.int64
        self._max_result_nnz: Optional[int] = None
        self.check_inputs = True

    def _load_env(self) -> None:
        raw = os.environ.get(_ENV_MAX_RESULT_NNZ)
        if raw:
            try:
                self.max_result_nnz = raw
                logger.info("max_result_nnz=%d loaded from %s", self.max_result_nnz, _ENV_MAX_RESULT_NNZ)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", _ENV_MAX_RESULT_NNZ, raw)

        raw = os.environ.get(_ENV_CHECK_INPUTS)
        if raw:
            self.check_inputs = raw.strip().lower() not in _FALSE_STRINGS
            logger.info("check_inputs=%s loaded from %s", self.check_inputs, _ENV_CHECK_INPUTS)

    @property
    def max_result_nnz(self) -> Optional[int]:
        """Largest number of nonzeros the multiply engine may stage, or None."""
        return self._max_result_nnz

    @max_result_nnz.setter
    def max_result_nnz(self, value) -> None:
        self._max_result_nnz = _parse_max_nnz(value)

    @contextmanager
    def override(self, **kwargs):
        """Temporarily change configuration values.

        >>> with config.override(check_inputs=False):
        ...     Z = sparse_matmul(X, Y)
        """
        saved = {}
        for name in kwargs:
            if name.startswith("_") or not hasattr(self, name):
                logger.warning("Rejected unknown configuration key %r", name)
                raise AttributeError(f"Unknown configuration key: {name}")
            saved[name] = getattr(self, name)
        try:
            for name, value in kwargs.items():
                setattr(self, name, value)
            yield self
        finally:
            for name, value in saved.items():
                setattr(self, name, value)

    def __repr__(self) -> str:
        return (
            f"Config(value_dtype={np.dtype(self.value_dtype).name}, "
            f"index_dtype={np.dtype(self.index_dtype).name}, "
            f"max_result_nnz={self.max_result_nnz}, "
            f"check_inputs={self.check_inputs})"
        )


config = _Config()
