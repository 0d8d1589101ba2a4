"""
Growable builders for compressed matrices.

Entries are appended line by line (rows for CSR, columns for CCS) into plain
Python lists and only copied into exact-size numpy buffers by build(), so no
caller has to know the nonzero count up front.
"""

import numpy as np
from typing import List, Optional, Sequence, Tuple

from ..config import config
from ..errors import (
    AllocationError,
    IntegerOverflowError,
    InvalidArgumentError,
    InvalidFormatError,
    InvalidShapeError,
)
from .compressed import CCSMatrix, CSRMatrix, _check_dims


class _LineBuilder:
    """Append-only accumulator for one compressed layout."""

    _matrix_cls = None

    def __init__(self, num_rows: int, num_cols: int, max_nnz: Optional[int] = None):
        _check_dims(num_rows, num_cols)
        self.shape = (num_rows, num_cols)
        self.max_nnz = max_nnz
        self._major_dim = self.shape[self._matrix_cls._major_axis]
        self._minor_dim = self.shape[1 - self._matrix_cls._major_axis]
        self._values: List[int] = []
        self._index: List[int] = []
        self._ptr: List[int] = [0]
        self._last_minor = -1
        self._built = False

    @property
    def nnz(self) -> int:
        return len(self._values)

    @property
    def current_line(self) -> int:
        """Index of the line currently receiving entries."""
        return len(self._ptr) - 1

    def append(self, minor: int, value: int) -> None:
        """Add an entry to the current line. Zero values are dropped."""
        if self._built:
            raise RuntimeError("builder already finalized")
        if self.current_line >= self._major_dim:
            raise InvalidFormatError(f"all {self._major_dim} lines are already closed")
        if not 0 <= minor < self._minor_dim:
            raise InvalidFormatError(f"index {minor} out of range [0, {self._minor_dim})")
        if minor <= self._last_minor:
            raise InvalidFormatError(
                f"indices must be strictly increasing within line {self.current_line} "
                f"({minor} after {self._last_minor})"
            )
        self._last_minor = minor
        if value == 0:
            return
        if self.max_nnz is not None and len(self._values) >= self.max_nnz:
            raise AllocationError(f"builder exceeded max_nnz={self.max_nnz}")
        self._index.append(int(minor))
        self._values.append(int(value))

    def end_line(self) -> None:
        """Close the current line and start the next one."""
        if self.current_line >= self._major_dim:
            raise InvalidFormatError(f"all {self._major_dim} lines are already closed")
        self._ptr.append(len(self._values))
        self._last_minor = -1

    def build(self):
        """Close any remaining lines and return a frozen, exactly-sized matrix."""
        if self._built:
            raise RuntimeError("builder already finalized")
        while self.current_line < self._major_dim:
            self.end_line()
        self._built = True
        try:
            values = np.array(self._values, dtype=config.value_dtype)
            index = np.array(self._index, dtype=config.index_dtype)
            ptr = np.array(self._ptr, dtype=config.index_dtype)
        except MemoryError as e:
            raise AllocationError(f"Cannot materialize {self.nnz} nonzeros") from e
        except OverflowError as e:
            raise IntegerOverflowError(
                f"A value does not fit {np.dtype(config.value_dtype).name}"
            ) from e
        finally:
            self._values, self._index = [], []
        return self._matrix_cls(values, index, ptr, self.shape, copy=False).freeze()


class CSRBuilder(_LineBuilder):
    """Row-by-row accumulator producing a CSRMatrix."""

    _matrix_cls = CSRMatrix


class CCSBuilder(_LineBuilder):
    """Column-by-column accumulator producing a CCSMatrix."""

    _matrix_cls = CCSMatrix


# -------------------- triplets --------------------

def _coalesce(major: np.ndarray, minor: np.ndarray, values: np.ndarray,
              major_dim: int, minor_dim: int):
    """
    Sum duplicate coordinates, drop zeros and sort into canonical
    (major, minor) order. Returns (ptr, index, values).
    """
    keys = major * minor_dim + minor
    unique_keys, inverse = np.unique(keys, return_inverse=True)
    summed = np.zeros(len(unique_keys), dtype=config.value_dtype)
    np.add.at(summed, inverse.reshape(-1), values)

    keep = summed != 0
    unique_keys = unique_keys[keep]
    summed = summed[keep]

    index = (unique_keys % minor_dim).astype(config.index_dtype)
    counts = np.bincount(unique_keys // minor_dim, minlength=major_dim)
    ptr = np.zeros(major_dim + 1, dtype=config.index_dtype)
    np.cumsum(counts, out=ptr[1:])
    return ptr, index, summed


def _triplet_arrays(rows, cols, values, shape):
    if len(shape) != 2:
        raise InvalidShapeError(f"Shape must be 2D, got {shape}")
    _check_dims(shape[0], shape[1])
    rows = np.asarray(rows, dtype=config.index_dtype).reshape(-1)
    cols = np.asarray(cols, dtype=config.index_dtype).reshape(-1)
    values = np.asarray(values, dtype=config.value_dtype).reshape(-1)
    if not (rows.shape == cols.shape == values.shape):
        raise InvalidFormatError(
            f"rows, cols and values must have the same length "
            f"({rows.shape[0]}, {cols.shape[0]}, {values.shape[0]})"
        )
    if rows.size:
        if rows.min() < 0 or rows.max() >= shape[0]:
            raise InvalidFormatError("Row indices out of bounds")
        if cols.min() < 0 or cols.max() >= shape[1]:
            raise InvalidFormatError("Col indices out of bounds")
    return rows, cols, values


def csr_from_triplets(rows: Sequence[int], cols: Sequence[int], values: Sequence[int],
                      shape: Tuple[int, int]) -> CSRMatrix:
    """
    Create a CSRMatrix from (row, col, value) triplets in any order.
    Duplicates are summed and zero results dropped.
    """
    rows, cols, values = _triplet_arrays(rows, cols, values, shape)
    ptr, index, vals = _coalesce(rows, cols, values, shape[0], shape[1])
    return CSRMatrix(vals, index, ptr, shape, copy=False).freeze()


def ccs_from_triplets(rows: Sequence[int], cols: Sequence[int], values: Sequence[int],
                      shape: Tuple[int, int]) -> CCSMatrix:
    """Column-major counterpart of csr_from_triplets."""
    rows, cols, values = _triplet_arrays(rows, cols, values, shape)
    ptr, index, vals = _coalesce(cols, rows, values, shape[1], shape[0])
    return CCSMatrix(vals, index, ptr, shape, copy=False).freeze()


# -------------------- random fill --------------------

def _random_triplets(shape: Tuple[int, int], density: float, upper: int, seed: Optional[int]):
    if not 0.0 <= density <= 1.0:
        raise InvalidArgumentError(f"density must be in [0, 1], got {density}")
    if upper <= 1:
        raise InvalidArgumentError(f"upper must be > 1 so nonzero values exist, got {upper}")
    _check_dims(shape[0], shape[1])
    rng = np.random.default_rng(seed)
    n_elements = shape[0] * shape[1]
    nnz = int(round(n_elements * density))
    flat = rng.choice(n_elements, size=nnz, replace=False)
    rows = flat // shape[1]
    cols = flat % shape[1]
    values = rng.integers(1, upper, size=nnz, dtype=config.value_dtype)
    return rows, cols, values


def random_sparse_csr(shape: Tuple[int, int], density: float, upper: int = 10,
                      seed: Optional[int] = None) -> CSRMatrix:
    """
    Create a random CSRMatrix with the given fraction of nonzero entries.

    Args:
        shape: (num_rows, num_cols)
        density: Fraction of entries that are nonzero, in [0, 1]
        upper: Exclusive upper bound for values; values lie in [1, upper)
        seed: Random seed for reproducibility
    """
    rows, cols, values = _random_triplets(shape, density, upper, seed)
    return csr_from_triplets(rows, cols, values, shape)


def random_sparse_ccs(shape: Tuple[int, int], density: float, upper: int = 10,
                      seed: Optional[int] = None) -> CCSMatrix:
    """CCS counterpart of random_sparse_csr."""
    rows, cols, values = _random_triplets(shape, density, upper, seed)
    return ccs_from_triplets(rows, cols, values, shape)
