"""
Compressed sparse storage: CSR (row-major) and CCS (column-major).

Both formats keep three buffers with the same lifetime:

    values  -- the nonzero entries, grouped by major line
    index   -- the minor coordinate of each entry (parallel to values)
    ptr     -- offsets where each major line starts, length major_dim + 1

For CSR the major line is a row and the minor coordinate a column; CCS is the
transposed layout. Within every line the minor indices are strictly increasing
and no stored value is zero.
"""

import numpy as np
from typing import Iterator, Tuple

from ..config import config
from ..errors import AllocationError, InvalidFormatError, InvalidShapeError
from .dense import DenseMatrix, as_value_array


def _check_dims(num_rows: int, num_cols: int) -> None:
    if num_rows <= 0 or num_cols <= 0:
        raise InvalidShapeError(f"Dimensions must be positive, got ({num_rows}, {num_cols})")


def _compress_dense(arr: np.ndarray):
    """Convert a 2D array -> (ptr, index, values) compressed along axis 0."""
    major, _ = arr.shape
    idx_list = []
    val_list = []
    ptr = [0]
    nnz = 0
    for line in range(major):
        row = arr[line]
        nz = np.nonzero(row)[0]
        if nz.size > 0:
            idx_list.append(nz)
            val_list.append(row[nz])
            nnz += nz.size
        ptr.append(nnz)
    if nnz == 0:
        index = np.array([], dtype=config.index_dtype)
        values = np.array([], dtype=config.value_dtype)
    else:
        index = np.concatenate(idx_list).astype(config.index_dtype)
        values = np.concatenate(val_list).astype(config.value_dtype)
    return np.array(ptr, dtype=config.index_dtype), index, values


class _CompressedMatrix:
    """Shared storage and checks for CSR and CCS. Subclasses fix the axis."""

    _major_axis = 0
    _index_name = "index"
    _ptr_name = "ptr"

    def __init__(self, values, index, ptr, shape: Tuple[int, int], copy: bool = True):
        if len(shape) != 2:
            raise InvalidShapeError(f"Shape must be 2D, got {shape}")
        num_rows, num_cols = int(shape[0]), int(shape[1])
        _check_dims(num_rows, num_cols)
        self.shape = (num_rows, num_cols)
        own = np.array if copy else np.asarray
        try:
            self.values = own(values, dtype=config.value_dtype).reshape(-1)
            self._index = own(index, dtype=config.index_dtype).reshape(-1)
            self._ptr = own(ptr, dtype=config.index_dtype).reshape(-1)
        except MemoryError as e:
            raise AllocationError(f"Cannot allocate storage for {type(self).__name__}{self.shape}") from e

        if self.values.shape[0] != self._index.shape[0]:
            raise InvalidFormatError(
                f"values and {self._index_name} must have the same length "
                f"({self.values.shape[0]} != {self._index.shape[0]})"
            )
        if self._ptr.shape[0] != self._major_dim + 1:
            raise InvalidFormatError(
                f"{self._ptr_name} must have length {self._major_dim + 1}, got {self._ptr.shape[0]}"
            )

    @classmethod
    def allocate(cls, num_nonzeros: int, num_rows: int, num_cols: int):
        """
        Allocate a zero-filled, writable matrix with room for exactly
        num_nonzeros entries. Contents are the caller's responsibility;
        call freeze() once populated.
        """
        if num_nonzeros < 0:
            raise InvalidShapeError(f"num_nonzeros must be >= 0, got {num_nonzeros}")
        _check_dims(num_rows, num_cols)
        major = num_rows if cls._major_axis == 0 else num_cols
        try:
            values = np.zeros(num_nonzeros, dtype=config.value_dtype)
            index = np.zeros(num_nonzeros, dtype=config.index_dtype)
            ptr = np.zeros(major + 1, dtype=config.index_dtype)
        except MemoryError as e:
            raise AllocationError(
                f"Cannot allocate {cls.__name__} with {num_nonzeros} nonzeros "
                f"and shape ({num_rows}, {num_cols})"
            ) from e
        return cls(values, index, ptr, (num_rows, num_cols), copy=False)

    # -------------------- properties --------------------

    @property
    def num_rows(self) -> int:
        return self.shape[0]

    @property
    def num_cols(self) -> int:
        return self.shape[1]

    @property
    def nnz(self) -> int:
        return int(self.values.shape[0])

    @property
    def _major_dim(self) -> int:
        return self.shape[self._major_axis]

    @property
    def _minor_dim(self) -> int:
        return self.shape[1 - self._major_axis]

    @property
    def frozen(self) -> bool:
        return not (self.values.flags.writeable or self._index.flags.writeable
                    or self._ptr.flags.writeable)

    def freeze(self):
        """Make all three buffers read-only. Returns self."""
        for arr in (self.values, self._index, self._ptr):
            arr.flags.writeable = False
        return self

    # -------------------- line access --------------------

    def _line(self, i: int) -> Tuple[np.ndarray, np.ndarray]:
        if not 0 <= i < self._major_dim:
            raise IndexError(f"line {i} out of range for {type(self).__name__}{self.shape}")
        start, end = self._ptr[i], self._ptr[i + 1]
        return self._index[start:end], self.values[start:end]

    def _iter_lines(self) -> Iterator[Tuple[int, np.ndarray, np.ndarray]]:
        for i in range(self._major_dim):
            start, end = self._ptr[i], self._ptr[i + 1]
            yield i, self._index[start:end], self.values[start:end]

    def __getitem__(self, key: Tuple[int, int]) -> int:
        row, col = key
        if not (0 <= row < self.num_rows and 0 <= col < self.num_cols):
            raise IndexError(f"Index {key} out of bounds for shape {self.shape}")
        major, minor = (row, col) if self._major_axis == 0 else (col, row)
        idx, vals = self._line(major)
        pos = int(np.searchsorted(idx, minor))
        if pos < idx.shape[0] and idx[pos] == minor:
            return int(vals[pos])
        return 0

    # -------------------- validation --------------------

    def check_format(self) -> None:
        """
        Verify every structural invariant, raising InvalidFormatError on the
        first violation found.
        """
        name = type(self).__name__
        ptr = self._ptr
        if ptr[0] != 0:
            raise InvalidFormatError(f"{name}: {self._ptr_name}[0] must be 0, got {ptr[0]}")
        if ptr[-1] != self.nnz:
            raise InvalidFormatError(
                f"{name}: {self._ptr_name}[-1] must equal nnz={self.nnz}, got {ptr[-1]}"
            )
        if np.any(np.diff(ptr) < 0):
            raise InvalidFormatError(f"{name}: {self._ptr_name} must be non-decreasing")
        if self.nnz == 0:
            return
        if np.any(self._index < 0) or np.any(self._index >= self._minor_dim):
            raise InvalidFormatError(
                f"{name}: {self._index_name} entries must lie in [0, {self._minor_dim})"
            )
        if np.any(self.values == 0):
            raise InvalidFormatError(f"{name}: explicit zero stored in values")
        for i, idx, _ in self._iter_lines():
            if idx.shape[0] > 1 and np.any(np.diff(idx) <= 0):
                raise InvalidFormatError(
                    f"{name}: {self._index_name} not strictly increasing in line {i}"
                )

    # -------------------- conversion --------------------

    def _dense_array(self) -> np.ndarray:
        dense = np.zeros((self._major_dim, self._minor_dim), dtype=config.value_dtype)
        for i, idx, vals in self._iter_lines():
            if idx.shape[0] > 0:
                dense[i, idx] = vals
        return dense if self._major_axis == 0 else dense.T

    def to_dense(self) -> DenseMatrix:
        """Convert to a DenseMatrix."""
        return DenseMatrix(self._dense_array())

    @classmethod
    def from_dense(cls, dense):
        """Build a frozen matrix from a DenseMatrix or any 2D array-like."""
        arr = dense.data if isinstance(dense, DenseMatrix) else as_value_array(dense)
        if arr.ndim != 2:
            raise InvalidShapeError(f"from_dense expects a 2D array, got ndim={arr.ndim}")
        shape = arr.shape
        major_first = arr if cls._major_axis == 0 else arr.T
        ptr, index, values = _compress_dense(np.ascontiguousarray(major_first))
        return cls(values, index, ptr, shape, copy=False).freeze()

    def _transposed_storage(self):
        """Recompress the same entries along the other axis (stable, canonical)."""
        major_of_entry = np.repeat(
            np.arange(self._major_dim, dtype=config.index_dtype), np.diff(self._ptr)
        )
        order = np.argsort(self._index, kind="stable")
        new_index = major_of_entry[order]
        new_values = self.values[order]
        counts = np.bincount(self._index, minlength=self._minor_dim)
        new_ptr = np.zeros(self._minor_dim + 1, dtype=config.index_dtype)
        np.cumsum(counts, out=new_ptr[1:])
        return new_values, new_index, new_ptr

    # -------------------- comparison / printing --------------------

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (
            self.shape == other.shape
            and np.array_equal(self._ptr, other._ptr)
            and np.array_equal(self._index, other._index)
            and np.array_equal(self.values, other.values)
        )

    def to_string(self) -> str:
        return self.to_dense().to_string()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, nnz={self.nnz})"


class CSRMatrix(_CompressedMatrix):
    """
    Compressed Row Storage matrix.

    Attributes:
        values: (nnz,) nonzero values in row-major order
        col_index: (nnz,) column of each value
        row_ptr: (num_rows + 1,) offset where each row starts
        shape: (num_rows, num_cols)
    """

    _major_axis = 0
    _index_name = "col_index"
    _ptr_name = "row_ptr"

    def __init__(self, values, col_index, row_ptr, shape: Tuple[int, int], copy: bool = True):
        super().__init__(values, col_index, row_ptr, shape, copy=copy)

    @property
    def col_index(self) -> np.ndarray:
        return self._index

    @property
    def row_ptr(self) -> np.ndarray:
        return self._ptr

    def row(self, i: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return (col_index, values) slices for row i."""
        return self._line(i)

    def iter_rows(self) -> Iterator[Tuple[int, np.ndarray, np.ndarray]]:
        """Yield (row, col_index, values) for every row, empty rows included."""
        return self._iter_lines()

    def to_ccs(self) -> "CCSMatrix":
        """Same matrix in column-major storage."""
        values, index, ptr = self._transposed_storage()
        return CCSMatrix(values, index, ptr, self.shape, copy=False).freeze()

    def __matmul__(self, other):
        from ..ops.matmul import matmul
        return matmul(self, other)

    def to_string(self) -> str:
        # walk each row once with a cursor instead of densifying
        lines = []
        col_index = self._index.tolist()
        values = self.values.tolist()
        for r in range(self.num_rows):
            cur, end = int(self._ptr[r]), int(self._ptr[r + 1])
            out = []
            for c in range(self.num_cols):
                if cur < end and col_index[cur] == c:
                    out.append(str(values[cur]))
                    cur += 1
                else:
                    out.append("0")
            lines.append(" ".join(out))
        return "\n".join(lines)


class CCSMatrix(_CompressedMatrix):
    """
    Compressed Column Storage matrix.

    Attributes:
        values: (nnz,) nonzero values in column-major order
        row_index: (nnz,) row of each value
        col_ptr: (num_cols + 1,) offset where each column starts
        shape: (num_rows, num_cols)
    """

    _major_axis = 1
    _index_name = "row_index"
    _ptr_name = "col_ptr"

    def __init__(self, values, row_index, col_ptr, shape: Tuple[int, int], copy: bool = True):
        super().__init__(values, row_index, col_ptr, shape, copy=copy)

    @property
    def row_index(self) -> np.ndarray:
        return self._index

    @property
    def col_ptr(self) -> np.ndarray:
        return self._ptr

    def col(self, j: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return (row_index, values) slices for column j."""
        return self._line(j)

    def iter_cols(self) -> Iterator[Tuple[int, np.ndarray, np.ndarray]]:
        """Yield (col, row_index, values) for every column, empty columns included."""
        return self._iter_lines()

    def to_csr(self) -> CSRMatrix:
        """Same matrix in row-major storage."""
        values, index, ptr = self._transposed_storage()
        return CSRMatrix(values, index, ptr, self.shape, copy=False).freeze()


def identity_csr(n: int) -> CSRMatrix:
    """n x n identity in CSR form."""
    _check_dims(n, n)
    idx = np.arange(n, dtype=config.index_dtype)
    return CSRMatrix(np.ones(n, dtype=config.value_dtype), idx,
                     np.arange(n + 1, dtype=config.index_dtype), (n, n), copy=False).freeze()


def identity_ccs(n: int) -> CCSMatrix:
    """n x n identity in CCS form."""
    _check_dims(n, n)
    idx = np.arange(n, dtype=config.index_dtype)
    return CCSMatrix(np.ones(n, dtype=config.value_dtype), idx,
                     np.arange(n + 1, dtype=config.index_dtype), (n, n), copy=False).freeze()
