import numpy as np
from typing import Optional, Tuple

from ..config import config
from ..errors import AllocationError, InvalidArgumentError, InvalidFormatError, InvalidShapeError


def as_value_array(data) -> np.ndarray:
    """
    Convert array-like data to config.value_dtype. Floating-point input is
    accepted only when every entry is integral, so nothing is truncated.
    """
    arr = np.asarray(data)
    if arr.dtype.kind == "f":
        if not np.all(np.isfinite(arr)) or np.any(arr != np.round(arr)):
            raise InvalidFormatError("matrix entries must be integers")
    return arr.astype(config.value_dtype)


class DenseMatrix:
    """
    Row-major 2D integer matrix.

    Attributes:
        data: (num_rows, num_cols) numpy array holding every entry
        shape: (num_rows, num_cols)
    """

    def __init__(self, data):
        arr = as_value_array(data)
        if arr.ndim != 2:
            raise InvalidShapeError(f"DenseMatrix expects a 2D array, got ndim={arr.ndim}")
        if arr.shape[0] <= 0 or arr.shape[1] <= 0:
            raise InvalidShapeError(f"DenseMatrix dimensions must be positive, got {arr.shape}")
        self.data = np.ascontiguousarray(arr)

    @staticmethod
    def zeros(num_rows: int, num_cols: int) -> "DenseMatrix":
        """Allocate a num_rows x num_cols matrix of zeros."""
        if num_rows <= 0 or num_cols <= 0:
            raise InvalidShapeError(f"Dimensions must be positive, got ({num_rows}, {num_cols})")
        try:
            return DenseMatrix(np.zeros((num_rows, num_cols), dtype=config.value_dtype))
        except MemoryError as e:
            raise AllocationError(f"Cannot allocate dense {num_rows}x{num_cols} matrix") from e

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    @property
    def num_rows(self) -> int:
        return self.data.shape[0]

    @property
    def num_cols(self) -> int:
        return self.data.shape[1]

    def __getitem__(self, key: Tuple[int, int]) -> int:
        row, col = key
        return int(self.data[row, col])

    def __eq__(self, other) -> bool:
        if not isinstance(other, DenseMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.data, other.data))

    def __matmul__(self, other):
        from ..ops.matmul import matmul
        return matmul(self, other)

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the underlying array."""
        return self.data.copy()

    def to_string(self) -> str:
        """Render one line per row with entries separated by single spaces."""
        return "\n".join(" ".join(str(v) for v in row) for row in self.data.tolist())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"DenseMatrix(shape={self.shape})"


def random_dense(num_rows: int, num_cols: int, upper: int,
                 seed: Optional[int] = None) -> DenseMatrix:
    """
    Create a dense matrix with entries drawn uniformly from [0, upper).

    Args:
        num_rows: Number of rows
        num_cols: Number of columns
        upper: Exclusive upper bound for entries (must be positive)
        seed: Random seed for reproducibility

    Returns:
        Random DenseMatrix
    """
    if upper <= 0:
        raise InvalidArgumentError(f"upper must be positive, got {upper}")
    if num_rows <= 0 or num_cols <= 0:
        raise InvalidShapeError(f"Dimensions must be positive, got ({num_rows}, {num_cols})")
    rng = np.random.default_rng(seed)
    return DenseMatrix(rng.integers(0, upper, size=(num_rows, num_cols), dtype=config.value_dtype))
