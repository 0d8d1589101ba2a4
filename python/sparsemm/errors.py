"""
Error types for sparsemm.

Every failure the library can report is a subclass of SparseMMError and
carries a numeric code alongside the message, so callers that need to map
errors onto their own status values can do so without string matching.
"""

from __future__ import annotations

from typing import Optional, Tuple


# =============================================================================
# Error Codes
# =============================================================================

SPARSEMM_ERROR_UNKNOWN = 1
SPARSEMM_ERROR_OUT_OF_MEMORY = 3
SPARSEMM_ERROR_INVALID_ARGUMENT = 10
SPARSEMM_ERROR_DIMENSION_MISMATCH = 11
SPARSEMM_ERROR_INVALID_FORMAT = 12
SPARSEMM_ERROR_OVERFLOW = 52


_ERROR_MESSAGES = {
    SPARSEMM_ERROR_UNKNOWN: "Unknown error",
    SPARSEMM_ERROR_OUT_OF_MEMORY: "Out of memory",
    SPARSEMM_ERROR_INVALID_ARGUMENT: "Invalid argument",
    SPARSEMM_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    SPARSEMM_ERROR_INVALID_FORMAT: "Invalid sparse format",
    SPARSEMM_ERROR_OVERFLOW: "Integer overflow",
}


# =============================================================================
# Exception Classes
# =============================================================================

class SparseMMError(Exception):
    """Base exception for all sparsemm errors."""

    code = SPARSEMM_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None):
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)


class IncompatibleDimensionsError(SparseMMError, ValueError):
    """Inner dimensions of the two operands do not agree."""

    code = SPARSEMM_ERROR_DIMENSION_MISMATCH

    def __init__(self, left_shape: Tuple[int, int], right_shape: Tuple[int, int]):
        self.left_shape = tuple(left_shape)
        self.right_shape = tuple(right_shape)
        super().__init__(
            "Matrix sizes are incompatible for multiplication: "
            f"{self.left_shape} @ {self.right_shape}"
        )


class AllocationError(SparseMMError, MemoryError):
    """Storage for a matrix or a working buffer could not be obtained."""

    code = SPARSEMM_ERROR_OUT_OF_MEMORY


class InvalidFormatError(SparseMMError, ValueError):
    """A compressed matrix violates one of its structural invariants."""

    code = SPARSEMM_ERROR_INVALID_FORMAT


class InvalidArgumentError(SparseMMError, ValueError):
    """An argument is outside the range an operation accepts."""

    code = SPARSEMM_ERROR_INVALID_ARGUMENT


class InvalidShapeError(InvalidArgumentError):
    """Dimensions or nonzero counts passed to a constructor are out of range."""


class IntegerOverflowError(SparseMMError, OverflowError):
    """An accumulated value does not fit the configured value dtype."""

    code = SPARSEMM_ERROR_OVERFLOW
