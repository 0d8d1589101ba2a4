"""Dense and CSR x CCS sparse integer matrix multiplication."""

__version__ = "0.1.0"

from .config import config
from .errors import (
    AllocationError,
    IncompatibleDimensionsError,
    IntegerOverflowError,
    InvalidArgumentError,
    InvalidFormatError,
    InvalidShapeError,
    SparseMMError,
)
from .backend_ndarray import *
from .ops import *
