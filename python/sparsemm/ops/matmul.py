import logging

from ..backend_ndarray.builder import CSRBuilder
from ..backend_ndarray.compressed import CCSMatrix, CSRMatrix
from ..backend_ndarray.dense import DenseMatrix
from ..config import config
from ..errors import IncompatibleDimensionsError, IntegerOverflowError

logger = logging.getLogger(__name__)


###########################################################
#                      Public wrappers                    #
###########################################################

def matmul(a, b):
    """
    Multiply two matrices of matching representation.

    (DenseMatrix, DenseMatrix) -> DenseMatrix
    (CSRMatrix, CCSMatrix)     -> CSRMatrix
    """
    if isinstance(a, DenseMatrix) and isinstance(b, DenseMatrix):
        return dense_matmul(a, b)
    if isinstance(a, CSRMatrix) and isinstance(b, CCSMatrix):
        return sparse_matmul(a, b)
    raise TypeError(
        f"unsupported operand types for matmul: {type(a).__name__} and {type(b).__name__}"
    )


###########################################################
#                     Dense multiply                      #
###########################################################

def dense_matmul(a: DenseMatrix, b: DenseMatrix) -> DenseMatrix:
    """
    Naive triple-loop product of two dense matrices.
    a is (m, n) and b is (n, p), result is (m, p).
    """
    if a.num_cols != b.num_rows:
        raise IncompatibleDimensionsError(a.shape, b.shape)

    m, n = a.shape
    p = b.num_cols
    x = a.data.tolist()
    y = b.data.tolist()

    out = DenseMatrix.zeros(m, p)
    z = out.data
    for row in range(m):
        x_row = x[row]
        for col in range(p):
            dot = 0
            for k in range(n):
                dot += x_row[k] * y[k][col]
            try:
                z[row, col] = dot
            except OverflowError as e:
                raise IntegerOverflowError(
                    f"Entry ({row}, {col}) does not fit {z.dtype.name}"
                ) from e
    return out


###########################################################
#                     Sparse multiply                     #
###########################################################

def sparse_matmul(a: CSRMatrix, b: CCSMatrix) -> CSRMatrix:
    """
    CSR @ CCS matrix multiplication.
    a is (m, n) and b is (n, p), result is a CSR (m, p).

    Every output entry is a merge-join of row r of a against column c of b.
    Both slices are sorted by the shared inner index, so the cursor into b's
    column only ever moves forward while a's row is walked, and once it runs
    off the end of the column nothing later in the row can match.
    """
    if not isinstance(a, CSRMatrix) or not isinstance(b, CCSMatrix):
        raise TypeError(
            f"sparse_matmul expects (CSRMatrix, CCSMatrix), got "
            f"({type(a).__name__}, {type(b).__name__})"
        )
    if a.num_cols != b.num_rows:
        raise IncompatibleDimensionsError(a.shape, b.shape)

    if config.check_inputs:
        a.check_format()
        b.check_format()

    m, p = a.num_rows, b.num_cols
    logger.debug("sparse_matmul %s (nnz=%d) @ %s (nnz=%d)", a.shape, a.nnz, b.shape, b.nnz)

    # plain lists are much faster to index element-wise than numpy arrays
    a_ptr = a.row_ptr.tolist()
    a_cols = a.col_index.tolist()
    a_vals = a.values.tolist()
    b_ptr = b.col_ptr.tolist()
    b_rows = b.row_index.tolist()
    b_vals = b.values.tolist()

    out = CSRBuilder(m, p, max_nnz=config.max_result_nnz)

    for row in range(m):
        a_start, a_end = a_ptr[row], a_ptr[row + 1]
        if a_end == a_start:
            # Empty row in a
            out.end_line()
            continue

        for col in range(p):
            b_end = b_ptr[col + 1]
            cursor = b_ptr[col]
            if cursor == b_end:
                continue

            dot = 0
            for a_idx in range(a_start, a_end):
                k = a_cols[a_idx]
                while cursor < b_end and b_rows[cursor] < k:
                    cursor += 1
                if cursor >= b_end:
                    break
                if b_rows[cursor] == k:
                    dot += a_vals[a_idx] * b_vals[cursor]

            if dot != 0:
                out.append(col, dot)

        out.end_line()

    result = out.build()
    logger.debug("sparse_matmul result %s nnz=%d", result.shape, result.nnz)
    return result
