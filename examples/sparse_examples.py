"""
Example usage of sparsemm
Demonstrates dense and CSR x CCS multiplication
"""

import logging
import time

import numpy as np
import sys
import os

# Add parent directory to path to import from sparsemm
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'python'))

from sparsemm import (
    CCSMatrix,
    CSRMatrix,
    IncompatibleDimensionsError,
    config,
    dense_matmul,
    random_dense,
    random_sparse_ccs,
    random_sparse_csr,
    sparse_matmul,
)


def example_dense_multiplication():
    """Example 1: Dense triple-loop product of random matrices"""
    print("=" * 60)
    print("Example 1: Dense Multiplication")
    print("=" * 60)

    X = random_dense(4, 5, 10)
    Y = random_dense(5, 3, 10)
    Z = dense_matmul(X, Y)

    print("---X---")
    print(X)
    print("---Y---")
    print(Y)
    print("---Z---")
    print(Z)


def example_sparse_multiplication():
    """Example 2: Filling CSR and CCS buffers by hand and multiplying"""
    print("\n" + "=" * 60)
    print("Example 2: Sparse Multiplication")
    print("=" * 60)

    X = CSRMatrix.allocate(6, 7, 5)
    X.values[:] = [2, 4, 3, 1, 6, 2]
    X.col_index[:] = [0, 3, 2, 0, 1, 4]
    X.row_ptr[:] = [0, 2, 2, 3, 4, 4, 5, 6]
    X.freeze()

    Y = CCSMatrix.allocate(9, 5, 6)
    Y.values[:] = [3, 11, 2, 3, 5, 4, 2, 6, 5]
    Y.row_index[:] = [0, 4, 1, 1, 3, 0, 1, 2, 4]
    Y.col_ptr[:] = [0, 2, 3, 5, 6, 8, 9]
    Y.freeze()

    Z = sparse_matmul(X, Y)

    print("---X---")
    print(X)
    print("---Y---")
    print(Y)
    print("---Z---")
    print(Z)
    print(f"\n{Z!r}")


def example_incompatible():
    """Example 3: Mismatched inner dimensions are reported, not computed"""
    print("\n" + "=" * 60)
    print("Example 3: Incompatible Dimensions")
    print("=" * 60)

    X = random_sparse_csr((3, 4), density=0.5, seed=1)
    Y = random_sparse_ccs((3, 4), density=0.5, seed=2)
    try:
        sparse_matmul(X, Y)
    except IncompatibleDimensionsError as e:
        print(f"\nCaught: {e}")


def example_performance_comparison():
    """Example 4: Performance comparison"""
    print("\n" + "=" * 60)
    print("Example 4: Performance Comparison")
    print("=" * 60)

    size = 120
    density = 0.02

    print(f"\nMatrix size: {size} x {size}")
    print(f"Density: {density * 100}%")

    X = random_sparse_csr((size, size), density=density, seed=42)
    Y = random_sparse_ccs((size, size), density=density, seed=43)
    X_dense = X.to_dense()
    Y_dense = Y.to_dense()

    # inputs come from the builders, so skip re-checking them
    with config.override(check_inputs=False):
        start = time.time()
        Z_sparse = sparse_matmul(X, Y)
        sparse_time = time.time() - start

    start = time.time()
    Z_dense = dense_matmul(X_dense, Y_dense)
    dense_time = time.time() - start

    print(f"\nSparse matmul time: {sparse_time:.4f} seconds")
    print(f"Dense matmul time: {dense_time:.4f} seconds")
    print(f"Speedup: {dense_time / sparse_time:.2f}x")

    assert np.array_equal(Z_sparse.to_dense().data, Z_dense.data)
    print(f"\nResults agree ({Z_sparse.nnz} nonzeros)")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    example_dense_multiplication()
    example_sparse_multiplication()
    example_incompatible()

    # Uncomment for performance test (takes a bit longer)
    # example_performance_comparison()

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)
