from .matmul import matmul, dense_matmul, sparse_matmul

__all__ = ["matmul", "dense_matmul", "sparse_matmul"]
