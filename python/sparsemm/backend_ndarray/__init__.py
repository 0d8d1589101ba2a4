from .dense import DenseMatrix, random_dense
from .compressed import CSRMatrix, CCSMatrix, identity_csr, identity_ccs
from .builder import (
    CSRBuilder,
    CCSBuilder,
    csr_from_triplets,
    ccs_from_triplets,
    random_sparse_csr,
    random_sparse_ccs,
)

__all__ = [
    "DenseMatrix",
    "random_dense",
    "CSRMatrix",
    "CCSMatrix",
    "identity_csr",
    "identity_ccs",
    "CSRBuilder",
    "CCSBuilder",
    "csr_from_triplets",
    "ccs_from_triplets",
    "random_sparse_csr",
    "random_sparse_ccs",
]
