# core/numeric/gauss.py
"""
Gaussian elimination with partial pivoting over complex coefficients.

The system is passed as one augmented N x (N+1) matrix ``[A | z]``; the
caller's matrix is never modified.
"""
from __future__ import annotations

import numpy as np

from core.exceptions import DimensionMismatchError, SingularMatrixError
from core.numeric.matrix import Matrix

# A pivot is treated as zero when its magnitude is at or below
# PIVOT_TOL times the largest magnitude of that column in the original A.
PIVOT_TOL = 1e-14


def gaussian_elimination(system: Matrix, tol: float = PIVOT_TOL) -> Matrix:
    """
    Solve ``A x = z`` given the augmented matrix ``[A | z]``.

    Args:
        system: N x (N+1) augmented matrix.
        tol: Relative pivot tolerance; ``0`` accepts any non-zero pivot.

    Returns:
        N x 1 matrix holding x.

    Raises:
        DimensionMismatchError: If the system is not N x (N+1).
        SingularMatrixError: If a pivot column has no usable entry.
    """
    N = system.height
    if system.width != N + 1:
        raise DimensionMismatchError(
            f"Invalid equation system dimensions {system.height}x{system.width}"
        )

    mat = system.to_array().astype(np.complex128)
    col_scale = np.abs(mat[:, :N]).max(axis=0) if N else np.zeros(0)

    # Reduction to row echelon form
    for k in range(N):
        row_max = k
        largest = abs(mat[k, k])
        for i in range(k + 1, N):
            x = abs(mat[i, k])
            if x > largest:
                largest = x
                row_max = i

        if largest == 0.0 or largest <= tol * col_scale[k]:
            raise SingularMatrixError(
                f"Could not solve equation system (Gaussian elimination failed "
                f"at column {k}: no non-zero pivot)"
            )

        if row_max != k:
            mat[[k, row_max], :] = mat[[row_max, k], :]

        pivot = mat[k, k]
        for i in range(k + 1, N):
            entry = mat[i, k]
            if entry != 0.0:
                mat[i, :] = mat[i, :] * (-pivot / entry) + mat[k, :]

    # Back substitution
    solution = np.zeros(N, dtype=np.complex128)
    for i in range(N - 1, -1, -1):
        acc = mat[i, N] - np.dot(mat[i, i + 1:N], solution[i + 1:N])
        solution[i] = acc / mat[i, i]

    return Matrix.from_array(solution.reshape(N, 1))
