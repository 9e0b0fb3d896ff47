# utils/linops.py
from __future__ import annotations
import warnings

import numpy as np
import scipy.linalg as la

from core.exceptions import DimensionMismatchError, SingularMatrixError
from core.numeric.gauss import PIVOT_TOL
from core.numeric.matrix import Matrix


class LinearOperator:
    """
    Wraps a dense LU factorisation and exposes a .solve(b) method.

    Raises SingularMatrixError under the same relative pivot rule as
    gaussian_elimination, so both backends agree on ill-posed circuits.
    """
    __slots__ = ("_lu", "_piv")

    def __init__(self, A: np.ndarray, tol: float = PIVOT_TOL):
        A = np.asarray(A, dtype=np.complex128)
        if A.ndim != 2 or A.shape[0] != A.shape[1]:
            raise DimensionMismatchError(f"LU backend needs a square matrix, got {A.shape}")
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", la.LinAlgWarning)
            lu, piv = la.lu_factor(A)
        diag = np.abs(np.diag(lu))
        scale = np.abs(A).max(axis=0) if A.size else np.zeros(0)
        bad = np.nonzero((diag == 0.0) | (diag <= tol * scale))[0]
        if bad.size:
            raise SingularMatrixError(
                f"Could not solve equation system (LU factorisation found a zero pivot "
                f"at column {int(bad[0])})"
            )
        self._lu = lu
        self._piv = piv

    def solve(self, rhs: np.ndarray) -> np.ndarray:
        return la.lu_solve((self._lu, self._piv), rhs)


def lu_solve_augmented(system: Matrix, tol: float = PIVOT_TOL) -> Matrix:
    """Solve an augmented N x (N+1) system with SciPy's LU."""
    N = system.height
    if system.width != N + 1:
        raise DimensionMismatchError(
            f"Invalid equation system dimensions {system.height}x{system.width}"
        )
    arr = system.to_array()
    if N == 0:
        return Matrix(0, 1)
    x = LinearOperator(arr[:, :N], tol=tol).solve(arr[:, N])
    return Matrix.from_array(np.asarray(x).reshape(N, 1))
