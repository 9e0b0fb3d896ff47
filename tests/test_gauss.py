import numpy as np
import pytest
from core.numeric.gauss import gaussian_elimination
from core.numeric.matrix import Matrix
from core.exceptions import DimensionMismatchError, SingularMatrixError
from utils.linops import LinearOperator, lu_solve_augmented


def _augmented(A, z):
    A = np.asarray(A, dtype=complex)
    z = np.asarray(z, dtype=complex).reshape(-1, 1)
    return Matrix.from_array(np.hstack([A, z]))


def test_solves_real_system():
    A = [[2, 1, -1], [-3, -1, 2], [-2, 1, 2]]
    z = [8, -11, -3]
    x = gaussian_elimination(_augmented(A, z))
    assert x.shape == (3, 1)
    np.testing.assert_allclose(x.to_array().ravel(), [2, 3, -1], atol=1e-12)


def test_solves_complex_system():
    rng = np.random.default_rng(1234)
    A = rng.normal(size=(5, 5)) + 1j * rng.normal(size=(5, 5))
    z = rng.normal(size=5) + 1j * rng.normal(size=5)
    x = gaussian_elimination(_augmented(A, z)).to_array().ravel()
    np.testing.assert_allclose(x, np.linalg.solve(A, z), rtol=1e-10)


def test_zero_leading_entry_needs_pivoting():
    A = [[0, 1], [1, 0]]
    z = [3, 4]
    x = gaussian_elimination(_augmented(A, z)).to_array().ravel()
    np.testing.assert_allclose(x, [4, 3])


def test_input_not_modified():
    system = _augmented([[0, 1], [1, 0]], [3, 4])
    before = system.to_array()
    gaussian_elimination(system)
    np.testing.assert_array_equal(system.to_array(), before)


def test_singular_system_raises():
    A = [[1, -1], [-1, 1]]
    with pytest.raises(SingularMatrixError):
        gaussian_elimination(_augmented(A, [0, 0]))


def test_near_singular_below_tolerance():
    A = [[1.0, 1.0], [1.0, 1.0 + 1e-15]]
    system = _augmented(A, [1, 1])
    with pytest.raises(SingularMatrixError):
        gaussian_elimination(system)
    # Exact-zero rule accepts the tiny pivot
    x = gaussian_elimination(system, tol=0).to_array().ravel()
    assert np.all(np.isfinite(x))


def test_bad_dimensions():
    with pytest.raises(DimensionMismatchError):
        gaussian_elimination(Matrix(3, 3))


def test_empty_system():
    x = gaussian_elimination(Matrix(0, 1))
    assert x.shape == (0, 1)


def test_deterministic():
    system = _augmented([[4, 2, 1], [2, 4, 2], [1, 2, 4]], [1, 2, 3])
    first = gaussian_elimination(system)
    second = gaussian_elimination(system)
    assert first == second


def test_lu_backend_agrees_with_gauss():
    rng = np.random.default_rng(7)
    A = rng.normal(size=(6, 6)) + 1j * rng.normal(size=(6, 6))
    z = rng.normal(size=6)
    system = _augmented(A, z)
    np.testing.assert_allclose(
        lu_solve_augmented(system).to_array(),
        gaussian_elimination(system).to_array(),
        rtol=1e-9,
    )


def test_lu_backend_singular():
    with pytest.raises(SingularMatrixError):
        LinearOperator(np.array([[1, 2], [2, 4]], dtype=complex))
