import numpy as np
import pytest
from core.stamping.mna import Admittance, CurrentSource, MnaProblem, OpAmp, VoltageSource
from core.exceptions import SingularMatrixError


def divider_problem():
    # Node indices: 0 = top, 1 = middle, -1 = ground
    p = MnaProblem()
    p.voltage_sources.append(VoltageSource((0, -1), 5.0))
    p.admittances.append(Admittance((0, 1), 1e-3))
    p.admittances.append(Admittance((1, -1), 1e-3))
    return p


def test_matrix_a_layout():
    p = divider_problem()
    A = p.compute_matrix_a(p.node_count()).to_array()
    expected = np.array([
        [1e-3, -1e-3, 1],
        [-1e-3, 2e-3, 0],
        [1, 0, 0],
    ])
    np.testing.assert_allclose(A, expected)


def test_matrix_z_layout():
    p = divider_problem()
    p.current_sources.append(CurrentSource((1, 0), 0.5))
    z = p.compute_matrix_z(p.node_count()).to_array().ravel()
    np.testing.assert_allclose(z, [-0.5, 0.5, 5.0])


def test_opamp_stamps_b_and_c_only():
    p = MnaProblem()
    p.voltage_sources.append(VoltageSource((0, -1), 1.0))
    p.admittances.append(Admittance((0, 1), 1.0))
    p.admittances.append(Admittance((1, 2), 0.5))
    p.opamps.append(OpAmp(pos_input_node=-1, neg_input_node=1, output_node=2))
    A = p.compute_matrix_a(p.node_count()).to_array()
    assert A.shape == (5, 5)
    # Output source column
    np.testing.assert_array_equal(A[:3, 4], [0, 0, 1])
    # Input constraint row
    np.testing.assert_array_equal(A[4, :3], [0, -1, 0])
    # Voltage source row does not see the op-amp
    np.testing.assert_array_equal(A[3], [1, 0, 0, 0, 0])
    # D stays zero
    np.testing.assert_array_equal(A[3:, 3:], np.zeros((2, 2)))
    z = p.compute_matrix_z(p.node_count()).to_array().ravel()
    np.testing.assert_array_equal(z, [0, 0, 0, 1, 0])


def test_solve_divider():
    sol = divider_problem().solve()
    assert sol.voltage(0) == pytest.approx(5.0)
    assert sol.voltage(1) == pytest.approx(2.5)
    assert sol.voltage_source_current(0) == pytest.approx(-0.0025)


def test_lu_backend():
    sol = divider_problem().solve(backend="lu")
    assert sol.voltage(1) == pytest.approx(2.5)


def test_unknown_backend():
    with pytest.raises(ValueError):
        divider_problem().solve(backend="magic")


def test_floating_node_is_singular():
    p = divider_problem()
    p.admittances.append(Admittance((2, 3), 1.0))
    with pytest.raises(SingularMatrixError):
        p.solve()


def test_max_node_and_clear():
    p = divider_problem()
    assert p.max_node() == 1
    assert p.node_count() == 2
    assert p.source_count == 1
    p.clear()
    assert p.max_node() == -1
    assert p.source_count == 0
