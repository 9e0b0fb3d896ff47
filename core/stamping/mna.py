# core/stamping/mna.py
"""
Modified Nodal Analysis problem description and system assembly.

The circuit is reduced to four flat lists: inter-node admittances, ideal
voltage sources, ideal current sources and ideal op-amps. Node numbering is
the compact matrix numbering (0..n-1); any negative index is the reference
node and contributes nothing to the matrices.

    A = [[G, B],      z = [[I],
         [C, D]]           [E]]

See https://www.swarthmore.edu/NatSci/echeeve1/Ref/mna/MNA3.html
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple

from core.numeric.gauss import PIVOT_TOL, gaussian_elimination
from core.numeric.matrix import Matrix, join_horizontal, join_vertical
from core.stamping.solution import MnaSolution
from utils.linops import lu_solve_augmented

GROUND_INDEX = -1


@dataclass(frozen=True)
class Admittance:
    """Passive element generalised to an admittance Y between two nodes."""
    nodes: Tuple[int, int]
    Y: complex


@dataclass(frozen=True)
class VoltageSource:
    """Ideal voltage source; nodes[0] is the positive terminal."""
    nodes: Tuple[int, int]
    V: float


@dataclass(frozen=True)
class CurrentSource:
    """Ideal current source; I is injected into nodes[0] and drawn from nodes[1]."""
    nodes: Tuple[int, int]
    I: float


@dataclass(frozen=True)
class OpAmp:
    """
    Ideal op-amp assumed to work with negative feedback.

    The inputs are forced to equal potentials and the output is driven by an
    unconstrained source to ground. Feedback polarity is not checked, so a
    reversed connection yields the same result.
    """
    pos_input_node: int
    neg_input_node: int
    output_node: int


@dataclass
class MnaProblem:
    admittances: List[Admittance] = field(default_factory=list)
    voltage_sources: List[VoltageSource] = field(default_factory=list)
    current_sources: List[CurrentSource] = field(default_factory=list)
    opamps: List[OpAmp] = field(default_factory=list)

    def clear(self) -> None:
        self.admittances.clear()
        self.voltage_sources.clear()
        self.current_sources.clear()
        self.opamps.clear()

    @property
    def source_count(self) -> int:
        """Number of extra unknowns (voltage sources + op-amps)."""
        return len(self.voltage_sources) + len(self.opamps)

    def max_node(self) -> int:
        max_node = GROUND_INDEX
        for elem in self.admittances:
            max_node = max(max_node, *elem.nodes)
        for elem in self.voltage_sources:
            max_node = max(max_node, *elem.nodes)
        for elem in self.current_sources:
            max_node = max(max_node, *elem.nodes)
        for opa in self.opamps:
            max_node = max(max_node, opa.pos_input_node, opa.neg_input_node, opa.output_node)
        return max_node

    def node_count(self) -> int:
        return self.max_node() + 1

    def compute_matrix_a(self, node_count: int) -> Matrix:
        n = node_count
        m = self.source_count
        G = Matrix(n, n)
        B = Matrix(n, m)
        C = Matrix(m, n)
        D = Matrix(m, m)

        # G: node diagonals sum the attached admittances, off-diagonals subtract
        for elem in self.admittances:
            a, b = elem.nodes
            if a >= 0:
                G[a, a] += elem.Y
            if b >= 0:
                G[b, b] += elem.Y
            if a >= 0 and b >= 0:
                G[a, b] -= elem.Y
                G[b, a] -= elem.Y

        for i, vs in enumerate(self.voltage_sources):
            pos, neg = vs.nodes
            if pos >= 0:
                B[pos, i] = 1
            if neg >= 0:
                B[neg, i] = -1

        # C mirrors B for the independent sources only
        C.replace(0, 0, B.transpose())

        # Op-amp output sources go to B, their input constraint to C
        offset = len(self.voltage_sources)
        for i, opa in enumerate(self.opamps, start=offset):
            if opa.output_node >= 0:
                B[opa.output_node, i] = 1
            if opa.pos_input_node >= 0:
                C[i, opa.pos_input_node] = 1
            if opa.neg_input_node >= 0:
                C[i, opa.neg_input_node] = -1

        return join_vertical(join_horizontal(G, B), join_horizontal(C, D))

    def compute_matrix_z(self, node_count: int) -> Matrix:
        n = node_count
        m = self.source_count
        I = Matrix(n, 1)
        E = Matrix(m, 1)

        for cs in self.current_sources:
            a, b = cs.nodes
            if a >= 0:
                I[a, 0] += cs.I
            if b >= 0:
                I[b, 0] -= cs.I

        for i, vs in enumerate(self.voltage_sources):
            E[i, 0] = vs.V

        return join_vertical(I, E)

    def system(self, node_count: int | None = None) -> Matrix:
        """Augmented (n+m) x (n+m+1) matrix [A | z]."""
        n = self.node_count() if node_count is None else node_count
        return join_horizontal(self.compute_matrix_a(n), self.compute_matrix_z(n))

    def solve(self, tol: float = PIVOT_TOL, backend: str = "gauss",
              node_count: int | None = None) -> MnaSolution:
        """
        Assemble and solve the system.

        Args:
            tol: Relative pivot tolerance handed to the linear solver.
            backend: "gauss" (Gaussian elimination) or "lu" (SciPy LU).
            node_count: Override for n; defaults to max node index + 1.
        """
        n = self.node_count() if node_count is None else node_count
        system = self.system(n)
        if backend == "gauss":
            x = gaussian_elimination(system, tol=tol)
        elif backend == "lu":
            x = lu_solve_augmented(system, tol=tol)
        else:
            raise ValueError(f"Unknown linear solver backend '{backend}'")
        return MnaSolution(x, n, len(self.voltage_sources))
