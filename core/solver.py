# core/solver.py
"""
Circuit solver: bridges a freely labelled Circuit to the compact MNA
numbering and answers voltage/current/power queries on the last solution.

Every call to solve(omega) rebuilds the MNA problem from scratch and
replaces the solver state; DC analysis is omega == 0.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from core.components.base import Component, ElementKind
from core.exceptions import NotSolvedError, OperatingPointError, OutOfRangeError, SingularMatrixError
from core.stamping.mna import Admittance, CurrentSource, MnaProblem, OpAmp, VoltageSource
from core.stamping.solution import MnaSolution
from core.topology.circuit import Circuit
from core.topology.netlist_graph import NetlistGraph

logger = logging.getLogger(__name__)

ElementRef = Union[str, Component]


@dataclass(frozen=True)
class Unsolved:
    """No solution is available."""


@dataclass(frozen=True)
class SolvedAt:
    """Solution for angular frequency *omega*."""
    omega: float
    solution: MnaSolution


SolverState = Union[Unsolved, SolvedAt]


class CircuitSolver:
    """
    Linear circuit analyser.

    After solve(), voltage(), current() and power() measure the circuit.
    Topology changes on the Circuit are picked up by update(), which also
    runs automatically before the next solve.
    """
    def __init__(self, circuit: Circuit, tol: float = 0.0, backend: str = "gauss"):
        self.circuit = circuit
        self.tol = tol
        self.backend = backend
        self.state: SolverState = Unsolved()
        self._node_map: Dict[str, int] = {}
        self._mapped_revision: Optional[int] = None
        self.update_node_map()

    # ------------------------------------------------------------------
    # Topology mapping
    # ------------------------------------------------------------------
    def update_node_map(self) -> None:
        """Re-derive label -> index mapping from the circuit."""
        self._node_map = dict(NetlistGraph.from_circuit(self.circuit).node_index())
        self._mapped_revision = self.circuit.revision
        logger.debug("Node map rebuilt: %s", self._node_map)

    def update(self) -> None:
        """Refresh the node map and re-solve at the last omega, if any."""
        self.update_node_map()
        if isinstance(self.state, SolvedAt):
            self.solve(self.state.omega)

    def get_node_map(self) -> Mapping[str, int]:
        return MappingProxyType(self._node_map)

    @property
    def node_count(self) -> int:
        return sum(1 for idx in self._node_map.values() if idx >= 0)

    def _index(self, label) -> int:
        try:
            return self._node_map[str(label)]
        except KeyError:
            raise OutOfRangeError(f"Unknown node '{label}'.") from None

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def build_problem(self, omega: float) -> MnaProblem:
        """Translate the circuit into an MnaProblem at *omega*."""
        problem = MnaProblem()
        idx = self._index
        for comp in self.circuit.components:
            kind = comp.kind
            if kind is ElementKind.ADMITTANCE:
                problem.admittances.append(
                    Admittance((idx(comp.n_plus), idx(comp.n_minus)), comp.admittance(omega)))
            elif kind is ElementKind.VOLTAGE_SOURCE:
                problem.voltage_sources.append(
                    VoltageSource((idx(comp.n_plus), idx(comp.n_minus)), comp.value(omega)))
            elif kind is ElementKind.CURRENT_SOURCE:
                problem.current_sources.append(
                    CurrentSource((idx(comp.n_plus), idx(comp.n_minus)), comp.value(omega)))
            elif kind is ElementKind.OPAMP:
                problem.opamps.append(
                    OpAmp(idx(comp.pos_input_node), idx(comp.neg_input_node), idx(comp.output_node)))
            else:
                raise TypeError(f"Unhandled element kind {kind!r} for '{comp.id}'")
        return problem

    def solve(self, omega: float) -> MnaSolution:
        """
        Analyse the circuit at angular frequency *omega* (rad/s).
        DC sources are used for omega == 0, AC sources otherwise.

        Raises:
            OperatingPointError: If the circuit has no unique operating point.
        """
        if self._mapped_revision != self.circuit.revision:
            self.update_node_map()

        self.state = Unsolved()
        problem = self.build_problem(omega)
        try:
            solution = problem.solve(tol=self.tol, backend=self.backend, node_count=self.node_count)
        except SingularMatrixError as exc:
            raise OperatingPointError(omega, str(exc)) from exc

        self.state = SolvedAt(omega, solution)
        logger.debug("Solved %d unknowns at omega=%g", len(solution.vector), omega)
        return solution

    def _solved(self) -> SolvedAt:
        state = self.state
        if not isinstance(state, SolvedAt):
            raise NotSolvedError("Circuit has not been solved yet.")
        return state

    def get_solution(self) -> MnaSolution:
        return self._solved().solution

    def get_solution_omega(self) -> float:
        return self._solved().omega

    # ------------------------------------------------------------------
    # Measurements
    # ------------------------------------------------------------------
    def _component(self, ref: ElementRef) -> Component:
        if isinstance(ref, Component):
            return ref
        return self.circuit[ref]

    def _ordinal(self, comp: Component) -> int:
        """Position of *comp* among the circuit elements of the same kind."""
        for i, other in enumerate(self.circuit.components_of_kind(comp.kind)):
            if other is comp:
                return i
        raise OutOfRangeError(f"Component '{comp.id}' is not part of the circuit.")

    def node_voltage(self, pos, neg=None) -> complex:
        """Voltage between node labels *pos* and *neg* (ground by default)."""
        solution = self._solved().solution
        neg_idx = -1 if neg is None else self._index(neg)
        return solution.voltage(self._index(pos), neg_idx)

    def voltage(self, ref, neg=None) -> complex:
        """
        Voltage across an element (Component or element name), or between two
        node labels when *ref* is not an element name or *neg* is given.
        Op-amps report their output-to-ground voltage.
        """
        if isinstance(ref, Component) or (neg is None and ref in self.circuit):
            comp = self._component(ref)
            if comp.kind is ElementKind.OPAMP:
                return self.node_voltage(comp.output_node)
            return self.node_voltage(comp.n_plus, comp.n_minus)
        return self.node_voltage(ref, neg)

    def current(self, ref: ElementRef) -> complex:
        """
        Current through an element, n_plus -> n_minus.
        Current sources report the negated source value; op-amps their
        output current.
        """
        state = self._solved()
        comp = self._component(ref)
        kind = comp.kind
        if kind is ElementKind.ADMITTANCE:
            return self.voltage(comp) * comp.admittance(state.omega)
        if kind is ElementKind.VOLTAGE_SOURCE:
            return state.solution.voltage_source_current(self._ordinal(comp))
        if kind is ElementKind.CURRENT_SOURCE:
            return complex(-comp.value(state.omega))
        if kind is ElementKind.OPAMP:
            return state.solution.opamp_current(self._ordinal(comp))
        raise TypeError(f"Cannot measure current through '{comp.id}'")

    def power(self, ref: ElementRef) -> complex:
        """Power absorbed by an element, V * I."""
        comp = self._component(ref)
        return self.voltage(comp) * self.current(comp)

    def total_power(self, kind: Optional[ElementKind] = ElementKind.ADMITTANCE) -> complex:
        """Sum of power over elements of *kind* (all elements when None)."""
        comps = self.circuit.components if kind is None else self.circuit.components_of_kind(kind)
        return sum((self.power(c) for c in comps), 0j)
