# core/validation.py
"""
Structural validation utilities for mnasim.
Catches the usual causes of a singular MNA system before solving: a missing
ground reference, nodes with no path to ground and shorted ideal sources.
"""
import logging
from typing import List

import networkx as nx

from core.components.base import ElementKind
from core.exceptions import TopologyError
from core.topology.netlist_graph import NetlistGraph

logger = logging.getLogger(__name__)


def validate_circuit_structure(circuit) -> None:
    """
    Perform pre-solve sanity checks on a Circuit.

    Raises:
        TopologyError with a descriptive message if validation fails.
    """
    errors: List[str] = []

    if len(circuit) == 0:
        raise TopologyError("Circuit has no elements.")

    netlist = NetlistGraph.from_circuit(circuit)
    nets = netlist.nodes()
    if circuit.ground not in nets:
        errors.append(f"No element is connected to the ground node '{circuit.ground}'.")

    for comp in circuit.components:
        if comp.kind is ElementKind.VOLTAGE_SOURCE and comp.n_plus == comp.n_minus:
            errors.append(f"Voltage source '{comp.id}' is shorted (both terminals on '{comp.n_plus}').")
        elif comp.kind is ElementKind.ADMITTANCE and comp.n_plus == comp.n_minus:
            logger.warning("Element '%s' has both terminals on node '%s'.", comp.id, comp.n_plus)
        elif comp.kind is ElementKind.OPAMP and comp.pos_input_node == comp.neg_input_node:
            errors.append(f"Op-amp '{comp.id}' has both inputs on node '{comp.pos_input_node}'.")

    if circuit.ground in nets:
        graph = netlist.to_networkx(circuit)
        reachable = nx.node_connected_component(graph, circuit.ground)
        floating = [n for n in nets if n not in reachable]
        if floating:
            errors.append("Nodes without a path to ground: " + ", ".join(floating))

    if errors:
        raise TopologyError("Circuit validation failed: " + "; ".join(errors))
