# core/topology/netlist_graph.py
"""
NetlistGraph for mnasim: captures circuit connectivity in terms of nets (nodes).
Provides the compact index mapping used for MNA assembly: the ground net maps
to -1 and every other net gets 0, 1, ... in order of first appearance.
"""
from typing import Dict, List, Optional
from dataclasses import dataclass

import networkx as nx

from core.components.base import ElementKind
from core.stamping.mna import GROUND_INDEX


@dataclass(frozen=True)
class PortConnection:
    """
    Represents a single terminal-to-net mapping.
    """
    component_id: str
    port_name: str
    net_name: str


class NetlistGraph:
    """
    Connectivity of a circuit at the net level.
    Nets keep their order of first appearance; edges are implicit via
    PortConnection records.
    """
    def __init__(self, ground_net: Optional[str] = None):
        self.ground_net = ground_net
        # Net names in order of first appearance
        self._nets: Dict[str, None] = {}
        self._connections: List[PortConnection] = []
        self._node_index: Optional[Dict[str, int]] = None

    @classmethod
    def from_circuit(cls, circuit) -> "NetlistGraph":
        """Record every terminal of every element of a Circuit."""
        graph = cls(ground_net=circuit.ground)
        for comp in circuit.components:
            for port_name, net_name in comp.connections().items():
                graph.add_connection(comp.id, port_name, net_name)
        return graph

    def add_connection(self, component_id: str, port_name: str, net_name: str) -> None:
        """
        Record that component.port is tied to net_name.
        Resets cached index mapping.
        """
        self._nets.setdefault(net_name, None)
        self._connections.append(PortConnection(component_id, port_name, net_name))
        self._node_index = None

    def remove_connection(self, component_id: str, port_name: str, net_name: str) -> None:
        to_remove = PortConnection(component_id, port_name, net_name)
        try:
            self._connections.remove(to_remove)
        except ValueError:
            raise KeyError(f"Connection {to_remove} not found in NetlistGraph.")
        self._nets = {c.net_name: None for c in self._connections}
        self._node_index = None

    def nodes(self) -> List[str]:
        """Net names in order of first appearance."""
        return list(self._nets)

    def connections(self) -> List[PortConnection]:
        return list(self._connections)

    def node_index(self) -> Dict[str, int]:
        """
        Mapping net name -> matrix index. The ground net is always present
        and maps to -1. Cached until connections change.
        """
        if self._node_index is not None:
            return self._node_index

        index: Dict[str, int] = {}
        if self.ground_net is not None:
            index[self.ground_net] = GROUND_INDEX
        cnt = 0
        for net in self._nets:
            if net not in index:
                index[net] = cnt
                cnt += 1
        self._node_index = index
        return index

    def dimension(self) -> int:
        """Number of non-ground nets, i.e. node-voltage unknowns."""
        return sum(1 for net in self._nets if net != self.ground_net)

    def to_networkx(self, circuit) -> nx.MultiGraph:
        """
        Net-level multigraph: one edge per current path an element provides.
        Two-terminal elements join their nodes; an op-amp joins its output to
        ground (its inputs carry no current).
        """
        graph = nx.MultiGraph()
        graph.add_nodes_from(self._nets)
        if self.ground_net is not None:
            graph.add_node(self.ground_net)
        for comp in circuit.components:
            if comp.kind is ElementKind.OPAMP:
                graph.add_edge(comp.output_node, self.ground_net, component=comp.id)
            else:
                graph.add_edge(comp.nodes[0], comp.nodes[1], component=comp.id)
        return graph

    def __repr__(self) -> str:
        return (
            f"<NetlistGraph nets={len(self._nets)} connections={len(self._connections)}>"
        )
