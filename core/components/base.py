# core/components/base.py
"""
Base Component API for mnasim.
Every circuit element belongs to exactly one ElementKind; the circuit solver
dispatches on that tag when it builds the MNA problem.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple


class ElementKind(Enum):
    ADMITTANCE = "admittance"
    VOLTAGE_SOURCE = "voltage_source"
    CURRENT_SOURCE = "current_source"
    OPAMP = "opamp"


class Component(ABC):
    """
    Abstract base class for all circuit elements.
    Subclasses define their terminal names and their ElementKind.
    """
    type_name: str = ""
    kind: ElementKind
    port_names: Tuple[str, ...] = ()

    def __init__(self, comp_id: str, nodes: Sequence[Any]):
        self.id = comp_id
        nodes = tuple(str(n) for n in nodes)
        if len(nodes) != self.n_ports:
            raise ValueError(
                f"{type(self).__name__} '{comp_id}' needs {self.n_ports} nodes, got {len(nodes)}"
            )
        self.nodes: Tuple[str, ...] = nodes

    @property
    def ports(self) -> List[str]:
        """
        Ordered list of terminal names.
        The order matches self.nodes.
        """
        return list(self.port_names)

    @property
    def n_ports(self) -> int:
        return len(self.ports)

    def connections(self) -> Dict[str, str]:
        """Terminal name -> node label."""
        return dict(zip(self.ports, self.nodes))

    def params(self) -> Dict[str, Any]:
        """Numeric parameters, used for serialisation and reports."""
        return {}

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} nodes={list(self.nodes)}>"


class TwoTerminalComponent(Component):
    """Element connected between a positive and a negative node."""
    port_names = ("p", "n")

    @property
    def n_plus(self) -> str:
        return self.nodes[0]

    @property
    def n_minus(self) -> str:
        return self.nodes[1]


class PassiveComponent(TwoTerminalComponent):
    """Two-terminal element described by a frequency-dependent admittance."""
    kind = ElementKind.ADMITTANCE

    @abstractmethod
    def admittance(self, omega: float) -> complex:
        """Admittance in siemens at angular frequency *omega* (rad/s)."""
        pass


class SourceComponent(TwoTerminalComponent):
    """Independent source with separate DC and AC magnitudes."""

    def __init__(self, comp_id: str, nodes: Sequence[Any], dc: float = 0.0, ac: float = 0.0):
        super().__init__(comp_id, nodes)
        self.dc = float(dc)
        self.ac = float(ac)

    def value(self, omega: float) -> float:
        """DC value for omega == 0, AC value otherwise."""
        return self.dc if omega == 0 else self.ac

    def params(self) -> Dict[str, Any]:
        return {"dc": self.dc, "ac": self.ac}
