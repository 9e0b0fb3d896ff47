# evaluation/probes.py
"""
Measurement probes for mnasim analyses.

A probe reads one real number off a solved CircuitSolver: a voltage, current
or power, reduced from its complex phasor by a ProbeMethod. Probes are
created from '.print' style text such as ``V(2)``, ``Vmag(2,3)``,
``Iph(R1)`` or ``P(C1)``.
"""
import cmath
import logging
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional

from core.components.base import ElementKind
from core.exceptions import MNASimError, ProbeError
from core.solver import CircuitSolver
from core.topology.circuit import Circuit

logger = logging.getLogger(__name__)


class ProbeMethod(Enum):
    DEFAULT = ""
    REAL = "re"
    IMAGINARY = "im"
    MAGNITUDE = "mag"
    PHASE = "ph"


def probe_complex(value: complex, method: ProbeMethod, omega: float = 0.0) -> float:
    """
    Reduce a phasor to a real number.
    DEFAULT gives the real part at DC and the magnitude otherwise; PHASE is in radians.
    """
    if method is ProbeMethod.DEFAULT:
        method = ProbeMethod.REAL if omega == 0 else ProbeMethod.MAGNITUDE
    if method is ProbeMethod.REAL:
        return float(value.real)
    if method is ProbeMethod.IMAGINARY:
        return float(value.imag)
    if method is ProbeMethod.MAGNITUDE:
        return float(abs(value))
    return float(cmath.phase(value))


class Probe(ABC):
    """Named measurement taken after each solve."""
    letter = ""

    def __init__(self, method: ProbeMethod = ProbeMethod.DEFAULT):
        self.method = method

    @property
    def name(self) -> str:
        return f"{self.letter}{self.method.value}({','.join(self.arguments())})"

    @abstractmethod
    def arguments(self) -> List[str]:
        pass

    @abstractmethod
    def measure(self, solver: CircuitSolver) -> complex:
        """Complex quantity at the solver's last operating point."""
        pass

    def get_value(self, solver: CircuitSolver) -> float:
        try:
            value = self.measure(solver)
            return probe_complex(value, self.method, solver.get_solution_omega())
        except MNASimError as exc:
            raise ProbeError(f"Probing '{self.name}' failed: {exc}") from exc

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class VoltageProbe(Probe):
    """Voltage between two nodes, or across a named element."""
    letter = "V"

    def __init__(self, pos: str, neg: Optional[str] = None, element: Optional[str] = None,
                 method: ProbeMethod = ProbeMethod.DEFAULT):
        super().__init__(method)
        self.pos = pos
        self.neg = neg
        self.element = element

    @classmethod
    def across(cls, element: str, method: ProbeMethod = ProbeMethod.DEFAULT) -> "VoltageProbe":
        return cls(pos=element, element=element, method=method)

    def arguments(self) -> List[str]:
        if self.element is not None:
            return [self.element]
        return [self.pos] if self.neg is None else [self.pos, self.neg]

    def measure(self, solver: CircuitSolver) -> complex:
        if self.element is not None:
            return solver.voltage(solver.circuit[self.element])
        return solver.node_voltage(self.pos, self.neg)


class ElementProbe(Probe):
    """Probe bound to a single element."""

    def __init__(self, element: str, method: ProbeMethod = ProbeMethod.DEFAULT):
        super().__init__(method)
        self.element = element

    def arguments(self) -> List[str]:
        return [self.element]


class CurrentProbe(ElementProbe):
    letter = "I"

    def measure(self, solver: CircuitSolver) -> complex:
        return solver.current(self.element)


class PowerProbe(ElementProbe):
    letter = "P"

    def measure(self, solver: CircuitSolver) -> complex:
        return solver.power(self.element)


_PROBE_RE = re.compile(r"([VPI])(re|im|mag|ph)?\(\s*([^\s,()]*)(\s*,\s*([^\s,()]*))?\s*\)", re.IGNORECASE)


def parse_probes(text: str, circuit: Circuit) -> List[Probe]:
    """
    Build probes from every ``X[method](args)`` expression found in *text*.

    Raises:
        ProbeError: On references to unknown elements or nodes, or on
            argument counts that do not fit the probe type.
    """
    nodes = set(circuit.nodes())
    probes: List[Probe] = []
    for match in _PROBE_RE.finditer(text):
        letter, suffix, first, _, second = match.groups()
        letter = letter.upper()
        method = ProbeMethod((suffix or "").lower())

        if letter == "V":
            if second is None and first in circuit:
                probes.append(VoltageProbe.across(first, method))
                continue
            for label in (first, second):
                if label is not None and label not in nodes:
                    raise ProbeError(f"Probe '{match.group(0)}' refers to unknown node '{label}'")
            probes.append(VoltageProbe(first, second, method=method))
            continue

        if second is not None:
            raise ProbeError(f"Probe '{match.group(0)}' takes a single element name")
        if first not in circuit:
            raise ProbeError(f"Probe '{match.group(0)}' refers to unknown element '{first}'")
        if letter == "I":
            probes.append(CurrentProbe(first, method))
        else:
            probes.append(PowerProbe(first, method))

    logger.debug("Parsed probes: %s", [p.name for p in probes])
    return probes


def default_probes(circuit: Circuit) -> List[Probe]:
    """Voltage probe on every non-ground node and current probe on every source."""
    probes: List[Probe] = [VoltageProbe(n) for n in circuit.nodes() if n != circuit.ground]
    probes.extend(CurrentProbe(c.id) for c in circuit.components_of_kind(ElementKind.VOLTAGE_SOURCE))
    return probes
