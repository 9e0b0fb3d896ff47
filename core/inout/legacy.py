# core/inout/legacy.py
"""
Reader for the plain DC netlist format:

    R 2 3 10
    E 1 2 6
    I 4 1 1

One element per line: a type letter (R, E or I), two node numbers and a
value. Elements are named R1, R2, ..., E1, ... in order of appearance. The
second node is the positive terminal, and node "1" is the reference node.
"""
import logging
from collections import Counter
from pathlib import Path
from typing import IO, Union

from core.components.plugin_loader import ComponentFactory
from core.exceptions import MNASimError, NetlistError
from core.parameters.values import parse_value
from core.topology.circuit import Circuit

logger = logging.getLogger(__name__)

LEGACY_GROUND = "1"
LEGACY_TYPES = {
    "R": ("resistor", "R"),
    "E": ("voltage_source", "dc"),
    "I": ("current_source", "dc"),
}


def read_legacy_netlist(source: Union[str, IO[str]], ground: str = LEGACY_GROUND) -> Circuit:
    """
    Parse a plain DC netlist from a string or an open text stream.

    Raises:
        NetlistError: On unknown element letters or lines that are not
            ``X node node value``.
    """
    text = source if isinstance(source, str) else source.read()
    circuit = Circuit(ground=ground)
    counts: Counter = Counter()

    for lineno, line in enumerate(text.splitlines(), start=1):
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 4:
            raise NetlistError(f"Invalid netlist (line {lineno})")
        ref, first, second, value = tokens[:4]
        if ref not in LEGACY_TYPES:
            raise NetlistError(f"Invalid element type '{ref}' (line {lineno})")
        if not (first.isdigit() and second.isdigit()):
            raise NetlistError(f"Invalid netlist (line {lineno})")

        type_name, param = LEGACY_TYPES[ref]
        counts[ref] += 1
        name = f"{ref}{counts[ref]}"
        try:
            comp = ComponentFactory.create(type_name, name, (second, first), {param: parse_value(value)})
        except MNASimError as e:
            raise NetlistError(f"Invalid netlist (line {lineno}): {e}") from e
        circuit.add_component(comp)

    logger.info("Read legacy netlist: %d elements", len(circuit))
    return circuit


def load_legacy_netlist(path: Path, ground: str = LEGACY_GROUND) -> Circuit:
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise NetlistError(f"Failed to read netlist '{path}': {e}")
    return read_legacy_netlist(text, ground=ground)
