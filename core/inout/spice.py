# core/inout/spice.py
"""
Reader for SPICE-like netlists.

    Voltage divider              <- title line
    V1 2 0 10 AC 1               <- name n+ n- dc [AC ac]
    R1 2 3 1k
    R2 3 0 1k
    OPA1 3 4 5                   <- name in+ in- out
    .ac dec 10 1 1Meg
    .print V(3) Imag(R1)
    .end

Element lines are read first; dot-commands are applied afterwards so probes
may refer to any element of the deck. Lines starting with '*' are comments.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, List, Optional, Tuple, Union

from core.components.base import ElementKind
from core.components.plugin_loader import ComponentFactory
from core.exceptions import MNASimError, NetlistError
from core.inout.sweep import AcAnalysis
from core.parameters.values import parse_value
from core.topology.circuit import Circuit
from evaluation.probes import Probe, parse_probes

logger = logging.getLogger(__name__)

SPICE_GROUND = "0"
AC_SCALES = ("lin", "dec", "oct")


@dataclass
class SimulationDeck:
    """Everything a netlist file asks for: the circuit, the analysis and the probes."""
    title: str
    circuit: Circuit
    ac: Optional[AcAnalysis] = None
    probes: List[Probe] = field(default_factory=list)


def _parse_source_values(tokens: List[str], lineno: int) -> Tuple[float, float]:
    """``value``, ``DC value``, ``AC value`` in any combination; DC first when bare."""
    if not tokens:
        raise NetlistError(f"Could not parse component in line {lineno} - reason: Missing arguments")
    dc, ac = 0.0, 0.0
    i = 0
    if tokens[0].lower() not in ("dc", "ac"):
        dc = parse_value(tokens[0])
        i = 1
    while i < len(tokens):
        keyword = tokens[i].lower()
        if keyword not in ("dc", "ac") or i + 1 >= len(tokens):
            raise NetlistError(
                f"Could not parse component in line {lineno} - reason: Unexpected token '{tokens[i]}'"
            )
        value = parse_value(tokens[i + 1])
        if keyword == "dc":
            dc = value
        else:
            ac = value
        i += 2
    return dc, ac


def _parse_element(tokens: List[str], lineno: int):
    name = tokens[0]
    comp_cls = ComponentFactory.class_for_name(name)
    if comp_cls is None:
        raise NetlistError(f"Could not parse component in line {lineno} - reason: Invalid component type")

    kind = comp_cls.kind
    try:
        if kind is ElementKind.OPAMP:
            if len(tokens) < 4:
                raise NetlistError(f"Could not parse component in line {lineno} - reason: Missing nodes!")
            return comp_cls(name, tokens[1:4])

        if len(tokens) < 4:
            raise NetlistError(f"Could not parse component in line {lineno} - reason: Missing arguments")
        nodes = tokens[1:3]
        if kind is ElementKind.ADMITTANCE:
            if len(tokens) > 4:
                raise NetlistError(
                    f"Could not parse component in line {lineno} - reason: Unexpected token '{tokens[4]}'"
                )
            return comp_cls(name, nodes, **{comp_cls.value_param: parse_value(tokens[3])})
        dc, ac = _parse_source_values(tokens[3:], lineno)
        return comp_cls(name, nodes, dc=dc, ac=ac)
    except NetlistError:
        raise
    except MNASimError as e:
        raise NetlistError(f"Could not parse component in line {lineno} - reason: {e}") from e


def _parse_ac(tokens: List[str], lineno: int) -> AcAnalysis:
    if len(tokens) != 5:
        raise NetlistError(f"Invalid use of .ac command in line {lineno}!")
    scale = tokens[1].lower()
    if scale not in AC_SCALES:
        raise NetlistError(f"Unknown .ac sweep type '{tokens[1]}' in line {lineno}")
    try:
        points = int(tokens[2])
        start = parse_value(tokens[3])
        stop = parse_value(tokens[4])
    except (ValueError, MNASimError) as e:
        raise NetlistError(f"Invalid .ac arguments in line {lineno}: {e}") from e
    try:
        return AcAnalysis(start=start, stop=stop, points=points, scale=scale)
    except NetlistError as e:
        raise NetlistError(f"{e} (line {lineno})") from e


def read_spice_netlist(source: Union[str, IO[str]], ground: str = SPICE_GROUND) -> SimulationDeck:
    """
    Parse a SPICE-like deck from a string or an open text stream.

    Raises:
        NetlistError: On malformed lines, duplicate element names or bad
            analysis commands.
        ProbeError: On '.print' probes that refer to unknown nodes or elements.
    """
    text = source if isinstance(source, str) else source.read()
    lines = text.splitlines()
    if not lines:
        raise NetlistError("Empty netlist")

    title = lines[0].strip()
    circuit = Circuit(ground=ground, title=title)
    commands: List[Tuple[int, List[str]]] = []

    for lineno, line in enumerate(lines[1:], start=2):
        tokens = line.split()
        if not tokens or tokens[0].startswith("*"):
            continue
        if tokens[0].startswith("."):
            if tokens[0].lower() == ".end":
                break
            commands.append((lineno, tokens))
            continue
        if tokens[0] in circuit:
            raise NetlistError(f"Duplicate components found! (line {lineno})")
        circuit.add_component(_parse_element(tokens, lineno))

    deck = SimulationDeck(title=title, circuit=circuit)
    for lineno, tokens in commands:
        command = tokens[0].lower()
        if command == ".ac":
            deck.ac = _parse_ac(tokens, lineno)
        elif command == ".print":
            deck.probes.extend(parse_probes(" ".join(tokens[1:]), circuit))
        elif command == ".op":
            deck.ac = None
        else:
            logger.warning("Ignoring unknown command '%s' in line %d", tokens[0], lineno)

    logger.info("Read netlist '%s': %d elements, %d probes", title, len(circuit), len(deck.probes))
    return deck


def load_spice_netlist(path: Path, ground: str = SPICE_GROUND) -> SimulationDeck:
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise NetlistError(f"Failed to read netlist '{path}': {e}")
    return read_spice_netlist(text, ground=ground)
