# core/inout/netlist.py
"""
Load and validate YAML netlists into a SimulationDeck.

    version: 1.0
    title: RC low-pass
    ground: gnd
    parameters:
      R0: 1k
      tau: 1m
      C0: tau / R0
    components:
      - {id: V1, type: voltage_source, params: {dc: 0, ac: 1}}
      - {id: R1, type: resistor, params: {R: R0}}
      - {id: C1, type: capacitor, params: {C: C0}}
    connections:
      - {port: V1.p, net: in}
      - {port: V1.n, net: gnd}
      ...
    probes: ["Vmag(out)", "Vph(out)"]
"""
from pathlib import Path
from typing import Any, Dict, List

import yaml

from core.components.plugin_loader import ComponentFactory
from core.exceptions import MNASimError, NetlistError
from core.inout.spice import SimulationDeck
from core.inout.sweep import validate_schema
from core.parameters.resolver import evaluate, resolve as resolve_parameters
from core.topology.circuit import Circuit
from evaluation.probes import parse_probes

# Schema for netlist validation
NETLIST_SCHEMA: Dict[str, Any] = {
    "version": {"type": "float", "required": True, "allowed": [1.0], "coerce": float},
    "title": {"type": "string", "required": False, "default": ""},
    "ground": {"type": "string", "required": False, "default": "gnd", "coerce": str},

    "parameters": {
        "type": "dict", "required": False,
        "valuesrules": {"type": ["string", "number"]},
    },

    "components": {
        "type": "list", "required": True, "minlength": 1,
        "schema": {
            "type": "dict", "schema": {
                "id":     {"type": "string", "required": True},
                "type":   {"type": "string", "required": True},
                "params": {"type": "dict",   "required": False,
                           "valuesrules": {"type": ["string", "number"]}},
            },
        },
    },

    "connections": {
        "type": "list", "required": True, "minlength": 1,
        "schema": {
            "type": "dict", "schema": {
                "port": {"type": "string", "required": True, "regex": r"^[A-Za-z0-9_]+\.[A-Za-z0-9_+\-]+$"},
                "net":  {"type": ["string", "integer"], "required": True},
            },
        },
    },

    "probes": {"type": "list", "required": False, "schema": {"type": "string"}},
}


def _ensure_unique(seq: List[str], kind: str) -> None:
    """Raise *once* if duplicates found in *seq*."""
    dup = {x for x in seq if seq.count(x) > 1}
    if dup:
        raise NetlistError(f"Duplicate {kind}: {', '.join(sorted(dup))}")


def parse_netlist(raw: Any) -> SimulationDeck:
    """Validate and instantiate an already parsed YAML document."""
    doc = validate_schema(raw, NETLIST_SCHEMA, "Netlist")
    _ensure_unique([c['id'] for c in doc['components']], 'component IDs')

    # ---------- globals ------------------------------------------------
    try:
        params = resolve_parameters(doc.get('parameters') or {})
    except MNASimError as exc:
        raise NetlistError(f"Parameter resolution failed: {exc}") from exc

    # ---------- connections -------------------------------------------
    nets: Dict[str, Dict[str, str]] = {c['id']: {} for c in doc['components']}
    for conn in doc['connections']:
        comp_id, port_name = conn['port'].split('.', 1)
        if comp_id not in nets:
            raise NetlistError(f"Connection refers to unknown component '{comp_id}'.")
        if port_name in nets[comp_id]:
            raise NetlistError(f"Port '{conn['port']}' is connected twice.")
        nets[comp_id][port_name] = str(conn['net'])

    # ---------- components --------------------------------------------
    circuit = Circuit(ground=doc['ground'], title=doc['title'])
    for cdoc in doc['components']:
        comp_id = cdoc['id']
        try:
            comp_cls = ComponentFactory.get_class(cdoc['type'])
            values = {k: evaluate(v, params) for k, v in (cdoc.get('params') or {}).items()}
        except MNASimError as exc:
            raise NetlistError(f"Cannot build component '{comp_id}': {exc}") from exc

        ports = comp_cls.port_names
        connected = nets[comp_id]
        unknown = set(connected) - set(ports)
        if unknown:
            raise NetlistError(f"Component '{comp_id}' has no port(s) {sorted(unknown)}.")
        floating = [p for p in ports if p not in connected]
        if floating:
            raise NetlistError(f"Floating port(s) on component '{comp_id}': {floating}")

        try:
            inst = ComponentFactory.create(cdoc['type'], comp_id, [connected[p] for p in ports], values)
        except MNASimError as exc:
            raise NetlistError(f"Cannot instantiate component '{comp_id}': {exc}") from exc
        circuit.add_component(inst)

    probes = parse_probes(" ".join(doc.get('probes') or []), circuit)
    return SimulationDeck(title=doc['title'], circuit=circuit, probes=probes)


def load_netlist(path: Path) -> SimulationDeck:
    """Read→validate→instantiate a YAML netlist."""
    try:
        raw = yaml.safe_load(Path(path).read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise NetlistError(f"Failed to read YAML '{path}': {exc}")
    return parse_netlist(raw)
