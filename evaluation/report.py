# evaluation/report.py
"""
Plain-text reports for operating point and AC sweep results.
"""
from typing import Dict, List

from core.components.base import ElementKind
from core.exceptions import MNASimError
from core.solver import CircuitSolver
from evaluation.sweep import SweepResult


def format_operating_point(values: Dict[str, float]) -> str:
    """One ``name = value`` line per probe."""
    return "\n".join(f"{name} = {value:g}" for name, value in values.items())


def format_dc_report(solver: CircuitSolver) -> str:
    """
    Full DC report of a solved circuit: node potentials, then voltage,
    current and power of every element, then the total power dissipated in
    passive elements.
    """
    lines: List[str] = ["Node potentials:"]
    for label in solver.get_node_map():
        lines.append(f"\tV({label}) = {solver.node_voltage(label).real:g} V")
    lines.append("")

    circuit = solver.circuit
    for comp in circuit:
        lines.append(f"{comp.id} - [{', '.join(comp.nodes)}]:")
        try:
            lines.append(f"\tV({comp.id}) = {solver.voltage(comp).real:g} V")
            lines.append(f"\tI({comp.id}) = {solver.current(comp).real:g} A")
            lines.append(f"\tP({comp.id}) = {solver.power(comp).real:g} W")
        except MNASimError as e:
            lines.append(f"\t(unavailable: {e})")
        lines.append("")

    total = solver.total_power(ElementKind.ADMITTANCE).real
    lines.append(f"Total power: {total:g} W.")
    return "\n".join(lines)


def format_sweep_table(result: SweepResult) -> str:
    """Tab separated table: step, frequency, one column per probe."""
    header = "\t".join(["step", "frequency", *result.probe_names])
    rows = [header]
    for point in result.points:
        if point.error is not None:
            rows.append(f"{point.step}\t{point.frequency:g}\t# {point.error}")
            continue
        cells = [str(point.step), f"{point.frequency:g}"]
        cells.extend(f"{point.values[name]:g}" for name in result.probe_names)
        rows.append("\t".join(cells))
    return "\n".join(rows)
