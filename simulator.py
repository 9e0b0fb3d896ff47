#!/usr/bin/env python
# simulator.py
"""
Simulator entry point for mnasim.
Loads a netlist, validates the circuit, and runs a DC operating point or an
AC sweep with the configured linear solver backend.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional, Sequence

from core.exceptions import MNASimError
from core.inout.legacy import load_legacy_netlist
from core.inout.netlist import load_netlist
from core.inout.spice import SimulationDeck, load_spice_netlist
from core.inout.sweep import AcAnalysis, load_sweep_config
from core.solver import CircuitSolver
from evaluation.probes import default_probes, parse_probes
from evaluation.report import format_dc_report, format_operating_point, format_sweep_table
from evaluation.sweep import SweepResult, run_operating_point, run_sweep
from utils.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

FORMATS = ("spice", "legacy", "yaml")
_SUFFIX_FORMATS = {".yml": "yaml", ".yaml": "yaml"}


def detect_format(path: Path) -> str:
    """'yaml' for .yml/.yaml files, 'spice' for anything else."""
    return _SUFFIX_FORMATS.get(Path(path).suffix.lower(), "spice")


class Simulator:
    def __init__(self, backend: str = "gauss", tol: float = 0.0, stop_on_error: bool = False):
        # Numeric configuration
        self.backend = backend
        self.tol = tol
        self.stop_on_error = stop_on_error

    def load(self, path: Path, fmt: Optional[str] = None) -> SimulationDeck:
        """
        Load a netlist file in the given (or detected) format.
        Raises NetlistError on read or parse errors.
        """
        fmt = fmt or detect_format(path)
        logger.debug("Loading '%s' as %s netlist", path, fmt)
        if fmt == "legacy":
            circuit = load_legacy_netlist(path)
            return SimulationDeck(title=Path(path).stem, circuit=circuit)
        if fmt == "yaml":
            return load_netlist(path)
        if fmt == "spice":
            return load_spice_netlist(path)
        raise ValueError(f"Unknown netlist format '{fmt}'")

    def solver_for(self, deck: SimulationDeck) -> CircuitSolver:
        deck.circuit.validate(verbose=True)
        return CircuitSolver(deck.circuit, tol=self.tol, backend=self.backend)

    def operating_point(self, deck: SimulationDeck) -> Dict[str, float]:
        solver = self.solver_for(deck)
        return run_operating_point(solver, deck.probes or default_probes(deck.circuit))

    def sweep(self, deck: SimulationDeck, analysis: Optional[AcAnalysis] = None) -> SweepResult:
        """Run an AC sweep with *analysis*, or the one the deck asks for."""
        analysis = analysis or deck.ac
        if analysis is None:
            raise MNASimError("No AC analysis configured")
        solver = self.solver_for(deck)
        probes = deck.probes or default_probes(deck.circuit)
        return run_sweep(solver, analysis, probes, stop_on_error=self.stop_on_error)


def _run(args) -> int:
    sim = Simulator(backend=args.backend, tol=args.tol, stop_on_error=args.stop_on_error)
    try:
        deck = sim.load(args.netlist, args.format)
        if args.sweep:
            cfg = load_sweep_config(args.sweep)
            deck.ac = cfg.analysis
            if cfg.probes:
                deck.probes = parse_probes(" ".join(cfg.probes), deck.circuit)
            sim.stop_on_error = sim.stop_on_error or cfg.stop_on_error
    except MNASimError as e:
        logger.error("Netlist load failed: %s", e)
        return 1

    try:
        if deck.ac is None:
            if deck.probes:
                print(format_operating_point(sim.operating_point(deck)))
            else:
                solver = sim.solver_for(deck)
                solver.solve(0.0)
                print(format_dc_report(solver))
            return 0

        result = sim.sweep(deck)
    except MNASimError as e:
        logger.error("Simulation failed: %s", e)
        return 1

    print(format_sweep_table(result))
    if args.summary:
        print(f"Sweep completed: {result.stats['points']} points in {result.stats['elapsed']:.3f} s")
    if args.output:
        result.to_dataframe().to_csv(args.output, index=False)
        logger.info("Sweep results written to %s", args.output)
    if result.errors:
        logger.warning("Some errors occurred during the sweep:")
        for err in result.errors:
            logger.warning(err)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="mnasim linear circuit simulator")
    parser.add_argument("--netlist", type=Path, required=True, help="Path to the netlist file")
    parser.add_argument("--format", choices=FORMATS, default=None,
                        help="Netlist format (default: from file suffix)")
    parser.add_argument("--sweep", type=Path, help="Optional YAML sweep configuration file")
    parser.add_argument("--output", type=Path, help="Optional CSV output file for sweep results")
    parser.add_argument("--backend", choices=("gauss", "lu"), default="gauss",
                        help="Linear solver backend")
    parser.add_argument("--tol", type=float, default=0.0,
                        help="Relative pivot tolerance (0 rejects only exact-zero pivots)")
    parser.add_argument("--stop-on-error", action="store_true", help="Abort the sweep at the first failing step")
    parser.add_argument("--summary", action="store_true", help="Print sweep summary.")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(level=logging.DEBUG)
        logger.debug("Verbose logging enabled.")
    else:
        setup_logging(level=logging.INFO)

    return _run(args)


if __name__ == "__main__":
    sys.exit(main())
