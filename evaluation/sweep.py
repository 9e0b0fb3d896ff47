# evaluation/sweep.py
"""
Operating point and AC sweep runners.

Sweeps are sequential: every step re-solves the circuit at a new omega and
reads all probes before moving on.
"""
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from core.exceptions import MNASimError, SweepError
from core.inout.sweep import AcAnalysis
from core.solver import CircuitSolver
from evaluation.probes import Probe

logger = logging.getLogger(__name__)


@dataclass
class SweepPoint:
    step: int
    frequency: float
    values: Dict[str, float] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def omega(self) -> float:
        return 2 * math.pi * self.frequency


class SweepResult:
    def __init__(self, points: List[SweepPoint], errors: List[str], stats=None, probe_names=None):
        self.points = points
        self.errors = errors
        self.stats = stats or {}
        self.probe_names = list(probe_names or [])

    @property
    def ok(self) -> bool:
        return not self.errors

    def column(self, name: str) -> List[float]:
        """Values of one probe across the sweep (NaN for failed steps)."""
        return [p.values.get(name, math.nan) for p in self.points]

    def to_dataframe(self):
        import pandas as pd
        rows = []
        for point in self.points:
            row = {"step": point.step, "frequency": point.frequency}
            row.update({name: point.values.get(name) for name in self.probe_names})
            row["error"] = point.error
            rows.append(row)
        return pd.DataFrame(rows, columns=["step", "frequency", *self.probe_names, "error"])


def run_operating_point(solver: CircuitSolver, probes: Sequence[Probe]) -> Dict[str, float]:
    """
    Solve at DC and read every probe.

    Raises:
        OperatingPointError: If the circuit has no unique DC solution.
        ProbeError: If a probe cannot be evaluated.
    """
    solver.solve(0.0)
    return {probe.name: probe.get_value(solver) for probe in probes}


def run_sweep(solver: CircuitSolver, analysis: AcAnalysis, probes: Sequence[Probe],
              stop_on_error: bool = False) -> SweepResult:
    """
    Run an AC sweep over analysis.frequencies().

    Failing steps are logged and recorded in the result; with
    *stop_on_error* the first failure raises SweepError instead.
    """
    freqs = analysis.frequencies()
    points: List[SweepPoint] = []
    errors: List[str] = []
    start_time = time.time()

    for step, freq in enumerate(freqs):
        point = SweepPoint(step=step, frequency=float(freq))
        try:
            solver.solve(point.omega)
            point.values = {probe.name: probe.get_value(solver) for probe in probes}
        except MNASimError as e:
            if stop_on_error:
                raise SweepError(step, point.frequency, str(e)) from e
            logger.error("Step %d at %.3e Hz failed: %s", step, point.frequency, e)
            point.error = str(e)
            errors.append(f"Step {step}, frequency {point.frequency:.3e} Hz: {e}")
        points.append(point)

    elapsed = time.time() - start_time
    stats = {"points": len(freqs), "failed": len(errors), "elapsed": elapsed}
    logger.info("AC sweep finished: %d points, %d failed, %.3f s", len(freqs), len(errors), elapsed)
    return SweepResult(points, errors, stats, probe_names=[p.name for p in probes])
