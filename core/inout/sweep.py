# core/inout/sweep.py
"""
AC sweep description and YAML sweep configuration loading for mnasim.
"""
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import yaml
from cerberus import Validator

from core.exceptions import NetlistError
from core.parameters.values import parse_value

SCALE_BASES = {"lin": 0.0, "dec": 10.0, "oct": 2.0, "log": 10.0}
SCALE_ALIASES = {"linear": "lin"}


@dataclass(frozen=True)
class AcAnalysis:
    """
    Small-signal AC frequency sweep.

    Attributes:
        start: Lowest frequency [Hz].
        stop: Highest frequency [Hz].
        points: Total points for 'lin' and 'log', points per decade/octave
            for 'dec' and 'oct'.
        scale: One of 'lin', 'log', 'dec', 'oct'.
    """
    start: float
    stop: float
    points: int
    scale: str = "lin"

    def __post_init__(self):
        scale = SCALE_ALIASES.get(self.scale, self.scale)
        if scale not in SCALE_BASES:
            raise NetlistError(f"Invalid sweep scale '{self.scale}'")
        object.__setattr__(self, "scale", scale)
        if self.start <= 0 or self.stop <= self.start or self.points <= 0:
            raise NetlistError(
                f"Invalid AC sweep parameters: start={self.start}, stop={self.stop}, points={self.points}"
            )

    @property
    def exponent(self) -> float:
        """Frequency ratio one 'points' group spans; 0 for a linear sweep."""
        return SCALE_BASES[self.scale]

    def frequencies(self) -> np.ndarray:
        """Sweep frequencies in Hz, endpoints included."""
        if self.scale == "lin":
            return np.linspace(self.start, self.stop, self.points)
        if self.scale == "log":
            return np.geomspace(self.start, self.stop, self.points)

        base = self.exponent
        intervals = math.log(self.stop / self.start) / math.log(base)
        # round-off guard: 3 decades must give 3 * points, not 3 * points - 1
        steps = math.floor(self.points * intervals + 1e-9)
        steps = max(steps, 2)
        return np.logspace(math.log(self.start, base), math.log(self.stop, base), steps, base=base)

    def omegas(self) -> np.ndarray:
        return 2 * np.pi * self.frequencies()


# Cerberus schema for sweep configuration
SWEEP_SCHEMA: Dict[str, Any] = {
    'sweep': {
        'type': 'list',
        'required': True,
        'minlength': 1,
        'maxlength': 1,
        'schema': {
            'type': 'dict',
            'schema': {
                'param': {'type': 'string', 'required': True, 'allowed': ['f']},
                'range': {
                    'type': 'list',
                    'required': True,
                    'minlength': 2,
                    'maxlength': 2,
                    'schema': {'type': ['number', 'string']},
                },
                'points': {'type': 'integer', 'required': True, 'min': 1, 'coerce': int},
                'scale': {
                    'type': 'string',
                    'required': False,
                    'allowed': ['linear', 'lin', 'log', 'dec', 'oct'],
                    'default': 'linear',
                },
            },
        },
    },
    'probes': {'type': 'list', 'required': False, 'schema': {'type': 'string'}},
    'stop_on_error': {'type': 'boolean', 'required': False, 'default': False},
}


@dataclass
class SweepConfig:
    analysis: AcAnalysis
    probes: List[str] = field(default_factory=list)
    stop_on_error: bool = False


def validate_schema(data: Any, schema: Dict[str, Any], what: str) -> Dict[str, Any]:
    """
    Validate parsed YAML against a Cerberus schema and return the
    normalised document.

    Raises:
        NetlistError: If validation fails.
    """
    if not isinstance(data, dict):
        raise NetlistError(f"{what} must be a YAML mapping, got {type(data).__name__}")
    validator = Validator(schema, allow_unknown=False)
    if not validator.validate(data):
        raise NetlistError(f"{what} schema validation errors: {validator.errors}")
    return validator.document


def parse_sweep_config(data: Any) -> SweepConfig:
    doc = validate_schema(data, SWEEP_SCHEMA, "Sweep configuration")
    entry = doc['sweep'][0]
    try:
        start, stop = (parse_value(v) for v in entry['range'])
    except Exception as e:
        raise NetlistError(f"Invalid sweep range {entry['range']}: {e}") from e
    analysis = AcAnalysis(start=start, stop=stop, points=entry['points'], scale=entry['scale'])
    return SweepConfig(
        analysis=analysis,
        probes=list(doc.get('probes') or []),
        stop_on_error=doc['stop_on_error'],
    )


def load_sweep_config(path: Path) -> SweepConfig:
    """
    Load a YAML sweep configuration file, validate its schema, and return a SweepConfig.

    Raises:
        NetlistError: If file read fails or schema validation fails.
    """
    try:
        raw = yaml.safe_load(Path(path).read_text())
    except (OSError, yaml.YAMLError) as e:
        raise NetlistError(f"Failed to read sweep YAML '{path}': {e}")
    return parse_sweep_config(raw)
