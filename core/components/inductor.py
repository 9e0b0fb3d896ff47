# core/components/inductor.py
"""
Inductor component plugin for mnasim.
Two-terminal inductor with admittance Y = 1/(j*omega*L).

At omega == 0 the ideal inductor is a short (infinite admittance). It is
approximated by a tiny series resistance instead so the MNA matrix stays
solvable; this is a modelling approximation, not a limit.
"""
import math
from typing import Any, Dict, Sequence

from core.components.base import PassiveComponent
from core.exceptions import ParameterError
from core.components.plugin_loader import ComponentFactory

# Stand-in resistance (Ohms) of an inductor in DC analysis
DC_STANDIN_RESISTANCE = 1e-9


class Inductor(PassiveComponent):
    """
    Nearly ideal inductor.

    Parameters:
      L: inductance in Henries (float, non-zero)
      dc_resistance: resistance used when omega == 0
    """
    type_name = "inductor"
    prefix = "L"
    value_param = "L"

    def __init__(self, comp_id: str, nodes: Sequence[Any], L: float,
                 dc_resistance: float = DC_STANDIN_RESISTANCE):
        super().__init__(comp_id, nodes)
        L = float(L)
        if L == 0 or not math.isfinite(L):
            raise ParameterError(f"Inductor '{comp_id}' has invalid inductance {L!r}.")
        if dc_resistance <= 0:
            raise ParameterError(f"Inductor '{comp_id}' needs a positive DC stand-in resistance.")
        self.L = L
        self.dc_resistance = float(dc_resistance)

    def admittance(self, omega: float) -> complex:
        if omega == 0:
            return complex(1.0 / self.dc_resistance)
        return 1.0 / (1j * omega * self.L)

    def params(self) -> Dict[str, Any]:
        return {"L": self.L}


# Register plugin
ComponentFactory.register(Inductor)
