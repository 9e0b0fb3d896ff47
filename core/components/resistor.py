# core/components/resistor.py
"""
Resistor component plugin for mnasim.
Two-terminal resistor with conductance G = 1/R.
"""
import math
from typing import Any, Dict, Sequence

from core.components.base import PassiveComponent
from core.exceptions import ParameterError
from core.components.plugin_loader import ComponentFactory


class Resistor(PassiveComponent):
    """
    Ideal resistor.

    Parameters:
      R: resistance in Ohms (float, non-zero)
    """
    type_name = "resistor"
    prefix = "R"
    value_param = "R"

    def __init__(self, comp_id: str, nodes: Sequence[Any], R: float):
        super().__init__(comp_id, nodes)
        R = float(R)
        if R == 0 or not math.isfinite(R):
            raise ParameterError(f"Resistor '{comp_id}' has invalid resistance {R!r}.")
        self.R = R

    def admittance(self, omega: float) -> complex:
        return complex(1.0 / self.R)

    def params(self) -> Dict[str, Any]:
        return {"R": self.R}


# Register plugin
ComponentFactory.register(Resistor)
