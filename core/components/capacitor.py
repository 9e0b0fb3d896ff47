# core/components/capacitor.py
"""
Capacitor component plugin for mnasim.
Two-terminal capacitor with admittance Y = j*omega*C (open circuit at DC).
"""
import math
from typing import Any, Dict, Sequence

from core.components.base import PassiveComponent
from core.exceptions import ParameterError
from core.components.plugin_loader import ComponentFactory


class Capacitor(PassiveComponent):
    """
    Ideal capacitor.

    Parameters:
      C: capacitance in Farads (float)
    """
    type_name = "capacitor"
    prefix = "C"
    value_param = "C"

    def __init__(self, comp_id: str, nodes: Sequence[Any], C: float):
        super().__init__(comp_id, nodes)
        C = float(C)
        if not math.isfinite(C):
            raise ParameterError(f"Capacitor '{comp_id}' has invalid capacitance {C!r}.")
        self.C = C

    def admittance(self, omega: float) -> complex:
        return 1j * omega * self.C

    def params(self) -> Dict[str, Any]:
        return {"C": self.C}


# Register plugin
ComponentFactory.register(Capacitor)
