# core/components/opamp.py
"""
Ideal operational amplifier plugin for mnasim.

Modelled as a virtual short between the inputs plus an unconstrained
voltage source from ground to the output. Negative feedback is assumed and
never verified: swapping the inputs gives the same operating point.
"""
from typing import Any, Sequence

from core.components.base import Component, ElementKind
from core.components.plugin_loader import ComponentFactory


class OpAmpComponent(Component):
    """
    Ports:
      'in+', 'in-', 'out'
    """
    type_name = "opamp"
    prefix = "OPA"
    kind = ElementKind.OPAMP
    port_names = ("in+", "in-", "out")

    def __init__(self, comp_id: str, nodes: Sequence[Any]):
        super().__init__(comp_id, nodes)

    @property
    def pos_input_node(self) -> str:
        return self.nodes[0]

    @property
    def neg_input_node(self) -> str:
        return self.nodes[1]

    @property
    def output_node(self) -> str:
        return self.nodes[2]


# Register plugin
ComponentFactory.register(OpAmpComponent)
