# core/components/sources.py
"""
Independent source plugins for mnasim.
The first node is the positive terminal, following SPICE.
"""
from core.components.base import ElementKind, SourceComponent
from core.components.plugin_loader import ComponentFactory


class VoltageSourceComponent(SourceComponent):
    """
    Ideal voltage source: V(n_plus) - V(n_minus) = value.
    Its current (n_plus -> n_minus through the source) is an MNA unknown.
    """
    type_name = "voltage_source"
    prefix = "V"
    aliases = ("E",)
    kind = ElementKind.VOLTAGE_SOURCE


class CurrentSourceComponent(SourceComponent):
    """
    Ideal current source pushing *value* amperes out of n_plus into the circuit
    (drawn back in at n_minus).
    """
    type_name = "current_source"
    prefix = "I"
    kind = ElementKind.CURRENT_SOURCE


# Register plugins
ComponentFactory.register(VoltageSourceComponent)
ComponentFactory.register(CurrentSourceComponent)
