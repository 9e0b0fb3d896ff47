import logging
import pytest
from core.components.resistor import Resistor
from core.components.sources import VoltageSourceComponent
from core.components.opamp import OpAmpComponent
from core.exceptions import TopologyError
from core.topology.circuit import Circuit
from core.topology.netlist_graph import NetlistGraph
from core.validation import validate_circuit_structure


def test_valid_circuits_pass(divider, five_node, inverting_amplifier):
    for circuit in (divider, five_node, inverting_amplifier):
        validate_circuit_structure(circuit)


def test_validate_logs_success(divider, caplog):
    with caplog.at_level(logging.INFO):
        divider.validate(verbose=True)
    assert "validation passed" in caplog.text


def test_empty_circuit():
    with pytest.raises(TopologyError, match="no elements"):
        validate_circuit_structure(Circuit())


def test_missing_ground():
    circuit = Circuit(ground="0")
    circuit.add_component(VoltageSourceComponent("V1", ["1", "2"], dc=1.0))
    circuit.add_component(Resistor("R1", ["1", "2"], R=1.0))
    with pytest.raises(TopologyError, match="ground node '0'"):
        validate_circuit_structure(circuit)


def test_floating_island(divider):
    divider.add_component(Resistor("R9", ["8", "9"], R=1.0))
    with pytest.raises(TopologyError, match="without a path to ground: 8, 9"):
        validate_circuit_structure(divider)


def test_shorted_voltage_source(divider):
    divider.add_component(VoltageSourceComponent("V2", ["3", "3"], dc=1.0))
    with pytest.raises(TopologyError, match="'V2' is shorted"):
        validate_circuit_structure(divider)


def test_opamp_inputs_tied(divider):
    divider.add_component(OpAmpComponent("OPA1", ["3", "3", "2"]))
    with pytest.raises(TopologyError, match="both inputs"):
        validate_circuit_structure(divider)


def test_self_loop_only_warns(divider, caplog):
    divider.add_component(Resistor("R5", ["3", "3"], R=1.0))
    with caplog.at_level(logging.WARNING):
        validate_circuit_structure(divider)
    assert "R5" in caplog.text


def test_netlist_graph_index(divider):
    graph = NetlistGraph.from_circuit(divider)
    assert graph.node_index() == {"1": -1, "2": 0, "3": 1}
    assert graph.dimension() == 2
    nx_graph = graph.to_networkx(divider)
    assert nx_graph.number_of_edges() == 3
    graph.remove_connection("R2", "n", "1")
    graph.remove_connection("V1", "n", "1")
    assert "1" not in graph.nodes()
    with pytest.raises(KeyError):
        graph.remove_connection("R2", "n", "1")
