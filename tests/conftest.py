import pytest
from core.topology.circuit import Circuit
from core.components.resistor import Resistor
from core.components.capacitor import Capacitor
from core.components.inductor import Inductor
from core.components.sources import VoltageSourceComponent, CurrentSourceComponent
from core.components.opamp import OpAmpComponent
from core.inout.legacy import read_legacy_netlist

FIVE_NODE_NETLIST = """\
R 4 2 2
I 5 4 2
R 5 3 4
E 3 2 -5
E 3 1 1
R 1 2 1
R 3 1 15
"""


@pytest.fixture
def divider():
    # 5V source between nodes 1 and 2, two 1k resistors 2-3 and 3-1, ground = node 1
    circuit = Circuit(ground="1", title="divider")
    circuit.add_component(VoltageSourceComponent("V1", ["2", "1"], dc=5.0))
    circuit.add_component(Resistor("R1", ["2", "3"], R=1000.0))
    circuit.add_component(Resistor("R2", ["3", "1"], R=1000.0))
    return circuit


@pytest.fixture
def five_node_text():
    return FIVE_NODE_NETLIST


@pytest.fixture
def five_node(five_node_text):
    return read_legacy_netlist(five_node_text)


@pytest.fixture
def inverting_amplifier():
    # Gain -R2/R1 = -2
    circuit = Circuit(ground="0", title="inverting amplifier")
    circuit.add_component(VoltageSourceComponent("Vin", ["in", "0"], dc=1.0, ac=1.0))
    circuit.add_component(Resistor("R1", ["in", "m"], R=1000.0))
    circuit.add_component(Resistor("R2", ["m", "out"], R=2000.0))
    circuit.add_component(OpAmpComponent("OPA1", ["0", "m", "out"]))
    return circuit


@pytest.fixture
def rc_lowpass():
    # Corner frequency 1/(2*pi*R*C) ~ 159.15 Hz
    circuit = Circuit(ground="0", title="rc low-pass")
    circuit.add_component(VoltageSourceComponent("V1", ["in", "0"], dc=1.0, ac=1.0))
    circuit.add_component(Resistor("R1", ["in", "out"], R=1000.0))
    circuit.add_component(Capacitor("C1", ["out", "0"], C=1e-6))
    return circuit


@pytest.fixture
def rlc_tank():
    # Parallel LC tank fed through R1, resonant at 1/(2*pi*sqrt(L*C)) ~ 5033 Hz
    circuit = Circuit(ground="0", title="rlc tank")
    circuit.add_component(VoltageSourceComponent("V1", ["1", "0"], dc=2.0, ac=1.0))
    circuit.add_component(Resistor("R1", ["1", "2"], R=10.0))
    circuit.add_component(Inductor("L1", ["2", "0"], L=1e-3))
    circuit.add_component(Capacitor("C1", ["2", "0"], C=1e-6))
    return circuit


@pytest.fixture
def current_driven():
    # 2 mA pushed into node 1, loaded by 1k to ground
    circuit = Circuit(ground="0")
    circuit.add_component(CurrentSourceComponent("I1", ["1", "0"], dc=2e-3))
    circuit.add_component(Resistor("R1", ["1", "0"], R=1000.0))
    return circuit
