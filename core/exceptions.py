# core/exceptions.py

class MNASimError(Exception):
    """Base exception for mnasim errors."""
    pass

class DimensionMismatchError(MNASimError, ValueError):
    """Raised when matrix shapes are incompatible for an operation."""
    pass

class OutOfRangeError(MNASimError, IndexError):
    """Raised on access outside a matrix, solution vector or node map."""
    pass

class SingularMatrixError(MNASimError):
    """Raised when Gaussian elimination finds no usable pivot."""
    pass

class OperatingPointError(SingularMatrixError):
    """Raised when a circuit has no unique operating point at a given frequency."""

    def __init__(self, omega: float, reason: str):
        self.omega = omega
        self.reason = reason
        super().__init__(
            f"Could not compute operating point at omega={omega:g} rad/s - reason: {reason}"
        )

class NotSolvedError(MNASimError):
    """Raised when a measurement is requested before the circuit was solved."""
    pass

class TopologyError(MNASimError):
    """Raised when there is an issue with circuit topology."""
    pass

class ParameterError(MNASimError):
    """Raised when parameter resolution or evaluation fails."""
    pass

class NetlistError(MNASimError):
    """Raised when a netlist or sweep file cannot be read or validated."""
    pass

class ProbeError(MNASimError):
    """Raised when a probe cannot be built or evaluated."""
    pass

class SweepError(MNASimError):
    """Raised when a sweep is aborted at a failing step."""

    def __init__(self, step: int, frequency: float, reason: str):
        self.step = step
        self.frequency = frequency
        super().__init__(
            f"Could not perform step {step} (f={frequency:.6g} Hz) of AC analysis - reason: {reason}"
        )
