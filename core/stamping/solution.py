# core/stamping/solution.py
from __future__ import annotations

import numpy as np

from core.exceptions import OutOfRangeError
from core.numeric.matrix import Matrix


class MnaSolution:
    """
    Read-only view over the MNA unknown vector.

    Layout: ``[v_0 .. v_{n-1}, i_vs_0 .. i_vs_{k-1}, i_opa_0 ..]`` where
    ``n`` is the node count (ground excluded) and ``k`` the number of
    independent voltage sources.
    """
    __slots__ = ("_x", "_node_count", "_voltage_source_count")

    def __init__(self, solution: Matrix, node_count: int, vs_count: int):
        x = solution.to_array().reshape(-1)
        x.setflags(write=False)
        self._x = x
        self._node_count = node_count
        self._voltage_source_count = vs_count

    @property
    def node_count(self) -> int:
        return self._node_count

    @property
    def voltage_source_count(self) -> int:
        return self._voltage_source_count

    @property
    def opamp_count(self) -> int:
        return len(self._x) - self._node_count - self._voltage_source_count

    @property
    def vector(self) -> np.ndarray:
        return self._x.copy()

    def get_matrix(self) -> Matrix:
        return Matrix.from_array(self._x.reshape(-1, 1).copy())

    def voltage(self, pos: int, neg: int = -1) -> complex:
        """Potential of *pos* relative to *neg*; negative indices are ground."""
        if pos >= self._node_count or neg >= self._node_count:
            raise OutOfRangeError(f"Invalid node ID in voltage({pos}, {neg})")
        vpos = 0j if pos < 0 else complex(self._x[pos])
        vneg = 0j if neg < 0 else complex(self._x[neg])
        return vpos - vneg

    def voltage_source_current(self, id: int) -> complex:
        """Current through voltage source *id*, from its positive to negative node."""
        if id < 0 or id >= self._voltage_source_count:
            raise OutOfRangeError(f"Invalid voltage source ID {id}")
        return complex(self._x[self._node_count + id])

    def opamp_current(self, id: int) -> complex:
        """Current drawn into the output of op-amp *id*."""
        if id < 0 or id >= self.opamp_count:
            raise OutOfRangeError(f"Invalid op-amp ID {id}")
        return complex(self._x[self._node_count + self._voltage_source_count + id])

    def __repr__(self) -> str:
        return (f"<MnaSolution nodes={self._node_count} "
                f"voltage_sources={self._voltage_source_count} opamps={self.opamp_count}>")
