# core/numeric/matrix.py
"""
Dense, bounds-checked rectangular matrix used to assemble and solve MNA
systems. Storage is a row-major NumPy array of a fixed dtype.
"""
from __future__ import annotations
from typing import Tuple

import numpy as np

from core.exceptions import DimensionMismatchError, OutOfRangeError


class Matrix:
    """
    Fixed-size 2D container addressed as ``m[row, col]``.

    Every entry starts at the dtype's zero. Element access and block
    replacement never resize the matrix; out-of-bounds access raises
    :class:`OutOfRangeError`.
    """
    __slots__ = ("_data",)

    def __init__(self, height: int, width: int, dtype=np.complex128):
        if height < 0 or width < 0:
            raise DimensionMismatchError(f"Invalid matrix size {height}x{width}")
        self._data = np.zeros((height, width), dtype=dtype)

    @classmethod
    def from_array(cls, values, dtype=None) -> "Matrix":
        arr = np.array(values, dtype=dtype)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise DimensionMismatchError(f"Expected a 2D array, got {arr.ndim} dimensions")
        mat = cls.__new__(cls)
        mat._data = arr
        return mat

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def data(self) -> np.ndarray:
        """Underlying array (shared, not a copy)."""
        return self._data

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def copy(self) -> "Matrix":
        return Matrix.from_array(self._data.copy())

    def _check_index(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise OutOfRangeError(
                f"Access outside of matrix: ({row}, {col}) not in {self.height}x{self.width}"
            )

    def __getitem__(self, key):
        row, col = key
        self._check_index(row, col)
        return self._data[row, col]

    def __setitem__(self, key, value) -> None:
        row, col = key
        self._check_index(row, col)
        self._data[row, col] = value

    def replace(self, row: int, col: int, sub: "Matrix") -> None:
        """Overwrite the block starting at (row, col) with *sub*."""
        if (row < 0 or col < 0
                or row + sub.height > self.height
                or col + sub.width > self.width):
            raise OutOfRangeError(
                f"replace() of a {sub.height}x{sub.width} block at ({row}, {col}) "
                f"exceeds {self.height}x{self.width} matrix"
            )
        self._data[row:row + sub.height, col:col + sub.width] = sub._data

    def transpose(self) -> "Matrix":
        return Matrix.from_array(self._data.T.copy())

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if self.width != other.height:
            raise DimensionMismatchError(
                f"Invalid matrix dimensions in multiplication: "
                f"{self.height}x{self.width} @ {other.height}x{other.width}"
            )
        return Matrix.from_array(self._data @ other._data)

    def __mul__(self, scalar) -> "Matrix":
        return Matrix.from_array(self._data * scalar)

    __rmul__ = __mul__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Matrix {self.height}x{self.width} dtype={self.dtype}>\n{self._data}"


def join_horizontal(left: Matrix, right: Matrix) -> Matrix:
    """Place *right* to the right of *left*; heights must match."""
    if left.height != right.height:
        raise DimensionMismatchError(
            f"Cannot horizontally join matrices of different heights "
            f"({left.height} vs {right.height})"
        )
    dtype = np.result_type(left.dtype, right.dtype)
    mat = Matrix(left.height, left.width + right.width, dtype=dtype)
    mat.replace(0, 0, left)
    mat.replace(0, left.width, right)
    return mat


def join_vertical(upper: Matrix, lower: Matrix) -> Matrix:
    """Stack *lower* below *upper*; widths must match."""
    if upper.width != lower.width:
        raise DimensionMismatchError(
            f"Cannot vertically join matrices of different widths "
            f"({upper.width} vs {lower.width})"
        )
    dtype = np.result_type(upper.dtype, lower.dtype)
    mat = Matrix(upper.height + lower.height, upper.width, dtype=dtype)
    mat.replace(0, 0, upper)
    mat.replace(upper.height, 0, lower)
    return mat
