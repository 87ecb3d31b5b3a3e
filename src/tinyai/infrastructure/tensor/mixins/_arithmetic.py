"""
Arithmetic mixin defining elementwise Tensor operators.

This module declares :class:`TensorMixinArithmetic`, which implements the
Python operator surface (``+ - * / **`` and unary ``-``) on top of the host
Tensor's `elementwise_binary` primitive. Every operator therefore follows the
same broadcasting rule and raises the same `ShapeMismatchError` on
incompatible shapes.

Scalars (and NumPy scalars) on either side are promoted to rank-0 tensors,
which broadcast against anything.
"""

from __future__ import annotations

from abc import ABC
from typing import Union

import numpy as np

from ....domain._tensor import ITensor

Number = Union[int, float]


class TensorMixinArithmetic(ABC):
    """
    Elementwise arithmetic operators for tensors.

    Notes
    -----
    - The host class must provide `elementwise_binary(other, op, name)` and
      `_from_array(arr)`.
    - Reflected operators (``__radd__`` etc.) swap operand order explicitly so
      non-commutative ops stay correct.
    """

    def __add__(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self.elementwise_binary(other, np.add, name="add")

    def __radd__(self: ITensor, other: Number) -> ITensor:
        return self.elementwise_binary(other, lambda a, b: np.add(b, a), name="add")

    def __sub__(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self.elementwise_binary(other, np.subtract, name="sub")

    def __rsub__(self: ITensor, other: Number) -> ITensor:
        return self.elementwise_binary(
            other, lambda a, b: np.subtract(b, a), name="sub"
        )

    def __mul__(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self.elementwise_binary(other, np.multiply, name="mul")

    def __rmul__(self: ITensor, other: Number) -> ITensor:
        return self.elementwise_binary(
            other, lambda a, b: np.multiply(b, a), name="mul"
        )

    def __truediv__(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        """
        Elementwise true division.

        Notes
        -----
        Division by zero follows IEEE semantics (inf / nan); no exception is
        raised.
        """
        return self.elementwise_binary(other, np.true_divide, name="div")

    def __rtruediv__(self: ITensor, other: Number) -> ITensor:
        return self.elementwise_binary(
            other, lambda a, b: np.true_divide(b, a), name="div"
        )

    def __pow__(self: ITensor, other: Union[ITensor, Number]) -> ITensor:
        return self.elementwise_binary(other, np.power, name="pow")

    def __rpow__(self: ITensor, other: Number) -> ITensor:
        return self.elementwise_binary(other, lambda a, b: np.power(b, a), name="pow")

    def __neg__(self: ITensor) -> ITensor:
        return self._from_array(np.negative(self._data))

    def __pos__(self: ITensor) -> ITensor:
        return self._from_array(self._data.copy())
