"""
Unary elementwise transforms for Tensor.

Each method maps the buffer through a NumPy ufunc (or a small composition of
them) and returns a new tensor of the same shape. `softmax` is the only
operation here that couples elements, and only along one axis.

Domain errors (e.g., ``log`` of a negative value) follow IEEE semantics and
produce nan / -inf rather than raising.
"""

from __future__ import annotations

from abc import ABC
from typing import Callable

import numpy as np

from ....domain._tensor import ITensor


class TensorMixinUnary(ABC):
    """
    Elementwise unary operations for tensors.

    Notes
    -----
    The host class must provide `shape`, `_data` and `_from_array(arr)`.
    """

    def map(self: ITensor, fn: Callable[[np.ndarray], np.ndarray]) -> ITensor:
        """
        Apply an array-to-array function and wrap the result.

        `fn` must return an array with the same shape as its input.
        """
        out = np.asarray(fn(self._data))
        if out.shape != self.shape.dims:
            raise ValueError(
                f"map function changed shape {self.shape.dims} -> {out.shape}"
            )
        return self._from_array(out)

    def exp(self: ITensor) -> ITensor:
        return self._from_array(np.exp(self._data))

    def log(self: ITensor) -> ITensor:
        return self._from_array(np.log(self._data))

    def sqrt(self: ITensor) -> ITensor:
        return self._from_array(np.sqrt(self._data))

    def square(self: ITensor) -> ITensor:
        return self._from_array(np.square(self._data))

    def abs(self: ITensor) -> ITensor:
        return self._from_array(np.abs(self._data))

    def tanh(self: ITensor) -> ITensor:
        return self._from_array(np.tanh(self._data))

    def sigmoid(self: ITensor) -> ITensor:
        """
        Logistic sigmoid, computed as ``0.5 * (tanh(x / 2) + 1)`` so large
        magnitudes neither overflow nor lose precision.
        """
        return self._from_array(0.5 * (np.tanh(0.5 * self._data) + 1.0))

    def relu(self: ITensor) -> ITensor:
        return self._from_array(np.maximum(self._data, 0.0))

    def softmax(self: ITensor, axis: int = -1) -> ITensor:
        """
        Numerically stable softmax along `axis`.

        Raises
        ------
        TensorIndexError
            If `axis` is out of range.
        """
        ax = self.shape.normalize_axis(axis)
        shifted = self._data - np.max(self._data, axis=ax, keepdims=True)
        e = np.exp(shifted)
        return self._from_array(e / np.sum(e, axis=ax, keepdims=True))
