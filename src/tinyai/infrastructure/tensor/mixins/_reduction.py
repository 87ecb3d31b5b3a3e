"""
Reduction mixin for Tensor.

This module implements :class:`TensorMixinReduction`, which collapses one axis
(or the whole tensor) with ``sum``, ``mean``, ``var`` or ``max``.

Shape semantics
---------------
- ``axis=None`` reduces every element. With ``keepdims=False`` the result is a
  rank-0 tensor; with ``keepdims=True`` every axis is kept with size 1.
- An integer axis may be negative (counted from the end). With
  ``keepdims=True`` the reduced axis stays with size 1, otherwise it is removed
  and the following axes shift down.
- An out-of-range axis raises `TensorIndexError`.

Variance is the population variance (divisor ``n``).
"""

from __future__ import annotations

from abc import ABC
from typing import Callable, Optional

import numpy as np

from ....domain._tensor import ITensor

_REDUCERS: dict[str, Callable[..., np.ndarray]] = {
    "sum": np.sum,
    "mean": np.mean,
    "var": np.var,
    "max": np.max,
}


class TensorMixinReduction(ABC):
    """
    Axis reductions for tensors.

    Notes
    -----
    The host class must provide `shape` (a `Shape`), `_data` and
    `_from_array(arr)`.
    """

    def reduce(
        self: ITensor, op: str, axis: Optional[int] = None, keepdims: bool = False
    ) -> ITensor:
        """
        Collapse `axis` using the reducer named by `op`.

        Parameters
        ----------
        op : str
            One of "sum", "mean", "var", "max".
        axis : Optional[int], optional
            Axis to reduce. If None, all elements are reduced.
        keepdims : bool, optional
            Retain the reduced axis with size 1. Defaults to False.

        Returns
        -------
        ITensor
            The reduced tensor.

        Raises
        ------
        ValueError
            If `op` is not a known reducer.
        TensorIndexError
            If `axis` is out of range.
        """
        try:
            fn = _REDUCERS[op]
        except KeyError:
            raise ValueError(
                f"Unknown reduction {op!r}; expected one of {sorted(_REDUCERS)}"
            ) from None

        if axis is None:
            out = fn(self._data, keepdims=keepdims)
        else:
            ax = self.shape.normalize_axis(axis)
            out = fn(self._data, axis=ax, keepdims=keepdims)
        return self._from_array(np.asarray(out))

    def sum(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> ITensor:
        return self.reduce("sum", axis=axis, keepdims=keepdims)

    def mean(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> ITensor:
        return self.reduce("mean", axis=axis, keepdims=keepdims)

    def var(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> ITensor:
        return self.reduce("var", axis=axis, keepdims=keepdims)

    def max(self: ITensor, axis: Optional[int] = None, keepdims: bool = False) -> ITensor:
        return self.reduce("max", axis=axis, keepdims=keepdims)
