"""
Reduction functions: `Sum`, `Mean`, `Variance` and `Max`.

All four collapse a single axis (or the whole tensor when ``axis=None``) and
accept `keepdims`. Their backward rules share one step: the upstream gradient
is first restored to keepdims layout and then broadcast back over the reduced
axis.

Variance is the population variance (divisor ``n``).
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ..autograd import Function, Variable
from ..tensor import Shape, Tensor


def _expand_grad(
    grad_out: Tensor, in_shape: Shape, axis: Optional[int]
) -> Tensor:
    """Broadcast a reduced gradient back to the input shape."""
    if axis is None:
        kept = Shape((1,) * in_shape.rank)
    else:
        kept = in_shape.keep_axis(axis)
    return grad_out.reshape(kept).broadcast_to(in_shape)


def _reduced_count(in_shape: Shape, axis: Optional[int]) -> int:
    return in_shape.size if axis is None else in_shape[axis]


class _Reduction(Function):
    required_input_count = 1

    def __init__(self, axis: Optional[int] = None, keepdims: bool = False) -> None:
        super().__init__()
        self.axis = axis
        self.keepdims = keepdims

    def _prepare(self, x: Tensor) -> Optional[int]:
        # normalized once so backward never sees a negative axis
        ax = None if self.axis is None else x.shape.normalize_axis(self.axis)
        self.ctx.saved_meta.update(in_shape=x.shape, axis=ax)
        return ax


class Sum(_Reduction):
    def forward(self, x: Tensor) -> Tensor:
        ax = self._prepare(x)
        return x.sum(axis=ax, keepdims=self.keepdims)

    def backward(self, grad_out: Tensor):
        meta = self.ctx.saved_meta
        return (_expand_grad(grad_out, meta["in_shape"], meta["axis"]),)


class Mean(_Reduction):
    """
    Arithmetic mean.

    Backward:

        dL/dx = broadcast(g) / n

    where ``n`` is the number of reduced elements.
    """

    def forward(self, x: Tensor) -> Tensor:
        ax = self._prepare(x)
        return x.mean(axis=ax, keepdims=self.keepdims)

    def backward(self, grad_out: Tensor):
        meta = self.ctx.saved_meta
        n = _reduced_count(meta["in_shape"], meta["axis"])
        return (_expand_grad(grad_out, meta["in_shape"], meta["axis"]) / n,)


class Variance(_Reduction):
    """
    Population variance.

    Backward:

        dL/dx = 2 (x - mean) / n * broadcast(g)

    The keepdims mean computed in the forward pass is saved and reused.
    """

    def forward(self, x: Tensor) -> Tensor:
        ax = self._prepare(x)
        self.ctx.save_for_backward(x, x.mean(axis=ax, keepdims=True))
        return x.var(axis=ax, keepdims=self.keepdims)

    def backward(self, grad_out: Tensor):
        x, mu = self.ctx.saved_tensors
        meta = self.ctx.saved_meta
        n = _reduced_count(meta["in_shape"], meta["axis"])
        g = _expand_grad(grad_out, meta["in_shape"], meta["axis"])
        return ((x - mu) * (2.0 / n) * g,)


class Max(_Reduction):
    """
    Maximum.

    The gradient flows only to the positions holding the maximum. When several
    positions tie, the gradient is split evenly between them.
    """

    def forward(self, x: Tensor) -> Tensor:
        ax = self._prepare(x)
        peak = x.max(axis=ax, keepdims=True)
        mask = x.elementwise_binary(peak, np.equal, name="max")
        self.ctx.save_for_backward(mask / mask.sum(axis=ax, keepdims=True))
        return x.max(axis=ax, keepdims=self.keepdims)

    def backward(self, grad_out: Tensor):
        (weights,) = self.ctx.saved_tensors
        meta = self.ctx.saved_meta
        return (weights * _expand_grad(grad_out, meta["in_shape"], meta["axis"]),)


def sum(x: Any, axis: Optional[int] = None, keepdims: bool = False) -> Variable:
    return Sum(axis, keepdims)(x)


def mean(x: Any, axis: Optional[int] = None, keepdims: bool = False) -> Variable:
    return Mean(axis, keepdims)(x)


def var(x: Any, axis: Optional[int] = None, keepdims: bool = False) -> Variable:
    return Variance(axis, keepdims)(x)


def max(x: Any, axis: Optional[int] = None, keepdims: bool = False) -> Variable:
    return Max(axis, keepdims)(x)
