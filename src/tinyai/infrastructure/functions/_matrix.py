"""
Matrix and shape-transforming functions.

- `MatMul`      : batched matrix product over the last two axes
- `Transpose`   : swap the last two axes
- `Reshape`     : change the layout, keeping the element count
- `BroadcastTo` : expand to a larger shape following the broadcasting rule
- `SumTo`       : sum down to a smaller shape (adjoint of `BroadcastTo`)
- `SliceRange`  : take ``[start, end)`` along one axis

Every backward rule here is the adjoint of its forward: reshape undoes
reshape, `BroadcastTo` and `SumTo` are each other's backward, and
`SliceRange` scatters the gradient back into zeros.
"""

from __future__ import annotations

from typing import Any

from ..autograd import Function, Variable
from ..tensor import Shape, Tensor
from ..tensor.mixins._memory import clamp_range


class MatMul(Function):
    """
    Matrix multiplication ``y = a @ b``.

    Backward
    --------
    If ``y = a @ b``:

    - dL/da = g @ b^T
    - dL/db = a^T @ g

    each summed back over batch axes that broadcasting added.
    """

    required_input_count = 2

    def forward(self, a: Tensor, b: Tensor) -> Tensor:
        self.ctx.save_for_backward(a, b)
        return a.matmul(b)

    def backward(self, grad_out: Tensor):
        a, b = self.ctx.saved_tensors
        ga = grad_out.matmul(b.transpose())
        gb = a.transpose().matmul(grad_out)
        return self.unbroadcast(ga, a.shape), self.unbroadcast(gb, b.shape)


class Transpose(Function):
    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        return x.transpose()

    def backward(self, grad_out: Tensor):
        return (grad_out.transpose(),)


class Reshape(Function):
    required_input_count = 1

    def __init__(self, shape: Any) -> None:
        super().__init__()
        self.shape = Shape.of(shape)

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.reshape(self.shape)

    def backward(self, grad_out: Tensor):
        return (grad_out.reshape(self.ctx.saved_meta["in_shape"]),)


class BroadcastTo(Function):
    required_input_count = 1

    def __init__(self, shape: Any) -> None:
        super().__init__()
        self.shape = Shape.of(shape)

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.broadcast_to(self.shape)

    def backward(self, grad_out: Tensor):
        return (grad_out.sum_to(self.ctx.saved_meta["in_shape"]),)


class SumTo(Function):
    required_input_count = 1

    def __init__(self, shape: Any) -> None:
        super().__init__()
        self.shape = Shape.of(shape)

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.saved_meta["in_shape"] = x.shape
        return x.sum_to(self.shape)

    def backward(self, grad_out: Tensor):
        return (grad_out.broadcast_to(self.ctx.saved_meta["in_shape"]),)


class SliceRange(Function):
    """
    Slice ``[start, end)`` along `axis`.

    Bounds follow `Tensor.slice_range`: negative values count from the end and
    both are clamped to the axis length. The backward pass embeds the
    gradient into zeros of the input shape at the clamped offset.
    """

    required_input_count = 1

    def __init__(self, axis: int, start: int, end: int) -> None:
        super().__init__()
        self.axis = axis
        self.start = start
        self.end = end

    def forward(self, x: Tensor) -> Tensor:
        ax = x.shape.normalize_axis(self.axis)
        lo, _ = clamp_range(self.start, self.end, x.shape[ax])
        self.ctx.saved_meta.update(in_shape=x.shape, axis=ax, offset=lo)
        return x.slice_range(ax, self.start, self.end)

    def backward(self, grad_out: Tensor):
        meta = self.ctx.saved_meta
        return (grad_out.pad_range(meta["in_shape"], meta["axis"], meta["offset"]),)


def matmul(a: Any, b: Any) -> Variable:
    return MatMul()(a, b)


def transpose(x: Any) -> Variable:
    return Transpose()(x)


def reshape(x: Any, shape: Any) -> Variable:
    return Reshape(shape)(x)


def broadcast_to(x: Any, shape: Any) -> Variable:
    return BroadcastTo(shape)(x)


def sum_to(x: Any, shape: Any) -> Variable:
    return SumTo(shape)(x)


def slice_range(x: Any, axis: int, start: int, end: int) -> Variable:
    return SliceRange(axis, start, end)(x)
