"""
Elementwise and activation functions.

Most backward rules here are expressed in terms of the forward *output*
(e.g., ``exp' = exp``, ``tanh' = 1 - tanh^2``), so the output is what gets
saved for backward.
"""

from __future__ import annotations

from typing import Any

from ..autograd import Function, Variable
from ..tensor import Tensor


class Exp(Function):
    """
    Elementwise exponential.

    Backward:

        d(exp(x))/dx = exp(x) = out
    """

    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        out = x.exp()
        self.ctx.save_for_backward(out)
        return out

    def backward(self, grad_out: Tensor):
        (out,) = self.ctx.saved_tensors
        return (grad_out * out,)


class Log(Function):
    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.save_for_backward(x)
        return x.log()

    def backward(self, grad_out: Tensor):
        (x,) = self.ctx.saved_tensors
        return (grad_out / x,)


class Sqrt(Function):
    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        out = x.sqrt()
        self.ctx.save_for_backward(out)
        return out

    def backward(self, grad_out: Tensor):
        (out,) = self.ctx.saved_tensors
        return (grad_out / (out * 2.0),)


class Sigmoid(Function):
    """
    Logistic sigmoid.

    Backward:

        dL/dx = g * s * (1 - s),  s = sigmoid(x)
    """

    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        out = x.sigmoid()
        self.ctx.save_for_backward(out)
        return out

    def backward(self, grad_out: Tensor):
        (s,) = self.ctx.saved_tensors
        return (grad_out * s * (1.0 - s),)


class Tanh(Function):
    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        out = x.tanh()
        self.ctx.save_for_backward(out)
        return out

    def backward(self, grad_out: Tensor):
        (t,) = self.ctx.saved_tensors
        return (grad_out * (1.0 - t * t),)


class ReLU(Function):
    """
    Rectified linear unit.

    The subgradient at 0 is taken to be 0.
    """

    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.save_for_backward(x.map(lambda a: (a > 0).astype(a.dtype)))
        return x.relu()

    def backward(self, grad_out: Tensor):
        (mask,) = self.ctx.saved_tensors
        return (grad_out * mask,)


class Softmax(Function):
    """
    Softmax along one axis.

    Backward
    --------
    With ``y = softmax(x)`` and upstream gradient ``g``:

        dL/dx = y * (g - sum(g * y, axis, keepdims=True))
    """

    required_input_count = 1

    def __init__(self, axis: int = -1) -> None:
        super().__init__()
        self.axis = axis

    def forward(self, x: Tensor) -> Tensor:
        out = x.softmax(axis=self.axis)
        self.ctx.save_for_backward(out)
        return out

    def backward(self, grad_out: Tensor):
        (y,) = self.ctx.saved_tensors
        gy = grad_out * y
        return (gy - y * gy.sum(axis=self.axis, keepdims=True),)


def exp(x: Any) -> Variable:
    return Exp()(x)


def log(x: Any) -> Variable:
    return Log()(x)


def sqrt(x: Any) -> Variable:
    return Sqrt()(x)


def sigmoid(x: Any) -> Variable:
    return Sigmoid()(x)


def tanh(x: Any) -> Variable:
    return Tanh()(x)


def relu(x: Any) -> Variable:
    return ReLU()(x)


def softmax(x: Any, axis: int = -1) -> Variable:
    return Softmax(axis)(x)
