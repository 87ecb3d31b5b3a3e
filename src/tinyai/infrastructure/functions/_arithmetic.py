"""
Elementwise arithmetic functions.

This module implements the binary arithmetic operations (`Add`, `Sub`, `Mul`,
`Div`), negation and raising to a constant power, together with their
functional wrappers.

Broadcasting
------------
Binary operations broadcast their operands in the forward pass. In the
backward pass each gradient is summed back to its input's shape with
`Function.unbroadcast`, so a ``(3, 1)`` operand added to a ``(3, 4)`` operand
receives the row sums of the upstream gradient.
"""

from __future__ import annotations

from typing import Any

from ..autograd import Function, Variable
from ..tensor import Tensor


class Add(Function):
    """
    Elementwise addition.

    Backward:

        dL/da = unbroadcast(g), dL/db = unbroadcast(g)
    """

    required_input_count = 2

    def forward(self, a: Tensor, b: Tensor) -> Tensor:
        self.ctx.saved_meta["shapes"] = (a.shape, b.shape)
        return a + b

    def backward(self, grad_out: Tensor):
        a_shape, b_shape = self.ctx.saved_meta["shapes"]
        return (
            self.unbroadcast(grad_out, a_shape),
            self.unbroadcast(grad_out, b_shape),
        )


class Sub(Function):
    required_input_count = 2

    def forward(self, a: Tensor, b: Tensor) -> Tensor:
        self.ctx.saved_meta["shapes"] = (a.shape, b.shape)
        return a - b

    def backward(self, grad_out: Tensor):
        a_shape, b_shape = self.ctx.saved_meta["shapes"]
        return (
            self.unbroadcast(grad_out, a_shape),
            self.unbroadcast(-grad_out, b_shape),
        )


class Mul(Function):
    """
    Elementwise multiplication.

    Backward:

        dL/da = unbroadcast(g * b), dL/db = unbroadcast(g * a)
    """

    required_input_count = 2

    def forward(self, a: Tensor, b: Tensor) -> Tensor:
        self.ctx.save_for_backward(a, b)
        return a * b

    def backward(self, grad_out: Tensor):
        a, b = self.ctx.saved_tensors
        return (
            self.unbroadcast(grad_out * b, a.shape),
            self.unbroadcast(grad_out * a, b.shape),
        )


class Div(Function):
    """
    Elementwise division.

    Backward:

        dL/da = unbroadcast(g / b), dL/db = unbroadcast(-g * a / b^2)
    """

    required_input_count = 2

    def forward(self, a: Tensor, b: Tensor) -> Tensor:
        self.ctx.save_for_backward(a, b)
        return a / b

    def backward(self, grad_out: Tensor):
        a, b = self.ctx.saved_tensors
        ga = grad_out / b
        gb = -grad_out * a / (b * b)
        return self.unbroadcast(ga, a.shape), self.unbroadcast(gb, b.shape)


class Neg(Function):
    required_input_count = 1

    def forward(self, x: Tensor) -> Tensor:
        return -x

    def backward(self, grad_out: Tensor):
        return (-grad_out,)


class Pow(Function):
    """
    Raise to a constant exponent: ``y = x ** c``.

    Backward:

        dL/dx = g * c * x^(c - 1)

    Parameters
    ----------
    exponent : float
        The constant exponent `c`. It is an operation parameter, not an input,
        so no gradient flows to it.
    """

    required_input_count = 1

    def __init__(self, exponent: float) -> None:
        super().__init__()
        self.exponent = float(exponent)

    def forward(self, x: Tensor) -> Tensor:
        self.ctx.save_for_backward(x)
        return x**self.exponent

    def backward(self, grad_out: Tensor):
        (x,) = self.ctx.saved_tensors
        c = self.exponent
        return (grad_out * (x ** (c - 1.0)) * c,)


def add(a: Any, b: Any) -> Variable:
    return Add()(a, b)


def sub(a: Any, b: Any) -> Variable:
    return Sub()(a, b)


def mul(a: Any, b: Any) -> Variable:
    return Mul()(a, b)


def div(a: Any, b: Any) -> Variable:
    return Div()(a, b)


def neg(x: Any) -> Variable:
    return Neg()(x)


def pow(x: Any, exponent: float) -> Variable:
    """
    Compute ``x ** exponent`` for a constant exponent.

    Raises
    ------
    TypeError
        If `exponent` is a Variable; only constant exponents are supported.
    """
    if isinstance(exponent, Variable):
        raise TypeError("pow supports constant exponents only")
    return Pow(exponent)(x)
