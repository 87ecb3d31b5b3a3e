"""
Built-in differentiable operations.

Each operation is a `Function` subclass paired with a lower-case functional
wrapper that creates a fresh instance and applies it, e.g.::

    y = mul(add(a, b), c)        # same as (a + b) * c
"""

from ._arithmetic import Add, Div, Mul, Neg, Pow, Sub, add, div, mul, neg, pow, sub
from ._matrix import (
    BroadcastTo,
    MatMul,
    Reshape,
    SliceRange,
    SumTo,
    Transpose,
    broadcast_to,
    matmul,
    reshape,
    slice_range,
    sum_to,
    transpose,
)
from ._reduction import Max, Mean, Sum, Variance, max, mean, sum, var
from ._unary import (
    Exp,
    Log,
    ReLU,
    Sigmoid,
    Softmax,
    Sqrt,
    Tanh,
    exp,
    log,
    relu,
    sigmoid,
    softmax,
    sqrt,
    tanh,
)

__all__ = [
    Add.__name__,
    Sub.__name__,
    Mul.__name__,
    Div.__name__,
    Neg.__name__,
    Pow.__name__,
    MatMul.__name__,
    Transpose.__name__,
    Reshape.__name__,
    BroadcastTo.__name__,
    SumTo.__name__,
    SliceRange.__name__,
    Sum.__name__,
    Mean.__name__,
    Variance.__name__,
    Max.__name__,
    Exp.__name__,
    Log.__name__,
    Sqrt.__name__,
    Sigmoid.__name__,
    Tanh.__name__,
    ReLU.__name__,
    Softmax.__name__,
    add.__name__,
    sub.__name__,
    mul.__name__,
    div.__name__,
    neg.__name__,
    pow.__name__,
    matmul.__name__,
    transpose.__name__,
    reshape.__name__,
    broadcast_to.__name__,
    sum_to.__name__,
    slice_range.__name__,
    sum.__name__,
    mean.__name__,
    var.__name__,
    max.__name__,
    exp.__name__,
    log.__name__,
    sqrt.__name__,
    sigmoid.__name__,
    tanh.__name__,
    relu.__name__,
    softmax.__name__,
]
