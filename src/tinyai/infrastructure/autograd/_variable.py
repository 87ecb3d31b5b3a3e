"""
Computation-graph node.

A `Variable` wraps a `Tensor` value and records where it came from: the
`Function` that produced it (`creator`) and its depth in the graph
(`generation`). Applying operations to Variables builds the graph; calling
`backward()` on a result walks it in reverse and deposits gradients into
every Variable that requires one.

Operator and method calls on a Variable delegate to the functional wrappers in
`tinyai.infrastructure.functions`; those are imported lazily because the
function catalog itself depends on this module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from ...domain._errors import ShapeMismatchError
from ..tensor import Shape, Tensor
from ._engine import run_backward

if TYPE_CHECKING:
    from ._function import Function


class Variable:
    """
    Graph node holding a value, an optional gradient and a creator link.

    Parameters
    ----------
    data : Tensor, array-like or Number
        Forward value. Non-Tensor data is converted with `Tensor(data)`.
    name : Optional[str], optional
        Label used in `repr` and debug logs.
    requires_grad : bool, optional
        Whether backpropagation deposits gradients into this node.
        Defaults to True.

    Notes
    -----
    - Leaves (no creator) have generation 0; an operation output has
      ``1 + max(input generations)``.
    - Gradients accumulate across `backward()` calls until `zero_grad()`.
    """

    __array_ufunc__ = None

    def __init__(
        self,
        data: Any,
        name: Optional[str] = None,
        requires_grad: bool = True,
    ) -> None:
        self._value = data if isinstance(data, Tensor) else Tensor(data)
        self.name = name
        self.requires_grad = bool(requires_grad)
        self._grad: Optional[Tensor] = None
        self.creator: Optional["Function"] = None
        self.generation = 0

    # ------------------------------------------------------------------
    # Value / gradient
    # ------------------------------------------------------------------
    @property
    def value(self) -> Tensor:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        """
        Replace the forward value in place (e.g., after an optimizer step).

        Raises
        ------
        ShapeMismatchError
            If the new value has a different shape.
        """
        new = new_value if isinstance(new_value, Tensor) else Tensor(new_value)
        if new.shape != self._value.shape:
            raise ShapeMismatchError("Variable.value", self._value.shape, new.shape)
        self._value = new

    @property
    def grad(self) -> Optional[Tensor]:
        return self._grad

    @grad.setter
    def grad(self, g: Optional[Tensor]) -> None:
        if g is not None:
            self._check_grad_shape(g, "Variable.grad")
        self._grad = g

    @property
    def shape(self) -> Shape:
        return self._value.shape

    @property
    def ndim(self) -> int:
        return self._value.ndim

    def __len__(self) -> int:
        return len(self._value)

    def set_creator(self, fn: Optional["Function"]) -> None:
        """Link this node to the function that produced it (None makes it a leaf)."""
        self.creator = fn
        self.generation = fn.generation if fn is not None else 0

    def _check_grad_shape(self, g: Tensor, op: str) -> None:
        if g.shape != self._value.shape:
            raise ShapeMismatchError(op, self._value.shape, g.shape)

    def accumulate_grad(self, g: Tensor) -> None:
        """
        Add `g` into the stored gradient.

        Parameters
        ----------
        g : Tensor
            Gradient contribution. Must have exactly this Variable's shape;
            un-broadcasting is the producing function's job.

        Raises
        ------
        ShapeMismatchError
            If `g` does not have this Variable's shape.
        """
        self._check_grad_shape(g, "accumulate_grad")
        self._grad = g if self._grad is None else self._grad + g

    def zero_grad(self) -> None:
        """Clear the gradient. The graph is left untouched."""
        self._grad = None

    def backward(
        self, grad_out: Optional[Any] = None, retain_graph: bool = False
    ) -> None:
        """
        Backpropagate from this Variable.

        Parameters
        ----------
        grad_out : Optional[Tensor], optional
            Seed gradient. If omitted, the existing gradient is reused, or a
            tensor of ones of this Variable's shape when there is none.
        retain_graph : bool, optional
            Keep the graph after the pass so `backward` can run again.
            By default the traversed graph is released.

        Raises
        ------
        ShapeMismatchError
            If `grad_out`, or any gradient produced by a backward rule, has
            the wrong shape.
        ArityError
            If a backward rule returns the wrong number of gradients.
        """
        run_backward(self, grad_out, retain_graph=retain_graph)

    def detach(self) -> "Variable":
        """Return a new leaf sharing this value, with no gradient tracking."""
        return Variable(self._value, name=self.name, requires_grad=False)

    def unchain_backward(self) -> None:
        """
        Cut every graph edge above this Variable.

        Each Function reachable through creator links is unchained, so the
        intermediate Variables become leaves and their saved state is freed.
        This Variable keeps its value and gradient.
        """
        stack = [self.creator] if self.creator is not None else []
        seen: set[int] = set()
        while stack:
            fn = stack.pop()
            if id(fn) in seen:
                continue
            seen.add(id(fn))
            for x in fn.inputs or ():
                if x.creator is not None:
                    stack.append(x.creator)
            fn.unchain()
        self.set_creator(None)

    # ------------------------------------------------------------------
    # Graph construction
    # ------------------------------------------------------------------
    def apply(self, fn: "Function", *others: Any) -> "Variable":
        """Apply `fn` with this Variable as the first input."""
        return fn(self, *others)

    def add(self, other: Any) -> "Variable":
        from ..functions import add

        return add(self, other)

    def sub(self, other: Any) -> "Variable":
        from ..functions import sub

        return sub(self, other)

    def mul(self, other: Any) -> "Variable":
        from ..functions import mul

        return mul(self, other)

    def div(self, other: Any) -> "Variable":
        from ..functions import div

        return div(self, other)

    def neg(self) -> "Variable":
        from ..functions import neg

        return neg(self)

    def pow(self, exponent: float) -> "Variable":
        from ..functions import pow

        return pow(self, exponent)

    def matmul(self, other: Any) -> "Variable":
        from ..functions import matmul

        return matmul(self, other)

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __neg__ = neg
    __pow__ = pow
    __matmul__ = matmul

    def __radd__(self, other: Any) -> "Variable":
        from ..functions import add

        return add(other, self)

    def __rsub__(self, other: Any) -> "Variable":
        from ..functions import sub

        return sub(other, self)

    def __rmul__(self, other: Any) -> "Variable":
        from ..functions import mul

        return mul(other, self)

    def __rtruediv__(self, other: Any) -> "Variable":
        from ..functions import div

        return div(other, self)

    def __rmatmul__(self, other: Any) -> "Variable":
        from ..functions import matmul

        return matmul(other, self)

    def sum(self, axis: Optional[int] = None, keepdims: bool = False) -> "Variable":
        from ..functions import sum

        return sum(self, axis=axis, keepdims=keepdims)

    def mean(self, axis: Optional[int] = None, keepdims: bool = False) -> "Variable":
        from ..functions import mean

        return mean(self, axis=axis, keepdims=keepdims)

    def var(self, axis: Optional[int] = None, keepdims: bool = False) -> "Variable":
        from ..functions import var

        return var(self, axis=axis, keepdims=keepdims)

    def max(self, axis: Optional[int] = None, keepdims: bool = False) -> "Variable":
        from ..functions import max

        return max(self, axis=axis, keepdims=keepdims)

    def reshape(self, *shape: Any) -> "Variable":
        from ..functions import reshape

        if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
            shape = shape[0]
        return reshape(self, shape)

    def broadcast_to(self, shape: Any) -> "Variable":
        from ..functions import broadcast_to

        return broadcast_to(self, shape)

    def sum_to(self, shape: Any) -> "Variable":
        from ..functions import sum_to

        return sum_to(self, shape)

    def transpose(self) -> "Variable":
        from ..functions import transpose

        return transpose(self)

    @property
    def T(self) -> "Variable":
        return self.transpose()

    def slice_range(self, axis: int, start: int, end: int) -> "Variable":
        from ..functions import slice_range

        return slice_range(self, axis, start, end)

    def exp(self) -> "Variable":
        from ..functions import exp

        return exp(self)

    def log(self) -> "Variable":
        from ..functions import log

        return log(self)

    def sqrt(self) -> "Variable":
        from ..functions import sqrt

        return sqrt(self)

    def sigmoid(self) -> "Variable":
        from ..functions import sigmoid

        return sigmoid(self)

    def tanh(self) -> "Variable":
        from ..functions import tanh

        return tanh(self)

    def relu(self) -> "Variable":
        from ..functions import relu

        return relu(self)

    def softmax(self, axis: int = -1) -> "Variable":
        from ..functions import softmax

        return softmax(self, axis=axis)

    def __repr__(self) -> str:
        label = f", name={self.name!r}" if self.name is not None else ""
        body = repr(self._value)[len("Tensor(") : -1]
        return f"Variable({body}{label}, generation={self.generation})"


def as_variable(x: Any) -> Variable:
    """Return `x` if it is a Variable, otherwise wrap it as a constant."""
    if isinstance(x, Variable):
        return x
    return Variable(x, requires_grad=False)
