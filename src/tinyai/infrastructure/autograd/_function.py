"""
Concrete base class for differentiable operations.

`Function` implements the application protocol shared by every built-in
operation:

1. validate the number of inputs (`ArityError`, before any work is done),
2. promote non-Variable inputs to constant Variables,
3. run `forward` on the input values,
4. wrap the result in a Variable and, if graph recording is enabled and some
   input requires a gradient, link the output back to this function.

Subclasses only implement `forward(*xs)` and `backward(grad_out)`. Anything the
backward rule needs is stored on `self.ctx` during `forward`.

Lifecycle
---------
A Function instance is one node of one graph. It moves from *unapplied* to
*applied* exactly once; applying it again raises `FunctionStateError`, as does
running its backward rule before it has been applied.
"""

from __future__ import annotations

import weakref
from typing import Any, Optional, Sequence

from ...domain._errors import ArityError, FunctionStateError, ShapeMismatchError
from ...domain._function import ARBITRARY_INPUT_COUNT
from ...domain._function import Function as _DomainFunction
from .._config import is_grad_enabled
from ..tensor import Shape, Tensor
from ._context import Context
from ._variable import Variable, as_variable


class Function(_DomainFunction):
    """
    Base class for graph-recording operations.

    Attributes
    ----------
    required_input_count : int
        Number of inputs `forward` accepts; `ARBITRARY_INPUT_COUNT` (-1)
        disables the check.
    inputs : Optional[tuple[Variable, ...]]
        Inputs captured at application time. None before application, when
        no graph edge was recorded, and after `unchain()`.
    generation : int
        ``1 + max(input generations)``; equals the generation of the output.
    """

    required_input_count: int = ARBITRARY_INPUT_COUNT

    def __init__(self) -> None:
        self._ctx: Optional[Context] = None
        self._applied = False
        self.inputs: Optional[tuple[Variable, ...]] = None
        self.generation = 0
        self._output_ref: Optional[weakref.ref] = None

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def ctx(self) -> Context:
        """
        Saved forward state.

        Raises
        ------
        FunctionStateError
            If the function has not been applied yet.
        """
        if self._ctx is None:
            raise FunctionStateError(
                f"{self.name} has no forward state; apply it to inputs first"
            )
        return self._ctx

    @property
    def output(self) -> Optional[Variable]:
        """The output Variable, or None if no graph edge was recorded."""
        return self._output_ref() if self._output_ref is not None else None

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------
    def _validate_inputs(self, count: int) -> None:
        expected = self.required_input_count
        if expected != ARBITRARY_INPUT_COUNT and count != expected:
            raise ArityError(self.name, expected, count)

    def __call__(self, *inputs: Any) -> Variable:
        """
        Apply this function to `inputs` and return the output Variable.

        Raises
        ------
        ArityError
            If the number of inputs differs from `required_input_count`.
        FunctionStateError
            If this instance has already been applied.
        """
        if self._applied:
            raise FunctionStateError(
                f"{self.name} instance was already applied; create a new one"
            )
        self._validate_inputs(len(inputs))

        xs = tuple(as_variable(x) for x in inputs)
        self._ctx = Context()
        y = self.forward(*(x.value for x in xs))
        if not isinstance(y, Tensor):
            y = Tensor(y)
        self._applied = True

        record = is_grad_enabled() and any(x.requires_grad for x in xs)
        output = Variable(y, requires_grad=record)
        if record:
            self.inputs = xs
            self.generation = 1 + max((x.generation for x in xs), default=0)
            self._output_ref = weakref.ref(output)
            output.set_creator(self)
        else:
            self._ctx.release()
        return output

    # ------------------------------------------------------------------
    # Backward support
    # ------------------------------------------------------------------
    @staticmethod
    def unbroadcast(grad: Tensor, shape: Any) -> Tensor:
        """
        Sum `grad` over the axes along which an input of `shape` was broadcast.

        Returns `grad` unchanged when the shapes already agree.
        """
        target = Shape.of(shape)
        if grad.shape == target:
            return grad
        return grad.sum_to(target)

    def run_backward(self, grad_out: Tensor) -> tuple[Optional[Tensor], ...]:
        """
        Invoke `backward` and validate what it returns.

        This is the entry point the backward engine uses. It checks that the
        function has been applied with recorded inputs, that one gradient is
        returned per input, and that each gradient has its input's shape.

        Raises
        ------
        FunctionStateError
            If the function was never applied or has been unchained.
        ArityError
            If the number of gradients differs from the number of inputs.
        ShapeMismatchError
            If a gradient's shape differs from its input's shape.
        """
        if not self._applied or self.inputs is None:
            raise FunctionStateError(
                f"{self.name}.backward called before forward (or after unchain)"
            )

        grads = self.backward(grad_out)
        if isinstance(grads, Tensor) or not isinstance(grads, Sequence):
            grads = (grads,)
        grads = tuple(grads)

        if len(grads) != len(self.inputs):
            raise ArityError(self.name, len(self.inputs), len(grads), what="gradients")

        for x, g in zip(self.inputs, grads):
            if g is not None and g.shape != x.value.shape:
                raise ShapeMismatchError(
                    f"{self.name}.backward", x.value.shape, g.shape,
                    "gradient shape must equal input shape",
                )
        return grads

    def unchain(self) -> None:
        """
        Drop this function's graph links and saved state.

        The output Variable (if still alive) loses its creator and becomes a
        leaf; the inputs are released.
        """
        out = self.output
        if out is not None and out.creator is self:
            out.set_creator(None)
        self.inputs = None
        self._output_ref = None
        if self._ctx is not None:
            self._ctx.release()

    def __repr__(self) -> str:
        state = "applied" if self._applied else "unapplied"
        return f"{self.name}(generation={self.generation}, {state})"
