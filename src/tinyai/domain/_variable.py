"""
Graph-node interface definitions.

This module defines the structural contract that code outside the autograd
core (layers, models, optimizers) relies on when it handles a `Variable`.
Optimizers in particular only need to read `value` and `grad`, write a new
`value`, and clear the gradient between steps.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ._tensor import ITensor


@runtime_checkable
class IVariable(Protocol):
    """
    Domain-level interface for computation-graph nodes.

    Notes
    -----
    - The core never clears gradients on its own; callers invoke `zero_grad()`
      between training iterations.
    - `backward()` is the only entry point into gradient computation that
      surrounding code is expected to use.
    """

    @property
    def value(self) -> ITensor:
        """
        Return the forward value held by this node.
        """
        ...

    @value.setter
    def value(self, new_value: ITensor) -> None:
        """
        Replace the forward value (e.g., after an optimizer step).
        """
        ...

    @property
    def grad(self) -> Optional[ITensor]:
        """
        Return the accumulated gradient, or None if none has been computed.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether backpropagation deposits gradients into this node.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear the stored gradient. Graph links are left untouched.
        """
        ...

    def backward(self) -> None:
        """
        Run reverse-mode differentiation from this node.
        """
        ...
