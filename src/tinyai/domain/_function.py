"""
Autograd function interface definitions.

This module defines the abstract base class for differentiable operations
used in the automatic differentiation system. Concrete subclasses of
`Function` implement both the forward computation and its corresponding
backward gradient computation.

Unlike a stateless kernel, a `Function` instance *is* one edge-set of the
computation graph: it is forwarded once, keeps whatever forward-time state
its backward rule needs, and is consumed by the backward engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ._tensor import ITensor

ARBITRARY_INPUT_COUNT = -1
"""Sentinel for `required_input_count` meaning "any number of inputs"."""


class Function(ABC):
    """
    Abstract base class for differentiable operations.

    Subclasses must implement:

    - `forward(*xs)`: map input tensors to one output tensor, saving any state
      required by `backward`.
    - `backward(grad_out)`: map the gradient w.r.t. the output to one gradient
      per input, in input order.
    - `required_input_count`: how many inputs `forward` accepts.

    Notes
    -----
    - `forward` must be a pure function of its inputs' values and must never
      mutate an input.
    - `backward` must be a pure function of `grad_out` and the saved state.
    """

    required_input_count: int = ARBITRARY_INPUT_COUNT

    @abstractmethod
    def forward(self, *xs: ITensor) -> ITensor:
        """
        Perform the forward computation.

        Parameters
        ----------
        *xs : ITensor
            Input values, in the order the function was applied to.

        Returns
        -------
        ITensor
            The output value.
        """
        ...

    @abstractmethod
    def backward(self, grad_out: ITensor) -> Sequence[Optional[ITensor]]:
        """
        Compute gradients with respect to the inputs.

        Parameters
        ----------
        grad_out : ITensor
            Gradient of the loss with respect to this function's output.

        Returns
        -------
        Sequence[Optional[ITensor]]
            Exactly one entry per input. Each gradient must have the exact
            shape of the corresponding input; None marks an input that is not
            differentiable.
        """
        ...
