"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like values using
structural typing. The interface captures the backend-agnostic surface the
autograd core relies on: shape metadata, broadcasting arithmetic, axis
reductions and shape-only transforms.

Notes
-----
The protocol deliberately carries no autograd hooks. Tensors are pure values;
gradient bookkeeping lives on `Variable` (see `tinyai.domain._variable`).
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, Sequence, Union, runtime_checkable

Number = Union[int, float]
ShapeLike = Union[Sequence[int], Any]


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor interface.

    An `ITensor` is a dense multidimensional floating-point buffer with shape
    metadata. Every operation returns a new tensor; implementations must never
    mutate a tensor after construction.
    """

    # ---------------------------------------------------------------------
    # Metadata
    # ---------------------------------------------------------------------
    @property
    def shape(self) -> Any:
        """
        Return the tensor's `Shape`.

        Returns
        -------
        Shape
            Immutable dimension descriptor. Compares equal to a tuple of dims.
        """
        ...

    @property
    def data(self) -> Any:
        """
        Return a read-only view of the underlying contiguous buffer.
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements (``shape.size``).
        """
        ...

    # ---------------------------------------------------------------------
    # Elementwise arithmetic with broadcasting
    # ---------------------------------------------------------------------
    def elementwise_binary(
        self, other: Union["ITensor", Number], op: Callable[[Any, Any], Any]
    ) -> "ITensor":
        """
        Broadcast `self` and `other` and apply `op` pairwise.

        Raises
        ------
        ShapeMismatchError
            If the shapes are not broadcast-compatible.
        """
        ...

    def __add__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __sub__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __mul__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __truediv__(self, other: Union["ITensor", Number]) -> "ITensor": ...

    def __neg__(self) -> "ITensor": ...

    def matmul(self, other: "ITensor") -> "ITensor":
        """
        Matrix product over the last two axes (batched for rank > 2).

        Raises
        ------
        ShapeMismatchError
            If either operand has rank < 2, the inner dimensions disagree, or
            the batch dimensions cannot be broadcast together.
        """
        ...

    # ---------------------------------------------------------------------
    # Reductions
    # ---------------------------------------------------------------------
    def reduce(
        self, op: str, axis: Optional[int] = None, keepdims: bool = False
    ) -> "ITensor":
        """
        Collapse `axis` using `op` ("sum", "mean", "var" or "max").

        Raises
        ------
        TensorIndexError
            If `axis` is out of range.
        """
        ...

    def sum(self, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor": ...

    def mean(self, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor": ...

    def var(self, axis: Optional[int] = None, keepdims: bool = False) -> "ITensor": ...

    # ---------------------------------------------------------------------
    # Shape-only transforms
    # ---------------------------------------------------------------------
    def reshape(self, shape: ShapeLike) -> "ITensor":
        """
        Return a tensor with the same elements and a new shape.

        Raises
        ------
        ShapeMismatchError
            If the element count changes.
        """
        ...

    def broadcast_to(self, shape: ShapeLike) -> "ITensor":
        """
        Materialize `self` expanded to `shape`.

        Raises
        ------
        ShapeMismatchError
            If `self.shape` does not broadcast into `shape`.
        """
        ...

    def sum_to(self, shape: ShapeLike) -> "ITensor":
        """
        Inverse of `broadcast_to`: sum over the axes that broadcasting created.
        """
        ...

    # ---------------------------------------------------------------------
    # Host interop
    # ---------------------------------------------------------------------
    def to_numpy(self) -> Any:
        """
        Return a writable copy of the tensor contents as a NumPy array.
        """
        ...
