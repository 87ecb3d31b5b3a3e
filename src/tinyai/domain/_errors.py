"""
Shape-, index- and graph-related exceptions for tinyai.

This module defines the error taxonomy used by the tensor library and the
autograd core. Every error is raised synchronously at the point where the
violation is detected and is surfaced to the caller unmodified; nothing in
the core retries or coerces a failing operation.

The classes derive from the closest built-in exception so callers that only
know Python's standard hierarchy (``ValueError``, ``IndexError``,
``TypeError``, ``RuntimeError``) can still catch them.
"""

from __future__ import annotations

from typing import Any, Optional


class ShapeMismatchError(ValueError):
    """
    Raised when tensor shapes are incompatible for an operation.

    Typical sources are broadcast failures in elementwise ops, reshapes that do
    not preserve the element count, matrix multiplications with disagreeing
    inner dimensions, and gradients whose shape does not match the input they
    are meant for.

    Attributes
    ----------
    op : str
        Name of the operation that detected the mismatch (e.g., "add").
    lhs : Any
        Shape of the first operand (or the source shape).
    rhs : Any
        Shape of the second operand (or the requested target shape).
    """

    def __init__(
        self, op: str, lhs: Any, rhs: Any, detail: Optional[str] = None
    ) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        lhs : Any
            First / source shape.
        rhs : Any
            Second / target shape.
        detail : Optional[str], optional
            Extra context appended to the message.
        """
        msg = f"{op}: incompatible shapes {tuple(lhs)} and {tuple(rhs)}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
        self.op = op
        self.lhs = tuple(lhs)
        self.rhs = tuple(rhs)


class TensorIndexError(IndexError):
    """
    Raised when an axis or a multi-index is out of range.

    Attributes
    ----------
    index : Any
        The offending axis or index.
    bound : Any
        The valid range (rank for axes, dimension for indices).
    """

    def __init__(self, index: Any, bound: Any, what: str = "axis") -> None:
        super().__init__(f"{what} {index!r} is out of range for {bound!r}")
        self.index = index
        self.bound = bound


class ArityError(TypeError):
    """
    Raised when a Function receives the wrong number of inputs, or when a
    backward rule returns the wrong number of gradients.

    The forward-time check runs before any graph edge is created, so a
    malformed graph is never constructed.

    Attributes
    ----------
    op : str
        Function class name.
    expected : int
        Required count.
    got : int
        Observed count.
    """

    def __init__(self, op: str, expected: int, got: int, what: str = "inputs") -> None:
        super().__init__(f"{op} requires {expected} {what}, but got {got}")
        self.op = op
        self.expected = expected
        self.got = got


class FunctionStateError(RuntimeError):
    """
    Raised when a Function instance is used outside its lifecycle.

    A Function is a single graph edge-set, not a reusable kernel: it may be
    forwarded exactly once, and `backward` is only valid afterwards.
    """
