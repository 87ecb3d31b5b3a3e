"""
Backend-agnostic contracts for tinyai.

This package holds the structural protocols (`ITensor`, `IVariable`), the
abstract `Function` interface and the error taxonomy. Nothing here imports
NumPy or any concrete implementation.
"""

from ._errors import ArityError, FunctionStateError, ShapeMismatchError, TensorIndexError
from ._function import ARBITRARY_INPUT_COUNT, Function
from ._tensor import ITensor
from ._variable import IVariable

__all__ = [
    ArityError.__name__,
    FunctionStateError.__name__,
    ShapeMismatchError.__name__,
    TensorIndexError.__name__,
    Function.__name__,
    ITensor.__name__,
    IVariable.__name__,
    "ARBITRARY_INPUT_COUNT",
]
