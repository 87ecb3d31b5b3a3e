"""
Concrete Tensor implementation (NumPy backend).

This module provides `Tensor`, the dense multidimensional value type of
tinyai. A Tensor owns a C-contiguous NumPy buffer and an immutable `Shape`
describing it. Its public surface is assembled from the mixins in
`tinyai.infrastructure.tensor.mixins`; this module holds construction,
factories, host interop, the broadcasting binary primitive and matrix
multiplication.

Design notes
------------
- Tensors have value semantics: every operation allocates and returns a new
  Tensor, and nothing in the library writes into an existing buffer. `data`
  is exposed as a read-only view.
- Tensors carry no autograd state. Gradient bookkeeping lives on `Variable`
  in `tinyai.infrastructure.autograd`.
- `__array_ufunc__ = None` makes NumPy defer to the reflected operators, so
  ``ndarray + Tensor`` returns a Tensor instead of an object array.
"""

from __future__ import annotations

import numbers
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from ...domain._errors import ShapeMismatchError
from ...domain._tensor import ITensor
from .._config import Config
from ._shape import Shape
from .mixins import (
    TensorMixinArithmetic,
    TensorMixinMemory,
    TensorMixinReduction,
    TensorMixinUnary,
)

Number = Union[int, float]
ShapeLike = Union[Shape, Sequence[int], int]

_OPERAND_TYPES = (numbers.Number, np.ndarray, np.generic, list, tuple)


class Tensor(
    TensorMixinArithmetic,
    TensorMixinReduction,
    TensorMixinMemory,
    TensorMixinUnary,
    ITensor,
):
    """
    Dense floating-point tensor backed by a NumPy array.

    Parameters
    ----------
    data : array-like, Tensor or Number
        Initial contents. The values are copied.
    shape : ShapeLike, optional
        If given, the (flat or nested) data is laid out in this shape. The
        element count must match.
    dtype : np.dtype-like, optional
        Floating-point element type. Defaults to `Config.dtype`.

    Raises
    ------
    ShapeMismatchError
        If `shape` is given and its size differs from the number of elements.
    ValueError
        If the resulting shape has a zero-sized dimension.

    Notes
    -----
    Invariant: ``data.size == shape.size`` for every Tensor.
    """

    __array_ufunc__ = None

    def __init__(
        self,
        data: Any,
        shape: Optional[ShapeLike] = None,
        dtype: Optional[Any] = None,
    ) -> None:
        if isinstance(data, Tensor):
            data = data._data
        dt = np.dtype(dtype) if dtype is not None else Config.dtype
        if dt.kind != "f":
            raise TypeError(f"Tensor dtype must be floating point, got {dt}")

        arr = np.array(data, dtype=dt)
        if shape is not None:
            target = Shape.of(shape)
            if arr.size != target.size:
                raise ShapeMismatchError(
                    "Tensor", arr.shape, target.dims, "element count differs"
                )
            arr = arr.reshape(target.dims)

        self._shape = Shape(arr.shape)
        self._data = np.ascontiguousarray(arr)

    @classmethod
    def _from_array(cls, arr: np.ndarray) -> "Tensor":
        """
        Wrap a freshly computed array without copying it.

        Callers must not keep other references to `arr`. Non-floating results
        are cast to `Config.dtype`.
        """
        arr = np.asarray(arr)
        if arr.dtype.kind != "f":
            arr = arr.astype(Config.dtype)
        out = cls.__new__(cls)
        out._shape = Shape(arr.shape)
        out._data = np.ascontiguousarray(arr)
        return out

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @classmethod
    def full(cls, shape: ShapeLike, value: float, dtype: Optional[Any] = None) -> "Tensor":
        dims = Shape.of(shape).dims
        dt = dtype if dtype is not None else Config.dtype
        return cls._from_array(np.full(dims, value, dtype=dt))

    @classmethod
    def zeros(cls, shape: ShapeLike, dtype: Optional[Any] = None) -> "Tensor":
        return cls.full(shape, 0.0, dtype=dtype)

    @classmethod
    def ones(cls, shape: ShapeLike, dtype: Optional[Any] = None) -> "Tensor":
        return cls.full(shape, 1.0, dtype=dtype)

    @classmethod
    def zeros_like(cls, other: "Tensor") -> "Tensor":
        return cls.full(other.shape, 0.0, dtype=other.dtype)

    @classmethod
    def ones_like(cls, other: "Tensor") -> "Tensor":
        return cls.full(other.shape, 1.0, dtype=other.dtype)

    @classmethod
    def rand(
        cls, shape: ShapeLike, *, rng: Optional[np.random.Generator] = None
    ) -> "Tensor":
        """Uniform samples in ``[0, 1)``."""
        gen = rng if rng is not None else np.random.default_rng()
        dims = Shape.of(shape).dims
        return cls._from_array(gen.random(dims).astype(Config.dtype))

    @classmethod
    def randn(
        cls, shape: ShapeLike, *, rng: Optional[np.random.Generator] = None
    ) -> "Tensor":
        """Standard normal samples."""
        gen = rng if rng is not None else np.random.default_rng()
        dims = Shape.of(shape).dims
        return cls._from_array(gen.standard_normal(dims).astype(Config.dtype))

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Tensor":
        """Copy a NumPy array into a new Tensor, keeping floating dtypes."""
        arr = np.asarray(arr)
        return cls(arr, dtype=arr.dtype if arr.dtype.kind == "f" else None)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def ndim(self) -> int:
        return self._shape.rank

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def data(self) -> np.ndarray:
        """
        Read-only view of the underlying buffer.

        Use `to_numpy()` for a writable copy.
        """
        view = self._data.view()
        view.flags.writeable = False
        return view

    def numel(self) -> int:
        return self._shape.size

    def __len__(self) -> int:
        if self._shape.rank == 0:
            raise TypeError("len() of a rank-0 tensor")
        return self._shape[0]

    # ------------------------------------------------------------------
    # Host interop
    # ------------------------------------------------------------------
    def to_numpy(self) -> np.ndarray:
        return self._data.copy()

    def tolist(self) -> Any:
        return self._data.tolist()

    def item(self) -> float:
        """
        Return the single element of a size-1 tensor as a Python float.

        Raises
        ------
        ValueError
            If the tensor holds more than one element.
        """
        if self._shape.size != 1:
            raise ValueError(
                f"item() requires a tensor with one element, got shape {self._shape.dims}"
            )
        return float(self._data.reshape(()))

    def __array__(self, dtype: Optional[Any] = None, copy: Optional[bool] = None) -> np.ndarray:
        return self._data.astype(dtype) if dtype is not None else self._data.copy()

    def allclose(
        self, other: Union["Tensor", Any], rtol: float = 1e-5, atol: float = 1e-8
    ) -> bool:
        """
        Return True if shapes match exactly and all elements are close.
        """
        rhs = other if isinstance(other, Tensor) else Tensor(other)
        if rhs.shape != self._shape:
            return False
        return bool(np.allclose(self._data, rhs._data, rtol=rtol, atol=atol))

    def __repr__(self) -> str:
        body = np.array2string(self._data, precision=4, separator=", ")
        return f"Tensor(shape={self._shape.dims}, data={body})"

    # ------------------------------------------------------------------
    # Binary primitives
    # ------------------------------------------------------------------
    def _coerce(self, other: Union["Tensor", Number, Any]) -> "Tensor":
        if isinstance(other, Tensor):
            return other
        return Tensor(other, dtype=self.dtype)

    def elementwise_binary(
        self,
        other: Union["Tensor", Number],
        op: Callable[[np.ndarray, np.ndarray], np.ndarray],
        name: str = "elementwise",
    ) -> "Tensor":
        """
        Broadcast `self` and `other` to a common shape and apply `op` pairwise.

        Parameters
        ----------
        other : Union[Tensor, Number]
            Right-hand operand. Scalars are promoted to rank-0 tensors.
        op : Callable[[ndarray, ndarray], ndarray]
            Elementwise function applied to the two broadcast buffers.
        name : str, optional
            Operation name used in error messages.

        Returns
        -------
        Tensor
            Result with the broadcast shape.

        Raises
        ------
        ShapeMismatchError
            If the shapes are not broadcast-compatible.

        Notes
        -----
        Unsupported operand types yield `NotImplemented`, so the other
        operand's reflected operator (e.g., `Variable.__radd__`) gets a turn.
        """
        if not isinstance(other, (Tensor,) + _OPERAND_TYPES):
            return NotImplemented
        rhs = self._coerce(other)
        out_shape = self._shape.broadcast_with(rhs._shape, op=name)
        a = np.broadcast_to(self._data, out_shape.dims)
        b = np.broadcast_to(rhs._data, out_shape.dims)
        return Tensor._from_array(np.asarray(op(a, b)))

    def matmul(self, other: "Tensor") -> "Tensor":
        """
        Matrix product over the last two axes.

        Operands must have rank >= 2 and agreeing inner dimensions
        (``self.shape[-1] == other.shape[-2]``). Leading (batch) dimensions
        must be broadcast-compatible; equal batch dims and a rank-2 right
        operand against a batched left operand are the common cases.

        Raises
        ------
        ShapeMismatchError
            If the operands cannot be multiplied.
        """
        rhs = self._coerce(other)
        if self._shape.rank < 2 or rhs._shape.rank < 2:
            raise ShapeMismatchError(
                "matmul", self._shape.dims, rhs._shape.dims, "operands must have rank >= 2"
            )
        if self._shape[-1] != rhs._shape[-2]:
            raise ShapeMismatchError(
                "matmul", self._shape.dims, rhs._shape.dims, "inner dimensions differ"
            )
        Shape(self._shape.dims[:-2]).broadcast_with(rhs._shape.dims[:-2], op="matmul")
        return Tensor._from_array(np.matmul(self._data, rhs._data))

    def __matmul__(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, (Tensor,) + _OPERAND_TYPES):
            return NotImplemented
        return self.matmul(other)

    def __rmatmul__(self, other: Any) -> "Tensor":
        if not isinstance(other, _OPERAND_TYPES):
            return NotImplemented
        return self._coerce(other).matmul(self)
