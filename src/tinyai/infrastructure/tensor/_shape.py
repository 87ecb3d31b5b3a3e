"""
Immutable dimension descriptor for tensors.

`Shape` wraps a tuple of positive dimensions and provides the geometry helpers
the rest of the library builds on: row-major strides and flat offsets, rank
classification, axis normalization, and the NumPy-style broadcasting rule.

Broadcasting rule
-----------------
Two shapes are compatible if, aligning from the trailing dimension, each pair
of dimensions is either equal or one of them is 1. The result dimension is the
max of the pair; missing leading dimensions behave as 1.
"""

from __future__ import annotations

from typing import Iterator, Sequence, Union

import numpy as np

from ...domain._errors import ShapeMismatchError, TensorIndexError

ShapeLike = Union["Shape", Sequence[int]]


class Shape:
    """
    Immutable, hashable tensor shape.

    Parameters
    ----------
    dims : Sequence[int]
        Dimensions, outermost first. Every dimension must be an integer >= 1.
        An empty sequence describes a rank-0 (scalar) shape.

    Notes
    -----
    - A `Shape` compares equal to another `Shape` *or* to a plain tuple/list
      with the same dimensions, so ``tensor.shape == (2, 3)`` works.
    - Reshaping or broadcasting never mutates a `Shape`; they produce new ones.
    """

    __slots__ = ("_dims",)

    def __init__(self, dims: Sequence[int] = ()) -> None:
        normalized = []
        for d in dims:
            if isinstance(d, bool) or int(d) != d:
                raise ValueError(f"Shape dimensions must be integers, got {dims!r}")
            if int(d) < 1:
                raise ValueError(f"Shape dimensions must be >= 1, got {tuple(dims)!r}")
            normalized.append(int(d))
        object.__setattr__(self, "_dims", tuple(normalized))

    @classmethod
    def of(cls, shape: ShapeLike) -> "Shape":
        """Coerce a Shape or a sequence of ints into a Shape."""
        if isinstance(shape, Shape):
            return shape
        if isinstance(shape, (int, np.integer)):
            return cls((shape,))
        return cls(tuple(shape))

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Shape is immutable")

    # ------------------------------------------------------------------
    # Basic metadata
    # ------------------------------------------------------------------
    @property
    def dims(self) -> tuple[int, ...]:
        return self._dims

    @property
    def rank(self) -> int:
        return len(self._dims)

    @property
    def size(self) -> int:
        n = 1
        for d in self._dims:
            n *= d
        return n

    @property
    def is_scalar(self) -> bool:
        return self.rank == 0 or self.size == 1

    @property
    def is_vector(self) -> bool:
        return self.rank == 1

    @property
    def is_matrix(self) -> bool:
        return self.rank == 2

    @property
    def row_count(self) -> int:
        self._require_matrix("row_count")
        return self._dims[0]

    @property
    def col_count(self) -> int:
        self._require_matrix("col_count")
        return self._dims[1]

    @property
    def strides(self) -> tuple[int, ...]:
        """Row-major strides in elements (last dimension varies fastest)."""
        strides = [1] * self.rank
        for i in range(self.rank - 2, -1, -1):
            strides[i] = strides[i + 1] * self._dims[i + 1]
        return tuple(strides)

    def _require_matrix(self, what: str) -> None:
        if not self.is_matrix:
            raise ShapeMismatchError(what, self._dims, (None, None), "rank-2 shape required")

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------
    def index(self, *indices: int) -> int:
        """
        Convert a multi-index into its flat row-major offset.

        Raises
        ------
        TensorIndexError
            If the number of indices differs from the rank, or any index is
            outside ``[0, dim)``.
        """
        if len(indices) != self.rank:
            raise TensorIndexError(len(indices), self.rank, what="index count")
        offset = 0
        for i, (idx, dim, stride) in enumerate(zip(indices, self._dims, self.strides)):
            if not 0 <= idx < dim:
                raise TensorIndexError(idx, dim, what=f"index on axis {i}")
            offset += idx * stride
        return offset

    def normalize_axis(self, axis: int) -> int:
        """
        Map a possibly negative axis into ``[0, rank)``.

        Raises
        ------
        TensorIndexError
            If `axis` is outside ``[-rank, rank)``.
        """
        if not -self.rank <= axis < self.rank:
            raise TensorIndexError(axis, self.rank)
        return axis % self.rank

    def drop_axis(self, axis: int) -> "Shape":
        """Return the shape with `axis` removed (following axes shift down)."""
        ax = self.normalize_axis(axis)
        return Shape(self._dims[:ax] + self._dims[ax + 1 :])

    def keep_axis(self, axis: int) -> "Shape":
        """Return the shape with `axis` collapsed to size 1."""
        ax = self.normalize_axis(axis)
        return Shape(self._dims[:ax] + (1,) + self._dims[ax + 1 :])

    # ------------------------------------------------------------------
    # Broadcasting
    # ------------------------------------------------------------------
    def is_broadcastable_to(self, other: ShapeLike) -> bool:
        """
        Return True if `self` can be expanded into `other`.

        Unlike the symmetric compatibility test, the target shape is fixed:
        each trailing-aligned dimension of `self` must be 1 or equal to the
        target dimension, and `self` may not have more dimensions than `other`.
        """
        target = Shape.of(other)
        if self.rank > target.rank:
            return False
        for sd, td in zip(reversed(self._dims), reversed(target.dims)):
            if sd != td and sd != 1:
                return False
        return True

    def broadcast_with(self, other: ShapeLike, op: str = "broadcast") -> "Shape":
        """
        Return the shape produced by broadcasting `self` against `other`.

        Raises
        ------
        ShapeMismatchError
            If some trailing-aligned pair is unequal and neither side is 1.
        """
        rhs = Shape.of(other)
        rank = max(self.rank, rhs.rank)
        a = (1,) * (rank - self.rank) + self._dims
        b = (1,) * (rank - rhs.rank) + rhs.dims
        out = []
        for da, db in zip(a, b):
            if da != db and da != 1 and db != 1:
                raise ShapeMismatchError(op, self._dims, rhs.dims)
            out.append(max(da, db))
        return Shape(out)

    # ------------------------------------------------------------------
    # Sequence / value protocol
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return self.rank

    def __iter__(self) -> Iterator[int]:
        return iter(self._dims)

    def __getitem__(self, i: int) -> int:
        return self._dims[i]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Shape):
            return self._dims == other._dims
        if isinstance(other, (tuple, list)):
            return self._dims == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._dims)

    def __repr__(self) -> str:
        return f"Shape{self._dims}"
