"""
Shape-transforming operations for Tensor.

This module implements :class:`TensorMixinMemory`: reshape, explicit
broadcasting, its inverse `sum_to`, matrix transpose and the axis-range
slicing pair (`slice_range` / `pad_range`) used by slicing functions.

All operations materialize a new buffer; none returns a view into the
source tensor.
"""

from __future__ import annotations

from abc import ABC
from typing import Sequence, Union

import numpy as np

from ....domain._errors import ShapeMismatchError, TensorIndexError
from ....domain._tensor import ITensor
from .._shape import Shape

ShapeLike = Union[Shape, Sequence[int], int]


def _as_shape(shape: tuple) -> Shape:
    # accepts reshape((2, 3)), reshape(Shape(...)) and reshape(2, 3)
    if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
        return Shape.of(shape[0])
    return Shape.of(shape)


def _sum_to_reduce_axes(
    src_shape: Shape, target_shape: Shape
) -> tuple[tuple[int, ...], int]:
    """
    Compute the reduction axes that undo a broadcast from `target_shape` to
    `src_shape`.

    Returns
    -------
    reduce_axes:
        Axes of the source to sum with ``keepdims=True``: every leading axis
        that broadcasting prepended, plus every axis where the target has size
        1 and the source does not.
    pad:
        Number of leading axes broadcasting prepended.

    Raises
    ------
    ShapeMismatchError
        If `target_shape` could not have been broadcast to `src_shape`.
    """
    if not target_shape.is_broadcastable_to(src_shape):
        raise ShapeMismatchError("sum_to", src_shape.dims, target_shape.dims)

    pad = src_shape.rank - target_shape.rank
    padded_tgt = (1,) * pad + target_shape.dims
    reduce_axes = tuple(
        i
        for i, (sd, td) in enumerate(zip(src_shape.dims, padded_tgt))
        if i < pad or (td == 1 and sd != 1)
    )
    return reduce_axes, pad


def clamp_range(start: int, end: int, dim: int) -> tuple[int, int]:
    """
    Resolve a half-open ``[start, end)`` range against an axis of length `dim`.

    Negative bounds count from the end; both bounds are clamped to
    ``[0, dim]``.

    Raises
    ------
    TensorIndexError
        If the clamped range is empty.
    """
    lo = start + dim if start < 0 else start
    hi = end + dim if end < 0 else end
    lo = min(max(lo, 0), dim)
    hi = min(max(hi, 0), dim)
    if lo >= hi:
        raise TensorIndexError((start, end), dim, what="slice range")
    return lo, hi


class TensorMixinMemory(ABC):
    """
    Shape-only transforms for tensors.

    Notes
    -----
    The host class must provide `shape`, `_data` and `_from_array(arr)`.
    """

    def reshape(self: ITensor, *shape: ShapeLike) -> ITensor:
        """
        Return a tensor with the same elements laid out in a new shape.

        Parameters
        ----------
        *shape : ShapeLike
            Either a single Shape / tuple, or the dimensions as separate ints.

        Raises
        ------
        ShapeMismatchError
            If the element count of the new shape differs.
        """
        target = _as_shape(shape)
        if target.size != self.shape.size:
            raise ShapeMismatchError(
                "reshape", self.shape.dims, target.dims, "element count differs"
            )
        return self._from_array(self._data.reshape(target.dims))

    def broadcast_to(self: ITensor, shape: ShapeLike) -> ITensor:
        """
        Expand this tensor to `shape` following the broadcasting rule.

        Raises
        ------
        ShapeMismatchError
            If `self.shape` is not broadcastable to `shape`.
        """
        target = Shape.of(shape)
        if not self.shape.is_broadcastable_to(target):
            raise ShapeMismatchError("broadcast_to", self.shape.dims, target.dims)
        return self._from_array(np.broadcast_to(self._data, target.dims).copy())

    def sum_to(self: ITensor, shape: ShapeLike) -> ITensor:
        """
        Sum-reduce this tensor down to `shape` (the inverse of `broadcast_to`).

        This is the un-broadcast step of autograd: if a value of shape `shape`
        was broadcast to `self.shape` in the forward pass, summing the gradient
        over the broadcast axes yields the gradient of the original value.

        Raises
        ------
        ShapeMismatchError
            If `shape` could not have been broadcast to `self.shape`.
        """
        target = Shape.of(shape)
        if target == self.shape:
            return self._from_array(self._data.copy())

        reduce_axes, _ = _sum_to_reduce_axes(self.shape, target)
        out = self._data
        if reduce_axes:
            out = np.sum(out, axis=reduce_axes, keepdims=True)
        return self._from_array(np.reshape(out, target.dims))

    def transpose(self: ITensor) -> ITensor:
        """
        Swap the last two axes (matrix transpose, batched for rank > 2).

        Tensors of rank < 2 are returned as an unchanged copy.
        """
        if self.shape.rank < 2:
            return self._from_array(self._data.copy())
        return self._from_array(np.ascontiguousarray(np.swapaxes(self._data, -1, -2)))

    @property
    def T(self: ITensor) -> ITensor:
        return self.transpose()

    def slice_range(self: ITensor, axis: int, start: int, end: int) -> ITensor:
        """
        Take the half-open range ``[start, end)`` along `axis`.

        Negative bounds count from the end of the axis; bounds are clamped to
        the axis length.

        Raises
        ------
        TensorIndexError
            If `axis` is out of range, or the clamped range is empty.
        """
        ax = self.shape.normalize_axis(axis)
        lo, hi = clamp_range(start, end, self.shape[ax])
        index = [slice(None)] * self.shape.rank
        index[ax] = slice(lo, hi)
        return self._from_array(self._data[tuple(index)].copy())

    def pad_range(self: ITensor, shape: ShapeLike, axis: int, start: int) -> ITensor:
        """
        Embed this tensor into zeros of `shape`, starting at `start` on `axis`.

        This is the adjoint of `slice_range`: every position not covered by
        this tensor is zero.

        Raises
        ------
        ShapeMismatchError
            If the tensor does not fit into `shape` at the given offset.
        """
        target = Shape.of(shape)
        ax = target.normalize_axis(axis)
        fits = self.shape.rank == target.rank and all(
            sd == td for i, (sd, td) in enumerate(zip(self.shape, target)) if i != ax
        )
        if not fits or not 0 <= start <= target[ax] - self.shape[ax]:
            raise ShapeMismatchError(
                "pad_range", self.shape.dims, target.dims, f"offset {start} on axis {ax}"
            )

        out = np.zeros(target.dims, dtype=self._data.dtype)
        index = [slice(None)] * target.rank
        index[ax] = slice(start, start + self.shape[ax])
        out[tuple(index)] = self._data
        return self._from_array(out)
