"""
Runtime configuration for graph recording and numeric precision.

Two settings are exposed:

- `enable_backprop`: whether applying a Function records graph edges. When
  disabled, outputs carry no creator and backward stops at them. The flag is
  thread-local so independent graphs can be built concurrently.
- `dtype`: the floating-point dtype used for every new Tensor buffer. It
  defaults to float64 (numerical gradient checks need the precision) and can
  be overridden with the ``TINYAI_DTYPE`` environment variable at import time.

Typical usage
-------------
    with no_grad():
        y = model(x)          # no graph is recorded

    @no_grad()
    def evaluate(...): ...
"""

from __future__ import annotations

import contextlib
import functools
import os
import threading
from typing import Any, Callable, Iterator, TypeVar

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])


def _dtype_from_env() -> np.dtype:
    name = os.environ.get("TINYAI_DTYPE", "float64")
    dtype = np.dtype(name)
    if dtype.kind != "f":
        raise ValueError(f"TINYAI_DTYPE must name a floating dtype, got {name!r}")
    return dtype


class _ThreadLocalFlags(threading.local):
    enable_backprop: bool = True


class Config:
    """
    Process-wide configuration namespace.

    Attributes
    ----------
    dtype : np.dtype
        Buffer dtype for newly constructed tensors.

    Notes
    -----
    `enable_backprop` is stored per thread; read and write it through
    `is_grad_enabled` / `set_grad_enabled` or the `using_config` context
    manager.
    """

    dtype: np.dtype = _dtype_from_env()
    _flags = _ThreadLocalFlags()


def is_grad_enabled() -> bool:
    """Return True if Function applications currently record graph edges."""
    return Config._flags.enable_backprop


def set_grad_enabled(mode: bool) -> None:
    """Enable or disable graph recording for the current thread."""
    Config._flags.enable_backprop = bool(mode)


@contextlib.contextmanager
def using_config(name: str, value: Any) -> Iterator[None]:
    """
    Temporarily override a configuration entry.

    Parameters
    ----------
    name : str
        Either "enable_backprop" or "dtype".
    value : Any
        Temporary value; restored on exit even if the block raises.
    """
    if name == "enable_backprop":
        prev = is_grad_enabled()
        set_grad_enabled(value)
        try:
            yield
        finally:
            set_grad_enabled(prev)
        return

    if name == "dtype":
        prev_dtype = Config.dtype
        Config.dtype = np.dtype(value)
        try:
            yield
        finally:
            Config.dtype = prev_dtype
        return

    raise KeyError(f"Unknown config entry: {name!r}")


class no_grad:
    """Context manager / decorator that disables graph recording."""

    def __enter__(self) -> "no_grad":
        self._prev = is_grad_enabled()
        set_grad_enabled(False)
        return self

    def __exit__(self, *args: Any) -> None:
        set_grad_enabled(self._prev)

    def __call__(self, fn: F) -> F:
        @functools.wraps(fn)
        def wrapper(*a: Any, **kw: Any) -> Any:
            with no_grad():
                return fn(*a, **kw)

        return wrapper  # type: ignore[return-value]
