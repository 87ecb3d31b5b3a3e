"""
Finite-difference gradient checking.

`gradcheck` compares the gradients produced by the backward engine against a
central-difference estimate of the same quantity. To exercise every output
element with a different weight, the scalar being differentiated is
``sum(fn(*inputs) * w)`` for a random upstream gradient ``w``; the analytic
side seeds `backward` with that same ``w``.

Both sides run in float64 regardless of `Config.dtype`.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import numpy as np

from .._config import no_grad, using_config
from ..tensor import Tensor
from ._variable import Variable


def _to_array(x: Any) -> np.ndarray:
    if isinstance(x, Variable):
        x = x.value
    if isinstance(x, Tensor):
        return x.to_numpy().astype(np.float64)
    return np.array(x, dtype=np.float64)


def numerical_grad(
    fn: Callable[..., Variable],
    inputs: Sequence[Any],
    index: int = 0,
    eps: float = 1e-6,
    grad_out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Central-difference gradient of ``sum(fn(*inputs) * grad_out)``.

    Parameters
    ----------
    fn : Callable[..., Variable]
        Function of Variables returning a Variable.
    inputs : Sequence
        Input values (Tensors, Variables, arrays or scalars).
    index : int, optional
        Which input to differentiate with respect to.
    eps : float, optional
        Finite-difference step.
    grad_out : Optional[np.ndarray], optional
        Upstream weights, broadcast against the output. Defaults to ones.

    Returns
    -------
    np.ndarray
        Estimated gradient with the shape of ``inputs[index]``.
    """
    arrays = [_to_array(x) for x in inputs]
    target = arrays[index]

    def objective() -> float:
        with using_config("dtype", np.float64), no_grad():
            y = fn(*[Variable(a, requires_grad=False) for a in arrays])
        out = y.value.to_numpy()
        w = np.ones_like(out) if grad_out is None else grad_out
        return float(np.sum(out * w))

    grad = np.zeros_like(target)
    it = np.nditer(target, flags=["multi_index"])
    for _ in it:
        idx = it.multi_index
        orig = target[idx]
        target[idx] = orig + eps
        f_plus = objective()
        target[idx] = orig - eps
        f_minus = objective()
        target[idx] = orig
        grad[idx] = (f_plus - f_minus) / (2.0 * eps)
    return grad


def gradcheck(
    fn: Callable[..., Variable],
    inputs: Sequence[Any],
    eps: float = 1e-6,
    atol: float = 1e-5,
    rtol: float = 1e-4,
    seed: int = 0,
    raise_exception: bool = True,
) -> bool:
    """
    Check analytic gradients of `fn` against finite differences.

    Parameters
    ----------
    fn : Callable[..., Variable]
        Function of Variables returning a Variable. It must build fresh
        Function instances on every call (the functional wrappers do).
    inputs : Sequence
        Input values; every input is differentiated.
    eps, atol, rtol : float, optional
        Finite-difference step and comparison tolerances.
    seed : int, optional
        Seed for the random upstream gradient.
    raise_exception : bool, optional
        Raise `AssertionError` describing the first mismatch instead of
        returning False.

    Returns
    -------
    bool
        True if every input gradient matches.
    """
    arrays = [_to_array(x) for x in inputs]

    with using_config("dtype", np.float64):
        xs = [Variable(a) for a in arrays]
        y = fn(*xs)
        w = np.random.default_rng(seed).standard_normal(y.shape.dims)
        y.backward(Tensor(w))

    for i, x in enumerate(xs):
        analytic = np.zeros_like(arrays[i]) if x.grad is None else x.grad.to_numpy()
        numeric = numerical_grad(fn, arrays, index=i, eps=eps, grad_out=w)
        if not np.allclose(analytic, numeric, atol=atol, rtol=rtol):
            if raise_exception:
                err = np.max(np.abs(analytic - numeric))
                raise AssertionError(
                    f"gradient mismatch for input {i} (max abs error {err:.3e})\n"
                    f"analytic:\n{analytic}\nnumeric:\n{numeric}"
                )
            return False
    return True
