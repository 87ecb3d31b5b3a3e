"""
Reverse-mode backward engine.

`run_backward` propagates gradients from a terminal Variable to every node it
depends on. Pending functions are kept in a max-heap keyed on generation, so a
function is only processed after every function that consumes its output:
a Variable used by several operations (fan-out, diamonds) has received all of
its contributions before its own creator runs.

Gradient bookkeeping
--------------------
- Leaves (no creator) accumulate across passes until `zero_grad()`.
- Interior nodes hold the gradient of the current pass only: their first
  contribution in a pass replaces whatever an earlier pass left behind, and
  later contributions in the same pass accumulate.
- Inputs with ``requires_grad=False`` are skipped entirely.

Graph release
-------------
Unless ``retain_graph=True``, every function processed by a successful pass is
unchained afterwards. A later `backward()` on the same terminal finds no
creator and does nothing.

Gradients produced during a pass are staged and written into the Variables
only once every backward rule has succeeded. If a rule raises, no gradient
changes and the graph is left intact.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import TYPE_CHECKING, Any, Optional

from ...domain._errors import ShapeMismatchError
from ..tensor import Tensor

if TYPE_CHECKING:
    from ._function import Function
    from ._variable import Variable

logger = logging.getLogger(__name__)


def _seed(root: "Variable", grad_out: Optional[Any]) -> Tensor:
    if grad_out is None:
        if root.grad is not None:
            return root.grad
        return Tensor.ones_like(root.value)

    from ._variable import Variable

    seed = grad_out.value if isinstance(grad_out, Variable) else grad_out
    if not isinstance(seed, Tensor):
        seed = Tensor(seed)
    if seed.shape != root.value.shape:
        raise ShapeMismatchError("backward", root.value.shape, seed.shape, "seed gradient")
    return seed


def run_backward(
    root: "Variable", grad_out: Optional[Any] = None, retain_graph: bool = False
) -> None:
    """
    Backpropagate from `root` through the recorded graph.

    Parameters
    ----------
    root : Variable
        Terminal node. Its gradient is set to the seed.
    grad_out : Optional[Tensor], optional
        Seed gradient; see `Variable.backward` for the default.
    retain_graph : bool, optional
        If False (default), unchain every processed function after a
        successful pass.

    Raises
    ------
    ShapeMismatchError
        If the seed or any produced gradient has the wrong shape.
    ArityError
        If a backward rule returns the wrong number of gradients.
    """
    seed = _seed(root, grad_out)

    if root.creator is None:
        root.grad = seed
        logger.debug(
            "backward on %s: no creator (leaf or released graph), nothing to do",
            root.name or "<variable>",
        )
        return

    logger.debug(
        "backward from %s: seed shape %s, generation %d",
        root.name or "<variable>",
        seed.shape.dims,
        root.generation,
    )

    heap: list[tuple[int, int, "Function"]] = []
    enqueued: set[int] = set()
    counter = itertools.count()

    def push(fn: "Function") -> None:
        if id(fn) in enqueued:
            return
        enqueued.add(id(fn))
        heapq.heappush(heap, (-fn.generation, next(counter), fn))

    push(root.creator)
    # gradients of this pass, keyed by id(var); committed only after the loop
    staged: dict[int, tuple["Variable", Tensor]] = {id(root): (root, seed)}
    processed: list["Function"] = []

    while heap:
        _, _, fn = heapq.heappop(heap)
        output = fn.output
        grads = fn.run_backward(staged[id(output)][1])
        processed.append(fn)

        for x, g in zip(fn.inputs, grads):
            if g is None or not x.requires_grad:
                continue
            prev = staged.get(id(x))
            staged[id(x)] = (x, g if prev is None else prev[1] + g)
            if x.creator is not None:
                push(x.creator)

    logger.debug("backward pass processed %d functions", len(processed))

    for var, g in staged.values():
        if var.creator is None:
            var.accumulate_grad(g)
        else:
            var.grad = g

    if not retain_graph:
        for fn in processed:
            fn.unchain()
        logger.debug("released %d functions after backward", len(processed))
