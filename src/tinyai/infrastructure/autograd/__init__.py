"""
Autograd core: graph nodes, the Function base class and the backward engine.

Import order matters here: `Variable` must exist before `Function`, which
links outputs to their creators.
"""

from ._context import Context
from ._engine import run_backward
from ._variable import Variable, as_variable
from ._function import Function
from ._gradcheck import gradcheck, numerical_grad

__all__ = [
    Context.__name__,
    Function.__name__,
    Variable.__name__,
    as_variable.__name__,
    gradcheck.__name__,
    numerical_grad.__name__,
    run_backward.__name__,
]
