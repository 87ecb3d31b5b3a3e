"""
Concrete NumPy-backed implementations of the tinyai contracts.
"""

from ._config import Config, is_grad_enabled, no_grad, set_grad_enabled, using_config
from .tensor import Shape, Tensor
from .autograd import Context, Function, Variable, as_variable, gradcheck, numerical_grad
from . import functions

__all__ = [
    Config.__name__,
    Context.__name__,
    Function.__name__,
    Shape.__name__,
    Tensor.__name__,
    Variable.__name__,
    as_variable.__name__,
    gradcheck.__name__,
    numerical_grad.__name__,
    is_grad_enabled.__name__,
    set_grad_enabled.__name__,
    using_config.__name__,
    no_grad.__name__,
    "functions",
]
