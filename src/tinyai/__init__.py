"""
tinyai: a small reverse-mode automatic differentiation core.

Typical usage
-------------
    from tinyai import Variable

    a, b, c = Variable(1.0), Variable(2.0), Variable(3.0)
    y = (a + b) * c
    y.backward()
    c.grad.item()   # 3.0
"""

import logging

from .domain import (
    ARBITRARY_INPUT_COUNT,
    ArityError,
    FunctionStateError,
    ShapeMismatchError,
    TensorIndexError,
)
from .infrastructure import (
    Config,
    Context,
    Function,
    Shape,
    Tensor,
    Variable,
    as_variable,
    functions,
    gradcheck,
    is_grad_enabled,
    no_grad,
    numerical_grad,
    set_grad_enabled,
    using_config,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "ARBITRARY_INPUT_COUNT",
    ArityError.__name__,
    FunctionStateError.__name__,
    ShapeMismatchError.__name__,
    TensorIndexError.__name__,
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
