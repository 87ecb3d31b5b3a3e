"""
Tensor mixins.

The concrete `Tensor` class assembles its public surface from these mixins:

- ``TensorMixinArithmetic`` : ``+ - * / **`` and unary ``-`` with broadcasting
- ``TensorMixinReduction``  : ``reduce`` / ``sum`` / ``mean`` / ``var`` / ``max``
- ``TensorMixinMemory``     : ``reshape`` / ``broadcast_to`` / ``sum_to`` /
                              ``transpose`` / ``slice_range`` / ``pad_range``
- ``TensorMixinUnary``      : elementwise transforms and ``softmax``

The mixins never import `Tensor`; new tensors are built through the host's
``_from_array`` constructor to avoid circular imports.
"""

from ._arithmetic import TensorMixinArithmetic
from ._memory import TensorMixinMemory
from ._reduction import TensorMixinReduction
from ._unary import TensorMixinUnary

__all__ = [
    TensorMixinArithmetic.__name__,
    TensorMixinMemory.__name__,
    TensorMixinReduction.__name__,
    TensorMixinUnary.__name__,
]
