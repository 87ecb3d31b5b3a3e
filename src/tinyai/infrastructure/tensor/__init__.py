from ._shape import Shape
from ._tensor import Tensor

__all__ = [Shape.__name__, Tensor.__name__]
