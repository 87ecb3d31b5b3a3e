from typing import Any
from dataclasses import dataclass, field

from ...domain._tensor import ITensor


@dataclass
class Context:
    """
    Forward-time state saved by a Function for its backward rule.

    A `Context` is owned by exactly one `Function` instance. The function's
    `forward` stores whatever its gradient formula needs, and `backward`
    reads it back.

    Attributes
    ----------
    saved_tensors : list[ITensor]
        Tensors explicitly saved during the forward pass. These may be inputs,
        outputs or transformed values (e.g., masks, cached means).
    saved_meta : dict[str, Any]
        Non-tensor metadata required for backward (e.g., input shapes, axes,
        slice bounds).

    Notes
    -----
    `release()` drops everything once the function has been unchained, so a
    consumed graph does not pin its intermediate buffers.
    """

    saved_tensors: list["ITensor"] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, *tensors: "ITensor") -> None:
        """
        Save tensors for use during the backward computation.

        Parameters
        ----------
        *tensors : ITensor
            Any number of tensors to be appended to `saved_tensors`.
        """
        self.saved_tensors.extend(tensors)

    def release(self) -> None:
        self.saved_tensors.clear()
        self.saved_meta.clear()
