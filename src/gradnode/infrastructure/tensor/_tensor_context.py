from typing import Any
from dataclasses import dataclass, field

import numpy as np


@dataclass
class Context:
    """
    Saved state owned by a single operation instance.

    A `Context` records what an operation needs from its forward pass in order
    to compute gradients later (copies of input buffers, input shapes, masks).

    Attributes
    ----------
    saved_arrays : list[np.ndarray]
        Buffers saved during the forward pass. These are copies, so later
        in-place parameter updates cannot change an already-recorded graph.
    saved_meta : dict[str, Any]
        Non-buffer metadata required for backward (e.g., shapes, flags).

    Notes
    -----
    Unlike the output node's parents, saved arrays include operands that do not
    require gradients; `Multiply` needs the other operand's values either way.
    """

    saved_arrays: list[np.ndarray] = field(default_factory=list)
    saved_meta: dict[str, Any] = field(default_factory=dict)

    def save_for_backward(self, *arrays: np.ndarray) -> None:
        """
        Save copies of buffers for use during the backward computation.

        Parameters
        ----------
        *arrays : np.ndarray
            Any number of buffers to be stored in `saved_arrays`.
        """
        self.saved_arrays.extend(np.array(a, copy=True) for a in arrays)
