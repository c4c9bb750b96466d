"""
Shared base class for the concrete tensor operations.

`TensorOperation` implements the graph-linking half of the `Operation`
contract once, so each concrete operation only supplies its numeric forward
and backward formulas.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ...domain._errors import MissingGradientError
from ...domain._operation import Operation
from ..tensor._tensor import Tensor
from ..tensor._tensor_context import Context


class TensorOperation(Operation):
    """
    Base class for operations over NumPy-backed `Tensor` nodes.

    Each instance owns a fresh `Context` for its saved forward state.

    Class Attributes
    ----------------
    name : str
        Operation name used in error messages.
    arity : int
        Number of operand nodes `forward` expects.
    """

    name: str = "op"
    arity: int = 1

    def __init__(self) -> None:
        self.ctx = Context()

    def _check_inputs(self, inputs: Sequence[Tensor]) -> tuple[Tensor, ...]:
        """
        Validate operand count and types.

        Raises
        ------
        TypeError
            If the wrong number of operands is given or an operand is not a
            `Tensor`.
        """
        inputs = tuple(inputs)
        if len(inputs) != self.arity:
            raise TypeError(
                f"{self.name} expects {self.arity} input(s), got {len(inputs)}"
            )
        for i, x in enumerate(inputs):
            if not isinstance(x, Tensor):
                raise TypeError(
                    f"{self.name}: input {i} must be a Tensor, got {type(x)!r}"
                )
        return inputs

    def _link(self, out: Tensor, inputs: Sequence[Tensor]) -> Tensor:
        """
        Connect `out` to the graph according to its inputs' flags.

        Sets ``out.requires_grad`` to the OR of the inputs' flags. When True,
        records this operation as the creator and the inputs requiring
        gradients as parents; ``saved_meta["needs_grad"]`` keeps the per-input
        flags so backward can return gradients for linked parents only.
        """
        needs_grad = tuple(Tensor._result_requires_grad(x) for x in inputs)
        out.requires_grad = any(needs_grad)
        self.ctx.saved_meta["needs_grad"] = needs_grad
        if out.requires_grad:
            out._set_creator(self, [x for x, n in zip(inputs, needs_grad) if n])
        return out

    def _grad_output(self, output: Tensor) -> np.ndarray:
        """
        Return the gradient stored on `output`.

        Raises
        ------
        MissingGradientError
            If `output` has no gradient.
        """
        g = output._grad
        if g is None:
            raise MissingGradientError(self.name)
        return g

    def _select_linked(self, grads: Sequence[np.ndarray]) -> list[np.ndarray]:
        """
        Keep only the gradients of inputs that were linked as parents.
        """
        needs_grad = self.ctx.saved_meta["needs_grad"]
        return [g for g, n in zip(grads, needs_grad) if n]

    def __call__(self, *inputs: Tensor) -> Tensor:
        return self.forward(inputs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
