"""
Differentiable operation interface definitions.

This module defines the abstract base class for differentiable operations
used by the automatic differentiation system. A concrete `Operation` pairs a
forward numeric computation with its exact backward rule (a Jacobian-vector
product).

This design is inspired by function-level autograd systems (e.g., PyTorch's
`autograd.Function`), but an `Operation` is an *instance*: each call site
constructs a fresh operation object which records whatever it needs for the
backward pass (input shapes, copies of input buffers) and is then attached to
its output node as that node's `creator`.
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from ._tensor import ITensor


class Operation(ABC):
    """
    Abstract base class for differentiable operations.

    Contract
    --------
    forward(inputs)
        1. Compute the numeric result.
        2. Set ``output.requires_grad`` to the OR of the inputs' flags.
        3. If True, set ``output.creator`` to ``self`` and ``output.parents``
           to exactly the inputs that require gradients, in the order
           `backward` returns gradients for them.

    backward(output)
        Read ``output.grad`` and return one gradient buffer per entry in
        ``output.parents``, each shaped like the corresponding parent. It must
        never mutate ``output`` or its parents; accumulation into parents is
        the graph engine's job.

    Notes
    -----
    - An operation instance is single-use: it belongs to the one output node
      it created.
    - Backward returns plain numeric buffers, not graph nodes, so gradient
      computation never extends the graph.
    """

    @abstractmethod
    def forward(self, inputs: Sequence[ITensor]) -> ITensor:
        """
        Perform the forward computation and link the output into the graph.

        Parameters
        ----------
        inputs : Sequence[ITensor]
            Ordered operand nodes.

        Returns
        -------
        ITensor
            Newly allocated output node.
        """
        ...

    @abstractmethod
    def backward(self, output: ITensor) -> Sequence[Any]:
        """
        Compute gradients with respect to the linked parents of `output`.

        Parameters
        ----------
        output : ITensor
            The node this operation produced. Its gradient must be present.

        Returns
        -------
        Sequence[Any]
            One gradient buffer per entry in ``output.parents``.

        Raises
        ------
        MissingGradientError
            If ``output.grad`` is None.
        """
        ...
