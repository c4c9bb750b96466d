"""
Tensor interface definitions.

This module defines the domain-level interface for tensor-like graph nodes
using structural typing. The interface captures the minimal, backend-agnostic
surface required for a node to participate in computation graphs, layers, and
optimization workflows.

Notes
-----
The protocol exposes the autograd-facing hooks (`grad`, `requires_grad`,
`creator`, `parents`, `backward`) because the graph engine and the optimizer
are typed against it rather than against the NumPy-backed implementation.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor node interface.

    An `ITensor` is a vertex in a dynamic computation graph. It owns a data
    buffer, an optional gradient buffer of the same shape, a flag indicating
    whether it participates in differentiation, and (for non-leaf nodes) the
    operation that produced it together with its operand nodes.

    Notes
    -----
    - Links point from a node to its parents only; no node references its
      consumers.
    - `data` and `grad` return copies so callers cannot mutate graph state
      through them.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.

        Returns
        -------
        tuple[int, ...]
            Dimension sizes, outermost first.
        """
        ...

    @property
    def ndim(self) -> int:
        """
        Return the number of dimensions (rank).
        """
        ...

    def numel(self) -> int:
        """
        Return the total number of elements.
        """
        ...

    @property
    def data(self) -> Any:
        """
        Return a copy of the underlying data buffer.
        """
        ...

    @property
    def grad(self) -> Optional[Any]:
        """
        Return a copy of the gradient buffer, or None if no gradient is stored.
        """
        ...

    @property
    def requires_grad(self) -> bool:
        """
        Indicate whether this node participates in differentiation.
        """
        ...

    @property
    def creator(self) -> Optional[Any]:
        """
        Return the operation that produced this node, or None for a leaf.
        """
        ...

    @property
    def parents(self) -> Sequence["ITensor"]:
        """
        Return the operand nodes that require gradients, in backward order.
        """
        ...

    @property
    def is_leaf(self) -> bool:
        """
        Return True iff this node has no creator operation.
        """
        ...

    def zero_grad(self) -> None:
        """
        Clear the stored gradient (reset it to None).
        """
        ...

    def backward(self, grad_out: Optional[Any] = None) -> None:
        """
        Backpropagate gradients from this node to every reachable node.

        Parameters
        ----------
        grad_out : Optional[Any], optional
            Gradient seed. Defaults to a buffer of ones matching `shape`.
        """
        ...
