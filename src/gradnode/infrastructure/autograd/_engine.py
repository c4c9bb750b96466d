"""
Reverse-mode graph traversal.

`GraphEngine` drives one backward pass from a root node:

1. Set the root's gradient to the seed (ones, or a caller-supplied buffer of
   exactly the root's shape). Gradients left on non-leaf nodes by an earlier
   pass are discarded first.
2. Build a topological order of every node reachable through `parents` with
   an iterative post-order depth-first search, keyed by node identity so each
   node is visited once no matter how many paths reach it.
3. Walk that order in reverse. For each node with a creator, ask the creator
   for one gradient per parent and accumulate each into the parent's `grad`
   (assign if absent, elementwise add otherwise).

Reverse post-order guarantees that a node runs its own backward rule only
after every consumer has contributed to its gradient, which is what makes
fan-out accumulation correct.
"""

from __future__ import annotations

from typing import Any, Optional
import warnings

import numpy as np

from ...domain._errors import ShapeError
from ..tensor._tensor import Tensor


class GraphEngine:
    """
    Single-use driver for one backward pass.

    Parameters
    ----------
    root : Tensor
        Node to differentiate from (typically a scalar loss).

    Notes
    -----
    The engine is terminal after `run`: a second call raises `RuntimeError`.
    A failed run leaves gradients partially populated; the graph should be
    discarded.
    """

    def __init__(self, root: Tensor) -> None:
        if not isinstance(root, Tensor):
            raise TypeError(f"root must be a Tensor, got {type(root)!r}")
        self.root = root
        self._done = False

    def topological_order(self) -> list[Tensor]:
        """
        Return reachable nodes in post-order (parents before children).

        The last element is always the root.
        """
        order: list[Tensor] = []
        visited: set[int] = set()
        stack: list[tuple[Tensor, bool]] = [(self.root, False)]

        while stack:
            node, expanded = stack.pop()
            if expanded:
                order.append(node)
                continue
            if id(node) in visited:
                continue
            visited.add(id(node))

            stack.append((node, True))
            for p in reversed(node.parents):
                if id(p) not in visited:
                    stack.append((p, False))

        return order

    def _seed(self, grad_out: Optional[Any]) -> np.ndarray:
        root = self.root
        if grad_out is None:
            return np.ones(root.shape, dtype=root.dtype)

        if isinstance(grad_out, Tensor):
            grad_out = grad_out._data
        seed = np.asarray(grad_out, dtype=root.dtype)
        if seed.shape != root.shape:
            raise ShapeError(
                "backward",
                f"grad_out shape mismatch: expected {root.shape}, got {seed.shape}",
                root.shape,
                seed.shape,
            )
        return seed

    def run(self, grad_out: Optional[Any] = None) -> None:
        """
        Execute the backward pass.

        Parameters
        ----------
        grad_out : Optional[Any], optional
            Gradient seed for the root. Defaults to ones of the root's shape.

        Raises
        ------
        RuntimeError
            If the engine already ran, or an operation returned a number of
            gradients different from its output's parent count.
        ShapeError
            If the seed, or a gradient returned by an operation, has the wrong
            shape.
        MissingGradientError
            If an operation's output carries no gradient when its backward
            rule runs.
        """
        if self._done:
            raise RuntimeError("GraphEngine.run may only be called once")
        self._done = True

        root = self.root
        if not root.requires_grad:
            warnings.warn(
                "backward() called on a tensor that does not require grad; "
                "no gradients were computed.",
                RuntimeWarning,
                stacklevel=3,
            )
            return

        seed = self._seed(grad_out)
        topo = self.topological_order()

        # Non-leaf gradients belong to a single pass; leaves keep accumulating.
        for node in topo:
            if node.creator is not None:
                node._grad = None
        root._set_grad(seed)

        for node in reversed(topo):
            op = node.creator
            if op is None:
                continue

            grads = op.backward(node)
            parents = node.parents
            if len(grads) != len(parents):
                raise RuntimeError(
                    f"{op!r} returned {len(grads)} gradient(s) for "
                    f"{len(parents)} parent(s)"
                )

            for parent, g in zip(parents, grads):
                if g.shape != parent.shape:
                    raise ShapeError(
                        "backward",
                        f"{op!r} returned a gradient of shape {g.shape} for a "
                        f"parent of shape {parent.shape}",
                        parent.shape,
                        g.shape,
                    )
                parent._accumulate_grad_(g)


def backward(root: Tensor, grad_out: Optional[Any] = None) -> None:
    """
    Populate `grad` on every node reachable from `root` that requires it.

    Parameters
    ----------
    root : Tensor
        Node to differentiate from.
    grad_out : Optional[Any], optional
        Gradient seed with exactly ``root.shape``. Defaults to ones.
    """
    GraphEngine(root).run(grad_out)
