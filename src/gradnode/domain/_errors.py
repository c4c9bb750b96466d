"""
Graph- and shape-related exceptions for gradnode.

This module defines the error taxonomy raised by tensor construction,
differentiable operations, and the backward pass. Every error is raised at the
point of violation and surfaced to the caller unchanged; none are recovered or
retried internally.

Taxonomy
--------
- `ShapeError`: incompatible shapes for broadcast, reshape, stack, matrix
  multiply, or a gradient seed. Always detected before any node is created or
  mutated, so the caller may correct the shapes and retry.
- `UnsupportedRankError`: an operation received a tensor rank it does not
  implement (e.g., matrix multiply with a rank-4 operand). It subclasses
  `ShapeError` so callers catching shape problems also catch rank problems.
- `EmptyTensorError`: a reduction was requested over zero elements.
- `MissingGradientError`: an operation's backward rule was invoked on an
  output node whose gradient was never seeded or accumulated. This signals a
  graph-construction or traversal bug and is fatal to the current backward
  call.
"""


class ShapeError(ValueError):
    """
    Raised when operand shapes are incompatible for an operation.

    Attributes
    ----------
    op : str
        Name of the operation that rejected the shapes.
    shapes : tuple[tuple[int, ...], ...]
        The offending shapes, in operand order.
    """

    def __init__(self, op: str, message: str, *shapes: tuple[int, ...]) -> None:
        """
        Initialize the ShapeError.

        Parameters
        ----------
        op : str
            Operation name (e.g., "add", "reshape", "matmul").
        message : str
            Human-readable description of the violation.
        *shapes : tuple[int, ...]
            Shapes involved in the violation.
        """
        super().__init__(f"{op}: {message}")
        self.op = op
        self.shapes = tuple(tuple(int(d) for d in s) for s in shapes)


class UnsupportedRankError(ShapeError):
    """
    Raised when an operation is given a tensor rank it does not implement.

    Attributes
    ----------
    rank : int
        The rejected rank.
    supported : tuple[int, ...]
        Ranks the operation accepts for that operand.
    """

    def __init__(
        self, op: str, operand: str, rank: int, supported: tuple[int, ...]
    ) -> None:
        expected = " or ".join(f"{r}D" for r in supported)
        super().__init__(
            op, f"{operand} must be a {expected} tensor, got {rank}D"
        )
        self.rank = int(rank)
        self.supported = tuple(supported)


class EmptyTensorError(ValueError):
    """
    Raised when a reduction is requested over a tensor with zero elements.
    """

    def __init__(self, op: str, shape: tuple[int, ...]) -> None:
        super().__init__(f"{op}: cannot reduce an empty tensor of shape {shape}")
        self.op = op
        self.shape = tuple(shape)


class MissingGradientError(RuntimeError):
    """
    Raised when backward is invoked on a node that carries no gradient.

    Notes
    -----
    This is a programming-contract violation (the engine must seed or
    accumulate a gradient before an operation's backward rule reads it), not
    a recoverable runtime condition.
    """

    def __init__(self, op: str) -> None:
        super().__init__(
            f"{op}.backward called on an output node with no gradient; "
            "the node was never seeded or reached by the backward pass."
        )
        self.op = op
