"""
Broadcasting helpers shared by elementwise operations.

`broadcast_shapes` computes the result shape of a binary elementwise operation
under trailing-dimension alignment, and `sum_to_shape` is its inverse for
gradients: it sum-reduces a gradient shaped like the broadcast result back to
an operand's original shape.
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import ShapeError


def broadcast_shapes(
    a: tuple[int, ...], b: tuple[int, ...], *, op: str = "broadcast"
) -> tuple[int, ...]:
    """
    Compute the broadcast result shape of two operand shapes.

    Shapes are right-aligned; each aligned pair of dimensions must be equal or
    contain a 1. Missing leading dimensions count as 1.

    Parameters
    ----------
    a, b : tuple[int, ...]
        Operand shapes.
    op : str, optional
        Operation name used in error messages.

    Returns
    -------
    tuple[int, ...]
        Result shape, of rank ``max(len(a), len(b))``.

    Raises
    ------
    ShapeError
        If any aligned dimension pair differs and neither is 1.
    """
    a = tuple(int(d) for d in a)
    b = tuple(int(d) for d in b)
    rank = max(len(a), len(b))
    pa = (1,) * (rank - len(a)) + a
    pb = (1,) * (rank - len(b)) + b

    out = []
    for i, (da, db) in enumerate(zip(pa, pb)):
        if da == db or db == 1:
            out.append(da)
        elif da == 1:
            out.append(db)
        else:
            raise ShapeError(
                op,
                f"shapes {a} and {b} are not broadcastable "
                f"(dim mismatch at aligned axis {i}: {da} vs {db})",
                a,
                b,
            )
    return tuple(out)


def _sum_to_shape_reduce_axes(
    src_shape: tuple[int, ...], target_shape: tuple[int, ...]
) -> tuple[int, tuple[int, ...]]:
    """
    Compute the leading-axis count and size-1 axes to reduce for `sum_to_shape`.

    Returns
    -------
    lead : int
        Number of leading source axes absent from the target.
    expand_axes : tuple[int, ...]
        Axes (indexed in the target's rank) where the target has size 1 but
        the source does not.

    Raises
    ------
    ShapeError
        If the target rank exceeds the source rank, or a dimension is not
        broadcast-compatible (target dim must be 1 or equal to the source dim).
    """
    src = tuple(int(d) for d in src_shape)
    tgt = tuple(int(d) for d in target_shape)

    if len(tgt) > len(src):
        raise ShapeError(
            "sum_to_shape",
            f"target rank {len(tgt)} exceeds source rank {len(src)}",
            src,
            tgt,
        )

    lead = len(src) - len(tgt)
    for i, (sd, td) in enumerate(zip(src[lead:], tgt)):
        if td not in (1, sd):
            raise ShapeError(
                "sum_to_shape",
                f"cannot reduce {src} to {tgt}: "
                f"dim mismatch at axis {i}: src={sd}, target={td}",
                src,
                tgt,
            )

    expand_axes = tuple(
        i for i, (sd, td) in enumerate(zip(src[lead:], tgt)) if td == 1 and sd != 1
    )
    return lead, expand_axes


def sum_to_shape(grad: np.ndarray, shape: tuple[int, ...]) -> np.ndarray:
    """
    Sum-reduce a broadcast gradient back to an operand's shape.

    The reduction runs in two phases: first every leading axis the operand
    lacks is summed away, then every axis where the operand had size 1 (and
    was therefore expanded) is summed with ``keepdims=True``. The result is
    finally reshaped to exactly `shape`.

    Parameters
    ----------
    grad : np.ndarray
        Gradient shaped like the broadcast result.
    shape : tuple[int, ...]
        Target (original operand) shape.

    Returns
    -------
    np.ndarray
        Reduced gradient with shape exactly `shape`.

    Raises
    ------
    ShapeError
        If `shape` could not have been broadcast to ``grad.shape``.

    Examples
    --------
    >>> sum_to_shape(np.ones((2, 2, 3)), (2, 3)).tolist()
    [[2.0, 2.0, 2.0], [2.0, 2.0, 2.0]]
    """
    shape = tuple(int(d) for d in shape)
    g = np.asarray(grad)
    if g.shape == shape:
        return g

    lead, expand_axes = _sum_to_shape_reduce_axes(g.shape, shape)
    if lead:
        g = g.sum(axis=tuple(range(lead)))
    if expand_axes:
        g = g.sum(axis=expand_axes, keepdims=True)
    return g.reshape(shape)
