"""
Concrete Tensor implementation (NumPy backend).

This module provides the concrete `Tensor` node that satisfies the domain-level
`ITensor` protocol. A `Tensor` owns a float32 NumPy buffer, an optional
gradient buffer of the same shape, a `requires_grad` flag, and (for nodes
produced by a differentiable operation) the producing `Operation` instance and
the ordered tuple of operand nodes that require gradients.

Design notes
------------
- Links point from a node to its parents only. Nodes never reference their
  consumers, so the graph is acyclic by construction and is released by
  ordinary reference counting once the root goes out of scope.
- `data` and `grad` return copies. The only public in-place writer of the data
  buffer is `copy_from_numpy`, used by optimizers to update parameters.
- Differentiable arithmetic is delegated to the operation classes in
  `gradnode.infrastructure.ops`; the operators defined here are thin wrappers
  around those free functions.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union
import math

import numpy as np
from typing_extensions import Self

from ...domain._errors import ShapeError
from ...domain._tensor import ITensor
from ._constants import DEFAULT_DTYPE, DEFAULT_RANDN_STD, REPR_MAX_ELEMENTS

Number = Union[int, float]
ShapeLike = Union[int, Sequence[int]]


def _normalize_shape(shape: ShapeLike) -> tuple[int, ...]:
    """
    Normalize an int or a sequence of ints into a shape tuple.
    """
    if isinstance(shape, (int, np.integer)):
        return (int(shape),)
    return tuple(int(d) for d in shape)


class Tensor(ITensor):
    """
    Concrete tensor node (NumPy CPU backend).

    Parameters
    ----------
    data : Any
        Array-like initial contents (nested lists, NumPy arrays, scalars, or
        another `Tensor`). The contents are copied and cast to float32.
    requires_grad : bool, optional
        Whether this node participates in differentiation. Defaults to False.

    Notes
    -----
    - A freshly constructed tensor is always a leaf.
    - Constructing with ``requires_grad=True`` does not allocate a gradient;
      `with_grad(True)` does.
    """

    def __init__(
        self,
        data: Any,
        *,
        requires_grad: bool = False,
    ) -> None:
        if isinstance(data, Tensor):
            data = data._data
        self._data: np.ndarray = np.array(data, dtype=DEFAULT_DTYPE, copy=True)
        self._requires_grad: bool = bool(requires_grad)
        self._grad: Optional[np.ndarray] = None
        self._creator: Optional[Any] = None
        self._parents: tuple[Tensor, ...] = ()

    @classmethod
    def _from_numpy(cls, arr: np.ndarray, *, requires_grad: bool = False) -> "Tensor":
        """
        Wrap an already-owned ndarray without copying it.

        Operations use this to hand freshly computed result buffers to a new
        node. Callers must not keep other references to `arr`.
        """
        out = cls.__new__(cls)
        out._data = np.asarray(arr, dtype=DEFAULT_DTYPE)
        out._requires_grad = bool(requires_grad)
        out._grad = None
        out._creator = None
        out._parents = ()
        return out

    @classmethod
    def from_numpy(cls, arr: Any, *, requires_grad: bool = False) -> "Tensor":
        """
        Create a leaf tensor holding a float32 copy of `arr`.
        """
        return cls(arr, requires_grad=requires_grad)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------
    @staticmethod
    def zeros(shape: ShapeLike) -> "Tensor":
        """
        Create a leaf tensor filled with zeros.
        """
        return Tensor._from_numpy(np.zeros(_normalize_shape(shape), dtype=DEFAULT_DTYPE))

    @staticmethod
    def ones(shape: ShapeLike) -> "Tensor":
        """
        Create a leaf tensor filled with ones.
        """
        return Tensor._from_numpy(np.ones(_normalize_shape(shape), dtype=DEFAULT_DTYPE))

    @staticmethod
    def full(shape: ShapeLike, value: float) -> "Tensor":
        """
        Create a leaf tensor filled with `value`.
        """
        return Tensor._from_numpy(
            np.full(_normalize_shape(shape), float(value), dtype=DEFAULT_DTYPE)
        )

    @staticmethod
    def randn(
        shape: ShapeLike,
        *,
        std: float = DEFAULT_RANDN_STD,
        seed: Optional[int] = None,
    ) -> "Tensor":
        """
        Create a leaf tensor of normally distributed samples.

        Parameters
        ----------
        shape : ShapeLike
            Output shape.
        std : float, optional
            Scale applied to standard-normal samples. Defaults to 0.01, which
            keeps freshly initialized weights small.
        seed : Optional[int], optional
            Seed for a dedicated `numpy.random.Generator`. When None, fresh
            OS entropy is used.

        Returns
        -------
        Tensor
            Leaf tensor with ``requires_grad=False``.
        """
        rng = np.random.default_rng(seed)
        arr = rng.standard_normal(_normalize_shape(shape)) * float(std)
        return Tensor._from_numpy(arr.astype(DEFAULT_DTYPE, copy=False))

    @staticmethod
    def stack(tensors: Sequence["Tensor"], axis: int = 0) -> "Tensor":
        """
        Stack equally shaped tensors along a new axis.

        Parameters
        ----------
        tensors : Sequence[Tensor]
            Tensors to stack. All must share one shape.
        axis : int, optional
            Position of the new axis in the result. Defaults to 0.

        Returns
        -------
        Tensor
            A new leaf one rank higher, with ``requires_grad=False``. The
            result is not linked to the inputs' graphs.

        Raises
        ------
        ShapeError
            If `tensors` is empty or the shapes differ.
        """
        tensors = list(tensors)
        if not tensors:
            raise ShapeError("stack", "expected a non-empty sequence of tensors")
        ref = tensors[0].shape
        for i, t in enumerate(tensors):
            if t.shape != ref:
                raise ShapeError(
                    "stack",
                    f"all tensors must share one shape; tensor 0 has {ref}, "
                    f"tensor {i} has {t.shape}",
                    ref,
                    t.shape,
                )
        ndim = len(ref) + 1
        if not -ndim <= axis < ndim:
            raise ShapeError(
                "stack", f"axis {axis} out of range for result rank {ndim}", ref
            )
        return Tensor._from_numpy(np.stack([t._data for t in tensors], axis=axis))

    def zeros_like(self) -> "Tensor":
        return Tensor.zeros(self.shape)

    def ones_like(self) -> "Tensor":
        return Tensor.ones(self.shape)

    def rand_like(self, *, seed: Optional[int] = None) -> "Tensor":
        """
        Create a leaf tensor of normal samples with this tensor's shape.
        """
        return Tensor.randn(self.shape, seed=seed)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the tensor.
        """
        return tuple(int(d) for d in self._data.shape)

    @property
    def ndim(self) -> int:
        return int(self._data.ndim)

    def dims(self) -> int:
        """
        Return the number of dimensions (alias of `ndim`).
        """
        return self.ndim

    def numel(self) -> int:
        """
        Return the total number of elements (product of the shape).
        """
        return int(math.prod(self.shape))

    def size(self, dim: Optional[int] = None) -> Union[int, tuple[int, ...]]:
        """
        Return the full shape, or the size of one dimension.

        Raises
        ------
        IndexError
            If `dim` is out of range.
        """
        if dim is None:
            return self.shape
        return self.shape[dim]

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def data(self) -> np.ndarray:
        """
        Return a copy of the data buffer.
        """
        return self._data.copy()

    def to_numpy(self) -> np.ndarray:
        """
        Return a copy of the data buffer as a NumPy array.
        """
        return self._data.copy()

    @property
    def grad(self) -> Optional[np.ndarray]:
        """
        Return a copy of the gradient buffer, or None if none is stored.
        """
        if self._grad is None:
            return None
        return self._grad.copy()

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @requires_grad.setter
    def requires_grad(self, value: bool) -> None:
        """
        Set the requires_grad flag.

        Turning the flag off also unlinks this node from its creator and
        parents, keeping a non-differentiable node a leaf.
        """
        self._requires_grad = bool(value)
        if not self._requires_grad:
            self._creator = None
            self._parents = ()

    @property
    def creator(self) -> Optional[Any]:
        """
        Return the operation that produced this node, or None for a leaf.
        """
        return self._creator

    @property
    def parents(self) -> tuple["Tensor", ...]:
        return self._parents

    @property
    def is_leaf(self) -> bool:
        return self._creator is None

    # ------------------------------------------------------------------
    # Autograd bookkeeping
    # ------------------------------------------------------------------
    def with_grad(self, requires_grad: bool = True) -> Self:
        """
        Toggle `requires_grad` and return this node.

        Turning differentiation on allocates a zero gradient buffer if none is
        present; turning it off unlinks the node from its creator.

        Parameters
        ----------
        requires_grad : bool, optional
            New flag value. Defaults to True.

        Returns
        -------
        Self
            This tensor, for chaining (e.g. ``Tensor.randn((2, 3)).with_grad()``).
        """
        self.requires_grad = requires_grad
        if self._requires_grad and self._grad is None:
            self._grad = np.zeros_like(self._data)
        return self

    def requires_grad_(self, requires_grad: bool = True) -> Self:
        """
        Alias of `with_grad`.
        """
        return self.with_grad(requires_grad)

    def zero_grad(self) -> None:
        """
        Clear the stored gradient (reset it to None).
        """
        self._grad = None

    def clear_gradient(self) -> None:
        """
        Alias of `zero_grad`.
        """
        self.zero_grad()

    def _set_creator(self, creator: Any, parents: Sequence["Tensor"]) -> None:
        """
        Attach the producing operation and the operand nodes requiring grad.
        """
        self._creator = creator
        self._parents = tuple(parents)

    def _set_grad(self, g: np.ndarray) -> None:
        """
        Replace the gradient buffer with a float32 copy of `g`.

        Raises
        ------
        ShapeError
            If `g` does not have exactly this tensor's shape.
        """
        g = np.array(g, dtype=self._data.dtype, copy=True)
        if g.shape != self._data.shape:
            raise ShapeError(
                "grad",
                f"gradient shape {g.shape} does not match tensor shape {self.shape}",
                self.shape,
                g.shape,
            )
        self._grad = g

    def _accumulate_grad_(self, g: np.ndarray) -> None:
        """
        In-place accumulate gradient `g` into this node's gradient.

        Assigns a copy when no gradient is stored; adds elementwise otherwise.
        """
        if self._grad is None:
            self._set_grad(g)
            return

        g = np.asarray(g, dtype=self._data.dtype)
        if self._grad.shape != g.shape:
            raise ShapeError(
                "accumulate_grad",
                f"grad shape mismatch: {self._grad.shape} vs {g.shape}",
                self._grad.shape,
                g.shape,
            )
        self._grad += g

    def backward(self, grad_out: Optional[Any] = None) -> None:
        """
        Backpropagate gradients from this node through the graph.

        Parameters
        ----------
        grad_out : Optional[Any], optional
            Gradient seed with exactly this node's shape. When omitted the seed
            is a buffer of ones matching the shape.

        Raises
        ------
        ShapeError
            If `grad_out` has the wrong shape.
        MissingGradientError
            If an operation's backward rule finds no gradient on its output.

        Notes
        -----
        Calling this on a node that does not require gradients emits a
        `RuntimeWarning` and does nothing.
        """
        from ..autograd._engine import backward

        backward(self, grad_out)

    # ------------------------------------------------------------------
    # Data mutation (optimizer-facing)
    # ------------------------------------------------------------------
    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite this tensor's storage with the contents of `arr`.

        Parameters
        ----------
        arr : Any
            Array-like object accepted by `np.asarray`, including NumPy scalars.

        Raises
        ------
        ShapeError
            If the shape of `arr` differs from this tensor's shape.
        """
        arr_nd = np.asarray(arr, dtype=self._data.dtype)
        if arr_nd.shape != self._data.shape:
            raise ShapeError(
                "copy_from_numpy",
                f"shape mismatch: tensor {self.shape} vs array {arr_nd.shape}",
                self.shape,
                arr_nd.shape,
            )
        self._data[...] = arr_nd

    # ------------------------------------------------------------------
    # Shape utilities
    # ------------------------------------------------------------------
    def reshape(self, *shape: Any) -> "Tensor":
        """
        Return a reshaped copy of this tensor.

        Accepts either a single shape sequence or the dimensions as separate
        arguments; one dimension may be -1 and is inferred. When this tensor
        requires gradients the reshape is recorded in the graph and its
        backward rule reshapes the gradient back.

        Raises
        ------
        ShapeError
            If the element counts differ or the shape is otherwise invalid.
        """
        from ..ops._reshape import reshape

        if len(shape) == 1 and not isinstance(shape[0], (int, np.integer)):
            shape = tuple(shape[0])
        return reshape(self, shape)

    def view(self, *shape: Any) -> "Tensor":
        """
        Alias of `reshape`.
        """
        return self.reshape(*shape)

    def detach(self) -> "Tensor":
        """
        Return a new leaf holding a copy of this tensor's data.

        The result has ``requires_grad=False``, no gradient, and no link to this
        tensor's graph. This tensor is left untouched.
        """
        return Tensor(self._data)

    def squeeze(self, dim: Optional[int] = None) -> "Tensor":
        """
        Remove size-1 dimensions and return a new leaf.

        Parameters
        ----------
        dim : Optional[int], optional
            Dimension to remove. When None, every size-1 dimension is removed.

        Raises
        ------
        ShapeError
            If `dim` is out of range or its size is not 1.
        """
        if dim is None:
            return Tensor._from_numpy(np.squeeze(self._data).copy())
        d = self._check_dim("squeeze", dim, self.ndim)
        if self.shape[d] != 1:
            raise ShapeError(
                "squeeze",
                f"dimension {dim} has size {self.shape[d]}, expected 1",
                self.shape,
            )
        return Tensor._from_numpy(np.squeeze(self._data, axis=d).copy())

    def unsqueeze(self, dim: int) -> "Tensor":
        """
        Insert a size-1 dimension at `dim` and return a new leaf.

        Raises
        ------
        ShapeError
            If `dim` is out of range for the result rank.
        """
        d = self._check_dim("unsqueeze", dim, self.ndim + 1)
        return Tensor._from_numpy(np.expand_dims(self._data, axis=d).copy())

    def index(self, idx: Union[int, Sequence[int]]) -> "Tensor":
        """
        Select a sub-tensor by integer indices along the leading dimensions.

        Parameters
        ----------
        idx : Union[int, Sequence[int]]
            One index per leading dimension.

        Returns
        -------
        Tensor
            A new leaf with the selected contents (rank reduced by the number
            of indices).

        Raises
        ------
        ShapeError
            If more indices than dimensions are given.
        IndexError
            If an index is out of range.
        """
        if isinstance(idx, (int, np.integer)):
            idx = (int(idx),)
        idx = tuple(int(i) for i in idx)
        if len(idx) > self.ndim:
            raise ShapeError(
                "index",
                f"too many indices ({len(idx)}) for tensor of rank {self.ndim}",
                self.shape,
            )
        for axis, i in enumerate(idx):
            n = self.shape[axis]
            if not -n <= i < n:
                raise IndexError(
                    f"index {i} is out of range for axis {axis} with size {n}"
                )
        return Tensor._from_numpy(np.array(self._data[idx], copy=True))

    def item(self) -> float:
        """
        Return the single element of this tensor as a Python float.

        Raises
        ------
        ShapeError
            If the tensor does not hold exactly one element.
        """
        if self.numel() != 1:
            raise ShapeError(
                "item",
                f"only one-element tensors can be converted, got shape {self.shape}",
                self.shape,
            )
        return float(self._data.reshape(()))

    @staticmethod
    def _check_dim(op: str, dim: int, rank: int) -> int:
        if not -rank <= dim < rank:
            raise ShapeError(op, f"dimension {dim} out of range for rank {rank}")
        return dim % rank if rank else 0

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    @staticmethod
    def _result_requires_grad(*parents: "Tensor") -> bool:
        """
        Determine whether an operation result should require gradients.
        """
        return any(p.requires_grad for p in parents)

    @staticmethod
    def _as_tensor_like(x: Union["Tensor", Number], like: "Tensor") -> "Tensor":
        """
        Convert an operand into a Tensor compatible with a reference tensor.

        If `x` is already a Tensor, it is returned as-is. If `x` is a Python
        scalar, a new leaf with the shape of `like` is created and filled with
        the scalar value.

        Raises
        ------
        TypeError
            If `x` is neither a Tensor nor a supported scalar type.
        """
        if isinstance(x, Tensor):
            return x
        if isinstance(x, (int, float, np.integer, np.floating)) and not isinstance(
            x, bool
        ):
            return Tensor.full(like.shape, float(x))
        raise TypeError(f"Unsupported operand type: {type(x)!r}")

    def __add__(self, other: Union["Tensor", Number]) -> "Tensor":
        from ..ops._add import add

        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return add(self, other)

    def __radd__(self, other: Number) -> "Tensor":
        from ..ops._add import add

        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return add(other, self)

    def __mul__(self, other: Union["Tensor", Number]) -> "Tensor":
        from ..ops._multiply import multiply

        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return multiply(self, other)

    def __rmul__(self, other: Number) -> "Tensor":
        from ..ops._multiply import multiply

        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return multiply(other, self)

    def __neg__(self) -> "Tensor":
        return self * -1.0

    def __sub__(self, other: Union["Tensor", Number]) -> "Tensor":
        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return self + (-other)

    def __rsub__(self, other: Number) -> "Tensor":
        try:
            other = self._as_tensor_like(other, self)
        except TypeError:
            return NotImplemented
        return other + (-self)

    def __matmul__(self, other: "Tensor") -> "Tensor":
        from ..ops._matmul import matmul

        if not isinstance(other, Tensor):
            return NotImplemented
        return matmul(self, other)

    def __repr__(self) -> str:
        flags = []
        if self._requires_grad:
            flags.append("requires_grad=True")
        if self._creator is not None:
            flags.append(f"creator={type(self._creator).__name__}")
        suffix = (", " + ", ".join(flags)) if flags else ""

        if self.numel() > REPR_MAX_ELEMENTS:
            dims = "×".join(str(d) for d in self.shape)
            body = f"[...tensor of size {dims}]"
        else:
            body = np.array2string(self._data, separator=", ", precision=4)
        return f"Tensor({body}, shape={self.shape}{suffix})"
