"""
Dataset and mini-batch loading utilities.

A `Dataset` maps an integer index to an ``(input, target)`` pair of tensors.
`DataLoader` walks a dataset in mini-batches, stacking each batch's samples
along a new leading axis.

Notes
-----
- Shuffling permutes indices, not the underlying storage.
- Each call to ``iter(loader)`` starts a new epoch; with ``shuffle=True`` a
  fresh permutation is drawn for every epoch.
- Batches are leaves (``requires_grad=False``), as produced by `Tensor.stack`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Sequence, Tuple
import math

import numpy as np

from ..tensor._tensor import Tensor


class Dataset(ABC):
    """
    Abstract indexed collection of ``(input, target)`` samples.
    """

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __getitem__(self, idx: int) -> Tuple[Tensor, Tensor]: ...


class TensorDataset(Dataset):
    """
    Dataset backed by two equally long sequences of tensors.

    Parameters
    ----------
    inputs : Sequence[Tensor]
        Input samples.
    targets : Sequence[Tensor]
        Target samples, aligned index-for-index with `inputs`.

    Raises
    ------
    ValueError
        If `inputs` and `targets` have different lengths.
    """

    def __init__(self, inputs: Sequence[Tensor], targets: Sequence[Tensor]) -> None:
        self.inputs = list(inputs)
        self.targets = list(targets)
        if len(self.inputs) != len(self.targets):
            raise ValueError(
                "inputs and targets must have same length, got "
                f"len(inputs)={len(self.inputs)}, len(targets)={len(self.targets)}"
            )

    def __len__(self) -> int:
        return len(self.inputs)

    def __getitem__(self, idx: int) -> Tuple[Tensor, Tensor]:
        return self.inputs[idx], self.targets[idx]


class DataLoader:
    """
    Iterate over a dataset in mini-batches.

    Parameters
    ----------
    dataset : Dataset
        Source of samples.
    batch_size : int
        Maximum number of samples per batch. The last batch may be smaller.
    shuffle : bool, optional
        If True, visit samples in a new random order every epoch.
        Defaults to False.
    seed : Optional[int], optional
        Seed for the shuffling generator. When None, fresh OS entropy is used.

    Raises
    ------
    ValueError
        If `batch_size` is not positive.

    Examples
    --------
    >>> loader = DataLoader(dataset, batch_size=2, shuffle=True, seed=0)
    >>> for xb, yb in loader:
    ...     loss = mse_loss(model(xb), yb)
    """

    def __init__(
        self,
        dataset: Dataset,
        batch_size: int,
        *,
        shuffle: bool = False,
        seed: Optional[int] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {batch_size}")
        self.dataset = dataset
        self.batch_size = int(batch_size)
        self.shuffle = bool(shuffle)
        self._rng = np.random.default_rng(seed)

    def __len__(self) -> int:
        """
        Return the number of batches per epoch.
        """
        return math.ceil(len(self.dataset) / self.batch_size)

    def _epoch_indices(self) -> np.ndarray:
        n = len(self.dataset)
        if self.shuffle:
            return self._rng.permutation(n)
        return np.arange(n)

    def __iter__(self) -> Iterator[Tuple[Tensor, Tensor]]:
        """
        Yield ``(input_batch, target_batch)`` pairs for one epoch.
        """
        idxs = self._epoch_indices()
        for start in range(0, len(idxs), self.batch_size):
            batch_ids = idxs[start : start + self.batch_size]
            samples = [self.dataset[int(i)] for i in batch_ids]
            xb = Tensor.stack([x for x, _ in samples])
            yb = Tensor.stack([y for _, y in samples])
            yield xb, yb
