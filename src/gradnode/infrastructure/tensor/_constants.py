"""
Package-level numeric constants for tensor storage and formatting.
"""

import numpy as np

# Storage dtype for every data and gradient buffer.
DEFAULT_DTYPE = np.float32

# Scale applied to standard-normal samples by `randn`.
DEFAULT_RANDN_STD = 0.01

# Tensors with more elements than this print as a size summary.
REPR_MAX_ELEMENTS = 64
