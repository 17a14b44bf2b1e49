"""
numpy Array backend.

The default Array backend. Terminal: it has no fallback.
"""

from typing import Any, Optional

import numpy as np

from ..entrypoint import BackendEntrypoint, operation


class NumpyBackend(BackendEntrypoint):
    """Create arrays with numpy."""

    __backend_name__ = 'NP'

    # Backend metadata
    backend_label = 'numpy'
    description = "numpy ndarrays (default)"

    @operation
    def array(self, data, dtype=None, copy: bool = True) -> np.ndarray:
        return np.array(data, dtype=dtype, copy=copy)

    @operation
    def asarray(self, data, dtype=None) -> np.ndarray:
        return np.asarray(data, dtype=dtype)

    @operation
    def from_array(self, data, dtype=None) -> np.ndarray:
        # Always a fresh ndarray, never a view of the caller's buffer
        return np.array(data, dtype=dtype, copy=True)

    @operation
    def zeros(self, shape, dtype=float) -> np.ndarray:
        return np.zeros(shape, dtype=dtype)

    @operation
    def ones(self, shape, dtype=float) -> np.ndarray:
        return np.ones(shape, dtype=dtype)

    @operation
    def empty(self, shape, dtype=float) -> np.ndarray:
        return np.empty(shape, dtype=dtype)

    @operation
    def full(self, shape, fill_value: Any, dtype=None) -> np.ndarray:
        return np.full(shape, fill_value, dtype=dtype)

    @operation
    def arange(self, *args, dtype=None) -> np.ndarray:
        return np.arange(*args, dtype=dtype)

    @operation
    def linspace(self, start, stop, num: int = 50, endpoint: bool = True, dtype=None) -> np.ndarray:
        return np.linspace(start, stop, num=num, endpoint=endpoint, dtype=dtype)

    @operation
    def eye(self, n: int, m: Optional[int] = None, k: int = 0, dtype=float) -> np.ndarray:
        return np.eye(n, m, k=k, dtype=dtype)

    @operation
    def load(self, path, mmap_mode: Optional[str] = None) -> np.ndarray:
        return np.load(path, mmap_mode=mmap_mode, allow_pickle=False)
