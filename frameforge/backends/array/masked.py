"""
Masked Array backend.

Produces ``numpy.ma.MaskedArray`` objects. Falls back to numpy for every
operation it does not define and wraps the results with ``numpy.ma.asarray``
(nothing masked, shape and dtype preserved).
"""

from typing import Any, Optional

import numpy as np

from ..entrypoint import BackendEntrypoint, operation


class MaskedBackend(BackendEntrypoint):
    """Create masked arrays with numpy.ma."""

    __backend_name__ = 'MA'

    # Backend metadata
    backend_label = 'masked'
    fallback_label = 'numpy'
    description = "numpy masked arrays"

    @operation
    def from_array(self, data, mask: Optional[Any] = None, dtype=None,
                   fill_value: Optional[Any] = None) -> np.ma.MaskedArray:
        if mask is None:
            mask = np.ma.nomask
        return np.ma.array(data, mask=mask, dtype=dtype, fill_value=fill_value, copy=True)

    @operation
    def masked_invalid(self, data) -> np.ma.MaskedArray:
        return np.ma.masked_invalid(np.asarray(data), copy=True)

    def move_from_fallback(self, result: Any, target_label: str) -> np.ma.MaskedArray:
        """
        Wrap a numpy result as a masked array.

        Raises:
            TypeError: If result is not an ndarray
        """
        if isinstance(result, np.ndarray):
            return np.ma.asarray(result)
        raise TypeError(
            f"Cannot move {type(result).__name__} to '{target_label}': expected a numpy ndarray"
        )
