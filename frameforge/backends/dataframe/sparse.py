"""
Sparse DataFrame backend.

Stores numeric and boolean columns with pandas sparse dtypes. Only
``from_dict`` is implemented natively; every other creation operation is
served by pandas and converted with ``to_sparse``.
"""

from typing import Any, Mapping, Optional

import numpy as np
import pandas as pd

from ..entrypoint import BackendEntrypoint, operation


class SparseBackend(BackendEntrypoint):
    """Sparse-column DataFrames built on pandas.SparseDtype."""

    __backend_name__ = 'SP'

    # Backend metadata
    backend_label = 'sparse'
    fallback_label = 'pandas'
    description = "pandas DataFrames with sparse numeric columns"

    @operation
    def from_dict(self, data: Mapping[str, Any], fill_value: Optional[Any] = None,
                  **kwargs) -> pd.DataFrame:
        frame = pd.DataFrame.from_dict(dict(data), **kwargs)
        return self.to_sparse(frame, fill_value=fill_value)

    def move_from_fallback(self, result: Any, target_label: str) -> Any:
        """
        Convert a pandas result to sparse columns.

        Raises:
            TypeError: If result is not a pandas DataFrame or Series
        """
        if isinstance(result, (pd.DataFrame, pd.Series)):
            return self.to_sparse(result)
        raise TypeError(
            f"Cannot move {type(result).__name__} to '{target_label}': "
            f"expected a pandas DataFrame or Series"
        )

    @staticmethod
    def to_sparse(data, fill_value: Optional[Any] = None):
        """
        Convert numeric and boolean columns to sparse dtypes.

        Other columns (strings, categoricals, extension dtypes) are left
        dense. Zero-length inputs keep their schema.
        """
        if isinstance(data, pd.Series):
            sparse_dtype = _sparse_dtype(data.dtype, fill_value)
            return data.astype(sparse_dtype) if sparse_dtype is not None else data.copy()

        converted = {}
        for col, dtype in data.dtypes.items():
            sparse_dtype = _sparse_dtype(dtype, fill_value)
            if sparse_dtype is not None:
                converted[col] = sparse_dtype

        return data.astype(converted) if converted else data.copy()


def _sparse_dtype(dtype, fill_value: Optional[Any]):
    """Sparse counterpart of a numpy numeric/bool dtype, or None."""
    if not isinstance(dtype, np.dtype) or dtype.kind not in 'biuf':
        return None
    if fill_value is None:
        return pd.SparseDtype(dtype)
    return pd.SparseDtype(dtype, fill_value)
