"""
Metadata-only placeholders.

A placeholder is a zero-length object carrying the schema of a collection
(columns, dtypes, index name, trailing array shape) without its data.
Fallback conversions must accept placeholders as well as materialised data.
"""

from typing import Any

import numpy as np
import pandas as pd


def make_meta(obj: Any) -> Any:
    """
    Build a schema-only copy of a pandas object or numpy array.

    Example:
        >>> meta = make_meta(pd.DataFrame({'a': [1, 2]}))
        >>> len(meta), meta.dtypes['a']
        (0, dtype('int64'))
    """
    if isinstance(obj, (pd.DataFrame, pd.Series, pd.Index)):
        return obj[:0] if isinstance(obj, pd.Index) else obj.iloc[:0]

    if isinstance(obj, np.ndarray):
        if obj.ndim == 0:
            return np.empty((0,), dtype=obj.dtype)
        return obj[:0]

    raise TypeError(f"Cannot build a metadata placeholder for {type(obj).__name__}")


def is_meta(obj: Any) -> bool:
    """True for zero-length pandas objects and arrays."""
    if isinstance(obj, (pd.DataFrame, pd.Series, pd.Index)):
        return len(obj) == 0
    if isinstance(obj, np.ndarray):
        return obj.ndim > 0 and obj.shape[0] == 0
    return False
