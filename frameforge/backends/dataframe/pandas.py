"""
pandas DataFrame backend.

The default DataFrame backend. Terminal: it has no fallback, every other
DataFrame backend eventually falls back to it.
"""

from typing import Any, Dict, List, Mapping, Optional

import numpy as np
import pandas as pd

from ..entrypoint import BackendEntrypoint, operation


class PandasBackend(BackendEntrypoint):
    """Create DataFrames with pandas."""

    __backend_name__ = 'PD'

    # Backend metadata
    backend_label = 'pandas'
    description = "pandas DataFrames (default)"

    # ==================== File readers ====================

    @operation
    def read_csv(self, path, **kwargs) -> pd.DataFrame:
        return pd.read_csv(path, **kwargs)

    @operation
    def read_json(self, path, **kwargs) -> pd.DataFrame:
        return pd.read_json(path, **kwargs)

    @operation
    def read_parquet(self, path, columns: Optional[List[str]] = None, **kwargs) -> pd.DataFrame:
        return pd.read_parquet(path, columns=columns, **kwargs)

    @operation
    def read_orc(self, path, columns: Optional[List[str]] = None, **kwargs) -> pd.DataFrame:
        return pd.read_orc(path, columns=columns, **kwargs)

    @operation
    def read_hdf(self, path, key: Optional[str] = None, **kwargs) -> pd.DataFrame:
        return pd.read_hdf(path, key=key, **kwargs)

    # ==================== In-memory constructors ====================

    @operation
    def from_dict(self, data: Mapping[str, Any], orient: str = 'columns', **kwargs) -> pd.DataFrame:
        return pd.DataFrame.from_dict(dict(data), orient=orient, **kwargs)

    @operation
    def from_records(self, records, columns: Optional[List[str]] = None, **kwargs) -> pd.DataFrame:
        return pd.DataFrame.from_records(records, columns=columns, **kwargs)

    @operation
    def from_array(self, data, columns: Optional[List[str]] = None) -> pd.DataFrame:
        """
        Build a DataFrame from a 1-D or 2-D array-like.

        Raises:
            ValueError: If data has more than two dimensions
        """
        array = np.asarray(data)
        if array.ndim > 2:
            raise ValueError(f"from_array expects 1-D or 2-D data, got {array.ndim}-D")
        if array.ndim == 1:
            array = array.reshape(-1, 1)
        return pd.DataFrame(array, columns=columns)

    @operation
    def from_pandas(self, data) -> pd.DataFrame:
        if isinstance(data, pd.Series):
            return data.to_frame()
        if not isinstance(data, pd.DataFrame):
            raise TypeError(f"from_pandas expects a pandas object, got {type(data).__name__}")
        return data.copy()

    @operation
    def empty(self, dtypes: Dict[str, Any], index_name: Optional[str] = None) -> pd.DataFrame:
        """
        Schema-only DataFrame from a column -> dtype mapping.

        Example:
            >>> PandasBackend().empty({'x': 'int64', 'y': 'float64'}).dtypes.tolist()
            [dtype('int64'), dtype('float64')]
        """
        frame = pd.DataFrame({col: pd.Series(dtype=dtype) for col, dtype in dtypes.items()})
        frame.index.name = index_name
        return frame
