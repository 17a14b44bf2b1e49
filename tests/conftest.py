# pytest configuration and fixtures

from dataclasses import dataclass

import pandas as pd
import pytest

from frameforge.backends.entrypoint import BackendEntrypoint, operation
from frameforge.backends.registry import BackendRegistry
from frameforge.configuration.config import ActiveBackendConfig
from frameforge.dispatch.router import DispatchRouter


@dataclass
class GpuFrame:
    """Stand-in for a GPU-native DataFrame produced by a move from pandas."""
    data: pd.DataFrame
    source: str = 'pandas'


class PandasLikeBackend(BackendEntrypoint):
    """Terminal backend defining read_parquet and read_json."""
    __backend_name__ = 'PD'
    backend_label = 'pandas'
    description = "test pandas"

    @operation
    def read_parquet(self, path, columns=None):
        return pd.DataFrame({'path': [path], 'reader': ['parquet']})

    @operation
    def read_json(self, path):
        return pd.DataFrame({'path': [path], 'reader': ['json']})

    @operation
    def empty(self, columns):
        return pd.DataFrame({c: pd.Series(dtype='float64') for c in columns})


class CudfLikeBackend(BackendEntrypoint):
    """Backend defining read_orc only, falling back to pandas."""
    __backend_name__ = 'CU'
    backend_label = 'cudf'
    fallback_label = 'pandas'
    description = "test cudf"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.moves = []

    @operation
    def read_orc(self, path):
        return GpuFrame(pd.DataFrame({'path': [path], 'reader': ['orc']}), source='cudf')

    def move_from_fallback(self, result, target_label):
        self.moves.append((result, target_label))
        return GpuFrame(result)


@pytest.fixture
def pandas_backend():
    return PandasLikeBackend()


@pytest.fixture
def cudf_backend():
    return CudfLikeBackend()


@pytest.fixture
def registry(pandas_backend, cudf_backend):
    """Isolated registry holding the pandas/cudf example graph."""
    registry = BackendRegistry()
    registry.register('dataframe', 'pandas', pandas_backend)
    registry.register('dataframe', 'cudf', cudf_backend)
    return registry


@pytest.fixture
def config():
    """Configuration that ignores FRAMEFORGE_* environment variables."""
    return ActiveBackendConfig(use_env=False)


@pytest.fixture
def router(registry, config):
    return DispatchRouter(registry, config)


@pytest.fixture
def gpu_frame():
    """Type produced by the cudf-like backend."""
    return GpuFrame
