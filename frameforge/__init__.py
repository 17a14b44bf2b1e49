"""
frameforge - backend-library dispatch for collection creation.

Creation operations (``read_parquet``, ``from_dict``, ``zeros``, ...) are
routed to the backend library selected per collection kind, with fallback
to another backend when the selected one does not implement an operation.

Example:
    >>> import frameforge
    >>> df = frameforge.dispatch('dataframe', 'from_dict', {'a': [0, 0, 1]})
    >>> with frameforge.config.set(dataframe__backend__library='sparse'):
    ...     sdf = frameforge.dispatch('dataframe', 'read_csv', 'data.csv')
"""

__version__ = '0.1.0'

from .errors import (
    BackendError,
    BackendNotFoundError,
    DuplicateBackendError,
    FallbackCycleError,
    BackendConfigurationError,
    OperationNotImplementedError,
    FallbackConversionError,
    FallbackWarning,
)
from .configuration import Kinds, ActiveBackendConfig, BackendOptions, get_default_config
from .backends import BackendEntrypoint, BackendRegistry, get_default_registry, operation
from .dispatch import DispatchRouter, dispatch, get_router, make_meta, is_meta

config = get_default_config()


def register(kind: str, label: str, implementation: BackendEntrypoint) -> None:
    """Register a backend in the process-wide registry."""
    get_default_registry().register(kind, label, implementation)


__all__ = [
    '__version__',
    'config',
    'dispatch',
    'register',
    'get_router',
    'get_default_registry',
    'get_default_config',
    'Kinds',
    'ActiveBackendConfig',
    'BackendOptions',
    'BackendEntrypoint',
    'BackendRegistry',
    'DispatchRouter',
    'operation',
    'make_meta',
    'is_meta',
    'BackendError',
    'BackendNotFoundError',
    'DuplicateBackendError',
    'FallbackCycleError',
    'BackendConfigurationError',
    'OperationNotImplementedError',
    'FallbackConversionError',
    'FallbackWarning',
]
