"""
Built-in DataFrame backends.

Registered into the default registry by ``register_builtin_backends``.
"""

from .pandas import PandasBackend
from .sparse import SparseBackend

__all__ = ['PandasBackend', 'SparseBackend']
