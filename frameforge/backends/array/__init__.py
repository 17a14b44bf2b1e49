"""
Built-in Array backends.

Registered into the default registry by ``register_builtin_backends``.
"""

from .numpy import NumpyBackend
from .masked import MaskedBackend

__all__ = ['NumpyBackend', 'MaskedBackend']
