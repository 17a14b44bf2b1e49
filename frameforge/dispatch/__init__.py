"""
Routing of creation operations to backend implementations.
"""

from .meta import make_meta, is_meta
from .router import DispatchRouter, dispatch, get_router

__all__ = ['DispatchRouter', 'dispatch', 'get_router', 'make_meta', 'is_meta']
