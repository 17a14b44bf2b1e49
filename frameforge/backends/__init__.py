"""
Backend system for pluggable collection-creation libraries.

This package provides the registry of backend implementations per
collection kind (DataFrame, Array), the base class backends inherit from,
and discovery of built-in and installed backends.
"""

from .entrypoint import BackendEntrypoint, operation
from .registry import BackendRegistry, get_default_registry

__all__ = ['BackendEntrypoint', 'operation', 'BackendRegistry', 'get_default_registry']
