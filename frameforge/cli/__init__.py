"""
frameforge CLI - inspect registered backends and validate configuration.
"""

from .main import main

__all__ = ['main']
