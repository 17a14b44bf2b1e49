"""
Registration of the backends shipped with frameforge.
"""

from pathlib import Path

from .discovery import auto_register_backends, load_entry_point_backends
from .registry import BackendRegistry
from ..configuration.kinds import Kinds


def register_builtin_backends(registry: BackendRegistry, include_entry_points: bool = True) -> int:
    """
    Populate a registry with the built-in backends.

    Args:
        registry: Registry to populate
        include_entry_points: Also load backends declared by installed packages

    Returns:
        Number of backends registered
    """
    package_dir = Path(__file__).parent

    count = auto_register_backends(Kinds.DATAFRAME, package_dir / 'dataframe', registry)
    count += auto_register_backends(Kinds.ARRAY, package_dir / 'array', registry)

    if include_entry_points:
        count += load_entry_point_backends(registry)

    return count
