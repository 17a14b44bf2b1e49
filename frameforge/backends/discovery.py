"""
Automatic backend discovery for frameforge.

Two discovery paths feed the registry before the first dispatch:

1. Package scan (built-in backends) based on naming conventions:
   - File: <backend_label>.py (e.g., pandas.py, numpy.py)
   - Class: Must end with 'Backend' (e.g., PandasBackend, NumpyBackend)
   - One backend class per file

2. Installed entry points, for backends shipped by other distributions:

       [project.entry-points."frameforge.dataframe.backends"]
       cudf = "my_gpu_pkg.backend:CudfBackend"

Example:
    >>> from pathlib import Path
    >>> auto_register_backends('dataframe', Path(__file__).parent / 'dataframe', registry)
    2
"""

import importlib
import inspect
import logging
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Optional

from .entrypoint import BackendEntrypoint
from .registry import BackendRegistry
from ..configuration.kinds import Kinds

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = 'frameforge.{kind}.backends'


def auto_register_backends(kind: str, package_path: Path, registry: BackendRegistry,
                           verbose: bool = False) -> int:
    """
    Auto-discover and register backends in a package directory.

    Args:
        kind: Collection kind namespace (e.g., 'dataframe', 'array')
        package_path: Path to backend package directory
        registry: Registry to populate
        verbose: Log registrations at INFO instead of DEBUG

    Returns:
        Number of backends successfully registered
    """
    level = logging.INFO if verbose else logging.DEBUG

    if not package_path.exists() or not package_path.is_dir():
        logger.warning("Backend directory not found: %s", package_path)
        return 0

    package_name = package_path.name
    registered_count = 0

    for file in sorted(package_path.glob('*.py')):
        if file.stem in ['__init__', 'base', 'discovery']:
            continue

        module_name = file.stem

        try:
            module = importlib.import_module(
                f'frameforge.backends.{package_name}.{module_name}'
            )
            backend_class = _find_backend_class(module)

            if backend_class is None:
                logger.warning("No backend class found in %s", file.name)
                continue

            implementation = backend_class()
            registry.register(kind, implementation.label, implementation)
            registered_count += 1

            desc = getattr(backend_class, 'description', '')
            desc_str = f" - {desc}" if desc else ""
            logger.log(level, "Registered: %s/%s -> %s%s",
                       kind, implementation.label, backend_class.__name__, desc_str)

        except Exception as e:
            logger.warning("Failed to register %s backend from %s: %s", kind, file.name, e)

    return registered_count


def load_entry_point_backends(registry: BackendRegistry, kind: Optional[str] = None) -> int:
    """
    Register backends declared by installed distributions.

    Args:
        registry: Registry to populate
        kind: Only load this kind's group (default: all known kinds)

    Returns:
        Number of backends successfully registered
    """
    kinds = [Kinds.normalize(kind)] if kind else Kinds.all()
    registered_count = 0

    for kind_name in kinds:
        group = ENTRY_POINT_GROUP.format(kind=kind_name)
        for ep in entry_points(group=group):
            try:
                implementation = _instantiate(ep.load())
                if implementation.label != ep.name.lower():
                    logger.warning(
                        "Entry point '%s' in %s provides backend labelled '%s'",
                        ep.name, group, implementation.label
                    )
                registry.register(kind_name, implementation.label, implementation)
                registered_count += 1
                logger.debug("Registered: %s/%s from entry point %s",
                             kind_name, implementation.label, ep.value)
            except Exception as e:
                logger.warning("Failed to load backend entry point '%s' (%s): %s",
                               ep.name, group, e)

    return registered_count


def _instantiate(obj: Any) -> BackendEntrypoint:
    """Turn an entry point target (class, instance or factory) into a backend."""
    if isinstance(obj, BackendEntrypoint):
        return obj
    if inspect.isclass(obj) and issubclass(obj, BackendEntrypoint):
        return obj()
    if callable(obj):
        result = obj()
        if isinstance(result, BackendEntrypoint):
            return result
    raise TypeError(f"Entry point target {obj!r} does not provide a BackendEntrypoint")


def _find_backend_class(module):
    """
    Find backend class in module.

    Looks for a class that:
    - Ends with 'Backend'
    - Is defined in the module (not imported)
    - Inherits from BackendEntrypoint

    Args:
        module: Imported Python module

    Returns:
        Backend class or None if not found
    """
    for name, obj in inspect.getmembers(module, inspect.isclass):
        if (name.endswith('Backend') and
            obj.__module__ == module.__name__ and
            issubclass(obj, BackendEntrypoint) and
            obj is not BackendEntrypoint):
            return obj

    return None


def validate_backend_metadata(backend_class) -> tuple[bool, Optional[str]]:
    """
    Validate that a backend class has proper metadata.

    Checks for:
    - backend_label attribute (non-empty string)
    - description attribute (string)
    - fallback_label attribute (string or None, different from backend_label)

    Args:
        backend_class: Backend class to validate

    Returns:
        (is_valid, error_message) tuple
    """
    name = getattr(backend_class, '__name__', repr(backend_class))

    if not inspect.isclass(backend_class) or not issubclass(backend_class, BackendEntrypoint):
        return False, f"{name} must inherit from BackendEntrypoint"

    label = getattr(backend_class, 'backend_label', None)
    if not isinstance(label, str) or not label:
        return False, f"{name}.backend_label must be a non-empty string"

    if not isinstance(getattr(backend_class, 'description', None), str):
        return False, f"{name}.description must be a string"

    fallback = getattr(backend_class, 'fallback_label', None)
    if fallback is not None and not isinstance(fallback, str):
        return False, f"{name}.fallback_label must be a string or None"

    if fallback is not None and fallback.lower() == label.lower():
        return False, f"{name} cannot fall back to itself"

    return True, None
