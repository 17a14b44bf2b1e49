"""
Base class for backend implementations.

A backend implementation holds one library's creation operations for one
collection kind (e.g. pandas for DataFrames, numpy for Arrays), an optional
fallback label consulted when an operation is missing, and the conversion
that moves a fallback result into the backend's own representation.
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from ..errors import BackendConfigurationError


_NOT_SET = object()


def operation(name_or_func=None):
    """
    Mark a BackendEntrypoint method as a creation operation.

    Usable bare (operation name is the method name) or with an explicit name.

    Example:
        >>> class MyBackend(BackendEntrypoint):
        ...     backend_label = 'mine'
        ...
        ...     @operation
        ...     def read_csv(self, path):
        ...         ...
        ...
        ...     @operation('from_dict')
        ...     def _from_mapping(self, data):
        ...         ...
    """
    if callable(name_or_func):
        name_or_func.__backend_operation__ = name_or_func.__name__
        return name_or_func

    def decorator(func):
        func.__backend_operation__ = name_or_func or func.__name__
        return func

    return decorator


class BackendEntrypoint:
    """
    One backend's capability set for one collection kind.

    Class Attributes (may be defined in subclasses):
        __backend_name__ (str): Short identifier for logging tags (e.g., 'PD', 'NP')
        backend_label (str): Registry label (e.g., 'pandas', 'cudf')
        fallback_label (str): Label of the backend consulted for missing operations
        description (str): Human-readable description of this backend
    """

    __backend_name__: str = None
    """Short backend identifier for logging tags (e.g., 'PD', 'NP')"""

    backend_label: str = None
    """Registry label, overridable per instance"""

    fallback_label: Optional[str] = None
    """Fallback backend label; None makes the backend terminal"""

    description: str = ""
    """Human-readable description of this backend"""

    def __init__(self,
                 label: Optional[str] = None,
                 fallback: Any = _NOT_SET,
                 operations: Optional[Mapping[str, Callable]] = None,
                 description: Optional[str] = None):
        """
        Initialize backend.

        Args:
            label: Registry label (defaults to class backend_label)
            fallback: Fallback label (defaults to class fallback_label)
            operations: Extra operations in addition to decorated methods
            description: Overrides the class description

        Raises:
            ValueError: If label is empty or the backend falls back to itself
        """
        label = label if label is not None else self.backend_label
        if not isinstance(label, str) or not label.strip():
            raise ValueError(
                f"{self.__class__.__name__} requires a non-empty label, got {label!r}"
            )
        self._label = label.strip().lower()

        fallback = self.fallback_label if fallback is _NOT_SET else fallback
        if fallback is not None:
            if not isinstance(fallback, str) or not fallback.strip():
                raise ValueError(f"Invalid fallback {fallback!r} for backend '{self._label}'")
            fallback = fallback.strip().lower()
            if fallback == self._label:
                raise ValueError(f"Backend '{self._label}' cannot fall back to itself")
        self._fallback = fallback

        if description is not None:
            self.description = description

        self._operations: Dict[str, Callable] = self._collect_operations()
        for name, func in (operations or {}).items():
            self.add_operation(name, func)

    def _collect_operations(self) -> Dict[str, Callable]:
        """Bind methods marked with @operation, subclasses overriding bases."""
        found = {}
        for klass in reversed(type(self).__mro__):
            for attr_name, attr in vars(klass).items():
                op_name = getattr(attr, '__backend_operation__', None)
                if op_name:
                    found[op_name] = getattr(self, attr_name)
        return found

    # ==================== Identity ====================

    @property
    def label(self) -> str:
        return self._label

    @property
    def fallback(self) -> Optional[str]:
        return self._fallback

    @property
    def is_terminal(self) -> bool:
        return self._fallback is None

    @property
    def name(self) -> str:
        """Short tag used in log records."""
        return self.__backend_name__ or self._label

    # ==================== Operations ====================

    @property
    def operations(self) -> Mapping[str, Callable]:
        """Read-only view of operation name -> callable."""
        return MappingProxyType(self._operations)

    def has_operation(self, name: str) -> bool:
        """Exact-match presence check."""
        return isinstance(name, str) and name in self._operations

    def get_operation(self, name: str) -> Optional[Callable]:
        return self._operations.get(name) if isinstance(name, str) else None

    def add_operation(self, name: str, func: Callable) -> None:
        """
        Add or replace an operation.

        Raises:
            ValueError: If name is empty
            TypeError: If func is not callable
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"Operation name must be a non-empty string, got {name!r}")
        if not callable(func):
            raise TypeError(f"Operation '{name}' must be callable, got {type(func).__name__}")
        self._operations[name] = func

    # ==================== Fallback ====================

    def move_from_fallback(self, result: Any, target_label: str) -> Any:
        """
        Convert a result produced by the fallback backend to this backend.

        Subclasses with a fallback must override this. Conversions must keep
        the schema of metadata-only (empty) results.

        Args:
            result: Object created by the fallback backend
            target_label: Label of the backend the result is moved to

        Raises:
            BackendConfigurationError: If the backend does not define a conversion
        """
        raise BackendConfigurationError(
            f"Backend '{self._label}' falls back to '{self._fallback}' "
            f"but does not implement move_from_fallback"
        )

    def __repr__(self) -> str:
        fallback = f", fallback='{self._fallback}'" if self._fallback else ''
        return f"{self.__class__.__name__}(label='{self._label}'{fallback})"
