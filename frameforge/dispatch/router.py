"""
Dispatch of named creation operations to backend implementations.

The router reads the active backend for a collection kind from the
configuration, calls the operation on that backend when it defines it, and
otherwise walks the fallback chain. A result produced by a fallback backend
is always moved into the active backend's representation before it is
returned.
"""

import logging
import threading
import warnings
from typing import Any, List, Optional, Set, Tuple

from ..backends.entrypoint import BackendEntrypoint
from ..backends.registry import BackendRegistry, get_default_registry
from ..configuration.config import ActiveBackendConfig, get_default_config
from ..configuration.kinds import Kinds
from ..configuration.logger import DispatchLogger, backend_tag
from ..errors import (
    BackendError,
    FallbackConversionError,
    FallbackCycleError,
    FallbackWarning,
    OperationNotImplementedError,
)

_module_logger = logging.getLogger('frameforge.dispatch')


class DispatchRouter:
    """
    Routes creation operations to the configured backend.

    Example:
        >>> router = DispatchRouter(registry, config)
        >>> with config.set(dataframe__backend__library='sparse'):
        ...     df = router.dispatch('dataframe', 'read_csv', 'data.csv')
    """

    def __init__(self,
                 registry: Optional[BackendRegistry] = None,
                 config: Optional[ActiveBackendConfig] = None,
                 logger: Optional[DispatchLogger] = None):
        """
        Initialize router.

        Args:
            registry: Backend registry (default: process-wide registry)
            config: Active backend configuration (default: process-wide config)
            logger: DispatchLogger for logging (None logs to 'frameforge.dispatch')
        """
        self.registry = registry if registry is not None else get_default_registry()
        self.config = config if config is not None else get_default_config()
        self.logger = logger

    # ==================== Dispatch ====================

    def dispatch(self, kind: str, operation_name: str, *args, **kwargs) -> Any:
        """
        Run a creation operation on the active backend for kind.

        Args:
            kind: Collection kind (e.g., 'dataframe', 'array')
            operation_name: Operation to run (exact name, e.g. 'read_parquet')
            *args: Positional arguments passed to the operation
            **kwargs: Keyword arguments passed to the operation

        Returns:
            The operation's result in the active backend's representation

        Raises:
            BackendNotFoundError: If the active backend is not registered
            OperationNotImplementedError: If no backend in the chain can serve it
            FallbackConversionError: If converting a fallback result fails
        """
        return self._run(kind, operation_name, args, kwargs, stacklevel=3)

    def _run(self, kind: str, operation_name: str, args: tuple, kwargs: dict,
             stacklevel: int) -> Any:
        """Dispatch and warn; stacklevel points the warning at the caller's frame."""
        kind = Kinds.normalize(kind)
        active = self.active_label(kind)

        result, used = self._dispatch(kind, active, operation_name, args, kwargs, visited=[])

        if used != active and self.config.warn_fallback(kind):
            warnings.warn(
                f"Operation '{operation_name}' is not implemented by the {kind} backend "
                f"'{active}'; used '{used}' and moved the result to '{active}'",
                FallbackWarning,
                stacklevel=stacklevel,
            )
        return result

    def _dispatch(self, kind: str, label: str, operation_name: str,
                  args: tuple, kwargs: dict, visited: List[str]) -> Tuple[Any, str]:
        """Resolve and call, recursing into fallbacks. Returns (result, label used)."""
        impl = self._visit(kind, label, visited)
        func = impl.get_operation(operation_name)

        if func is not None:
            self.log(kind, impl, f"'{operation_name}' -> {label}", level='DEBUG')
            return func(*args, **kwargs), label

        fallback = self._next_link(kind, impl, operation_name, visited)
        self.log(kind, impl, f"'{operation_name}' not implemented, falling back to '{fallback}'")
        result, used = self._dispatch(kind, fallback, operation_name, args, kwargs, visited)
        return self._move(kind, impl, operation_name, result, used), used

    def _visit(self, kind: str, label: str, visited: List[str]) -> BackendEntrypoint:
        """Record label on the walked chain and resolve it."""
        if label in visited:
            raise FallbackCycleError(kind, visited + [label])
        visited.append(label)
        return self.registry.resolve(kind, label)

    def _next_link(self, kind: str, impl: BackendEntrypoint, operation_name: str,
                   visited: List[str]) -> str:
        """
        Fallback label to try after impl lacks operation_name.

        Raises:
            OperationNotImplementedError: If impl is terminal or fallback is disabled
        """
        if impl.fallback is None:
            reason = (OperationNotImplementedError.EXHAUSTED if len(visited) > 1
                      else OperationNotImplementedError.NO_FALLBACK)
            raise OperationNotImplementedError(
                kind, operation_name, visited[0], reason, chain=visited
            )

        if not self.config.allow_fallback(kind):
            raise OperationNotImplementedError(
                kind, operation_name, visited[0], OperationNotImplementedError.DISABLED,
                chain=visited
            )

        return impl.fallback

    def _move(self, kind: str, impl: BackendEntrypoint, operation_name: str,
              result: Any, source: str) -> Any:
        """Convert a fallback result into impl's representation."""
        try:
            return impl.move_from_fallback(result, impl.label)
        except BackendError:
            raise
        except Exception as e:
            self.log(kind, impl, f"Conversion of '{operation_name}' result from '{source}' failed: {e}",
                     level='ERROR')
            raise FallbackConversionError(operation_name, source, impl.label, str(e)) from e

    # ==================== Introspection ====================

    def active_label(self, kind: str) -> str:
        """Configured backend label for kind, or the kind's built-in default."""
        kind = Kinds.normalize(kind)
        return self.config.active_backend(kind) or self.registry.default_label(kind)

    def backend_for(self, kind: str, operation_name: str) -> str:
        """
        Label of the backend that would serve operation_name, without calling it.

        Links are resolved one at a time, as dispatch resolves them, so an
        unregistered fallback only matters once it would be consulted.

        Raises:
            OperationNotImplementedError: If the chain cannot serve it
        """
        kind = Kinds.normalize(kind)
        label = self.active_label(kind)
        visited: List[str] = []

        while True:
            impl = self._visit(kind, label, visited)
            if impl.has_operation(operation_name):
                return label
            label = self._next_link(kind, impl, operation_name, visited)

    def available_operations(self, kind: str, label: Optional[str] = None) -> Set[str]:
        """
        Operation names reachable from label (default: active) through its fallback chain.

        The walk stops at the first fallback label that is not registered yet.
        """
        kind = Kinds.normalize(kind)
        label = label or self.active_label(kind)
        visited: List[str] = []
        names: Set[str] = set()

        while label is not None:
            impl = self._visit(kind, label, visited)
            names.update(impl.operations)
            label = impl.fallback
            if label is not None and not self.registry.has_backend(kind, label):
                break
        return names

    # ==================== Logging ====================

    def log(self, kind: str, impl: BackendEntrypoint, message: str, level: str = 'INFO') -> None:
        """
        Standard logging interface.

        Args:
            kind: Collection kind, used in the record tag
            impl: Backend the message is about
            message: Log message
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        tag = backend_tag(kind, impl.name)
        if self.logger:
            self.logger.log(level.lower(), tag, message)
        else:
            getattr(_module_logger, level.lower())(message, extra={'method': tag})


_default_router: Optional[DispatchRouter] = None
_default_router_lock = threading.Lock()


def get_router() -> DispatchRouter:
    """Router over the process-wide registry and configuration."""
    global _default_router
    with _default_router_lock:
        if _default_router is None:
            _default_router = DispatchRouter()
        return _default_router


def dispatch(kind: str, operation_name: str, *args, **kwargs) -> Any:
    """
    Run a creation operation through the process-wide router.

    Example:
        >>> from frameforge import dispatch, config
        >>> df = dispatch('dataframe', 'from_dict', {'a': [1, 0, 0]})
        >>> with config.set(dataframe__backend__library='sparse'):
        ...     sdf = dispatch('dataframe', 'read_csv', 'data.csv')
    """
    return get_router()._run(kind, operation_name, args, kwargs, stacklevel=3)
