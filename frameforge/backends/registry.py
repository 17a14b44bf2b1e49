"""
Backend registry for collection-creation backends.

Holds, per collection kind, a mapping from backend label to implementation.
Registration is additive: registering a label twice is rejected with
DuplicateBackendError, so a plugin can never silently shadow another one.
Replacing an entry requires an explicit ``unregister`` first.

Routers receive a registry by injection; ``get_default_registry()`` returns
the process-wide instance populated with the built-in backends.
"""

import logging
import threading
from typing import Dict, List, Optional

from .entrypoint import BackendEntrypoint
from ..configuration.kinds import Kinds
from ..errors import (
    BackendNotFoundError,
    DuplicateBackendError,
    FallbackCycleError,
)

logger = logging.getLogger(__name__)


class BackendRegistry:
    """
    Registry of backend implementations keyed by collection kind and label.

    The internal lock is held only while the mapping is read or written,
    never while a backend operation runs.

    Example:
        >>> registry = BackendRegistry()
        >>> registry.register('dataframe', 'pandas', PandasBackend())
        >>> registry.resolve('dataframe', 'pandas')
        PandasBackend(label='pandas')
    """

    def __init__(self):
        # kind -> {label -> implementation}
        self._backends: Dict[str, Dict[str, BackendEntrypoint]] = {}
        self._lock = threading.RLock()

    def register(self, kind: str, label: str, implementation: BackendEntrypoint) -> None:
        """
        Register a backend implementation.

        Args:
            kind: Collection kind (e.g., 'dataframe', 'array')
            label: Backend identifier (e.g., 'pandas', 'cudf')
            implementation: Backend instance whose label equals ``label``

        Raises:
            TypeError: If implementation is not a BackendEntrypoint
            ValueError: If label is empty or does not match implementation.label
            DuplicateBackendError: If label is already registered for kind
            FallbackCycleError: If the fallback chain leads back to label

        Example:
            >>> registry.register('dataframe', 'cudf', CudfBackend())
        """
        if not isinstance(implementation, BackendEntrypoint):
            raise TypeError(
                f"Backend implementation must inherit from BackendEntrypoint, "
                f"got {type(implementation).__name__}"
            )

        kind = Kinds.normalize(kind)
        if not isinstance(label, str) or not label.strip():
            raise ValueError(f"Backend label must be a non-empty string, got {label!r}")
        label = label.strip().lower()

        if implementation.label != label:
            raise ValueError(
                f"Label mismatch: registering '{label}' but implementation "
                f"is labelled '{implementation.label}'"
            )

        with self._lock:
            backends = self._backends.setdefault(kind, {})
            if label in backends:
                raise DuplicateBackendError(kind, label)

            # Walk the chain through already-registered labels
            chain = [label]
            next_label = implementation.fallback
            while next_label is not None and next_label in backends:
                if next_label in chain:
                    break
                chain.append(next_label)
                next_label = backends[next_label].fallback
            if next_label == label:
                raise FallbackCycleError(kind, chain + [label])

            backends[label] = implementation

        logger.debug("Registered %s backend '%s' -> %r", kind, label, implementation)

    def unregister(self, kind: str, label: str) -> BackendEntrypoint:
        """
        Remove a backend and return it.

        Raises:
            BackendNotFoundError: If backend not registered
        """
        kind = Kinds.normalize(kind)
        label = self._normalize_label(label)

        with self._lock:
            backends = self._backends.get(kind, {})
            if label not in backends:
                raise BackendNotFoundError(kind, label, list(backends))
            return backends.pop(label)

    def resolve(self, kind: str, label: str) -> BackendEntrypoint:
        """
        Get backend implementation by kind and label.

        Pure lookup: fallback chains are not traversed.

        Raises:
            BackendNotFoundError: If label is not registered for kind
        """
        kind = Kinds.normalize(kind)
        label = self._normalize_label(label)

        with self._lock:
            backends = self._backends.get(kind, {})
            implementation = backends.get(label)
            if implementation is None:
                raise BackendNotFoundError(kind, label, list(backends))
            return implementation

    def default_label(self, kind: str) -> str:
        """
        Built-in default backend label for kind.

        Raises:
            ValueError: If kind has no built-in default
        """
        kind = Kinds.normalize(kind)
        if kind not in Kinds.DEFAULTS:
            raise ValueError(
                f"Unknown collection kind '{kind}'. "
                f"Available kinds: {', '.join(Kinds.DEFAULTS)}"
            )
        return Kinds.DEFAULTS[kind]

    def fallback_chain(self, kind: str, label: str) -> List[str]:
        """
        Labels consulted for ``label``, in order, ending at a terminal backend.

        Raises:
            BackendNotFoundError: If any label in the chain is not registered
            FallbackCycleError: If the chain loops

        Example:
            >>> registry.fallback_chain('dataframe', 'sparse')
            ['sparse', 'pandas']
        """
        chain: List[str] = []
        current: Optional[str] = self._normalize_label(label)
        while current is not None:
            if current in chain:
                raise FallbackCycleError(Kinds.normalize(kind), chain + [current])
            chain.append(current)
            current = self.resolve(kind, current).fallback
        return chain

    def has_backend(self, kind: str, label: str) -> bool:
        kind = Kinds.normalize(kind)
        label = self._normalize_label(label)
        with self._lock:
            return label in self._backends.get(kind, {})

    def list_backends(self, kind: Optional[str] = None) -> Dict[str, List[str]]:
        """
        List registered backend labels.

        Args:
            kind: If provided, only list backends for this kind

        Returns:
            Dict mapping kinds to lists of labels

        Example:
            >>> registry.list_backends()
            {'dataframe': ['pandas', 'sparse'], 'array': ['numpy', 'masked']}
        """
        with self._lock:
            if kind is not None:
                kind = Kinds.normalize(kind)
                if kind not in self._backends:
                    return {}
                return {kind: list(self._backends[kind])}

            return {k: list(backends) for k, backends in self._backends.items()}

    def get_kind_info(self, kind: str) -> Dict[str, BackendEntrypoint]:
        """
        Copy of the label -> implementation mapping for kind.

        Raises:
            ValueError: If nothing was registered for kind
        """
        kind = Kinds.normalize(kind)
        with self._lock:
            if kind not in self._backends:
                available = ', '.join(self._backends) or 'none'
                raise ValueError(
                    f"Unknown collection kind '{kind}'. Available kinds: {available}"
                )
            return dict(self._backends[kind])

    def kinds(self) -> List[str]:
        with self._lock:
            return list(self._backends)

    @staticmethod
    def _normalize_label(label: str) -> str:
        if not isinstance(label, str) or not label.strip():
            raise ValueError(f"Backend label must be a non-empty string, got {label!r}")
        return label.strip().lower()


_default_registry: Optional[BackendRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> BackendRegistry:
    """
    Get the process-wide registry, populated with the built-in backends
    on first use.
    """
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            from .builtin import register_builtin_backends

            registry = BackendRegistry()
            register_builtin_backends(registry)
            _default_registry = registry
        return _default_registry
