"""
Error taxonomy for backend registration and dispatch.

All errors are terminal and propagate to the caller of ``dispatch``.
Fallback substitution is the only recovery path and it is not an error.
"""

from typing import List, Optional, Sequence


class BackendError(Exception):
    """Base class for all backend registry and dispatch errors."""


class BackendNotFoundError(BackendError, ValueError):
    """Requested backend label was never registered for this collection kind."""

    def __init__(self, kind: str, label: str, available: Optional[Sequence[str]] = None):
        self.kind = kind
        self.label = label
        self.available = list(available or [])
        available_str = ', '.join(self.available) if self.available else 'none'
        super().__init__(
            f"Unknown backend '{label}' for kind '{kind}'. "
            f"Available backends: {available_str}"
        )


class DuplicateBackendError(BackendError, ValueError):
    """Backend label already registered for this collection kind."""

    def __init__(self, kind: str, label: str):
        self.kind = kind
        self.label = label
        super().__init__(
            f"Backend '{label}' already registered for kind '{kind}'. "
            f"Use a different label or unregister first."
        )


class FallbackCycleError(BackendError, ValueError):
    """Fallback references form a cycle."""

    def __init__(self, kind: str, chain: List[str]):
        self.kind = kind
        self.chain = list(chain)
        super().__init__(
            f"Fallback cycle detected for kind '{kind}': {' -> '.join(self.chain)}"
        )


class BackendConfigurationError(BackendError):
    """Backend or option configuration is invalid."""


class OperationNotImplementedError(BackendError, NotImplementedError):
    """
    No backend in the fallback chain can satisfy the requested operation.

    Attributes:
        kind: Collection kind
        operation: Requested operation name
        backend: Active backend label the request was made against
        reason: 'no-fallback', 'disabled' or 'exhausted'
        chain: Backend labels that were consulted
    """

    NO_FALLBACK = 'no-fallback'
    DISABLED = 'disabled'
    EXHAUSTED = 'exhausted'

    def __init__(self, kind: str, operation: str, backend: str, reason: str,
                 chain: Optional[Sequence[str]] = None):
        self.kind = kind
        self.operation = operation
        self.backend = backend
        self.reason = reason
        self.chain = list(chain or [backend])

        if reason == self.DISABLED:
            detail = "fallback disabled by configuration"
        elif reason == self.EXHAUSTED:
            detail = f"fallback chain exhausted ({' -> '.join(self.chain)})"
        else:
            detail = "and no fallback configured"

        super().__init__(
            f"Operation '{operation}' not implemented for {kind} backend '{backend}'; {detail}"
        )

    @property
    def fallback_disabled(self) -> bool:
        return self.reason == self.DISABLED


class FallbackConversionError(BackendError):
    """``move_from_fallback`` failed to convert a fallback result."""

    def __init__(self, operation: str, source: str, target: str, message: str = ''):
        self.operation = operation
        self.source = source
        self.target = target
        suffix = f": {message}" if message else ''
        super().__init__(
            f"Failed to move result of '{operation}' from backend '{source}' "
            f"to '{target}'{suffix}"
        )


class FallbackWarning(UserWarning):
    """Emitted when an operation was served by a fallback backend."""
