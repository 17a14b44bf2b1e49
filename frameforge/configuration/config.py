"""
Active backend configuration with scoped overrides.

Recognised options, namespaced per collection kind:

    <kind>.backend.library         selects the active backend label
    <kind>.backend.allow-fallback  route missing operations to the fallback (default True)
    <kind>.backend.warn-fallback   warn whenever fallback was used (default True)

Sources, lowest priority first: built-in defaults, environment variables
(``FRAMEFORGE_DATAFRAME__BACKEND__LIBRARY=sparse``), permanent ``update()``
calls, then ``set()`` scopes with the innermost scope winning.

Scoped overrides live in a ``contextvars.ContextVar``: they are visible to code
running in the same thread or asyncio task and never to unrelated ones.
"""

import os
import logging
import threading
import contextvars
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from .kinds import Kinds
from .options import BackendOptions
from ..errors import BackendConfigurationError

logger = logging.getLogger(__name__)


ENV_PREFIX = 'FRAMEFORGE_'

# option name -> BackendOptions attribute
OPTION_FIELDS: Dict[str, str] = {
    'library': 'library',
    'allow-fallback': 'allow_fallback',
    'warn-fallback': 'warn_fallback',
}

OPTION_DEFAULTS: Dict[str, Any] = {
    'library': None,
    'allow-fallback': True,
    'warn-fallback': True,
}

_TRUE_STRINGS = {'true', '1', 'yes', 'on'}
_FALSE_STRINGS = {'false', '0', 'no', 'off'}


def option_key(kind: str, option: str) -> str:
    """Build the dotted option key, e.g. ``dataframe.backend.library``."""
    return normalize_key(f"{kind}.backend.{option}")


def normalize_key(key: str) -> str:
    """
    Normalise an option key and check it names a known option.

    Accepts underscore spellings (``allow_fallback``) and the keyword form
    with double underscores (``dataframe__backend__library``).

    Raises:
        BackendConfigurationError: If key is not ``<kind>.backend.<option>``
            with a known kind and option
    """
    if not isinstance(key, str):
        raise BackendConfigurationError(f"Option key must be a string, got {key!r}")

    key = key.strip().lower().replace('__', '.')
    parts = key.split('.')
    if len(parts) != 3 or parts[1] != 'backend' or not parts[0]:
        raise BackendConfigurationError(
            f"Invalid option key '{key}'. Expected '<kind>.backend.<option>'"
        )

    if not Kinds.validate(parts[0]):
        raise BackendConfigurationError(
            f"Unknown collection kind '{parts[0]}' in '{key}'. "
            f"Available kinds: {', '.join(Kinds.all())}"
        )

    option = parts[2].replace('_', '-')
    if option not in OPTION_FIELDS:
        raise BackendConfigurationError(
            f"Unknown option '{option}' in '{key}'. "
            f"Available options: {', '.join(OPTION_FIELDS)}"
        )

    return f"{parts[0]}.backend.{option}"


def coerce_value(key: str, value: Any) -> Any:
    """Validate and convert an option value for the given (normalised) key."""
    option = key.rsplit('.', 1)[-1]

    if option == 'library':
        if value is None:
            return None
        if not isinstance(value, str) or not value.strip():
            raise BackendConfigurationError(
                f"Invalid value for '{key}': {value!r}. Must be a non-empty string"
            )
        return value.strip().lower()

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise BackendConfigurationError(
        f"Invalid value for '{key}': {value!r}. Must be a boolean"
    )


def flatten_options(options: Mapping[str, Any], prefix: str = '') -> Dict[str, Any]:
    """
    Flatten a nested mapping into dotted option keys.

    Example:
        >>> flatten_options({'dataframe': {'backend': {'library': 'sparse'}}})
        {'dataframe.backend.library': 'sparse'}
    """
    flat: Dict[str, Any] = {}
    for key, value in options.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_options(value, full_key))
        else:
            flat[full_key] = value
    return flat


def normalize_options(options: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, Any]:
    """Normalise keys and coerce values of a (possibly nested) option mapping."""
    merged = flatten_options(dict(options or {}))
    merged.update(kwargs)

    normalized = {}
    for key, value in merged.items():
        norm_key = normalize_key(key)
        normalized[norm_key] = coerce_value(norm_key, value)
    return normalized


def read_env_options(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Collect options from ``FRAMEFORGE_*`` environment variables.

    Variables with an invalid key or value are logged and skipped, so a
    stray variable never prevents the package from loading.
    """
    environ = os.environ if environ is None else environ
    options = {}
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        try:
            key = normalize_key(name[len(ENV_PREFIX):])
            options[key] = coerce_value(key, value)
        except BackendConfigurationError as e:
            logger.warning("Ignoring environment variable %s: %s", name, e)
    return options


class ActiveBackendConfig:
    """
    Backend selection state read by the router at dispatch time.

    Example:
        >>> config = ActiveBackendConfig()
        >>> with config.set({'dataframe.backend.library': 'sparse'}):
        ...     config.active_backend('dataframe')
        'sparse'
        >>> config.active_backend('dataframe') is None
        True
    """

    def __init__(self, options: Optional[Mapping[str, Any]] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 use_env: bool = True):
        """
        Initialize configuration.

        Args:
            options: Initial process-wide options (nested or dotted keys)
            environ: Environment mapping to read (defaults to os.environ)
            use_env: Read FRAMEFORGE_* environment variables
        """
        self._lock = threading.Lock()
        self._env_options = read_env_options(environ) if use_env else {}
        self._global_options: Dict[str, Any] = normalize_options(options)
        self._scopes: contextvars.ContextVar[Tuple[Dict[str, Any], ...]] = contextvars.ContextVar(
            f'frameforge_backend_scopes_{id(self):x}', default=()
        )

    # ==================== Reading ====================

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get the effective value of an option.

        Args:
            key: Option key (e.g. 'dataframe.backend.library')
            default: Returned when the option is unset everywhere

        Returns:
            Innermost scoped value, else process-wide, else environment,
            else the built-in default (or ``default`` if that is None)
        """
        key = normalize_key(key)

        for scope in reversed(self._scopes.get()):
            if key in scope:
                return scope[key]

        with self._lock:
            if key in self._global_options:
                return self._global_options[key]

        if key in self._env_options:
            return self._env_options[key]

        builtin = OPTION_DEFAULTS[key.rsplit('.', 1)[-1]]
        return default if builtin is None else builtin

    def active_backend(self, kind: str) -> Optional[str]:
        """Selected backend label for kind, or None when unset."""
        return self.get(option_key(kind, 'library'))

    def allow_fallback(self, kind: str) -> bool:
        return self.get(option_key(kind, 'allow-fallback'))

    def warn_fallback(self, kind: str) -> bool:
        return self.get(option_key(kind, 'warn-fallback'))

    def options(self, kind: str) -> BackendOptions:
        """Resolved options for kind as a BackendOptions instance."""
        return BackendOptions(
            library=self.active_backend(kind),
            allow_fallback=self.allow_fallback(kind),
            warn_fallback=self.warn_fallback(kind),
        )

    def snapshot(self) -> Dict[str, Any]:
        """All explicitly configured options (environment, global, scopes) merged."""
        merged = dict(self._env_options)
        with self._lock:
            merged.update(self._global_options)
        for scope in self._scopes.get():
            merged.update(scope)
        return merged

    @property
    def depth(self) -> int:
        """Number of scoped overrides active in the current context."""
        return len(self._scopes.get())

    # ==================== Writing ====================

    @contextmanager
    def set(self, options: Optional[Mapping[str, Any]] = None, **kwargs) -> Iterator['ActiveBackendConfig']:
        """
        Temporarily override options for the enclosed block.

        The previous state is restored exactly on exit, including when the
        block raises.

        Args:
            options: Mapping of option keys (dotted or nested) to values
            **kwargs: Options in keyword form, '__' standing for '.'

        Example:
            >>> with config.set(dataframe__backend__library='sparse'):
            ...     df = dispatch('dataframe', 'read_csv', 'data.csv')
        """
        overrides = normalize_options(options, **kwargs)
        token = self._scopes.set(self._scopes.get() + (overrides,))
        try:
            yield self
        finally:
            self._scopes.reset(token)

    def update(self, options: Optional[Mapping[str, Any]] = None, **kwargs) -> None:
        """Permanently set process-wide options (below any active scopes)."""
        normalized = normalize_options(options, **kwargs)
        with self._lock:
            self._global_options.update(normalized)

    def clear(self) -> None:
        """Drop all process-wide options set through ``update``."""
        with self._lock:
            self._global_options.clear()

    # ==================== Context propagation ====================

    def bind(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """
        Capture the current scopes so ``func`` sees them on another thread.

        Example:
            >>> with config.set(array__backend__library='masked'):
            ...     future = executor.submit(config.bind(create_array))
        """
        context = contextvars.copy_context()

        def _run_in_context(*args, **kwargs):
            return context.copy().run(func, *args, **kwargs)

        return _run_in_context


_default_config: Optional[ActiveBackendConfig] = None
_default_config_lock = threading.Lock()


def get_default_config() -> ActiveBackendConfig:
    """Get the process-wide configuration, creating it on first use."""
    global _default_config
    with _default_config_lock:
        if _default_config is None:
            _default_config = ActiveBackendConfig()
        return _default_config
