from typing import Any, Dict, Optional
from dataclasses import dataclass


@dataclass
class BackendOptions:
    """
    Resolved backend options for one collection kind.

    Attributes:
        library: Selected backend label (None means use the kind's default)
        allow_fallback: Route missing operations to the fallback backend
        warn_fallback: Emit a FallbackWarning whenever fallback is used
    """
    library: Optional[str] = None
    allow_fallback: bool = True
    warn_fallback: bool = True

    def __post_init__(self):
        """Validate parameters after initialization."""
        self._validate_params()

    def _validate_params(self) -> None:
        if self.library is not None:
            if not isinstance(self.library, str) or not self.library.strip():
                raise ValueError(
                    f"Invalid library={self.library!r}. Must be a non-empty string or None"
                )
            self.library = self.library.strip().lower()

        for name in ('allow_fallback', 'warn_fallback'):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"Invalid {name}={value!r}. Allowed values: [True, False]")

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}
