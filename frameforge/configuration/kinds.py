"""
Collection kind constants.

Each collection kind (DataFrame, Array) owns a separate backend namespace:
the same label may be registered under both kinds without clashing.
"""

from typing import Dict, List


class Kinds:
    """
    Collection kind constants and their built-in default backends.

    Example:
        >>> from frameforge.configuration.kinds import Kinds
        >>> Kinds.normalize('DataFrame')
        'dataframe'
        >>> Kinds.DEFAULTS[Kinds.ARRAY]
        'numpy'
    """

    DATAFRAME = 'dataframe'
    ARRAY = 'array'

    # Fixed at build time, not reconfigurable
    DEFAULTS: Dict[str, str] = {
        DATAFRAME: 'pandas',
        ARRAY: 'numpy',
    }

    @classmethod
    def all(cls) -> List[str]:
        """Get list of all collection kinds."""
        return [
            value for name, value in vars(cls).items()
            if not name.startswith('_') and isinstance(value, str) and name.isupper()
        ]

    @classmethod
    def normalize(cls, kind: str) -> str:
        """Lower-case and strip a kind string."""
        if not isinstance(kind, str) or not kind.strip():
            raise ValueError(f"Collection kind must be a non-empty string, got {kind!r}")
        return kind.strip().lower()

    @classmethod
    def validate(cls, kind: str) -> bool:
        """Check if kind is a known collection kind."""
        return isinstance(kind, str) and kind.strip().lower() in cls.all()

    @classmethod
    def max_length(cls) -> int:
        """Get the length of the longest kind name."""
        return max(len(k) for k in cls.all())
