import logging
import sys
from typing import Optional


def backend_tag(kind: str, backend_name: Optional[str] = None) -> str:
    """
    Fixed-width logging tag for a collection kind and optional backend.

    Example:
        >>> backend_tag('dataframe', 'PD')
        '[DATAFRAME-PD]'
    """
    from .kinds import Kinds
    width = max(Kinds.max_length(), 7)
    tag = f"{kind}-{backend_name}" if backend_name else kind
    return f"[{tag.upper():^{width}s}]"


class DispatchLogger:
    """
    Centralized logger for backend dispatch that supports both file logging and console output.
    Provides colored output for console and timestamped, backend-tagged logs.
    """

    # ANSI color codes for console output
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    FORMAT = '%(asctime)s | %(method)12s | %(levelname)4s | %(message)s'

    def __init__(self,
                 name: str = "frameforge",
                 log_file: Optional[str] = None,
                 console_level: str = "WARNING",
                 file_level: str = "INFO",
                 use_colors: bool = True,
                 stream=None):
        """
        Initialize dispatch logger.

        Args:
            name: Logger name
            log_file: Path to log file (if None, only console logging)
            console_level: Minimum level for console output
            file_level: Minimum level for file output
            use_colors: Whether to use colored console output
            stream: Console stream (defaults to sys.stderr)
        """
        self.name = name
        self.log_file = log_file
        self.console_level = console_level
        self.file_level = file_level
        self.use_colors = use_colors
        self.stream = stream if stream is not None else sys.stderr

        self._setup_logger()

    def _setup_logger(self):
        """Setup the actual logging infrastructure."""
        self.logger = logging.getLogger(self.name)
        self.logger.setLevel(logging.DEBUG)
        self.use_colors_enabled = (
            self.use_colors and hasattr(self.stream, 'isatty') and self.stream.isatty()
        )

        # Clear any existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        console_handler = logging.StreamHandler(self.stream)
        console_handler.setLevel(getattr(logging, self.console_level.upper()))

        if self.use_colors_enabled:
            console_formatter = ColoredFormatter(fmt=self.FORMAT, datefmt='%H:%M:%S')
        else:
            console_formatter = logging.Formatter(fmt=self.FORMAT, datefmt='%H:%M:%S')

        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        if self.log_file:
            self._add_file_handler()

    def _add_file_handler(self):
        """Add file handler with current log_file path."""
        file_handler = logging.FileHandler(self.log_file)
        file_handler.setLevel(getattr(logging, self.file_level.upper()))
        file_handler.setFormatter(logging.Formatter(fmt=self.FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        self.logger.addHandler(file_handler)

    def close(self):
        """Close and detach all handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def log(self, level: str, method: str, message: str, *args, **kwargs):
        """Log with a backend tag in the 'method' field."""
        extra = {'method': method}
        getattr(self.logger, level.lower())(message, *args, extra=extra, **kwargs)


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # 4-letter abbreviations for consistent spacing
    LEVEL_ABBREVIATIONS = {
        'DEBUG': 'DBUG',
        'INFO': 'INFO',
        'WARNING': 'WARN',
        'ERROR': 'ERRO',
        'CRITICAL': 'CRIT'
    }

    def format(self, record):
        original_levelname = record.levelname
        record.levelname = self.LEVEL_ABBREVIATIONS.get(original_levelname, original_levelname[:4])

        color = DispatchLogger.COLORS.get(original_levelname, '')
        reset = DispatchLogger.COLORS['RESET']

        formatted = super().format(record)
        if color:
            formatted = f"{color}{formatted}{reset}"

        record.levelname = original_levelname
        return formatted
