"""
Logging setup for the Go DAO generator.

Console output goes through a colored formatter on stderr. The progress
log (one line per described table plus the run summary) is a plain file
that is recreated on every run.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

PROGRESS_LOGGER_NAME = "go_dao_generator.progress"


class ColoredFormatter(logging.Formatter):
    """
    Logging formatter that adds ANSI color codes to console messages.

    Errors and warnings are colored by level; INFO messages produced by the
    ``log_*`` helpers are recognised by their leading marker.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }

    MARKER_COLORS = {
        '✓': '\033[92m',  # success, bright green
        '→': '\033[94m',  # progress, bright blue
        '•': '\033[96m',  # highlight, bright cyan
    }

    RESET = '\033[0m'
    BOLD = '\033[1m'

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True):
        """
        Args:
            fmt: Log format string (uses default if None)
            use_colors: Whether to use colors; also disabled when stderr is not a TTY
        """
        if fmt is None:
            fmt = "%(levelname)s: %(message)s"
        super().__init__(fmt)
        self.use_colors = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message

        level_color = self.COLORS.get(record.levelname)
        if level_color and record.levelname != 'DEBUG':
            return f"{level_color}{formatted_message}{self.RESET}"

        message = record.getMessage().lstrip()
        marker_color = self.MARKER_COLORS.get(message[:1])
        if marker_color:
            bold = self.BOLD if message.startswith('✓') else ''
            return f"{marker_color}{bold}{formatted_message}{self.RESET}"
        if self._is_section_message(message):
            return f"{self.BOLD}{self.MARKER_COLORS['•']}{formatted_message}{self.RESET}"
        if level_color:
            return f"{level_color}{formatted_message}{self.RESET}"
        return formatted_message

    @staticmethod
    def _is_section_message(message: str) -> bool:
        return message.startswith('=' * 20)


def setup_colored_logging(level: int = logging.INFO, use_colors: bool = True) -> None:
    """
    Set up colored console logging on the root logger.

    Args:
        level: Logging level (default: INFO)
        use_colors: Whether to use colors (default: True)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers to avoid duplication
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(use_colors=use_colors))
    console_handler.setLevel(level)

    root_logger.addHandler(console_handler)
    root_logger.setLevel(level)


def attach_progress_log(log_file: str) -> logging.Logger:
    """
    Recreate ``log_file`` and return the logger that appends to it.

    Raises OSError when the file can not be created.
    """
    progress_logger = logging.getLogger(PROGRESS_LOGGER_NAME)
    detach_progress_log(progress_logger)

    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    file_handler.setLevel(logging.INFO)

    progress_logger.addHandler(file_handler)
    progress_logger.setLevel(logging.INFO)
    return progress_logger


def detach_progress_log(progress_logger: logging.Logger) -> None:
    """Close and remove every file handler of the progress logger."""
    for handler in progress_logger.handlers[:]:
        if isinstance(handler, logging.FileHandler):
            progress_logger.removeHandler(handler)
            handler.close()


def get_colored_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# Convenience functions for special message types
def log_success(logger: logging.Logger, message: str) -> None:
    """Log a success message with special formatting."""
    logger.info(f"✓ {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    """Log a progress message with special formatting."""
    logger.info(f"→ {message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    """Log a highlighted message with special formatting."""
    logger.info(f"• {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Log a section header with special formatting."""
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
