"""Logging configuration for the dataforge toolkit."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

BASE_LOG_FORMAT = (
    "%(asctime)s %(levelname)8s %(message)s (%(name)s@%(filename)s:%(lineno)d)"
)

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def setup_logging(
    level: int = logging.INFO,
    format_string: str | None = None,
    use_colors: bool = True,
    enable_file_logging: bool = False,
    log_dir: Path | None = None,
    is_test_env: bool = False,
    echo_sql: bool = False,
) -> None:
    """Configure logging for dataforge.

    Args:
        level: Logging level to use
        format_string: Custom format string for console messages
        use_colors: Whether to color console output
        enable_file_logging: Whether to also write to a log file
        log_dir: Directory for log files (defaults to ./logs or ./logs/test)
        is_test_env: Whether this is a test environment
        echo_sql: Whether SQLAlchemy's own engine logger should emit statements
    """
    if log_dir is None:
        log_dir = Path("logs")
        if is_test_env:
            log_dir = log_dir / "test"

    handlers = [
        _create_console_handler(
            format_string or _get_console_format(use_colors), use_colors
        )
    ]

    if enable_file_logging:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_create_file_handler(log_dir, is_test_env))

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # dataforge logs its own statements; keep the engine logger quiet
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if echo_sql else logging.WARNING
    )


def _get_console_format(use_colors: bool) -> str:
    """Get console format string based on color preference."""
    if use_colors:
        return (
            "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s "
            "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
        )
    return BASE_LOG_FORMAT


def _create_console_handler(format_string: str, use_colors: bool) -> logging.Handler:
    """Create console handler with a colored or plain formatter."""
    handler = logging.StreamHandler(sys.stdout)

    formatter: logging.Formatter
    if use_colors:
        formatter = colorlog.ColoredFormatter(
            format_string,
            datefmt="%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            style="%",
        )
    else:
        formatter = logging.Formatter(format_string, datefmt="%m-%d %H:%M:%S")

    handler.setFormatter(formatter)
    return handler


def _create_file_handler(log_dir: Path, is_test_env: bool) -> logging.Handler:
    """Create file handler; tests overwrite, everything else rotates."""
    handler: logging.Handler
    if is_test_env:
        handler = logging.FileHandler(log_dir / "test.log", mode="w")
    else:
        handler = logging.handlers.RotatingFileHandler(
            log_dir / "dataforge.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=4,
            encoding="utf-8",
        )

    handler.setFormatter(logging.Formatter(BASE_LOG_FORMAT, datefmt="%m-%d %H:%M:%S"))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_test_logging(level: int = logging.DEBUG) -> None:
    """Setup logging for the test suite with file overwrite.

    Args:
        level: Logging level to use
    """
    setup_logging(level=level, enable_file_logging=True, is_test_env=True)
