"""
Logger Configuration
Unified logging setup
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console


# Shared console instance; stdout is reserved for CLI output
console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

# Default log directory
LOG_DIR = Path(__file__).parent.parent / "logs"

ROOT_LOGGER_NAME = "news_aggregator"

# Top-level packages whose module loggers are routed through the root handlers
PACKAGE_LOGGERS = ("aggregator", "scrapers", "storage", "processing", "config")


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger.

    Args:
        name: logger name
        level: log level
        log_file: optional file name created under LOG_DIR
        use_rich: pretty console output through Rich

    Returns:
        The configured Logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers twice
    if logger.handlers:
        return logger

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger, configuring it with defaults on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


def configure_package_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Install handlers once and attach every package logger to them.
    Modules log through logging.getLogger(__name__), so their names start
    with the package name rather than ROOT_LOGGER_NAME.
    """
    root = setup_logger(ROOT_LOGGER_NAME, level=level, log_file=log_file, use_rich=use_rich)
    for package in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(package)
        package_logger.setLevel(level)
        package_logger.propagate = False
        for handler in root.handlers:
            if handler not in package_logger.handlers:
                package_logger.addHandler(handler)
    return root
