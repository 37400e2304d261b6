"""Logging configuration for the playlistgen package."""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure logging for the package."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        force=True,  # Force reconfiguration to avoid duplicates
    )


def enable_debug() -> None:
    """Enable debug logging for the package loggers."""
    logging.getLogger("playlistgen").setLevel(logging.DEBUG)
    logging.getLogger("src.playlistgen").setLevel(logging.DEBUG)


def disable_debug() -> None:
    """Set the package loggers back to INFO level."""
    logging.getLogger("playlistgen").setLevel(logging.INFO)
    logging.getLogger("src.playlistgen").setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name for the logger, typically __name__

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
