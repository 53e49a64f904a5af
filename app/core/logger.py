"""
Structured logging for the AI Fitness Coach API.
"""
import logging
import sys

from app.core.config import settings


def setup_logger(name: str = "fitcoach", level: str = None) -> logging.Logger:
    """
    Create a configured logger instance.

    Args:
        name: Logger name for identification
        level: Level name such as "DEBUG"; defaults to the LOG_LEVEL setting

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logger()


def log_request(endpoint: str, method: str = "POST") -> None:
    logger.info(f"Request: {method} {endpoint}")


def log_error(context: str, error: Exception) -> None:
    """Log error with context."""
    logger.error(f"Error in {context}: {type(error).__name__}: {error}")


def log_ai_call(operation: str, model: str) -> None:
    logger.info(f"AI Call: {operation} using {model}")


def log_fallback(operation: str, reason: str) -> None:
    """Log that an operation degraded to its static answer."""
    logger.warning(f"Fallback: {operation} ({reason})")


def log_provider_skip(method: str, reason: str) -> None:
    """Log an image provider that was not attempted."""
    logger.debug(f"Image provider skipped: {method} ({reason})")
