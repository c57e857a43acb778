"""
Minimal logging infrastructure for the descentfit package.

All package loggers hang below the ``descentfit`` root logger, which gets a
single console handler the first time a logger is requested.
"""

import functools
import inspect
import logging
import time
from contextlib import contextmanager
from typing import Optional, Union


class MinimalLogger:
    """Simplified logger manager for the descentfit package."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._configured = False
        self._root_logger_name = "descentfit"
        self._initialized = True

    def configure(self, level: str = "INFO"):
        """Configure basic logging."""
        if self._configured:
            return

        root_logger = logging.getLogger(self._root_logger_name)
        root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if not root_logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
            )
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)

        self._configured = True

    def set_level(self, level: Union[str, int]):
        """Change the level of the package root logger."""
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        logging.getLogger(self._root_logger_name).setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create a logger with hierarchical naming."""
        if not name.startswith(self._root_logger_name):
            if name == "__main__":
                full_name = f"{self._root_logger_name}.main"
            else:
                full_name = f"{self._root_logger_name}.{name}"
        else:
            full_name = name

        if not self._configured:
            self.configure()

        return logging.getLogger(full_name)


_logger_manager = MinimalLogger()


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance with automatic naming.

    Args:
        name: Logger name. If None, uses caller's module name.

    Returns:
        Configured logger instance.
    """
    if name is None:
        frame = inspect.currentframe()
        try:
            caller_frame = frame.f_back
            if caller_frame:
                name = caller_frame.f_globals.get("__name__", "unknown")
        finally:
            del frame

    return _logger_manager.get_logger(name or "unknown")


def set_level(level: Union[str, int]) -> None:
    """Set the level of every ``descentfit`` logger."""
    _logger_manager.set_level(level)


def log_performance(
    logger: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
    threshold: float = 0.1,
):
    """
    Decorator logging the wall time of optimizer entry points.

    Calls faster than ``threshold`` seconds are not logged. A raised exception
    is logged as a warning with its type and re-raised unchanged.

    Args:
        logger: Logger to use. If None, the logger of the function's module.
        level: Logging level of the timing message.
        threshold: Minimum duration (seconds) to log.
    """

    def decorator(func):
        nonlocal logger
        if logger is None:
            logger = get_logger(func.__module__)
        name = func.__qualname__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.warning(
                    f"{name} failed after {time.perf_counter() - start_time:.3f}s: "
                    f"{type(e).__name__}: {e}"
                )
                raise

            duration = time.perf_counter() - start_time
            if duration >= threshold:
                logger.log(level, f"{name} completed in {duration:.3f}s")
            return result

        return wrapper

    return decorator


@contextmanager
def log_operation(
    operation_name: str,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
):
    """
    Context manager timing one fit stage; failures are logged and re-raised.

    Args:
        operation_name: Name of the stage, e.g. ``"bootstrap (16 rounds)"``.
        logger: Logger to use. If None, the ``descentfit`` root logger.
        level: Logging level of the start and completion messages.
    """
    if logger is None:
        logger = get_logger("descentfit")

    logger.log(level, f"Starting operation: {operation_name}")
    start_time = time.perf_counter()

    try:
        yield logger
        duration = time.perf_counter() - start_time
        logger.log(level, f"Completed operation: {operation_name} in {duration:.3f}s")
    except Exception as e:
        duration = time.perf_counter() - start_time
        logger.error(f"Failed operation: {operation_name} after {duration:.3f}s: {e}")
        raise
