"""
Logging Configuration Module

Thread-safe logging for the web app and management scripts: queue-based
handlers so concurrent request threads do not interleave lines, plus
silencing of noisy third-party loggers.
"""

import logging
import logging.handlers
import sys
from queue import Queue
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

NOISY_LOGGERS = [
    "werkzeug",
    "urllib3",
    "requests",
]


class ThreadSafeLoggingConfig:
    """Thread-safe logging configuration with queue-based logging."""

    def __init__(self):
        self._log_listener: Optional[logging.handlers.QueueListener] = None
        self._log_queue: Optional[Queue] = None
        self._queue_handler: Optional[logging.handlers.QueueHandler] = None

    def setup_logging(self, debug: bool = False, stream: Optional[TextIO] = None) -> None:
        """
        Configure thread-safe logging and silence chatty libraries.

        Request threads write to a queue; a single listener thread drains it
        to the console so lines from concurrent requests never mix.

        Args:
            debug: Whether to enable debug logging
            stream: Console stream (defaults to stdout)
        """
        # Calling twice must not leave a stale listener running
        self.stop()

        self._log_queue = Queue()
        self._queue_handler = logging.handlers.QueueHandler(self._log_queue)

        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

        self._log_listener = logging.handlers.QueueListener(
            self._log_queue, console_handler, respect_handler_level=True
        )
        self._log_listener.start()

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.addHandler(self._queue_handler)
        root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

        if not debug:
            self._silence_noisy_libraries()

    def _silence_noisy_libraries(self) -> None:
        """Raise the threshold of noisy third-party loggers."""
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def stop(self) -> None:
        """Stop the logging listener and cleanup."""
        if self._log_listener:
            self._log_listener.stop()
            self._log_listener = None
        if self._queue_handler:
            logging.getLogger().removeHandler(self._queue_handler)
            self._queue_handler = None
        if self._log_queue:
            self._log_queue = None


# Global logging configuration instance
logging_config = ThreadSafeLoggingConfig()


def setup_logging(debug: bool = False, stream: Optional[TextIO] = None) -> None:
    """
    Setup thread-safe logging configuration.

    Args:
        debug: Whether to enable debug logging
        stream: Console stream (defaults to stdout)
    """
    logging_config.setup_logging(debug, stream)


def stop_logging() -> None:
    """Stop the logging listener and cleanup."""
    logging_config.stop()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with the specified name.

    Args:
        name: Logger name

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
