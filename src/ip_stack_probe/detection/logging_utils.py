"""Logging helpers for the IP-stack probe."""

from __future__ import annotations

import logging

LOG_FILE = "/tmp/ip_stack_probe.log"


class LoggingManager:
    """Manage IP-stack probe logging configuration and messages."""

    def __init__(self, logger_name: str = "ip_stack_probe") -> None:
        self.logger = logging.getLogger(logger_name)
        self.logger.propagate = False

    def setup(self, verbose: bool) -> None:
        """Configure logging to console and /tmp/ip_stack_probe.log."""
        level = logging.DEBUG if verbose else logging.INFO

        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")

        handlers: list[logging.Handler] = []
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        handlers.append(console)

        try:
            file_handler = logging.FileHandler(
                LOG_FILE,
                mode="a",
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError:
            # Console-only logging when the log file is not writable.
            pass

        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()
        for handler in handlers:
            self.logger.addHandler(handler)
        self.logger.setLevel(level)

    def log(self, msg: str, *args: object) -> None:
        """Log an informational message."""
        self.logger.info(msg, *args)

    def debug(self, msg: str, *args: object) -> None:
        """Log a debug message."""
        self.logger.debug(msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self.logger.warning(msg, *args)


DEFAULT_LOGGER = LoggingManager()
