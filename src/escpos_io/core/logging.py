"""
Unified logging setup for escpos-io.

This module provides centralized logging configuration with:
- Custom VERBOSE logging level (level 9, more verbose than DEBUG)
- verbose() method added to the standard Logger class
- A separate traffic logger recording every byte chunk sent to or
  received from a device

Usage:
    from escpos_io.core.logging import setup_logging, get_logger

    setup_logging(verbosity_level=2, quiet=False)  # VERBOSE level

    logger = get_logger()
    logger.verbose("This is a verbose message")
"""

import logging
from pathlib import Path
from typing import Any

# Define custom VERBOSE level (9 is between DEBUG (10) and NOTSET (0))
VERBOSE = 9
logging.addLevelName(VERBOSE, "VERBOSE")

TRAFFIC_LOGGER_ID = "escpos"

DATE_FMT = "%Y-%m-%d %H:%M:%S"
LOG_FMT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TRAFFIC_LOG_FMT = "%(asctime)s - %(source)s: %(message)s"


class VerboseLogger(logging.Logger):
    def verbose(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a message with severity 'VERBOSE'.

        VERBOSE is a custom level that is more verbose than DEBUG. Raw byte
        dumps go here so they don't clutter DEBUG output.

        Args:
            self: The logger instance (injected via method binding).
            message: The log message.
            *args: Arguments for message formatting.
            **kwargs: Additional keyword arguments passed to log().
        """
        if self.isEnabledFor(VERBOSE):
            self._log(VERBOSE, message, args, **kwargs)


def setup_logging(
    verbosity_level: int = 0,
    quiet: bool = False,
    traffic_log_file: str | None = None,
) -> None:
    """
    Configure logging based on verbosity settings.

    Args:
        verbosity_level: Verbosity counter from CLI (Click's count=True).
            - 0: INFO level (default)
            - 1: DEBUG level (-v flag)
            - 2+: VERBOSE level (-vv or more flags)
        quiet: If True, set log level to ERROR (takes precedence over verbosity_level).
        traffic_log_file: Optional path to a file recording all device traffic.
            The 'escpos' logger writes only to this file (propagate=False).
    """
    if quiet:
        level = logging.ERROR
    elif verbosity_level >= 2:
        level = VERBOSE
    elif verbosity_level == 1:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.setLoggerClass(VerboseLogger)

    logging.basicConfig(level=level, format=LOG_FMT, datefmt=DATE_FMT)

    setup_traffic_logger(traffic_log_file)


def setup_traffic_logger(log_file: str | None) -> None:
    traffic_logger = logging.getLogger(TRAFFIC_LOGGER_ID)

    # Already configured
    if traffic_logger.handlers and \
        any(isinstance(h, logging.FileHandler) for h in traffic_logger.handlers):
        return

    try:
        fh: logging.Handler = logging.NullHandler()
        if log_file:
            log_path = Path(log_file)
            if log_path.parent:
                log_path.parent.mkdir(parents=True, exist_ok=True)
            if not log_path.exists():
                log_path.touch()

            fh = logging.FileHandler(str(log_path), encoding="utf-8", mode="a")
            fh.setFormatter(logging.Formatter(TRAFFIC_LOG_FMT, datefmt=DATE_FMT))
            fh.setLevel(logging.INFO)

        traffic_logger.addHandler(fh)
        traffic_logger.setLevel(logging.INFO)

        # Do not propagate to root logger - only write to file
        traffic_logger.propagate = False

    except OSError as e:
        logging.getLogger(__name__).error(
            f"Failed to set up traffic log file '{log_file}': {e}"
        )


def get_logger(name: str | None = None) -> VerboseLogger:
    """
    Get a logger instance, ensuring it is a VerboseLogger.

    Wraps logging.getLogger so the returned logger has verbose() even if it
    was created before setup_logging() was called.

    Args:
        name: The name of the logger to get. Defaults to the calling module.

    Returns:
        An instance of VerboseLogger.
    """
    if name is None:
        import inspect

        frame = inspect.stack()[1]
        module = inspect.getmodule(frame[0])
        name = module.__name__ if module else "__main__"

    logger = logging.getLogger(name)

    if not isinstance(logger, VerboseLogger):
        logger.__class__ = VerboseLogger

    return logger  # type: ignore


def get_traffic_logger() -> logging.Logger:
    return logging.getLogger(TRAFFIC_LOGGER_ID)


def log_traffic(content: bytes, target: str, sent: bool) -> None:
    direction = "Sent" if sent else "Recv"
    get_traffic_logger().info(content.hex(" "), extra={"source": f"{direction} {target}"})


def log_sent(content: bytes, target: str) -> None:
    log_traffic(content, target, sent=True)


def log_recv(content: bytes, target: str) -> None:
    log_traffic(content, target, sent=False)
