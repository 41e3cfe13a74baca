# pingstorm/logging_config.py
import logging
import sys
from typing import TextIO


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the root logger for a run.

    Log records go to stderr by default so the report on stdout stays clean;
    with log_file they are also written to that file. Per-marker debug
    messages from the stream parser are only visible at DEBUG.
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {log_file}")

    # asyncio reports slow callbacks and child watcher noise at DEBUG
    logging.getLogger("asyncio").setLevel(max(logger.level, logging.INFO))

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception

    return logger
