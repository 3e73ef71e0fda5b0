"""Logging for build runs: step diagnostics, commands, and their output."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

LOGGER_NAME = "binderbuild.build"


def get_logger() -> logging.Logger:
    """Return the build logger."""
    return logging.getLogger(LOGGER_NAME)


@contextmanager
def build_log_context(
    log_file: Path | None,
    verbose: bool = False,
    echo: bool = False,
) -> Generator[logging.Logger, None, None]:
    """
    Attach handlers to the build logger for the duration of the context.
    Log file is UTF-8; format: timestamp [LEVEL] message.
    With echo=True, messages are also written to stderr (container build output).
    """
    logger = get_logger()
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    handlers: list[logging.Handler] = []
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        handlers.append(handler)
    if echo:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(stream)
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)

    try:
        yield logger
    finally:
        for handler in handlers:
            logger.removeHandler(handler)
            handler.close()
