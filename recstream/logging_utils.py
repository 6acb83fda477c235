from __future__ import annotations

import logging
import os
from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_logger(
    name: str = "recstream",
    *,
    level: int | str = logging.WARNING,
    log_file: str | os.PathLike[str] | None = None,
    share_with: Iterable[str] = ("chainkit",),
) -> logging.Logger:
    """
    Configure the named logger for command-line runs.
    Console output goes to stderr at `level`; an optional UTF-8 file gets DEBUG.
    Loggers named in `share_with` get the same handlers.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level.upper() if isinstance(level, str) else level)
    stream_handler.setFormatter(formatter)
    handlers.append(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for logger_name in (name, *share_with):
        target = logging.getLogger(logger_name)
        target.setLevel(logging.DEBUG)
        target.handlers.clear()
        for handler in handlers:
            target.addHandler(handler)
        target.propagate = False

    logger = logging.getLogger(name)
    logger.debug("Logging initialized (console=%s, file=%s)", stream_handler.level, log_file)
    return logger
