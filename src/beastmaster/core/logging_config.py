"""Logging configuration for beastmaster."""
from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_MAX_LOG_BYTES = 1_000_000
_BACKUP_COUNT = 3


def parse_level(level: int | str) -> int:
    """Return a numeric logging level, defaulting to INFO for unknown names."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(level: int | str = logging.INFO, log_file: Path | str | None = None) -> logging.Logger:
    """Configure the ``beastmaster`` logger hierarchy.

    Installs a console handler and, when ``log_file`` is given, a rotating file
    handler. Calling it again replaces the handlers installed previously.
    """
    root = logging.getLogger("beastmaster")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(parse_level(level))
    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root
