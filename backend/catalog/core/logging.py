"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

from catalog.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(filename)s:%(lineno)d %(message)s"


def configure_logging(settings: Settings) -> None:
    """Send service logs to stderr and, if configured, append them to a file.

    Safe to call more than once; handlers installed by a previous call are
    replaced rather than duplicated.
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())

    for handler in list(root.handlers):
        if getattr(handler, "_catalog_handler", False):
            root.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, mode="a", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._catalog_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    logging.getLogger(__name__).info(
        f"Logging configured at level {settings.log_level.upper()}"
        + (f" (file: {settings.log_file})" if settings.log_file else "")
    )
