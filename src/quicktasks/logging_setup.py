"""Logging configuration for quicktasks.

Log records go to stderr through rich so they never interleave with the
screens printed on stdout.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

HANDLER_PREFIX = "quicktasks."


def setup_logging(
    level: str | int = logging.WARNING,
    log_file: str | Path | None = None,
) -> None:
    """Configure root logging.

    Installs a rich console handler on stderr at ``level`` and, when
    ``log_file`` is given, a plain file handler that records everything from
    DEBUG up. Handlers from an earlier call are removed first, so calling this
    again replaces the previous setup instead of duplicating output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file else level)
    remove_handlers(root)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.set_name(HANDLER_PREFIX + "console")
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.set_name(HANDLER_PREFIX + "file")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(file_handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)


def remove_handlers(logger: logging.Logger | None = None) -> None:
    """Detach and close the handlers installed by ``setup_logging``."""
    if logger is None:
        logger = logging.getLogger()

    for handler in list(logger.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            logger.removeHandler(handler)
            handler.close()
