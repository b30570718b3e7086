"""annoselect - text selection to annotation reconciliation.

Turns press/release gestures over an HTML document surface into
markup-independent selection stubs, and re-surfaces existing annotations
when a selection covers exactly the same text.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"

# Handlers installed by _setup_logging(), replaced on each call
_handlers: list[logging.Handler] = []


def _setup_logging(log_dir: Path | None = None) -> None:
    """Configure logging to both console and rotating file."""
    from annoselect.config import get_settings

    log_config = get_settings().log
    log_dir = log_config.log_dir if log_dir is None else log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "annoselect.log"

    # Root logger config
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(log_config.file_level)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_config.console_level)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    for handler in _handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _handlers[:] = [file_handler, console_handler]
    for handler in _handlers:
        root_logger.addHandler(handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
