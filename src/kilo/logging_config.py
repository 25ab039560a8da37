"""Logging setup for kilo.

The editor owns the terminal while it runs, so log records go to a rotating
file rather than stderr unless console logging is asked for explicitly.

Two loggers matter:

* ``kilo``: the application logger tree; modules log via
  ``logging.getLogger(__name__)``.
* ``kilo.keyevents``: one record per decoded key. It is disabled unless the
  ``KILO_KEYTRACE`` environment variable is ``1``, ``true`` or ``yes``, in
  which case it writes to ``keytrace.log`` next to the main log file.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any

logger = logging.getLogger("kilo")
KEY_LOGGER = logging.getLogger("kilo.keyevents")

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """Configure the root logger and the key trace logger.

    Only the ``["logging"]`` section of ``config`` is consulted. Recognised
    keys are ``file`` (log path), ``file_level``, ``log_to_console`` and
    ``console_level``. Existing root handlers are replaced, so calling this
    more than once does not duplicate records. Failures to open log files
    are reported on stderr and logging continues without that handler.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = logging_config.get("file") or os.path.join(tempfile.gettempdir(), "kilo.log")
    file_level = getattr(logging, str(logging_config.get("file_level", "INFO")).upper(), logging.INFO)

    log_dir = os.path.dirname(log_filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as exc:
            print(f"Error creating log directory '{log_dir}': {exc}", file=sys.stderr)
            log_filename = os.path.join(tempfile.gettempdir(), "kilo.log")

    file_formatter = logging.Formatter(FILE_FORMAT)
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(file_level)
    except OSError as exc:
        print(f"Error setting up file logger for '{log_filename}': {exc}", file=sys.stderr)

    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level = getattr(
            logging, str(logging_config.get("console_level", "WARNING")).upper(), logging.WARNING
        )
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(console_level)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers = []
    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    root_logger.setLevel(file_level)

    for handler in KEY_LOGGER.handlers:
        handler.close()
    KEY_LOGGER.handlers = []
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)

    if os.environ.get("KILO_KEYTRACE", "").lower() in {"1", "true", "yes"}:
        key_trace_filename = os.path.join(os.path.dirname(log_filename), "keytrace.log")
        try:
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
            )
        except OSError:
            logger.error("Failed to set up key trace logging", exc_info=True)
            KEY_LOGGER.disabled = True
        else:
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logger.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True

    logger.info("Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level))
