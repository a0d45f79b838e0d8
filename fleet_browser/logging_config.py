from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

ENV_LOG_FORMAT = "FLEET_BROWSER_LOG_FORMAT"
ENV_LOG_LEVEL = "FLEET_BROWSER_LOG_LEVEL"

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Per-request chatter from the HTTP stack drowns out the app's own records.
_QUIET_LOGGERS = ("urllib3", "werkzeug", "google.auth")


def build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter(PLAIN_FORMAT)
    # Hebrew field names and values stay readable in the JSON output.
    return jsonlogger.JsonFormatter(JSON_FIELDS, json_ensure_ascii=False)


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Install a single stream handler on the root logger.

    Output is JSON unless plain text is asked for, either through
    force_format or FLEET_BROWSER_LOG_FORMAT=plain. The level comes from the
    argument, then FLEET_BROWSER_LOG_LEVEL, then INFO.

    Safe to call more than once: earlier handlers are dropped.
    """
    format_mode = (force_format or os.getenv(ENV_LOG_FORMAT, "json")).lower()
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL, "INFO").upper()

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(format_mode))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
