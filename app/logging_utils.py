"""
Structured logging helpers for readiness analysis workflows.
"""

from __future__ import annotations

import json
import logging
from typing import Any

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    if not logger.isEnabledFor(level):
        return
    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for a command-line process.
    """

    logging.basicConfig(
        level=getattr(logging, level.strip().upper(), logging.INFO),
        format=LOG_FORMAT,
    )
