# ledger/infrastructure/log.py
#
# Shared logger for the ledger.
#
# Design decisions:
#   - Plain stdlib logging; one stream handler on the "ledger" logger,
#     installed once, so importing modules only ever call get_logger().
#   - Loggers are namespaced ("ledger.ownership", "ledger.verification") so a
#     host application can tune them with its own logging config.
#   - National ID numbers must only reach a log line through
#     NationalIdNumber.masked.
from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "ledger"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stderr handler to the ledger logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
